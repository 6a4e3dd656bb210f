"""Console entry point for the Lambda Fleet Instrumenter CLI."""

from __future__ import annotations

import argparse
import logging
from typing import List

from config import DEFAULT_BASE_DELAY, MAX_LAMBDA_STATE_CHECKS, InstrumenterConfig
from errors import ConfigurationError
from instrumenter import FleetInstrumenter
from log_utils import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description=(
            "Apply layers, environment variables, tags and log retention "
            "to AWS Lambda functions across regions."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  # Preview attaching a layer to two functions\n"
            "  lambda-fleet-instrument -f arn:aws:lambda:us-east-1:123456789012:function:api \\\n"
            "      -f worker -r eu-west-1 \\\n"
            "      --layer-arn arn:aws:lambda:us-east-1:123456789012:layer:tracer:12 --dry-run\n\n"
            "  # Set an environment variable and a tag\n"
            "  lambda-fleet-instrument -f api -r us-east-1 --env LOG_LEVEL=debug --tag team=core\n"
        ),
    )

    required = parser.add_argument_group("required arguments")
    required.add_argument(
        "-f",
        "--function",
        dest="functions",
        action="append",
        required=True,
        metavar="FUNCTION",
        help="Function ARN, partial ARN or name (repeatable)",
    )

    target = parser.add_argument_group("target")
    target.add_argument(
        "-r",
        "--region",
        help="Default region for functions given without one",
    )
    target.add_argument("--profile", help="AWS named profile to use")

    changes = parser.add_argument_group("changes")
    changes.add_argument(
        "--layer-arn",
        metavar="LAYER_VERSION_ARN",
        help="Layer version to attach; other versions of the same layer are removed",
    )
    changes.add_argument(
        "--env",
        action="append",
        metavar="KEY=VALUE",
        help="Environment variable to set (repeatable)",
    )
    changes.add_argument(
        "--tag",
        action="append",
        metavar="KEY=VALUE",
        help="Tag to set (repeatable)",
    )
    changes.add_argument(
        "--log-retention-days",
        type=int,
        metavar="DAYS",
        help="Create the function log group if needed and set its retention",
    )

    safety = parser.add_argument_group("safety and control")
    safety.add_argument(
        "--dry-run",
        action="store_true",
        help="Fetch and plan only, do not change anything",
    )
    safety.add_argument(
        "--max-state-checks",
        type=int,
        default=MAX_LAMBDA_STATE_CHECKS,
        metavar="N",
        help=f"Re-checks while a function is Pending (default: {MAX_LAMBDA_STATE_CHECKS})",
    )
    safety.add_argument(
        "--base-delay",
        type=float,
        default=DEFAULT_BASE_DELAY,
        metavar="SECONDS",
        help=f"First backoff delay, doubled on every re-check (default: {DEFAULT_BASE_DELAY})",
    )
    safety.add_argument(
        "--readiness-deadline",
        type=float,
        metavar="SECONDS",
        help="Total time a function may stay Pending before failing",
    )
    safety.add_argument(
        "--strict-state",
        action="store_true",
        help="Fail functions whose configuration has no State/LastUpdateStatus",
    )
    safety.add_argument(
        "--chunk-size",
        type=int,
        default=0,
        metavar="N",
        help="Functions per concurrent batch in each region (default: 0 = all)",
    )

    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: List[str] | None = None) -> int:
    """CLI main for console_scripts entry point."""
    parser = build_parser()
    args = parser.parse_args(args=argv)

    setup_logging(verbose=args.verbose)

    try:
        config = InstrumenterConfig.from_args(args)
        stats = FleetInstrumenter(config).run()
    except ConfigurationError as e:
        logger.error(str(e))
        return 2

    return 1 if stats.get("failed", 0) > 0 else 0
