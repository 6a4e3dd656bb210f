"""
Fleet instrumentation logic for AWS Lambda functions.
"""

import asyncio
import json
import logging
import time
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from arns import collect_functions_by_region
from clients import LambdaFleetClient
from config import InstrumenterConfig
from errors import InstrumentationError, UpdateError
from functions import get_function_configs, update_function_configs, wait_until_all_active
from models import InstrumentResult, UpdateRequest
from planner import build_update_request, is_supported_runtime

logger = logging.getLogger(__name__)


def chunked(items: Sequence[str], size: int) -> List[List[str]]:
    """Split items into batches of ``size``; size 0 keeps a single batch."""
    if size <= 0:
        return [list(items)]
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


class FleetInstrumenter:
    """Applies configuration changes to a fleet of Lambda functions."""

    def __init__(
        self,
        config: InstrumenterConfig,
        client_factory: Optional[Callable[[str], LambdaFleetClient]] = None,
    ):
        """
        Initialize the fleet instrumenter.

        Args:
            config: Run configuration
            client_factory: Builds the client for a region (defaults to
                LambdaFleetClient on a boto3 session for ``config.profile``)
        """
        self.config = config

        if client_factory is None:
            session = (
                boto3.Session(profile_name=config.profile)
                if config.profile
                else boto3.Session()
            )

            def client_factory(region: str) -> LambdaFleetClient:
                return LambdaFleetClient(region, session=session)

        self.client_factory = client_factory

        self.stats = {
            "total": 0,
            "regions": 0,
            "updated": 0,
            "unchanged": 0,
            "skipped": 0,
            "dry_run": 0,
            "failed": 0,
        }

        # Timing and results tracking
        self.run_start_time: Optional[float] = None
        self.run_end_time: Optional[float] = None
        self.results: List[InstrumentResult] = []

    def run(self) -> Dict:
        """
        Instrument every configured function.

        Returns:
            Statistics dictionary

        Raises:
            GroupingError: If a function has no resolvable region
        """
        return asyncio.run(self.run_async())

    async def run_async(self) -> Dict:
        """Coroutine behind ``run``."""
        self.run_start_time = time.time()

        logger.info("=" * 70)
        logger.info("AWS Lambda Fleet Instrumentation")
        logger.info("=" * 70)
        logger.info(f"Functions: {len(self.config.functions)}")
        logger.info(f"Default region: {self.config.region or 'N/A'}")
        logger.info(f"Layer: {self.config.layer_arn or 'N/A'}")
        logger.info(f"Environment keys: {', '.join(sorted(self.config.environment)) or 'N/A'}")
        logger.info(f"Tags: {', '.join(sorted(self.config.tags)) or 'N/A'}")
        logger.info(f"Log retention: {self.config.log_retention_days or 'N/A'}")
        logger.info(f"Dry run: {self.config.dry_run}")
        logger.info(f"Max state checks: {self.config.max_state_checks}")
        logger.info(f"Base delay: {self.config.base_delay}s")
        logger.info(f"Start time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
        logger.info("=" * 70)

        groups = collect_functions_by_region(self.config.functions, self.config.region)
        self.stats["total"] = sum(len(fns) for fns in groups.values())
        self.stats["regions"] = len(groups)
        for region, fns in groups.items():
            logger.info(f"Region {region}: {len(fns)} function(s)")

        results = await asyncio.gather(
            *(self._instrument_region(region, fns) for region, fns in groups.items()),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result

        self.run_end_time = time.time()
        self._print_report()

        return self.stats

    async def _instrument_region(self, region: str, function_arns: List[str]) -> None:
        """Instrument the functions of one region, batch by batch."""
        start_time = time.time()
        try:
            client = self.client_factory(region)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Could not create a client for {region}: {e}")
            for arn in function_arns:
                self._record(arn, region, "failed", start_time, error_message=str(e))
            return
        for batch in chunked(function_arns, self.config.chunk_size):
            await self._instrument_batch(client, region, batch)

    async def _instrument_batch(
        self, client: LambdaFleetClient, region: str, function_arns: List[str]
    ) -> None:
        """Fetch, wait for readiness, plan and update one batch."""
        start_time = time.time()

        try:
            configs = await get_function_configs(client, function_arns)
            await wait_until_all_active(
                client,
                configs,
                function_arns,
                max_attempts=self.config.max_state_checks,
                base_delay=self.config.base_delay,
                allow_missing_state=self.config.allow_missing_state,
                deadline=self.config.readiness_deadline,
            )
        except InstrumentationError as e:
            logger.error(f"Batch of {len(function_arns)} function(s) in {region} FAILED: {e}")
            for arn in function_arns:
                self._record(arn, region, "failed", start_time, error_message=str(e))
            return

        # Results are keyed by the identifier the caller passed in
        planned: List[Tuple[str, UpdateRequest]] = []
        for arn, function_config in zip(function_arns, configs):
            runtime = function_config.get("Runtime")
            if self.config.layer_arn and not is_supported_runtime(runtime):
                logger.warning(f"Skipping {arn}: unsupported runtime {runtime}")
                self._record(
                    arn, region, "skipped", start_time,
                    error_message=f"Unsupported runtime: {runtime}",
                )
                continue

            request = build_update_request(function_config, self.config)
            if request.is_empty():
                logger.info(f"[-] {arn} is already up to date")
                self._record(arn, region, "unchanged", start_time)
                continue
            planned.append((arn, request))

        if not planned:
            return

        if self.config.dry_run:
            for arn, _ in planned:
                logger.info(f"DRY RUN: Would update {arn}")
                self._record(arn, region, "dry_run", start_time)
            return

        logger.info(f"Updating {len(planned)} function(s) in {region}")
        failed: Dict[str, str] = {}
        try:
            await update_function_configs(client, [request for _, request in planned])
        except UpdateError as e:
            for failure in e.failures:
                message = f"{failure.facet}: {failure.error}"
                failed[failure.function_arn] = (
                    f"{failed[failure.function_arn]}; {message}"
                    if failure.function_arn in failed
                    else message
                )

        for arn, request in planned:
            if request.function_arn in failed:
                self._record(
                    arn, region, "failed", start_time,
                    error_message=failed[request.function_arn],
                )
            else:
                logger.info(f"✓ Updated {arn}")
                self._record(arn, region, "updated", start_time)

    def _record(
        self,
        function_arn: str,
        region: str,
        status: str,
        start_time: float,
        error_message: Optional[str] = None,
    ) -> None:
        end_time = time.time()
        self.stats[status] += 1
        self.results.append(
            InstrumentResult(
                function_arn=function_arn,
                region=region,
                status=status,
                start_time=start_time,
                end_time=end_time,
                duration_seconds=end_time - start_time,
                error_message=error_message,
            )
        )

    def _format_duration(self, seconds: float) -> str:
        """Format duration in human-readable format."""
        if seconds < 60:
            return f"{seconds:.1f}s"
        elif seconds < 3600:
            mins = int(seconds // 60)
            secs = seconds % 60
            return f"{mins}m {secs:.0f}s"
        else:
            hours = int(seconds // 3600)
            mins = int((seconds % 3600) // 60)
            secs = seconds % 60
            return f"{hours}h {mins}m {secs:.0f}s"

    def _print_report(self):
        """Print timing and status report."""
        total_duration = self.run_end_time - self.run_start_time

        logger.info("")
        logger.info("=" * 70)
        logger.info("INSTRUMENTATION REPORT")
        logger.info("=" * 70)
        logger.info(f"Total duration:  {self._format_duration(total_duration)}")

        logger.info("")
        logger.info("STATISTICS")
        logger.info("-" * 40)
        for k, v in self.stats.items():
            logger.info(f"{k:20s}: {v}")

        failed = [r for r in self.results if r.status == "failed"]
        skipped = [r for r in self.results if r.status == "skipped"]

        if failed:
            logger.info("")
            logger.info("FAILED FUNCTIONS")
            logger.info("-" * 40)
            logger.info(f"{'Function':<45} {'Region':<15} {'Error'}")
            logger.info("-" * 70)
            for r in failed:
                error = (
                    (r.error_message[:60] + "...")
                    if r.error_message and len(r.error_message) > 60
                    else (r.error_message or "Unknown")
                )
                logger.info(f"{r.function_arn:<45} {r.region:<15} {error}")

        if skipped:
            logger.info("")
            logger.info("SKIPPED FUNCTIONS")
            logger.info("-" * 40)
            for r in skipped:
                logger.info(f"  {r.function_arn} ({r.region}): {r.error_message}")

        logger.info("")
        logger.info("=" * 70)

        self._export_results_json()

    def _export_results_json(self):
        """Export results to JSON file for further processing."""
        report = {
            "regions": sorted({r.region for r in self.results}),
            "dry_run": self.config.dry_run,
            "start_time": datetime.fromtimestamp(self.run_start_time).isoformat(),
            "end_time": datetime.fromtimestamp(self.run_end_time).isoformat(),
            "total_duration_seconds": self.run_end_time - self.run_start_time,
            "statistics": self.stats,
            "results": [
                {
                    "function_arn": r.function_arn,
                    "region": r.region,
                    "status": r.status,
                    "duration_seconds": r.duration_seconds,
                    "error_message": r.error_message,
                }
                for r in self.results
            ],
        }

        filename = f"instrument-report-{datetime.now().strftime('%Y%m%d-%H%M%S')}.json"
        with open(filename, "w") as f:
            json.dump(report, f, indent=2)
        logger.info(f"Detailed report exported to: {filename}")
