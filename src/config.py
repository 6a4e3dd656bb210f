"""
Configuration management for the Lambda Fleet Instrumenter.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from errors import ConfigurationError

# GetFunction re-checks while a function is Pending (waits 1s, 2s, 4s, 8s)
MAX_LAMBDA_STATE_CHECKS = 3
DEFAULT_BASE_DELAY = 1.0


def parse_key_values(pairs: Optional[Iterable[str]], option: str) -> Dict[str, str]:
    """
    Parse ``KEY=VALUE`` strings into a dictionary.

    Args:
        pairs: Strings of the form KEY=VALUE
        option: Flag name, used in error messages

    Returns:
        Dictionary of parsed values

    Raises:
        ConfigurationError: If an entry has no '=' or an empty key
    """
    parsed: Dict[str, str] = {}
    for pair in pairs or []:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ConfigurationError(f"Invalid {option} value '{pair}', expected KEY=VALUE")
        parsed[key] = value
    return parsed


@dataclass
class InstrumenterConfig:
    """Configuration for fleet instrumentation runs."""

    functions: List[str]
    region: Optional[str] = None
    profile: Optional[str] = None
    layer_arn: Optional[str] = None
    environment: Dict[str, str] = field(default_factory=dict)
    tags: Dict[str, str] = field(default_factory=dict)
    log_retention_days: Optional[int] = None
    dry_run: bool = False
    max_state_checks: int = MAX_LAMBDA_STATE_CHECKS
    base_delay: float = DEFAULT_BASE_DELAY
    allow_missing_state: bool = True
    readiness_deadline: Optional[float] = None
    chunk_size: int = 0  # 0 = whole region in one batch
    verbose: bool = False

    def __post_init__(self):
        if self.max_state_checks < 0:
            raise ConfigurationError("max_state_checks must be >= 0")
        if self.base_delay < 0:
            raise ConfigurationError("base_delay must be >= 0")
        if self.chunk_size < 0:
            raise ConfigurationError("chunk_size must be >= 0")

    @classmethod
    def from_args(cls, args) -> "InstrumenterConfig":
        """
        Create configuration from command-line arguments.

        Args:
            args: Parsed argparse arguments

        Returns:
            InstrumenterConfig instance
        """
        return cls(
            functions=args.functions,
            region=args.region,
            profile=args.profile,
            layer_arn=args.layer_arn,
            environment=parse_key_values(args.env, "--env"),
            tags=parse_key_values(args.tag, "--tag"),
            log_retention_days=args.log_retention_days,
            dry_run=args.dry_run,
            max_state_checks=args.max_state_checks,
            base_delay=args.base_delay,
            allow_missing_state=not args.strict_state,
            readiness_deadline=args.readiness_deadline,
            chunk_size=args.chunk_size,
            verbose=args.verbose,
        )
