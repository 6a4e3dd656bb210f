"""
Data models for the Lambda Fleet Instrumenter.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ReadinessState(Enum):
    """Readiness of a function for configuration changes."""

    PENDING = "pending"
    READY = "ready"
    FAILED = "failed"


@dataclass
class TagConfiguration:
    """Tags to set on a function."""

    function_arn: str
    tags: Dict[str, str] = field(default_factory=dict)


@dataclass
class LogGroupConfiguration:
    """Settings for the CloudWatch log group of a function."""

    log_group_name: str  # /aws/lambda/<function name>
    create_log_group: bool = False
    retention_in_days: Optional[int] = None
    delete_subscription_filter: Optional[str] = None  # filter name
    subscription_filter: Optional[Dict[str, Any]] = None  # PutSubscriptionFilter kwargs


@dataclass
class UpdateRequest:
    """Configuration change for one function, split into independent facets."""

    function_arn: str
    lambda_config: Optional[Dict[str, Any]] = None  # UpdateFunctionConfiguration kwargs
    log_group_configuration: Optional[LogGroupConfiguration] = None
    tag_configuration: Optional[TagConfiguration] = None

    def is_empty(self) -> bool:
        """True when no facet has anything to change."""
        return (
            self.lambda_config is None
            and self.log_group_configuration is None
            and self.tag_configuration is None
        )


@dataclass
class InstrumentResult:
    """Result of instrumenting a single function."""

    function_arn: str
    region: str
    status: str  # "updated", "failed", "skipped", "unchanged", "dry_run"
    start_time: Optional[float] = None
    end_time: Optional[float] = None
    duration_seconds: Optional[float] = None
    error_message: Optional[str] = None
