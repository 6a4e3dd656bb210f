"""
Exception types raised by the Lambda Fleet Instrumenter.
"""

from typing import List, Optional


class InstrumentationError(RuntimeError):
    """Base class for all instrumentation failures."""


class ConfigurationError(InstrumentationError):
    """Raised when the run is misconfigured before any AWS call is made."""


class GroupingError(ConfigurationError):
    """Raised when one or more functions have no resolvable region."""

    def __init__(self, functions: List[str]):
        self.functions = list(functions)
        super().__init__(
            f"No default region specified for {self.functions}. "
            "Use -r/--region, or use a full function ARN"
        )


class FetchError(InstrumentationError):
    """Raised when the configuration of a function cannot be fetched."""

    def __init__(self, function_arn: str, message: str):
        self.function_arn = function_arn
        super().__init__(f"Could not fetch {function_arn}: {message}")


class FunctionNotReadyError(InstrumentationError):
    """Raised when a function is in a state that cannot be updated."""

    def __init__(
        self,
        function_arn: str,
        state: Optional[str],
        last_update_status: Optional[str],
    ):
        self.function_arn = function_arn
        self.state = state
        self.last_update_status = last_update_status
        super().__init__(self._message())

    def _message(self) -> str:
        return (
            f"Can't instrument {self.function_arn}, as current State is "
            f'{self.state} (must be "Active") and Last Update Status is '
            f'{self.last_update_status} (must be "Successful")'
        )


class ReadinessTimeoutError(FunctionNotReadyError):
    """Raised when a function is still Pending after the polling budget."""

    def __init__(
        self,
        function_arn: str,
        state: Optional[str],
        last_update_status: Optional[str],
        attempts: int,
    ):
        self.attempts = attempts
        super().__init__(function_arn, state, last_update_status)

    def _message(self) -> str:
        return (
            f"Timed out waiting for {self.function_arn} after "
            f"{self.attempts} attempt(s): State is {self.state}, "
            f"Last Update Status is {self.last_update_status}"
        )


class FacetFailure:
    """A single failed facet of an update request."""

    def __init__(self, function_arn: str, facet: str, error: BaseException):
        self.function_arn = function_arn
        self.facet = facet
        self.error = error

    def __repr__(self) -> str:
        return f"FacetFailure({self.function_arn!r}, {self.facet!r}, {self.error!r})"


class UpdateError(InstrumentationError):
    """
    Raised when at least one facet of a batch update failed.

    Facets that succeeded are not rolled back; ``failures`` lists every
    facet that did not apply.
    """

    def __init__(self, failures: List[FacetFailure]):
        self.failures = list(failures)
        details = "; ".join(
            f"{f.function_arn} [{f.facet}]: {f.error}" for f in self.failures
        )
        super().__init__(
            f"{len(self.failures)} update(s) failed, other changes may "
            f"already be applied: {details}"
        )

    @property
    def function_arns(self) -> List[str]:
        """Functions with at least one failed facet, in failure order."""
        seen: List[str] = []
        for failure in self.failures:
            if failure.function_arn not in seen:
                seen.append(failure.function_arn)
        return seen
