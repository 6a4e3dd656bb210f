"""
Concurrent operations over a batch of Lambda functions in one region.

Every batch call starts all of its work up front, waits for every task to
settle and only then reports, so no task outlives the call that started it.
Results always follow input order.
"""

import asyncio
import logging
import time
from typing import Dict, List, Optional, Sequence

from config import DEFAULT_BASE_DELAY, MAX_LAMBDA_STATE_CHECKS
from errors import (
    FacetFailure,
    FunctionNotReadyError,
    ReadinessTimeoutError,
    UpdateError,
)
from models import ReadinessState, UpdateRequest

logger = logging.getLogger(__name__)

LAMBDA_CONFIG_FACET = "lambda_config"
LOG_GROUP_FACET = "log_group"
TAGS_FACET = "tags"

STATE_ACTIVE = "Active"
STATE_PENDING = "Pending"
UPDATE_SUCCESSFUL = "Successful"


def _raise_first_error(results: Sequence) -> None:
    """Re-raise the first exception (in input order) of a gather result."""
    for result in results:
        if isinstance(result, BaseException):
            raise result


async def get_function_config(client, function_arn: str) -> Dict:
    """Fetch the current configuration of one function."""
    logger.debug(f"Fetching configuration for {function_arn}")
    return await client.get_function_config(function_arn)


async def get_function_configs(client, function_arns: Sequence[str]) -> List[Dict]:
    """
    Fetch the configuration of every function concurrently.

    Args:
        client: Regional client (see clients.LambdaFleetClient)
        function_arns: Functions to fetch

    Returns:
        Configurations in the same order as ``function_arns``

    Raises:
        FetchError: The first failed fetch, in input order
    """
    results = await asyncio.gather(
        *(get_function_config(client, arn) for arn in function_arns),
        return_exceptions=True,
    )
    _raise_first_error(results)
    return list(results)


def backoff_delay(attempt: int, base_delay: float = DEFAULT_BASE_DELAY) -> float:
    """Seconds to wait before re-checking a Pending function."""
    return (2**attempt) * base_delay


def evaluate_state(config: Dict, allow_missing_state: bool = True) -> ReadinessState:
    """
    Classify a function configuration snapshot.

    Older API responses carry neither ``State`` nor ``LastUpdateStatus``;
    those count as ready unless ``allow_missing_state`` is off.
    """
    state = config.get("State")
    last_update_status = config.get("LastUpdateStatus")

    if state is None and last_update_status is None:
        return ReadinessState.READY if allow_missing_state else ReadinessState.FAILED
    if last_update_status == UPDATE_SUCCESSFUL and state == STATE_ACTIVE:
        return ReadinessState.READY
    if state == STATE_PENDING:
        return ReadinessState.PENDING
    return ReadinessState.FAILED


async def wait_until_active(
    client,
    config: Dict,
    function_arn: str,
    max_attempts: int = MAX_LAMBDA_STATE_CHECKS,
    base_delay: float = DEFAULT_BASE_DELAY,
    allow_missing_state: bool = True,
    deadline: Optional[float] = None,
) -> ReadinessState:
    """
    Wait until a function can be updated.

    While the function is Pending, sleep ``2**attempt * base_delay`` seconds
    and fetch its configuration again, for at most ``max_attempts + 1`` waits.

    Args:
        client: Regional client used to re-fetch the configuration
        config: Configuration snapshot already fetched for the function
        function_arn: Function ARN, partial ARN or name
        max_attempts: Highest attempt number that may still wait
        base_delay: Delay of the first wait in seconds
        allow_missing_state: Treat snapshots without state fields as ready
        deadline: Optional total wait budget in seconds

    Returns:
        ReadinessState.READY

    Raises:
        ReadinessTimeoutError: If the function is still Pending when the budget runs out
        FunctionNotReadyError: If the function is in any other non-ready state
        FetchError: If re-fetching the configuration fails
    """
    attempt = 0
    started = time.monotonic()

    while True:
        state = evaluate_state(config, allow_missing_state)

        if state is ReadinessState.READY:
            if attempt:
                logger.info(f"✓ {function_arn} is Active after {attempt} re-check(s)")
            return state

        if state is ReadinessState.FAILED:
            raise FunctionNotReadyError(
                function_arn, config.get("State"), config.get("LastUpdateStatus")
            )

        delay = backoff_delay(attempt, base_delay)
        elapsed = time.monotonic() - started
        if attempt > max_attempts or (
            deadline is not None and elapsed + delay > deadline
        ):
            raise ReadinessTimeoutError(
                function_arn,
                config.get("State"),
                config.get("LastUpdateStatus"),
                attempts=attempt,
            )

        logger.info(
            f"{function_arn} is {config.get('State')}, checking again in "
            f"{delay:.1f}s (attempt {attempt + 1}/{max_attempts + 1})"
        )
        await asyncio.sleep(delay)
        attempt += 1
        config = await client.get_function_config(function_arn)


async def wait_until_all_active(
    client,
    configs: Sequence[Dict],
    function_arns: Sequence[str],
    **kwargs,
) -> List[ReadinessState]:
    """
    Run ``wait_until_active`` for every function concurrently.

    Each poll keeps its own attempt counter. Extra keyword arguments are
    passed through to ``wait_until_active``.

    Raises:
        FunctionNotReadyError: The first failed poll, in input order
    """
    if len(configs) != len(function_arns):
        raise ValueError("configs and function_arns must have the same length")

    results = await asyncio.gather(
        *(
            wait_until_active(client, config, arn, **kwargs)
            for config, arn in zip(configs, function_arns)
        ),
        return_exceptions=True,
    )
    _raise_first_error(results)
    return list(results)


async def apply_update_request(client, request: UpdateRequest) -> List[FacetFailure]:
    """
    Apply the facets of one update request concurrently.

    Absent facets are skipped without any remote call.

    Returns:
        The facets that failed; empty when everything applied
    """
    facets = []
    if request.lambda_config is not None:
        facets.append(
            (LAMBDA_CONFIG_FACET, client.update_function_configuration(request.lambda_config))
        )
    if request.log_group_configuration is not None:
        facets.append(
            (LOG_GROUP_FACET, client.apply_log_group_config(request.log_group_configuration))
        )
    if request.tag_configuration is not None:
        facets.append((TAGS_FACET, client.tag_resource(request.tag_configuration)))

    if not facets:
        logger.debug(f"Nothing to update for {request.function_arn}")
        return []

    results = await asyncio.gather(*(coro for _, coro in facets), return_exceptions=True)

    failures: List[FacetFailure] = []
    for (facet, _), result in zip(facets, results):
        if isinstance(result, Exception):
            failures.append(FacetFailure(request.function_arn, facet, result))
        elif isinstance(result, BaseException):
            raise result
    return failures


async def update_function_configs(client, requests: Sequence[UpdateRequest]) -> None:
    """
    Apply a batch of update requests concurrently.

    Waits for every facet of every request to settle. Facets that succeeded
    stay applied even when others fail.

    Args:
        client: Regional client (see clients.LambdaFleetClient)
        requests: One update request per function

    Raises:
        UpdateError: Listing every failed facet, if any
    """
    results = await asyncio.gather(
        *(apply_update_request(client, request) for request in requests),
        return_exceptions=True,
    )

    failures: List[FacetFailure] = []
    for request, result in zip(requests, results):
        if isinstance(result, Exception):
            failures.append(FacetFailure(request.function_arn, "request", result))
        elif isinstance(result, BaseException):
            raise result
        else:
            failures.extend(result)

    for failure in failures:
        logger.error(
            f"Update FAILED for {failure.function_arn} [{failure.facet}]: {failure.error}"
        )

    if failures:
        raise UpdateError(failures)
