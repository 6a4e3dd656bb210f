"""
AWS client for Lambda and CloudWatch Logs, exposed as coroutines.

boto3 is synchronous, so every call runs in a worker thread via
``asyncio.to_thread``; the event loop stays free while a request is in
flight.
"""

import asyncio
import logging
from typing import Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from errors import FetchError
from models import LogGroupConfiguration, TagConfiguration

logger = logging.getLogger(__name__)


def error_message(exc: Exception) -> str:
    """Extract a readable message from a botocore exception."""
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {})
        code = error.get("Code", "")
        message = error.get("Message", str(exc))
        return f"{code}: {message}" if code else message
    return str(exc)


def error_code(exc: Exception) -> str:
    """Return the AWS error code of a ClientError, or an empty string."""
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code", "")
    return ""


class LambdaFleetClient:
    """Lambda and CloudWatch Logs client bound to a single region."""

    def __init__(
        self,
        region: str,
        session: Optional[boto3.Session] = None,
        timeout_s: int = 60,
        max_retries: int = 5,
    ):
        """
        Initialize the regional client.

        Args:
            region: AWS region name
            session: boto3 session to create clients from (default session if None)
            timeout_s: Connect/read timeout in seconds
            max_retries: Attempts for throttled or transient SDK errors
        """
        self.region = region
        self.timeout_s = timeout_s
        self.max_retries = max_retries

        self.session = session or boto3.Session()
        client_config = Config(
            connect_timeout=timeout_s,
            read_timeout=timeout_s,
            retries={"max_attempts": max_retries, "mode": "standard"},
        )
        self.lambda_client = self.session.client(
            "lambda", region_name=region, config=client_config
        )
        self.logs_client = self.session.client(
            "logs", region_name=region, config=client_config
        )

    async def get_function_config(self, function_arn: str) -> Dict:
        """
        Get the current configuration of a function.

        Args:
            function_arn: Function ARN, partial ARN or name

        Returns:
            The ``Configuration`` block of GetFunction

        Raises:
            FetchError: If the API call fails or returns no configuration
        """
        try:
            result = await asyncio.to_thread(
                self.lambda_client.get_function, FunctionName=function_arn
            )
        except (ClientError, BotoCoreError) as e:
            raise FetchError(function_arn, error_message(e)) from e

        config = result.get("Configuration")
        if not config:
            raise FetchError(function_arn, "GetFunction returned no Configuration")
        return config

    async def update_function_configuration(self, request: Dict) -> Dict:
        """
        Apply an UpdateFunctionConfiguration request.

        Args:
            request: UpdateFunctionConfiguration keyword arguments, including FunctionName

        Returns:
            The updated function configuration
        """
        logger.debug(f"Updating configuration of {request.get('FunctionName')}")
        return await asyncio.to_thread(
            self.lambda_client.update_function_configuration, **request
        )

    async def tag_resource(self, tag_configuration: TagConfiguration) -> None:
        """Set tags on a function."""
        if not tag_configuration.tags:
            return
        logger.debug(
            f"Tagging {tag_configuration.function_arn} with "
            f"{sorted(tag_configuration.tags)}"
        )
        await asyncio.to_thread(
            self.lambda_client.tag_resource,
            Resource=tag_configuration.function_arn,
            Tags=tag_configuration.tags,
        )

    async def apply_log_group_config(self, config: LogGroupConfiguration) -> None:
        """
        Apply log group settings in order: create, retention, filters.

        An already existing log group and an already deleted subscription
        filter are not errors.
        """
        name = config.log_group_name

        if config.create_log_group:
            try:
                await asyncio.to_thread(
                    self.logs_client.create_log_group, logGroupName=name
                )
                logger.info(f"Created log group {name}")
            except ClientError as e:
                if error_code(e) != "ResourceAlreadyExistsException":
                    raise
                logger.debug(f"Log group {name} already exists")

        if config.retention_in_days is not None:
            await asyncio.to_thread(
                self.logs_client.put_retention_policy,
                logGroupName=name,
                retentionInDays=config.retention_in_days,
            )

        if config.delete_subscription_filter:
            try:
                await asyncio.to_thread(
                    self.logs_client.delete_subscription_filter,
                    logGroupName=name,
                    filterName=config.delete_subscription_filter,
                )
            except ClientError as e:
                if error_code(e) != "ResourceNotFoundException":
                    raise

        if config.subscription_filter:
            await asyncio.to_thread(
                self.logs_client.put_subscription_filter,
                logGroupName=name,
                **config.subscription_filter,
            )
