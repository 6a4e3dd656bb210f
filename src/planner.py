"""
Turns user settings into per-function update requests.
"""

import logging
from typing import Dict, Optional

from arns import add_layer_arn, get_function_name, get_layer_family
from config import InstrumenterConfig
from models import LogGroupConfiguration, TagConfiguration, UpdateRequest

logger = logging.getLogger(__name__)

# Runtimes a layer can be attached to
SUPPORTED_RUNTIMES = frozenset(
    {
        "nodejs16.x",
        "nodejs18.x",
        "nodejs20.x",
        "nodejs22.x",
        "python3.8",
        "python3.9",
        "python3.10",
        "python3.11",
        "python3.12",
        "python3.13",
    }
)

LOG_GROUP_PREFIX = "/aws/lambda/"


def is_supported_runtime(runtime: Optional[str]) -> bool:
    """Return True if layers can be attached to functions on this runtime."""
    return runtime is not None and runtime in SUPPORTED_RUNTIMES


def log_group_name(function_name: str) -> str:
    """Name of the log group Lambda writes to for a function."""
    return f"{LOG_GROUP_PREFIX}{function_name}"


def _merged_layers(function_config: Dict, layer_arn: Optional[str]) -> Optional[list]:
    if not layer_arn:
        return None
    current = [layer["Arn"] for layer in function_config.get("Layers", [])]
    merged = add_layer_arn(layer_arn, get_layer_family(layer_arn), current)
    return merged if merged != current else None


def _merged_environment(function_config: Dict, environment: Dict[str, str]) -> Optional[Dict]:
    current = function_config.get("Environment", {}).get("Variables", {})
    if all(current.get(key) == value for key, value in environment.items()):
        return None
    return {**current, **environment}


def build_update_request(
    function_config: Dict, config: InstrumenterConfig
) -> UpdateRequest:
    """
    Build the update request for one function.

    Only settings that differ from the current configuration end up in the
    request; a function that already matches gets an empty request.

    Args:
        function_config: Current configuration from GetFunction
        config: Run configuration holding the requested settings

    Returns:
        UpdateRequest for the function
    """
    function_arn = function_config["FunctionArn"]
    function_name = function_config.get("FunctionName") or get_function_name(function_arn)
    request = UpdateRequest(function_arn=function_arn)

    lambda_config: Dict = {}
    layers = _merged_layers(function_config, config.layer_arn)
    if layers is not None:
        lambda_config["Layers"] = layers
    variables = _merged_environment(function_config, config.environment)
    if variables is not None:
        lambda_config["Environment"] = {"Variables": variables}
    if lambda_config:
        request.lambda_config = {"FunctionName": function_arn, **lambda_config}

    if config.tags:
        request.tag_configuration = TagConfiguration(
            function_arn=function_arn, tags=dict(config.tags)
        )

    if config.log_retention_days is not None:
        request.log_group_configuration = LogGroupConfiguration(
            log_group_name=log_group_name(function_name),
            create_log_group=True,
            retention_in_days=config.log_retention_days,
        )

    logger.debug(
        f"Planned update for {function_name}: "
        f"config={sorted(lambda_config)}, "
        f"tags={request.tag_configuration is not None}, "
        f"log_group={request.log_group_configuration is not None}"
    )
    return request
