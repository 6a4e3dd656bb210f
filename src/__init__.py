"""
AWS Lambda Fleet Instrumenter.
"""

from arns import add_layer_arn, collect_functions_by_region, get_region
from clients import LambdaFleetClient
from config import InstrumenterConfig
from functions import get_function_configs, update_function_configs, wait_until_active
from instrumenter import FleetInstrumenter
from log_utils import setup_logging
from models import UpdateRequest

__all__ = [
    "add_layer_arn",
    "collect_functions_by_region",
    "get_region",
    "LambdaFleetClient",
    "InstrumenterConfig",
    "get_function_configs",
    "update_function_configs",
    "wait_until_active",
    "FleetInstrumenter",
    "setup_logging",
    "UpdateRequest",
]
