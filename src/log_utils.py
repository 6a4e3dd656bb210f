"""
Logging utilities for the Lambda Fleet Instrumenter.
"""

import logging
import sys

# Chatty AWS SDK loggers, capped so --verbose stays readable
THIRD_PARTY_LOGGERS = ("boto3", "botocore", "urllib3", "s3transfer")


def setup_logging(
    verbose: bool = False, log_file: str = "lambda-instrument.log"
) -> logging.Logger:
    """
    Set up logging configuration.

    Args:
        verbose: Enable verbose (DEBUG) logging
        log_file: Path to log file

    Returns:
        Logger instance
    """
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file),
        ],
    )

    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logging.getLogger(__name__)
