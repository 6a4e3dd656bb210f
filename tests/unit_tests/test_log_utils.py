"""
Unit tests for logging utilities.
"""

import logging
import unittest

from log_utils import THIRD_PARTY_LOGGERS, setup_logging


class TestLogUtils(unittest.TestCase):
    """Test logging utilities."""

    def test_setup_logging_default(self):
        """Test default logging setup."""
        logger = setup_logging()
        self.assertIsInstance(logger, logging.Logger)

    def test_setup_logging_verbose(self):
        """Test verbose logging setup."""
        logger = setup_logging(verbose=True)
        self.assertIsInstance(logger, logging.Logger)

    def test_third_party_loggers_are_quiet(self):
        setup_logging(verbose=True)
        for name in THIRD_PARTY_LOGGERS:
            self.assertEqual(logging.getLogger(name).level, logging.WARNING)


if __name__ == "__main__":
    unittest.main()
