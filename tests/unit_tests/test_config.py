"""
Unit tests for configuration.
"""

import unittest
from argparse import Namespace

from config import InstrumenterConfig, parse_key_values
from errors import ConfigurationError


class TestParseKeyValues(unittest.TestCase):
    """Test KEY=VALUE parsing."""

    def test_parses_pairs(self):
        parsed = parse_key_values(["A=1", "B=x=y", "EMPTY="], "--env")
        self.assertEqual(parsed, {"A": "1", "B": "x=y", "EMPTY": ""})

    def test_none_is_empty(self):
        self.assertEqual(parse_key_values(None, "--tag"), {})

    def test_missing_separator_raises(self):
        with self.assertRaises(ConfigurationError) as ctx:
            parse_key_values(["NOVALUE"], "--tag")
        self.assertIn("--tag", str(ctx.exception))

    def test_empty_key_raises(self):
        with self.assertRaises(ConfigurationError):
            parse_key_values(["=value"], "--env")


class TestInstrumenterConfig(unittest.TestCase):
    """Test InstrumenterConfig data model."""

    def test_config_defaults(self):
        """Test default configuration values."""
        config = InstrumenterConfig(functions=["fnA"])
        self.assertEqual(config.functions, ["fnA"])
        self.assertIsNone(config.region)
        self.assertIsNone(config.layer_arn)
        self.assertEqual(config.environment, {})
        self.assertEqual(config.tags, {})
        self.assertFalse(config.dry_run)
        self.assertEqual(config.max_state_checks, 3)
        self.assertEqual(config.base_delay, 1.0)
        self.assertTrue(config.allow_missing_state)
        self.assertIsNone(config.readiness_deadline)
        self.assertEqual(config.chunk_size, 0)
        self.assertFalse(config.verbose)

    def test_invalid_values_raise(self):
        with self.assertRaises(ConfigurationError):
            InstrumenterConfig(functions=["fnA"], max_state_checks=-1)
        with self.assertRaises(ConfigurationError):
            InstrumenterConfig(functions=["fnA"], base_delay=-0.5)
        with self.assertRaises(ConfigurationError):
            InstrumenterConfig(functions=["fnA"], chunk_size=-2)

    def test_config_from_args(self):
        """Test creating config from command-line arguments."""
        args = Namespace(
            functions=["fnA", "fnB"],
            region="eu-west-1",
            profile="ops",
            layer_arn="arn:aws:lambda:eu-west-1:123:layer:tracer:4",
            env=["LOG_LEVEL=debug"],
            tag=["team=core"],
            log_retention_days=30,
            dry_run=True,
            max_state_checks=5,
            base_delay=0.5,
            strict_state=True,
            readiness_deadline=60.0,
            chunk_size=10,
            verbose=True,
        )
        config = InstrumenterConfig.from_args(args)

        self.assertEqual(config.functions, ["fnA", "fnB"])
        self.assertEqual(config.region, "eu-west-1")
        self.assertEqual(config.profile, "ops")
        self.assertEqual(config.layer_arn, "arn:aws:lambda:eu-west-1:123:layer:tracer:4")
        self.assertEqual(config.environment, {"LOG_LEVEL": "debug"})
        self.assertEqual(config.tags, {"team": "core"})
        self.assertEqual(config.log_retention_days, 30)
        self.assertTrue(config.dry_run)
        self.assertEqual(config.max_state_checks, 5)
        self.assertEqual(config.base_delay, 0.5)
        self.assertFalse(config.allow_missing_state)
        self.assertEqual(config.readiness_deadline, 60.0)
        self.assertEqual(config.chunk_size, 10)
        self.assertTrue(config.verbose)


if __name__ == "__main__":
    unittest.main()
