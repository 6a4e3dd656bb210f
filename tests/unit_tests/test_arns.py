"""
Unit tests for ARN helpers, region grouping and layer merging.
"""

import unittest

from arns import (
    add_layer_arn,
    collect_functions_by_region,
    get_function_name,
    get_layer_family,
    get_layer_name,
    get_region,
)
from errors import ConfigurationError, GroupingError

FN_A = "arn:aws:lambda:us-east-1:123456789012:function:fnA"
FN_B = "arn:aws:lambda:us-east-1:123456789012:function:fnB"
FN_C = "arn:aws:lambda:eu-west-1:123456789012:function:fnC"

LAYER_FAMILY = "arn:aws:lambda:us-east-1:464622532012:layer:Tracer-Python312:"
LAYER_V10 = LAYER_FAMILY + "10"
LAYER_V11 = LAYER_FAMILY + "11"
OTHER_LAYER = "arn:aws:lambda:us-east-1:123456789012:layer:shared-deps:3"


class TestGetRegion(unittest.TestCase):
    """Test region extraction."""

    def test_full_arn(self):
        """Test region of a full function ARN."""
        self.assertEqual(get_region(FN_A), "us-east-1")
        self.assertEqual(get_region(FN_C), "eu-west-1")

    def test_qualified_arn(self):
        """Test region of an ARN with a version qualifier."""
        self.assertEqual(get_region(FN_A + ":3"), "us-east-1")

    def test_wildcard_region(self):
        """Test wildcard region is treated as missing."""
        self.assertIsNone(get_region("arn:aws:lambda:*:123456789012:function:fnA"))

    def test_empty_region(self):
        """Test empty region segment is treated as missing."""
        self.assertIsNone(get_region("arn:aws:lambda::123456789012:function:fnX"))

    def test_function_name_has_no_region(self):
        """Test bare names and partial ARNs have no region."""
        self.assertIsNone(get_region("my-function"))
        self.assertIsNone(get_region("123456789012:function:my-function"))

    def test_qualified_partial_arn_has_no_region(self):
        """Test a version or alias qualifier is not read as a region."""
        self.assertIsNone(get_region("123456789012:function:fnA:prod"))
        self.assertIsNone(get_region("fnA:3"))


class TestNames(unittest.TestCase):
    """Test function and layer name extraction."""

    def test_function_name_from_full_arn(self):
        self.assertEqual(get_function_name(FN_A), "fnA")
        self.assertEqual(get_function_name(FN_A + ":prod"), "fnA")

    def test_function_name_from_partial_arn(self):
        self.assertEqual(get_function_name("123456789012:function:fnA"), "fnA")

    def test_function_name_from_name(self):
        self.assertEqual(get_function_name("fnA"), "fnA")

    def test_layer_name(self):
        self.assertEqual(get_layer_name(LAYER_V10), "Tracer-Python312")
        self.assertIsNone(get_layer_name("not-a-layer"))

    def test_layer_family(self):
        self.assertEqual(get_layer_family(LAYER_V10), LAYER_FAMILY)
        self.assertEqual(
            get_layer_family("arn:aws:lambda:us-east-1:123:layer:unversioned"),
            "arn:aws:lambda:us-east-1:123:layer:unversioned:",
        )


class TestCollectFunctionsByRegion(unittest.TestCase):
    """Test grouping functions by region."""

    def test_groups_by_region(self):
        """Test functions are grouped by their own region."""
        groups = collect_functions_by_region([FN_A, FN_B, FN_C], None)

        self.assertEqual(groups, {"us-east-1": [FN_A, FN_B], "eu-west-1": [FN_C]})

    def test_default_region_fallback(self):
        """Test functions without a region use the default region."""
        groups = collect_functions_by_region(["fnX", FN_C, "fnY"], "eu-west-1")

        self.assertEqual(groups, {"eu-west-1": ["fnX", FN_C, "fnY"]})

    def test_explicit_region_wins_over_default(self):
        """Test a region in the ARN is kept when a default is given."""
        groups = collect_functions_by_region([FN_A], "eu-west-1")

        self.assertEqual(groups, {"us-east-1": [FN_A]})

    def test_qualified_partial_arns_use_default_region(self):
        """Test qualified partial ARNs fall back to the default region."""
        functions = ["123456789012:function:fnA:prod", "fnB:3"]

        groups = collect_functions_by_region(functions, "us-east-1")

        self.assertEqual(groups, {"us-east-1": functions})

    def test_regionless_without_default_fails(self):
        """Test a function without region and no default raises."""
        fn_x = "arn:aws:lambda::123456789012:function:fnX"

        with self.assertRaises(GroupingError) as ctx:
            collect_functions_by_region([fn_x], None)

        self.assertEqual(ctx.exception.functions, [fn_x])
        self.assertIn("fnX", str(ctx.exception))
        self.assertIsInstance(ctx.exception, ConfigurationError)

    def test_all_regionless_functions_are_reported(self):
        """Test the error lists every offending function at once."""
        wildcard = "arn:aws:lambda:*:123456789012:function:fnW"

        with self.assertRaises(GroupingError) as ctx:
            collect_functions_by_region([FN_A, "fnX", wildcard, FN_C], None)

        self.assertEqual(ctx.exception.functions, ["fnX", wildcard])

    def test_partition_is_total(self):
        """Test every input lands in exactly one group keyed by its region."""
        functions = [FN_A, "fnX", FN_C, FN_B, "fnX"]
        groups = collect_functions_by_region(functions, "ap-south-1")

        flattened = [fn for fns in groups.values() for fn in fns]
        self.assertEqual(sorted(flattened), sorted(functions))
        for region, fns in groups.items():
            for fn in fns:
                self.assertEqual(get_region(fn) or "ap-south-1", region)

    def test_empty_input(self):
        self.assertEqual(collect_functions_by_region([], None), {})


class TestAddLayerArn(unittest.TestCase):
    """Test merging a layer version into a layer list."""

    def test_no_full_arn_returns_input(self):
        layers = [OTHER_LAYER, LAYER_V10]
        self.assertEqual(add_layer_arn(None, LAYER_FAMILY, layers), layers)

    def test_already_present_is_unchanged(self):
        layers = [LAYER_V11, OTHER_LAYER]
        self.assertEqual(add_layer_arn(LAYER_V11, LAYER_FAMILY, layers), layers)

    def test_replaces_other_version(self):
        """Test a stale version is removed and the new one appended."""
        result = add_layer_arn(LAYER_V11, LAYER_FAMILY, [LAYER_V10, OTHER_LAYER])

        self.assertEqual(result, [OTHER_LAYER, LAYER_V11])

    def test_appends_to_empty_list(self):
        self.assertEqual(add_layer_arn(LAYER_V11, LAYER_FAMILY, []), [LAYER_V11])

    def test_idempotent(self):
        """Test merging twice equals merging once."""
        once = add_layer_arn(LAYER_V11, LAYER_FAMILY, [LAYER_V10, OTHER_LAYER])
        twice = add_layer_arn(LAYER_V11, LAYER_FAMILY, once)

        self.assertEqual(once, twice)

    def test_single_entry_per_family(self):
        """Test no two entries of the merged family survive."""
        result = add_layer_arn(
            LAYER_V11, LAYER_FAMILY, [LAYER_V10, OTHER_LAYER, LAYER_FAMILY + "9"]
        )

        family = [arn for arn in result if arn.startswith(LAYER_FAMILY)]
        self.assertEqual(family, [LAYER_V11])

    def test_input_not_mutated(self):
        layers = [LAYER_V10, OTHER_LAYER]
        add_layer_arn(LAYER_V11, LAYER_FAMILY, layers)

        self.assertEqual(layers, [LAYER_V10, OTHER_LAYER])


if __name__ == "__main__":
    unittest.main()
