"""
Helpers for Lambda function and layer ARNs.

Function identifiers may be full ARNs
(``arn:aws:lambda:us-east-1:123456789012:function:my-fn``), partial ARNs
(``123456789012:function:my-fn``) or bare function names.
"""

import logging
from typing import Dict, Iterable, List, Optional

from errors import GroupingError

logger = logging.getLogger(__name__)

REGION_INDEX = 3
RESOURCE_NAME_INDEX = 6
WILDCARD = "*"
ARN_PREFIX = "arn"


def get_region(function_arn: str) -> Optional[str]:
    """
    Return the region segment of a full ARN.

    Partial ARNs and function names carry no region; the fourth segment of
    a qualified partial ARN (``123456789012:function:my-fn:prod``) is the
    qualifier.

    Args:
        function_arn: Function ARN, partial ARN or function name

    Returns:
        The region, or None if the identifier is not a full ARN or the
        segment is empty or a wildcard
    """
    parts = function_arn.split(":")
    if parts[0] != ARN_PREFIX or len(parts) <= REGION_INDEX:
        return None
    region = parts[REGION_INDEX]
    if not region or region == WILDCARD:
        return None
    return region


def get_function_name(function_arn: str) -> str:
    """Return the short function name of a (partial) function ARN."""
    parts = function_arn.split(":")
    if "function" in parts:
        idx = parts.index("function")
        if idx + 1 < len(parts):
            return parts[idx + 1]
    return parts[-1]


def get_layer_name(layer_arn: str) -> Optional[str]:
    """Return the layer name of a layer ARN, or None if it has none."""
    parts = layer_arn.split(":")
    if len(parts) <= RESOURCE_NAME_INDEX:
        return None
    return parts[RESOURCE_NAME_INDEX] or None


def get_layer_family(layer_arn: str) -> str:
    """
    Return the version-less prefix shared by every version of a layer.

    ``arn:aws:lambda:us-east-1:123:layer:my-layer:7`` becomes
    ``arn:aws:lambda:us-east-1:123:layer:my-layer:``.
    """
    head, sep, version = layer_arn.rpartition(":")
    if sep and version.isdigit():
        return f"{head}:"
    return f"{layer_arn}:"


def collect_functions_by_region(
    functions: Iterable[str], default_region: Optional[str]
) -> Dict[str, List[str]]:
    """
    Group functions by region.

    Every function lacking a region is collected first so that a single
    error names all of them.

    Args:
        functions: Function ARNs, partial ARNs or function names
        default_region: Region used for identifiers without one

    Returns:
        Mapping of region to functions, in input order

    Raises:
        GroupingError: If any function has no resolvable region
    """
    groups: Dict[str, List[str]] = {}
    regionless: List[str] = []

    for func in functions:
        region = get_region(func) or default_region
        if not region:
            regionless.append(func)
            continue
        groups.setdefault(region, []).append(func)

    if regionless:
        raise GroupingError(regionless)

    logger.debug(
        "Grouped functions by region: "
        + ", ".join(f"{region}={len(fns)}" for region, fns in groups.items())
    )
    return groups


def add_layer_arn(
    full_layer_arn: Optional[str], partial_layer_arn: str, layer_arns: List[str]
) -> List[str]:
    """
    Merge a layer version into a list of layer ARNs.

    Other versions of the same layer (entries starting with
    ``partial_layer_arn``) are dropped and the new version is appended.

    Args:
        full_layer_arn: Layer version ARN to add, or None
        partial_layer_arn: Prefix shared by all versions of the layer
        layer_arns: Current layer ARNs

    Returns:
        The merged list; ``layer_arns`` itself is never modified
    """
    if not full_layer_arn or full_layer_arn in layer_arns:
        return list(layer_arns)

    merged = [arn for arn in layer_arns if not arn.startswith(partial_layer_arn)]
    merged.append(full_layer_arn)
    return merged
