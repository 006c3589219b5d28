# Copyright 2026-present Kensho Technologies, LLC.
"""Separate the sentinel values of mutation input data from the values to be stored."""
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..exceptions import MalformedPathError, SentinelMisuseError
from ..field_path import FieldPath
from ..typedefs import FieldMap
from ..values import ArrayTransform, DeleteField, TransformSentinel, contains_sentinel


@dataclass
class ExtractedData:
    """The result of walking a mutation's input data."""

    # The input data without any sentinels. Maps that became empty only because their contents
    # were all sentinels are removed as well; maps that were empty in the input are kept.
    data: FieldMap = field(default_factory=dict)

    # Full field path -> the transform sentinel found at that path.
    transforms: Dict[FieldPath, TransformSentinel] = field(default_factory=dict)

    # The full field paths at which a Delete sentinel was found, in input order.
    deleted_paths: List[FieldPath] = field(default_factory=list)

    # The full field paths of every stored leaf value, in input order.
    # Maps that were empty in the input count as leaves.
    leaf_paths: List[FieldPath] = field(default_factory=list)


def validate_transform_sentinel(field_path: FieldPath, sentinel: TransformSentinel) -> None:
    """Ensure that the elements of an ArrayUnion or ArrayRemove contain no sentinels."""
    if isinstance(sentinel, ArrayTransform):
        for element in sentinel.elements:
            if contains_sentinel(element):
                raise SentinelMisuseError(
                    f"The elements of {type(sentinel).__name__} at {field_path} may not contain "
                    f"sentinel values: {sentinel}"
                )


def validate_stored_value(field_path: FieldPath, value: Any) -> None:
    """Ensure that a non-map value to be stored contains no sentinels.

    Sentinels are never allowed inside arrays, at any depth.
    """
    if contains_sentinel(value):
        raise SentinelMisuseError(
            f"Sentinel values may not appear inside an array, but the value at {field_path} "
            f"contains one: {value}"
        )


def _extract_from_map(
    mapping: FieldMap, parent_path: Optional[FieldPath], result: ExtractedData
) -> FieldMap:
    """Record the sentinels and leaves of the mapping in the result, returning the pruned map."""
    pruned: FieldMap = {}
    for key, value in mapping.items():
        if not isinstance(key, str):
            raise MalformedPathError(
                f"Expected string field names, got {type(key).__name__} {key!r} in {mapping}"
            )
        field_path = parent_path.child(key) if parent_path is not None else FieldPath(key)

        if isinstance(value, DeleteField):
            result.deleted_paths.append(field_path)
        elif isinstance(value, TransformSentinel):
            validate_transform_sentinel(field_path, value)
            result.transforms[field_path] = value
        elif isinstance(value, dict):
            if not value:
                pruned[key] = {}
                result.leaf_paths.append(field_path)
            else:
                pruned_value = _extract_from_map(value, field_path, result)
                if pruned_value:
                    pruned[key] = pruned_value
        else:
            validate_stored_value(field_path, value)
            # Writes never share mutable values with the caller's input.
            pruned[key] = deepcopy(value)
            result.leaf_paths.append(field_path)

    return pruned


def extract_sentinels(data: FieldMap, prefix: Optional[FieldPath] = None) -> ExtractedData:
    """Walk mutation input data, separating sentinels from the values to be stored.

    Map keys are taken literally at every level: a key containing a dot is a single component.

    Args:
        data: the input map of a Create or Set call, or a map value of an Update call
        prefix: the field path at which the data is located, if it is not the document root

    Returns:
        ExtractedData whose paths are all full paths from the document root
    """
    if not isinstance(data, dict):
        raise MalformedPathError(f"Expected a map of field names to values, got {data!r}")

    result = ExtractedData()
    result.data = _extract_from_map(data, prefix, result)
    return result
