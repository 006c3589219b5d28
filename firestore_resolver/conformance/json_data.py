# Copyright 2026-present Kensho Technologies, LLC.
"""Decode the JSON documents of conformance vectors into Python values.

JSON has no way to spell sentinels or NaN, so vectors use the following convention:
    - the string "Delete" is the Delete sentinel;
    - the string "ServerTimestamp" is the ServerTimestamp sentinel;
    - the string "NaN" is a floating-point NaN;
    - a list whose first element is "ArrayUnion" or "ArrayRemove" is the corresponding sentinel,
      with the remaining elements of the list as its elements.
"""
import json
from typing import Any, Callable, Dict

from ..exceptions import ConformanceVectorError
from ..values import DELETE_FIELD, SERVER_TIMESTAMP, ArrayRemove, ArrayUnion


_SPECIAL_STRINGS: Dict[str, Any] = {
    "Delete": DELETE_FIELD,
    "ServerTimestamp": SERVER_TIMESTAMP,
}

_ARRAY_SENTINELS: Dict[str, Callable[[Any], Any]] = {
    "ArrayUnion": ArrayUnion,
    "ArrayRemove": ArrayRemove,
}

_NAN_STRING = "NaN"


def convert_json_value(value: Any) -> Any:
    """Replace the special strings and lists of a decoded JSON value with the values they denote."""
    if isinstance(value, str):
        if value == _NAN_STRING:
            return float("nan")
        return _SPECIAL_STRINGS.get(value, value)
    elif isinstance(value, list):
        if value and isinstance(value[0], str) and value[0] in _ARRAY_SENTINELS:
            sentinel_type = _ARRAY_SENTINELS[value[0]]
            return sentinel_type(convert_json_value(element) for element in value[1:])
        return [convert_json_value(element) for element in value]
    elif isinstance(value, dict):
        return {key: convert_json_value(element) for key, element in value.items()}
    else:
        return value


def parse_json_value(json_text: str) -> Any:
    """Parse a JSON string that follows the vector convention."""
    try:
        decoded = json.loads(json_text)
    except ValueError as e:
        raise ConformanceVectorError(f"Invalid JSON in a conformance vector: {json_text!r}") from e
    return convert_json_value(decoded)


def parse_json_data(json_text: str) -> Dict[str, Any]:
    """Parse the JSON object holding a mutation's input data or a document's fields."""
    data = parse_json_value(json_text)
    if not isinstance(data, dict):
        raise ConformanceVectorError(f"Expected a JSON object, got {json_text!r}")
    return data
