# Copyright 2026-present Kensho Technologies, LLC.
"""The value model shared by the mutation resolver, the query resolver and the watch engine.

Values are plain Python objects: None, bool, int, float, str, bytes, timezone-aware datetime
objects for timestamps, Reference objects for document references, and lists and dicts of values.
Mutation input data may additionally contain the sentinel objects defined here, which are never
valid in stored documents or in query values.
"""
from abc import ABCMeta
from datetime import datetime, timezone
import math
from typing import Any, Iterable, Tuple

from ciso8601 import parse_datetime


class Sentinel(metaclass=ABCMeta):
    """A special value that instructs the server to do something, rather than a value to store."""

    __slots__ = ()

    def __repr__(self) -> str:
        """Return a human-readable representation of the sentinel."""
        return f"{type(self).__name__}()"


class DeleteField(Sentinel):
    """Remove the field at this path. Only valid where the path ends up in an update mask."""

    __slots__ = ()

    def __eq__(self, other: Any) -> bool:
        """Return True if the other object is also the Delete sentinel."""
        return isinstance(other, DeleteField)

    def __hash__(self) -> int:
        """Hash all Delete sentinels alike."""
        return hash(DeleteField)


class TransformSentinel(Sentinel):
    """A sentinel that is applied server-side as a field transform."""

    __slots__ = ()


class ServerTimestamp(TransformSentinel):
    """Set the field to the time at which the server processes the write."""

    __slots__ = ()

    def __eq__(self, other: Any) -> bool:
        """Return True if the other object is also the ServerTimestamp sentinel."""
        return isinstance(other, ServerTimestamp)

    def __hash__(self) -> int:
        """Hash all ServerTimestamp sentinels alike."""
        return hash(ServerTimestamp)


class ArrayTransform(TransformSentinel):
    """Base class for the sentinels that carry a list of array elements."""

    __slots__ = ("elements",)

    def __init__(self, elements: Iterable[Any]) -> None:
        """Construct a new array transform sentinel with the given elements."""
        self.elements: Tuple[Any, ...] = tuple(elements)

    def __eq__(self, other: Any) -> bool:
        """Return True if the other sentinel is of the same kind and has equal elements."""
        return type(self) == type(other) and self.elements == other.elements

    def __hash__(self) -> int:
        """Hash by kind and elements."""
        return hash((type(self), self.elements))

    def __repr__(self) -> str:
        """Return a human-readable representation of the sentinel and its elements."""
        return f"{type(self).__name__}({list(self.elements)!r})"


class ArrayUnion(ArrayTransform):
    """Append each element that is not already present in the stored array."""

    __slots__ = ()


class ArrayRemove(ArrayTransform):
    """Remove every occurrence of each element from the stored array."""

    __slots__ = ()


DELETE_FIELD = DeleteField()
SERVER_TIMESTAMP = ServerTimestamp()


class Reference:
    """A reference to a document, identified by its full resource path."""

    __slots__ = ("path",)

    def __init__(self, path: str) -> None:
        """Construct a new Reference to the document at the given resource path."""
        if not isinstance(path, str) or not path:
            raise ValueError(f"Expected a non-empty document path string, got: {path!r}")
        self.path = path

    def __eq__(self, other: Any) -> bool:
        """Return True if the other object references the same document."""
        return isinstance(other, Reference) and self.path == other.path

    def __hash__(self) -> int:
        """Hash by path."""
        return hash((Reference, self.path))

    def __repr__(self) -> str:
        """Return a human-readable representation of the Reference."""
        return f"Reference({self.path!r})"


def is_sentinel(value: Any) -> bool:
    """Return True if the value is one of the sentinel objects."""
    return isinstance(value, Sentinel)


def contains_sentinel(value: Any) -> bool:
    """Return True if the value is a sentinel, or is a container with a sentinel at any depth."""
    if is_sentinel(value):
        return True
    elif isinstance(value, (list, tuple)):
        return any(contains_sentinel(element) for element in value)
    elif isinstance(value, dict):
        return any(contains_sentinel(element) for element in value.values())
    else:
        return False


def is_nan(value: Any) -> bool:
    """Return True if the value is a floating-point NaN."""
    return isinstance(value, float) and math.isnan(value)


def parse_timestamp(value: Any) -> datetime:
    """Deserialize a timestamp from a timezone-aware datetime or an RFC 3339 string.

    Naive datetimes are rejected: silently assuming a timezone would change the instant
    a precondition or document version refers to.
    """
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str):
        dt = parse_datetime(value)  # This will raise ValueError in case of bad ISO 8601 formatting.
    else:
        raise ValueError(
            f"Expected a timezone-aware datetime or an RFC 3339 string representation parseable "
            f"by the ciso8601 library. Got {value} of type {type(value)} instead."
        )

    if dt.tzinfo is None:
        raise ValueError(f"Expected a timezone-aware timestamp, but got {value!r}.")
    return dt.astimezone(timezone.utc)


_NANOS_PER_SECOND = 1_000_000_000


def timestamp_from_seconds(seconds: int, nanos: int = 0) -> datetime:
    """Return the UTC datetime for a (seconds, nanos) pair, truncated to microseconds."""
    if isinstance(nanos, bool) or not isinstance(nanos, int) or not 0 <= nanos < _NANOS_PER_SECOND:
        raise ValueError(
            f"Expected nanos to be an integer in the range [0, {_NANOS_PER_SECOND}), got {nanos!r}."
        )
    return datetime.fromtimestamp(seconds, tz=timezone.utc).replace(microsecond=nanos // 1000)


def format_timestamp(value: datetime) -> str:
    """Serialize a timestamp as an RFC 3339 string in UTC with a "Z" suffix."""
    dt = parse_timestamp(value)
    # strftime does not zero-pad years before 1000.
    return f"{dt.year:04d}-{dt:%m-%dT%H:%M:%S.%f}Z"


# Firestore orders values of different types by type first, in this order.
_TYPE_ORDER_NULL = 0
_TYPE_ORDER_BOOLEAN = 1
_TYPE_ORDER_NUMBER = 2
_TYPE_ORDER_TIMESTAMP = 3
_TYPE_ORDER_STRING = 4
_TYPE_ORDER_BYTES = 5
_TYPE_ORDER_REFERENCE = 6
_TYPE_ORDER_ARRAY = 7
_TYPE_ORDER_MAP = 8


def _get_type_order(value: Any) -> int:
    """Return the rank of the value's type in the cross-type ordering."""
    if value is None:
        return _TYPE_ORDER_NULL
    elif isinstance(value, bool):
        # bool is a subclass of int, so it must be checked first.
        return _TYPE_ORDER_BOOLEAN
    elif isinstance(value, (int, float)):
        return _TYPE_ORDER_NUMBER
    elif isinstance(value, datetime):
        return _TYPE_ORDER_TIMESTAMP
    elif isinstance(value, str):
        return _TYPE_ORDER_STRING
    elif isinstance(value, bytes):
        return _TYPE_ORDER_BYTES
    elif isinstance(value, Reference):
        return _TYPE_ORDER_REFERENCE
    elif isinstance(value, (list, tuple)):
        return _TYPE_ORDER_ARRAY
    elif isinstance(value, dict):
        return _TYPE_ORDER_MAP
    else:
        raise TypeError(f"Cannot order value of unsupported type {type(value)}: {value!r}")


def _compare_scalars(left: Any, right: Any) -> int:
    """Compare two values with a natural Python ordering, returning -1, 0 or 1."""
    if left < right:
        return -1
    elif left > right:
        return 1
    else:
        return 0


def _compare_numbers(left: Any, right: Any) -> int:
    """Compare two numbers, ordering NaN before every other number and equal to itself."""
    if is_nan(left):
        return 0 if is_nan(right) else -1
    elif is_nan(right):
        return 1
    else:
        return _compare_scalars(left, right)


def compare_resource_paths(left: str, right: str) -> int:
    """Compare two resource paths segment by segment."""
    return _compare_scalars(left.split("/"), right.split("/"))


def compare_values(left: Any, right: Any) -> int:
    """Compare two values using the Firestore value ordering, returning -1, 0 or 1."""
    left_order = _get_type_order(left)
    right_order = _get_type_order(right)
    if left_order != right_order:
        return _compare_scalars(left_order, right_order)

    if left_order == _TYPE_ORDER_NULL:
        return 0
    elif left_order == _TYPE_ORDER_NUMBER:
        return _compare_numbers(left, right)
    elif left_order == _TYPE_ORDER_REFERENCE:
        return compare_resource_paths(left.path, right.path)
    elif left_order == _TYPE_ORDER_ARRAY:
        for left_element, right_element in zip(left, right):
            result = compare_values(left_element, right_element)
            if result != 0:
                return result
        return _compare_scalars(len(left), len(right))
    elif left_order == _TYPE_ORDER_MAP:
        left_items = sorted(left.items())
        right_items = sorted(right.items())
        for (left_key, left_value), (right_key, right_value) in zip(left_items, right_items):
            if left_key != right_key:
                return _compare_scalars(left_key, right_key)
            result = compare_values(left_value, right_value)
            if result != 0:
                return result
        return _compare_scalars(len(left_items), len(right_items))
    else:
        # Booleans, timestamps, strings and bytes all order naturally in Python.
        # Comparing str objects by code point matches comparing their UTF-8 encodings.
        return _compare_scalars(left, right)
