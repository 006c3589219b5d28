# Copyright 2026-present Kensho Technologies, LLC.
"""The normalized structured query produced by the query resolver."""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Union

from ..field_path import FieldPath
from ..typedefs import ResourcePath


class Direction(Enum):
    ASCENDING = "ASCENDING"
    DESCENDING = "DESCENDING"


class FieldOperator(Enum):
    LESS_THAN = "LESS_THAN"
    LESS_THAN_OR_EQUAL = "LESS_THAN_OR_EQUAL"
    EQUAL = "EQUAL"
    GREATER_THAN_OR_EQUAL = "GREATER_THAN_OR_EQUAL"
    GREATER_THAN = "GREATER_THAN"


class UnaryOperator(Enum):
    IS_NAN = "IS_NAN"
    IS_NULL = "IS_NULL"


class CompositeOperator(Enum):
    AND = "AND"


@dataclass(frozen=True)
class FieldFilter:
    """Compare a field with a value."""

    field_path: FieldPath
    op: FieldOperator
    value: Any

    def is_inequality(self) -> bool:
        """Return True if the filter is a range comparison rather than an equality."""
        return self.op != FieldOperator.EQUAL


@dataclass(frozen=True)
class UnaryFilter:
    """Test a field for null or NaN."""

    field_path: FieldPath
    op: UnaryOperator


@dataclass(frozen=True)
class CompositeFilter:
    """Combine several filters. The order of the filters does not affect the query's results."""

    op: CompositeOperator
    filters: Tuple[Union[FieldFilter, UnaryFilter], ...]


Filter = Union[FieldFilter, UnaryFilter, CompositeFilter]


@dataclass(frozen=True)
class Order:
    field_path: FieldPath
    direction: Direction


@dataclass(frozen=True)
class CursorBound:
    """A start or end position of the query, given as values aligned with the orderings."""

    values: Tuple[Any, ...]

    # Whether the position is just before the given values, rather than just after them.
    before: bool


@dataclass(frozen=True)
class CollectionSelector:
    collection_id: str


@dataclass(frozen=True)
class StructuredQuery:
    """A fully resolved query over a single collection."""

    from_: Tuple[CollectionSelector, ...]
    select: Optional[Tuple[FieldPath, ...]] = None
    where: Optional[Filter] = None
    order_by: Tuple[Order, ...] = ()
    start_at: Optional[CursorBound] = None
    end_at: Optional[CursorBound] = None
    offset: int = 0
    limit: Optional[int] = None


@dataclass(frozen=True)
class RunQueryRequest:
    """A structured query together with the resource path of the collection's parent."""

    parent: ResourcePath
    structured_query: StructuredQuery
