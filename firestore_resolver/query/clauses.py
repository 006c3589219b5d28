# Copyright 2026-present Kensho Technologies, LLC.
"""The clauses a query is built from, in the order in which the caller applied them."""
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from ..documents import Document
from ..exceptions import CursorMismatchError, MalformedPathError
from ..field_path import FieldPath
from ..typedefs import DirectionName, FieldValue, OperatorName


FieldPathLike = Union[FieldPath, str]


def to_field_path(field_path: FieldPathLike) -> FieldPath:
    """Return the FieldPath for a FieldPath object or a dotted field path string."""
    if isinstance(field_path, FieldPath):
        return field_path
    elif isinstance(field_path, str):
        return FieldPath.from_dotted_string(field_path)
    else:
        raise MalformedPathError(
            f"Expected a FieldPath or a dotted field path string, got "
            f"{type(field_path).__name__} {field_path!r}"
        )


@dataclass(frozen=True)
class Select:
    """Project the query results onto the given fields. An empty Select returns only ids."""

    field_paths: Tuple[FieldPath, ...] = ()

    def __post_init__(self) -> None:
        """Normalize the field paths into a tuple of FieldPath objects."""
        object.__setattr__(
            self, "field_paths", tuple(to_field_path(path) for path in self.field_paths)
        )


@dataclass(frozen=True)
class Where:
    """Filter the query results by comparing a field with a value."""

    field_path: FieldPath
    op: OperatorName
    value: FieldValue

    def __post_init__(self) -> None:
        """Normalize the field path into a FieldPath object."""
        object.__setattr__(self, "field_path", to_field_path(self.field_path))


@dataclass(frozen=True)
class OrderBy:
    """Order the query results by a field, in the "asc" or "desc" direction."""

    field_path: FieldPath
    direction: DirectionName = "asc"

    def __post_init__(self) -> None:
        """Normalize the field path into a FieldPath object."""
        object.__setattr__(self, "field_path", to_field_path(self.field_path))


@dataclass(frozen=True)
class Limit:
    """Return at most this many results."""

    count: int


@dataclass(frozen=True)
class Offset:
    """Skip this many results."""

    count: int


@dataclass(frozen=True)
class Cursor:
    """Base class of the Start*/End* clauses.

    A cursor is given either as a list of values aligned with the query's orderings, or as a
    document snapshot that supplies its own values. Exactly one of the two must be set.
    """

    values: Tuple[FieldValue, ...] = ()
    document_snapshot: Optional[Document] = None

    def __post_init__(self) -> None:
        """Normalize the values into a tuple, and ensure that values and snapshot are exclusive."""
        object.__setattr__(self, "values", tuple(self.values))
        if self.values and self.document_snapshot is not None:
            raise CursorMismatchError(
                f"A cursor may have values or a document snapshot, but not both: {self}"
            )


@dataclass(frozen=True)
class StartAt(Cursor):
    """Start the results at the cursor position, inclusive."""


@dataclass(frozen=True)
class StartAfter(Cursor):
    """Start the results right after the cursor position."""


@dataclass(frozen=True)
class EndAt(Cursor):
    """End the results at the cursor position, inclusive."""


@dataclass(frozen=True)
class EndBefore(Cursor):
    """End the results right before the cursor position."""


QueryClause = Union[Select, Where, OrderBy, Limit, Offset, StartAt, StartAfter, EndAt, EndBefore]
