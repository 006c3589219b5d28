# Copyright 2026-present Kensho Technologies, LLC.
"""The data model of conformance vectors.

Vector inputs are kept in their raw form (JSON strings and lists of field path components),
since turning them into values and FieldPath objects is part of what each test checks.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Union

from ..documents import Document
from ..field_path import FieldPath
from ..mutation.specs import MergeAll, Precondition
from ..mutation.writes import FieldTransform
from ..query.clauses import (
    EndAt,
    EndBefore,
    Limit,
    Offset,
    OrderBy,
    QueryClause,
    Select,
    StartAfter,
    StartAt,
    Where,
)
from ..query.structured_query import StructuredQuery
from ..typedefs import FieldMap, ResourcePath
from ..watch.events import Snapshot, WatchEvent
from .json_data import parse_json_data, parse_json_value


# The components of a field path, not yet validated.
RawFieldPath = Tuple[str, ...]

# None for a plain Set, MERGE_ALL, or the raw field paths to merge.
RawMergeOption = Union[None, MergeAll, Tuple[RawFieldPath, ...]]


class VectorKind(Enum):
    GET = "get"
    CREATE = "create"
    SET = "set"
    UPDATE = "update"
    UPDATE_PATHS = "updatePaths"
    DELETE = "delete"
    QUERY = "query"
    LISTEN = "listen"


@dataclass(frozen=True)
class WriteVector:
    """A Create, Set, Update or UpdatePaths call, and the writes it should resolve to.

    Vectors are shared between call kinds: Create and Set read the JSON data, Update reads the
    JSON data with dotted keys, and UpdatePaths reads the paths and their JSON values.
    """

    suffix: str
    description: str
    comment: str = ""

    # Appended to the comment for Update and UpdatePaths.
    update_comment: str = ""

    json_data: Optional[str] = None
    paths: Optional[Tuple[RawFieldPath, ...]] = None
    json_values: Optional[Tuple[str, ...]] = None
    merge: RawMergeOption = None
    precondition: Optional[Precondition] = None

    # The expected fields of the update write. None and an empty dict both mean no fields,
    # but an update write is expected if either this or one of the masks is not None.
    out_data: Optional[FieldMap] = None

    # The expected update mask for every call kind, or for Update and UpdatePaths only.
    mask: Optional[Tuple[str, ...]] = None
    update_mask: Optional[Tuple[str, ...]] = None

    transforms: Optional[Tuple[FieldTransform, ...]] = None
    is_error: bool = False


@dataclass(frozen=True)
class DocSnapshotData:
    path: ResourcePath
    json_data: str

    def to_document(self) -> Document:
        """Return the document snapshot, with its fields decoded."""
        return Document(self.path, parse_json_data(self.json_data))


@dataclass(frozen=True)
class SelectData:
    fields: Tuple[RawFieldPath, ...]

    def to_clause(self) -> QueryClause:
        """Return the Select clause."""
        return Select(tuple(FieldPath(*field) for field in self.fields))


@dataclass(frozen=True)
class WhereData:
    path: RawFieldPath
    op: str
    json_value: str

    def to_clause(self) -> QueryClause:
        """Return the Where clause."""
        return Where(FieldPath(*self.path), self.op, parse_json_value(self.json_value))


@dataclass(frozen=True)
class OrderByData:
    path: RawFieldPath
    direction: str

    def to_clause(self) -> QueryClause:
        """Return the OrderBy clause."""
        return OrderBy(FieldPath(*self.path), self.direction)


@dataclass(frozen=True)
class OffsetData:
    count: int

    def to_clause(self) -> QueryClause:
        """Return the Offset clause."""
        return Offset(self.count)


@dataclass(frozen=True)
class LimitData:
    count: int

    def to_clause(self) -> QueryClause:
        """Return the Limit clause."""
        return Limit(self.count)


class CursorKind(Enum):
    START_AT = "startAt"
    START_AFTER = "startAfter"
    END_AT = "endAt"
    END_BEFORE = "endBefore"


_CURSOR_CLAUSES = {
    CursorKind.START_AT: StartAt,
    CursorKind.START_AFTER: StartAfter,
    CursorKind.END_AT: EndAt,
    CursorKind.END_BEFORE: EndBefore,
}


@dataclass(frozen=True)
class CursorData:
    kind: CursorKind
    json_values: Tuple[str, ...] = ()
    doc_snapshot: Optional[DocSnapshotData] = None

    def to_clause(self) -> QueryClause:
        """Return the Start*/End* clause, with its values or document snapshot decoded."""
        clause_type = _CURSOR_CLAUSES[self.kind]
        if self.doc_snapshot is not None:
            return clause_type(document_snapshot=self.doc_snapshot.to_document())
        return clause_type(tuple(parse_json_value(value) for value in self.json_values))


ClauseData = Union[SelectData, WhereData, OrderByData, OffsetData, LimitData, CursorData]


@dataclass(frozen=True)
class QueryVector:
    suffix: str
    description: str
    comment: str
    clauses: Tuple[ClauseData, ...]

    # The expected query, without its collection selector, which every query vector shares.
    query: Optional[StructuredQuery] = None
    is_error: bool = False


@dataclass(frozen=True)
class ListenVector:
    suffix: str
    description: str
    comment: str
    responses: Tuple[WatchEvent, ...]
    snapshots: Tuple[Snapshot, ...] = ()
    is_error: bool = False


@dataclass(frozen=True)
class ConformanceTest:
    """A single test of the suite: one call and the request or error it must produce.

    Only the inputs relevant to the test's kind are set.
    """

    # Unique within the suite; used as the file name of the test.
    name: str
    description: str
    comment: str
    kind: VectorKind

    document_path: Optional[ResourcePath] = None
    collection_path: Optional[ResourcePath] = None
    json_data: Optional[str] = None
    field_paths: Optional[Tuple[RawFieldPath, ...]] = None
    json_values: Optional[Tuple[str, ...]] = None
    merge: RawMergeOption = None
    precondition: Optional[Precondition] = None
    clauses: Tuple[ClauseData, ...] = ()
    responses: Tuple[WatchEvent, ...] = ()

    # The expected request, query or tuple of snapshots. None for error tests.
    expected: Any = None
    is_error: bool = False
