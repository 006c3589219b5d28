# Copyright 2026-present Kensho Technologies, LLC.
"""Resolve an ordered list of query clauses into a normalized structured query."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ..documents import Document
from ..exceptions import (
    CursorMismatchError,
    InvalidQueryArgumentError,
    SentinelMisuseError,
)
from ..field_path import FieldPath
from ..global_utils import get_only_element_from_collection
from ..paths import split_collection_path
from ..typedefs import ResourcePath
from ..values import Reference, contains_sentinel, is_nan
from .clauses import (
    Cursor,
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
from .structured_query import (
    CollectionSelector,
    CompositeFilter,
    CompositeOperator,
    CursorBound,
    Direction,
    FieldFilter,
    FieldOperator,
    Filter,
    Order,
    RunQueryRequest,
    StructuredQuery,
    UnaryFilter,
    UnaryOperator,
)


_FIELD_OPERATORS: Dict[str, FieldOperator] = {
    "<": FieldOperator.LESS_THAN,
    "<=": FieldOperator.LESS_THAN_OR_EQUAL,
    "==": FieldOperator.EQUAL,
    ">=": FieldOperator.GREATER_THAN_OR_EQUAL,
    ">": FieldOperator.GREATER_THAN,
}

_DIRECTIONS: Dict[str, Direction] = {
    "asc": Direction.ASCENDING,
    "desc": Direction.DESCENDING,
}

# Whether each kind of cursor positions the query just before its values.
_CURSOR_BEFORE: Dict[type, bool] = {
    StartAt: True,
    StartAfter: False,
    EndAt: False,
    EndBefore: True,
}


@dataclass
class _QueryState:
    """The query as accumulated from the clauses seen so far."""

    collection_path: ResourcePath
    select: Optional[Tuple[FieldPath, ...]] = None
    filters: List[Union[FieldFilter, UnaryFilter]] = field(default_factory=list)
    orders: List[Order] = field(default_factory=list)
    limit: Optional[int] = None
    offset: int = 0

    # Each edge holds either a resolved bound, or a document snapshot cursor whose values
    # can only be read once all orderings are known.
    start: Optional[Union[CursorBound, Cursor]] = None
    end: Optional[Union[CursorBound, Cursor]] = None


def _resolve_where(where: Where) -> Union[FieldFilter, UnaryFilter]:
    """Resolve a Where clause into a field filter, or a unary filter for null and NaN."""
    operator = _FIELD_OPERATORS.get(where.op)
    if operator is None:
        raise InvalidQueryArgumentError(
            f"Unsupported operator {where.op!r} in a Where clause on {where.field_path}. "
            f"Supported operators: {sorted(_FIELD_OPERATORS)}"
        )
    if contains_sentinel(where.value):
        raise SentinelMisuseError(
            f"Sentinel values may not be used in a Where clause, got {where.value!r} for "
            f"{where.field_path}."
        )

    if where.value is None or is_nan(where.value):
        if operator != FieldOperator.EQUAL:
            raise InvalidQueryArgumentError(
                f"Null and NaN may only be compared for equality, but the Where clause on "
                f"{where.field_path} uses {where.op!r}."
            )
        unary_operator = UnaryOperator.IS_NULL if where.value is None else UnaryOperator.IS_NAN
        return UnaryFilter(where.field_path, unary_operator)

    return FieldFilter(where.field_path, operator, where.value)


def _resolve_order_by(order_by: OrderBy) -> Order:
    """Resolve an OrderBy clause, validating its direction."""
    direction = _DIRECTIONS.get(order_by.direction)
    if direction is None:
        raise InvalidQueryArgumentError(
            f"Unsupported direction {order_by.direction!r} in an OrderBy clause on "
            f"{order_by.field_path}. Supported directions: {sorted(_DIRECTIONS)}"
        )
    return Order(order_by.field_path, direction)


def _validate_count(clause: Union[Limit, Offset]) -> int:
    """Return the count of a Limit or Offset clause, ensuring it is a non-negative integer."""
    if isinstance(clause.count, bool) or not isinstance(clause.count, int) or clause.count < 0:
        raise InvalidQueryArgumentError(
            f"Expected a non-negative integer in the {type(clause).__name__} clause, got "
            f"{clause.count!r}."
        )
    return clause.count


def _document_reference(collection_path: ResourcePath, document_id: Any) -> Reference:
    """Return the reference for a cursor value aligned with the document name ordering."""
    if isinstance(document_id, Reference):
        return document_id
    if not isinstance(document_id, str) or not document_id or "/" in document_id:
        raise CursorMismatchError(
            f"A cursor value aligned with the document name ordering must be a document id in "
            f"the query's collection, got {document_id!r}."
        )
    return Reference(f"{collection_path}/{document_id}")


def _resolve_value_cursor(state: _QueryState, cursor: Cursor) -> CursorBound:
    """Resolve a cursor given as values, aligning them with the orderings seen so far."""
    if not cursor.values:
        raise CursorMismatchError(
            f"A {type(cursor).__name__} clause must have at least one value or a document "
            f"snapshot."
        )
    if len(cursor.values) != len(state.orders):
        raise CursorMismatchError(
            f"The {type(cursor).__name__} clause has {len(cursor.values)} values, but the query "
            f"has {len(state.orders)} OrderBy clauses at that point: {cursor.values}"
        )

    values: List[Any] = []
    for order, value in zip(state.orders, cursor.values):
        if contains_sentinel(value):
            raise SentinelMisuseError(
                f"Sentinel values may not be used in a cursor, got {value!r} for "
                f"{order.field_path}."
            )
        if order.field_path.is_document_id():
            value = _document_reference(state.collection_path, value)
        values.append(value)

    return CursorBound(tuple(values), _CURSOR_BEFORE[type(cursor)])


def _normalize_orders_for_snapshot(state: _QueryState) -> None:
    """Add the orderings that a document snapshot cursor implies.

    Without explicit orderings, the first inequality filter's field is ordered ascending.
    The document name is then ordered in the direction of the last ordering, unless it already is.
    """
    if not state.orders:
        for query_filter in state.filters:
            if isinstance(query_filter, FieldFilter) and query_filter.is_inequality():
                state.orders.append(Order(query_filter.field_path, Direction.ASCENDING))
                break

    if not any(order.field_path.is_document_id() for order in state.orders):
        direction = state.orders[-1].direction if state.orders else Direction.ASCENDING
        state.orders.append(Order(FieldPath.document_id(), direction))


def _resolve_snapshot_cursor(state: _QueryState, cursor: Cursor) -> CursorBound:
    """Resolve a document snapshot cursor by reading its values in ordering order."""
    document: Document = cursor.document_snapshot
    values: List[Any] = []
    for order in state.orders:
        if order.field_path.is_document_id():
            values.append(Reference(document.name))
        else:
            try:
                values.append(document.get_field_value(order.field_path))
            except KeyError:
                raise CursorMismatchError(
                    f"The document snapshot {document.name} has no value for the ordering "
                    f"field {order.field_path}."
                )

    return CursorBound(tuple(values), _CURSOR_BEFORE[type(cursor)])


def _resolve_cursor(state: _QueryState, cursor: Cursor) -> Union[CursorBound, Cursor]:
    """Resolve a value cursor right away; defer a snapshot cursor until all clauses are seen."""
    if cursor.document_snapshot is not None:
        if cursor.document_snapshot.parent_path != state.collection_path:
            raise CursorMismatchError(
                f"The document snapshot {cursor.document_snapshot.name} used in a "
                f"{type(cursor).__name__} clause is not in the query's collection "
                f"{state.collection_path}."
            )
        return cursor
    return _resolve_value_cursor(state, cursor)


def _apply_clause(state: _QueryState, clause: QueryClause) -> None:
    """Apply a single clause to the accumulated query state."""
    if isinstance(clause, Select):
        state.select = clause.field_paths or (FieldPath.document_id(),)
    elif isinstance(clause, Where):
        state.filters.append(_resolve_where(clause))
    elif isinstance(clause, OrderBy):
        state.orders.append(_resolve_order_by(clause))
    elif isinstance(clause, Limit):
        state.limit = _validate_count(clause)
    elif isinstance(clause, Offset):
        state.offset = _validate_count(clause)
    elif isinstance(clause, (StartAt, StartAfter)):
        state.start = _resolve_cursor(state, clause)
    elif isinstance(clause, (EndAt, EndBefore)):
        state.end = _resolve_cursor(state, clause)
    else:
        raise InvalidQueryArgumentError(f"Unsupported query clause: {clause!r}")


def _build_filter(filters: Sequence[Union[FieldFilter, UnaryFilter]]) -> Optional[Filter]:
    """Return None, the only filter, or an AND of all filters."""
    if not filters:
        return None
    elif len(filters) == 1:
        return get_only_element_from_collection(filters)
    else:
        return CompositeFilter(CompositeOperator.AND, tuple(filters))


def resolve_query(
    collection_path: ResourcePath, clauses: Sequence[QueryClause]
) -> StructuredQuery:
    """Resolve query clauses, applied in order, into a structured query.

    Args:
        collection_path: full resource path of the collection being queried
        clauses: the query clauses, in the order in which they were applied

    Returns:
        StructuredQuery with implicit orderings added and cursor values aligned to the orderings

    Raises:
        FirestoreValidationError subclass if any clause is invalid
    """
    _, collection_id = split_collection_path(collection_path)
    state = _QueryState(collection_path)
    for clause in clauses:
        _apply_clause(state, clause)

    snapshot_cursors = [
        cursor for cursor in (state.start, state.end) if isinstance(cursor, Cursor)
    ]
    if snapshot_cursors:
        _normalize_orders_for_snapshot(state)
    if isinstance(state.start, Cursor):
        state.start = _resolve_snapshot_cursor(state, state.start)
    if isinstance(state.end, Cursor):
        state.end = _resolve_snapshot_cursor(state, state.end)

    return StructuredQuery(
        from_=(CollectionSelector(collection_id),),
        select=state.select,
        where=_build_filter(state.filters),
        order_by=tuple(state.orders),
        start_at=state.start,
        end_at=state.end,
        offset=state.offset,
        limit=state.limit,
    )


def build_run_query_request(
    collection_path: ResourcePath, clauses: Sequence[QueryClause]
) -> RunQueryRequest:
    """Resolve the query clauses and pair the result with the parent of the collection."""
    parent_path, _ = split_collection_path(collection_path)
    return RunQueryRequest(parent_path, resolve_query(collection_path, clauses))
