# Copyright 2026-present Kensho Technologies, LLC.
from .clauses import (  # noqa
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
from .ordering import make_document_comparator, make_query_comparator  # noqa
from .resolver import build_run_query_request, resolve_query  # noqa
from .structured_query import (  # noqa
    CollectionSelector,
    CompositeFilter,
    CompositeOperator,
    CursorBound,
    Direction,
    FieldFilter,
    FieldOperator,
    Order,
    RunQueryRequest,
    StructuredQuery,
    UnaryFilter,
    UnaryOperator,
)
