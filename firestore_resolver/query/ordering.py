# Copyright 2026-present Kensho Technologies, LLC.
"""Order documents the way the server orders the results of a query."""
from typing import Callable, Sequence

import funcy

from ..documents import Document
from ..exceptions import WatchProtocolError
from ..values import compare_resource_paths, compare_values
from .structured_query import Direction, Order, StructuredQuery


DocumentComparator = Callable[[Document, Document], int]


def _apply_direction(result: int, direction: Direction) -> int:
    """Flip the comparison result for descending orderings."""
    return -result if direction == Direction.DESCENDING else result


def _get_ordering_value(document: Document, order: Order) -> object:
    """Return the document's value for the ordering field."""
    try:
        return document.get_field_value(order.field_path)
    except KeyError:
        raise WatchProtocolError(
            f"Document {document.name} was delivered for a query ordered by {order.field_path}, "
            f"but has no value for that field."
        )


def make_document_comparator(orders: Sequence[Order]) -> DocumentComparator:
    """Return a three-way comparator of documents for the given orderings.

    Documents are compared by each ordering field in turn. Ties are broken by document name,
    in the direction of the last ordering (ascending if there are no orderings), unless the
    orderings already include the document name.
    """
    orders = tuple(orders)
    last_order = funcy.last(orders)
    name_direction = last_order.direction if last_order is not None else Direction.ASCENDING
    orders_by_name = any(order.field_path.is_document_id() for order in orders)

    def compare_documents(left: Document, right: Document) -> int:
        """Compare two documents, returning -1, 0 or 1."""
        for order in orders:
            if order.field_path.is_document_id():
                result = compare_resource_paths(left.name, right.name)
            else:
                result = compare_values(
                    _get_ordering_value(left, order), _get_ordering_value(right, order)
                )
            if result != 0:
                return _apply_direction(result, order.direction)

        if orders_by_name:
            return 0
        return _apply_direction(compare_resource_paths(left.name, right.name), name_direction)

    return compare_documents


def make_query_comparator(query: StructuredQuery) -> DocumentComparator:
    """Return a three-way comparator of documents for the orderings of a resolved query."""
    return make_document_comparator(query.order_by)
