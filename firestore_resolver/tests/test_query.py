# Copyright 2026-present Kensho Technologies, LLC.
import unittest

from ..documents import Document
from ..exceptions import (
    CursorMismatchError,
    InvalidQueryArgumentError,
    MalformedPathError,
    SentinelMisuseError,
    WatchProtocolError,
)
from ..field_path import FieldPath
from ..query import (
    CollectionSelector,
    CursorBound,
    Direction,
    EndAt,
    FieldFilter,
    FieldOperator,
    Limit,
    Offset,
    Order,
    OrderBy,
    Select,
    StartAfter,
    StartAt,
    UnaryFilter,
    UnaryOperator,
    Where,
    build_run_query_request,
    make_document_comparator,
    resolve_query,
)
from ..values import SERVER_TIMESTAMP, Reference


DOCUMENTS_ROOT = "projects/p/databases/(default)/documents"
COLLECTION_PATH = DOCUMENTS_ROOT + "/C"


def _document(document_id: str, **fields: object) -> Document:
    return Document(f"{COLLECTION_PATH}/{document_id}", dict(fields))


class QueryResolutionTests(unittest.TestCase):
    def test_empty_query(self) -> None:
        query = resolve_query(COLLECTION_PATH, [])
        self.assertEqual((CollectionSelector("C"),), query.from_)
        self.assertIsNone(query.select)
        self.assertIsNone(query.where)
        self.assertEqual((), query.order_by)
        self.assertIsNone(query.start_at)
        self.assertIsNone(query.end_at)
        self.assertEqual(0, query.offset)
        self.assertIsNone(query.limit)

    def test_clauses_with_dotted_strings(self) -> None:
        query = resolve_query(
            COLLECTION_PATH,
            [Select(["a.b", FieldPath("c")]), Where("a.b", "==", None), OrderBy("c", "desc")],
        )
        self.assertEqual((FieldPath("a", "b"), FieldPath("c")), query.select)
        self.assertEqual(UnaryFilter(FieldPath("a", "b"), UnaryOperator.IS_NULL), query.where)
        self.assertEqual((Order(FieldPath("c"), Direction.DESCENDING),), query.order_by)

    def test_last_limit_and_offset_win(self) -> None:
        query = resolve_query(COLLECTION_PATH, [Limit(1), Offset(2), Limit(0), Offset(0)])
        self.assertEqual(0, query.limit)
        self.assertEqual(0, query.offset)

    def test_where_clause_order_does_not_change_filters(self) -> None:
        where_clauses = [Where("a", ">", 1), Where("b", "==", "x"), Where("c", "==", None)]
        forward_query = resolve_query(COLLECTION_PATH, where_clauses)
        reversed_query = resolve_query(COLLECTION_PATH, list(reversed(where_clauses)))

        expected_filters = {
            FieldFilter(FieldPath("a"), FieldOperator.GREATER_THAN, 1),
            FieldFilter(FieldPath("b"), FieldOperator.EQUAL, "x"),
            UnaryFilter(FieldPath("c"), UnaryOperator.IS_NULL),
        }
        self.assertEqual(expected_filters, set(forward_query.where.filters))
        self.assertEqual(expected_filters, set(reversed_query.where.filters))
        self.assertEqual(forward_query.where.op, reversed_query.where.op)

    def test_invalid_clauses(self) -> None:
        invalid_clauses = [
            (Where("a", "!=", 1), InvalidQueryArgumentError),
            (Where("a", "<", float("nan")), InvalidQueryArgumentError),
            (Where("a", "==", {"b": SERVER_TIMESTAMP}), SentinelMisuseError),
            (OrderBy("a", "up"), InvalidQueryArgumentError),
            (Limit(-1), InvalidQueryArgumentError),
            (Limit(True), InvalidQueryArgumentError),
            (Offset(1.5), InvalidQueryArgumentError),  # type: ignore
            (StartAt([1]), CursorMismatchError),
        ]
        for clause, expected_error in invalid_clauses:
            with self.subTest(clause=clause):
                with self.assertRaises(expected_error):
                    resolve_query(COLLECTION_PATH, [clause])

        with self.assertRaises(InvalidQueryArgumentError):
            resolve_query(COLLECTION_PATH, ["not a clause"])  # type: ignore

        with self.assertRaises(MalformedPathError):
            Where("a..b", "==", 1)

        with self.assertRaises(MalformedPathError):
            resolve_query(DOCUMENTS_ROOT + "/C/d", [])

    def test_cursor_values_and_snapshot_are_exclusive(self) -> None:
        with self.assertRaises(CursorMismatchError):
            StartAt([1], document_snapshot=_document("d", a=1))

    def test_cursor_uses_orderings_seen_so_far(self) -> None:
        # The cursor is aligned with the single ordering that precedes it.
        query = resolve_query(COLLECTION_PATH, [OrderBy("a"), StartAfter([1]), OrderBy("b")])
        self.assertEqual(CursorBound((1,), before=False), query.start_at)

        with self.assertRaises(CursorMismatchError):
            resolve_query(COLLECTION_PATH, [OrderBy("a"), StartAfter([1, 2]), OrderBy("b")])

    def test_document_id_cursor_values(self) -> None:
        reference = Reference(f"{COLLECTION_PATH}/x")
        for value in ["x", reference]:
            with self.subTest(value=value):
                query = resolve_query(
                    COLLECTION_PATH, [OrderBy(FieldPath.document_id()), EndAt([value])]
                )
                self.assertEqual(CursorBound((reference,), before=False), query.end_at)

        for invalid_value in ["", "x/y", 7]:
            with self.subTest(invalid_value=invalid_value):
                with self.assertRaises(CursorMismatchError):
                    resolve_query(
                        COLLECTION_PATH,
                        [OrderBy(FieldPath.document_id()), EndAt([invalid_value])],
                    )

    def test_snapshot_cursor_is_resolved_after_all_clauses(self) -> None:
        snapshot = _document("d", a=7, b=8)
        query = resolve_query(
            COLLECTION_PATH,
            [StartAt(document_snapshot=snapshot), Where("b", ">", 1), Limit(3)],
        )
        self.assertEqual(
            (
                Order(FieldPath("b"), Direction.ASCENDING),
                Order(FieldPath.document_id(), Direction.ASCENDING),
            ),
            query.order_by,
        )
        self.assertEqual(CursorBound((8, Reference(snapshot.name)), before=True), query.start_at)
        self.assertEqual(FieldFilter(FieldPath("b"), FieldOperator.GREATER_THAN, 1), query.where)

    def test_snapshot_missing_ordering_field(self) -> None:
        with self.assertRaises(CursorMismatchError):
            resolve_query(
                COLLECTION_PATH,
                [OrderBy("z"), StartAt(document_snapshot=_document("d", a=7))],
            )

    def test_run_query_request(self) -> None:
        request = build_run_query_request(DOCUMENTS_ROOT + "/C/d/E", [Limit(1)])
        self.assertEqual(DOCUMENTS_ROOT + "/C/d", request.parent)
        self.assertEqual((CollectionSelector("E"),), request.structured_query.from_)
        self.assertEqual(1, request.structured_query.limit)


class DocumentComparatorTests(unittest.TestCase):
    def test_ordering_with_name_tie_break(self) -> None:
        comparator = make_document_comparator([Order(FieldPath("a"), Direction.ASCENDING)])
        self.assertEqual(-1, comparator(_document("x", a=1), _document("y", a=2)))
        self.assertEqual(-1, comparator(_document("x", a=1), _document("y", a=1)))
        self.assertEqual(0, comparator(_document("x", a=1), _document("x", a=1)))

    def test_name_follows_last_direction(self) -> None:
        comparator = make_document_comparator([Order(FieldPath("a"), Direction.DESCENDING)])
        self.assertEqual(-1, comparator(_document("x", a=2), _document("y", a=1)))
        self.assertEqual(1, comparator(_document("x", a=1), _document("y", a=1)))

    def test_explicit_name_ordering(self) -> None:
        comparator = make_document_comparator(
            [Order(FieldPath.document_id(), Direction.DESCENDING)]
        )
        self.assertEqual(1, comparator(_document("x"), _document("y")))

    def test_no_orderings(self) -> None:
        comparator = make_document_comparator([])
        self.assertEqual(-1, comparator(_document("x"), _document("y")))

    def test_missing_field(self) -> None:
        comparator = make_document_comparator([Order(FieldPath("a"), Direction.ASCENDING)])
        with self.assertRaises(WatchProtocolError):
            comparator(_document("x", a=1), _document("y"))
