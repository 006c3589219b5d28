# Copyright 2026-present Kensho Technologies, LLC.
import unittest

from ..conformance import encode_conformance_test, generate_conformance_suite
from ..conformance.encoding import (
    encode_document,
    encode_structured_query,
    encode_value,
    encode_watch_event,
    encode_write,
)
from ..documents import Document
from ..field_path import FieldPath
from ..mutation import Precondition
from ..mutation.writes import (
    DeleteWrite,
    FieldTransform,
    TransformKind,
    TransformWrite,
    UpdateWrite,
)
from ..query.structured_query import (
    CollectionSelector,
    CursorBound,
    Direction,
    Order,
    StructuredQuery,
    UnaryFilter,
    UnaryOperator,
)
from ..values import Reference, timestamp_from_seconds
from ..watch.events import DocumentDelete, ExistenceFilter, TargetChange, TargetChangeType


DOCUMENT_PATH = "projects/p/databases/(default)/documents/C/d"


class ValueEncodingTests(unittest.TestCase):
    def test_scalars(self) -> None:
        self.assertEqual({"nullValue": None}, encode_value(None))
        self.assertEqual({"booleanValue": True}, encode_value(True))
        self.assertEqual({"integerValue": "7"}, encode_value(7))
        self.assertEqual({"doubleValue": 2.5}, encode_value(2.5))
        self.assertEqual({"doubleValue": "NaN"}, encode_value(float("nan")))
        self.assertEqual({"doubleValue": "-Infinity"}, encode_value(float("-inf")))
        self.assertEqual({"stringValue": "x"}, encode_value("x"))
        self.assertEqual({"bytesValue": "AQI="}, encode_value(b"\x01\x02"))
        self.assertEqual({"referenceValue": DOCUMENT_PATH}, encode_value(Reference(DOCUMENT_PATH)))
        self.assertEqual(
            {"timestampValue": "1970-01-01T00:00:42.000000Z"},
            encode_value(timestamp_from_seconds(42)),
        )

    def test_nested_values(self) -> None:
        self.assertEqual(
            {
                "mapValue": {
                    "fields": {
                        "a": {"arrayValue": {"values": [{"integerValue": "1"}]}},
                        "b": {"mapValue": {"fields": {}}},
                    }
                }
            },
            encode_value({"a": [1], "b": {}}),
        )

    def test_unsupported_value(self) -> None:
        with self.assertRaises(TypeError):
            encode_value(object())


class WriteEncodingTests(unittest.TestCase):
    def test_update_write(self) -> None:
        write = UpdateWrite(DOCUMENT_PATH, {"a": 1}, ("a",), Precondition(exists=True))
        self.assertEqual(
            {
                "update": {"name": DOCUMENT_PATH, "fields": {"a": {"integerValue": "1"}}},
                "updateMask": {"fieldPaths": ["a"]},
                "currentDocument": {"exists": True},
            },
            encode_write(write),
        )

    def test_full_document_write_has_no_mask(self) -> None:
        self.assertEqual(
            {"update": {"name": DOCUMENT_PATH, "fields": {}}},
            encode_write(UpdateWrite(DOCUMENT_PATH, {})),
        )

    def test_transform_write(self) -> None:
        write = TransformWrite(
            DOCUMENT_PATH,
            (
                FieldTransform("a", TransformKind.REQUEST_TIME),
                FieldTransform("`b.c`", TransformKind.APPEND_MISSING_ELEMENTS, (1,)),
            ),
        )
        self.assertEqual(
            {
                "transform": {
                    "document": DOCUMENT_PATH,
                    "fieldTransforms": [
                        {"fieldPath": "a", "setToServerValue": "REQUEST_TIME"},
                        {
                            "fieldPath": "`b.c`",
                            "appendMissingElements": {"values": [{"integerValue": "1"}]},
                        },
                    ],
                }
            },
            encode_write(write),
        )

    def test_delete_write(self) -> None:
        precondition = Precondition(update_time=timestamp_from_seconds(42))
        self.assertEqual(
            {
                "delete": DOCUMENT_PATH,
                "currentDocument": {"updateTime": "1970-01-01T00:00:42.000000Z"},
            },
            encode_write(DeleteWrite(DOCUMENT_PATH, precondition)),
        )


class QueryEncodingTests(unittest.TestCase):
    def test_defaults_are_omitted(self) -> None:
        query = StructuredQuery(from_=(CollectionSelector("C"),))
        self.assertEqual({"from": [{"collectionId": "C"}]}, encode_structured_query(query))

    def test_full_query(self) -> None:
        query = StructuredQuery(
            from_=(CollectionSelector("C"),),
            select=(FieldPath("a"),),
            where=UnaryFilter(FieldPath("b"), UnaryOperator.IS_NULL),
            order_by=(Order(FieldPath("a"), Direction.DESCENDING),),
            start_at=CursorBound((1,), True),
            offset=2,
            limit=3,
        )
        self.assertEqual(
            {
                "select": {"fields": [{"fieldPath": "a"}]},
                "from": [{"collectionId": "C"}],
                "where": {"unaryFilter": {"op": "IS_NULL", "field": {"fieldPath": "b"}}},
                "orderBy": [{"field": {"fieldPath": "a"}, "direction": "DESCENDING"}],
                "startAt": {"values": [{"integerValue": "1"}], "before": True},
                "offset": 2,
                "limit": 3,
            },
            encode_structured_query(query),
        )


class WatchEncodingTests(unittest.TestCase):
    def test_events(self) -> None:
        read_time = timestamp_from_seconds(1)
        self.assertEqual(
            {
                "targetChange": {
                    "targetChangeType": "NO_CHANGE",
                    "readTime": "1970-01-01T00:00:01.000000Z",
                }
            },
            encode_watch_event(TargetChange(TargetChangeType.NO_CHANGE, read_time=read_time)),
        )
        self.assertEqual(
            {"documentDelete": {"document": DOCUMENT_PATH}},
            encode_watch_event(DocumentDelete(DOCUMENT_PATH)),
        )
        self.assertEqual({"filter": {"count": 2}}, encode_watch_event(ExistenceFilter(2)))

    def test_document(self) -> None:
        document = Document(DOCUMENT_PATH, {"a": 1}, update_time=timestamp_from_seconds(1))
        self.assertEqual(
            {
                "name": DOCUMENT_PATH,
                "fields": {"a": {"integerValue": "1"}},
                "updateTime": "1970-01-01T00:00:01.000000Z",
            },
            encode_document(document),
        )


class ConformanceTestEncodingTests(unittest.TestCase):
    def setUp(self) -> None:
        self.registry = generate_conformance_suite()

    def test_get_test(self) -> None:
        test = self.registry["get-basic"]
        encoded = encode_conformance_test(test)
        self.assertEqual("get: get a document", encoded["description"])
        self.assertEqual(
            {"docRefPath": test.document_path, "request": {"name": test.document_path}},
            encoded["get"],
        )

    def test_error_test(self) -> None:
        encoded = encode_conformance_test(self.registry["create-nodel"])
        body = encoded["create"]
        self.assertTrue(body["isError"])
        self.assertNotIn("request", body)
        self.assertEqual('{"a": 1, "b": "Delete"}', body["jsonData"])

    def test_every_test_is_encodable(self) -> None:
        for test in self.registry.tests:
            with self.subTest(name=test.name):
                encoded = encode_conformance_test(test)
                self.assertEqual({"description", "comment", test.kind.value}, set(encoded))
                self.assertEqual(test.is_error, encoded[test.kind.value].get("isError", False))
