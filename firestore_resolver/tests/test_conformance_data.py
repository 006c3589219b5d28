# Copyright 2026-present Kensho Technologies, LLC.
import math
import unittest

from ..conformance.json_data import convert_json_value, parse_json_data, parse_json_value
from ..conformance.model import ConformanceTest, VectorKind
from ..conformance.registry import VectorRegistry
from ..exceptions import ConformanceVectorError
from ..global_utils import assert_set_equality
from ..values import DELETE_FIELD, SERVER_TIMESTAMP, ArrayRemove, ArrayUnion


def _make_test(name: str) -> ConformanceTest:
    return ConformanceTest(name=name, description="d", comment="", kind=VectorKind.GET)


class JsonDataTests(unittest.TestCase):
    def test_special_values(self) -> None:
        self.assertEqual(DELETE_FIELD, parse_json_value('"Delete"'))
        self.assertEqual(SERVER_TIMESTAMP, parse_json_value('"ServerTimestamp"'))
        self.assertTrue(math.isnan(parse_json_value('"NaN"')))
        self.assertEqual(ArrayUnion([1, 2]), parse_json_value('["ArrayUnion", 1, 2]'))
        self.assertEqual(
            ArrayRemove([1, SERVER_TIMESTAMP]),
            parse_json_value('["ArrayRemove", 1, "ServerTimestamp"]'),
        )
        self.assertEqual(
            {"a": [1, {"b": DELETE_FIELD}], "c": "plain"},
            parse_json_data('{"a": [1, {"b": "Delete"}], "c": "plain"}'),
        )

    def test_ordinary_values_are_unchanged(self) -> None:
        for value in [None, True, 3, 2.5, "text", [], {}, [["a"]], {"Delete": 1}]:
            with self.subTest(value=value):
                self.assertEqual(value, convert_json_value(value))

    def test_invalid_json(self) -> None:
        with self.assertRaises(ConformanceVectorError):
            parse_json_value("{not json")

        with self.assertRaises(ConformanceVectorError):
            parse_json_data("[1, 2]")


class VectorRegistryTests(unittest.TestCase):
    def test_register(self) -> None:
        registry = VectorRegistry()
        registry.register(_make_test("get-basic"))
        registry.register(_make_test("create-basic"))

        self.assertEqual(2, len(registry))
        self.assertIn("get-basic", registry)
        self.assertEqual(["get-basic", "create-basic"], list(registry))
        self.assertEqual("create-basic", registry["create-basic"].name)
        assert_set_equality({"get-basic", "create-basic"}, {test.name for test in registry.tests})

    def test_invalid_names(self) -> None:
        invalid_names = ["", "create-", "a b", "a\tb", "a\nb", "a'b", "a,b"]
        for name in invalid_names:
            with self.subTest(name=name):
                with self.assertRaises(ConformanceVectorError):
                    VectorRegistry().register(_make_test(name))

    def test_duplicate_names(self) -> None:
        registry = VectorRegistry()
        registry.register(_make_test("get-basic"))
        with self.assertRaises(ConformanceVectorError):
            registry.register(_make_test("get-basic"))
