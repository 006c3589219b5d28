# Copyright 2026-present Kensho Technologies, LLC.
from datetime import datetime, timedelta, timezone
import unittest

from ..values import (
    DELETE_FIELD,
    SERVER_TIMESTAMP,
    ArrayRemove,
    ArrayUnion,
    Reference,
    compare_resource_paths,
    compare_values,
    contains_sentinel,
    format_timestamp,
    is_nan,
    parse_timestamp,
    timestamp_from_seconds,
)


class ValueOrderingTests(unittest.TestCase):
    def test_cross_type_ordering(self) -> None:
        ordered_values = [
            None,
            False,
            True,
            float("nan"),
            -1,
            2.5,
            timestamp_from_seconds(1),
            "",
            "a",
            b"",
            Reference("projects/p/databases/(default)/documents/C/d"),
            [],
            [1],
            {},
            {"a": 1},
        ]
        for index, left in enumerate(ordered_values):
            for right in ordered_values[index + 1 :]:
                with self.subTest(left=left, right=right):
                    self.assertEqual(-1, compare_values(left, right))
                    self.assertEqual(1, compare_values(right, left))

    def test_numbers(self) -> None:
        self.assertEqual(0, compare_values(1, 1.0))
        self.assertEqual(0, compare_values(float("nan"), float("nan")))
        self.assertEqual(-1, compare_values(float("nan"), float("-inf")))
        self.assertEqual(1, compare_values(3, 2.5))

    def test_arrays_and_maps(self) -> None:
        self.assertEqual(-1, compare_values([1, 2], [1, 3]))
        self.assertEqual(-1, compare_values([1, 2], [1, 2, 0]))
        self.assertEqual(0, compare_values([1, {"a": "b"}], [1, {"a": "b"}]))
        self.assertEqual(-1, compare_values({"a": 1}, {"b": 0}))
        self.assertEqual(-1, compare_values({"a": 1}, {"a": 2}))
        self.assertEqual(-1, compare_values({"a": 1}, {"a": 1, "b": 0}))

    def test_resource_paths(self) -> None:
        self.assertEqual(-1, compare_resource_paths("a/b", "a/b/c"))
        # Segment-wise comparison differs from plain string comparison here.
        self.assertEqual(-1, compare_resource_paths("a/b", "a!/b"))
        self.assertEqual(0, compare_resource_paths("a/b", "a/b"))

    def test_unsupported_type(self) -> None:
        with self.assertRaises(TypeError):
            compare_values(object(), 1)


class SentinelTests(unittest.TestCase):
    def test_sentinel_equality(self) -> None:
        self.assertEqual(ArrayUnion([1, 2]), ArrayUnion((1, 2)))
        self.assertNotEqual(ArrayUnion([1, 2]), ArrayRemove([1, 2]))
        self.assertNotEqual(ArrayUnion([1, 2]), ArrayUnion([2, 1]))
        self.assertEqual(DELETE_FIELD, DELETE_FIELD)
        self.assertNotEqual(DELETE_FIELD, SERVER_TIMESTAMP)
        self.assertEqual(hash(ArrayRemove([1])), hash(ArrayRemove([1])))

    def test_contains_sentinel(self) -> None:
        self.assertTrue(contains_sentinel(SERVER_TIMESTAMP))
        self.assertTrue(contains_sentinel([1, [2, DELETE_FIELD]]))
        self.assertTrue(contains_sentinel({"a": {"b": ArrayUnion([1])}}))
        self.assertFalse(contains_sentinel({"a": [1, "Delete", {"b": None}]}))

    def test_is_nan(self) -> None:
        self.assertTrue(is_nan(float("nan")))
        self.assertFalse(is_nan("NaN"))
        self.assertFalse(is_nan(1))


class TimestampTests(unittest.TestCase):
    def test_parse_timestamp(self) -> None:
        expected = datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
        self.assertEqual(expected, parse_timestamp("2020-01-02T03:04:05Z"))
        self.assertEqual(expected, parse_timestamp("2020-01-02T05:04:05+02:00"))

        offset_datetime = datetime(2020, 1, 2, 5, 4, 5, tzinfo=timezone(timedelta(hours=2)))
        parsed = parse_timestamp(offset_datetime)
        self.assertEqual(expected, parsed)
        self.assertEqual(timezone.utc, parsed.tzinfo)

    def test_invalid_timestamps(self) -> None:
        with self.assertRaises(ValueError):
            parse_timestamp(datetime(2020, 1, 2))

        with self.assertRaises(ValueError):
            parse_timestamp("not a timestamp")

        with self.assertRaises(ValueError):
            parse_timestamp(42)

    def test_format_timestamp(self) -> None:
        self.assertEqual(
            "1970-01-01T00:00:42.000000Z", format_timestamp(timestamp_from_seconds(42))
        )
        self.assertEqual(
            "1970-01-01T00:00:01.000002Z", format_timestamp(timestamp_from_seconds(1, 2500))
        )
        self.assertEqual(
            "0005-01-01T00:00:00.000000Z",
            format_timestamp(datetime(5, 1, 1, tzinfo=timezone.utc)),
        )

    def test_timestamp_from_seconds_rejects_invalid_nanos(self) -> None:
        self.assertEqual(
            timestamp_from_seconds(1).replace(microsecond=999999),
            timestamp_from_seconds(1, 999_999_999),
        )
        for nanos in [-1, 1_000_000_000, 2.5, True]:
            with self.subTest(nanos=nanos):
                with self.assertRaises(ValueError):
                    timestamp_from_seconds(1, nanos)  # type: ignore
