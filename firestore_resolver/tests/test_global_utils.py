# Copyright 2026-present Kensho Technologies, LLC.
import unittest

from ..global_utils import (
    assert_set_equality,
    get_only_element_from_collection,
    merge_non_overlapping_dicts,
)


class GlobalUtilTests(unittest.TestCase):
    def test_assert_equality(self) -> None:
        # Matching sets
        assert_set_equality({"a", "b"}, {"a", "b"})

        # Additional keys in the first set
        with self.assertRaises(AssertionError):
            assert_set_equality({"a", "b"}, {"b"})

        # Additional keys in the second set
        with self.assertRaises(AssertionError):
            assert_set_equality({"b"}, {"a", "b"})

        # Different types
        with self.assertRaises(AssertionError):
            assert_set_equality({"a"}, {1})

    def test_merge_non_overlapping_dicts(self) -> None:
        first = {"a": 1}
        self.assertEqual({"a": 1, "b": 2}, merge_non_overlapping_dicts(first, {"b": 2}))
        # The inputs are not modified.
        self.assertEqual({"a": 1}, first)

        with self.assertRaises(AssertionError):
            merge_non_overlapping_dicts({"a": 1}, {"a": 2})

    def test_get_only_element_from_collection(self) -> None:
        self.assertEqual("a", get_only_element_from_collection(["a"]))
        self.assertEqual(3, get_only_element_from_collection({3}))

        with self.assertRaises(AssertionError):
            get_only_element_from_collection([])

        with self.assertRaises(AssertionError):
            get_only_element_from_collection([1, 2])
