# Copyright 2026-present Kensho Technologies, LLC.
from typing import Any, Collection, Dict, Set, TypeVar

import funcy


T = TypeVar("T")
KT = TypeVar("KT")
VT = TypeVar("VT")


def merge_non_overlapping_dicts(merge_target: Dict[KT, VT], new_data: Dict[KT, VT]) -> Dict[KT, VT]:
    """Produce the merged result of two dicts that are supposed to not overlap."""
    result = dict(merge_target)

    for key, value in new_data.items():
        if key in merge_target:
            raise AssertionError(
                'Overlapping key "{}" found in dicts that are supposed '
                "to not overlap. Values: {} {}".format(key, merge_target[key], value)
            )

        result[key] = value

    return result


def get_only_element_from_collection(one_element_collection: Collection[T]) -> T:
    """Assert that the collection has exactly one element, then return that element."""
    if len(one_element_collection) != 1:
        raise AssertionError(
            "Expected a collection with exactly one element, but got: {}".format(
                one_element_collection
            )
        )
    return funcy.first(one_element_collection)


def assert_set_equality(set1: Set[Any], set2: Set[Any]) -> None:
    """Assert that the sets are the same."""
    diff1 = set1.difference(set2)
    diff2 = set2.difference(set1)

    if diff1 or diff2:
        error_message_list = ["Expected sets to have the same keys."]
        if diff1:
            error_message_list.append(f"Keys in the first set but not the second: {diff1}.")
        if diff2:
            error_message_list.append(f"Keys in the second set but not the first: {diff2}.")
        raise AssertionError(" ".join(error_message_list))
