# Copyright 2026-present Kensho Technologies, LLC.
import unittest

from ..documents import Document
from ..exceptions import WatchInconsistencyError, WatchProtocolError
from ..field_path import FieldPath
from ..query import Direction, Order, make_document_comparator
from ..values import timestamp_from_seconds
from ..watch import (
    NO_INDEX,
    ChangeKind,
    DocChange,
    DocumentChange,
    DocumentDelete,
    ExistenceFilter,
    Snapshot,
    TargetChange,
    TargetChangeType,
    WatchStream,
    WatchTargetRegistry,
    collect_snapshots,
)
from ..watch.state import DocumentTree


COLLECTION_PATH = "projects/p/databases/(default)/documents/C"
TARGET_ID = 7

COMPARATOR = make_document_comparator([Order(FieldPath("a"), Direction.ASCENDING)])

CURRENT = TargetChange(TargetChangeType.CURRENT)


def _doc(document_id: str, a_value: int, update_seconds: int) -> Document:
    return Document(
        f"{COLLECTION_PATH}/{document_id}",
        {"a": a_value},
        create_time=timestamp_from_seconds(1),
        update_time=timestamp_from_seconds(update_seconds),
    )


def _change(document: Document) -> DocumentChange:
    return DocumentChange(document, target_ids=(TARGET_ID,))


def _no_change(read_seconds: int) -> TargetChange:
    return TargetChange(TargetChangeType.NO_CHANGE, read_time=timestamp_from_seconds(read_seconds))


class DocumentTreeTests(unittest.TestCase):
    def test_insert_and_remove(self) -> None:
        tree = DocumentTree(COMPARATOR)
        first, second, third = _doc("x", 1, 1), _doc("y", 1, 1), _doc("z", 0, 1)
        self.assertEqual(0, tree.insert(second))
        self.assertEqual(0, tree.insert(first))
        self.assertEqual(0, tree.insert(third))
        self.assertEqual([third, first, second], list(tree))

        copied_tree = tree.copy()
        self.assertEqual(1, tree.remove(first))
        self.assertEqual([third, second], list(tree))
        self.assertEqual(3, len(copied_tree))
        self.assertEqual(1, copied_tree.index_of(first))

        with self.assertRaises(AssertionError):
            tree.index_of(first)


class WatchEngineTests(unittest.TestCase):
    def test_no_snapshot_before_current(self) -> None:
        events = [_change(_doc("d", 1, 1)), _no_change(1)]
        snapshots = collect_snapshots(events, COMPARATOR, TARGET_ID)
        self.assertEqual([], snapshots)

    def test_changes_for_other_targets_are_ignored(self) -> None:
        events = [
            DocumentChange(_doc("d", 1, 1), target_ids=(TARGET_ID + 1,)),
            CURRENT,
            _no_change(1),
        ]
        snapshots = collect_snapshots(events, COMPARATOR, TARGET_ID)
        self.assertEqual([Snapshot((), (), timestamp_from_seconds(1))], snapshots)

    def test_deleting_an_unknown_document_is_a_no_op(self) -> None:
        document = _doc("d", 1, 1)
        events = [
            _change(document),
            CURRENT,
            _no_change(1),
            DocumentDelete(f"{COLLECTION_PATH}/unknown"),
            _no_change(2),
        ]
        snapshots = collect_snapshots(events, COMPARATOR, TARGET_ID)
        self.assertEqual(
            [
                Snapshot(
                    (document,),
                    (DocChange(ChangeKind.ADDED, document, NO_INDEX, 0),),
                    timestamp_from_seconds(1),
                )
            ],
            snapshots,
        )

    def test_existence_filter_mismatch(self) -> None:
        events = [_change(_doc("d", 1, 1)), CURRENT, _no_change(1), ExistenceFilter(2)]
        with self.assertRaises(WatchInconsistencyError):
            collect_snapshots(events, COMPARATOR, TARGET_ID)

    def test_missing_ordering_field(self) -> None:
        events = [
            _change(_doc("d", 1, 1)),
            _change(Document(f"{COLLECTION_PATH}/e", {}, update_time=timestamp_from_seconds(1))),
            CURRENT,
            _no_change(1),
        ]
        with self.assertRaises(WatchProtocolError):
            collect_snapshots(events, COMPARATOR, TARGET_ID)


class WatchStreamTests(unittest.TestCase):
    def test_drain_in_delivery_order(self) -> None:
        registry = WatchTargetRegistry()
        stream = WatchStream(registry, TARGET_ID, COMPARATOR)
        self.assertIn(TARGET_ID, registry)
        self.assertEqual(TARGET_ID, stream.target_id)
        self.assertFalse(stream.closed)

        stream.enqueue(_change(_doc("d", 1, 1)))
        stream.enqueue(CURRENT)
        self.assertEqual([], stream.drain())

        stream.enqueue(_no_change(1))
        stream.enqueue(_change(_doc("d", 2, 2)))
        stream.enqueue(_no_change(2))
        snapshots = stream.drain()
        self.assertEqual(2, len(snapshots))
        self.assertEqual(ChangeKind.MODIFIED, snapshots[1].changes[0].kind)

        stream.close()
        self.assertTrue(stream.closed)
        self.assertNotIn(TARGET_ID, registry)
        with self.assertRaises(WatchProtocolError):
            stream.enqueue(CURRENT)

    def test_fatal_error_closes_the_stream(self) -> None:
        registry = WatchTargetRegistry()
        stream = WatchStream(registry, TARGET_ID, COMPARATOR)
        stream.enqueue(TargetChange(TargetChangeType.REMOVE, cause="permission denied"))
        stream.enqueue(CURRENT)
        with self.assertRaises(WatchProtocolError):
            stream.drain()

        self.assertTrue(stream.closed)
        self.assertEqual(0, len(registry))
        with self.assertRaises(WatchProtocolError):
            registry.get_state(TARGET_ID)

    def test_targets_are_independent(self) -> None:
        registry = WatchTargetRegistry()
        first_stream = WatchStream(registry, 1, COMPARATOR)
        second_stream = WatchStream(registry, 2, COMPARATOR)
        self.assertEqual(2, len(registry))

        with self.assertRaises(WatchProtocolError):
            WatchStream(registry, 1, COMPARATOR)

        first_stream.enqueue(TargetChange(TargetChangeType.REMOVE))
        with self.assertRaises(WatchProtocolError):
            first_stream.drain()

        second_stream.enqueue(CURRENT)
        second_stream.enqueue(_no_change(1))
        self.assertEqual(1, len(second_stream.drain()))
        self.assertNotIn(1, registry)
        self.assertIn(2, registry)
