# Copyright 2026-present Kensho Technologies, LLC.
"""Reconcile a change stream into ordered document snapshots.

Events only accumulate pending changes until the server marks a consistent point with a
NO_CHANGE target change. At that point, if the target is current, the pending changes are
applied to the last snapshot's documents one at a time, and a new snapshot is emitted if
anything changed (or if no snapshot has been emitted yet).
"""
from collections import deque
from datetime import datetime
from functools import cmp_to_key
import logging
from typing import Deque, Dict, Iterable, List, Optional, Tuple

from ..documents import Document
from ..exceptions import WatchInconsistencyError, WatchProtocolError
from ..query.ordering import DocumentComparator
from .events import (
    NO_INDEX,
    ChangeKind,
    DocChange,
    DocumentChange,
    DocumentDelete,
    DocumentRemove,
    ExistenceFilter,
    Snapshot,
    TargetChange,
    TargetChangeType,
    WatchEvent,
)
from .state import WatchTargetState


logger = logging.getLogger(__name__)


def _extract_changes(
    state: WatchTargetState,
) -> Tuple[List[Document], List[Document], List[Document]]:
    """Split the pending changes into deletions, additions and updates.

    Returns:
        tuple (deleted, added, updated), where deleted holds the documents as last snapshotted,
        and added and updated hold the new versions. Deletions of documents that were never
        snapshotted are dropped.
    """
    deleted: List[Document] = []
    added: List[Document] = []
    updated: List[Document] = []
    for name, document in state.pending_changes.items():
        if document is None:
            if name in state.document_map:
                deleted.append(state.document_map[name])
        elif name in state.document_map:
            updated.append(document)
        else:
            added.append(document)
    return deleted, added, updated


def _compute_snapshot(state: WatchTargetState) -> List[DocChange]:
    """Apply the pending changes to the state's documents, returning the changes made."""
    deleted, added, updated = _extract_changes(state)
    sort_key = cmp_to_key(state.comparator)
    tree = state.documents.copy()
    document_map = dict(state.document_map)
    changes: List[DocChange] = []

    for document in sorted(deleted, key=sort_key):
        old_index = tree.remove(document)
        del document_map[document.name]
        changes.append(DocChange(ChangeKind.REMOVED, document, old_index, NO_INDEX))

    for document in sorted(added, key=sort_key):
        new_index = tree.insert(document)
        document_map[document.name] = document
        changes.append(DocChange(ChangeKind.ADDED, document, NO_INDEX, new_index))

    for document in sorted(updated, key=sort_key):
        old_document = document_map[document.name]
        if old_document.is_same_version(document):
            continue
        old_index = tree.remove(old_document)
        new_index = tree.insert(document)
        document_map[document.name] = document
        changes.append(DocChange(ChangeKind.MODIFIED, document, old_index, new_index))

    state.documents = tree
    state.document_map = document_map
    state.pending_changes = {}
    return changes


def _push_snapshot(state: WatchTargetState, read_time: datetime) -> Optional[Snapshot]:
    """Apply the pending changes, emitting a snapshot if there is anything to report."""
    changes = _compute_snapshot(state)
    if state.has_pushed and not changes:
        logger.debug(
            "Target %s reached a consistent point at %s with no changes.",
            state.target_id,
            read_time,
        )
        return None

    state.has_pushed = True
    logger.debug(
        "Target %s emitting a snapshot of %s documents with %s changes at %s.",
        state.target_id,
        len(state.documents),
        len(changes),
        read_time,
    )
    return Snapshot(tuple(state.documents), tuple(changes), read_time)


def _reset(state: WatchTargetState) -> None:
    """Forget the pending changes, and mark every snapshotted document as deleted."""
    state.pending_changes = {document.name: None for document in state.documents}
    state.current = False
    logger.debug("Target %s was reset.", state.target_id)


def _resolve_target_change(state: WatchTargetState, change: TargetChange) -> Optional[Snapshot]:
    """Apply a target change, returning a snapshot if one is due."""
    if change.change_type == TargetChangeType.NO_CHANGE:
        if not change.target_ids and change.read_time is not None and state.current:
            return _push_snapshot(state, change.read_time)
    elif change.change_type == TargetChangeType.ADD:
        if any(target_id != state.target_id for target_id in change.target_ids):
            raise WatchProtocolError(
                f"Expected the target ADD to be for target {state.target_id}, but it was for "
                f"{change.target_ids}."
            )
    elif change.change_type == TargetChangeType.REMOVE:
        cause = change.cause or "no cause given"
        raise WatchProtocolError(
            f"The server removed target {state.target_id} from the stream: {cause}"
        )
    elif change.change_type == TargetChangeType.CURRENT:
        state.current = True
        logger.debug("Target %s is current.", state.target_id)
    elif change.change_type == TargetChangeType.RESET:
        _reset(state)
    else:
        raise AssertionError(f"Unreachable code reached: unknown target change {change}")
    return None


def _check_existence_filter(state: WatchTargetState, existence_filter: ExistenceFilter) -> None:
    """Ensure the server's document count matches the locally-tracked document count."""
    deleted, added, _ = _extract_changes(state)
    expected_count = len(state.document_map) + len(added) - len(deleted)
    if existence_filter.count != expected_count:
        raise WatchInconsistencyError(
            f"The server reports {existence_filter.count} documents for target "
            f"{state.target_id}, but {expected_count} are tracked locally."
        )


def resolve_event(state: WatchTargetState, event: WatchEvent) -> Optional[Snapshot]:
    """Apply one change stream event to the target's state.

    Args:
        state: the state of the target the event was delivered to
        event: the next event of the stream

    Returns:
        the Snapshot emitted at this event, or None

    Raises:
        - WatchProtocolError if the event violates the watch protocol
        - WatchInconsistencyError if an existence filter disagrees with the tracked documents
    """
    if isinstance(event, TargetChange):
        return _resolve_target_change(state, event)
    elif isinstance(event, DocumentChange):
        name = event.document.name
        if state.target_id in event.target_ids:
            state.pending_changes[name] = event.document
        elif state.target_id in event.removed_target_ids:
            state.pending_changes[name] = None
        else:
            logger.debug(
                "Ignoring the change to %s, which is not for target %s.", name, state.target_id
            )
    elif isinstance(event, (DocumentDelete, DocumentRemove)):
        state.pending_changes[event.document_path] = None
    elif isinstance(event, ExistenceFilter):
        _check_existence_filter(state, event)
    else:
        raise WatchProtocolError(f"Unsupported change stream event: {event!r}")
    return None


class WatchTargetRegistry:
    """Owns the state of every subscribed target, indexed by target id."""

    def __init__(self) -> None:
        """Construct a new registry with no subscribed targets."""
        self._states: Dict[int, WatchTargetState] = {}

    def subscribe(self, target_id: int, comparator: DocumentComparator) -> WatchTargetState:
        """Create the state of a new target, whose documents are ordered by the comparator."""
        if target_id in self._states:
            raise WatchProtocolError(f"Target {target_id} is already subscribed.")
        state = WatchTargetState(target_id, comparator)
        self._states[target_id] = state
        return state

    def get_state(self, target_id: int) -> WatchTargetState:
        """Return the state of a subscribed target."""
        state = self._states.get(target_id)
        if state is None:
            raise WatchProtocolError(f"Target {target_id} is not subscribed.")
        return state

    def process(self, target_id: int, event: WatchEvent) -> Optional[Snapshot]:
        """Apply an event to a target. A target whose stream fails is discarded."""
        state = self.get_state(target_id)
        try:
            return resolve_event(state, event)
        except (WatchProtocolError, WatchInconsistencyError) as e:
            logger.error("Discarding target %s after a fatal stream error: %s", target_id, e)
            self.discard(target_id)
            raise

    def discard(self, target_id: int) -> None:
        """Forget the state of a target. Discarding an unknown target is a no-op."""
        self._states.pop(target_id, None)

    def __contains__(self, target_id: object) -> bool:
        """Return True if the target is subscribed."""
        return target_id in self._states

    def __len__(self) -> int:
        """Return the number of subscribed targets."""
        return len(self._states)


class WatchStream:
    """A subscription to one target, whose events are processed strictly in delivery order."""

    def __init__(
        self, registry: WatchTargetRegistry, target_id: int, comparator: DocumentComparator
    ) -> None:
        """Subscribe a new target in the registry, with an empty queue of events."""
        self._registry = registry
        self._target_id = target_id
        self._queue: Deque[WatchEvent] = deque()
        self._closed = False
        registry.subscribe(target_id, comparator)

    @property
    def target_id(self) -> int:
        """Return the id of the target this stream is subscribed to."""
        return self._target_id

    @property
    def closed(self) -> bool:
        """Return True once the stream was closed or failed."""
        return self._closed

    def enqueue(self, event: WatchEvent) -> None:
        """Append an event to the queue, to be processed by the next drain()."""
        if self._closed:
            raise WatchProtocolError(
                f"Cannot deliver events to the closed stream of target {self._target_id}."
            )
        self._queue.append(event)

    def drain(self) -> List[Snapshot]:
        """Process every queued event in order, returning the snapshots emitted along the way.

        A fatal stream error closes the stream, drops the remaining events, and is re-raised.
        """
        snapshots: List[Snapshot] = []
        while self._queue:
            event = self._queue.popleft()
            try:
                snapshot = self._registry.process(self._target_id, event)
            except (WatchProtocolError, WatchInconsistencyError):
                self._queue.clear()
                self._closed = True
                raise
            if snapshot is not None:
                snapshots.append(snapshot)
        return snapshots

    def close(self) -> None:
        """Tear down the stream, discarding the target's state and any queued events."""
        self._queue.clear()
        self._registry.discard(self._target_id)
        self._closed = True


def collect_snapshots(
    events: Iterable[WatchEvent], comparator: DocumentComparator, target_id: int
) -> List[Snapshot]:
    """Run a complete sequence of events through a fresh target, returning every snapshot."""
    stream = WatchStream(WatchTargetRegistry(), target_id, comparator)
    for event in events:
        stream.enqueue(event)
    snapshots = stream.drain()
    stream.close()
    return snapshots
