# Copyright 2026-present Kensho Technologies, LLC.
"""The events a watch target consumes from the change stream, and the snapshots it emits."""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple, Union

from ..documents import Document
from ..typedefs import ResourcePath


class TargetChangeType(Enum):
    NO_CHANGE = "NO_CHANGE"
    ADD = "ADD"
    REMOVE = "REMOVE"
    CURRENT = "CURRENT"
    RESET = "RESET"


@dataclass(frozen=True)
class TargetChange:
    """A change in the state of one or more targets.

    A NO_CHANGE with no target ids and a read time marks a consistent point of the stream.
    """

    change_type: TargetChangeType
    target_ids: Tuple[int, ...] = ()
    read_time: Optional[datetime] = None

    # The server's explanation, present when the server removes a target because of an error.
    cause: Optional[str] = None


@dataclass(frozen=True)
class DocumentChange:
    """A new version of a document, for the targets it now matches or no longer matches."""

    document: Document
    target_ids: Tuple[int, ...] = ()
    removed_target_ids: Tuple[int, ...] = ()


@dataclass(frozen=True)
class DocumentDelete:
    """The document was deleted."""

    document_path: ResourcePath
    read_time: Optional[datetime] = None


@dataclass(frozen=True)
class DocumentRemove:
    """The document no longer matches the target."""

    document_path: ResourcePath
    read_time: Optional[datetime] = None


@dataclass(frozen=True)
class ExistenceFilter:
    """The number of documents that currently match the target, according to the server."""

    count: int
    target_id: Optional[int] = None


WatchEvent = Union[TargetChange, DocumentChange, DocumentDelete, DocumentRemove, ExistenceFilter]


class ChangeKind(Enum):
    ADDED = "ADDED"
    REMOVED = "REMOVED"
    MODIFIED = "MODIFIED"


# The index of a document that is absent from the state before or after a change.
NO_INDEX = -1


@dataclass(frozen=True)
class DocChange:
    """One change between two consecutive snapshots.

    The old index is the document's position in the state immediately before this change, and
    the new index is its position immediately after it, not in the previous or next snapshot.
    """

    kind: ChangeKind
    document: Document
    old_index: int
    new_index: int


@dataclass(frozen=True)
class Snapshot:
    """The ordered documents of a target at a consistent point, and how they changed."""

    documents: Tuple[Document, ...]
    changes: Tuple[DocChange, ...]
    read_time: Optional[datetime]
