# Copyright 2026-present Kensho Technologies, LLC.
"""The state the watch engine keeps for a single target."""
import bisect
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Any, Dict, Iterator, List, Optional

from ..documents import Document
from ..query.ordering import DocumentComparator
from ..typedefs import ResourcePath


class DocumentTree:
    """Documents kept sorted by a comparator that never considers two distinct documents equal."""

    def __init__(self, comparator: DocumentComparator) -> None:
        """Construct a new empty DocumentTree that orders documents with the given comparator."""
        self._comparator = comparator
        self._sort_key = cmp_to_key(comparator)
        self._keys: List[Any] = []
        self._documents: List[Document] = []

    def copy(self) -> "DocumentTree":
        """Return a new DocumentTree with the same documents and comparator."""
        new_tree = DocumentTree(self._comparator)
        new_tree._keys = list(self._keys)
        new_tree._documents = list(self._documents)
        return new_tree

    def index_of(self, document: Document) -> int:
        """Return the position of the document, which must be in the tree."""
        index = bisect.bisect_left(self._keys, self._sort_key(document))
        if index == len(self._documents) or self._documents[index].name != document.name:
            raise AssertionError(
                f"Expected document {document.name} to be in the tree, but it was not found: "
                f"{[existing.name for existing in self._documents]}"
            )
        return index

    def insert(self, document: Document) -> int:
        """Insert the document, returning its position."""
        key = self._sort_key(document)
        index = bisect.bisect_left(self._keys, key)
        self._keys.insert(index, key)
        self._documents.insert(index, document)
        return index

    def remove(self, document: Document) -> int:
        """Remove the document, returning the position it had."""
        index = self.index_of(document)
        del self._keys[index]
        del self._documents[index]
        return index

    def __len__(self) -> int:
        """Return the number of documents in the tree."""
        return len(self._documents)

    def __iter__(self) -> Iterator[Document]:
        """Iterate over the documents in order."""
        return iter(self._documents)


@dataclass
class WatchTargetState:
    """Everything the watch engine knows about one target of the change stream."""

    target_id: int
    comparator: DocumentComparator

    # Whether the server has declared the target consistent since the last reset.
    current: bool = False

    # Whether at least one snapshot has been emitted.
    has_pushed: bool = False

    # The documents of the last emitted snapshot, both in order and by name.
    documents: DocumentTree = field(init=False)
    document_map: Dict[ResourcePath, Document] = field(default_factory=dict)

    # Document name -> its latest version, or None if it was deleted, since the last snapshot.
    # Insertion ordered, though the order in which changes arrive never affects a snapshot.
    pending_changes: Dict[ResourcePath, Optional[Document]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Create the empty document tree."""
        self.documents = DocumentTree(self.comparator)
