# Copyright 2026-present Kensho Technologies, LLC.
"""Resource paths of databases, collections and documents."""
from dataclasses import dataclass
from typing import List, Tuple

from .exceptions import MalformedPathError
from .typedefs import ResourcePath


DEFAULT_DATABASE_ID = "(default)"

_SEPARATOR = "/"

# "projects/{project_id}/databases/{database_id}/documents"
_DOCUMENTS_ROOT_SEGMENT_COUNT = 5


@dataclass(frozen=True)
class DatabaseInfo:
    """Identifies the database that resolved requests are addressed to."""

    project_id: str
    database_id: str = DEFAULT_DATABASE_ID

    def __post_init__(self) -> None:
        """Ensure that the DatabaseInfo is valid."""
        for segment in (self.project_id, self.database_id):
            if not segment or _SEPARATOR in segment:
                raise MalformedPathError(
                    f"Invalid project or database id {segment!r} in {self}."
                )

    @property
    def database_path(self) -> ResourcePath:
        """Return the resource path of the database."""
        return f"projects/{self.project_id}/databases/{self.database_id}"

    @property
    def documents_root(self) -> ResourcePath:
        """Return the resource path under which all collections of the database live."""
        return f"{self.database_path}/documents"

    def collection_path(self, *segments: str) -> ResourcePath:
        """Return the full resource path of a collection, given its relative segments."""
        path = _SEPARATOR.join((self.documents_root,) + segments)
        validate_collection_path(path)
        return path

    def document_path(self, *segments: str) -> ResourcePath:
        """Return the full resource path of a document, given its relative segments."""
        path = _SEPARATOR.join((self.documents_root,) + segments)
        validate_document_path(path)
        return path


def _split_resource_path(path: ResourcePath) -> Tuple[List[str], List[str]]:
    """Split a resource path into its documents-root segments and its relative segments."""
    if not isinstance(path, str):
        raise MalformedPathError(f"Expected a resource path string, got {path!r}")

    segments = path.split(_SEPARATOR)
    root_segments = segments[:_DOCUMENTS_ROOT_SEGMENT_COUNT]
    if (
        len(root_segments) != _DOCUMENTS_ROOT_SEGMENT_COUNT
        or root_segments[0] != "projects"
        or root_segments[2] != "databases"
        or root_segments[4] != "documents"
    ):
        raise MalformedPathError(
            f'Expected a resource path starting with "projects/<project>/databases/<database>/'
            f'documents", got {path!r}'
        )

    if not all(segments):
        raise MalformedPathError(f"Resource path {path!r} has an empty segment.")

    return root_segments, segments[_DOCUMENTS_ROOT_SEGMENT_COUNT:]


def validate_document_path(path: ResourcePath) -> None:
    """Ensure the path names a document: an even, non-zero number of relative segments."""
    _, relative_segments = _split_resource_path(path)
    if not relative_segments or len(relative_segments) % 2 != 0:
        raise MalformedPathError(f"Resource path {path!r} does not name a document.")


def validate_collection_path(path: ResourcePath) -> None:
    """Ensure the path names a collection: an odd number of relative segments."""
    _, relative_segments = _split_resource_path(path)
    if len(relative_segments) % 2 != 1:
        raise MalformedPathError(f"Resource path {path!r} does not name a collection.")


def get_database_path(path: ResourcePath) -> ResourcePath:
    """Return the database resource path that the given resource path belongs to."""
    root_segments, _ = _split_resource_path(path)
    return _SEPARATOR.join(root_segments[:4])


def split_document_path(path: ResourcePath) -> Tuple[ResourcePath, str]:
    """Return the (parent collection path, document id) pair of a document path."""
    validate_document_path(path)
    parent, _, document_id = path.rpartition(_SEPARATOR)
    return parent, document_id


def split_collection_path(path: ResourcePath) -> Tuple[ResourcePath, str]:
    """Return the (parent path, collection id) pair of a collection path.

    The parent is either a document path or the database's documents root.
    """
    validate_collection_path(path)
    parent, _, collection_id = path.rpartition(_SEPARATOR)
    return parent, collection_id
