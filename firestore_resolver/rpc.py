# Copyright 2026-present Kensho Technologies, LLC.
"""The request messages that wrap resolved writes and document reads."""
from dataclasses import dataclass
from typing import Iterable, Tuple

from .mutation.writes import Write
from .paths import get_database_path, validate_document_path
from .typedefs import ResourcePath


@dataclass(frozen=True)
class GetDocumentRequest:
    name: ResourcePath


@dataclass(frozen=True)
class CommitRequest:
    """Writes to apply atomically, addressed to the database that holds their documents."""

    database: ResourcePath
    writes: Tuple[Write, ...]


def resolve_get(document_path: ResourcePath) -> GetDocumentRequest:
    """Return the request that reads the document at the given path."""
    validate_document_path(document_path)
    return GetDocumentRequest(document_path)


def build_commit_request(document_path: ResourcePath, writes: Iterable[Write]) -> CommitRequest:
    """Wrap the writes of a resolved mutation into a commit request for the document's database."""
    return CommitRequest(get_database_path(document_path), tuple(writes))
