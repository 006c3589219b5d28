# Copyright 2026-present Kensho Technologies, LLC.
"""Commonly-used functions and data types from this package."""
from .documents import Document  # noqa
from .exceptions import (  # noqa
    CursorMismatchError,
    FirestoreResolutionError,
    FirestoreValidationError,
    InvalidQueryArgumentError,
    MalformedPathError,
    PreconditionConflictError,
    SentinelMisuseError,
    WatchInconsistencyError,
    WatchProtocolError,
)
from .field_path import FieldPath  # noqa
from .mutation import (  # noqa
    MERGE_ALL,
    CreateSpec,
    DeleteSpec,
    MutationSpec,
    Precondition,
    SetSpec,
    UpdatePathsSpec,
    UpdateSpec,
    resolve_mutation,
)
from .paths import DatabaseInfo  # noqa
from .query import build_run_query_request, make_query_comparator, resolve_query  # noqa
from .rpc import CommitRequest, GetDocumentRequest, build_commit_request, resolve_get  # noqa
from .values import (  # noqa
    DELETE_FIELD,
    SERVER_TIMESTAMP,
    ArrayRemove,
    ArrayUnion,
    Reference,
)
from .watch import WatchStream, WatchTargetRegistry  # noqa


__package_name__ = "firestore-resolver"
__version__ = "1.0.0"


def resolve_commit_request(spec: MutationSpec) -> CommitRequest:
    """Resolve the mutation call and wrap its writes into a commit request.

    Args:
        spec: the mutation call: CreateSpec, SetSpec, UpdateSpec, UpdatePathsSpec or DeleteSpec

    Returns:
        CommitRequest containing:
            - database: string, the resource path of the database holding the document
            - writes: tuple of zero, one or two writes, in the order in which they apply
    """
    return build_commit_request(spec.document_path, resolve_mutation(spec))
