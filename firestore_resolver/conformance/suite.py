# Copyright 2026-present Kensho Technologies, LLC.
"""Assemble the conformance suite from the vectors, and check the resolvers against it.

Every test pairs one call with the request, query or snapshots it must produce, or with the
expectation that it fails with a client-side error. Building a test's inputs (parsing its JSON
and field paths) is part of running it, since some vectors fail exactly there.
"""
from dataclasses import replace
import logging
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from .. import resolve_commit_request
from ..exceptions import (
    ConformanceVectorError,
    FirestoreValidationError,
    WatchInconsistencyError,
    WatchProtocolError,
)
from ..field_path import FieldPath
from ..mutation.specs import (
    MERGE_ALL,
    CreateSpec,
    DeleteSpec,
    MergeOption,
    MutationSpec,
    Precondition,
    SetSpec,
    UpdatePathsSpec,
    UpdateSpec,
)
from ..mutation.writes import DeleteWrite, FieldTransform, TransformWrite, UpdateWrite, Write
from ..paths import split_collection_path
from ..query import make_query_comparator, resolve_query
from ..query.structured_query import CollectionSelector
from ..rpc import CommitRequest, GetDocumentRequest, build_commit_request, resolve_get
from ..typedefs import FieldMap, ResourcePath
from ..watch import collect_snapshots
from .json_data import parse_json_data, parse_json_value
from .model import ConformanceTest, RawMergeOption, VectorKind, WriteVector
from .registry import VectorRegistry
from .vectors import (
    BASIC_VECTORS,
    COLLECTION_PATH,
    CREATE_ONLY_VECTORS,
    CREATE_SET_VECTORS,
    DELETE_VECTORS,
    DOCUMENT_PATH,
    EXISTS_FALSE_PRECONDITION,
    EXISTS_TRUE_PRECONDITION,
    LISTEN_QUERY_CLAUSES,
    LISTEN_VECTORS,
    QUERY_VECTORS,
    SET_ONLY_VECTORS,
    TRANSFORM_ERROR_VECTORS,
    TRANSFORM_VECTORS,
    UPDATE_ONLY_VECTORS,
    UPDATE_PATHS_ONLY_VECTORS,
    UPDATE_VECTORS,
    WATCH_TARGET_ID,
)


logger = logging.getLogger(__name__)

# The errors a resolver raises for invalid input. Anything else escaping a test is a bug.
EXPECTED_ERROR_TYPES = (FirestoreValidationError, WatchProtocolError, WatchInconsistencyError)


def expected_commit_request(
    document_path: ResourcePath,
    out_data: Optional[FieldMap],
    mask: Optional[Tuple[str, ...]],
    precondition: Optional[Precondition],
    transforms: Optional[Tuple[FieldTransform, ...]],
) -> CommitRequest:
    """Return the commit request a successful write vector expects.

    An update write is expected if there is output data or an update mask; a transform write is
    expected if there are transforms. The precondition goes on the first of the two.
    """
    writes: List[Write] = []
    if out_data is not None or mask is not None:
        writes.append(UpdateWrite(document_path, out_data or {}, mask, precondition))
        precondition = None
    if transforms:
        writes.append(TransformWrite(document_path, transforms, precondition))
    return build_commit_request(document_path, writes)


def _combine_comments(vector: WriteVector) -> str:
    """Return the comment of a vector used by Update or UpdatePaths."""
    if vector.update_comment:
        return f"{vector.comment}\n\n{vector.update_comment}"
    return vector.comment


def _get_update_mask(vector: WriteVector) -> Optional[Tuple[str, ...]]:
    """Return the mask an Update or UpdatePaths call is expected to produce."""
    if vector.mask is not None and vector.update_mask is not None:
        raise ConformanceVectorError(
            f"Vector {vector.suffix} sets both a mask and an Update-only mask: {vector}"
        )
    return vector.mask if vector.mask is not None else vector.update_mask


def generate_get_tests(registry: VectorRegistry) -> None:
    registry.register(
        ConformanceTest(
            name="get-basic",
            description="get: get a document",
            comment="A call to DocumentRef.Get.",
            kind=VectorKind.GET,
            document_path=DOCUMENT_PATH,
            expected=GetDocumentRequest(DOCUMENT_PATH),
        )
    )


def generate_create_tests(registry: VectorRegistry) -> None:
    vectors = (
        BASIC_VECTORS
        + CREATE_SET_VECTORS
        + TRANSFORM_VECTORS
        + TRANSFORM_ERROR_VECTORS
        + CREATE_ONLY_VECTORS
    )
    for vector in vectors:
        expected = None
        if not vector.is_error:
            expected = expected_commit_request(
                DOCUMENT_PATH,
                vector.out_data,
                vector.mask,
                EXISTS_FALSE_PRECONDITION,
                vector.transforms,
            )
        registry.register(
            ConformanceTest(
                name=f"create-{vector.suffix}",
                description=f"create: {vector.description}",
                comment=vector.comment,
                kind=VectorKind.CREATE,
                document_path=DOCUMENT_PATH,
                json_data=vector.json_data,
                expected=expected,
                is_error=vector.is_error,
            )
        )


def generate_set_tests(registry: VectorRegistry) -> None:
    vectors = (
        BASIC_VECTORS
        + CREATE_SET_VECTORS
        + TRANSFORM_VECTORS
        + TRANSFORM_ERROR_VECTORS
        + SET_ONLY_VECTORS
    )
    for vector in vectors:
        expected = None
        if not vector.is_error:
            expected = expected_commit_request(
                DOCUMENT_PATH, vector.out_data, vector.mask, None, vector.transforms
            )
        prefix = "set"
        if vector.merge is not None and vector.merge is not MERGE_ALL:
            prefix = "set-merge"
        registry.register(
            ConformanceTest(
                name=f"set-{vector.suffix}",
                description=f"{prefix}: {vector.description}",
                comment=vector.comment,
                kind=VectorKind.SET,
                document_path=DOCUMENT_PATH,
                json_data=vector.json_data,
                merge=vector.merge,
                expected=expected,
                is_error=vector.is_error,
            )
        )


def _expected_update_request(vector: WriteVector) -> Optional[CommitRequest]:
    """Return the commit request of an Update or UpdatePaths vector, or None for errors."""
    if vector.is_error:
        return None
    precondition = vector.precondition or EXISTS_TRUE_PRECONDITION
    return expected_commit_request(
        DOCUMENT_PATH, vector.out_data, _get_update_mask(vector), precondition, vector.transforms
    )


def generate_update_tests(registry: VectorRegistry) -> None:
    vectors = (
        BASIC_VECTORS
        + UPDATE_VECTORS
        + TRANSFORM_VECTORS
        + TRANSFORM_ERROR_VECTORS
        + UPDATE_ONLY_VECTORS
    )
    for vector in vectors:
        registry.register(
            ConformanceTest(
                name=f"update-{vector.suffix}",
                description=f"update: {vector.description}",
                comment=_combine_comments(vector),
                kind=VectorKind.UPDATE,
                document_path=DOCUMENT_PATH,
                json_data=vector.json_data,
                precondition=vector.precondition,
                expected=_expected_update_request(vector),
                is_error=vector.is_error,
            )
        )


def generate_update_paths_tests(registry: VectorRegistry) -> None:
    vectors = (
        BASIC_VECTORS
        + UPDATE_VECTORS
        + TRANSFORM_VECTORS
        + TRANSFORM_ERROR_VECTORS
        + UPDATE_PATHS_ONLY_VECTORS
    )
    for vector in vectors:
        paths = vector.paths or ()
        json_values = vector.json_values or ()
        if len(paths) != len(json_values):
            raise ConformanceVectorError(
                f"Vector {vector.suffix} has {len(paths)} paths but {len(json_values)} values."
            )
        registry.register(
            ConformanceTest(
                name=f"update-paths-{vector.suffix}",
                description=f"update-paths: {vector.description}",
                comment=_combine_comments(vector),
                kind=VectorKind.UPDATE_PATHS,
                document_path=DOCUMENT_PATH,
                field_paths=paths,
                json_values=json_values,
                precondition=vector.precondition,
                expected=_expected_update_request(vector),
                is_error=vector.is_error,
            )
        )


def generate_delete_tests(registry: VectorRegistry) -> None:
    for suffix, description, comment, precondition in DELETE_VECTORS:
        expected = build_commit_request(
            DOCUMENT_PATH, [DeleteWrite(DOCUMENT_PATH, precondition)]
        )
        registry.register(
            ConformanceTest(
                name=f"delete-{suffix}",
                description=f"delete: {description}",
                comment=comment,
                kind=VectorKind.DELETE,
                document_path=DOCUMENT_PATH,
                precondition=precondition,
                expected=expected,
            )
        )


def generate_query_tests(registry: VectorRegistry) -> None:
    _, collection_id = split_collection_path(COLLECTION_PATH)
    from_ = (CollectionSelector(collection_id),)
    for vector in QUERY_VECTORS:
        expected = None
        if not vector.is_error:
            if vector.query is None:
                raise ConformanceVectorError(
                    f"Query vector {vector.suffix} has no expected query."
                )
            expected = replace(vector.query, from_=from_)
        registry.register(
            ConformanceTest(
                name=f"query-{vector.suffix}",
                description=f"query: {vector.description}",
                comment=vector.comment,
                kind=VectorKind.QUERY,
                collection_path=COLLECTION_PATH,
                clauses=vector.clauses,
                expected=expected,
                is_error=vector.is_error,
            )
        )


def generate_listen_tests(registry: VectorRegistry) -> None:
    for vector in LISTEN_VECTORS:
        registry.register(
            ConformanceTest(
                name=f"listen-{vector.suffix}",
                description=f"listen: {vector.description}",
                comment=vector.comment,
                kind=VectorKind.LISTEN,
                collection_path=COLLECTION_PATH,
                clauses=LISTEN_QUERY_CLAUSES,
                responses=vector.responses,
                expected=None if vector.is_error else vector.snapshots,
                is_error=vector.is_error,
            )
        )


_GENERATORS: Sequence[Callable[[VectorRegistry], None]] = (
    generate_get_tests,
    generate_create_tests,
    generate_set_tests,
    generate_update_tests,
    generate_update_paths_tests,
    generate_delete_tests,
    generate_query_tests,
    generate_listen_tests,
)


def generate_conformance_suite(registry: Optional[VectorRegistry] = None) -> VectorRegistry:
    """Register every conformance test, in a stable order, and return the registry."""
    if registry is None:
        registry = VectorRegistry()
    for generator in _GENERATORS:
        generator(registry)
    logger.debug("Generated %s conformance tests.", len(registry))
    return registry


def _to_merge_option(merge: RawMergeOption) -> MergeOption:
    """Return the merge option of a Set test, with its raw field paths validated."""
    if merge is None or merge is MERGE_ALL:
        return merge
    return tuple(FieldPath(*raw_path) for raw_path in merge)


def _require_json_data(test: ConformanceTest) -> FieldMap:
    if test.json_data is None:
        raise ConformanceVectorError(f"Conformance test {test.name} has no input data.")
    return parse_json_data(test.json_data)


def _build_mutation_spec(test: ConformanceTest) -> MutationSpec:
    """Return the mutation call that a write test describes."""
    document_path = test.document_path or DOCUMENT_PATH
    if test.kind == VectorKind.CREATE:
        return CreateSpec(document_path, _require_json_data(test))
    elif test.kind == VectorKind.SET:
        return SetSpec(document_path, _require_json_data(test), _to_merge_option(test.merge))
    elif test.kind == VectorKind.UPDATE:
        return UpdateSpec(document_path, _require_json_data(test), test.precondition)
    elif test.kind == VectorKind.UPDATE_PATHS:
        field_updates = tuple(
            (FieldPath(*raw_path), parse_json_value(json_value))
            for raw_path, json_value in zip(test.field_paths or (), test.json_values or ())
        )
        return UpdatePathsSpec(document_path, field_updates, test.precondition)
    elif test.kind == VectorKind.DELETE:
        return DeleteSpec(document_path, test.precondition)
    else:
        raise AssertionError(f"Unreachable code reached: {test.kind} is not a write test.")


def run_conformance_test(test: ConformanceTest) -> Any:
    """Run the call a test describes, returning its request, query or tuple of snapshots.

    Raises:
        the resolver's error, if the call is rejected
    """
    if test.kind == VectorKind.GET:
        return resolve_get(test.document_path or DOCUMENT_PATH)
    elif test.kind == VectorKind.QUERY:
        clauses = [clause_data.to_clause() for clause_data in test.clauses]
        return resolve_query(test.collection_path or COLLECTION_PATH, clauses)
    elif test.kind == VectorKind.LISTEN:
        clauses = [clause_data.to_clause() for clause_data in test.clauses]
        query = resolve_query(test.collection_path or COLLECTION_PATH, clauses)
        snapshots = collect_snapshots(
            test.responses, make_query_comparator(query), WATCH_TARGET_ID
        )
        return tuple(snapshots)
    else:
        return resolve_commit_request(_build_mutation_spec(test))


def check_conformance_test(test: ConformanceTest) -> None:
    """Run a test, raising ConformanceVectorError unless the outcome is the expected one."""
    try:
        actual = run_conformance_test(test)
    except EXPECTED_ERROR_TYPES as e:
        if test.is_error:
            logger.debug("Conformance test %s failed as expected: %s", test.name, e)
            return
        raise ConformanceVectorError(
            f"Conformance test {test.name} ({test.description}) raised an unexpected error: "
            f"{type(e).__name__}: {e}"
        ) from e

    if test.is_error:
        raise ConformanceVectorError(
            f"Conformance test {test.name} ({test.description}) was expected to fail, but "
            f"produced: {actual}"
        )
    if actual != test.expected:
        raise ConformanceVectorError(
            f"Conformance test {test.name} ({test.description}) produced the wrong result.\n"
            f"Expected: {test.expected}\n"
            f"Actual: {actual}"
        )


def check_conformance_suite(tests: Iterable[ConformanceTest]) -> List[str]:
    """Check every test, logging each failure, and return the names of the failed tests."""
    failed_names: List[str] = []
    for test in tests:
        try:
            check_conformance_test(test)
        except ConformanceVectorError as e:
            logger.error("%s", e)
            failed_names.append(test.name)
    return failed_names
