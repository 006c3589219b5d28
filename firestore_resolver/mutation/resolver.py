# Copyright 2026-present Kensho Technologies, LLC.
"""Resolve mutation calls into the ordered list of writes sent to the server.

A single call resolves to at most two writes for the same document: an update write carrying the
stored values and the update mask, followed by a transform write carrying the server-side field
transforms. The precondition of the call, if any, is attached to whichever write comes first.
"""
from copy import deepcopy
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ..documents import get_field_value, has_field_value, set_field_value
from ..exceptions import MalformedPathError, PreconditionConflictError, SentinelMisuseError
from ..field_path import FieldPath, validate_no_path_conflicts
from ..global_utils import merge_non_overlapping_dicts
from ..paths import validate_document_path
from ..typedefs import FieldMap, ResourcePath
from ..values import DeleteField, TransformSentinel
from .extraction import extract_sentinels, validate_stored_value, validate_transform_sentinel
from .specs import (
    CreateSpec,
    DeleteSpec,
    MergeAll,
    MutationSpec,
    Precondition,
    SetSpec,
    UpdatePathsSpec,
    UpdateSpec,
)
from .writes import DeleteWrite, FieldTransform, TransformWrite, UpdateWrite, Write


logger = logging.getLogger(__name__)


def _render_mask(field_paths: Iterable[FieldPath]) -> Tuple[str, ...]:
    """Return the sorted dotted strings of the given field paths."""
    return tuple(field_path.to_api_repr() for field_path in sorted(field_paths))


def _build_writes(
    document_path: ResourcePath,
    fields: FieldMap,
    update_mask: Optional[Tuple[str, ...]],
    emit_update: bool,
    transforms: Dict[FieldPath, TransformSentinel],
    precondition: Optional[Precondition],
) -> List[Write]:
    """Assemble the update and transform writes, attaching the precondition to the first one."""
    writes: List[Write] = []
    if emit_update:
        writes.append(UpdateWrite(document_path, fields, update_mask, precondition))
        precondition = None

    if transforms:
        field_transforms = tuple(
            FieldTransform.from_sentinel(field_path, transforms[field_path])
            for field_path in sorted(transforms)
        )
        writes.append(TransformWrite(document_path, field_transforms, precondition))

    return writes


def _raise_if_deleting(deleted_paths: Sequence[FieldPath], call_description: str) -> None:
    """Raise SentinelMisuseError if any Delete sentinel was found in the input data."""
    if deleted_paths:
        raise SentinelMisuseError(
            f"Delete may not be used in {call_description}, but was found at "
            f"{', '.join(str(field_path) for field_path in deleted_paths)}."
        )


def _resolve_create(spec: CreateSpec) -> List[Write]:
    """Resolve a Create call: a full-document write that requires the document to not exist."""
    extracted = extract_sentinels(spec.data)
    _raise_if_deleting(extracted.deleted_paths, "Create")

    # A Create of nothing but transforms is carried entirely by the transform write.
    emit_update = bool(extracted.data) or not extracted.transforms
    return _build_writes(
        spec.document_path,
        extracted.data,
        None,
        emit_update,
        extracted.transforms,
        Precondition(exists=False),
    )


def _resolve_set(spec: SetSpec) -> List[Write]:
    """Resolve a Set call without a merge option: a full-document replacement."""
    extracted = extract_sentinels(spec.data)
    _raise_if_deleting(extracted.deleted_paths, "Set without a merge option")

    # The update write is emitted even when it is empty, since it clears the existing document.
    return _build_writes(spec.document_path, extracted.data, None, True, extracted.transforms, None)


def _resolve_set_merge_all(spec: SetSpec) -> List[Write]:
    """Resolve a Set call that merges every field present in the input data."""
    extracted = extract_sentinels(spec.data)
    mask_paths = extracted.leaf_paths + extracted.deleted_paths

    emit_update = bool(mask_paths) or not extracted.transforms
    return _build_writes(
        spec.document_path,
        extracted.data,
        _render_mask(mask_paths),
        emit_update,
        extracted.transforms,
        None,
    )


def _is_within_merge_fields(field_path: FieldPath, merge_fields: Sequence[FieldPath]) -> bool:
    """Return True if the field path is one of the merge fields, or lies underneath one."""
    return any(
        merge_field == field_path or merge_field.is_prefix_of(field_path)
        for merge_field in merge_fields
    )


def _resolve_set_merge_fields(spec: SetSpec, merge_fields: Sequence[FieldPath]) -> List[Write]:
    """Resolve a Set call that merges only the given fields of the input data."""
    if not merge_fields:
        raise MalformedPathError(
            f"A Set call that merges explicit fields must name at least one field: {spec}"
        )
    validate_no_path_conflicts(merge_fields, "merge")

    for merge_field in merge_fields:
        if not has_field_value(spec.data, merge_field):
            raise MalformedPathError(
                f"The merge field {merge_field} is not present in the data of the Set call: "
                f"{spec.data}"
            )

    extracted = extract_sentinels(spec.data)
    for deleted_path in extracted.deleted_paths:
        if deleted_path not in merge_fields:
            raise SentinelMisuseError(
                f"Delete in a Set call with explicit merge fields must be exactly at a merge "
                f"field, but was found at {deleted_path}. Merge fields: "
                f"{', '.join(str(merge_field) for merge_field in merge_fields)}"
            )

    fields: FieldMap = {}
    mask_paths: List[FieldPath] = []
    for merge_field in merge_fields:
        if isinstance(get_field_value(spec.data, merge_field), TransformSentinel):
            # The transform write alone carries this field.
            continue
        mask_paths.append(merge_field)
        if has_field_value(extracted.data, merge_field):
            set_field_value(fields, merge_field, get_field_value(extracted.data, merge_field))

    transforms: Dict[FieldPath, TransformSentinel] = {}
    for field_path, sentinel in extracted.transforms.items():
        if _is_within_merge_fields(field_path, merge_fields):
            transforms[field_path] = sentinel
        else:
            logger.debug(
                "Dropping the transform at %s since it is outside every merge field.", field_path
            )

    emit_update = bool(mask_paths) or not transforms
    return _build_writes(
        spec.document_path, fields, _render_mask(mask_paths), emit_update, transforms, None
    )


def _get_update_precondition(precondition: Optional[Precondition]) -> Precondition:
    """Return the precondition of an Update call, which always requires the document to exist."""
    if precondition is None:
        return Precondition(exists=True)
    elif precondition.exists is not None:
        raise PreconditionConflictError(
            f"Update calls always require the document to exist, and may only be given an "
            f"update_time precondition. Got: {precondition}"
        )
    else:
        return precondition


def _resolve_field_updates(
    document_path: ResourcePath,
    field_updates: Sequence[Tuple[FieldPath, Any]],
    precondition: Optional[Precondition],
) -> List[Write]:
    """Resolve the (field path, value) pairs of an Update or UpdatePaths call."""
    if not field_updates:
        raise MalformedPathError(
            f"An update of {document_path} must supply at least one field path."
        )
    current_document = _get_update_precondition(precondition)
    validate_no_path_conflicts((field_path for field_path, _ in field_updates), "update")

    fields: FieldMap = {}
    mask_paths: List[FieldPath] = []
    transforms: Dict[FieldPath, TransformSentinel] = {}
    for field_path, value in field_updates:
        if isinstance(value, DeleteField):
            mask_paths.append(field_path)
        elif isinstance(value, TransformSentinel):
            validate_transform_sentinel(field_path, value)
            transforms[field_path] = value
        elif isinstance(value, dict):
            extracted = extract_sentinels(value, prefix=field_path)
            if extracted.deleted_paths:
                raise SentinelMisuseError(
                    f"Delete may only appear as the value of a top-level update path, but "
                    f"was found nested at {extracted.deleted_paths[0]}."
                )
            transforms = merge_non_overlapping_dicts(transforms, extracted.transforms)
            mask_paths.append(field_path)
            # A map whose contents were all transforms is not written, but stays in the mask.
            if extracted.data or not value:
                set_field_value(fields, field_path, extracted.data)
        else:
            validate_stored_value(field_path, value)
            mask_paths.append(field_path)
            set_field_value(fields, field_path, deepcopy(value))

    return _build_writes(
        document_path,
        fields,
        _render_mask(mask_paths),
        bool(mask_paths),
        transforms,
        current_document,
    )


def _resolve_update(spec: UpdateSpec) -> List[Write]:
    """Resolve an Update call, splitting each top-level key into a field path."""
    if not isinstance(spec.data, dict):
        raise MalformedPathError(f"Expected a map of field paths to values, got {spec.data!r}")
    field_updates = [
        (FieldPath.from_dotted_string(key), value) for key, value in spec.data.items()
    ]
    return _resolve_field_updates(spec.document_path, field_updates, spec.precondition)


def _resolve_update_paths(spec: UpdatePathsSpec) -> List[Write]:
    """Resolve an UpdatePaths call, whose field paths are never split."""
    for field_path, _ in spec.field_updates:
        if not isinstance(field_path, FieldPath):
            raise MalformedPathError(
                f"Expected FieldPath objects as update paths, got {type(field_path).__name__} "
                f"{field_path!r}"
            )
    return _resolve_field_updates(spec.document_path, spec.field_updates, spec.precondition)


def _resolve_delete(spec: DeleteSpec) -> List[Write]:
    """Resolve a Delete call into a single delete write."""
    return [DeleteWrite(spec.document_path, spec.precondition)]


def resolve_mutation(spec: MutationSpec) -> List[Write]:
    """Resolve a mutation call into the writes to send to the server.

    Args:
        spec: the mutation call: CreateSpec, SetSpec, UpdateSpec, UpdatePathsSpec or DeleteSpec

    Returns:
        list of zero, one or two writes, in the order in which they must be applied

    Raises:
        FirestoreValidationError subclass if the call is invalid; no partial output is produced
    """
    validate_document_path(spec.document_path)

    if isinstance(spec, CreateSpec):
        return _resolve_create(spec)
    elif isinstance(spec, SetSpec):
        if spec.merge is None:
            return _resolve_set(spec)
        elif isinstance(spec.merge, MergeAll):
            return _resolve_set_merge_all(spec)
        else:
            return _resolve_set_merge_fields(spec, spec.merge)
    elif isinstance(spec, UpdateSpec):
        return _resolve_update(spec)
    elif isinstance(spec, UpdatePathsSpec):
        return _resolve_update_paths(spec)
    elif isinstance(spec, DeleteSpec):
        return _resolve_delete(spec)
    else:
        raise AssertionError(f"Unreachable code reached: unknown mutation spec type {spec}")
