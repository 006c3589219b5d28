# Copyright 2026-present Kensho Technologies, LLC.
"""The inputs of the mutation resolver: one dataclass per kind of mutation call."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Tuple, Union

from ..exceptions import MalformedPathError, PreconditionConflictError
from ..field_path import FieldPath
from ..typedefs import FieldMap, ResourcePath
from ..values import parse_timestamp


class MergeAll:
    """The Set merge option that merges every field present in the input data."""

    __slots__ = ()

    def __repr__(self) -> str:
        """Return a human-readable representation of the merge option."""
        return "MERGE_ALL"


MERGE_ALL = MergeAll()

# None for a plain Set, MERGE_ALL, or the explicit field paths to merge.
MergeOption = Union[None, MergeAll, Tuple[FieldPath, ...]]


@dataclass(frozen=True)
class Precondition:
    """A write-time assertion about the target document. Exactly one condition must be set."""

    exists: Optional[bool] = None
    update_time: Optional[datetime] = None

    def __post_init__(self) -> None:
        """Ensure that exactly one condition is set, and normalize the update time to UTC."""
        if (self.exists is None) == (self.update_time is None):
            raise PreconditionConflictError(
                f"A precondition must set exactly one of exists and update_time: {self}"
            )
        if self.exists is not None and not isinstance(self.exists, bool):
            raise PreconditionConflictError(
                f"Expected a boolean exists precondition, got {self.exists!r}"
            )
        if self.update_time is not None:
            # Per the docs, frozen dataclasses use object.__setattr__() to write their attributes.
            object.__setattr__(self, "update_time", parse_timestamp(self.update_time))


@dataclass(frozen=True)
class CreateSpec:
    """Create a document that must not already exist. Map keys are taken literally."""

    document_path: ResourcePath
    data: FieldMap = field(default_factory=dict)


@dataclass(frozen=True)
class SetSpec:
    """Replace a document, or merge into it when a merge option is given."""

    document_path: ResourcePath
    data: FieldMap = field(default_factory=dict)
    merge: MergeOption = None

    def __post_init__(self) -> None:
        """Normalize explicit merge fields into a tuple of FieldPath objects."""
        if self.merge is None or isinstance(self.merge, MergeAll):
            return

        merge_fields = tuple(self.merge)
        for merge_field in merge_fields:
            if not isinstance(merge_field, FieldPath):
                raise MalformedPathError(
                    f"Expected FieldPath objects as merge fields, got {type(merge_field).__name__} "
                    f"{merge_field!r}"
                )
        object.__setattr__(self, "merge", merge_fields)


@dataclass(frozen=True)
class UpdateSpec:
    """Update fields of an existing document. Top-level keys are dotted field path strings."""

    document_path: ResourcePath
    data: FieldMap = field(default_factory=dict)
    precondition: Optional[Precondition] = None


@dataclass(frozen=True)
class UpdatePathsSpec:
    """Update fields of an existing document, given as (FieldPath, value) pairs."""

    document_path: ResourcePath
    field_updates: Tuple[Tuple[FieldPath, Any], ...] = ()
    precondition: Optional[Precondition] = None

    def __post_init__(self) -> None:
        """Normalize the field updates into a tuple of pairs."""
        object.__setattr__(
            self, "field_updates", tuple((path, value) for path, value in self.field_updates)
        )


@dataclass(frozen=True)
class DeleteSpec:
    """Delete a document, optionally guarded by a precondition."""

    document_path: ResourcePath
    precondition: Optional[Precondition] = None


MutationSpec = Union[CreateSpec, SetSpec, UpdateSpec, UpdatePathsSpec, DeleteSpec]
