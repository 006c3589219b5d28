# Copyright 2026-present Kensho Technologies, LLC.
"""The outputs of the mutation resolver."""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Union

from ..field_path import FieldPath
from ..typedefs import FieldMap, ResourcePath
from ..values import ArrayRemove, ArrayUnion, ServerTimestamp, TransformSentinel
from .specs import Precondition


class TransformKind(Enum):
    """The server-side operations a field transform can perform."""

    REQUEST_TIME = "setToServerValue"
    APPEND_MISSING_ELEMENTS = "appendMissingElements"
    REMOVE_ALL_FROM_ARRAY = "removeAllFromArray"


@dataclass(frozen=True)
class FieldTransform:
    """A transform of a single field, addressed by its dotted field path string."""

    field_path: str
    kind: TransformKind

    # The array elements for APPEND_MISSING_ELEMENTS and REMOVE_ALL_FROM_ARRAY, else empty.
    elements: Tuple[Any, ...] = ()

    @classmethod
    def from_sentinel(cls, field_path: FieldPath, sentinel: TransformSentinel) -> "FieldTransform":
        """Return the FieldTransform that applies the given sentinel at the given path."""
        rendered_path = field_path.to_api_repr()
        if isinstance(sentinel, ServerTimestamp):
            return cls(rendered_path, TransformKind.REQUEST_TIME)
        elif isinstance(sentinel, ArrayUnion):
            return cls(rendered_path, TransformKind.APPEND_MISSING_ELEMENTS, sentinel.elements)
        elif isinstance(sentinel, ArrayRemove):
            return cls(rendered_path, TransformKind.REMOVE_ALL_FROM_ARRAY, sentinel.elements)
        else:
            raise AssertionError(f"Unreachable code reached: {field_path} {sentinel}")


@dataclass(frozen=True)
class UpdateWrite:
    """Write fields of a document, replacing it entirely unless an update mask is present."""

    document_path: ResourcePath
    fields: FieldMap

    # The dotted field paths the write may touch, or None for a full-document write.
    update_mask: Optional[Tuple[str, ...]] = None

    current_document: Optional[Precondition] = None


@dataclass(frozen=True)
class TransformWrite:
    """Apply server-side field transforms to a document."""

    document_path: ResourcePath
    field_transforms: Tuple[FieldTransform, ...]
    current_document: Optional[Precondition] = None


@dataclass(frozen=True)
class DeleteWrite:
    """Delete a document."""

    document_path: ResourcePath
    current_document: Optional[Precondition] = None


Write = Union[UpdateWrite, TransformWrite, DeleteWrite]
