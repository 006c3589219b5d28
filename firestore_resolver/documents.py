# Copyright 2026-present Kensho Technologies, LLC.
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from .field_path import FieldPath
from .paths import split_document_path
from .typedefs import FieldMap, ResourcePath


@dataclass(frozen=True)
class Document:
    """A stored document: its resource path, its fields, and its creation and update times."""

    # The full resource path of the document.
    name: ResourcePath

    # Field name -> value. Never contains sentinels.
    fields: FieldMap = field(default_factory=dict)

    create_time: Optional[datetime] = None

    # The watch engine uses the update time, and only the update time, to detect changes.
    update_time: Optional[datetime] = None

    @property
    def document_id(self) -> str:
        """Return the last segment of the document's resource path."""
        _, document_id = split_document_path(self.name)
        return document_id

    @property
    def parent_path(self) -> ResourcePath:
        """Return the resource path of the collection that contains the document."""
        parent_path, _ = split_document_path(self.name)
        return parent_path

    def get_field_value(self, field_path: FieldPath) -> Any:
        """Return the value at the given field path. Raise KeyError if there is none."""
        return get_field_value(self.fields, field_path)

    def is_same_version(self, other: "Document") -> bool:
        """Return True if both objects describe the same version of the same document."""
        return self.name == other.name and self.update_time == other.update_time


def get_field_value(fields: FieldMap, field_path: FieldPath) -> Any:
    """Return the value at the given field path of a field map. Raise KeyError if there is none."""
    current: Any = fields
    for part in field_path.parts:
        if not isinstance(current, dict) or part not in current:
            raise KeyError(field_path.to_api_repr())
        current = current[part]
    return current


def has_field_value(fields: FieldMap, field_path: FieldPath) -> bool:
    """Return True if the field map has a value at the given field path."""
    try:
        get_field_value(fields, field_path)
    except KeyError:
        return False
    return True


def set_field_value(fields: Dict[str, Any], field_path: FieldPath, value: Any) -> None:
    """Set the value at the given field path, creating intermediate maps as needed."""
    current = fields
    for part in field_path.parts[:-1]:
        next_value = current.setdefault(part, {})
        if not isinstance(next_value, dict):
            raise AssertionError(
                f"Cannot set {field_path} since {part} already holds a non-map value: "
                f"{fields}"
            )
        current = next_value
    current[field_path.parts[-1]] = value
