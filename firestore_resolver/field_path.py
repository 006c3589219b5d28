# Copyright 2026-present Kensho Technologies, LLC.
"""Field paths: validation, parsing of dotted Update keys, and rendering for update masks."""
from functools import total_ordering
import re
from typing import Any, Iterable, List, Tuple

from .exceptions import MalformedPathError
from .typedefs import FieldPathParts


# The special field name that refers to a document's identity in queries.
DOCUMENT_ID_FIELD_NAME = "__name__"

# Components matching this pattern are rendered as-is; all others are back-tick quoted.
SIMPLE_COMPONENT_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Characters that may only appear in an Update key inside a back-tick quoted component.
RESERVED_UNQUOTED_CHARS = frozenset("~*/[]`")

_QUOTE = "`"
_ESCAPE = "\\"
_SEPARATOR = "."


def _quote_component(component: str) -> str:
    """Return the component as it should appear in a dotted field path string."""
    if SIMPLE_COMPONENT_PATTERN.match(component):
        return component
    escaped = component.replace(_ESCAPE, _ESCAPE + _ESCAPE).replace(_QUOTE, _ESCAPE + _QUOTE)
    return _QUOTE + escaped + _QUOTE


@total_ordering
class FieldPath:
    """An ordered, non-empty sequence of non-empty field name components."""

    __slots__ = ("parts",)

    parts: FieldPathParts

    def __init__(self, *parts: str) -> None:
        """Construct a new FieldPath from its components, which are never split or interpreted.

        Args:
            parts: the field names along the path, from the top-level field downwards

        Returns:
            new FieldPath object
        """
        self.parts = tuple(parts)
        self.validate()

    def validate(self) -> None:
        """Ensure that the FieldPath is valid."""
        if not self.parts:
            raise MalformedPathError("A field path must have at least one component.")

        for part in self.parts:
            if not isinstance(part, str):
                raise MalformedPathError(
                    f"Expected string field path components, got {type(part).__name__} "
                    f"{part!r} in {self.parts}"
                )
            if not part:
                raise MalformedPathError(f"Field path {self.parts} has an empty component.")

    @classmethod
    def from_dotted_string(cls, dotted_string: str) -> "FieldPath":
        """Parse a dotted field path string, as accepted for the top-level keys of Update.

        Components are separated by dots. A component may be wrapped in back-ticks, in which case
        it may contain any character; inside back-ticks, a backslash escapes the next character.
        Unquoted components may not contain any of the characters ~ * / [ ] or a back-tick.
        """
        if not isinstance(dotted_string, str):
            raise MalformedPathError(
                f"Expected a string field path, got {type(dotted_string).__name__} "
                f"{dotted_string!r}"
            )

        parts: List[str] = []
        index = 0
        length = len(dotted_string)
        while True:
            if index < length and dotted_string[index] == _QUOTE:
                component, index = _read_quoted_component(dotted_string, index)
            else:
                component, index = _read_unquoted_component(dotted_string, index)

            if not component:
                raise MalformedPathError(
                    f"Field path {dotted_string!r} has an empty component."
                )
            parts.append(component)

            if index == length:
                break
            # _read_*_component() stop only at a separator or at the end of the string.
            index += 1
            if index == length:
                raise MalformedPathError(f"Field path {dotted_string!r} ends with a separator.")

        return cls(*parts)

    @classmethod
    def document_id(cls) -> "FieldPath":
        """Return the field path that refers to a document's identity."""
        return cls(DOCUMENT_ID_FIELD_NAME)

    def is_document_id(self) -> bool:
        """Return True if this field path refers to a document's identity."""
        return self.parts == (DOCUMENT_ID_FIELD_NAME,)

    def to_api_repr(self) -> str:
        """Return the dotted string form used in update masks and field references."""
        return _SEPARATOR.join(_quote_component(part) for part in self.parts)

    def child(self, component: str) -> "FieldPath":
        """Return a new FieldPath that extends this one by a single component."""
        return FieldPath(*(self.parts + (component,)))

    def is_prefix_of(self, other: "FieldPath") -> bool:
        """Return True if this path is a strict prefix of the other path."""
        return len(self.parts) < len(other.parts) and other.parts[: len(self.parts)] == self.parts

    def __eq__(self, other: Any) -> bool:
        """Return True if the other FieldPath has the same components."""
        return isinstance(other, FieldPath) and self.parts == other.parts

    def __lt__(self, other: "FieldPath") -> bool:
        """Order field paths by comparing their components lexicographically."""
        return self.parts < other.parts

    def __hash__(self) -> int:
        """Hash by components."""
        return hash(self.parts)

    def __repr__(self) -> str:
        """Return a human-readable representation of the FieldPath."""
        return "FieldPath({})".format(", ".join(repr(part) for part in self.parts))

    def __str__(self) -> str:
        """Return the dotted string form of the FieldPath."""
        return self.to_api_repr()


def _read_quoted_component(dotted_string: str, start: int) -> Tuple[str, int]:
    """Read a back-tick quoted component starting at the opening quote.

    Returns:
        tuple (component, index), where index points to the separator after the closing quote,
        or to the end of the string
    """
    characters: List[str] = []
    index = start + 1
    while index < len(dotted_string):
        character = dotted_string[index]
        if character == _ESCAPE:
            if index + 1 == len(dotted_string):
                break
            characters.append(dotted_string[index + 1])
            index += 2
        elif character == _QUOTE:
            index += 1
            if index < len(dotted_string) and dotted_string[index] != _SEPARATOR:
                raise MalformedPathError(
                    f"Field path {dotted_string!r} has characters after a closing back-tick."
                )
            return "".join(characters), index
        else:
            characters.append(character)
            index += 1

    raise MalformedPathError(f"Field path {dotted_string!r} has an unterminated back-tick.")


def _read_unquoted_component(dotted_string: str, start: int) -> Tuple[str, int]:
    """Read an unquoted component, stopping at the next separator or at the end of the string."""
    end = dotted_string.find(_SEPARATOR, start)
    if end == -1:
        end = len(dotted_string)

    component = dotted_string[start:end]
    reserved = RESERVED_UNQUOTED_CHARS.intersection(component)
    if reserved:
        raise MalformedPathError(
            f"Field path {dotted_string!r} contains the reserved characters {sorted(reserved)}; "
            f"components containing them must be wrapped in back-ticks."
        )
    return component, end


def validate_no_path_conflicts(field_paths: Iterable[FieldPath], description: str) -> None:
    """Ensure no field path is repeated, and no field path is a prefix of another.

    Args:
        field_paths: the paths supplied to a single call
        description: what the paths are, used in the error message, e.g. "update" or "merge"
    """
    sorted_paths = sorted(field_paths)
    for previous, current in zip(sorted_paths, sorted_paths[1:]):
        if previous == current:
            raise MalformedPathError(
                f"The {description} field path {previous} was supplied more than once."
            )
        # In sorted order, any prefix sorts immediately before some path it is a prefix of.
        if previous.is_prefix_of(current):
            raise MalformedPathError(
                f"The {description} field path {previous} is a prefix of the {description} "
                f"field path {current}."
            )
