# Copyright 2026-present Kensho Technologies, LLC.
"""The conformance vectors: calls and the requests, queries or snapshots they must produce."""
from datetime import datetime
from typing import Any, Sequence, Tuple

from ..documents import Document
from ..field_path import FieldPath
from ..mutation.specs import MERGE_ALL, Precondition
from ..mutation.writes import FieldTransform, TransformKind
from ..paths import DatabaseInfo
from ..query.structured_query import (
    CompositeFilter,
    CompositeOperator,
    CursorBound,
    Direction,
    FieldFilter,
    FieldOperator,
    Order,
    StructuredQuery,
    UnaryFilter,
    UnaryOperator,
)
from ..values import Reference, timestamp_from_seconds
from ..watch.events import (
    NO_INDEX,
    ChangeKind,
    DocChange,
    DocumentChange,
    DocumentDelete,
    DocumentRemove,
    ExistenceFilter,
    Snapshot,
    TargetChange,
    TargetChangeType,
)
from .model import (
    CursorData,
    CursorKind,
    DocSnapshotData,
    LimitData,
    ListenVector,
    OffsetData,
    OrderByData,
    QueryVector,
    SelectData,
    WhereData,
    WriteVector,
)


DATABASE_INFO = DatabaseInfo("projectID")
DATABASE_PATH = DATABASE_INFO.database_path
COLLECTION_PATH = DATABASE_INFO.collection_path("C")
DOCUMENT_PATH = DATABASE_INFO.document_path("C", "d")
WATCH_TARGET_ID = 1

# Listen vectors run against a query on COLLECTION_PATH with these clauses.
LISTEN_QUERY_CLAUSES = (OrderByData(("a",), "asc"),)

UPDATE_TIME_PRECONDITION = Precondition(update_time=timestamp_from_seconds(42))
EXISTS_TRUE_PRECONDITION = Precondition(exists=True)
EXISTS_FALSE_PRECONDITION = Precondition(exists=False)


def _server_timestamp(field_path: str) -> FieldTransform:
    return FieldTransform(field_path, TransformKind.REQUEST_TIME)


def _array_union(field_path: str, *elements: Any) -> FieldTransform:
    return FieldTransform(field_path, TransformKind.APPEND_MISSING_ELEMENTS, elements)


def _array_remove(field_path: str, *elements: Any) -> FieldTransform:
    return FieldTransform(field_path, TransformKind.REMOVE_ALL_FROM_ARRAY, elements)


BASIC_VECTORS: Tuple[WriteVector, ...] = (
    WriteVector(
        suffix="basic",
        description="basic",
        comment="A simple call, resulting in a single update operation.",
        json_data='{"a": 1}',
        paths=(("a",),),
        json_values=("1",),
        update_mask=("a",),
        out_data={"a": 1},
    ),
    WriteVector(
        suffix="complex",
        description="complex",
        comment="A call to a write method with complicated input data.",
        json_data='{"a": [1, 2.5], "b": {"c": ["three", {"d": true}]}}',
        paths=(("a",), ("b",)),
        json_values=("[1, 2.5]", '{"c": ["three", {"d": true}]}'),
        update_mask=("a", "b"),
        out_data={"a": [1, 2.5], "b": {"c": ["three", {"d": True}]}},
    ),
)

CREATE_SET_VECTORS: Tuple[WriteVector, ...] = (
    WriteVector(
        suffix="empty",
        description="creating or setting an empty map",
        json_data="{}",
        out_data={},
    ),
    WriteVector(
        suffix="nosplit",
        description="don't split on dots",
        comment="Create and Set treat their map keys literally. They do not split on dots.",
        json_data='{ "a.b": { "c.d": 1 }, "e": 2 }',
        out_data={"a.b": {"c.d": 1}, "e": 2},
    ),
    WriteVector(
        suffix="special-chars",
        description="non-alpha characters in map keys",
        comment=(
            "Create and Set treat their map keys literally. They do not escape special "
            "characters."
        ),
        json_data='{ "*": { ".": 1 }, "~": 2 }',
        out_data={"*": {".": 1}, "~": 2},
    ),
    WriteVector(
        suffix="nodel",
        description="Delete cannot appear in data",
        comment="The Delete sentinel cannot be used in Create, or in Set without a Merge option.",
        json_data='{"a": 1, "b": "Delete"}',
        is_error=True,
    ),
)

UPDATE_VECTORS: Tuple[WriteVector, ...] = (
    WriteVector(
        suffix="del",
        description="Delete",
        comment=(
            "If a field's value is the Delete sentinel, then it doesn't appear in the update "
            "data, but does in the mask."
        ),
        json_data='{"a": 1, "b": "Delete"}',
        paths=(("a",), ("b",)),
        json_values=("1", '"Delete"'),
        out_data={"a": 1},
        mask=("a", "b"),
    ),
    WriteVector(
        suffix="del-alone",
        description="Delete alone",
        comment=(
            "If the input data consists solely of Deletes, then the update operation has no "
            "map, just an update mask."
        ),
        json_data='{"a": "Delete"}',
        paths=(("a",),),
        json_values=('"Delete"',),
        mask=("a",),
    ),
    WriteVector(
        suffix="uptime",
        description="last-update-time precondition",
        comment="The Update call supports a last-update-time precondition.",
        json_data='{"a": 1}',
        paths=(("a",),),
        json_values=("1",),
        precondition=UPDATE_TIME_PRECONDITION,
        out_data={"a": 1},
        mask=("a",),
    ),
    WriteVector(
        suffix="no-paths",
        description="no paths",
        comment="It is a client-side error to call Update with empty data.",
        json_data="{}",
        paths=(),
        json_values=(),
        is_error=True,
    ),
    WriteVector(
        suffix="fp-empty-component",
        description="empty field path component",
        comment="Empty fields are not allowed.",
        json_data='{"a..b": 1}',
        paths=(("*", ""),),
        json_values=("1",),
        is_error=True,
    ),
    WriteVector(
        suffix="prefix-1",
        description="prefix #1",
        comment="In the input data, one field cannot be a prefix of another.",
        json_data='{"a.b": 1, "a": 2}',
        paths=(("a", "b"), ("a",)),
        json_values=("1", "2"),
        is_error=True,
    ),
    WriteVector(
        suffix="prefix-2",
        description="prefix #2",
        comment="In the input data, one field cannot be a prefix of another.",
        json_data='{"a": 1, "a.b": 2}',
        paths=(("a",), ("a", "b")),
        json_values=("1", "2"),
        is_error=True,
    ),
    WriteVector(
        suffix="prefix-3",
        description="prefix #3",
        comment=(
            "In the input data, one field cannot be a prefix of another, even if the values "
            "could in principle be combined."
        ),
        json_data='{"a": {"b": 1}, "a.d": 2}',
        paths=(("a",), ("a", "d")),
        json_values=('{"b": 1}', "2"),
        is_error=True,
    ),
    WriteVector(
        suffix="del-nested",
        description="Delete cannot be nested",
        comment="The Delete sentinel must be the value of a top-level key.",
        json_data='{"a": {"b": "Delete"}}',
        paths=(("a",),),
        json_values=('{"b": "Delete"}',),
        is_error=True,
    ),
    WriteVector(
        suffix="exists-precond",
        description="Exists precondition is invalid",
        comment="The Update method does not support an explicit exists precondition.",
        json_data='{"a": 1}',
        paths=(("a",),),
        json_values=("1",),
        precondition=EXISTS_TRUE_PRECONDITION,
        is_error=True,
    ),
    WriteVector(
        suffix="st-alone",
        description="ServerTimestamp alone",
        comment=(
            "If the only values in the input are ServerTimestamps, then no update operation "
            "should be produced."
        ),
        json_data='{"a": "ServerTimestamp"}',
        paths=(("a",),),
        json_values=('"ServerTimestamp"',),
        transforms=(_server_timestamp("a"),),
    ),
    WriteVector(
        suffix="nested-single-value",
        description=(
            "Updating a nested value results in update masks that are tightly scoped to that "
            "specific field."
        ),
        comment=(
            "Changing a.b sends an update that's scoped specifically to a.b, instead of sending "
            "an update that changes the entirety of a. Its field key should be a.b: 7, not "
            "a: b: 7, which would entirely replace all of a and blow away anything other "
            "than a.b."
        ),
        json_data='{"a.b": 7}',
        paths=(("a", "b"),),
        json_values=("7",),
        out_data={"a": {"b": 7}},
        update_mask=("a.b",),
    ),
    WriteVector(
        suffix="arrayunion-alone",
        description="ArrayUnion alone",
        comment=(
            "If the only values in the input are ArrayUnion, then no update operation should "
            "be produced."
        ),
        json_data='{"a": ["ArrayUnion", 1, 2, 3]}',
        paths=(("a",),),
        json_values=('["ArrayUnion", 1, 2, 3]',),
        transforms=(_array_union("a", 1, 2, 3),),
    ),
    WriteVector(
        suffix="arrayremove-alone",
        description="ArrayRemove alone",
        comment=(
            "If the only values in the input are ArrayRemove, then no update operation should "
            "be produced."
        ),
        json_data='{"a": ["ArrayRemove", 1, 2, 3]}',
        paths=(("a",),),
        json_values=('["ArrayRemove", 1, 2, 3]',),
        transforms=(_array_remove("a", 1, 2, 3),),
    ),
)

_MULTI_UPDATE_COMMENT = (
    "b is not in the mask because it will be set in the transform. c must be in the mask: it "
    "should be replaced entirely. The transform will set c.d, but the update will delete the "
    "rest of c."
)

TRANSFORM_VECTORS: Tuple[WriteVector, ...] = (
    WriteVector(
        suffix="all-transforms",
        description="all transforms in a single call",
        comment="A document can be created with any amount of transforms.",
        json_data=(
            '{"a": 1, "b": "ServerTimestamp", "c": ["ArrayUnion", 1, 2, 3], '
            '"d": ["ArrayRemove", 4, 5, 6]}'
        ),
        paths=(("a",), ("b",), ("c",), ("d",)),
        json_values=(
            "1",
            '"ServerTimestamp"',
            '["ArrayUnion", 1, 2, 3]',
            '["ArrayRemove", 4, 5, 6]',
        ),
        out_data={"a": 1},
        update_mask=("a",),
        transforms=(
            _server_timestamp("b"),
            _array_union("c", 1, 2, 3),
            _array_remove("d", 4, 5, 6),
        ),
    ),
    WriteVector(
        suffix="st",
        description="ServerTimestamp with data",
        comment=(
            "A key with the special ServerTimestamp sentinel is removed from the data in the "
            "update operation. Instead it appears in a separate Transform operation. Note that "
            'in these tests, the string "ServerTimestamp" should be replaced with the special '
            "ServerTimestamp value."
        ),
        json_data='{"a": 1, "b": "ServerTimestamp"}',
        paths=(("a",), ("b",)),
        json_values=("1", '"ServerTimestamp"'),
        out_data={"a": 1},
        update_mask=("a",),
        transforms=(_server_timestamp("b"),),
    ),
    WriteVector(
        suffix="arrayunion",
        description="ArrayUnion with data",
        comment=(
            "A key with ArrayUnion is removed from the data in the update operation. Instead "
            "it appears in a separate Transform operation."
        ),
        json_data='{"a": 1, "b": ["ArrayUnion", 1, 2, 3]}',
        paths=(("a",), ("b",)),
        json_values=("1", '["ArrayUnion", 1, 2, 3]'),
        out_data={"a": 1},
        update_mask=("a",),
        transforms=(_array_union("b", 1, 2, 3),),
    ),
    WriteVector(
        suffix="arrayremove",
        description="ArrayRemove with data",
        comment=(
            "A key with ArrayRemove is removed from the data in the update operation. Instead "
            "it appears in a separate Transform operation."
        ),
        json_data='{"a": 1, "b": ["ArrayRemove", 1, 2, 3]}',
        paths=(("a",), ("b",)),
        json_values=("1", '["ArrayRemove", 1, 2, 3]'),
        out_data={"a": 1},
        update_mask=("a",),
        transforms=(_array_remove("b", 1, 2, 3),),
    ),
    WriteVector(
        suffix="st-nested",
        description="nested ServerTimestamp field",
        comment=(
            'A ServerTimestamp value can occur at any depth. In this case, the transform '
            'applies to the field path "b.c". Since "c" is removed from the update, "b" '
            "becomes empty, so it is also removed from the update."
        ),
        json_data='{"a": 1, "b": {"c": "ServerTimestamp"}}',
        paths=(("a",), ("b",)),
        json_values=("1", '{"c": "ServerTimestamp"}'),
        out_data={"a": 1},
        update_mask=("a", "b"),
        transforms=(_server_timestamp("b.c"),),
    ),
    WriteVector(
        suffix="arrayunion-nested",
        description="nested ArrayUnion field",
        comment=(
            'An ArrayUnion value can occur at any depth. In this case, the transform applies '
            'to the field path "b.c". Since "c" is removed from the update, "b" becomes '
            "empty, so it is also removed from the update."
        ),
        json_data='{"a": 1, "b": {"c": ["ArrayUnion", 1, 2, 3]}}',
        paths=(("a",), ("b",)),
        json_values=("1", '{"c": ["ArrayUnion", 1, 2, 3]}'),
        out_data={"a": 1},
        update_mask=("a", "b"),
        transforms=(_array_union("b.c", 1, 2, 3),),
    ),
    WriteVector(
        suffix="arrayremove-nested",
        description="nested ArrayRemove field",
        comment=(
            'An ArrayRemove value can occur at any depth. In this case, the transform applies '
            'to the field path "b.c". Since "c" is removed from the update, "b" becomes '
            "empty, so it is also removed from the update."
        ),
        json_data='{"a": 1, "b": {"c": ["ArrayRemove", 1, 2, 3]}}',
        paths=(("a",), ("b",)),
        json_values=("1", '{"c": ["ArrayRemove", 1, 2, 3]}'),
        out_data={"a": 1},
        update_mask=("a", "b"),
        transforms=(_array_remove("b.c", 1, 2, 3),),
    ),
    WriteVector(
        suffix="st-multi",
        description="multiple ServerTimestamp fields",
        comment=(
            "A document can have more than one ServerTimestamp field. Since all the "
            'ServerTimestamp fields are removed, the only field in the update is "a".'
        ),
        update_comment=_MULTI_UPDATE_COMMENT,
        json_data='{"a": 1, "b": "ServerTimestamp", "c": {"d": "ServerTimestamp"}}',
        paths=(("a",), ("b",), ("c",)),
        json_values=("1", '"ServerTimestamp"', '{"d": "ServerTimestamp"}'),
        out_data={"a": 1},
        update_mask=("a", "c"),
        transforms=(_server_timestamp("b"), _server_timestamp("c.d")),
    ),
    WriteVector(
        suffix="arrayunion-multi",
        description="multiple ArrayUnion fields",
        comment=(
            "A document can have more than one ArrayUnion field. Since all the ArrayUnion "
            'fields are removed, the only field in the update is "a".'
        ),
        update_comment=_MULTI_UPDATE_COMMENT,
        json_data='{"a": 1, "b": ["ArrayUnion", 1, 2, 3], "c": {"d": ["ArrayUnion", 4, 5, 6]}}',
        paths=(("a",), ("b",), ("c",)),
        json_values=("1", '["ArrayUnion", 1, 2, 3]', '{"d": ["ArrayUnion", 4, 5, 6]}'),
        out_data={"a": 1},
        update_mask=("a", "c"),
        transforms=(_array_union("b", 1, 2, 3), _array_union("c.d", 4, 5, 6)),
    ),
    WriteVector(
        suffix="arrayremove-multi",
        description="multiple ArrayRemove fields",
        comment=(
            "A document can have more than one ArrayRemove field. Since all the ArrayRemove "
            'fields are removed, the only field in the update is "a".'
        ),
        update_comment=_MULTI_UPDATE_COMMENT,
        json_data=(
            '{"a": 1, "b": ["ArrayRemove", 1, 2, 3], "c": {"d": ["ArrayRemove", 4, 5, 6]}}'
        ),
        paths=(("a",), ("b",), ("c",)),
        json_values=("1", '["ArrayRemove", 1, 2, 3]', '{"d": ["ArrayRemove", 4, 5, 6]}'),
        out_data={"a": 1},
        update_mask=("a", "c"),
        transforms=(_array_remove("b", 1, 2, 3), _array_remove("c.d", 4, 5, 6)),
    ),
    WriteVector(
        suffix="st-with-empty-map",
        description="ServerTimestamp beside an empty map",
        comment=(
            "When a ServerTimestamp and a map both reside inside a map, the ServerTimestamp "
            "should be stripped out but the empty map should remain."
        ),
        json_data='{"a": {"b": {}, "c": "ServerTimestamp"}}',
        paths=(("a",),),
        json_values=('{"b": {}, "c": "ServerTimestamp"}',),
        out_data={"a": {"b": {}}},
        update_mask=("a",),
        transforms=(_server_timestamp("a.c"),),
    ),
)

TRANSFORM_ERROR_VECTORS: Tuple[WriteVector, ...] = (
    WriteVector(
        suffix="arrayunion-with-st",
        description="The ServerTimestamp sentinel cannot be in an ArrayUnion",
        comment=(
            "The ServerTimestamp sentinel must be the value of a field. It may not appear in "
            "an ArrayUnion."
        ),
        json_data='{"a": ["ArrayUnion", 1, "ServerTimestamp", 3]}',
        paths=(("a",),),
        json_values=('["ArrayUnion", 1, "ServerTimestamp", 3]',),
        is_error=True,
    ),
    WriteVector(
        suffix="arrayremove-with-st",
        description="The ServerTimestamp sentinel cannot be in an ArrayRemove",
        comment=(
            "The ServerTimestamp sentinel must be the value of a field. It may not appear in "
            "an ArrayRemove."
        ),
        json_data='{"a": ["ArrayRemove", 1, "ServerTimestamp", 3]}',
        paths=(("a",),),
        json_values=('["ArrayRemove", 1, "ServerTimestamp", 3]',),
        is_error=True,
    ),
    WriteVector(
        suffix="st-noarray",
        description="ServerTimestamp cannot be in an array value",
        comment=(
            "The ServerTimestamp sentinel must be the value of a field. Firestore transforms "
            "don't support array indexing."
        ),
        json_data='{"a": [1, 2, "ServerTimestamp"]}',
        paths=(("a",),),
        json_values=('[1, 2, "ServerTimestamp"]',),
        is_error=True,
    ),
    WriteVector(
        suffix="del-noarray",
        description="Delete cannot be in an array value",
        comment=(
            "The Delete sentinel must be the value of a field. Deletes are implemented by "
            "turning the path to the Delete sentinel into a FieldPath, and FieldPaths do not "
            "support array indexing."
        ),
        json_data='{"a": [1, 2, "Delete"]}',
        paths=(("a",),),
        json_values=('[1, 2, "Delete"]',),
        is_error=True,
    ),
    WriteVector(
        suffix="arrayunion-noarray",
        description="ArrayUnion cannot be in an array value",
        comment=(
            "ArrayUnion must be the value of a field. Firestore transforms don't support "
            "array indexing."
        ),
        json_data='{"a": [1, 2, ["ArrayUnion", 1, 2, 3]]}',
        paths=(("a",),),
        json_values=('[1, 2, ["ArrayUnion", 1, 2, 3]]',),
        is_error=True,
    ),
    WriteVector(
        suffix="arrayremove-noarray",
        description="ArrayRemove cannot be in an array value",
        comment=(
            "ArrayRemove must be the value of a field. Firestore transforms don't support "
            "array indexing."
        ),
        json_data='{"a": [1, 2, ["ArrayRemove", 1, 2, 3]]}',
        paths=(("a",),),
        json_values=('[1, 2, ["ArrayRemove", 1, 2, 3]]',),
        is_error=True,
    ),
    WriteVector(
        suffix="st-noarray-nested",
        description="ServerTimestamp cannot be anywhere inside an array value",
        comment=(
            "There cannot be an array value anywhere on the path from the document root to "
            "the ServerTimestamp sentinel. Firestore transforms don't support array indexing."
        ),
        json_data='{"a": [1, {"b": "ServerTimestamp"}]}',
        paths=(("a",),),
        json_values=('[1, {"b": "ServerTimestamp"}]',),
        is_error=True,
    ),
    WriteVector(
        suffix="del-noarray-nested",
        description="Delete cannot be anywhere inside an array value",
        comment=(
            "The Delete sentinel must be the value of a field. Deletes are implemented by "
            "turning the path to the Delete sentinel into a FieldPath, and FieldPaths do not "
            "support array indexing."
        ),
        json_data='{"a": [1, {"b": "Delete"}]}',
        paths=(("a",),),
        json_values=('[1, {"b": "Delete"}]',),
        is_error=True,
    ),
    WriteVector(
        suffix="arrayunion-noarray-nested",
        description="ArrayUnion cannot be anywhere inside an array value",
        comment=(
            "There cannot be an array value anywhere on the path from the document root to "
            "the ArrayUnion. Firestore transforms don't support array indexing."
        ),
        json_data='{"a": [1, {"b": ["ArrayUnion", 1, 2, 3]}]}',
        paths=(("a",),),
        json_values=('[1, {"b": ["ArrayUnion", 1, 2, 3]}]',),
        is_error=True,
    ),
    WriteVector(
        suffix="arrayremove-noarray-nested",
        description="ArrayRemove cannot be anywhere inside an array value",
        comment=(
            "There cannot be an array value anywhere on the path from the document root to "
            "the ArrayRemove. Firestore transforms don't support array indexing."
        ),
        json_data='{"a": [1, {"b": ["ArrayRemove", 1, 2, 3]}]}',
        paths=(("a",),),
        json_values=('[1, {"b": ["ArrayRemove", 1, 2, 3]}]',),
        is_error=True,
    ),
)

CREATE_ONLY_VECTORS: Tuple[WriteVector, ...] = (
    WriteVector(
        suffix="st-alone",
        description="ServerTimestamp alone",
        comment=(
            "If the only values in the input are ServerTimestamps, then no update operation "
            "should be produced."
        ),
        json_data='{"a": "ServerTimestamp"}',
        paths=(("a",),),
        json_values=('"ServerTimestamp"',),
        transforms=(_server_timestamp("a"),),
    ),
)

SET_ONLY_VECTORS: Tuple[WriteVector, ...] = (
    WriteVector(
        suffix="st-alone",
        description="ServerTimestamp alone",
        comment=(
            "If the only values in the input are ServerTimestamps, then an update operation "
            "with an empty map should be produced."
        ),
        json_data='{"a": "ServerTimestamp"}',
        paths=(("a",),),
        json_values=('"ServerTimestamp"',),
        out_data={},
        transforms=(_server_timestamp("a"),),
    ),
    WriteVector(
        suffix="mergeall",
        description="MergeAll",
        comment="The MergeAll option with a simple piece of data.",
        json_data='{"a": 1, "b": 2}',
        merge=MERGE_ALL,
        out_data={"a": 1, "b": 2},
        mask=("a", "b"),
    ),
    WriteVector(
        suffix="mergeall-nested",
        description="MergeAll with nested fields",
        comment=(
            "MergeAll with nested fields results in an update mask that includes entries for "
            "all the leaf fields."
        ),
        json_data='{"h": { "g": 3, "f": 4 }}',
        merge=MERGE_ALL,
        out_data={"h": {"g": 3, "f": 4}},
        mask=("h.f", "h.g"),
    ),
    WriteVector(
        suffix="merge",
        description="Merge with a field",
        comment="Fields in the input data but not in a merge option are pruned.",
        json_data='{"a": 1, "b": 2}',
        merge=(("a",),),
        out_data={"a": 1},
        mask=("a",),
    ),
    WriteVector(
        suffix="merge-nested",
        description="Merge with a nested field",
        comment=(
            "A merge option where the field is not at top level. Only fields mentioned in the "
            "option are present in the update operation."
        ),
        json_data='{"h": {"g": 4, "f": 5}}',
        merge=(("h", "g"),),
        out_data={"h": {"g": 4}},
        mask=("h.g",),
    ),
    WriteVector(
        suffix="merge-nonleaf",
        description="Merge field is not a leaf",
        comment=(
            "If a field path is in a merge option, the value at that path replaces the stored "
            "value. That is true even if the value is complex."
        ),
        json_data='{"h": {"f": 5, "g": 6}, "e": 7}',
        merge=(("h",),),
        out_data={"h": {"f": 5, "g": 6}},
        mask=("h",),
    ),
    WriteVector(
        suffix="merge-fp",
        description="Merge with FieldPaths",
        comment="A merge with fields that use special characters.",
        json_data='{"*": {"~": true}}',
        merge=(("*", "~"),),
        out_data={"*": {"~": True}},
        mask=("`*`.`~`",),
    ),
    WriteVector(
        suffix="st-mergeall",
        description="ServerTimestamp with MergeAll",
        comment=(
            "Just as when no merge option is specified, ServerTimestamp sentinel values are "
            "removed from the data in the update operation and become transforms."
        ),
        json_data='{"a": 1, "b": "ServerTimestamp"}',
        merge=MERGE_ALL,
        out_data={"a": 1},
        mask=("a",),
        transforms=(_server_timestamp("b"),),
    ),
    WriteVector(
        suffix="st-alone-mergeall",
        description="ServerTimestamp alone with MergeAll",
        comment=(
            "If the only values in the input are ServerTimestamps, then no update operation "
            "should be produced."
        ),
        json_data='{"a": "ServerTimestamp"}',
        merge=MERGE_ALL,
        transforms=(_server_timestamp("a"),),
    ),
    WriteVector(
        suffix="st-merge-both",
        description="ServerTimestamp with Merge of both fields",
        comment=(
            "Just as when no merge option is specified, ServerTimestamp sentinel values are "
            "removed from the data in the update operation and become transforms."
        ),
        json_data='{"a": 1, "b": "ServerTimestamp"}',
        merge=(("a",), ("b",)),
        out_data={"a": 1},
        mask=("a",),
        transforms=(_server_timestamp("b"),),
    ),
    WriteVector(
        suffix="st-nomerge",
        description="If is ServerTimestamp not in Merge, no transform",
        comment=(
            "If the ServerTimestamp value is not mentioned in a merge option, then it is "
            "pruned from the data but does not result in a transform."
        ),
        json_data='{"a": 1, "b": "ServerTimestamp"}',
        merge=(("a",),),
        out_data={"a": 1},
        mask=("a",),
    ),
    WriteVector(
        suffix="st-merge-nowrite",
        description="If no ordinary values in Merge, no write",
        comment=(
            "If all the fields in the merge option have ServerTimestamp values, then no update "
            "operation is produced, only a transform."
        ),
        json_data='{"a": 1, "b": "ServerTimestamp"}',
        merge=(("b",),),
        transforms=(_server_timestamp("b"),),
    ),
    WriteVector(
        suffix="st-merge-nonleaf",
        description="non-leaf merge field with ServerTimestamp",
        comment=(
            "If a field path is in a merge option, the value at that path replaces the stored "
            "value, and ServerTimestamps inside that value become transforms as usual."
        ),
        json_data='{"h": {"f": 5, "g": "ServerTimestamp"}, "e": 7}',
        merge=(("h",),),
        out_data={"h": {"f": 5}},
        mask=("h",),
        transforms=(_server_timestamp("h.g"),),
    ),
    WriteVector(
        suffix="st-merge-nonleaf-alone",
        description="non-leaf merge field with ServerTimestamp alone",
        comment=(
            "If a field path is in a merge option, the value at that path replaces the stored "
            "value. If the value has only ServerTimestamps, they become transforms and we "
            "clear the value by including the field path in the update mask."
        ),
        json_data='{"h": {"g": "ServerTimestamp"}, "e": 7}',
        merge=(("h",),),
        mask=("h",),
        transforms=(_server_timestamp("h.g"),),
    ),
    WriteVector(
        suffix="del-mergeall",
        description="Delete with MergeAll",
        comment="A Delete sentinel can appear with a mergeAll option.",
        json_data='{"a": 1, "b": {"c": "Delete"}}',
        merge=MERGE_ALL,
        out_data={"a": 1},
        mask=("a", "b.c"),
    ),
    WriteVector(
        suffix="del-merge",
        description="Delete with merge",
        comment="A Delete sentinel can appear with a merge option.",
        json_data='{"a": 1, "b": {"c": "Delete"}}',
        merge=(("a",), ("b", "c")),
        out_data={"a": 1},
        mask=("a", "b.c"),
    ),
    WriteVector(
        suffix="del-merge-alone",
        description="Delete with merge",
        comment=(
            "A Delete sentinel can appear with a merge option. If the delete paths are the "
            "only ones to be merged, then no document is sent, just an update mask."
        ),
        json_data='{"a": 1, "b": {"c": "Delete"}}',
        merge=(("b", "c"),),
        mask=("b.c",),
    ),
    WriteVector(
        suffix="mergeall-empty",
        description="MergeAll can be specified with empty data.",
        comment="This is a valid call that can be used to ensure a document exists.",
        json_data="{}",
        merge=MERGE_ALL,
        out_data={},
        mask=(),
    ),
    WriteVector(
        suffix="merge-present",
        description="Merge fields must all be present in data",
        comment=(
            "The client signals an error if a merge option mentions a path that is not in the "
            "input data."
        ),
        json_data='{"a": 1}',
        merge=(("b",), ("a",)),
        is_error=True,
    ),
    WriteVector(
        suffix="del-wo-merge",
        description="Delete cannot appear unless a merge option is specified",
        comment=(
            "Without a merge option, Set replaces the document with the input data. A Delete "
            "sentinel in the data makes no sense in this case."
        ),
        json_data='{"a": 1, "b": "Delete"}',
        is_error=True,
    ),
    WriteVector(
        suffix="del-nomerge",
        description="Delete cannot appear in an unmerged field",
        comment=(
            "The client signals an error if the Delete sentinel is in the input data, but not "
            "selected by a merge option, because this is most likely a programming bug."
        ),
        json_data='{"a": 1, "b": "Delete"}',
        merge=(("a",),),
        is_error=True,
    ),
    WriteVector(
        suffix="del-nonleaf",
        description="Delete cannot appear as part of a merge path",
        comment=(
            "If a Delete is part of the value at a merge path, then the user is confused: "
            'their merge path says "replace this entire value" but their Delete says "delete '
            'this part of the value". This should be an error, just as if they specified '
            "Delete in a Set with no merge."
        ),
        json_data='{"h": {"g": "Delete"}}',
        merge=(("h",),),
        is_error=True,
    ),
    WriteVector(
        suffix="merge-prefix",
        description="One merge path cannot be the prefix of another",
        comment=(
            "The prefix would make the other path meaningless, so this is probably a "
            "programming error."
        ),
        json_data='{"a": {"b": 1}}',
        merge=(("a",), ("a", "b")),
        is_error=True,
    ),
)

UPDATE_ONLY_VECTORS: Tuple[WriteVector, ...] = (
    WriteVector(
        suffix="split",
        description="split on dots",
        comment="The Update method splits top-level keys at dots.",
        json_data='{"a.b.c": 1}',
        out_data={"a": {"b": {"c": 1}}},
        mask=("a.b.c",),
    ),
    WriteVector(
        suffix="quoting",
        description="non-letter starting chars are quoted, except underscore",
        comment=(
            "In a field path, any component beginning with a non-letter or underscore is "
            "quoted."
        ),
        json_data='{"_0.1.+2": 1}',
        out_data={"_0": {"1": {"+2": 1}}},
        mask=("_0.`1`.`+2`",),
    ),
    WriteVector(
        suffix="split-top-level",
        description="Split on dots for top-level keys only",
        comment=(
            "The Update method splits only top-level keys at dots. Keys at other levels are "
            "taken literally."
        ),
        json_data='{"h.g": {"j.k": 6}}',
        out_data={"h": {"g": {"j.k": 6}}},
        mask=("h.g",),
    ),
    WriteVector(
        suffix="del-dot",
        description="Delete with a dotted field",
        comment=(
            "After expanding top-level dotted fields, fields with Delete values are pruned "
            "from the output data, but appear in the update mask."
        ),
        json_data='{"a": 1, "b.c": "Delete", "b.d": 2}',
        out_data={"a": 1, "b": {"d": 2}},
        mask=("a", "b.c", "b.d"),
    ),
    WriteVector(
        suffix="st-dot",
        description="ServerTimestamp with dotted field",
        comment=(
            "Like other uses of ServerTimestamp, the data is pruned and the field does not "
            "appear in the update mask, because it is in the transform. The precondition is "
            "carried by the transform operation."
        ),
        json_data='{"a.b.c": "ServerTimestamp"}',
        transforms=(_server_timestamp("a.b.c"),),
    ),
    WriteVector(
        suffix="badchar",
        description="invalid character",
        comment=(
            "The keys of the data given to Update are interpreted, unlike those of Create and "
            "Set. They cannot contain special characters."
        ),
        json_data='{"a~b": 1}',
        is_error=True,
    ),
)

UPDATE_PATHS_ONLY_VECTORS: Tuple[WriteVector, ...] = (
    WriteVector(
        suffix="fp-multi",
        description="multiple-element field path",
        comment=(
            "The UpdatePaths or equivalent method takes a list of FieldPaths. Each FieldPath "
            "is a sequence of uninterpreted path components."
        ),
        paths=(("a", "b"),),
        json_values=("1",),
        out_data={"a": {"b": 1}},
        mask=("a.b",),
    ),
    WriteVector(
        suffix="fp-nosplit",
        description="FieldPath elements are not split on dots",
        comment="FieldPath components are not split on dots.",
        paths=(("a.b", "f.g"),),
        json_values=('{"n.o": 7}',),
        out_data={"a.b": {"f.g": {"n.o": 7}}},
        mask=("`a.b`.`f.g`",),
    ),
    WriteVector(
        suffix="special-chars",
        description="special characters",
        comment="FieldPaths can contain special characters.",
        paths=(("*", "~"), ("*", "`")),
        json_values=("1", "2"),
        out_data={"*": {"~": 1, "`": 2}},
        mask=("`*`.`\\``", "`*`.`~`"),
    ),
    WriteVector(
        suffix="fp-del",
        description="field paths with delete",
        comment="If one nested field is deleted, and another isn't, preserve the second.",
        paths=(("foo", "bar"), ("foo", "delete")),
        json_values=("1", '"Delete"'),
        out_data={"foo": {"bar": 1}},
        mask=("foo.bar", "foo.delete"),
    ),
    WriteVector(
        suffix="fp-empty",
        description="empty field path",
        comment="A FieldPath of length zero is invalid.",
        paths=((),),
        json_values=("1",),
        is_error=True,
    ),
    WriteVector(
        suffix="fp-dup",
        description="duplicate field path",
        comment="The same field cannot occur more than once.",
        paths=(("a",), ("b",), ("a",)),
        json_values=("1", "2", "3"),
        is_error=True,
    ),
    WriteVector(
        suffix="fp-dup-transforms",
        description="duplicate field path with only transforms",
        comment=(
            "The same field cannot occur more than once, even if all the operations are "
            "transforms."
        ),
        paths=(("a",), ("b",), ("a",)),
        json_values=('["ArrayUnion", 1, 2, 3]', '"ServerTimestamp"', '["ArrayUnion", 4, 5, 6]'),
        is_error=True,
    ),
)

# (suffix, description, comment, precondition)
DELETE_VECTORS: Tuple[Tuple[str, str, str, Any], ...] = (
    ("no-precond", "delete without precondition", "An ordinary Delete call.", None),
    (
        "time-precond",
        "delete with last-update-time precondition",
        "Delete supports a last-update-time precondition.",
        UPDATE_TIME_PRECONDITION,
    ),
    (
        "exists-precond",
        "delete with exists precondition",
        "Delete supports an exists precondition.",
        EXISTS_TRUE_PRECONDITION,
    ),
)


def _query(**kwargs: Any) -> StructuredQuery:
    """Return an expected query, without a collection selector."""
    return StructuredQuery(from_=(), **kwargs)


def _order(field_name: str, direction: Direction) -> Order:
    return Order(FieldPath(field_name), direction)


def _field_filter(field_name: str, op: FieldOperator, value: Any) -> FieldFilter:
    return FieldFilter(FieldPath(field_name), op, value)


def _unary_filter(field_name: str, op: UnaryOperator) -> UnaryFilter:
    return UnaryFilter(FieldPath(field_name), op)


def _cursor(kind: CursorKind, *json_values: str) -> CursorData:
    return CursorData(kind, json_values)


def _docsnap_cursor(kind: CursorKind, snapshot: DocSnapshotData) -> CursorData:
    return CursorData(kind, doc_snapshot=snapshot)


_DOCSNAP = DocSnapshotData(f"{COLLECTION_PATH}/D", '{"a": 7, "b": 8}')
_BAD_DOCSNAP = DocSnapshotData(DATABASE_INFO.document_path("C2", "D"), '{"a": 7, "b": 8}')
_DOCSNAP_REFERENCE = Reference(f"{COLLECTION_PATH}/D")

_ASCENDING = Direction.ASCENDING
_DESCENDING = Direction.DESCENDING

QUERY_VECTORS: Tuple[QueryVector, ...] = (
    QueryVector(
        suffix="select-empty",
        description="empty Select clause",
        comment="An empty Select clause selects just the document ID.",
        clauses=(SelectData(()),),
        query=_query(select=(FieldPath.document_id(),)),
    ),
    QueryVector(
        suffix="select",
        description="Select clause with some fields",
        comment="An ordinary Select clause.",
        clauses=(SelectData((("a",), ("b",))),),
        query=_query(select=(FieldPath("a"), FieldPath("b"))),
    ),
    QueryVector(
        suffix="select-last-wins",
        description="two Select clauses",
        comment="The last Select clause is the only one used.",
        clauses=(SelectData((("a",), ("b",))), SelectData((("c",),))),
        query=_query(select=(FieldPath("c"),)),
    ),
    QueryVector(
        suffix="where",
        description="Where clause",
        comment="A simple Where clause.",
        clauses=(WhereData(("a",), ">", "5"),),
        query=_query(where=_field_filter("a", FieldOperator.GREATER_THAN, 5)),
    ),
    QueryVector(
        suffix="where-2",
        description="two Where clauses",
        comment="Multiple Where clauses are combined into a composite filter.",
        clauses=(WhereData(("a",), ">=", "5"), WhereData(("b",), "<", '"foo"')),
        query=_query(
            where=CompositeFilter(
                CompositeOperator.AND,
                (
                    _field_filter("a", FieldOperator.GREATER_THAN_OR_EQUAL, 5),
                    _field_filter("b", FieldOperator.LESS_THAN, "foo"),
                ),
            )
        ),
    ),
    QueryVector(
        suffix="where-null",
        description="a Where clause comparing to null",
        comment="A Where clause that tests for equality with null results in a unary filter.",
        clauses=(WhereData(("a",), "==", "null"),),
        query=_query(where=_unary_filter("a", UnaryOperator.IS_NULL)),
    ),
    QueryVector(
        suffix="where-NaN",
        description="a Where clause comparing to NaN",
        comment="A Where clause that tests for equality with NaN results in a unary filter.",
        clauses=(WhereData(("a",), "==", '"NaN"'),),
        query=_query(where=_unary_filter("a", UnaryOperator.IS_NAN)),
    ),
    QueryVector(
        suffix="offset-limit",
        description="Offset and Limit clauses",
        comment="Offset and Limit clauses.",
        clauses=(OffsetData(2), LimitData(3)),
        query=_query(offset=2, limit=3),
    ),
    QueryVector(
        suffix="offset-limit-last-wins",
        description="multiple Offset and Limit clauses",
        comment="With multiple Offset or Limit clauses, the last one wins.",
        clauses=(OffsetData(2), LimitData(3), LimitData(4), OffsetData(5)),
        query=_query(offset=5, limit=4),
    ),
    QueryVector(
        suffix="order",
        description="basic OrderBy clauses",
        comment="Multiple OrderBy clauses combine.",
        clauses=(OrderByData(("b",), "asc"), OrderByData(("a",), "desc")),
        query=_query(order_by=(_order("b", _ASCENDING), _order("a", _DESCENDING))),
    ),
    QueryVector(
        suffix="cursor-startat-empty-map",
        description="StartAt with explicit empty map",
        comment=(
            "Cursor methods are allowed to use empty maps with StartAt. It should result in "
            "an empty map in the query."
        ),
        clauses=(OrderByData(("a",), "asc"), _cursor(CursorKind.START_AT, "{}")),
        query=_query(
            order_by=(_order("a", _ASCENDING),), start_at=CursorBound(({},), before=True)
        ),
    ),
    QueryVector(
        suffix="cursor-endbefore-empty-map",
        description="EndBefore with explicit empty map",
        comment=(
            "Cursor methods are allowed to use empty maps with EndBefore. It should result in "
            "an empty map in the query."
        ),
        clauses=(OrderByData(("a",), "asc"), _cursor(CursorKind.END_BEFORE, "{}")),
        query=_query(
            order_by=(_order("a", _ASCENDING),), end_at=CursorBound(({},), before=True)
        ),
    ),
    QueryVector(
        suffix="cursor-startat-empty",
        description="StartAt with empty values",
        comment=(
            "Cursor methods are not allowed to use empty values with StartAt. It should "
            "result in an error."
        ),
        clauses=(OrderByData(("a",), "asc"), _cursor(CursorKind.START_AT)),
        is_error=True,
    ),
    QueryVector(
        suffix="cursor-endbefore-empty",
        description="EndBefore with empty values",
        comment=(
            "Cursor methods are not allowed to use empty values with EndBefore. It should "
            "result in an error."
        ),
        clauses=(OrderByData(("a",), "asc"), _cursor(CursorKind.END_BEFORE)),
        is_error=True,
    ),
    QueryVector(
        suffix="cursor-vals-1a",
        description="StartAt/EndBefore with values",
        comment="Cursor methods take the same number of values as there are OrderBy clauses.",
        clauses=(
            OrderByData(("a",), "asc"),
            _cursor(CursorKind.START_AT, "7"),
            _cursor(CursorKind.END_BEFORE, "9"),
        ),
        query=_query(
            order_by=(_order("a", _ASCENDING),),
            start_at=CursorBound((7,), before=True),
            end_at=CursorBound((9,), before=True),
        ),
    ),
    QueryVector(
        suffix="cursor-vals-1b",
        description="StartAfter/EndAt with values",
        comment="Cursor methods take the same number of values as there are OrderBy clauses.",
        clauses=(
            OrderByData(("a",), "asc"),
            _cursor(CursorKind.START_AFTER, "7"),
            _cursor(CursorKind.END_AT, "9"),
        ),
        query=_query(
            order_by=(_order("a", _ASCENDING),),
            start_at=CursorBound((7,), before=False),
            end_at=CursorBound((9,), before=False),
        ),
    ),
    QueryVector(
        suffix="cursor-vals-2",
        description="Start/End with two values",
        comment="Cursor methods take the same number of values as there are OrderBy clauses.",
        clauses=(
            OrderByData(("a",), "asc"),
            OrderByData(("b",), "desc"),
            _cursor(CursorKind.START_AT, "7", "8"),
            _cursor(CursorKind.END_AT, "9", "10"),
        ),
        query=_query(
            order_by=(_order("a", _ASCENDING), _order("b", _DESCENDING)),
            start_at=CursorBound((7, 8), before=True),
            end_at=CursorBound((9, 10), before=False),
        ),
    ),
    QueryVector(
        suffix="cursor-vals-docid",
        description="cursor methods with __name__",
        comment=(
            "Cursor values corresponding to a __name__ field take the document path relative "
            "to the query's collection."
        ),
        clauses=(
            OrderByData(("__name__",), "asc"),
            _cursor(CursorKind.START_AFTER, '"D1"'),
            _cursor(CursorKind.END_BEFORE, '"D2"'),
        ),
        query=_query(
            order_by=(_order("__name__", _ASCENDING),),
            start_at=CursorBound((Reference(f"{COLLECTION_PATH}/D1"),), before=False),
            end_at=CursorBound((Reference(f"{COLLECTION_PATH}/D2"),), before=True),
        ),
    ),
    QueryVector(
        suffix="cursor-vals-last-wins",
        description="cursor methods, last one wins",
        comment="When multiple Start* or End* calls occur, the values of the last one are used.",
        clauses=(
            OrderByData(("a",), "asc"),
            _cursor(CursorKind.START_AFTER, "1"),
            _cursor(CursorKind.START_AT, "2"),
            _cursor(CursorKind.END_AT, "3"),
            _cursor(CursorKind.END_BEFORE, "4"),
        ),
        query=_query(
            order_by=(_order("a", _ASCENDING),),
            start_at=CursorBound((2,), before=True),
            end_at=CursorBound((4,), before=True),
        ),
    ),
    QueryVector(
        suffix="cursor-docsnap",
        description="cursor methods with a document snapshot",
        comment="When a document snapshot is used, the client appends a __name__ order-by clause.",
        clauses=(_docsnap_cursor(CursorKind.START_AT, _DOCSNAP),),
        query=_query(
            order_by=(_order("__name__", _ASCENDING),),
            start_at=CursorBound((_DOCSNAP_REFERENCE,), before=True),
        ),
    ),
    QueryVector(
        suffix="cursor-docsnap-order",
        description="cursor methods with a document snapshot, existing orderBy",
        comment=(
            "When a document snapshot is used, the client appends a __name__ order-by clause "
            "with the direction of the last order-by clause."
        ),
        clauses=(
            OrderByData(("a",), "asc"),
            OrderByData(("b",), "desc"),
            _docsnap_cursor(CursorKind.START_AFTER, _DOCSNAP),
        ),
        query=_query(
            order_by=(
                _order("a", _ASCENDING),
                _order("b", _DESCENDING),
                _order("__name__", _DESCENDING),
            ),
            start_at=CursorBound((7, 8, _DOCSNAP_REFERENCE), before=False),
        ),
    ),
    QueryVector(
        suffix="cursor-docsnap-where-eq",
        description="cursor methods with a document snapshot and an equality where clause",
        comment="A Where clause using equality doesn't change the implicit orderBy clauses.",
        clauses=(WhereData(("a",), "==", "3"), _docsnap_cursor(CursorKind.END_AT, _DOCSNAP)),
        query=_query(
            where=_field_filter("a", FieldOperator.EQUAL, 3),
            order_by=(_order("__name__", _ASCENDING),),
            end_at=CursorBound((_DOCSNAP_REFERENCE,), before=False),
        ),
    ),
    QueryVector(
        suffix="cursor-docsnap-where-neq",
        description="cursor method with a document snapshot and an inequality where clause",
        comment=(
            "A Where clause with an inequality results in an OrderBy clause on that clause's "
            "path, if there are no other OrderBy clauses."
        ),
        clauses=(
            WhereData(("a",), "<=", "3"),
            _docsnap_cursor(CursorKind.END_BEFORE, _DOCSNAP),
        ),
        query=_query(
            where=_field_filter("a", FieldOperator.LESS_THAN_OR_EQUAL, 3),
            order_by=(_order("a", _ASCENDING), _order("__name__", _ASCENDING)),
            end_at=CursorBound((7, _DOCSNAP_REFERENCE), before=True),
        ),
    ),
    QueryVector(
        suffix="cursor-docsnap-where-neq-orderby",
        description=(
            "cursor method, doc snapshot, inequality where clause, and existing orderBy clause"
        ),
        comment=(
            "If there is an OrderBy clause, the inequality Where clause does not result in a "
            "new OrderBy clause. We still add a __name__ OrderBy clause"
        ),
        clauses=(
            OrderByData(("a",), "desc"),
            WhereData(("a",), "<", "4"),
            _docsnap_cursor(CursorKind.START_AT, _DOCSNAP),
        ),
        query=_query(
            where=_field_filter("a", FieldOperator.LESS_THAN, 4),
            order_by=(_order("a", _DESCENDING), _order("__name__", _DESCENDING)),
            start_at=CursorBound((7, _DOCSNAP_REFERENCE), before=True),
        ),
    ),
    QueryVector(
        suffix="cursor-docsnap-orderby-name",
        description="cursor method, doc snapshot, existing orderBy __name__",
        comment=(
            "If there is an existing orderBy clause on __name__, no changes are made to the "
            "list of orderBy clauses."
        ),
        clauses=(
            OrderByData(("a",), "desc"),
            OrderByData(("__name__",), "asc"),
            _docsnap_cursor(CursorKind.START_AT, _DOCSNAP),
            _docsnap_cursor(CursorKind.END_AT, _DOCSNAP),
        ),
        query=_query(
            order_by=(_order("a", _DESCENDING), _order("__name__", _ASCENDING)),
            start_at=CursorBound((7, _DOCSNAP_REFERENCE), before=True),
            end_at=CursorBound((7, _DOCSNAP_REFERENCE), before=False),
        ),
    ),
    QueryVector(
        suffix="invalid-operator",
        description="invalid operator in Where clause",
        comment="The != operator is not supported.",
        clauses=(WhereData(("a",), "!=", "4"),),
        is_error=True,
    ),
    QueryVector(
        suffix="invalid-path-select",
        description="invalid path in Select clause",
        comment="The path has an empty component.",
        clauses=(SelectData((("*", ""),)),),
        is_error=True,
    ),
    QueryVector(
        suffix="invalid-path-where",
        description="invalid path in Where clause",
        comment="The path has an empty component.",
        clauses=(WhereData(("*", ""), "==", "4"),),
        is_error=True,
    ),
    QueryVector(
        suffix="invalid-path-order",
        description="invalid path in OrderBy clause",
        comment="The path has an empty component.",
        clauses=(OrderByData(("*", ""), "asc"),),
        is_error=True,
    ),
    QueryVector(
        suffix="cursor-no-order",
        description="cursor method without orderBy",
        comment=(
            "If a cursor method with a list of values is provided, there must be at least as "
            "many explicit orderBy clauses as values."
        ),
        clauses=(_cursor(CursorKind.START_AT, "2"),),
        is_error=True,
    ),
    QueryVector(
        suffix="st-where",
        description="ServerTimestamp in Where",
        comment="Sentinel values are not permitted in queries.",
        clauses=(WhereData(("a",), "==", '"ServerTimestamp"'),),
        is_error=True,
    ),
    QueryVector(
        suffix="del-where",
        description="Delete in Where",
        comment="Sentinel values are not permitted in queries.",
        clauses=(WhereData(("a",), "==", '"Delete"'),),
        is_error=True,
    ),
    QueryVector(
        suffix="arrayunion-where",
        description="ArrayUnion in Where",
        comment="ArrayUnion is not permitted in queries.",
        clauses=(WhereData(("a",), "==", '["ArrayUnion", 1, 2, 3]'),),
        is_error=True,
    ),
    QueryVector(
        suffix="arrayremove-where",
        description="ArrayRemove in Where",
        comment="ArrayRemove is not permitted in queries.",
        clauses=(WhereData(("a",), "==", '["ArrayRemove", 1, 2, 3]'),),
        is_error=True,
    ),
    QueryVector(
        suffix="st-cursor",
        description="ServerTimestamp in cursor method",
        comment="Sentinel values are not permitted in queries.",
        clauses=(
            OrderByData(("a",), "asc"),
            _cursor(CursorKind.END_BEFORE, '"ServerTimestamp"'),
        ),
        is_error=True,
    ),
    QueryVector(
        suffix="del-cursor",
        description="Delete in cursor method",
        comment="Sentinel values are not permitted in queries.",
        clauses=(OrderByData(("a",), "asc"), _cursor(CursorKind.END_BEFORE, '"Delete"')),
        is_error=True,
    ),
    QueryVector(
        suffix="arrayunion-cursor",
        description="ArrayUnion in cursor method",
        comment="ArrayUnion is not permitted in queries.",
        clauses=(
            OrderByData(("a",), "asc"),
            _cursor(CursorKind.END_BEFORE, '["ArrayUnion", 1, 2, 3]'),
        ),
        is_error=True,
    ),
    QueryVector(
        suffix="arrayremove-cursor",
        description="ArrayRemove in cursor method",
        comment="ArrayRemove is not permitted in queries.",
        clauses=(
            OrderByData(("a",), "asc"),
            _cursor(CursorKind.END_BEFORE, '["ArrayRemove", 1, 2, 3]'),
        ),
        is_error=True,
    ),
    QueryVector(
        suffix="wrong-collection",
        description="doc snapshot with wrong collection in cursor method",
        comment=(
            "If a document snapshot is passed to a Start*/End* method, it must be in the same "
            "collection as the query."
        ),
        clauses=(_docsnap_cursor(CursorKind.END_BEFORE, _BAD_DOCSNAP),),
        is_error=True,
    ),
    QueryVector(
        suffix="bad-null",
        description="where clause with non-== comparison with Null",
        comment="You can only compare Null for equality.",
        clauses=(WhereData(("a",), ">", "null"),),
        is_error=True,
    ),
    QueryVector(
        suffix="bad-NaN",
        description="where clause with non-== comparison with NaN",
        comment="You can only compare NaN for equality.",
        clauses=(WhereData(("a",), "<", '"NaN"'),),
        is_error=True,
    ),
)


def _timestamp(seconds: int) -> datetime:
    return timestamp_from_seconds(seconds)


def _doc(document_id: str, a_value: int, update_seconds: int) -> Document:
    """Return a document of the listened-to collection, with a single field "a"."""
    return Document(
        name=f"{COLLECTION_PATH}/{document_id}",
        fields={"a": a_value},
        create_time=_timestamp(1),
        update_time=_timestamp(update_seconds),
    )


def _change(document: Document) -> DocumentChange:
    return DocumentChange(document, target_ids=(WATCH_TARGET_ID,))


def _delete(document_id: str) -> DocumentDelete:
    return DocumentDelete(f"{COLLECTION_PATH}/{document_id}")


def _existence_filter(count: int) -> ExistenceFilter:
    return ExistenceFilter(count)


def _no_change(read_seconds: int) -> TargetChange:
    return TargetChange(TargetChangeType.NO_CHANGE, read_time=_timestamp(read_seconds))


_CURRENT = TargetChange(TargetChangeType.CURRENT)
_RESET = TargetChange(TargetChangeType.RESET)


def _added(document: Document, new_index: int) -> DocChange:
    return DocChange(ChangeKind.ADDED, document, NO_INDEX, new_index)


def _removed(document: Document, old_index: int) -> DocChange:
    return DocChange(ChangeKind.REMOVED, document, old_index, NO_INDEX)


def _modified(document: Document, old_index: int, new_index: int) -> DocChange:
    return DocChange(ChangeKind.MODIFIED, document, old_index, new_index)


def _snapshot(
    documents: Sequence[Document], changes: Sequence[DocChange], read_seconds: int
) -> Snapshot:
    return Snapshot(tuple(documents), tuple(changes), _timestamp(read_seconds))


_doc1 = _doc("d1", 3, 1)
_doc1a = _doc("d1", -1, 3)
_doc2 = _doc("d2", 1, 1)
_doc3 = _doc("d3", 1, 1)
_doc4 = _doc("d4", 2, 1)
_doc4a = _doc("d4", -2, 3)
_doc5 = _doc("d5", 4, 1)
_doc6 = _doc("d6", 3, 1)

_doc1r = _doc("d1", 2, 1)
_doc2r = _doc("d2", 1, 2)
_doc2ra = _doc("d2", 3, 3)
_doc3r = _doc("d3", 3, 2)

LISTEN_VECTORS: Tuple[ListenVector, ...] = (
    ListenVector(
        suffix="empty",
        description="no changes; empty snapshot",
        comment="There are no changes, so the snapshot should be empty.",
        responses=(_CURRENT, _no_change(1)),
        snapshots=(_snapshot((), (), 1),),
    ),
    ListenVector(
        suffix="add-one",
        description="add a doc",
        comment="Snapshot with a single document.",
        responses=(_change(_doc("d1", 1, 1)), _CURRENT, _no_change(2)),
        snapshots=(_snapshot([_doc("d1", 1, 1)], [_added(_doc("d1", 1, 1), 0)], 2),),
    ),
    ListenVector(
        suffix="add-mod-del-add",
        description="add a doc, modify it, delete it, then add it again",
        comment="Various changes to a single document.",
        responses=(
            _change(_doc("d1", 1, 1)),
            _CURRENT,
            _no_change(1),
            _change(_doc("d1", 2, 2)),
            _no_change(2),
            _delete("d1"),
            _no_change(3),
            _change(_doc("d1", 3, 3)),
            _no_change(4),
        ),
        snapshots=(
            _snapshot([_doc("d1", 1, 1)], [_added(_doc("d1", 1, 1), 0)], 1),
            _snapshot([_doc("d1", 2, 2)], [_modified(_doc("d1", 2, 2), 0, 0)], 2),
            _snapshot([], [_removed(_doc("d1", 2, 2), 0)], 3),
            _snapshot([_doc("d1", 3, 3)], [_added(_doc("d1", 3, 3), 0)], 4),
        ),
    ),
    ListenVector(
        suffix="nomod",
        description="add a doc, then change it but without changing its update time",
        comment=(
            "Document updates are recognized by a change in the update time, not the data. "
            "This shouldn't actually happen. It is just a test of the update logic."
        ),
        responses=(
            _change(_doc("d1", 1, 1)),
            _CURRENT,
            _no_change(1),
            _change(_doc("d1", 2, 1)),
            _no_change(2),
            _delete("d1"),
            _no_change(3),
        ),
        snapshots=(
            _snapshot([_doc("d1", 1, 1)], [_added(_doc("d1", 1, 1), 0)], 1),
            _snapshot([], [_removed(_doc("d1", 1, 1), 0)], 3),
        ),
    ),
    ListenVector(
        suffix="add-three",
        description="add three documents",
        comment=(
            'A snapshot with three documents. The documents are sorted first by the "a" '
            "field, then by their path. The changes are ordered the same way."
        ),
        responses=(
            _change(_doc("d1", 3, 1)),
            _change(_doc("d3", 1, 1)),
            _change(_doc("d2", 1, 1)),
            _CURRENT,
            _no_change(2),
        ),
        snapshots=(
            _snapshot(
                [_doc("d2", 1, 1), _doc("d3", 1, 1), _doc("d1", 3, 1)],
                [
                    _added(_doc("d2", 1, 1), 0),
                    _added(_doc("d3", 1, 1), 1),
                    _added(_doc("d1", 3, 1), 2),
                ],
                2,
            ),
        ),
    ),
    ListenVector(
        suffix="nocurrent",
        description="no snapshot if we don't see CURRENT",
        comment="If the watch state is not marked CURRENT, no snapshot is issued.",
        responses=(
            _change(_doc("d1", 1, 1)),
            _no_change(1),
            _change(_doc("d2", 2, 2)),
            _CURRENT,
            _no_change(2),
        ),
        snapshots=(
            _snapshot(
                [_doc("d1", 1, 1), _doc("d2", 2, 2)],
                [_added(_doc("d1", 1, 1), 0), _added(_doc("d2", 2, 2), 1)],
                2,
            ),
        ),
    ),
    ListenVector(
        suffix="multi-docs",
        description="multiple documents, added, deleted and updated",
        comment=(
            "Changes should be ordered with deletes first, then additions, then mods, each in "
            "query order. Old indices refer to the immediately previous state, not the "
            "previous snapshot"
        ),
        responses=(
            _change(_doc1),
            _change(_doc3),
            _change(_doc2),
            _change(_doc4),
            _CURRENT,
            _no_change(2),
            _change(_doc5),
            _delete("d3"),
            _change(_doc1a),
            _change(_doc6),
            _delete("d2"),
            _change(_doc4a),
            _no_change(4),
        ),
        snapshots=(
            _snapshot(
                [_doc2, _doc3, _doc4, _doc1],
                [_added(_doc2, 0), _added(_doc3, 1), _added(_doc4, 2), _added(_doc1, 3)],
                2,
            ),
            _snapshot(
                [_doc4a, _doc1a, _doc6, _doc5],
                [
                    _removed(_doc2, 0),
                    _removed(_doc3, 0),
                    _added(_doc6, 2),
                    _added(_doc5, 3),
                    _modified(_doc4a, 0, 0),
                    _modified(_doc1a, 1, 1),
                ],
                4,
            ),
        ),
    ),
    ListenVector(
        suffix="reset",
        description="RESET turns off CURRENT",
        comment=(
            "A RESET message turns off the CURRENT state, and marks all documents as deleted. "
            'If a document appeared on the stream but was never part of a snapshot ("d3" in '
            "this test), a reset will make it disappear completely. For a snapshot to happen "
            "at a NO_CHANGE response, we need to have both seen a CURRENT response, and have a "
            "change from the previous snapshot. Here, after the reset, we see the same version "
            "of d2 again. That doesn't result in a snapshot."
        ),
        responses=(
            _change(_doc1r),
            _change(_doc2r),
            _CURRENT,
            _no_change(1),
            _change(_doc3r),
            _RESET,
            _no_change(2),
            _CURRENT,
            _change(_doc2ra),
            _no_change(3),
            _RESET,
            _change(_doc2ra),
            _CURRENT,
            _no_change(4),
            _change(_doc3r),
            _no_change(5),
        ),
        snapshots=(
            _snapshot([_doc2r, _doc1r], [_added(_doc2r, 0), _added(_doc1r, 1)], 1),
            _snapshot([_doc2ra], [_removed(_doc1r, 1), _modified(_doc2ra, 0, 0)], 3),
            _snapshot([_doc2ra, _doc3r], [_added(_doc3r, 1)], 5),
        ),
    ),
    ListenVector(
        suffix="doc-remove",
        description="DocumentRemove behaves like DocumentDelete",
        comment="The DocumentRemove response behaves exactly like DocumentDelete.",
        responses=(
            _change(_doc1),
            _CURRENT,
            _no_change(1),
            DocumentRemove(_doc1.name),
            _no_change(2),
        ),
        snapshots=(
            _snapshot([_doc1], [_added(_doc1, 0)], 1),
            _snapshot([], [_removed(_doc1, 0)], 2),
        ),
    ),
    ListenVector(
        suffix="filter-nop",
        description="Filter response with same size is a no-op",
        comment=(
            "A Filter response whose count matches the size of the current state (docs in "
            "last snapshot + docs added - docs deleted) is a no-op."
        ),
        responses=(
            _change(_doc1),
            _change(_doc2),
            _CURRENT,
            _no_change(1),
            _change(_doc3),
            _delete("d1"),
            _existence_filter(2),
            _no_change(2),
        ),
        snapshots=(
            _snapshot([_doc2, _doc1], [_added(_doc2, 0), _added(_doc1, 1)], 1),
            _snapshot([_doc2, _doc3], [_removed(_doc1, 1), _added(_doc3, 1)], 2),
        ),
    ),
    ListenVector(
        suffix="removed-target-ids",
        description="DocumentChange with removed_target_id is like a delete.",
        comment=(
            "A DocumentChange with the watch target ID in the removed_target_ids field is the "
            "same as deleting a document."
        ),
        responses=(
            _change(_doc1),
            _CURRENT,
            _no_change(1),
            DocumentChange(_doc1, removed_target_ids=(WATCH_TARGET_ID,)),
            _no_change(2),
        ),
        snapshots=(
            _snapshot([_doc1], [_added(_doc1, 0)], 1),
            _snapshot([], [_removed(_doc1, 0)], 2),
        ),
    ),
    ListenVector(
        suffix="target-add-nop",
        description="TargetChange_ADD is a no-op if it has the same target ID",
        comment="A TargetChange_ADD response must have the same watch target ID.",
        responses=(
            _change(_doc1),
            _CURRENT,
            TargetChange(
                TargetChangeType.ADD, target_ids=(WATCH_TARGET_ID,), read_time=_timestamp(2)
            ),
            _no_change(1),
        ),
        snapshots=(_snapshot([_doc1], [_added(_doc1, 0)], 1),),
    ),
    ListenVector(
        suffix="target-add-wrong-id",
        description="TargetChange_ADD is an error if it has a different target ID",
        comment="A TargetChange_ADD response must have the same watch target ID.",
        responses=(
            _change(_doc1),
            _CURRENT,
            TargetChange(
                TargetChangeType.ADD,
                target_ids=(WATCH_TARGET_ID + 1,),
                read_time=_timestamp(2),
            ),
            _no_change(1),
        ),
        is_error=True,
    ),
    ListenVector(
        suffix="target-remove",
        description="TargetChange_REMOVE should not appear",
        comment="A TargetChange_REMOVE response should never be sent.",
        responses=(
            _change(_doc1),
            _CURRENT,
            TargetChange(TargetChangeType.REMOVE),
            _no_change(1),
        ),
        is_error=True,
    ),
)
