# Copyright 2026-present Kensho Technologies, LLC.
"""Encode resolver inputs and outputs as JSON-compatible dicts, in the proto3 JSON mapping.

Integers are encoded as strings, NaN and the infinities as the strings "NaN", "Infinity" and
"-Infinity", bytes as standard base64, and timestamps as RFC 3339 strings in UTC. Fields that
hold no value are omitted.
"""
import base64
from datetime import datetime
import math
from typing import Any, Dict, List, Optional, Sequence

from ..documents import Document
from ..field_path import FieldPath
from ..mutation.specs import MERGE_ALL, Precondition
from ..mutation.writes import (
    DeleteWrite,
    FieldTransform,
    TransformKind,
    TransformWrite,
    UpdateWrite,
    Write,
)
from ..query.structured_query import (
    CompositeFilter,
    CursorBound,
    FieldFilter,
    Filter,
    Order,
    StructuredQuery,
    UnaryFilter,
)
from ..rpc import CommitRequest, GetDocumentRequest
from ..typedefs import FieldMap
from ..values import Reference, format_timestamp
from ..watch.events import (
    DocChange,
    DocumentChange,
    DocumentDelete,
    DocumentRemove,
    ExistenceFilter,
    Snapshot,
    TargetChange,
    WatchEvent,
)
from .model import (
    ClauseData,
    ConformanceTest,
    CursorData,
    LimitData,
    OffsetData,
    OrderByData,
    RawFieldPath,
    RawMergeOption,
    SelectData,
    VectorKind,
    WhereData,
)


JsonDict = Dict[str, Any]


def _without_empty(mapping: JsonDict) -> JsonDict:
    """Drop the keys whose value is None, as proto3 JSON omits unset fields."""
    return {key: value for key, value in mapping.items() if value is not None}


def _encode_double(value: float) -> Any:
    if math.isnan(value):
        return "NaN"
    elif math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    else:
        return value


def encode_value(value: Any) -> JsonDict:
    """Encode a stored value as a Firestore Value message."""
    if value is None:
        return {"nullValue": None}
    elif isinstance(value, bool):
        # bool is a subclass of int, so it must be checked first.
        return {"booleanValue": value}
    elif isinstance(value, int):
        return {"integerValue": str(value)}
    elif isinstance(value, float):
        return {"doubleValue": _encode_double(value)}
    elif isinstance(value, datetime):
        return {"timestampValue": format_timestamp(value)}
    elif isinstance(value, str):
        return {"stringValue": value}
    elif isinstance(value, bytes):
        return {"bytesValue": base64.standard_b64encode(value).decode("ascii")}
    elif isinstance(value, Reference):
        return {"referenceValue": value.path}
    elif isinstance(value, (list, tuple)):
        return {"arrayValue": {"values": [encode_value(element) for element in value]}}
    elif isinstance(value, dict):
        return {"mapValue": {"fields": encode_fields(value)}}
    else:
        raise TypeError(f"Cannot encode value of unsupported type {type(value)}: {value!r}")


def encode_fields(fields: FieldMap) -> JsonDict:
    return {key: encode_value(value) for key, value in fields.items()}


def encode_timestamp(value: Optional[datetime]) -> Optional[str]:
    return None if value is None else format_timestamp(value)


def encode_precondition(precondition: Optional[Precondition]) -> Optional[JsonDict]:
    if precondition is None:
        return None
    elif precondition.exists is not None:
        return {"exists": precondition.exists}
    else:
        return {"updateTime": encode_timestamp(precondition.update_time)}


def encode_field_transform(field_transform: FieldTransform) -> JsonDict:
    result: JsonDict = {"fieldPath": field_transform.field_path}
    if field_transform.kind == TransformKind.REQUEST_TIME:
        result[field_transform.kind.value] = "REQUEST_TIME"
    else:
        result[field_transform.kind.value] = {
            "values": [encode_value(element) for element in field_transform.elements]
        }
    return result


def encode_write(write: Write) -> JsonDict:
    """Encode a resolved write as a Write message."""
    if isinstance(write, UpdateWrite):
        result: JsonDict = {
            "update": {"name": write.document_path, "fields": encode_fields(write.fields)}
        }
        if write.update_mask is not None:
            result["updateMask"] = {"fieldPaths": list(write.update_mask)}
    elif isinstance(write, TransformWrite):
        result = {
            "transform": {
                "document": write.document_path,
                "fieldTransforms": [
                    encode_field_transform(field_transform)
                    for field_transform in write.field_transforms
                ],
            }
        }
    elif isinstance(write, DeleteWrite):
        result = {"delete": write.document_path}
    else:
        raise AssertionError(f"Unreachable code reached: unknown write type {write}")

    result["currentDocument"] = encode_precondition(write.current_document)
    return _without_empty(result)


def encode_commit_request(request: CommitRequest) -> JsonDict:
    return {
        "database": request.database,
        "writes": [encode_write(write) for write in request.writes],
    }


def encode_get_document_request(request: GetDocumentRequest) -> JsonDict:
    return {"name": request.name}


def _encode_field_reference(field_path: FieldPath) -> JsonDict:
    return {"fieldPath": field_path.to_api_repr()}


def encode_filter(query_filter: Filter) -> JsonDict:
    """Encode a query filter as a Filter message."""
    if isinstance(query_filter, FieldFilter):
        return {
            "fieldFilter": {
                "field": _encode_field_reference(query_filter.field_path),
                "op": query_filter.op.value,
                "value": encode_value(query_filter.value),
            }
        }
    elif isinstance(query_filter, UnaryFilter):
        return {
            "unaryFilter": {
                "op": query_filter.op.value,
                "field": _encode_field_reference(query_filter.field_path),
            }
        }
    elif isinstance(query_filter, CompositeFilter):
        return {
            "compositeFilter": {
                "op": query_filter.op.value,
                "filters": [encode_filter(nested_filter) for nested_filter in query_filter.filters],
            }
        }
    else:
        raise AssertionError(f"Unreachable code reached: unknown filter type {query_filter}")


def _encode_order(order: Order) -> JsonDict:
    return {"field": _encode_field_reference(order.field_path), "direction": order.direction.value}


def _encode_cursor_bound(bound: Optional[CursorBound]) -> Optional[JsonDict]:
    if bound is None:
        return None
    return {"values": [encode_value(value) for value in bound.values], "before": bound.before}


def encode_structured_query(query: StructuredQuery) -> JsonDict:
    """Encode a resolved query as a StructuredQuery message."""
    select = None
    if query.select is not None:
        select = {"fields": [_encode_field_reference(field_path) for field_path in query.select]}
    return _without_empty(
        {
            "select": select,
            "from": [{"collectionId": selector.collection_id} for selector in query.from_],
            "where": None if query.where is None else encode_filter(query.where),
            "orderBy": [_encode_order(order) for order in query.order_by] or None,
            "startAt": _encode_cursor_bound(query.start_at),
            "endAt": _encode_cursor_bound(query.end_at),
            "offset": query.offset or None,
            "limit": query.limit,
        }
    )


def encode_document(document: Document) -> JsonDict:
    return _without_empty(
        {
            "name": document.name,
            "fields": encode_fields(document.fields),
            "createTime": encode_timestamp(document.create_time),
            "updateTime": encode_timestamp(document.update_time),
        }
    )


def encode_watch_event(event: WatchEvent) -> JsonDict:
    """Encode a change stream event as a ListenResponse message."""
    if isinstance(event, TargetChange):
        return {
            "targetChange": _without_empty(
                {
                    "targetChangeType": event.change_type.value,
                    "targetIds": list(event.target_ids) or None,
                    "cause": None if event.cause is None else {"message": event.cause},
                    "readTime": encode_timestamp(event.read_time),
                }
            )
        }
    elif isinstance(event, DocumentChange):
        return {
            "documentChange": _without_empty(
                {
                    "document": encode_document(event.document),
                    "targetIds": list(event.target_ids) or None,
                    "removedTargetIds": list(event.removed_target_ids) or None,
                }
            )
        }
    elif isinstance(event, (DocumentDelete, DocumentRemove)):
        key = "documentDelete" if isinstance(event, DocumentDelete) else "documentRemove"
        return {
            key: _without_empty(
                {"document": event.document_path, "readTime": encode_timestamp(event.read_time)}
            )
        }
    elif isinstance(event, ExistenceFilter):
        return {"filter": _without_empty({"targetId": event.target_id, "count": event.count})}
    else:
        raise AssertionError(f"Unreachable code reached: unknown watch event {event}")


def _encode_doc_change(change: DocChange) -> JsonDict:
    return {
        "kind": change.kind.value,
        "doc": encode_document(change.document),
        "oldIndex": change.old_index,
        "newIndex": change.new_index,
    }


def encode_snapshot(snapshot: Snapshot) -> JsonDict:
    return _without_empty(
        {
            "docs": [encode_document(document) for document in snapshot.documents],
            "changes": [_encode_doc_change(change) for change in snapshot.changes],
            "readTime": encode_timestamp(snapshot.read_time),
        }
    )


def _encode_raw_field_path(raw_path: RawFieldPath) -> JsonDict:
    return {"field": list(raw_path)}


def _encode_merge_option(merge: RawMergeOption) -> Optional[JsonDict]:
    if merge is None:
        return None
    elif merge is MERGE_ALL:
        return {"all": True}
    else:
        return {"fields": [_encode_raw_field_path(raw_path) for raw_path in merge]}


def encode_clause_data(clause: ClauseData) -> JsonDict:
    """Encode a query clause of a conformance test, in its raw form."""
    if isinstance(clause, SelectData):
        return {"select": {"fields": [_encode_raw_field_path(path) for path in clause.fields]}}
    elif isinstance(clause, WhereData):
        return {
            "where": {
                "path": _encode_raw_field_path(clause.path),
                "op": clause.op,
                "jsonValue": clause.json_value,
            }
        }
    elif isinstance(clause, OrderByData):
        return {
            "orderBy": {"path": _encode_raw_field_path(clause.path), "direction": clause.direction}
        }
    elif isinstance(clause, OffsetData):
        return {"offset": clause.count}
    elif isinstance(clause, LimitData):
        return {"limit": clause.count}
    elif isinstance(clause, CursorData):
        if clause.doc_snapshot is not None:
            cursor: JsonDict = {
                "docSnapshot": {
                    "path": clause.doc_snapshot.path,
                    "jsonData": clause.doc_snapshot.json_data,
                }
            }
        else:
            cursor = {"jsonValues": list(clause.json_values)}
        return {clause.kind.value: cursor}
    else:
        raise AssertionError(f"Unreachable code reached: unknown clause {clause}")


def _encode_expected(test: ConformanceTest) -> Any:
    """Encode the expected result of a test, which is None for error tests."""
    if test.expected is None:
        return None
    elif test.kind == VectorKind.GET:
        return encode_get_document_request(test.expected)
    elif test.kind == VectorKind.QUERY:
        return encode_structured_query(test.expected)
    elif test.kind == VectorKind.LISTEN:
        return [encode_snapshot(snapshot) for snapshot in test.expected]
    else:
        return encode_commit_request(test.expected)


def _encode_raw_field_paths(
    raw_paths: Optional[Sequence[RawFieldPath]],
) -> Optional[List[JsonDict]]:
    if raw_paths is None:
        return None
    return [_encode_raw_field_path(raw_path) for raw_path in raw_paths]


def encode_conformance_test(test: ConformanceTest) -> JsonDict:
    """Encode a conformance test, with its inputs under a key named after the kind of call."""
    expected = _encode_expected(test)
    if test.kind == VectorKind.QUERY:
        body = {
            "collPath": test.collection_path,
            "clauses": [encode_clause_data(clause) for clause in test.clauses],
            "query": expected,
        }
    elif test.kind == VectorKind.LISTEN:
        body = {
            "responses": [encode_watch_event(event) for event in test.responses],
            "snapshots": expected,
        }
    else:
        body = {
            "docRefPath": test.document_path,
            "option": _encode_merge_option(test.merge),
            "precondition": encode_precondition(test.precondition),
            "jsonData": test.json_data,
            "fieldPaths": _encode_raw_field_paths(test.field_paths),
            "jsonValues": None if test.json_values is None else list(test.json_values),
            "request": expected,
        }
    body["isError"] = test.is_error or None

    return {
        "description": test.description,
        "comment": test.comment,
        test.kind.value: _without_empty(body),
    }
