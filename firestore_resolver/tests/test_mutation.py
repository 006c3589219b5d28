# Copyright 2026-present Kensho Technologies, LLC.
import unittest

from .. import resolve_commit_request
from ..exceptions import MalformedPathError, PreconditionConflictError, SentinelMisuseError
from ..field_path import FieldPath
from ..mutation import (
    MERGE_ALL,
    CreateSpec,
    DeleteSpec,
    DeleteWrite,
    FieldTransform,
    Precondition,
    SetSpec,
    TransformKind,
    TransformWrite,
    UpdatePathsSpec,
    UpdateSpec,
    UpdateWrite,
    resolve_mutation,
)
from ..mutation.extraction import extract_sentinels
from ..values import DELETE_FIELD, SERVER_TIMESTAMP, ArrayRemove, ArrayUnion, timestamp_from_seconds


DOCUMENT_PATH = "projects/p/databases/(default)/documents/C/d"
EXISTS_TRUE = Precondition(exists=True)
EXISTS_FALSE = Precondition(exists=False)


class ExtractionTests(unittest.TestCase):
    def test_extract_sentinels(self) -> None:
        data = {
            "a": 1,
            "b": {"c": SERVER_TIMESTAMP, "d": {}},
            "e": {"f": DELETE_FIELD},
            "g": ArrayUnion([1]),
        }
        extracted = extract_sentinels(data)
        self.assertEqual({"a": 1, "b": {"d": {}}}, extracted.data)
        self.assertEqual(
            {FieldPath("b", "c"): SERVER_TIMESTAMP, FieldPath("g"): ArrayUnion([1])},
            extracted.transforms,
        )
        self.assertEqual([FieldPath("e", "f")], extracted.deleted_paths)
        self.assertEqual([FieldPath("a"), FieldPath("b", "d")], extracted.leaf_paths)

    def test_extract_sentinels_with_prefix(self) -> None:
        extracted = extract_sentinels({"c": SERVER_TIMESTAMP}, prefix=FieldPath("a", "b"))
        self.assertEqual({}, extracted.data)
        self.assertEqual({FieldPath("a", "b", "c"): SERVER_TIMESTAMP}, extracted.transforms)

    def test_sentinels_in_arrays(self) -> None:
        for data in [
            {"a": [SERVER_TIMESTAMP]},
            {"a": [1, {"b": DELETE_FIELD}]},
            {"a": ArrayRemove([1, ArrayUnion([2])])},
        ]:
            with self.subTest(data=data):
                with self.assertRaises(SentinelMisuseError):
                    extract_sentinels(data)

    def test_non_string_keys(self) -> None:
        with self.assertRaises(MalformedPathError):
            extract_sentinels({1: "a"})  # type: ignore


class PreconditionTests(unittest.TestCase):
    def test_exactly_one_condition(self) -> None:
        with self.assertRaises(PreconditionConflictError):
            Precondition()

        with self.assertRaises(PreconditionConflictError):
            Precondition(exists=True, update_time=timestamp_from_seconds(1))

        with self.assertRaises(PreconditionConflictError):
            Precondition(exists=1)  # type: ignore

    def test_update_time_is_normalized(self) -> None:
        precondition = Precondition(update_time="1970-01-01T00:00:42Z")  # type: ignore
        self.assertEqual(Precondition(update_time=timestamp_from_seconds(42)), precondition)


class CreateTests(unittest.TestCase):
    def test_create(self) -> None:
        writes = resolve_mutation(CreateSpec(DOCUMENT_PATH, {"a": 1, "b": SERVER_TIMESTAMP}))
        self.assertEqual(
            [
                UpdateWrite(DOCUMENT_PATH, {"a": 1}, None, EXISTS_FALSE),
                TransformWrite(
                    DOCUMENT_PATH, (FieldTransform("b", TransformKind.REQUEST_TIME),), None
                ),
            ],
            writes,
        )

    def test_create_with_only_transforms(self) -> None:
        writes = resolve_mutation(CreateSpec(DOCUMENT_PATH, {"a": ArrayUnion([1, 2])}))
        self.assertEqual(
            [
                TransformWrite(
                    DOCUMENT_PATH,
                    (FieldTransform("a", TransformKind.APPEND_MISSING_ELEMENTS, (1, 2)),),
                    EXISTS_FALSE,
                )
            ],
            writes,
        )

    def test_create_rejects_delete(self) -> None:
        with self.assertRaises(SentinelMisuseError):
            resolve_mutation(CreateSpec(DOCUMENT_PATH, {"a": {"b": DELETE_FIELD}}))

    def test_invalid_document_path(self) -> None:
        with self.assertRaises(MalformedPathError):
            resolve_mutation(CreateSpec("projects/p/databases/(default)/documents/C", {}))


class SetTests(unittest.TestCase):
    def test_plain_set_always_writes(self) -> None:
        writes = resolve_mutation(SetSpec(DOCUMENT_PATH, {}))
        self.assertEqual([UpdateWrite(DOCUMENT_PATH, {}, None, None)], writes)

    def test_merge_all(self) -> None:
        data = {"a": 1, "b": {"c": DELETE_FIELD, "d": {}}, "e": SERVER_TIMESTAMP}
        writes = resolve_mutation(SetSpec(DOCUMENT_PATH, data, MERGE_ALL))
        self.assertEqual(
            [
                UpdateWrite(DOCUMENT_PATH, {"a": 1, "b": {"d": {}}}, ("a", "b.c", "b.d"), None),
                TransformWrite(
                    DOCUMENT_PATH, (FieldTransform("e", TransformKind.REQUEST_TIME),), None
                ),
            ],
            writes,
        )

    def test_merge_fields(self) -> None:
        data = {"h": {"f": 5, "g": SERVER_TIMESTAMP}, "e": 7, "x": SERVER_TIMESTAMP}
        writes = resolve_mutation(SetSpec(DOCUMENT_PATH, data, [FieldPath("h")]))
        self.assertEqual(
            [
                UpdateWrite(DOCUMENT_PATH, {"h": {"f": 5}}, ("h",), None),
                TransformWrite(
                    DOCUMENT_PATH, (FieldTransform("h.g", TransformKind.REQUEST_TIME),), None
                ),
            ],
            writes,
        )

    def test_invalid_merge_fields(self) -> None:
        with self.assertRaises(MalformedPathError):
            SetSpec(DOCUMENT_PATH, {"a": 1}, ["a"])  # type: ignore

        invalid_merges = [
            ({"a": 1}, []),
            ({"a": 1}, [FieldPath("b")]),
            ({"a": {"b": 1}}, [FieldPath("a"), FieldPath("a", "b")]),
            ({"a": 1}, [FieldPath("a"), FieldPath("a")]),
        ]
        for data, merge_fields in invalid_merges:
            with self.subTest(data=data, merge_fields=merge_fields):
                with self.assertRaises(MalformedPathError):
                    resolve_mutation(SetSpec(DOCUMENT_PATH, data, merge_fields))

        with self.assertRaises(SentinelMisuseError):
            resolve_mutation(
                SetSpec(DOCUMENT_PATH, {"a": 1, "b": DELETE_FIELD}, [FieldPath("a")])
            )


class UpdateTests(unittest.TestCase):
    def test_update_splits_top_level_keys(self) -> None:
        writes = resolve_mutation(
            UpdateSpec(DOCUMENT_PATH, {"a.b": 1, "c": DELETE_FIELD, "`d.e`": {"f.g": 2}})
        )
        self.assertEqual(
            [
                UpdateWrite(
                    DOCUMENT_PATH,
                    {"a": {"b": 1}, "d.e": {"f.g": 2}},
                    ("a.b", "c", "`d.e`"),
                    EXISTS_TRUE,
                )
            ],
            writes,
        )

    def test_update_with_update_time_precondition(self) -> None:
        precondition = Precondition(update_time=timestamp_from_seconds(42))
        writes = resolve_mutation(UpdateSpec(DOCUMENT_PATH, {"a": SERVER_TIMESTAMP}, precondition))
        self.assertEqual(
            [
                TransformWrite(
                    DOCUMENT_PATH,
                    (FieldTransform("a", TransformKind.REQUEST_TIME),),
                    precondition,
                )
            ],
            writes,
        )

    def test_update_errors(self) -> None:
        with self.assertRaises(MalformedPathError):
            resolve_mutation(UpdateSpec(DOCUMENT_PATH, {}))

        with self.assertRaises(MalformedPathError):
            resolve_mutation(UpdateSpec(DOCUMENT_PATH, {"a": 1, "a.b": 2}))

        with self.assertRaises(SentinelMisuseError):
            resolve_mutation(UpdateSpec(DOCUMENT_PATH, {"a": {"b": DELETE_FIELD}}))

        with self.assertRaises(PreconditionConflictError):
            resolve_mutation(UpdateSpec(DOCUMENT_PATH, {"a": 1}, EXISTS_TRUE))

    def test_update_paths(self) -> None:
        writes = resolve_mutation(
            UpdatePathsSpec(
                DOCUMENT_PATH,
                [(FieldPath("a.b", "c"), 1), (FieldPath("d"), ArrayRemove([3]))],
            )
        )
        self.assertEqual(
            [
                UpdateWrite(DOCUMENT_PATH, {"a.b": {"c": 1}}, ("`a.b`.c",), EXISTS_TRUE),
                TransformWrite(
                    DOCUMENT_PATH,
                    (FieldTransform("d", TransformKind.REMOVE_ALL_FROM_ARRAY, (3,)),),
                    None,
                ),
            ],
            writes,
        )

    def test_update_paths_errors(self) -> None:
        with self.assertRaises(MalformedPathError):
            resolve_mutation(UpdatePathsSpec(DOCUMENT_PATH, [("a", 1)]))  # type: ignore

        with self.assertRaises(MalformedPathError):
            resolve_mutation(
                UpdatePathsSpec(
                    DOCUMENT_PATH,
                    [(FieldPath("a"), SERVER_TIMESTAMP), (FieldPath("a"), ArrayUnion([1]))],
                )
            )


class DeleteTests(unittest.TestCase):
    def test_delete(self) -> None:
        self.assertEqual(
            [DeleteWrite(DOCUMENT_PATH, None)], resolve_mutation(DeleteSpec(DOCUMENT_PATH))
        )
        self.assertEqual(
            [DeleteWrite(DOCUMENT_PATH, EXISTS_TRUE)],
            resolve_mutation(DeleteSpec(DOCUMENT_PATH, EXISTS_TRUE)),
        )

    def test_commit_request(self) -> None:
        request = resolve_commit_request(DeleteSpec(DOCUMENT_PATH))
        self.assertEqual("projects/p/databases/(default)", request.database)
        self.assertEqual((DeleteWrite(DOCUMENT_PATH, None),), request.writes)


class MutationInputIsolationTests(unittest.TestCase):
    def test_resolving_twice_gives_identical_writes(self) -> None:
        specs = [
            CreateSpec(DOCUMENT_PATH, {"a": [1, 2], "b": SERVER_TIMESTAMP}),
            SetSpec(DOCUMENT_PATH, {"a": {"b": 1}, "c": ArrayUnion([1])}),
            SetSpec(DOCUMENT_PATH, {"a": 1, "b": SERVER_TIMESTAMP}, MERGE_ALL),
            SetSpec(
                DOCUMENT_PATH, {"a": 1, "b": ArrayRemove([2])}, [FieldPath("a"), FieldPath("b")]
            ),
            UpdateSpec(DOCUMENT_PATH, {"a.b": 1, "c": DELETE_FIELD, "d": SERVER_TIMESTAMP}),
            UpdatePathsSpec(
                DOCUMENT_PATH, [(FieldPath("a"), [1]), (FieldPath("b"), SERVER_TIMESTAMP)]
            ),
            DeleteSpec(DOCUMENT_PATH, EXISTS_TRUE),
        ]
        for spec in specs:
            with self.subTest(spec=spec):
                self.assertEqual(resolve_mutation(spec), resolve_mutation(spec))

    def test_writes_do_not_share_input_values(self) -> None:
        stored_list = [1, 2]
        nested_map = {"c": [3]}
        specs = [
            CreateSpec(DOCUMENT_PATH, {"a": stored_list, "b": nested_map}),
            SetSpec(DOCUMENT_PATH, {"a": stored_list, "b": nested_map}, MERGE_ALL),
            SetSpec(DOCUMENT_PATH, {"a": stored_list, "b": nested_map}, [FieldPath("a")]),
            UpdateSpec(DOCUMENT_PATH, {"a": stored_list, "b": nested_map}),
            UpdatePathsSpec(DOCUMENT_PATH, [(FieldPath("a"), stored_list)]),
        ]
        resolved = [(spec, resolve_mutation(spec)) for spec in specs]

        stored_list.append(99)
        nested_map["c"].append(99)
        nested_map["d"] = 99

        for spec, writes in resolved:
            with self.subTest(spec=spec):
                fields = writes[0].fields
                self.assertEqual([1, 2], fields["a"])
                if "b" in fields:
                    self.assertEqual({"c": [3]}, fields["b"])
