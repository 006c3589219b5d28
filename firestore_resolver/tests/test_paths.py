# Copyright 2026-present Kensho Technologies, LLC.
import unittest

from ..exceptions import MalformedPathError
from ..paths import (
    DatabaseInfo,
    get_database_path,
    split_collection_path,
    split_document_path,
    validate_collection_path,
    validate_document_path,
)


DATABASE_PATH = "projects/p/databases/(default)"
DOCUMENTS_ROOT = DATABASE_PATH + "/documents"


class ResourcePathTests(unittest.TestCase):
    def test_database_info(self) -> None:
        database_info = DatabaseInfo("p")
        self.assertEqual(DATABASE_PATH, database_info.database_path)
        self.assertEqual(DOCUMENTS_ROOT, database_info.documents_root)
        self.assertEqual(DOCUMENTS_ROOT + "/C", database_info.collection_path("C"))
        self.assertEqual(DOCUMENTS_ROOT + "/C/d/E", database_info.collection_path("C", "d", "E"))
        self.assertEqual(DOCUMENTS_ROOT + "/C/d", database_info.document_path("C", "d"))
        self.assertEqual(
            "projects/p/databases/other", DatabaseInfo("p", "other").database_path
        )

    def test_invalid_database_info(self) -> None:
        for project_id, database_id in [("", "(default)"), ("a/b", "(default)"), ("p", "")]:
            with self.subTest(project_id=project_id, database_id=database_id):
                with self.assertRaises(MalformedPathError):
                    DatabaseInfo(project_id, database_id)

        with self.assertRaises(MalformedPathError):
            DatabaseInfo("p").collection_path("C", "d")

        with self.assertRaises(MalformedPathError):
            DatabaseInfo("p").document_path("C")

    def test_validation(self) -> None:
        validate_document_path(DOCUMENTS_ROOT + "/C/d")
        validate_document_path(DOCUMENTS_ROOT + "/C/d/E/f")
        validate_collection_path(DOCUMENTS_ROOT + "/C")

        invalid_document_paths = [
            DOCUMENTS_ROOT,
            DOCUMENTS_ROOT + "/C",
            DOCUMENTS_ROOT + "/C//d",
            DOCUMENTS_ROOT + "/C/d/",
            "projects/p/databases/(default)/C/d",
            "C/d",
            "",
        ]
        for path in invalid_document_paths:
            with self.subTest(path=path):
                with self.assertRaises(MalformedPathError):
                    validate_document_path(path)

        with self.assertRaises(MalformedPathError):
            validate_collection_path(DOCUMENTS_ROOT + "/C/d")

        with self.assertRaises(MalformedPathError):
            validate_document_path(None)  # type: ignore

    def test_splitting(self) -> None:
        self.assertEqual((DOCUMENTS_ROOT + "/C", "d"), split_document_path(DOCUMENTS_ROOT + "/C/d"))
        self.assertEqual((DOCUMENTS_ROOT, "C"), split_collection_path(DOCUMENTS_ROOT + "/C"))
        self.assertEqual(
            (DOCUMENTS_ROOT + "/C/d", "E"), split_collection_path(DOCUMENTS_ROOT + "/C/d/E")
        )
        self.assertEqual(DATABASE_PATH, get_database_path(DOCUMENTS_ROOT + "/C/d/E/f"))
