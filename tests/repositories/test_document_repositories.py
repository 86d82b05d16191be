import sqlite3
import tempfile
import unittest
from pathlib import Path

from domain.entities import Document
from domain.errors import UnknownDocumentError, UnknownFieldError
from domain.queries import SpanTermQuery
from infrastructure.analysis.whitespace_analyzer import WhitespaceAnalyzer
from infrastructure.index.positional_index import PositionalIndex
from infrastructure.repositories.in_memory_document_repository import InMemoryDocumentRepository
from infrastructure.repositories.sqlite_document_repository import SqliteDocumentRepository


class TestSqliteDocumentRepository(unittest.TestCase):
    def test_roundtrip(self):
        with tempfile.TemporaryDirectory() as tmp:
            repo = SqliteDocumentRepository(db_path=Path(tmp) / "spanlight.db")
            repo.add(Document(id=3, fields={"f": "the lazy dog", "title": "dog"}))
            repo.add(Document(id=1, fields={"f": "the sleepy cat"}))

            self.assertEqual(repo.get(3), Document(id=3, fields={"f": "the lazy dog", "title": "dog"}))
            self.assertIsNone(repo.get(2))
            self.assertEqual([doc.id for doc in repo.list()], [1, 3])

    def test_schema_version_is_recorded(self):
        with tempfile.TemporaryDirectory() as tmp:
            db_path = Path(tmp) / "spanlight.db"
            SqliteDocumentRepository(db_path=db_path)
            with sqlite3.connect(db_path) as conn:
                version = conn.execute("SELECT version FROM schema_version").fetchone()[0]
            self.assertEqual(version, 1)

    def test_index_rebuilds_postings_from_stored_documents(self):
        with tempfile.TemporaryDirectory() as tmp:
            db_path = Path(tmp) / "spanlight.db"
            first = PositionalIndex(WhitespaceAnalyzer(), SqliteDocumentRepository(db_path=db_path))
            first.add_document({"f": "the quick red fox"})
            first.add_document({"f": "the lazy dog"})
            first.commit()

            reopened = PositionalIndex(WhitespaceAnalyzer(), SqliteDocumentRepository(db_path=db_path))
            (segment,) = reopened.partitions()
            with reopened.documents(SpanTermQuery("f", "fox"), segment) as documents:
                self.assertEqual(list(documents), [0])
            self.assertEqual(reopened.add_document({"f": "a cat"}), 2)


class TestStoredFieldRetrieval(unittest.TestCase):
    def setUp(self) -> None:
        self.index = PositionalIndex(WhitespaceAnalyzer(), InMemoryDocumentRepository())
        self.doc_id = self.index.add_document({"f": "red fox"})

    def test_uncommitted_documents_are_not_stored(self):
        with self.assertRaises(UnknownDocumentError):
            self.index.stored_field(self.doc_id, "f")
        self.assertEqual(self.index.partitions(), [])

    def test_stored_field_after_commit(self):
        self.index.commit()
        self.assertEqual(self.index.stored_field(self.doc_id, "f"), "red fox")
        with self.assertRaises(UnknownFieldError):
            self.index.stored_field(self.doc_id, "title")

    def test_commit_without_documents_adds_no_partition(self):
        self.index.commit()
        self.assertIsNone(self.index.commit())
        self.assertEqual(len(self.index.partitions()), 1)


if __name__ == "__main__":
    unittest.main()
