"""SQLite-репозиторий для хранимых полей документов."""
from __future__ import annotations

import json
import sqlite3
from pathlib import Path

from domain.entities import DocId, Document
from domain.interfaces import DocumentRepository

SCHEMA_VERSION = 1


class SqliteDocumentRepository(DocumentRepository):
    """Хранит значения полей документов в лёгкой SQLite-базе."""

    def __init__(self, db_path: str | Path = "spanlight.db") -> None:
        self._db_path = Path(db_path)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        return sqlite3.connect(self._db_path)

    def _ensure_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS schema_version (
                    id INTEGER PRIMARY KEY CHECK (id = 1),
                    version INTEGER NOT NULL
                )
                """
            )
            conn.execute(
                "INSERT OR IGNORE INTO schema_version (id, version) VALUES (1, ?)",
                (SCHEMA_VERSION,),
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS stored_documents (
                    id INTEGER PRIMARY KEY,
                    fields TEXT NOT NULL
                )
                """
            )

    def add(self, document: Document) -> None:
        with self._connect() as conn:
            conn.execute(
                "REPLACE INTO stored_documents (id, fields) VALUES (?, ?)",
                (document.id, json.dumps(document.fields)),
            )

    def list(self) -> list[Document]:
        with self._connect() as conn:
            rows = conn.execute("SELECT id, fields FROM stored_documents ORDER BY id").fetchall()
        return [Document(id=row[0], fields=json.loads(row[1])) for row in rows]

    def get(self, document_id: DocId) -> Document | None:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, fields FROM stored_documents WHERE id = ?",
                (document_id,),
            ).fetchone()
        if row is None:
            return None
        return Document(id=row[0], fields=json.loads(row[1]))


__all__ = ["SqliteDocumentRepository"]
