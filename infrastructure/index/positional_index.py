"""In-memory positional index serving span queries."""
from __future__ import annotations

import logging
import threading
from typing import Mapping

from domain.entities import DocId, Document, Token
from domain.errors import UnknownDocumentError, UnknownFieldError
from domain.interfaces import (
    Analyzer,
    DocumentCursor,
    DocumentRepository,
    IndexPartition,
    PositionCursor,
    SearchIndex,
    SpanCursor,
)
from domain.queries import SpanQuery
from infrastructure.index.cursors import AnalyzedFieldCursor, ListDocumentCursor, ListSpanCursor
from infrastructure.index.segment import IndexSegment
from infrastructure.repositories.in_memory_document_repository import InMemoryDocumentRepository

logger = logging.getLogger(__name__)


class PositionalIndex(SearchIndex):
    """Builds segments from added documents and evaluates span queries on them.

    Documents become searchable once ``commit`` seals them into a new segment.
    Segments are never merged.
    """

    def __init__(self, analyzer: Analyzer, repository: DocumentRepository | None = None) -> None:
        self._analyzer = analyzer
        self._repository = repository or InMemoryDocumentRepository()
        self._segments: list[IndexSegment] = []
        self._pending: list[Document] = []
        self._next_id = 0
        self._write_lock = threading.Lock()
        self._load_stored()

    def _load_stored(self) -> None:
        # stored documents survive restarts, their postings are rebuilt
        stored = self._repository.list()
        if not stored:
            return
        self._seal(stored)
        self._next_id = stored[-1].id + 1

    def add_document(self, fields: Mapping[str, str]) -> DocId:
        with self._write_lock:
            doc_id = self._next_id
            self._next_id += 1
            self._pending.append(Document(id=doc_id, fields=dict(fields)))
        return doc_id

    def commit(self) -> IndexSegment | None:
        with self._write_lock:
            pending, self._pending = self._pending, []
            if not pending:
                return None
            for document in pending:
                self._repository.add(document)
            return self._seal(pending)

    def _seal(self, documents: list[Document]) -> IndexSegment:
        analyzed: list[tuple[DocId, dict[str, list[Token]]]] = []
        for document in documents:
            analyzed.append(
                (
                    document.id,
                    {name: list(self._analyzer.tokenize(text)) for name, text in document.fields.items()},
                )
            )
        segment = IndexSegment(len(self._segments), analyzed)
        self._segments.append(segment)
        logger.info("Committed %s with analyzer '%s'", segment, self._analyzer.name)
        return segment

    def partitions(self) -> list[IndexPartition]:
        return list(self._segments)

    def documents(self, query: SpanQuery, partition: IndexPartition) -> DocumentCursor:
        matches = self._segment(partition).intervals(query)
        return ListDocumentCursor(sorted(matches))

    def spans(self, query: SpanQuery, partition: IndexPartition, doc_id: DocId) -> SpanCursor:
        matches = self._segment(partition).intervals(query)
        return ListSpanCursor(matches.get(doc_id, []))

    def stored_field(self, doc_id: DocId, field_name: str) -> str:
        document = self._repository.get(doc_id)
        if document is None:
            raise UnknownDocumentError(doc_id)
        try:
            return document.fields[field_name]
        except KeyError:
            raise UnknownFieldError(doc_id, field_name) from None

    def tokenize(self, doc_id: DocId, field_name: str, analyzer: Analyzer) -> PositionCursor:
        cursor = AnalyzedFieldCursor(self.stored_field, analyzer)
        cursor.reset(doc_id, field_name)
        return cursor

    def close(self) -> None:
        """Drop segments and uncommitted documents. Stored fields are kept."""
        self._segments = []
        self._pending = []

    def __enter__(self) -> PositionalIndex:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _segment(self, partition: IndexPartition) -> IndexSegment:
        if not isinstance(partition, IndexSegment) or partition not in self._segments:
            raise ValueError(f"{partition!r} is not a partition of this index")
        return partition


__all__ = ["PositionalIndex"]
