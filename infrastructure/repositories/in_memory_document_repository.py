"""Хранилище документов в памяти для тестов и демо."""
from __future__ import annotations

from domain.entities import DocId, Document
from domain.interfaces import DocumentRepository


class InMemoryDocumentRepository(DocumentRepository):
    """Хранит копии документов в словаре Python."""

    def __init__(self) -> None:
        self._documents: dict[DocId, Document] = {}

    def add(self, document: Document) -> None:
        self._documents[document.id] = Document(id=document.id, fields=dict(document.fields))

    def list(self) -> list[Document]:
        return [self._documents[doc_id] for doc_id in sorted(self._documents)]

    def get(self, document_id: DocId) -> Document | None:
        return self._documents.get(document_id)


__all__ = ["InMemoryDocumentRepository"]
