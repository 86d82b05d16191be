"""Abstract interfaces for the spanlight engine.

The cursor base classes enforce the call discipline every concrete cursor
shares: forward-only traversal, strictly increasing values and an idempotent
terminal state. Subclasses only supply the raw ``_next_*`` steps.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterator

from domain.entities import (
    EXHAUSTED,
    NO_MORE_DOCS,
    NO_MORE_POSITIONS,
    DocId,
    DocResult,
    Document,
    MatchInterval,
    Position,
    PositionResult,
    Token,
    TokenResult,
)
from domain.errors import ProtocolViolation
from domain.queries import SpanQuery


class _ScopedResource:
    """Cursors hold segment-level resources released by ``close``."""

    def close(self) -> None:
        """Release underlying resources. Safe to call more than once."""

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class DocumentCursor(_ScopedResource, ABC):
    """Iterates ids of documents matching a span query, in ascending order."""

    def __init__(self) -> None:
        self._terminated = False
        self._last_doc: DocId | None = None

    def next_document(self) -> DocResult:
        if self._terminated:
            return NO_MORE_DOCS
        doc_id = self._next_doc()
        if doc_id is NO_MORE_DOCS:
            self._terminated = True
            return NO_MORE_DOCS
        if self._last_doc is not None and doc_id <= self._last_doc:
            raise ProtocolViolation(f"Document ids must increase: {doc_id} after {self._last_doc}")
        self._last_doc = doc_id
        return doc_id

    def __iter__(self) -> Iterator[DocId]:
        while True:
            doc_id = self.next_document()
            if doc_id is NO_MORE_DOCS:
                return
            yield doc_id

    @abstractmethod
    def _next_doc(self) -> DocResult:
        """Return the next matching document id or ``NO_MORE_DOCS``."""


class PositionCursor(_ScopedResource, ABC):
    """Walks the tokens of one document field, restartable per document."""

    def __init__(self) -> None:
        self._scope: tuple[DocId, str] | None = None
        self._terminated = False
        self._last_position: Position | None = None

    @property
    def scope(self) -> tuple[DocId, str] | None:
        return self._scope

    def reset(self, doc_id: DocId, field_name: str) -> None:
        self._reset(doc_id, field_name)
        self._scope = (doc_id, field_name)
        self._terminated = False
        self._last_position = None

    def advance(self) -> TokenResult:
        if self._scope is None:
            raise ProtocolViolation("advance() called before reset()")
        if self._terminated:
            return EXHAUSTED
        token = self._next_token()
        if token is EXHAUSTED:
            self._terminated = True
            return EXHAUSTED
        if self._last_position is not None and token.position <= self._last_position:
            raise ProtocolViolation(
                f"Token positions must increase: {token.position} after {self._last_position}"
            )
        self._last_position = token.position
        return token

    def __iter__(self) -> Iterator[Token]:
        while True:
            token = self.advance()
            if token is EXHAUSTED:
                return
            yield token

    @abstractmethod
    def _reset(self, doc_id: DocId, field_name: str) -> None:
        """Load the field value of ``doc_id`` and rewind to its first token."""

    @abstractmethod
    def _next_token(self) -> TokenResult:
        """Return the next token of the current scope or ``EXHAUSTED``."""


class SpanCursor(_ScopedResource, ABC):
    """Iterates the match intervals of one document.

    Every non-terminal ``next_interval_start`` allows exactly one
    ``current_interval_end`` read. Not reading it skips that interval.
    """

    def __init__(self) -> None:
        self._terminated = False
        self._current: MatchInterval | None = None
        self._end_readable = False

    def next_interval_start(self) -> PositionResult:
        if self._terminated:
            return NO_MORE_POSITIONS
        interval = self._next_interval()
        if interval is None:
            self._terminated = True
            self._current = None
            self._end_readable = False
            return NO_MORE_POSITIONS
        if self._current is not None and interval.start < self._current.start:
            raise ProtocolViolation(
                f"Interval starts must not decrease: {interval.start} after {self._current.start}"
            )
        self._current = interval
        self._end_readable = True
        return interval.start

    def current_interval_end(self) -> Position:
        if not self._end_readable or self._current is None:
            raise ProtocolViolation(
                "current_interval_end() requires a preceding non-terminal next_interval_start()"
            )
        self._end_readable = False
        return self._current.end

    @abstractmethod
    def _next_interval(self) -> MatchInterval | None:
        """Return the next interval, or ``None`` once the document is drained."""


class Analyzer(ABC):
    """Turns field text into positioned tokens."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return a stable identifier for this analyzer."""

    @abstractmethod
    def tokenize(self, text: str) -> Iterator[Token]:
        """Yield tokens with strictly increasing positions."""


class DocumentRepository(ABC):
    """Persists stored field values of indexed documents."""

    @abstractmethod
    def add(self, document: Document) -> None:
        """Store a document record."""

    @abstractmethod
    def list(self) -> list[Document]:
        """Return all stored documents ordered by id."""

    @abstractmethod
    def get(self, document_id: DocId) -> Document | None:
        """Retrieve a document by id."""


class IndexPartition(ABC):
    """A unit of the index over which cursors are scoped."""

    @property
    @abstractmethod
    def ordinal(self) -> int:
        """Return the partition's position among the index partitions."""

    @abstractmethod
    def __len__(self) -> int:
        """Return the number of documents held by the partition."""


class SearchIndex(ABC):
    """Read side of a positional index as consumed by the engine."""

    @abstractmethod
    def partitions(self) -> list[IndexPartition]:
        """Return the partitions that make up the index."""

    @abstractmethod
    def documents(self, query: SpanQuery, partition: IndexPartition) -> DocumentCursor:
        """Return a cursor over documents of ``partition`` matching ``query``."""

    @abstractmethod
    def spans(self, query: SpanQuery, partition: IndexPartition, doc_id: DocId) -> SpanCursor:
        """Return a cursor over the match intervals of ``query`` in ``doc_id``."""

    @abstractmethod
    def stored_field(self, doc_id: DocId, field_name: str) -> str:
        """Return the stored text of a document field."""

    @abstractmethod
    def tokenize(self, doc_id: DocId, field_name: str, analyzer: Analyzer) -> PositionCursor:
        """Return a position cursor already reset to ``doc_id``/``field_name``."""


__all__ = [
    "DocumentCursor",
    "PositionCursor",
    "SpanCursor",
    "Analyzer",
    "DocumentRepository",
    "IndexPartition",
    "SearchIndex",
]
