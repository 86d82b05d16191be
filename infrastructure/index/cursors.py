"""Concrete cursors over evaluated segment matches and analyzed stored fields."""
from __future__ import annotations

from typing import Callable, Iterator, Sequence

from domain.entities import EXHAUSTED, NO_MORE_DOCS, DocId, DocResult, MatchInterval, Token, TokenResult
from domain.interfaces import Analyzer, DocumentCursor, PositionCursor, SpanCursor


class ListDocumentCursor(DocumentCursor):
    """Walks a sorted list of document ids."""

    def __init__(self, doc_ids: Sequence[DocId]) -> None:
        super().__init__()
        self._doc_ids = list(doc_ids)
        self._index = 0

    def _next_doc(self) -> DocResult:
        if self._index >= len(self._doc_ids):
            return NO_MORE_DOCS
        doc_id = self._doc_ids[self._index]
        self._index += 1
        return doc_id

    def close(self) -> None:
        self._doc_ids = []


class ListSpanCursor(SpanCursor):
    """Walks the intervals one document matched."""

    def __init__(self, intervals: Sequence[MatchInterval]) -> None:
        super().__init__()
        self._intervals = list(intervals)
        self._index = 0

    def _next_interval(self) -> MatchInterval | None:
        if self._index >= len(self._intervals):
            return None
        interval = self._intervals[self._index]
        self._index += 1
        return interval

    def close(self) -> None:
        self._intervals = []


class AnalyzedFieldCursor(PositionCursor):
    """Re-tokenizes a stored field value with the given analyzer."""

    def __init__(self, load_field: Callable[[DocId, str], str], analyzer: Analyzer) -> None:
        super().__init__()
        self._load_field = load_field
        self._analyzer = analyzer
        self._tokens: Iterator[Token] | None = None

    def _reset(self, doc_id: DocId, field_name: str) -> None:
        text = self._load_field(doc_id, field_name)
        self._tokens = self._analyzer.tokenize(text)

    def _next_token(self) -> TokenResult:
        if self._tokens is None:
            return EXHAUSTED
        return next(self._tokens, EXHAUSTED)

    def close(self) -> None:
        self._tokens = None


__all__ = ["AnalyzedFieldCursor", "ListDocumentCursor", "ListSpanCursor"]
