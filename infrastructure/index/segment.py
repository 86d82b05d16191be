"""Immutable in-memory index segment with positional postings."""
from __future__ import annotations

import threading
from collections import OrderedDict
from typing import Mapping, Sequence

from domain.entities import DocId, Position, Token
from domain.interfaces import IndexPartition
from domain.queries import SpanQuery
from infrastructure.index.span_evaluator import SpanMatches, evaluate

DEFAULT_CACHED_QUERIES = 128


class IndexSegment(IndexPartition):
    """Postings of a batch of documents sealed by one commit.

    Segments never change after construction, so evaluated span matches are
    cached per query. The cache keeps the ``max_cached_queries`` most recently
    used queries, sub-clauses of composed queries included.
    """

    def __init__(
        self,
        ordinal: int,
        documents: Sequence[tuple[DocId, Mapping[str, Sequence[Token]]]],
        max_cached_queries: int = DEFAULT_CACHED_QUERIES,
    ) -> None:
        if max_cached_queries < 1:
            raise ValueError("max_cached_queries must be at least 1")
        self._ordinal = ordinal
        self._size = len(documents)
        self._postings: dict[tuple[str, str], dict[DocId, list[Position]]] = {}
        for doc_id, fields in documents:
            for field_name, tokens in fields.items():
                for token in tokens:
                    per_doc = self._postings.setdefault((field_name, token.text), {})
                    per_doc.setdefault(doc_id, []).append(token.position)
        self._max_cached_queries = max_cached_queries
        self._cache: OrderedDict[SpanQuery, SpanMatches] = OrderedDict()
        # re-entrant: evaluating a composed query looks up its clauses
        self._cache_lock = threading.RLock()

    @property
    def ordinal(self) -> int:
        return self._ordinal

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return f"IndexSegment(ordinal={self._ordinal}, docs={self._size})"

    def postings(self, field_name: str, term: str) -> dict[DocId, list[Position]]:
        return self._postings.get((field_name, term), {})

    def intervals(self, query: SpanQuery) -> SpanMatches:
        with self._cache_lock:
            matches = self._cache.get(query)
            if matches is not None:
                self._cache.move_to_end(query)
                return matches
            matches = evaluate(query, self)
            self._cache[query] = matches
            while len(self._cache) > self._max_cached_queries:
                self._cache.popitem(last=False)
            return matches


__all__ = ["DEFAULT_CACHED_QUERIES", "IndexSegment"]
