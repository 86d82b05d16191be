"""Keep documents whose span query matched at least N times."""
from __future__ import annotations

import logging
from typing import Callable, Iterator

from domain.entities import NO_MORE_POSITIONS, DocId
from domain.interfaces import DocumentCursor, SpanCursor

logger = logging.getLogger(__name__)

SpanCursorFactory = Callable[[DocId], SpanCursor]


def count_spans(spans: SpanCursor) -> int:
    """Drain ``spans`` and return the number of completed intervals.

    An interval counts once its start has been paired with an end read.
    """
    count = 0
    while spans.next_interval_start() is not NO_MORE_POSITIONS:
        spans.current_interval_end()
        count += 1
    return count


class SpanFrequencyFilter:
    """Threshold documents on the number of intervals their span cursor yields."""

    def __init__(self, min_count: int = 1) -> None:
        if min_count < 1:
            raise ValueError(f"min_count must be at least 1, got {min_count}")
        self.min_count = min_count

    def counts(self, documents: DocumentCursor, span_factory: SpanCursorFactory) -> Iterator[tuple[DocId, int]]:
        """Yield ``(doc_id, count)`` for every candidate document, in cursor order."""
        for doc_id in documents:
            with span_factory(doc_id) as spans:
                count = count_spans(spans)
            logger.debug("Document %s: %s completed spans", doc_id, count)
            yield doc_id, count

    def filter(self, documents: DocumentCursor, span_factory: SpanCursorFactory) -> Iterator[DocId]:
        for doc_id, count in self.counts(documents, span_factory):
            if count >= self.min_count:
                yield doc_id


__all__ = ["SpanCursorFactory", "SpanFrequencyFilter", "count_spans"]
