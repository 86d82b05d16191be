"""Use case that keeps documents matching a span query at least N times."""
from __future__ import annotations

import logging

from application.services.span_frequency_filter import SpanFrequencyFilter
from domain.entities import DocId
from domain.interfaces import SearchIndex
from domain.queries import SpanQuery

logger = logging.getLogger(__name__)


def filter_by_span_frequency(
    query: SpanQuery,
    *,
    index: SearchIndex,
    min_count: int = 1,
) -> list[DocId]:
    """Return ids of documents whose span count reaches ``min_count``, in index order."""

    span_filter = SpanFrequencyFilter(min_count)
    selected: list[DocId] = []
    for partition in index.partitions():
        with index.documents(query, partition) as documents:
            selected.extend(
                span_filter.filter(documents, lambda doc_id: index.spans(query, partition, doc_id))
            )
    logger.info("Query %s: %d documents with at least %d spans", query, len(selected), min_count)
    return selected


def span_counts(query: SpanQuery, *, index: SearchIndex) -> dict[DocId, int]:
    """Return the completed span count of every document ``query`` matches."""

    span_filter = SpanFrequencyFilter()
    counts: dict[DocId, int] = {}
    for partition in index.partitions():
        with index.documents(query, partition) as documents:
            counts.update(span_filter.counts(documents, lambda doc_id: index.spans(query, partition, doc_id)))
    return counts


__all__ = ["filter_by_span_frequency", "span_counts"]
