"""Use case that renders every matching document with its spans marked."""
from __future__ import annotations

import logging

from application.services.span_annotator import SpanAnnotator
from domain.entities import AnnotationRun, DocumentFailure
from domain.errors import MisalignedPositionError
from domain.interfaces import Analyzer, SearchIndex
from domain.queries import SpanQuery

logger = logging.getLogger(__name__)


def annotate_spans(
    query: SpanQuery,
    *,
    index: SearchIndex,
    analyzer: Analyzer,
    annotator: SpanAnnotator,
    field_name: str | None = None,
) -> AnnotationRun:
    """Annotate the field of every document ``query`` matches.

    ``analyzer`` must be the one the index was built with, otherwise positions
    drift and the affected documents are reported as failures instead of
    being rendered.
    """

    field_name = field_name or query.field
    run = AnnotationRun()
    for partition in index.partitions():
        logger.debug("Annotating partition %d (%d documents)", partition.ordinal, len(partition))
        with index.documents(query, partition) as documents:
            for doc_id in documents:
                with index.spans(query, partition, doc_id) as spans, index.tokenize(
                    doc_id, field_name, analyzer
                ) as positions:
                    try:
                        annotated = annotator.annotate(doc_id, spans, positions)
                    except MisalignedPositionError as exc:
                        logger.warning("Skipping document %s: %s", doc_id, exc)
                        run.failures.append(DocumentFailure(document_id=doc_id, error=exc))
                        continue
                logger.debug("Document %s, spans count %d: %s", doc_id, annotated.span_count, annotated.text)
                run.documents.append(annotated)

    logger.info(
        "Query %s: %d documents annotated, %d failed",
        query,
        len(run.documents),
        len(run.failures),
    )
    return run


__all__ = ["annotate_spans"]
