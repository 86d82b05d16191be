"""Use case for adding documents to the positional index."""
from __future__ import annotations

import logging
from typing import Iterable, Mapping

from domain.entities import DocId
from infrastructure.index.positional_index import PositionalIndex

logger = logging.getLogger(__name__)


def ingest_documents(
    sources: Iterable[Mapping[str, str]],
    *,
    index: PositionalIndex,
) -> list[DocId]:
    """Index every field mapping as one document and commit them as a segment."""

    doc_ids = [index.add_document(fields) for fields in sources]
    index.commit()
    logger.info("Ingested %d documents", len(doc_ids))
    return doc_ids


__all__ = ["ingest_documents"]
