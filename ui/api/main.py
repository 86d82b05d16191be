"""FastAPI layer that exposes ingest, annotate and filter operations."""
from __future__ import annotations

import threading
from typing import Literal, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from application.use_cases.annotate_spans import annotate_spans
from application.use_cases.filter_by_span_frequency import filter_by_span_frequency
from application.use_cases.ingest_documents import ingest_documents
from domain.queries import (
    SpanFirstQuery,
    SpanNearQuery,
    SpanNotQuery,
    SpanOrQuery,
    SpanQuery,
    SpanTermQuery,
)
from infrastructure.config import ContainerConfig, build_default_container
from ui.logging_utils import setup_logging

setup_logging()
app = FastAPI(title="spanlight API")
container = build_default_container(ContainerConfig.from_env())
# a batch is added and committed as a whole before the next one starts
_ingest_lock = threading.Lock()


class SpanQueryPayload(BaseModel):
    """JSON tree describing a span query."""

    type: Literal["term", "near", "or", "first", "not"]
    field: Optional[str] = None
    term: Optional[str] = None
    clauses: list[SpanQueryPayload] = Field(default_factory=list)
    slop: int = 0
    in_order: bool = True
    match: Optional[SpanQueryPayload] = None
    end: Optional[int] = None
    include: Optional[SpanQueryPayload] = None
    exclude: Optional[SpanQueryPayload] = None

    def to_query(self) -> SpanQuery:
        if self.type == "term":
            if not self.field or self.term is None:
                raise ValueError("term queries need 'field' and 'term'")
            return SpanTermQuery(self.field, self.term)
        if self.type == "near":
            return SpanNearQuery(
                clauses=tuple(clause.to_query() for clause in self.clauses),
                slop=self.slop,
                in_order=self.in_order,
            )
        if self.type == "or":
            return SpanOrQuery(clauses=tuple(clause.to_query() for clause in self.clauses))
        if self.type == "first":
            if self.match is None or self.end is None:
                raise ValueError("first queries need 'match' and 'end'")
            return SpanFirstQuery(self.match.to_query(), self.end)
        if self.include is None or self.exclude is None:
            raise ValueError("not queries need 'include' and 'exclude'")
        return SpanNotQuery(self.include.to_query(), self.exclude.to_query())


SpanQueryPayload.model_rebuild()


class DocumentPayload(BaseModel):
    fields: dict[str, str]


class IngestRequest(BaseModel):
    documents: list[DocumentPayload]


class IngestResponse(BaseModel):
    ids: list[int]


class StoredDocument(BaseModel):
    id: int
    fields: dict[str, str]


class AnnotateRequest(BaseModel):
    query: SpanQueryPayload
    field: Optional[str] = None


class AnnotatedPayload(BaseModel):
    id: int
    text: str
    span_count: int


class FailurePayload(BaseModel):
    document_id: int
    error: str


class AnnotateResponse(BaseModel):
    query: str
    documents: list[AnnotatedPayload]
    failures: list[FailurePayload]


class FilterRequest(BaseModel):
    query: SpanQueryPayload
    min_count: int = Field(default=1, ge=1)


class FilterResponse(BaseModel):
    query: str
    min_count: int
    document_ids: list[int]


def _to_query(payload: SpanQueryPayload) -> SpanQuery:
    try:
        return payload.to_query()
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


@app.post("/documents", response_model=IngestResponse)
def ingest_endpoint(payload: IngestRequest) -> IngestResponse:
    with _ingest_lock:
        ids = ingest_documents([doc.fields for doc in payload.documents], index=container.index)
    return IngestResponse(ids=ids)


@app.get("/documents", response_model=list[StoredDocument])
def documents_endpoint() -> list[StoredDocument]:
    return [StoredDocument(id=doc.id, fields=doc.fields) for doc in container.document_repository.list()]


@app.post("/annotate", response_model=AnnotateResponse)
def annotate_endpoint(payload: AnnotateRequest) -> AnnotateResponse:
    query = _to_query(payload.query)
    run = annotate_spans(
        query,
        index=container.index,
        analyzer=container.analyzer,
        annotator=container.annotator,
        field_name=payload.field,
    )
    return AnnotateResponse(
        query=str(query),
        documents=[AnnotatedPayload(id=doc.id, text=doc.text, span_count=doc.span_count) for doc in run.documents],
        failures=[FailurePayload(document_id=f.document_id, error=str(f.error)) for f in run.failures],
    )


@app.post("/filter", response_model=FilterResponse)
def filter_endpoint(payload: FilterRequest) -> FilterResponse:
    query = _to_query(payload.query)
    document_ids = filter_by_span_frequency(query, index=container.index, min_count=payload.min_count)
    return FilterResponse(query=str(query), min_count=payload.min_count, document_ids=document_ids)
