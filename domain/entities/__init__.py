"""Domain entities for the spanlight engine."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Union


class Terminal(Enum):
    """Terminal values returned by exhausted cursors.

    They are disjoint from every valid document id or token position, so a
    caller has to narrow with ``is`` before treating a result as a number.
    """

    NO_MORE_DOCS = "no_more_docs"
    NO_MORE_POSITIONS = "no_more_positions"
    EXHAUSTED = "exhausted"

    def __repr__(self) -> str:
        return f"Terminal.{self.name}"


NO_MORE_DOCS = Terminal.NO_MORE_DOCS
NO_MORE_POSITIONS = Terminal.NO_MORE_POSITIONS
EXHAUSTED = Terminal.EXHAUSTED

DocId = int
Position = int
DocResult = Union[DocId, Literal[Terminal.NO_MORE_DOCS]]
PositionResult = Union[Position, Literal[Terminal.NO_MORE_POSITIONS]]


@dataclass(frozen=True, slots=True)
class Token:
    """A token of a field together with its ordinal position."""

    text: str
    position: Position


TokenResult = Union[Token, Literal[Terminal.EXHAUSTED]]


@dataclass(frozen=True, slots=True, order=True)
class MatchInterval:
    """Half-open range of token positions matched by a span query."""

    start: Position
    end: Position

    def __post_init__(self) -> None:
        if self.start < 0 or self.end <= self.start:
            raise ValueError(f"Invalid match interval [{self.start}, {self.end})")

    def overlaps(self, other: MatchInterval) -> bool:
        return self.start < other.end and other.start < self.end

    @property
    def width(self) -> int:
        return self.end - self.start


@dataclass(slots=True)
class Document:
    """A stored document owned by the index."""

    id: DocId
    fields: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class AnnotatedDocument:
    """Rendering of a document's field with span boundaries marked."""

    id: DocId
    text: str
    span_count: int


@dataclass(frozen=True, slots=True)
class DocumentFailure:
    """A document whose annotation was discarded."""

    document_id: DocId
    error: Exception


@dataclass(slots=True)
class AnnotationRun:
    """Outcome of annotating every document matched by one query."""

    documents: list[AnnotatedDocument] = field(default_factory=list)
    failures: list[DocumentFailure] = field(default_factory=list)

    @property
    def span_counts(self) -> dict[DocId, int]:
        return {doc.id: doc.span_count for doc in self.documents}


__all__ = [
    "Terminal",
    "NO_MORE_DOCS",
    "NO_MORE_POSITIONS",
    "EXHAUSTED",
    "DocId",
    "Position",
    "DocResult",
    "PositionResult",
    "TokenResult",
    "Token",
    "MatchInterval",
    "Document",
    "AnnotatedDocument",
    "DocumentFailure",
    "AnnotationRun",
]
