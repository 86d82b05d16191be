"""Structured span queries.

Queries are plain value objects; evaluating them against postings is the
index's job. Every clause of a composed query must target the same field.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


class SpanQuery(ABC):
    """Base class for queries that yield match intervals."""

    @property
    @abstractmethod
    def field(self) -> str:
        """Return the field every clause of the query targets."""


def _common_field(clauses: tuple[SpanQuery, ...]) -> str:
    if not clauses:
        raise ValueError("A composed span query needs at least one clause")
    fields = {clause.field for clause in clauses}
    if len(fields) != 1:
        raise ValueError(f"Span clauses must share one field, got {sorted(fields)}")
    return fields.pop()


@dataclass(frozen=True, slots=True)
class SpanTermQuery(SpanQuery):
    """Matches every occurrence of a single term."""

    field_name: str
    term: str

    @property
    def field(self) -> str:
        return self.field_name

    def __str__(self) -> str:
        return f"{self.field_name}:{self.term}"


@dataclass(frozen=True, slots=True)
class SpanNearQuery(SpanQuery):
    """Matches clauses appearing within ``slop`` positions of each other."""

    clauses: tuple[SpanQuery, ...]
    slop: int = 0
    in_order: bool = True

    def __post_init__(self) -> None:
        if self.slop < 0:
            raise ValueError("slop must be non-negative")
        _common_field(self.clauses)

    @property
    def field(self) -> str:
        return _common_field(self.clauses)

    def __str__(self) -> str:
        inner = ", ".join(str(clause) for clause in self.clauses)
        return f"spanNear([{inner}], {self.slop}, {str(self.in_order).lower()})"


@dataclass(frozen=True, slots=True)
class SpanOrQuery(SpanQuery):
    """Matches the union of its clauses' intervals."""

    clauses: tuple[SpanQuery, ...]

    def __post_init__(self) -> None:
        _common_field(self.clauses)

    @property
    def field(self) -> str:
        return _common_field(self.clauses)

    def __str__(self) -> str:
        return "spanOr([" + ", ".join(str(clause) for clause in self.clauses) + "])"


@dataclass(frozen=True, slots=True)
class SpanFirstQuery(SpanQuery):
    """Keeps matches that end at or before ``end``."""

    match: SpanQuery
    end: int

    def __post_init__(self) -> None:
        if self.end < 0:
            raise ValueError("end must be non-negative")

    @property
    def field(self) -> str:
        return self.match.field

    def __str__(self) -> str:
        return f"spanFirst({self.match}, {self.end})"


@dataclass(frozen=True, slots=True)
class SpanNotQuery(SpanQuery):
    """Keeps ``include`` matches that do not overlap any ``exclude`` match."""

    include: SpanQuery
    exclude: SpanQuery

    def __post_init__(self) -> None:
        _common_field((self.include, self.exclude))

    @property
    def field(self) -> str:
        return self.include.field

    def __str__(self) -> str:
        return f"spanNot({self.include}, {self.exclude})"


def span_near(*clauses: SpanQuery, slop: int = 0, in_order: bool = True) -> SpanNearQuery:
    return SpanNearQuery(clauses=tuple(clauses), slop=slop, in_order=in_order)


def span_or(*clauses: SpanQuery) -> SpanOrQuery:
    return SpanOrQuery(clauses=tuple(clauses))


__all__ = [
    "SpanQuery",
    "SpanTermQuery",
    "SpanNearQuery",
    "SpanOrQuery",
    "SpanFirstQuery",
    "SpanNotQuery",
    "span_near",
    "span_or",
]
