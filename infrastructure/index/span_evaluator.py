"""Evaluation of span queries against the postings of one segment.

Results map each matching document to its intervals sorted by start, then end.
"""
from __future__ import annotations

from itertools import chain
from typing import TYPE_CHECKING

from domain.entities import DocId, MatchInterval
from domain.queries import (
    SpanFirstQuery,
    SpanNearQuery,
    SpanNotQuery,
    SpanOrQuery,
    SpanQuery,
    SpanTermQuery,
)

if TYPE_CHECKING:
    from infrastructure.index.segment import IndexSegment

SpanMatches = dict[DocId, list[MatchInterval]]


def evaluate(query: SpanQuery, segment: IndexSegment) -> SpanMatches:
    if isinstance(query, SpanTermQuery):
        postings = segment.postings(query.field_name, query.term)
        return {
            doc_id: [MatchInterval(position, position + 1) for position in positions]
            for doc_id, positions in postings.items()
        }
    if isinstance(query, SpanNearQuery):
        return _near(query, segment)
    if isinstance(query, SpanOrQuery):
        return _or(query, segment)
    if isinstance(query, SpanFirstQuery):
        matches = segment.intervals(query.match)
        return _drop_empty(
            {doc_id: [i for i in intervals if i.end <= query.end] for doc_id, intervals in matches.items()}
        )
    if isinstance(query, SpanNotQuery):
        return _not(query, segment)
    raise TypeError(f"Unsupported span query type: {type(query).__name__}")


def _near(query: SpanNearQuery, segment: IndexSegment) -> SpanMatches:
    sub_matches = [segment.intervals(clause) for clause in query.clauses]
    common = set(sub_matches[0]).intersection(*sub_matches[1:])
    matcher = _ordered_matches if query.in_order else _unordered_matches
    results: SpanMatches = {}
    for doc_id in common:
        subs = [matches[doc_id] for matches in sub_matches]
        results[doc_id] = matcher(subs, query.slop)
    return _drop_empty(results)


def _ordered_matches(subs: list[list[MatchInterval]], slop: int) -> list[MatchInterval]:
    """Walk the first clause; later clauses only ever move forward.

    For each interval of the first clause, every following clause is advanced
    to its first interval starting at or after the previous clause's end. The
    gaps between consecutive clauses are summed and compared to ``slop``.
    """
    heads = [0] * len(subs)
    found: list[MatchInterval] = []
    for first in subs[0]:
        prev_end = first.end
        gaps = 0
        for index in range(1, len(subs)):
            intervals = subs[index]
            head = heads[index]
            while head < len(intervals) and intervals[head].start < prev_end:
                head += 1
            heads[index] = head
            if head == len(intervals):
                return found
            gaps += intervals[head].start - prev_end
            prev_end = intervals[head].end
        if gaps <= slop:
            found.append(MatchInterval(first.start, prev_end))
    return found


def _unordered_matches(subs: list[list[MatchInterval]], slop: int) -> list[MatchInterval]:
    """Slide a window over the clause heads, advancing the leftmost one each step."""
    heads = [0] * len(subs)
    found: list[MatchInterval] = []
    while True:
        current = [intervals[head] for intervals, head in zip(subs, heads)]
        leftmost = min(range(len(current)), key=lambda index: (current[index].start, current[index].end))
        start = current[leftmost].start
        end = max(interval.end for interval in current)
        covered = sum(interval.width for interval in current)
        if end - start - covered <= slop:
            found.append(MatchInterval(start, end))
        heads[leftmost] += 1
        if heads[leftmost] == len(subs[leftmost]):
            return sorted(found)


def _or(query: SpanOrQuery, segment: IndexSegment) -> SpanMatches:
    sub_matches = [segment.intervals(clause) for clause in query.clauses]
    doc_ids = set().union(*sub_matches)
    return {
        doc_id: sorted(chain.from_iterable(matches.get(doc_id, []) for matches in sub_matches))
        for doc_id in doc_ids
    }


def _not(query: SpanNotQuery, segment: IndexSegment) -> SpanMatches:
    included = segment.intervals(query.include)
    excluded = segment.intervals(query.exclude)
    results: SpanMatches = {}
    for doc_id, intervals in included.items():
        blockers = excluded.get(doc_id, [])
        results[doc_id] = [i for i in intervals if not any(i.overlaps(b) for b in blockers)]
    return _drop_empty(results)


def _drop_empty(matches: SpanMatches) -> SpanMatches:
    return {doc_id: intervals for doc_id, intervals in matches.items() if intervals}


__all__ = ["SpanMatches", "evaluate"]
