"""Span query matching over the brown fox / red fox documents."""
import unittest
from contextlib import ExitStack

from application.services.span_annotator import SpanAnnotator
from application.use_cases.annotate_spans import annotate_spans
from domain.entities import NO_MORE_POSITIONS, MatchInterval
from domain.queries import SpanFirstQuery, SpanNotQuery, SpanQuery, SpanTermQuery, span_near, span_or
from infrastructure.analysis.whitespace_analyzer import WhitespaceAnalyzer
from tests.index_fixtures import BROWN_AND_RED_FOX, FIELD, open_index

BROWN_FOX, RED_FOX = 0, 1


def _term(text: str) -> SpanTermQuery:
    return SpanTermQuery(FIELD, text)


class TestSpanQueries(unittest.TestCase):
    def setUp(self) -> None:
        stack = ExitStack()
        self.addCleanup(stack.close)
        self.index = stack.enter_context(open_index(BROWN_AND_RED_FOX))
        (self.segment,) = self.index.partitions()

    def matches(self, query) -> dict[int, list[MatchInterval]]:
        return self.segment.intervals(query)

    def matched_docs(self, query) -> list[int]:
        with self.index.documents(query, self.segment) as documents:
            return list(documents)

    def test_term(self):
        self.assertEqual(self.matched_docs(_term("brown")), [BROWN_FOX])
        self.assertEqual(self.matches(_term("the"))[RED_FOX], [MatchInterval(0, 1), MatchInterval(6, 7)])

    def test_first(self):
        self.assertEqual(self.matched_docs(SpanFirstQuery(_term("brown"), 2)), [])
        self.assertEqual(self.matched_docs(SpanFirstQuery(_term("brown"), 3)), [BROWN_FOX])

    def test_ordered_near_needs_enough_slop(self):
        clauses = (_term("quick"), _term("brown"), _term("dog"))
        self.assertEqual(self.matched_docs(span_near(*clauses, slop=0)), [])
        self.assertEqual(self.matched_docs(span_near(*clauses, slop=4)), [])
        query = span_near(*clauses, slop=5)
        self.assertEqual(self.matched_docs(query), [BROWN_FOX])
        self.assertEqual(self.matches(query)[BROWN_FOX], [MatchInterval(1, 9)])

    def test_unordered_near(self):
        query = span_near(_term("lazy"), _term("fox"), slop=3, in_order=False)
        self.assertEqual(self.matched_docs(query), [BROWN_FOX])
        self.assertEqual(self.matches(query)[BROWN_FOX], [MatchInterval(3, 8)])
        self.assertEqual(self.matched_docs(span_near(_term("lazy"), _term("fox"), slop=2, in_order=False)), [])

    def test_ordered_near_respects_order(self):
        self.assertEqual(self.matched_docs(span_near(_term("lazy"), _term("fox"), slop=10)), [])

    def test_not(self):
        quick_fox = span_near(_term("quick"), _term("fox"), slop=1)
        self.assertEqual(self.matched_docs(quick_fox), [BROWN_FOX, RED_FOX])
        self.assertEqual(self.matched_docs(SpanNotQuery(quick_fox, _term("dog"))), [BROWN_FOX, RED_FOX])
        self.assertEqual(self.matched_docs(SpanNotQuery(quick_fox, _term("red"))), [BROWN_FOX])

    def test_or_of_nested_near(self):
        quick_fox = span_near(_term("quick"), _term("fox"), slop=1)
        lazy_dog = span_near(_term("lazy"), _term("dog"))
        sleepy_cat = span_near(_term("sleepy"), _term("cat"))
        qf_near_ld = span_near(quick_fox, lazy_dog, slop=3)
        qf_near_sc = span_near(quick_fox, sleepy_cat, slop=3)
        self.assertEqual(self.matched_docs(qf_near_ld), [BROWN_FOX])
        self.assertEqual(self.matched_docs(qf_near_sc), [RED_FOX])
        self.assertEqual(self.matched_docs(span_or(qf_near_ld, qf_near_sc)), [BROWN_FOX, RED_FOX])

    def test_spans_of_unmatched_document_are_empty(self):
        with self.index.spans(_term("brown"), self.segment, RED_FOX) as spans:
            self.assertIs(spans.next_interval_start(), NO_MORE_POSITIONS)

    def test_annotates_every_occurrence(self):
        run = annotate_spans(
            _term("the"),
            index=self.index,
            analyzer=WhitespaceAnalyzer(),
            annotator=SpanAnnotator(),
        )
        self.assertEqual(
            [doc.text for doc in run.documents],
            [
                "<the> quick brown fox jumps over <the> lazy dog",
                "<the> quick red fox jumps over <the> sleepy cat",
            ],
        )
        self.assertEqual(run.span_counts, {BROWN_FOX: 2, RED_FOX: 2})

    def test_mixed_fields_are_rejected(self):
        with self.assertRaises(ValueError):
            span_near(_term("red"), SpanTermQuery("other", "fox"))

    def test_query_base_class_is_abstract(self):
        with self.assertRaises(TypeError):
            SpanQuery()


if __name__ == "__main__":
    unittest.main()
