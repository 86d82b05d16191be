"""End-to-end annotation and frequency filtering over the two fox documents."""
import unittest

from application.services.span_annotator import SpanAnnotator
from application.use_cases.annotate_spans import annotate_spans
from application.use_cases.filter_by_span_frequency import filter_by_span_frequency, span_counts
from domain.errors import MisalignedPositionError
from domain.queries import SpanFirstQuery, SpanTermQuery, span_near, span_or
from infrastructure.analysis.standard_analyzer import StandardAnalyzer
from infrastructure.analysis.whitespace_analyzer import WhitespaceAnalyzer
from tests.index_fixtures import FIELD, TWO_FOXES, open_index

DOC_A, DOC_B = 0, 1

RED_FOX = span_near(SpanTermQuery(FIELD, "red"), SpanTermQuery(FIELD, "fox"))
LAZY_DOG = span_near(SpanTermQuery(FIELD, "lazy"), SpanTermQuery(FIELD, "dog"))
BOTH_PAIRS_IN_FIRST_12 = SpanFirstQuery(span_or(RED_FOX, LAZY_DOG), 12)
RED_FOX_NEAR_LAZY_DOG = span_near(RED_FOX, LAZY_DOG, slop=5)


def _annotate(index, query, analyzer=None):
    return annotate_spans(
        query,
        index=index,
        analyzer=analyzer or WhitespaceAnalyzer(),
        annotator=SpanAnnotator(),
    )


class TestFoxScenario(unittest.TestCase):
    def test_adjacent_pair_counts_once_per_document(self):
        with open_index(TWO_FOXES) as index:
            run = _annotate(index, RED_FOX)
            self.assertEqual(run.span_counts, {DOC_A: 1, DOC_B: 1})
            self.assertEqual(
                [doc.text for doc in run.documents],
                [
                    "the quick brown fox and <red fox> jump over the lazy dog",
                    "the quick <red fox> jumps over the sleepy cat",
                ],
            )
            self.assertEqual(span_counts(RED_FOX, index=index), {DOC_A: 1, DOC_B: 1})

    def test_only_document_a_has_both_pairs(self):
        with open_index(TWO_FOXES) as index:
            self.assertEqual(filter_by_span_frequency(BOTH_PAIRS_IN_FIRST_12, index=index, min_count=2), [DOC_A])
            self.assertEqual(
                filter_by_span_frequency(BOTH_PAIRS_IN_FIRST_12, index=index, min_count=1),
                [DOC_A, DOC_B],
            )
            self.assertEqual(filter_by_span_frequency(BOTH_PAIRS_IN_FIRST_12, index=index, min_count=3), [])

            run = _annotate(index, BOTH_PAIRS_IN_FIRST_12)
            self.assertEqual(run.documents[0].text, "the quick brown fox and <red fox> jump over the <lazy dog>")
            self.assertEqual(run.span_counts, {DOC_A: 2, DOC_B: 1})

    def test_nested_clauses_are_not_counted_at_the_outer_level(self):
        with open_index(TWO_FOXES) as index:
            run = _annotate(index, RED_FOX_NEAR_LAZY_DOG)
            self.assertEqual(len(run.documents), 1)
            self.assertEqual(run.documents[0].text, "the quick brown fox and <red fox jump over the lazy dog>")
            self.assertEqual(run.documents[0].span_count, 1)
            self.assertEqual(filter_by_span_frequency(RED_FOX_NEAR_LAZY_DOG, index=index, min_count=2), [])

    def test_min_count_one_returns_every_matching_document(self):
        fox = SpanTermQuery(FIELD, "fox")
        with open_index(TWO_FOXES) as index:
            (segment,) = index.partitions()
            with index.documents(fox, segment) as documents:
                matching = list(documents)
            self.assertEqual(filter_by_span_frequency(fox, index=index, min_count=1), matching)
            self.assertEqual(span_counts(fox, index=index), {DOC_A: 2, DOC_B: 1})

    def test_partitions_are_walked_in_order(self):
        with open_index(TWO_FOXES, ("a red fox and another red fox",)) as index:
            self.assertEqual(len(index.partitions()), 2)
            self.assertEqual(filter_by_span_frequency(RED_FOX, index=index, min_count=1), [0, 1, 2])
            self.assertEqual(filter_by_span_frequency(RED_FOX, index=index, min_count=2), [2])

    def test_misaligned_document_is_reported_and_skipped(self):
        fox = SpanTermQuery(FIELD, "fox")
        with open_index(("the red fox", "big red-fox"), analyzer=StandardAnalyzer()) as index:
            with self.assertLogs("application.use_cases.annotate_spans", level="WARNING"):
                run = _annotate(index, fox, analyzer=WhitespaceAnalyzer())
        self.assertEqual([doc.text for doc in run.documents], ["the red <fox>"])
        self.assertEqual([failure.document_id for failure in run.failures], [1])
        self.assertIsInstance(run.failures[0].error, MisalignedPositionError)


if __name__ == "__main__":
    unittest.main()
