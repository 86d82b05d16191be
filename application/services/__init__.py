from application.services.span_annotator import SpanAnnotator
from application.services.span_frequency_filter import SpanCursorFactory, SpanFrequencyFilter, count_spans

__all__ = [
    "SpanAnnotator",
    "SpanCursorFactory",
    "SpanFrequencyFilter",
    "count_spans",
]
