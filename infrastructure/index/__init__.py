from infrastructure.index.cursors import AnalyzedFieldCursor, ListDocumentCursor, ListSpanCursor
from infrastructure.index.positional_index import PositionalIndex
from infrastructure.index.segment import IndexSegment

__all__ = [
    "AnalyzedFieldCursor",
    "IndexSegment",
    "ListDocumentCursor",
    "ListSpanCursor",
    "PositionalIndex",
]
