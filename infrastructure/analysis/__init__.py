from infrastructure.analysis.standard_analyzer import ENGLISH_STOP_WORDS, StandardAnalyzer
from infrastructure.analysis.whitespace_analyzer import WhitespaceAnalyzer

__all__ = ["ENGLISH_STOP_WORDS", "StandardAnalyzer", "WhitespaceAnalyzer"]
