"""Word analyzer with lowercasing and stop-word removal."""
from __future__ import annotations

import re
from typing import Iterable, Iterator

from domain.entities import Token
from domain.interfaces import Analyzer

ENGLISH_STOP_WORDS = frozenset(
    {
        "a", "an", "and", "are", "as", "at", "be", "but", "by", "for", "if", "in", "into",
        "is", "it", "no", "not", "of", "on", "or", "such", "that", "the", "their", "then",
        "there", "these", "they", "this", "to", "was", "will", "with",
    }
)

_WORD_RE = re.compile(r"\w+(?:'\w+)*", re.UNICODE)


class StandardAnalyzer(Analyzer):
    """Splits on non-word characters, lowercases and drops stop words.

    A removed stop word still consumes its position, so the remaining tokens
    keep the positions a whitespace split of the same words would give them.
    """

    def __init__(self, stop_words: Iterable[str] | None = None, lowercase: bool = True) -> None:
        self.stop_words = frozenset(ENGLISH_STOP_WORDS if stop_words is None else stop_words)
        self.lowercase = lowercase

    @property
    def name(self) -> str:
        return "standard"

    def tokenize(self, text: str) -> Iterator[Token]:
        for position, match in enumerate(_WORD_RE.finditer(text)):
            word = match.group(0)
            if self.lowercase:
                word = word.lower()
            if word in self.stop_words:
                continue
            yield Token(text=word, position=position)


__all__ = ["ENGLISH_STOP_WORDS", "StandardAnalyzer"]
