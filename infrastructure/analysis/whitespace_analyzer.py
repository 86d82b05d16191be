"""Analyzer that splits on whitespace and keeps tokens verbatim."""
from __future__ import annotations

from typing import Iterator

from domain.entities import Token
from domain.interfaces import Analyzer


class WhitespaceAnalyzer(Analyzer):
    """Every whitespace-separated chunk is one token, positions are consecutive."""

    @property
    def name(self) -> str:
        return "whitespace"

    def tokenize(self, text: str) -> Iterator[Token]:
        for position, chunk in enumerate(text.split()):
            yield Token(text=chunk, position=position)


__all__ = ["WhitespaceAnalyzer"]
