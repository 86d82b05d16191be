"""Inline annotation of span matches over a re-tokenized field."""
from __future__ import annotations

import heapq
from dataclasses import dataclass, field

from domain.entities import (
    EXHAUSTED,
    NO_MORE_POSITIONS,
    AnnotatedDocument,
    DocId,
    Position,
    PositionResult,
)
from domain.errors import MisalignedPositionError, ProtocolViolation
from domain.interfaces import PositionCursor, SpanCursor


@dataclass(slots=True)
class _AnnotationState:
    """Lookahead over the span cursor while tokens are consumed.

    ``pending_open`` is the start of the next interval not yet opened; its end
    is read eagerly into ``_next_end`` because the cursor only exposes it right
    after the start. Ends of opened intervals wait in ``_open_ends`` until the
    token before them has been written.
    """

    spans: SpanCursor
    pending_open: PositionResult = NO_MORE_POSITIONS
    span_count: int = 0
    _spans_done: bool = False
    _next_end: Position | None = None
    _open_ends: list[Position] = field(default_factory=list)

    def __post_init__(self) -> None:
        self._fetch()

    @property
    def pending_close(self) -> PositionResult:
        return self._open_ends[0] if self._open_ends else NO_MORE_POSITIONS

    def opens_at(self, position: Position) -> bool:
        return self.pending_open is not NO_MORE_POSITIONS and self.pending_open == position

    def closes_after(self, position: Position) -> bool:
        pending_close = self.pending_close
        return pending_close is not NO_MORE_POSITIONS and pending_close == position + 1

    def open(self) -> None:
        if self._next_end is None:
            raise ProtocolViolation("No interval is waiting to be opened")
        heapq.heappush(self._open_ends, self._next_end)
        self._fetch()

    def close(self) -> None:
        heapq.heappop(self._open_ends)
        self.span_count += 1

    def _fetch(self) -> None:
        # never touch the cursor again once it reported termination
        if self._spans_done:
            return
        start = self.spans.next_interval_start()
        if start is NO_MORE_POSITIONS:
            self._spans_done = True
            self.pending_open = NO_MORE_POSITIONS
            self._next_end = None
            return
        self.pending_open = start
        self._next_end = self.spans.current_interval_end()


class SpanAnnotator:
    """Merges a span cursor and a position cursor into marked-up text."""

    def __init__(self, open_marker: str = "<", close_marker: str = ">", separator: str = " ") -> None:
        self.open_marker = open_marker
        self.close_marker = close_marker
        self.separator = separator

    def annotate(
        self,
        document_id: DocId,
        spans: SpanCursor,
        positions: PositionCursor,
    ) -> AnnotatedDocument:
        """Render the field ``positions`` is scoped to, marking every interval of ``spans``.

        Raises:
            MisalignedPositionError: tokens ran out while an interval was still
                waiting to be opened or closed.
        """
        state = _AnnotationState(spans)
        rendered: list[str] = []

        while True:
            token = positions.advance()
            if token is EXHAUSTED:
                break
            parts: list[str] = []
            while state.opens_at(token.position):
                parts.append(self.open_marker)
                state.open()
            parts.append(token.text)
            while state.closes_after(token.position):
                parts.append(self.close_marker)
                state.close()
            rendered.append("".join(parts))

        if state.pending_open is not NO_MORE_POSITIONS or state.pending_close is not NO_MORE_POSITIONS:
            field_name = positions.scope[1] if positions.scope else ""
            raise MisalignedPositionError(document_id, field_name, state.pending_open, state.pending_close)

        return AnnotatedDocument(
            id=document_id,
            text=self.separator.join(rendered),
            span_count=state.span_count,
        )

    def strip(self, text: str) -> str:
        """Remove every open and close marker from annotated ``text``."""
        return text.replace(self.open_marker, "").replace(self.close_marker, "")


__all__ = ["SpanAnnotator"]
