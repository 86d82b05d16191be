"""Exception hierarchy shared by the spanlight layers."""
from __future__ import annotations

from domain.entities import DocId, PositionResult


class SpanlightError(Exception):
    """Base class for errors raised by the engine."""


class ProtocolViolation(SpanlightError):
    """A cursor was driven outside of its call discipline."""


class MisalignedPositionError(SpanlightError):
    """Token positions ran out while span boundaries were still pending.

    This means the analyzer used to re-tokenize the field does not match the
    one that produced the indexed positions.
    """

    def __init__(
        self,
        document_id: DocId,
        field_name: str,
        pending_open: PositionResult,
        pending_close: PositionResult,
    ) -> None:
        self.document_id = document_id
        self.field_name = field_name
        self.pending_open = pending_open
        self.pending_close = pending_close
        super().__init__(
            f"Document {document_id} field '{field_name}': tokens exhausted with "
            f"pending open={pending_open!r}, pending close={pending_close!r}"
        )


class UnknownDocumentError(SpanlightError, KeyError):
    """No stored document exists for the requested id."""

    def __init__(self, document_id: DocId) -> None:
        self.document_id = document_id
        super().__init__(f"Unknown document id {document_id}")

    def __str__(self) -> str:
        return str(self.args[0])


class UnknownFieldError(SpanlightError, KeyError):
    """The stored document has no value for the requested field."""

    def __init__(self, document_id: DocId, field_name: str) -> None:
        self.document_id = document_id
        self.field_name = field_name
        super().__init__(f"Document {document_id} has no stored field '{field_name}'")

    def __str__(self) -> str:
        return str(self.args[0])


__all__ = [
    "SpanlightError",
    "ProtocolViolation",
    "MisalignedPositionError",
    "UnknownDocumentError",
    "UnknownFieldError",
]
