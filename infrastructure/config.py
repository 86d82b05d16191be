"""Dependency wiring for the spanlight engine."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Literal

from application.services.span_annotator import SpanAnnotator
from domain.interfaces import Analyzer, DocumentRepository
from infrastructure.analysis.standard_analyzer import StandardAnalyzer
from infrastructure.analysis.whitespace_analyzer import WhitespaceAnalyzer
from infrastructure.index.positional_index import PositionalIndex
from infrastructure.repositories.in_memory_document_repository import InMemoryDocumentRepository
from infrastructure.repositories.sqlite_document_repository import SqliteDocumentRepository


AnalyzerName = Literal["whitespace", "standard"]
DocumentStoreName = Literal["memory", "sqlite"]


@dataclass(slots=True)
class Container:
    """Simple container bundling concrete infrastructure implementations."""

    analyzer: Analyzer
    document_repository: DocumentRepository
    index: PositionalIndex
    annotator: SpanAnnotator


@dataclass(slots=True)
class ContainerConfig:
    """Configuration for selecting the analyzer, store and marker text."""

    analyzer: AnalyzerName = "whitespace"
    document_store: DocumentStoreName = "memory"
    db_path: str = "spanlight.db"
    open_marker: str = "<"
    close_marker: str = ">"
    separator: str = " "

    @classmethod
    def from_env(cls) -> ContainerConfig:
        defaults = cls()
        return cls(
            analyzer=os.getenv("SPANLIGHT_ANALYZER", defaults.analyzer),  # type: ignore[arg-type]
            document_store=os.getenv("SPANLIGHT_DOCUMENT_STORE", defaults.document_store),  # type: ignore[arg-type]
            db_path=os.getenv("SPANLIGHT_DB_PATH", defaults.db_path),
            open_marker=os.getenv("SPANLIGHT_OPEN_MARKER", defaults.open_marker),
            close_marker=os.getenv("SPANLIGHT_CLOSE_MARKER", defaults.close_marker),
            separator=os.getenv("SPANLIGHT_SEPARATOR", defaults.separator),
        )


_ANALYZER_FACTORIES: dict[AnalyzerName, Callable[[], Analyzer]] = {
    "whitespace": WhitespaceAnalyzer,
    "standard": StandardAnalyzer,
}


def _build_document_repository(cfg: ContainerConfig) -> DocumentRepository:
    if cfg.document_store == "memory":
        return InMemoryDocumentRepository()
    if cfg.document_store == "sqlite":
        db_path = Path(cfg.db_path)
        db_path.parent.mkdir(parents=True, exist_ok=True)
        return SqliteDocumentRepository(db_path=db_path)
    raise ValueError(f"Unknown document store '{cfg.document_store}'")


def build_default_container(config: ContainerConfig | None = None) -> Container:
    """Instantiate the default infrastructure stack."""

    cfg = config or ContainerConfig()
    try:
        analyzer = _ANALYZER_FACTORIES[cfg.analyzer]()
    except KeyError as exc:
        raise ValueError(f"Unknown analyzer '{cfg.analyzer}'") from exc
    document_repository = _build_document_repository(cfg)
    index = PositionalIndex(analyzer, document_repository)
    annotator = SpanAnnotator(
        open_marker=cfg.open_marker,
        close_marker=cfg.close_marker,
        separator=cfg.separator,
    )

    return Container(
        analyzer=analyzer,
        document_repository=document_repository,
        index=index,
        annotator=annotator,
    )


__all__ = ["Container", "ContainerConfig", "build_default_container"]
