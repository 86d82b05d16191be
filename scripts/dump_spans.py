"""Проиндексировать документы и показать найденные спаны для фразы из терминов."""
from __future__ import annotations

import argparse

from application.use_cases.annotate_spans import annotate_spans
from application.use_cases.filter_by_span_frequency import filter_by_span_frequency
from application.use_cases.ingest_documents import ingest_documents
from domain.queries import SpanQuery, SpanTermQuery, span_near
from infrastructure.config import ContainerConfig, build_default_container
from ui.logging_utils import setup_logging


def build_query(field_name: str, terms: list[str], slop: int, in_order: bool) -> SpanQuery:
    clauses = [SpanTermQuery(field_name, term) for term in terms]
    if len(clauses) == 1:
        return clauses[0]
    return span_near(*clauses, slop=slop, in_order=in_order)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("documents", nargs="+", help="Тексты документов для индексации.")
    parser.add_argument(
        "--term",
        action="append",
        dest="terms",
        required=True,
        help="Термин запроса. Несколько терминов объединяются в span-near.",
    )
    parser.add_argument("--field", default="f", help="Имя поля (по умолчанию: f)")
    parser.add_argument("--slop", type=int, default=0, help="Допустимый зазор между терминами.")
    parser.add_argument("--unordered", action="store_true", help="Не требовать порядок терминов.")
    parser.add_argument("--min-count", type=int, default=1, help="Минимальное число спанов в документе.")
    parser.add_argument("--analyzer", choices=("whitespace", "standard"), default="whitespace")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    setup_logging(log_file="")
    container = build_default_container(ContainerConfig(analyzer=args.analyzer))
    ingest_documents([{args.field: text} for text in args.documents], index=container.index)

    query = build_query(args.field, args.terms, args.slop, not args.unordered)
    print(f"Query: {query}")
    run = annotate_spans(query, index=container.index, analyzer=container.analyzer, annotator=container.annotator)
    for document in run.documents:
        print(f"Doc id {document.id}, spans count {document.span_count}: {document.text}")
    for failure in run.failures:
        print(f"Doc id {failure.document_id} skipped: {failure.error}")
    print(f"Docs count: {len(run.documents)}")

    selected = filter_by_span_frequency(query, index=container.index, min_count=args.min_count)
    print(f"Docs with at least {args.min_count} spans: {selected}")


if __name__ == "__main__":
    main()
