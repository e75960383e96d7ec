# =============================================================================
# feedpulse/cli/ingest.py - CLI for Feedback Ingestion and Maintenance
# =============================================================================
#
# Standalone CLI for working with the feedback store outside of the web API.
# It talks to the same backend the server uses (FEEDBACK_BACKEND, plus the
# SQLite path or Upstash credentials), so operators can load a feedback
# export, inspect what is stored, or wipe the store from a shell.
#
# Supported subcommands:
#
#   ingest  - Clean, dedup, classify and store a .txt/.csv file or a string
#   list    - Print every stored record, oldest first
#   report  - Print the sentiment breakdown and theme counts
#   delete  - Delete one record by id
#   clear   - Delete every record (asks for confirmation unless --yes)
#
# With FEEDBACK_BACKEND=memory every invocation starts from an empty store,
# so the memory backend is only useful for a single `ingest` dry run.
#
# Usage examples:
#   python -m feedpulse.cli.ingest ingest --file exports/feedback.csv
#   python -m feedpulse.cli.ingest ingest --text "Great product, very satisfied!"
#   python -m feedpulse.cli.ingest report
#   python -m feedpulse.cli.ingest delete 4
#   python -m feedpulse.cli.ingest clear --yes
# =============================================================================

"""Standalone CLI for loading, inspecting and clearing stored feedback.

Usage::

    python -m feedpulse.cli.ingest ingest --file exports/feedback.csv

    python -m feedpulse.cli.ingest list

    python -m feedpulse.cli.ingest clear --yes
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any

import httpx

from feedpulse.config.lexicons import load_analysis_tables
from feedpulse.config.loader import load_config
from feedpulse.config.settings import Settings
from feedpulse.interfaces.feedback_store import IFeedbackStore
from feedpulse.models.ingestion import IngestionReport
from feedpulse.providers.store.factory import build_feedback_store
from feedpulse.services.ingestion_service import IngestionService
from feedpulse.services.report_service import ReportService
from feedpulse.services.sentiment_classifier import SentimentClassifier
from feedpulse.services.theme_extractor import ThemeExtractor
from feedpulse.utils.errors import FeedbackPulseError, NotFoundError


def _build_components(
    app_settings: Settings,
    http_client: httpx.AsyncClient,
) -> dict[str, Any]:
    """Construct the store and services for a one-shot CLI run."""
    tables = load_analysis_tables(load_config(settings=app_settings))

    store = build_feedback_store(app_settings, http_client=http_client)
    classifier = SentimentClassifier(
        positive_words=tables["positive_words"],
        negative_words=tables["negative_words"],
    )
    ingestion = IngestionService(
        store=store,
        classifier=classifier,
        spam_phrases=tables["spam_phrases"],
        min_length=tables["min_length"],
        allowed_extensions=tables["allowed_extensions"],
        allowed_content_types=tables["allowed_content_types"],
    )
    reports = ReportService(
        store=store,
        classifier=classifier,
        theme_extractor=ThemeExtractor(tables["themes"]),
    )
    return {"store": store, "ingestion": ingestion, "reports": reports}


def _print_ingestion(report: IngestionReport) -> None:
    print("\nIngestion complete:")
    print(f"  Rows submitted:  {report.submitted}")
    print(f"  Unique rows:     {report.unique}")
    print(f"  Duplicates:      {report.duplicates}")
    print(f"  Stored:          {report.stored}")
    print(f"  Failed:          {report.failed}")


async def _handle_ingest(args: argparse.Namespace, ingestion: IngestionService) -> int:
    """Ingest a file or an inline string."""
    if args.file:
        path = Path(args.file)
        if not path.is_file():
            print(f"Error: file not found: {path}", file=sys.stderr)
            return 1
        print(f"Ingesting file: {path}")
        report = await ingestion.ingest_upload(path.name, None, path.read_bytes())
    else:
        report = await ingestion.ingest_text(args.text, source="cli")

    _print_ingestion(report)
    return 0


async def _handle_list(store: IFeedbackStore) -> int:
    """Print every stored record."""
    records = await store.list_all()
    if not records:
        print("No feedback stored.")
        return 0

    for record in records:
        sentiment = record.sentiment.value if record.sentiment else "-"
        print(f"{record.id:>5}  {sentiment:<8}  {record.text}")
    print(f"\n{len(records)} record(s)")
    return 0


async def _handle_report(reports: ReportService) -> int:
    """Print the dashboard summary."""
    report = await reports.build_report()

    print("Feedback Report")
    print("=" * 40)
    print(f"  Total feedback:   {report.total}")
    if not report.has_data:
        print("\n  No feedback data available.")
        return 0

    counts = report.sentiment_counts
    pct = report.sentiment_percentages
    print(f"  Positive:         {counts.positive} ({pct.positive}%)")
    print(f"  Negative:         {counts.negative} ({pct.negative}%)")
    print(f"  Neutral:          {counts.neutral} ({pct.neutral}%)")

    if report.ranked_themes:
        print("\n  Themes:")
        for name, count in report.ranked_themes:
            print(f"    {name:<15} {count}")

    if report.top_theme:
        top = report.top_theme
        print(
            f"\n  Top theme: {top.name} "
            f"({top.percentage}% of feedback mentions {top.name.lower()})"
        )
    return 0


async def _handle_delete(args: argparse.Namespace, store: IFeedbackStore) -> int:
    """Delete one record by id."""
    if not await store.delete_by_id(args.id):
        raise NotFoundError(f"Feedback {args.id} not found")
    print(f"Deleted feedback {args.id}.")
    return 0


async def _handle_clear(args: argparse.Namespace, store: IFeedbackStore) -> int:
    """Delete every record.  Requires confirmation unless --yes is passed."""
    records = await store.list_all()
    if not records:
        print("Store is already empty. Nothing to clear.")
        return 0

    if not args.yes:
        confirm = input(f"  Delete all {len(records)} records? [y/N] ").strip().lower()
        if confirm not in ("y", "yes"):
            print("  Aborted.")
            return 0

    await store.clear_all()
    print(f"Deleted {len(records)} records.")
    return 0


async def _run(args: argparse.Namespace, app_settings: Settings) -> int:
    """Build the components, initialize the store and dispatch *args*."""
    async with httpx.AsyncClient(timeout=app_settings.store_timeout_seconds) as http_client:
        components = _build_components(app_settings, http_client)
        store: IFeedbackStore = components["store"]
        await store.initialize()

        if getattr(store, "degraded", False):
            print(
                "Warning: storage backend unreachable; changes will not be persisted.",
                file=sys.stderr,
            )

        if args.command == "ingest":
            return await _handle_ingest(args, components["ingestion"])
        if args.command == "list":
            return await _handle_list(store)
        if args.command == "report":
            return await _handle_report(components["reports"])
        if args.command == "delete":
            return await _handle_delete(args, store)
        if args.command == "clear":
            return await _handle_clear(args, store)
    return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the feedback CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m feedpulse.cli.ingest",
        description="Load, inspect and clear stored customer feedback.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Feedback commands")

    ingest_parser = subparsers.add_parser(
        "ingest", help="Ingest a .txt/.csv file or an inline string"
    )
    source = ingest_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--file", help="Path to a .txt or .csv file, one entry per line")
    source.add_argument("--text", help="Newline-separated feedback text")

    subparsers.add_parser("list", help="List stored feedback")
    subparsers.add_parser("report", help="Show the sentiment and theme summary")

    delete_parser = subparsers.add_parser("delete", help="Delete one feedback record")
    delete_parser.add_argument("id", type=int, help="Record id")

    clear_parser = subparsers.add_parser("clear", help="Delete all feedback")
    clear_parser.add_argument(
        "--yes", "-y", action="store_true", help="Skip confirmation prompt"
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the feedback tool.

    Parses the subcommand, loads Settings from the environment / .env file,
    and exits with the handler's status code.  Application errors are
    printed to stderr and exit with status 1.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    app_settings = Settings()

    try:
        exit_code = asyncio.run(_run(args, app_settings))
    except FeedbackPulseError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
