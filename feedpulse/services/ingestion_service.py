"""Bulk feedback ingestion - parse, clean, dedup, classify, store.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Services (business logic orchestration).
# Depends on: IFeedbackStore, SentimentClassifier, text_normalizer.
#
# IngestionService turns a pasted block of text or an uploaded .txt/.csv
# file into stored, classified feedback records:
#
#   1. UPLOAD VALIDATION - filename extension + content type allow-list
#      (uploads only; the whole batch is rejected on failure).
#   2. PARSE - one trimmed, non-blank row per line.
#   3. CLEAN + DEDUP - rows are normalized; repeats and junk are dropped.
#   4. CLASSIFY - each unique cleaned row gets a sentiment + confidence.
#   5. STORE - one insert per row.  A failed insert is logged and counted;
#      the rest of the batch still runs.
#
# It also owns the two seeding paths the original deployment had: a
# one-time import of a legacy feedback.csv and the sample dataset.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path, PurePath

import structlog

from feedpulse.config.lexicons import (
    ALLOWED_UPLOAD_CONTENT_TYPES,
    ALLOWED_UPLOAD_EXTENSIONS,
    MIN_CLEANED_LENGTH,
    SPAM_PHRASES,
)
from feedpulse.interfaces.feedback_store import IFeedbackStore
from feedpulse.models.ingestion import IngestedItem, IngestionReport
from feedpulse.services.sentiment_classifier import SentimentClassifier
from feedpulse.utils.errors import ValidationError
from feedpulse.utils.text_normalizer import deduplicate, parse_lines

logger = structlog.get_logger(logger_name=__name__)


class IngestionService:
    """Runs feedback batches through the normalize → classify → store pipeline.

    All dependencies are constructor-injected.
    """

    def __init__(
        self,
        store: IFeedbackStore,
        classifier: SentimentClassifier,
        spam_phrases: Iterable[str] = SPAM_PHRASES,
        min_length: int = MIN_CLEANED_LENGTH,
        allowed_extensions: Iterable[str] = ALLOWED_UPLOAD_EXTENSIONS,
        allowed_content_types: Iterable[str] = ALLOWED_UPLOAD_CONTENT_TYPES,
    ) -> None:
        self._store = store
        self._classifier = classifier
        self._spam_phrases = tuple(spam_phrases)
        self._min_length = min_length
        self._allowed_extensions = frozenset(e.lower() for e in allowed_extensions)
        self._allowed_content_types = frozenset(t.lower() for t in allowed_content_types)

    # ── Public API ─────────────────────────────────────────────────────

    def validate_upload(self, filename: str | None, content_type: str | None) -> None:
        """Reject uploads that are not plain-text or CSV-like.

        Raises
        ------
        ValidationError
            If the extension or the declared content type is not allowed.
        """
        suffix = PurePath(filename or "").suffix.lower()
        if suffix not in self._allowed_extensions:
            allowed = ", ".join(sorted(self._allowed_extensions))
            raise ValidationError(f"Only {allowed} files are allowed.")

        if content_type:
            media_type = content_type.split(";", 1)[0].strip().lower()
            if media_type not in self._allowed_content_types:
                raise ValidationError(f"Unsupported content type: {media_type}")

    async def ingest_upload(
        self,
        filename: str | None,
        content_type: str | None,
        payload: bytes,
    ) -> IngestionReport:
        """Validate, decode and ingest an uploaded file."""
        self.validate_upload(filename, content_type)
        try:
            text = payload.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ValidationError("Uploaded file must be UTF-8 text.") from exc
        return await self.ingest_text(text, source=filename or "upload")

    async def ingest_text(self, payload: str, source: str = "text") -> IngestionReport:
        """Ingest a block of newline-separated feedback rows."""
        rows = parse_lines(payload)
        dedup = deduplicate(rows, spam_phrases=self._spam_phrases, min_length=self._min_length)

        items: list[IngestedItem] = []
        stored = failed = 0

        for text in dedup.unique:
            result = self._classifier.classify(text)
            try:
                record = await self._store.insert(text, result.sentiment, result.confidence)
            except Exception as exc:
                failed += 1
                logger.warning("ingestion_item_failed", source=source, text=text, error=str(exc))
                items.append(
                    IngestedItem(
                        text=text,
                        sentiment=result.sentiment,
                        confidence=result.confidence,
                        stored=False,
                    )
                )
                continue

            stored += 1
            items.append(
                IngestedItem(
                    text=text,
                    sentiment=result.sentiment,
                    confidence=result.confidence,
                    stored=True,
                    record_id=record.id,
                )
            )

        report = IngestionReport(
            submitted=len(rows),
            unique=len(dedup.unique),
            duplicates=len(dedup.duplicates),
            stored=stored,
            failed=failed,
            items=items,
        )
        logger.info(
            "ingestion_complete",
            source=source,
            submitted=report.submitted,
            unique=report.unique,
            duplicates=report.duplicates,
            stored=report.stored,
            failed=report.failed,
        )
        return report

    async def seed_from_csv(self, path: str | Path) -> int:
        """Import a legacy feedback file into an empty store.

        Each non-blank trimmed line is stored verbatim and unclassified; the
        report service classifies such records on the fly.  Does nothing if
        the file is missing or the store already has records.

        Returns the number of records inserted.
        """
        csv_path = Path(path)
        if not csv_path.exists():
            return 0
        if await self._store.list_all():
            logger.debug("csv_seed_skipped", path=str(csv_path), reason="store_not_empty")
            return 0

        rows = parse_lines(csv_path.read_text(encoding="utf-8-sig"))
        inserted = await self._insert_unclassified(rows)
        logger.info("csv_seed_complete", path=str(csv_path), inserted=inserted)
        return inserted

    async def seed_samples(self, texts: Iterable[str]) -> int:
        """Insert *texts* unclassified when the store is empty."""
        if await self._store.list_all():
            return 0
        inserted = await self._insert_unclassified(texts)
        logger.info("sample_seed_complete", inserted=inserted)
        return inserted

    # ── Helpers ────────────────────────────────────────────────────────

    async def _insert_unclassified(self, texts: Iterable[str]) -> int:
        inserted = 0
        for text in texts:
            await self._store.insert(text)
            inserted += 1
        return inserted
