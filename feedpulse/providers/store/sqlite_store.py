"""SQLite-backed feedback store.

Persists feedback records to a local SQLite database at
``data/feedback.db``.  Uses ``aiosqlite`` for async I/O.  ``AUTOINCREMENT``
keeps ids from being reused after a delete; ``clear_all`` also resets the
sequence so a cleared store starts again at 1.
"""

from __future__ import annotations

import asyncio
import sqlite3
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import aiosqlite
import structlog

from feedpulse.interfaces.feedback_store import IFeedbackStore
from feedpulse.models.feedback import FeedbackRecord, Sentiment, utc_now
from feedpulse.utils.errors import BackendUnavailableError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/feedback.db")

# An unwritable data directory surfaces as OSError rather than sqlite3.Error.
_DB_ERRORS = (sqlite3.Error, OSError)

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS feedback (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    text        TEXT    NOT NULL,
    sentiment   TEXT,
    confidence  REAL,
    created_at  TEXT    NOT NULL
);
"""

_SELECT_ALL_SQL = """\
SELECT id, text, sentiment, confidence, created_at
FROM feedback
ORDER BY id ASC;
"""

_INSERT_SQL = """\
INSERT INTO feedback (text, sentiment, confidence, created_at)
VALUES (?, ?, ?, ?);
"""

_INSERT_WITH_ID_SQL = """\
INSERT INTO feedback (id, text, sentiment, confidence, created_at)
VALUES (?, ?, ?, ?, ?);
"""


class SQLiteFeedbackStore(IFeedbackStore):
    """SQLite-backed feedback persistence."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Create the feedback table if it doesn't exist."""
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_CREATE_TABLE_SQL)
                await db.commit()
        except _DB_ERRORS as exc:
            raise BackendUnavailableError(
                message=f"Cannot open feedback database: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        logger.info("feedback_db_initialized", path=str(self._db_path))

    async def list_all(self) -> list[FeedbackRecord]:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(_SELECT_ALL_SQL)
                rows = await cursor.fetchall()
        except _DB_ERRORS as exc:
            raise self._unavailable(exc) from exc
        return [self._row_to_record(dict(r)) for r in rows]

    async def insert(
        self,
        text: str,
        sentiment: Sentiment | None = None,
        confidence: float | None = None,
    ) -> FeedbackRecord:
        created_at = utc_now()
        async with self._lock:
            try:
                async with aiosqlite.connect(str(self._db_path)) as db:
                    cursor = await db.execute(
                        _INSERT_SQL,
                        (
                            text,
                            sentiment.value if sentiment else None,
                            confidence,
                            created_at.isoformat(),
                        ),
                    )
                    await db.commit()
                    record_id = cursor.lastrowid
            except _DB_ERRORS as exc:
                raise self._unavailable(exc) from exc

        logger.info("feedback_inserted", store=self.get_provider_name(), id=record_id)
        return FeedbackRecord(
            id=record_id,
            text=text,
            sentiment=sentiment,
            confidence=confidence,
            created_at=created_at,
        )

    async def delete_by_id(self, record_id: int) -> bool:
        async with self._lock:
            try:
                async with aiosqlite.connect(str(self._db_path)) as db:
                    cursor = await db.execute("DELETE FROM feedback WHERE id = ?", (record_id,))
                    await db.commit()
                    deleted = cursor.rowcount
            except _DB_ERRORS as exc:
                raise self._unavailable(exc) from exc

        if deleted:
            logger.info("feedback_deleted", store=self.get_provider_name(), id=record_id)
        return deleted > 0

    async def clear_all(self) -> None:
        async with self._lock:
            try:
                async with aiosqlite.connect(str(self._db_path)) as db:
                    await db.execute("DELETE FROM feedback")
                    await db.execute("DELETE FROM sqlite_sequence WHERE name = 'feedback'")
                    await db.commit()
            except _DB_ERRORS as exc:
                raise self._unavailable(exc) from exc
        logger.info("feedback_cleared", store=self.get_provider_name())

    async def replace_all(self, records: Sequence[FeedbackRecord]) -> None:
        async with self._lock:
            try:
                async with aiosqlite.connect(str(self._db_path)) as db:
                    await db.execute("DELETE FROM feedback")
                    await db.executemany(
                        _INSERT_WITH_ID_SQL,
                        [
                            (
                                r.id,
                                r.text,
                                r.sentiment.value if r.sentiment else None,
                                r.confidence,
                                r.created_at.isoformat(),
                            )
                            for r in records
                        ],
                    )
                    await db.commit()
            except _DB_ERRORS as exc:
                raise self._unavailable(exc) from exc

    def get_provider_name(self) -> str:
        return "sqlite_feedback"

    # -- helpers ----------------------------------------------------------

    def _unavailable(self, exc: Exception) -> BackendUnavailableError:
        logger.error("feedback_db_error", path=str(self._db_path), error=str(exc))
        return BackendUnavailableError(message=str(exc), provider_name=self.get_provider_name())

    @staticmethod
    def _row_to_record(row: dict[str, Any]) -> FeedbackRecord:
        return FeedbackRecord.model_validate(row)
