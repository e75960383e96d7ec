"""In-memory feedback store.

Simple, fast store suitable for development, tests, and as the local tier
behind a network-backed store.  Records live in a plain list for the
lifetime of the process.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import structlog

from feedpulse.interfaces.feedback_store import IFeedbackStore
from feedpulse.models.feedback import FeedbackRecord, Sentiment, utc_now

logger = structlog.get_logger(logger_name=__name__)


class MemoryFeedbackStore(IFeedbackStore):
    """Process-local feedback store.

    Writes are serialized through an ``asyncio.Lock`` so two concurrent
    inserts can never compute the same id.  ``_last_id`` is the high-water
    mark of every id handed out, which keeps ids from being reused after
    the newest record is deleted.
    """

    def __init__(self, records: Sequence[FeedbackRecord] = ()) -> None:
        self._records: list[FeedbackRecord] = sorted(records, key=lambda r: r.id)
        self._last_id = max((r.id for r in self._records), default=0)
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Nothing to prepare for an in-memory list."""

    async def list_all(self) -> list[FeedbackRecord]:
        return list(self._records)

    async def insert(
        self,
        text: str,
        sentiment: Sentiment | None = None,
        confidence: float | None = None,
    ) -> FeedbackRecord:
        async with self._lock:
            record = FeedbackRecord(
                id=self._last_id + 1,
                text=text,
                sentiment=sentiment,
                confidence=confidence,
                created_at=utc_now(),
            )
            self._records.append(record)
            self._last_id = record.id

        logger.debug("feedback_inserted", store=self.get_provider_name(), id=record.id)
        return record

    async def delete_by_id(self, record_id: int) -> bool:
        async with self._lock:
            for index, record in enumerate(self._records):
                if record.id == record_id:
                    del self._records[index]
                    logger.debug("feedback_deleted", store=self.get_provider_name(), id=record_id)
                    return True
        return False

    async def clear_all(self) -> None:
        async with self._lock:
            self._records = []
            self._last_id = 0
        logger.info("feedback_cleared", store=self.get_provider_name())

    async def replace_all(self, records: Sequence[FeedbackRecord]) -> None:
        async with self._lock:
            self._records = sorted(records, key=lambda r: r.id)
            self._last_id = max(self._last_id, max((r.id for r in self._records), default=0))

    def get_provider_name(self) -> str:
        return "memory"
