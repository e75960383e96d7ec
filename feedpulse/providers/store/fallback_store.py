"""Two-tier feedback store: a primary backend with a local fallback.

# ─── HOW THE FALLBACK WORKS ───────────────────────────────────────────
#
#   FallbackFeedbackStore(primary=RedisRestFeedbackStore, local=MemoryFeedbackStore)
#
#   1. Every call goes to the primary first, bounded by ``timeout``.
#   2. Successful reads and writes refresh the local tier, so it always
#      holds the last-known-good snapshot of the primary.
#   3. When the primary raises BackendUnavailableError or times out, the
#      call is served by the local tier and ``degraded`` flips to True.
#   4. The next successful primary call flips ``degraded`` back.
#
# Writes accepted while degraded live only in the local tier; they are not
# replayed to the primary once it recovers, and the next successful read
# replaces the local snapshot with the primary's contents.
#
# Each operation holds one lock across its primary call and local refresh,
# so a read cannot overwrite the local tier with a snapshot older than a
# write that finished while the read was in flight.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

import structlog

from feedpulse.interfaces.feedback_store import IFeedbackStore
from feedpulse.models.feedback import FeedbackRecord, Sentiment
from feedpulse.utils.errors import BackendUnavailableError

logger = structlog.get_logger(logger_name=__name__)

_T = TypeVar("_T")


class FallbackFeedbackStore(IFeedbackStore):
    """Compose a primary store with a local store that takes over on failure."""

    def __init__(
        self,
        primary: IFeedbackStore,
        local: IFeedbackStore,
        timeout: float = 5.0,
    ) -> None:
        self._primary = primary
        self._local = local
        self._timeout = timeout
        self._degraded = False
        self._lock = asyncio.Lock()

    @property
    def degraded(self) -> bool:
        """True while the last primary call failed."""
        return self._degraded

    @property
    def primary(self) -> IFeedbackStore:
        return self._primary

    @property
    def local(self) -> IFeedbackStore:
        return self._local

    # ------------------------------------------------------------------
    # IFeedbackStore implementation
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        await self._local.initialize()
        try:
            await self._call_primary("initialize", self._primary.initialize)
        except BackendUnavailableError:
            self._mark_degraded("initialize")
            return
        await self.list_all()

    async def list_all(self) -> list[FeedbackRecord]:
        async with self._lock:
            try:
                records = await self._call_primary("list_all", self._primary.list_all)
            except BackendUnavailableError:
                self._mark_degraded("list_all")
                return await self._local.list_all()

            self._mark_healthy()
            await self._local.replace_all(records)
            return records

    async def insert(
        self,
        text: str,
        sentiment: Sentiment | None = None,
        confidence: float | None = None,
    ) -> FeedbackRecord:
        async with self._lock:
            try:
                record = await self._call_primary(
                    "insert", lambda: self._primary.insert(text, sentiment, confidence)
                )
            except BackendUnavailableError:
                self._mark_degraded("insert")
                return await self._local.insert(text, sentiment, confidence)

            self._mark_healthy()
            snapshot = [r for r in await self._local.list_all() if r.id != record.id]
            await self._local.replace_all([*snapshot, record])
            return record

    async def delete_by_id(self, record_id: int) -> bool:
        async with self._lock:
            try:
                deleted = await self._call_primary(
                    "delete_by_id", lambda: self._primary.delete_by_id(record_id)
                )
            except BackendUnavailableError:
                self._mark_degraded("delete_by_id")
                return await self._local.delete_by_id(record_id)

            self._mark_healthy()
            await self._local.delete_by_id(record_id)
            return deleted

    async def clear_all(self) -> None:
        async with self._lock:
            try:
                await self._call_primary("clear_all", self._primary.clear_all)
            except BackendUnavailableError:
                self._mark_degraded("clear_all")
            else:
                self._mark_healthy()
            await self._local.clear_all()

    async def replace_all(self, records: Sequence[FeedbackRecord]) -> None:
        async with self._lock:
            try:
                await self._call_primary(
                    "replace_all", lambda: self._primary.replace_all(records)
                )
            except BackendUnavailableError:
                self._mark_degraded("replace_all")
            else:
                self._mark_healthy()
            await self._local.replace_all(records)

    def get_provider_name(self) -> str:
        return f"{self._primary.get_provider_name()}+{self._local.get_provider_name()}"

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _call_primary(self, operation: str, call: Callable[[], Awaitable[_T]]) -> _T:
        """Run *call* against the primary, converting timeouts to BackendUnavailableError."""
        try:
            return await asyncio.wait_for(call(), timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            raise BackendUnavailableError(
                message=f"{operation} timed out after {self._timeout}s",
                provider_name=self._primary.get_provider_name(),
            ) from exc

    def _mark_degraded(self, operation: str) -> None:
        if not self._degraded:
            logger.warning(
                "store_degraded",
                primary=self._primary.get_provider_name(),
                local=self._local.get_provider_name(),
                operation=operation,
            )
        self._degraded = True

    def _mark_healthy(self) -> None:
        if self._degraded:
            logger.info("store_recovered", primary=self._primary.get_provider_name())
        self._degraded = False
        self._lock = asyncio.Lock()
