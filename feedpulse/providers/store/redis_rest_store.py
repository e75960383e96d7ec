"""Upstash Redis (REST API) feedback store.

Keeps the whole feedback collection as one JSON array under a single key
(``feedback:all`` by default), the layout the serverless deployment used.
The id high-water mark lives under ``<key>:last_id`` so ids are never
reused after a delete.

Commands are sent as JSON arrays to the Upstash REST endpoint::

    POST https://<db>.upstash.io
    Authorization: Bearer <token>
    ["SET", "feedback:all", "[...]"]   ->   {"result": "OK"}

Every write is a read-modify-write of the blob, serialized by an
``asyncio.Lock`` within this process.  Concurrent writers in other
processes are not coordinated (last writer wins).
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Sequence
from typing import Any

import httpx
import structlog

from feedpulse.interfaces.feedback_store import IFeedbackStore
from feedpulse.models.feedback import FeedbackRecord, Sentiment, utc_now
from feedpulse.utils.errors import BackendUnavailableError

logger = structlog.get_logger(logger_name=__name__)


class RedisRestFeedbackStore(IFeedbackStore):
    """Feedback store backed by an Upstash Redis database over HTTPS.

    Parameters
    ----------
    base_url:
        The ``UPSTASH_REDIS_REST_URL`` of the database.
    token:
        The ``UPSTASH_REDIS_REST_TOKEN`` bearer token.
    http_client:
        Shared ``httpx.AsyncClient``; owned and closed by the caller.
    key:
        Redis key holding the JSON array of records.
    timeout:
        Per-request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str,
        token: str,
        http_client: httpx.AsyncClient,
        key: str = "feedback:all",
        timeout: float = 5.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._http = http_client
        self._key = key
        self._last_id_key = f"{key}:last_id"
        self._timeout = timeout
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # IFeedbackStore implementation
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Verify the database answers a PING."""
        await self._command("PING")
        logger.info("redis_store_connected", key=self._key)

    async def list_all(self) -> list[FeedbackRecord]:
        return await self._load()

    async def insert(
        self,
        text: str,
        sentiment: Sentiment | None = None,
        confidence: float | None = None,
    ) -> FeedbackRecord:
        async with self._lock:
            records = await self._load()
            last_id = max(
                await self._load_last_id(),
                max((r.id for r in records), default=0),
            )
            record = FeedbackRecord(
                id=last_id + 1,
                text=text,
                sentiment=sentiment,
                confidence=confidence,
                created_at=utc_now(),
            )
            records.append(record)
            await self._save(records)
            await self._command("SET", self._last_id_key, str(record.id))

        logger.info("feedback_inserted", store=self.get_provider_name(), id=record.id)
        return record

    async def delete_by_id(self, record_id: int) -> bool:
        async with self._lock:
            records = await self._load()
            remaining = [r for r in records if r.id != record_id]
            if len(remaining) == len(records):
                return False
            await self._save(remaining)

        logger.info("feedback_deleted", store=self.get_provider_name(), id=record_id)
        return True

    async def clear_all(self) -> None:
        async with self._lock:
            await self._command("DEL", self._key, self._last_id_key)
        logger.info("feedback_cleared", store=self.get_provider_name())

    async def replace_all(self, records: Sequence[FeedbackRecord]) -> None:
        async with self._lock:
            ordered = sorted(records, key=lambda r: r.id)
            last_id = max(
                await self._load_last_id(),
                max((r.id for r in ordered), default=0),
            )
            await self._save(ordered)
            await self._command("SET", self._last_id_key, str(last_id))

    def get_provider_name(self) -> str:
        return "upstash_redis"

    # ------------------------------------------------------------------
    # REST plumbing
    # ------------------------------------------------------------------

    async def _command(self, *args: str) -> Any:
        """Send one Redis command and return its ``result`` field."""
        try:
            response = await self._http.post(
                self._base_url,
                json=list(args),
                headers={"Authorization": f"Bearer {self._token}"},
                timeout=self._timeout,
            )
        except httpx.HTTPError as exc:
            logger.warning("redis_request_failed", command=args[0], error=str(exc))
            raise BackendUnavailableError(
                message=f"Upstash request failed: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}

        if response.status_code >= 400 or "error" in payload:
            error = payload.get("error") or f"HTTP {response.status_code}"
            logger.warning("redis_command_error", command=args[0], error=error)
            raise BackendUnavailableError(
                message=f"Upstash returned an error: {error}",
                provider_name=self.get_provider_name(),
            )
        return payload.get("result")

    async def _load(self) -> list[FeedbackRecord]:
        raw = await self._command("GET", self._key)
        if raw is None:
            return []
        try:
            items = json.loads(raw) if isinstance(raw, str) else raw
            records = [FeedbackRecord.model_validate(item) for item in items or []]
        except (ValueError, TypeError) as exc:
            raise BackendUnavailableError(
                message=f"Stored feedback blob is unreadable: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        return sorted(records, key=lambda r: r.id)

    async def _load_last_id(self) -> int:
        raw = await self._command("GET", self._last_id_key)
        try:
            return int(raw) if raw is not None else 0
        except (TypeError, ValueError):
            return 0

    async def _save(self, records: Sequence[FeedbackRecord]) -> None:
        blob = json.dumps([r.to_json() for r in records], ensure_ascii=False)
        await self._command("SET", self._key, blob)
