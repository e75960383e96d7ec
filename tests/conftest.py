"""Shared pytest fixtures for the feedpulse test suite."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest
import structlog

from feedpulse.providers.store.memory_store import MemoryFeedbackStore
from feedpulse.providers.store.redis_rest_store import RedisRestFeedbackStore
from feedpulse.services.ingestion_service import IngestionService
from feedpulse.services.report_service import ReportService
from feedpulse.services.sentiment_classifier import SentimentClassifier
from feedpulse.services.theme_extractor import ThemeExtractor

UPSTASH_URL = "https://test-db.upstash.io"
UPSTASH_TOKEN = "test-token"


@pytest.fixture(autouse=True)
def _uncached_loggers() -> None:
    """Resolve structlog loggers per call so none keeps a closed capsys stream."""
    structlog.configure(cache_logger_on_first_use=False)


# ---------------------------------------------------------------------------
# Analysis services
# ---------------------------------------------------------------------------


@pytest.fixture
def classifier() -> SentimentClassifier:
    return SentimentClassifier()


@pytest.fixture
def theme_extractor() -> ThemeExtractor:
    return ThemeExtractor()


@pytest.fixture
def memory_store() -> MemoryFeedbackStore:
    return MemoryFeedbackStore()


@pytest.fixture
def ingestion_service(
    memory_store: MemoryFeedbackStore,
    classifier: SentimentClassifier,
) -> IngestionService:
    return IngestionService(store=memory_store, classifier=classifier)


@pytest.fixture
def report_service(
    memory_store: MemoryFeedbackStore,
    classifier: SentimentClassifier,
    theme_extractor: ThemeExtractor,
) -> ReportService:
    return ReportService(
        store=memory_store,
        classifier=classifier,
        theme_extractor=theme_extractor,
    )


# ---------------------------------------------------------------------------
# Fake Upstash REST endpoint
# ---------------------------------------------------------------------------


class FakeUpstash:
    """In-process stand-in for the Upstash Redis REST API.

    Understands the handful of commands the store sends (PING, GET, SET,
    DEL) and records every command it receives.  Set ``fail = True`` to
    make every request answer 503, or ``error`` to return an Upstash-style
    ``{"error": ...}`` body.
    """

    def __init__(self, token: str = UPSTASH_TOKEN) -> None:
        self.token = token
        self.data: dict[str, str] = {}
        self.commands: list[list[str]] = []
        self.fail = False
        self.error: str | None = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        if self.fail:
            return httpx.Response(503, json={"error": "service unavailable"})
        if request.headers.get("Authorization") != f"Bearer {self.token}":
            return httpx.Response(401, json={"error": "Unauthorized"})

        command = json.loads(request.content)
        self.commands.append(command)
        if self.error:
            return httpx.Response(200, json={"error": self.error})

        name, *args = command
        result: Any
        if name == "PING":
            result = "PONG"
        elif name == "GET":
            result = self.data.get(args[0])
        elif name == "SET":
            self.data[args[0]] = args[1]
            result = "OK"
        elif name == "DEL":
            result = sum(1 for key in args if self.data.pop(key, None) is not None)
        else:
            return httpx.Response(400, json={"error": f"ERR unknown command '{name}'"})
        return httpx.Response(200, json={"result": result})


@pytest.fixture
def fake_upstash() -> FakeUpstash:
    return FakeUpstash()


@pytest.fixture
async def upstash_client(fake_upstash: FakeUpstash):
    """An httpx.AsyncClient routed to the fake Upstash endpoint."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(fake_upstash.handler)) as client:
        yield client


@pytest.fixture
def redis_store(upstash_client: httpx.AsyncClient) -> RedisRestFeedbackStore:
    return RedisRestFeedbackStore(
        base_url=UPSTASH_URL,
        token=UPSTASH_TOKEN,
        http_client=upstash_client,
    )
