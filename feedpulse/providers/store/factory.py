"""Feedback store selection.

Maps ``FEEDBACK_BACKEND`` to a concrete store:

    memory  ->  MemoryFeedbackStore
    sqlite  ->  FallbackFeedbackStore(SQLiteFeedbackStore, MemoryFeedbackStore)
    redis   ->  FallbackFeedbackStore(RedisRestFeedbackStore, MemoryFeedbackStore)

Used by both the web app (``feedpulse.main``) and the CLI so they always
agree on where feedback lives.
"""

from __future__ import annotations

import httpx

from feedpulse.config.settings import Settings
from feedpulse.interfaces.feedback_store import IFeedbackStore
from feedpulse.providers.store.fallback_store import FallbackFeedbackStore
from feedpulse.providers.store.memory_store import MemoryFeedbackStore
from feedpulse.providers.store.redis_rest_store import RedisRestFeedbackStore
from feedpulse.providers.store.sqlite_store import SQLiteFeedbackStore
from feedpulse.utils.errors import ConfigurationError

_BACKENDS = ("memory", "sqlite", "redis")


def build_feedback_store(
    app_settings: Settings,
    http_client: httpx.AsyncClient | None = None,
) -> IFeedbackStore:
    """Construct the feedback store described by *app_settings*.

    Raises
    ------
    ConfigurationError
        If the backend name is unknown, or ``redis`` is selected without
        Upstash credentials or an HTTP client.
    """
    backend = app_settings.feedback_backend.strip().lower()
    if backend not in _BACKENDS:
        raise ConfigurationError(
            f"Unknown FEEDBACK_BACKEND {backend!r}; expected one of {', '.join(_BACKENDS)}"
        )

    local = MemoryFeedbackStore()
    if backend == "memory":
        return local

    if backend == "sqlite":
        primary: IFeedbackStore = SQLiteFeedbackStore(db_path=app_settings.feedback_db_path)
    else:
        if not app_settings.redis_configured():
            raise ConfigurationError(
                "FEEDBACK_BACKEND=redis requires UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN",
                provider_name="upstash_redis",
            )
        if http_client is None:
            raise ConfigurationError(
                "The redis backend needs a shared httpx.AsyncClient",
                provider_name="upstash_redis",
            )
        primary = RedisRestFeedbackStore(
            base_url=app_settings.upstash_redis_rest_url,
            token=app_settings.upstash_redis_rest_token,
            http_client=http_client,
            key=app_settings.redis_feedback_key,
            timeout=app_settings.store_timeout_seconds,
        )

    return FallbackFeedbackStore(
        primary=primary,
        local=local,
        timeout=app_settings.store_timeout_seconds,
    )
