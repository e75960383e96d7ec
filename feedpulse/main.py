"""feedpulse FastAPI application entry point.

Wires together the feedback store, analysis services, and routes via
dependency injection.  Loads configuration from ``.env`` and
``config/config.yaml`` and configures structured logging.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from feedpulse.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
    register_exception_handlers,
)
from feedpulse.api.routes import router as api_router
from feedpulse.config.lexicons import SAMPLE_FEEDBACK, load_analysis_tables
from feedpulse.config.loader import load_config
from feedpulse.config.settings import Settings
from feedpulse.interfaces.feedback_store import IFeedbackStore
from feedpulse.providers.store.factory import build_feedback_store
from feedpulse.services.ingestion_service import IngestionService
from feedpulse.services.report_service import ReportService
from feedpulse.services.sentiment_classifier import SentimentClassifier
from feedpulse.services.theme_extractor import ThemeExtractor
from feedpulse.utils.logging import DEFAULT_QUIET_LOGGERS, configure_logging, get_logger

_VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=config["logging"]["level"],
    json_output=config["logging"]["json"],
    quiet_loggers=config["logging"].get("quiet_loggers", DEFAULT_QUIET_LOGGERS),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Full DI assembly for the FastAPI application
# ---------------------------------------------------------------------------


def build_services(store: IFeedbackStore, app_config: dict[str, Any]) -> dict[str, Any]:
    """Construct the analysis services around an existing *store*."""
    tables = load_analysis_tables(app_config)

    classifier = SentimentClassifier(
        positive_words=tables["positive_words"],
        negative_words=tables["negative_words"],
    )
    theme_extractor = ThemeExtractor(tables["themes"])

    ingestion_service = IngestionService(
        store=store,
        classifier=classifier,
        spam_phrases=tables["spam_phrases"],
        min_length=tables["min_length"],
        allowed_extensions=tables["allowed_extensions"],
        allowed_content_types=tables["allowed_content_types"],
    )
    report_service = ReportService(
        store=store,
        classifier=classifier,
        theme_extractor=theme_extractor,
    )

    return {
        "feedback_store": store,
        "classifier": classifier,
        "theme_extractor": theme_extractor,
        "ingestion_service": ingestion_service,
        "report_service": report_service,
    }


def _build_all(app_settings: Settings) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    # -- Shared resources --
    http_client = httpx.AsyncClient(timeout=config["storage"]["timeout_seconds"])

    # -- Storage --
    store = build_feedback_store(app_settings, http_client=http_client)

    components = build_services(store, config)
    components["http_client"] = http_client
    return components


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise the store and services on startup, clean up on shutdown."""
    components = _build_all(settings)

    for key, value in components.items():
        setattr(application.state, key, value)

    store: IFeedbackStore = components["feedback_store"]
    await store.initialize()

    ingestion: IngestionService = components["ingestion_service"]
    await ingestion.seed_from_csv(settings.seed_csv_path)
    if settings.seed_sample_feedback:
        await ingestion.seed_samples(SAMPLE_FEEDBACK)

    _logger.info(
        "app_startup",
        version=_VERSION,
        environment=settings.app_env,
        store=store.get_provider_name(),
    )

    yield

    # -- Shutdown: close shared httpx client --
    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="feedpulse API",
        version=_VERSION,
        description=(
            "Collect customer feedback, classify its sentiment, extract "
            "recurring themes, and summarize the results for a dashboard."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    register_exception_handlers(application)

    # -- API routes --
    application.include_router(api_router)

    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "feedpulse.main:app",
        host=config["app"]["host"],
        port=config["app"]["port"],
        reload=(config["app"]["env"] == "development"),
    )
