"""Utility modules for feedpulse.

- **errors** -- Exception hierarchy rooted at FeedbackPulseError; each class
  carries the HTTP status the API layer renders it with.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **text_normalizer** -- Line parsing, feedback cleaning and deduplication
  for the ingestion pipeline.
"""

from feedpulse.utils.errors import (
    BackendUnavailableError,
    ConfigurationError,
    FeedbackPulseError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from feedpulse.utils.logging import configure_logging, get_logger
from feedpulse.utils.text_normalizer import clean_text, deduplicate, parse_lines

__all__ = [
    "BackendUnavailableError",
    "ConfigurationError",
    "FeedbackPulseError",
    "InternalError",
    "NotFoundError",
    "ValidationError",
    "clean_text",
    "configure_logging",
    "deduplicate",
    "get_logger",
    "parse_lines",
]
