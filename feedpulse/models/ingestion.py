"""Ingestion pipeline models - dedup output and per-batch reports."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from feedpulse.models.feedback import Sentiment


class DedupResult(BaseModel):
    """Cleaned lines split into first occurrences and repeats.

    Lines that cleaned to an empty string appear in neither list.
    """

    model_config = ConfigDict(frozen=True)

    unique: list[str] = Field(default_factory=list)
    duplicates: list[str] = Field(default_factory=list)


class IngestedItem(BaseModel):
    """Outcome for one unique line of an ingestion batch."""

    model_config = ConfigDict(frozen=True)

    text: str
    sentiment: Sentiment
    confidence: float
    stored: bool
    record_id: int | None = None


class IngestionReport(BaseModel):
    """Summary of an ingestion batch.

    ``submitted`` counts non-blank rows in the payload; ``unique`` and
    ``duplicates`` come from deduplication; ``stored + failed == unique``.
    """

    model_config = ConfigDict(frozen=True)

    submitted: int = 0
    unique: int = 0
    duplicates: int = 0
    stored: int = 0
    failed: int = 0
    items: list[IngestedItem] = Field(default_factory=list)
