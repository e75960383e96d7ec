"""Feedback domain models.

# ─── ARCHITECTURE ROLE ───────────────────────────────────────────────
#
# Layer: Models (bottom of the dependency graph - no imports from upper layers).
#
# ``FeedbackRecord`` is the single persisted entity: one cleaned piece of
# customer feedback plus its optional classification.  Records are frozen;
# stores never edit a record in place, they only insert, delete, or
# replace the whole collection.
#
# ``ClassifiedFeedback`` is the transient (text, sentiment, confidence)
# triple produced by the classifier before anything is stored.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Sentiment(str, Enum):
    """Sentiment labels assigned by the classifier."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(tz=timezone.utc)  # noqa: UP017


class FeedbackRecord(BaseModel):
    """A stored piece of customer feedback.

    Serializes to the persisted JSON shape
    ``{id, text, sentiment, confidence, created_at}`` with ``created_at``
    as an ISO-8601 string (``model_dump(mode="json")``).
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=1, description="Store-assigned id, never reused.")
    text: str = Field(min_length=1)
    sentiment: Sentiment | None = None
    confidence: float | None = Field(default=None, ge=0.0, le=1.0)
    created_at: datetime = Field(default_factory=utc_now)

    def to_json(self) -> dict:
        return self.model_dump(mode="json")


class ClassifiedFeedback(BaseModel):
    """Classifier output for one cleaned feedback line."""

    model_config = ConfigDict(frozen=True)

    text: str
    sentiment: Sentiment
    confidence: float = Field(ge=0.0, le=1.0)
