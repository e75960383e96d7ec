"""Aggregate report models rendered by the dashboard endpoint."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SentimentCounts(BaseModel):
    """Number of records per sentiment label."""

    model_config = ConfigDict(frozen=True)

    positive: int = 0
    negative: int = 0
    neutral: int = 0


class SentimentPercentages(BaseModel):
    """Share of records per sentiment label, one decimal place."""

    model_config = ConfigDict(frozen=True)

    positive: float = 0.0
    negative: float = 0.0
    neutral: float = 0.0


class TopTheme(BaseModel):
    """The most frequent non-zero theme and its share of all records."""

    model_config = ConfigDict(frozen=True)

    name: str
    count: int = Field(ge=1)
    percentage: int = Field(ge=0, le=100)


class FeedbackReport(BaseModel):
    """Sentiment breakdown, theme counts and the top-theme insight.

    When the store is empty ``has_data`` is False, ``sentiment_percentages``
    is None and ``top_theme`` is None.
    """

    model_config = ConfigDict(frozen=True)

    total: int = 0
    has_data: bool = False
    sentiment_counts: SentimentCounts = Field(default_factory=SentimentCounts)
    sentiment_percentages: SentimentPercentages | None = None
    theme_counts: dict[str, int] = Field(default_factory=dict)
    ranked_themes: list[tuple[str, int]] = Field(default_factory=list)
    top_theme: TopTheme | None = None
