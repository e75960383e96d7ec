"""feedpulse domain models - re-exports all public model classes.

    - feedback.py   - FeedbackRecord, Sentiment, ClassifiedFeedback
    - ingestion.py  - DedupResult, IngestedItem, IngestionReport
    - report.py     - FeedbackReport and its parts
"""

from __future__ import annotations

from feedpulse.models.feedback import (
    ClassifiedFeedback,
    FeedbackRecord,
    Sentiment,
    utc_now,
)
from feedpulse.models.ingestion import DedupResult, IngestedItem, IngestionReport
from feedpulse.models.report import (
    FeedbackReport,
    SentimentCounts,
    SentimentPercentages,
    TopTheme,
)

__all__ = [
    "ClassifiedFeedback",
    "DedupResult",
    "FeedbackRecord",
    "FeedbackReport",
    "IngestedItem",
    "IngestionReport",
    "Sentiment",
    "SentimentCounts",
    "SentimentPercentages",
    "TopTheme",
    "utc_now",
]
