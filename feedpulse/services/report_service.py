"""Dashboard aggregation - sentiment breakdown, themes, top-theme insight.

Reads every record from the store and summarizes it.  Records that were
stored with a sentiment keep it; unclassified records (legacy imports,
samples, bare API posts) are classified on the fly from their text.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

import structlog

from feedpulse.interfaces.feedback_store import IFeedbackStore
from feedpulse.models.feedback import FeedbackRecord, Sentiment
from feedpulse.models.report import (
    FeedbackReport,
    SentimentCounts,
    SentimentPercentages,
    TopTheme,
)
from feedpulse.services.sentiment_classifier import SentimentClassifier
from feedpulse.services.theme_extractor import ThemeExtractor
from feedpulse.utils.text_normalizer import clean_text

logger = structlog.get_logger(logger_name=__name__)


def _round_half_up(value: float, step: str = "1") -> Decimal:
    """Round *value* to a multiple of *step*, halves away from zero (12.5 -> 13)."""
    return Decimal(str(value)).quantize(Decimal(step), rounding=ROUND_HALF_UP)


class ReportService:
    """Builds :class:`FeedbackReport` snapshots from the feedback store."""

    def __init__(
        self,
        store: IFeedbackStore,
        classifier: SentimentClassifier,
        theme_extractor: ThemeExtractor,
    ) -> None:
        self._store = store
        self._classifier = classifier
        self._themes = theme_extractor

    async def build_report(self) -> FeedbackReport:
        """Summarize the current contents of the store."""
        records = await self._store.list_all()
        report = self.summarize(records)
        logger.debug("report_built", total=report.total, top_theme=report.top_theme)
        return report

    def sentiment_of(self, record: FeedbackRecord) -> Sentiment:
        """Return the stored sentiment, classifying the text if there is none."""
        if record.sentiment is not None:
            return record.sentiment
        # Unclassified records hold raw text; clean it so punctuation does
        # not hide token matches.  Rows that clean to "" still get scored.
        text = clean_text(record.text, spam_phrases=(), min_length=0)
        sentiment, _ = self._classifier.score(text)
        return sentiment

    def summarize(self, records: Sequence[FeedbackRecord]) -> FeedbackReport:
        """Build a report from an already-loaded record list."""
        total = len(records)
        counts = {s: 0 for s in Sentiment}
        for record in records:
            counts[self.sentiment_of(record)] += 1

        theme_counts = self._themes.count(r.text for r in records)
        # sorted() is stable, so equal counts keep theme-table order.
        ranked = sorted(
            ((name, count) for name, count in theme_counts.items() if count > 0),
            key=lambda item: item[1],
            reverse=True,
        )

        sentiment_counts = SentimentCounts(
            positive=counts[Sentiment.POSITIVE],
            negative=counts[Sentiment.NEGATIVE],
            neutral=counts[Sentiment.NEUTRAL],
        )

        if total == 0:
            return FeedbackReport(
                total=0,
                has_data=False,
                sentiment_counts=sentiment_counts,
                theme_counts=theme_counts,
            )

        percentages = SentimentPercentages(
            positive=float(_round_half_up(100 * sentiment_counts.positive / total, "0.1")),
            negative=float(_round_half_up(100 * sentiment_counts.negative / total, "0.1")),
            neutral=float(_round_half_up(100 * sentiment_counts.neutral / total, "0.1")),
        )

        top_theme = None
        if ranked:
            name, count = ranked[0]
            top_theme = TopTheme(
                name=name,
                count=count,
                percentage=int(_round_half_up(100 * count / total)),
            )

        return FeedbackReport(
            total=total,
            has_data=True,
            sentiment_counts=sentiment_counts,
            sentiment_percentages=percentages,
            theme_counts=theme_counts,
            ranked_themes=ranked,
            top_theme=top_theme,
        )
