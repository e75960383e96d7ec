"""Rule-based sentiment classifier.

Scores cleaned feedback against two fixed word lists.  Each whitespace token
that exactly equals a positive word adds one point; each token that equals a
negative word subtracts one.  The sign of the total picks the label and the
number of matches on the winning side sets the confidence:

    neutral   -> 0.50
    positive  -> min(1.0, 0.5 + 0.1 * positive_matches)
    negative  -> min(1.0, 0.5 + 0.1 * negative_matches)

Matching is per token, never substring: "easy" matches the token ``easy``
but not ``uneasy`` or ``easy,``.  Callers must pass text that already went
through :func:`feedpulse.utils.text_normalizer.clean_text` so trailing
punctuation does not hide a match.
"""

from __future__ import annotations

from collections.abc import Iterable

from feedpulse.config.lexicons import NEGATIVE_WORDS, POSITIVE_WORDS
from feedpulse.models.feedback import ClassifiedFeedback, Sentiment

_BASE_CONFIDENCE = 0.5
_CONFIDENCE_STEP = 0.1


class SentimentClassifier:
    """Stateless bag-of-words classifier over fixed lexicons."""

    def __init__(
        self,
        positive_words: Iterable[str] = POSITIVE_WORDS,
        negative_words: Iterable[str] = NEGATIVE_WORDS,
    ) -> None:
        self._positive = frozenset(w.lower() for w in positive_words)
        self._negative = frozenset(w.lower() for w in negative_words)

    def score(self, text: str) -> tuple[Sentiment, float]:
        """Return ``(sentiment, confidence)`` for cleaned *text*."""
        score = 0
        pos_matches = 0
        neg_matches = 0

        for token in text.split():
            token = token.lower()
            if token in self._positive:
                score += 1
                pos_matches += 1
            if token in self._negative:
                score -= 1
                neg_matches += 1

        if score > 0:
            sentiment = Sentiment.POSITIVE
            confidence = min(1.0, _BASE_CONFIDENCE + _CONFIDENCE_STEP * pos_matches)
        elif score < 0:
            sentiment = Sentiment.NEGATIVE
            confidence = min(1.0, _BASE_CONFIDENCE + _CONFIDENCE_STEP * neg_matches)
        else:
            sentiment = Sentiment.NEUTRAL
            confidence = _BASE_CONFIDENCE

        return sentiment, round(confidence, 2)

    def classify(self, text: str) -> ClassifiedFeedback:
        """Classify *text* and wrap the result with the text it describes."""
        sentiment, confidence = self.score(text)
        return ClassifiedFeedback(text=text, sentiment=sentiment, confidence=confidence)
