"""Static analysis tables for customer feedback.

# ─── PURPOSE ──────────────────────────────────────────────────────────
#
# Built-in defaults for every table the analysis layer reads:
#
#   - the positive / negative sentiment lexicons used by the classifier,
#   - the theme -> keyword table used by the theme extractor,
#   - the spam-phrase blocklist and minimum length used by the normalizer,
#   - the upload allow-list used by the ingestion service,
#   - the sample dataset the original demo deployment shipped with.
#
# ``config/config.yaml`` may override any of these under the ``analysis``
# and ``ingestion`` keys; ``load_analysis_tables`` resolves the final values.
#
# The lexicons are English-only and matched as exact whitespace tokens.
# Multi-word entries ("buy again", "never again") are kept verbatim even
# though a single token can never equal them.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Any


POSITIVE_WORDS: tuple[str, ...] = (
    "great", "satisfied", "loved", "amazing", "fast", "easy", "vibrant",
    "true", "helpful", "quality", "good", "best", "happy", "recommend",
    "excellent", "awesome", "love", "perfect", "fantastic", "enjoy", "like",
    "buy again",
)

NEGATIVE_WORDS: tuple[str, ...] = (
    "confusing", "unhelpful", "damaged", "expensive", "bad", "worst",
    "difficult", "problem", "issue", "broken", "slow", "hate", "dislike",
    "poor", "hard", "complain", "refund", "return", "missing", "late",
    "wrong", "never again",
)

# Insertion order is the tie-break order for the top-theme insight.
THEME_TABLE: dict[str, tuple[str, ...]] = {
    "Shipping": ("shipping", "late", "fast"),
    "Support": ("support", "helpful", "unhelpful"),
    "Price": ("expensive", "value", "cheap"),
    "Quality": ("quality", "damaged", "broken", "vibrant"),
    "Website": ("website", "checkout", "easy", "confusing"),
    "Options": ("size", "options"),
}

SPAM_PHRASES: tuple[str, ...] = ("free money", "click here", "buy now")

MIN_CLEANED_LENGTH = 5

ALLOWED_UPLOAD_EXTENSIONS: frozenset[str] = frozenset({".txt", ".csv"})

# Browsers label .csv inconsistently; Windows commonly reports Excel's type.
ALLOWED_UPLOAD_CONTENT_TYPES: frozenset[str] = frozenset({
    "text/plain",
    "text/csv",
    "application/csv",
    "application/vnd.ms-excel",
    "application/octet-stream",
})

SAMPLE_FEEDBACK: tuple[str, ...] = (
    "Great product, very satisfied!",
    "The checkout process was confusing.",
    "Loved the fast shipping 🚚",
    "Customer support was unhelpful.",
    "Amazing quality, will buy again.",
    "Too expensive for the value.",
    "Easy to use website.",
    "Received a damaged item.",
    "The colors are vibrant and true to photos.",
    "Wish there were more size options.",
)


def load_analysis_tables(config: dict[str, Any] | None = None) -> dict[str, Any]:
    """Resolve the analysis tables, letting *config* override the defaults.

    Parameters
    ----------
    config:
        The merged application config (see ``feedpulse.config.load_config``).
        Only the ``analysis`` and ``ingestion`` sections are read.

    Returns
    -------
    dict
        Keys ``positive_words``, ``negative_words``, ``themes``,
        ``spam_phrases``, ``min_length``, ``allowed_extensions``,
        ``allowed_content_types``.
    """
    config = config or {}
    analysis = config.get("analysis") or {}
    ingestion = config.get("ingestion") or {}

    themes_cfg = analysis.get("themes")
    themes = (
        {name: tuple(k.lower() for k in keywords) for name, keywords in themes_cfg.items()}
        if themes_cfg
        else dict(THEME_TABLE)
    )

    return {
        "positive_words": tuple(analysis.get("positive_words") or POSITIVE_WORDS),
        "negative_words": tuple(analysis.get("negative_words") or NEGATIVE_WORDS),
        "themes": themes,
        "spam_phrases": tuple(analysis.get("spam_phrases") or SPAM_PHRASES),
        "min_length": int(analysis.get("min_length", MIN_CLEANED_LENGTH)),
        "allowed_extensions": frozenset(
            e.lower() for e in (ingestion.get("allowed_extensions") or ALLOWED_UPLOAD_EXTENSIONS)
        ),
        "allowed_content_types": frozenset(
            t.lower() for t in (ingestion.get("allowed_content_types") or ALLOWED_UPLOAD_CONTENT_TYPES)
        ),
    }
