"""Text normalization utilities for raw customer feedback.

This module handles three concerns of the ingestion front end:

1. **Line parsing** -- Splits a pasted block of text or an uploaded
   .txt/.csv payload into one trimmed, non-blank row per feedback item.

2. **Cleaning** -- Lowercases, strips URLs and punctuation (emoji and other
   symbols survive), collapses whitespace, and discards rows that are too
   short or contain a spam phrase.  The cleaned string is the dedup key and
   the input to the classifier, so "Great product!" and "great product"
   are the same item.

3. **Deduplication** -- Keeps the first occurrence of each cleaned string
   and reports the repeats separately.
"""

from __future__ import annotations

import re
import unicodedata
from collections.abc import Iterable

from feedpulse.config.lexicons import MIN_CLEANED_LENGTH, SPAM_PHRASES
from feedpulse.models.ingestion import DedupResult

_URL_RE = re.compile(r"https?://\S+")
_WHITESPACE_RE = re.compile(r"\s+")
_LINE_SPLIT_RE = re.compile(r"\r?\n")

# Math/currency symbols removed alongside Unicode punctuation.
_EXTRA_STRIPPED_SYMBOLS = frozenset("$+<=>^`|~")


def _is_stripped(ch: str) -> bool:
    return ch in _EXTRA_STRIPPED_SYMBOLS or unicodedata.category(ch).startswith("P")


def parse_lines(payload: str) -> list[str]:
    """Split *payload* into trimmed, non-blank rows.

    Handles both ``\\n`` and ``\\r\\n`` line endings.  A leading UTF-8 BOM
    (common in CSV exports) is dropped.
    """
    payload = payload.lstrip("\ufeff")
    return [row.strip() for row in _LINE_SPLIT_RE.split(payload) if row.strip()]


def clean_text(
    text: str,
    spam_phrases: Iterable[str] = SPAM_PHRASES,
    min_length: int = MIN_CLEANED_LENGTH,
) -> str:
    """Normalize one raw feedback line.

    Args:
        text: Raw feedback text.
        spam_phrases: Phrases that mark a row as spam (substring match
                      against the cleaned, lowercased text).
        min_length: Rows shorter than this after cleaning are discarded.

    Returns:
        The cleaned string, or ``""`` when the row should be discarded.
    """
    cleaned = text.lower()
    cleaned = _URL_RE.sub("", cleaned)
    cleaned = "".join(ch for ch in cleaned if not _is_stripped(ch))
    cleaned = _WHITESPACE_RE.sub(" ", cleaned).strip()

    if len(cleaned) < min_length:
        return ""
    if any(phrase.lower() in cleaned for phrase in spam_phrases):
        return ""
    return cleaned


def deduplicate(
    rows: Iterable[str],
    spam_phrases: Iterable[str] = SPAM_PHRASES,
    min_length: int = MIN_CLEANED_LENGTH,
) -> DedupResult:
    """Clean *rows* and split them into first occurrences and repeats.

    Order of first occurrence is preserved.  Rows that clean to ``""`` are
    dropped silently and counted in neither list.
    """
    spam_phrases = tuple(spam_phrases)
    seen: set[str] = set()
    unique: list[str] = []
    duplicates: list[str] = []

    for row in rows:
        cleaned = clean_text(row, spam_phrases=spam_phrases, min_length=min_length)
        if not cleaned:
            continue
        if cleaned in seen:
            duplicates.append(cleaned)
        else:
            seen.add(cleaned)
            unique.append(cleaned)

    return DedupResult(unique=unique, duplicates=duplicates)
