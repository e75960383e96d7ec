"""Unit tests for feedback line parsing, cleaning and deduplication."""

from __future__ import annotations

from feedpulse.utils.text_normalizer import clean_text, deduplicate, parse_lines


# ======================================================================
# parse_lines
# ======================================================================


class TestParseLines:
    """Tests for splitting raw payloads into rows."""

    def test_splits_on_newlines(self) -> None:
        assert parse_lines("one\ntwo\nthree") == ["one", "two", "three"]

    def test_handles_crlf(self) -> None:
        assert parse_lines("one\r\ntwo\r\n") == ["one", "two"]

    def test_drops_blank_and_whitespace_rows(self) -> None:
        assert parse_lines("one\n\n   \n\ttwo  \n") == ["one", "two"]

    def test_strips_leading_bom(self) -> None:
        assert parse_lines("\ufeffGreat product\nBad box") == ["Great product", "Bad box"]

    def test_empty_payload(self) -> None:
        assert parse_lines("") == []


# ======================================================================
# clean_text
# ======================================================================


class TestCleanText:
    """Tests for the clean_text function."""

    def test_lowercases_and_strips_punctuation(self) -> None:
        assert clean_text("Great product, very satisfied!") == "great product very satisfied"

    def test_removes_urls(self) -> None:
        assert clean_text("See https://example.com/page for details") == "see for details"

    def test_removes_http_urls(self) -> None:
        assert clean_text("broken link http://x.io/a?b=c here") == "broken link here"

    def test_collapses_whitespace(self) -> None:
        assert clean_text("  too    many\tspaces  ") == "too many spaces"

    def test_keeps_emoji(self) -> None:
        assert clean_text("Loved the fast shipping 🚚") == "loved the fast shipping 🚚"

    def test_strips_math_and_currency_symbols(self) -> None:
        assert clean_text("Price $100 <= value + tax") == "price 100 value tax"

    def test_short_rows_are_discarded(self) -> None:
        assert clean_text("ok!!") == ""

    def test_exactly_min_length_is_kept(self) -> None:
        assert clean_text("Wow!!!!") == ""
        assert clean_text("great") == "great"

    def test_spam_phrase_discards_row(self) -> None:
        assert clean_text("CLICK HERE for a prize") == ""

    def test_spam_phrase_after_punctuation_removal(self) -> None:
        assert clean_text("Free, money inside") == ""
        assert clean_text("Free-money inside") == "freemoney inside"

    def test_custom_spam_phrases_and_length(self) -> None:
        assert clean_text("hi", spam_phrases=(), min_length=0) == "hi"
        assert clean_text("limited offer today", spam_phrases=("offer",)) == ""


# ======================================================================
# deduplicate
# ======================================================================


class TestDeduplicate:
    """Tests for the deduplicate function."""

    def test_keeps_first_occurrence_order(self) -> None:
        result = deduplicate(["Great product!", "Bad box", "great product"])
        assert result.unique == ["great product", "bad box"]
        assert result.duplicates == ["great product"]

    def test_junk_rows_counted_nowhere(self) -> None:
        result = deduplicate(["ok", "click here now", "Fine quality"])
        assert result.unique == ["fine quality"]
        assert result.duplicates == []

    def test_every_repeat_is_reported(self) -> None:
        result = deduplicate(["Too slow!", "too slow", "TOO SLOW."])
        assert result.unique == ["too slow"]
        assert result.duplicates == ["too slow", "too slow"]

    def test_case_and_punctuation_variants_collapse(self) -> None:
        result = deduplicate(["Great product!", "great product", "GREAT PRODUCT"])
        assert result.unique == ["great product"]
        assert result.duplicates == ["great product", "great product"]

    def test_empty_input(self) -> None:
        result = deduplicate([])
        assert result.unique == []
        assert result.duplicates == []
