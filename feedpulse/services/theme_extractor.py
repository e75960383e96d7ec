"""Keyword-based theme extraction.

Each theme in the table owns a handful of trigger keywords.  A feedback text
counts once towards a theme when any of that theme's keywords appears
anywhere in it (case-insensitive substring), no matter how many keywords
match.  Themes are independent, so one text can count towards several.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from feedpulse.config.lexicons import THEME_TABLE


class ThemeExtractor:
    """Counts theme mentions across a set of feedback texts."""

    def __init__(self, theme_table: Mapping[str, Iterable[str]] = THEME_TABLE) -> None:
        self._themes: dict[str, tuple[str, ...]] = {
            name: tuple(k.lower() for k in keywords)
            for name, keywords in theme_table.items()
        }

    @property
    def theme_names(self) -> list[str]:
        return list(self._themes)

    def themes_for(self, text: str) -> list[str]:
        """Return the themes *text* triggers, in table order."""
        lowered = text.lower()
        return [
            name
            for name, keywords in self._themes.items()
            if any(k in lowered for k in keywords)
        ]

    def count(self, texts: Iterable[str]) -> dict[str, int]:
        """Return ``{theme: count}`` with every theme present, zero or not."""
        counts = {name: 0 for name in self._themes}
        for text in texts:
            for name in self.themes_for(text):
                counts[name] += 1
        return counts
