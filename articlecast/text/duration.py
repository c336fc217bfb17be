"""Spoken-duration estimate for a finished script."""

from __future__ import annotations

import math


WORDS_PER_MINUTE = 150


def count_words(text: str) -> int:
    """Return the whitespace-delimited word count of `text`."""

    return len(text.split())


def estimate_duration(word_count: int, words_per_minute: int = WORDS_PER_MINUTE) -> str:
    """Return a `N minute(s)` label using ceiling division by the speaking rate."""

    minutes = math.ceil(max(0, word_count) / words_per_minute)
    unit = "minute" if minutes == 1 else "minutes"
    return f"{minutes} {unit}"
