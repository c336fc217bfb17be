"""Sentence splitting helpers for summary budgets and fallbacks."""

from __future__ import annotations

import re


_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])\s+")


def split_sentences(text: str) -> list[str]:
    """Split text on terminal punctuation followed by whitespace."""

    compact = " ".join(text.split())
    if not compact:
        return []
    return [sentence for sentence in _SENTENCE_BOUNDARY.split(compact) if sentence]


def first_sentences(text: str, count: int) -> str:
    """Return the first `count` sentences of `text` verbatim, joined by spaces."""

    if count <= 0:
        return ""
    return " ".join(split_sentences(text)[:count])
