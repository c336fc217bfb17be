"""Deterministic markdown cleanup rules for generated transcripts.

Responsibilities:
- Provide composable rules that strip markdown artifacts from LLM output.
- Keep cleanup predictable and idempotent for display and speech synthesis.
"""

from __future__ import annotations

import re
from typing import Protocol


class CleanerRule(Protocol):
    """Protocol for text cleaning rules."""

    def apply(self, text: str) -> str:
        """Apply a single cleaning transformation."""


class StripBold:
    """Unwrap `**bold**` spans."""

    _PATTERN = re.compile(r"\*\*(.*?)\*\*")

    def apply(self, text: str) -> str:
        """Replace bold markup with its inner text."""

        return self._PATTERN.sub(r"\1", text)


class StripItalic:
    """Unwrap `*italic*` spans."""

    _PATTERN = re.compile(r"\*(.*?)\*")

    def apply(self, text: str) -> str:
        """Replace italic markup with its inner text."""

        return self._PATTERN.sub(r"\1", text)


class StripHeaders:
    """Remove `#` heading markers at the start of a line."""

    _PATTERN = re.compile(r"^[ \t]*#{1,6}[ \t]+", re.MULTILINE)

    def apply(self, text: str) -> str:
        """Drop heading hashes together with the following whitespace."""

        return self._PATTERN.sub("", text)


class StripInlineCode:
    """Unwrap `` `code` `` spans."""

    _PATTERN = re.compile(r"`(.*?)`")

    def apply(self, text: str) -> str:
        """Replace inline code markup with its inner text."""

        return self._PATTERN.sub(r"\1", text)


class StripLinks:
    """Replace `[label](url)` links with their label."""

    _PATTERN = re.compile(r"\[(.*?)\]\(.*?\)")

    def apply(self, text: str) -> str:
        """Keep link labels and drop link targets."""

        return self._PATTERN.sub(r"\1", text)


class StripHorizontalRules:
    """Remove runs of three or more dashes."""

    _PATTERN = re.compile(r"-{3,}")

    def apply(self, text: str) -> str:
        """Drop horizontal-rule dash sequences."""

        return self._PATTERN.sub("", text)


class MarkdownStripper:
    """Apply an ordered sequence of markdown cleanup rules until stable.

    A later rule can expose a pattern an earlier rule handles (`#---- Intro`
    only becomes a heading once the dashes are gone), so the sequence repeats
    until a full pass changes nothing. Every rule only removes characters, so
    the loop terminates.
    """

    def __init__(self, rules: list[CleanerRule] | None = None) -> None:
        """Initialize with custom rules or the default rule sequence."""

        self.rules = rules or [
            StripBold(),
            StripItalic(),
            StripHeaders(),
            StripInlineCode(),
            StripLinks(),
            StripHorizontalRules(),
        ]

    def strip(self, text: str) -> str:
        """Apply all configured rules in order and trim surrounding whitespace."""

        current = text
        while True:
            previous = current
            for rule in self.rules:
                current = rule.apply(current)
            if current == previous:
                break
        return current.strip()
