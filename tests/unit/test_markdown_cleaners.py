"""Unit tests for markdown cleanup rules."""

from __future__ import annotations

import pytest

from articlecast.models.datatypes import Host, SpeakerRole
from articlecast.text.cleaners import (
    MarkdownStripper,
    StripBold,
    StripHeaders,
    StripHorizontalRules,
    StripInlineCode,
    StripItalic,
    StripLinks,
)
from articlecast.text.dialogue import DialogueSegmenter


@pytest.mark.parametrize(
    ("rule", "raw", "expected"),
    [
        (StripBold(), "a **bold** move", "a bold move"),
        (StripItalic(), "an *italic* aside", "an italic aside"),
        (StripHeaders(), "## Heading", "Heading"),
        (StripInlineCode(), "run `make test` now", "run make test now"),
        (StripLinks(), "see [the docs](https://example.com)", "see the docs"),
        (StripHorizontalRules(), "before\n---\nafter", "before\n\nafter"),
    ],
)
def test_each_rule_removes_its_markup(rule, raw: str, expected: str) -> None:  # type: ignore[no-untyped-def]
    """Each rule strips exactly one kind of markup."""

    assert rule.apply(raw) == expected


def test_stripper_cleans_mixed_markdown_transcript() -> None:
    """The default rule sequence removes all supported markup and trims output."""

    raw = (
        "\n# Episode 12\n"
        "**HOST 1:** Welcome to *the* show.\n"
        "-----\n"
        "HOST 2: Read [the article](https://example.com) and run `pip install`.\n"
    )

    cleaned = MarkdownStripper().strip(raw)

    assert cleaned == (
        "Episode 12\n"
        "HOST 1: Welcome to the show.\n"
        "\n"
        "HOST 2: Read the article and run pip install."
    )


@pytest.mark.parametrize(
    "raw",
    [
        "#---- Intro",
        "****nested**** stars",
        "**unterminated bold and *italic",
        "[`code link`](x) and ------- rules ### deep",
        "plain text with no markup at all",
        "",
    ],
)
def test_stripping_is_idempotent(raw: str) -> None:
    """Stripping twice gives the same result as stripping once."""

    stripper = MarkdownStripper()
    once = stripper.strip(raw)

    assert stripper.strip(once) == once


def test_later_rule_exposing_earlier_pattern_is_still_cleaned() -> None:
    """A heading revealed by horizontal-rule removal is stripped in the same call."""

    assert MarkdownStripper().strip("#---- Intro") == "Intro"


def test_trailing_hash_keeps_speaker_turns_apart() -> None:
    """A `#` ending one line never joins it with the next speaker's line."""

    hosts = (
        Host("Alex", "Host 1", SpeakerRole.HOST_1, "alloy"),
        Host("Sam", "Host 2", SpeakerRole.HOST_2, "echo"),
    )

    cleaned = MarkdownStripper().strip("HOST 1: We are number #\nHOST 2: Right, first place.")
    segments = DialogueSegmenter().segment(cleaned, hosts)

    assert cleaned == "HOST 1: We are number #\nHOST 2: Right, first place."
    assert [(segment.speaker, segment.text, segment.voice) for segment in segments] == [
        (SpeakerRole.HOST_1, "We are number #", "alloy"),
        (SpeakerRole.HOST_2, "Right, first place.", "echo"),
    ]


def test_headers_are_only_stripped_at_line_start() -> None:
    """Indented headings are cleaned; hashes inside a sentence are kept."""

    assert MarkdownStripper().strip("  ## Intro\nTrack #1 is up next") == "Intro\nTrack #1 is up next"
