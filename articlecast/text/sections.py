"""Proportional introduction/main/conclusion split of a transcript.

The split is a display convenience based purely on line counts: the first
fifth of non-blank lines becomes the introduction and the last fifth the
conclusion.
"""

from __future__ import annotations

from dataclasses import dataclass
import math


PLACEHOLDER_INTRODUCTION = "Welcome to this episode..."
PLACEHOLDER_CONCLUSION = "Thanks for listening!"
_MIN_PARTITION_LINES = 4


@dataclass(frozen=True, slots=True)
class ScriptSections:
    """Introduction, main content, and conclusion text of a transcript."""

    introduction: str
    main_content: str
    conclusion: str


def partition_transcript(transcript: str) -> ScriptSections:
    """Split a cleaned transcript into 20/60/20 sections by non-blank line count.

    Transcripts with three or fewer non-blank lines are not partitioned: the
    whole transcript becomes main content with placeholder introduction and
    conclusion. Empty computed sections also fall back to the placeholders.
    """

    lines = [line for line in transcript.split("\n") if line.strip()]
    if len(lines) < _MIN_PARTITION_LINES:
        return ScriptSections(
            introduction=PLACEHOLDER_INTRODUCTION,
            main_content=transcript,
            conclusion=PLACEHOLDER_CONCLUSION,
        )

    intro_end = math.floor(len(lines) * 0.2)
    conclusion_start = math.floor(len(lines) * 0.8)
    introduction = "\n".join(lines[:intro_end])
    main_content = "\n".join(lines[intro_end:conclusion_start])
    conclusion = "\n".join(lines[conclusion_start:])
    return ScriptSections(
        introduction=introduction or PLACEHOLDER_INTRODUCTION,
        main_content=main_content,
        conclusion=conclusion or PLACEHOLDER_CONCLUSION,
    )
