"""Text preprocessing and segmentation components.

This package provides word chunking, markdown cleanup, transcript section
partitioning, dialogue segmentation, and duration estimation used around the
LLM and TTS stages.
"""

from .chunking import WordChunker, split_for_processing
from .cleaners import (
    MarkdownStripper,
    StripBold,
    StripHeaders,
    StripHorizontalRules,
    StripInlineCode,
    StripItalic,
    StripLinks,
)
from .dialogue import DialogueSegmenter, LabelKind, LabelMatch, SpeakerLabelMatcher
from .duration import count_words, estimate_duration
from .sections import ScriptSections, partition_transcript
from .sentences import first_sentences, split_sentences

__all__ = [
    "WordChunker",
    "split_for_processing",
    "MarkdownStripper",
    "StripBold",
    "StripItalic",
    "StripHeaders",
    "StripInlineCode",
    "StripLinks",
    "StripHorizontalRules",
    "DialogueSegmenter",
    "LabelKind",
    "LabelMatch",
    "SpeakerLabelMatcher",
    "count_words",
    "estimate_duration",
    "ScriptSections",
    "partition_transcript",
    "first_sentences",
    "split_sentences",
]
