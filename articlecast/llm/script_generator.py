"""Podcast script generation.

Responsibilities:
- Validate mode-specific inputs before any backend call.
- Build mode-specific prompts and invoke the selected text-generation backend.
- Strip markdown artifacts and split the transcript into display sections.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import PodcastValidationError
from ..models.datatypes import PodcastMode
from ..parsing import normalize_optional_string
from ..text.cleaners import MarkdownStripper
from ..text.sections import ScriptSections, partition_transcript
from .prompts import PromptLibrary
from .providers import TextGenerator


@dataclass(frozen=True, slots=True)
class GeneratedScript:
    """Raw and cleaned generation output with display sections."""

    raw_text: str
    transcript: str
    sections: ScriptSections


def require_custom_instructions(mode: PodcastMode, custom_instructions: str | None) -> str | None:
    """Return normalized instructions, failing when a custom mode has none."""

    normalized = normalize_optional_string(custom_instructions)
    if mode.is_custom and normalized is None:
        raise PodcastValidationError(
            field="custom_instructions",
            detail=f"Podcast mode `{mode.value}` requires non-empty custom instructions.",
            hint="Pass `--instructions` or choose a templated `normal-*` mode.",
        )
    return normalized


class ScriptGenerator:
    """Generate a cleaned podcast transcript for one mode and provider."""

    def __init__(
        self,
        generator: TextGenerator,
        stripper: MarkdownStripper | None = None,
    ) -> None:
        """Initialize the generation capability and markdown stripper."""

        self.generator = generator
        self.stripper = stripper or MarkdownStripper()
        self.prompts = PromptLibrary()

    def generate(
        self,
        text: str,
        mode: PodcastMode,
        provider: str,
        custom_instructions: str | None = None,
    ) -> GeneratedScript:
        """Generate, clean, and partition a podcast script.

        Provider errors propagate unchanged; there is no retry at this layer.
        """

        instructions = require_custom_instructions(mode, custom_instructions)
        prompts = self.prompts.podcast_prompts(mode, text, instructions)
        raw_text = self.generator.generate(prompts.user_prompt, prompts.system_prompt, provider)
        transcript = self.stripper.strip(raw_text)
        return GeneratedScript(
            raw_text=raw_text,
            transcript=transcript,
            sections=partition_transcript(transcript),
        )
