"""Prompt template library for LLM stages.

Responsibilities:
- Centralize prompt construction for chunk summaries and podcast scripts.
- Keep prompts deterministic by podcast mode.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..models.datatypes import PodcastMode


_PLAIN_TEXT_RULE = (
    "Output ONLY plain text without any markdown, formatting, asterisks, or special characters."
)
_NO_MARKDOWN_RULE = (
    "Do NOT use any markdown formatting, asterisks, bold text, headers with #, "
    "or special characters"
)


@dataclass(frozen=True, slots=True)
class PromptPair:
    """System instruction and user prompt for one generation call."""

    system_prompt: str
    user_prompt: str


class PromptLibrary:
    """Build prompt strings for supported LLM tasks."""

    def summary_system_prompt(self) -> str:
        """Return the system prompt for faithful chunk summarization."""

        return (
            "You are an expert editor who condenses long articles without losing their "
            "argument. Preserve key facts, names, and numbers. " + _PLAIN_TEXT_RULE
        )

    def summary_prompt(self, chunk_text: str, sentence_budget: int) -> str:
        """Return a summary prompt sized to a sentence budget."""

        unit = "sentence" if sentence_budget == 1 else "sentences"
        return (
            f"Summarize the following passage in at most {sentence_budget} {unit}. "
            "Output only the summary.\n\n"
            f"{chunk_text}"
        )

    def podcast_prompts(
        self,
        mode: PodcastMode,
        text: str,
        custom_instructions: str | None = None,
    ) -> PromptPair:
        """Return the system and user prompts for a podcast mode."""

        builders = {
            PodcastMode.NORMAL_ONE: self._normal_one,
            PodcastMode.NORMAL_TWO: self._normal_two,
            PodcastMode.CUSTOM_ONE: self._custom_one,
            PodcastMode.CUSTOM_TWO: self._custom_two,
        }
        return builders[mode](text, (custom_instructions or "").strip())

    def _normal_one(self, text: str, _: str) -> PromptPair:
        """Templated single-narrator prompts."""

        return PromptPair(
            system_prompt=(
                "You are an expert podcast host. Create engaging, conversational podcast "
                "content with a single narrator that makes complex topics accessible and "
                "interesting. Write in a natural speaking style with smooth transitions. "
                + _PLAIN_TEXT_RULE
            ),
            user_prompt=(
                "Create a single-host podcast episode based on the following text. Write as a "
                f"solo narrator speaking directly to listeners. {_NO_MARKDOWN_RULE}:\n\n"
                f"Text to discuss:\n{text}\n\n"
                "Create a complete podcast script with:\n"
                "- Engaging introduction\n"
                "- Clear explanation of key concepts\n"
                "- Conclusion with key takeaways\n\n"
                "Cover the whole text. Keep it conversational and accessible."
            ),
        )

    def _normal_two(self, text: str, _: str) -> PromptPair:
        """Templated two-host dialogue prompts."""

        return PromptPair(
            system_prompt=(
                "You are creating a two-host podcast with natural conversation between hosts. "
                "Create engaging dialogue that makes complex topics accessible through "
                "discussion between two knowledgeable hosts. " + _PLAIN_TEXT_RULE
            ),
            user_prompt=(
                "Create a two-host podcast episode based on the following text. Format as a "
                f"natural conversation between HOST 1 and HOST 2. {_NO_MARKDOWN_RULE}:\n\n"
                f"Text to discuss:\n{text}\n\n"
                "Create a complete podcast script with:\n"
                "- HOST 1: Welcome and introduction\n"
                "- Natural back-and-forth discussion between hosts\n"
                "- HOST 2: Conclusion and wrap-up\n\n"
                'Format each line as "HOST 1:" or "HOST 2:" followed by their dialogue. '
                "Cover the whole text. Make it conversational and engaging."
            ),
        )

    def _custom_one(self, text: str, instructions: str) -> PromptPair:
        """Single-narrator prompts driven by user instructions."""

        return PromptPair(
            system_prompt=(
                "You are an expert podcast host. Create engaging, conversational podcast "
                f"content with a single narrator. {_PLAIN_TEXT_RULE} {instructions}"
            ),
            user_prompt=(
                "Create a single-host podcast episode based on the following text. Follow "
                f"these custom instructions: {instructions}. {_NO_MARKDOWN_RULE}.\n\n"
                f"Text to discuss:\n{text}\n\n"
                "Create a complete podcast script following the custom instructions provided. "
                "Keep it engaging and accessible."
            ),
        )

    def _custom_two(self, text: str, instructions: str) -> PromptPair:
        """Two-host prompts driven by user instructions."""

        return PromptPair(
            system_prompt=(
                "You are creating a two-host podcast with natural conversation between hosts. "
                f"{_PLAIN_TEXT_RULE} {instructions}"
            ),
            user_prompt=(
                "Create a two-host podcast episode based on the following text. Follow "
                f"these custom instructions: {instructions}. {_NO_MARKDOWN_RULE}.\n\n"
                f"Text to discuss:\n{text}\n\n"
                "Format as a natural conversation between HOST 1 and HOST 2. Each line should "
                'start with "HOST 1:" or "HOST 2:" followed by their dialogue. Follow the '
                "custom instructions provided."
            ),
        )
