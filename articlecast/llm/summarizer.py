"""Chunk summarization with per-chunk verbatim fallback.

Responsibilities:
- Compress each source chunk to a sentence budget with one generation call.
- Degrade a failed chunk to its leading sentences instead of failing the run.
- Preserve document order regardless of completion order.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from ..models.datatypes import Chunk, ChunkSummary
from ..telemetry.logger import RunLogger
from ..text.sentences import first_sentences
from .http_client import ProviderError
from .prompts import PromptLibrary
from .providers import TextGenerator


DEFAULT_TARGET_SENTENCES = 10


def sentence_budget(chunk_count: int, target_total_sentences: int = DEFAULT_TARGET_SENTENCES) -> int:
    """Return the per-chunk sentence budget: `max(1, target // chunk_count)`."""

    if chunk_count <= 0:
        return max(1, target_total_sentences)
    return max(1, target_total_sentences // chunk_count)


class ChunkSummarizer:
    """Summarize chunks concurrently and join the results in chunk order."""

    def __init__(
        self,
        generator: TextGenerator,
        provider: str,
        target_total_sentences: int = DEFAULT_TARGET_SENTENCES,
        max_workers: int = 4,
        run_logger: RunLogger | None = None,
    ) -> None:
        """Initialize the generator capability, provider selector, and budgets."""

        self.generator = generator
        self.provider = provider
        self.target_total_sentences = target_total_sentences
        self.max_workers = max(1, max_workers)
        self.prompts = PromptLibrary()
        self._run_logger = run_logger

    def summarize(self, chunks: Sequence[Chunk]) -> list[ChunkSummary]:
        """Return one summary per chunk, ordered like the input chunks."""

        if not chunks:
            return []
        budget = sentence_budget(len(chunks), self.target_total_sentences)
        workers = min(self.max_workers, len(chunks))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="summarize") as pool:
            return list(pool.map(lambda chunk: self._summarize_one(chunk, budget), chunks))

    def summarize_to_text(self, chunks: Sequence[Chunk]) -> str:
        """Return the concatenated summaries that replace the source text."""

        return join_summaries(self.summarize(chunks))

    def _summarize_one(self, chunk: Chunk, budget: int) -> ChunkSummary:
        """Summarize one chunk, falling back to its first `budget` sentences."""

        try:
            text = self.generator.generate(
                self.prompts.summary_prompt(chunk.text, budget),
                self.prompts.summary_system_prompt(),
                self.provider,
            )
        except (ProviderError, OSError) as exc:
            if self._run_logger is not None:
                failure = exc.failure_kind if isinstance(exc, ProviderError) else type(exc).__name__
                self._run_logger.log_chunk_fallback(chunk.index, failure)
            return ChunkSummary(
                chunk_index=chunk.index,
                text=first_sentences(chunk.text, budget),
                sentence_budget=budget,
                used_fallback=True,
            )
        return ChunkSummary(
            chunk_index=chunk.index,
            text=" ".join(text.split()),
            sentence_budget=budget,
        )


def join_summaries(summaries: Sequence[ChunkSummary]) -> str:
    """Join summaries in chunk order, one paragraph per chunk."""

    ordered = sorted(summaries, key=lambda item: item.chunk_index)
    return "\n\n".join(summary.text for summary in ordered if summary.text)
