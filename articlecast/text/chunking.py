"""Source-document-to-chunk segmentation logic.

Responsibilities:
- Decide whether a source document exceeds the summarization threshold.
- Split oversized documents into fixed-size word chunks in document order.
"""

from __future__ import annotations

from ..models.datatypes import Chunk, SourceDocument


DEFAULT_THRESHOLD_WORDS = 500
DEFAULT_CHUNK_SIZE_WORDS = 500


class WordChunker:
    """Create fixed-size word chunks for documents above a word threshold."""

    def __init__(
        self,
        threshold_words: int = DEFAULT_THRESHOLD_WORDS,
        chunk_size_words: int = DEFAULT_CHUNK_SIZE_WORDS,
    ) -> None:
        """Initialize threshold and chunk size, both counted in words."""

        if threshold_words <= 0:
            raise ValueError("`threshold_words` must be a positive integer.")
        if chunk_size_words <= 0:
            raise ValueError("`chunk_size_words` must be a positive integer.")
        self.threshold_words = threshold_words
        self.chunk_size_words = chunk_size_words

    def needs_chunking(self, document: SourceDocument) -> bool:
        """Return whether the document word count exceeds the threshold."""

        return document.word_count > self.threshold_words

    def to_chunks(self, document: SourceDocument) -> list[Chunk]:
        """Split a document into word chunks.

        Documents at or below the threshold yield an empty list: the caller keeps
        the original text unchanged. The last chunk may be shorter than
        `chunk_size_words`.
        """

        if not self.needs_chunking(document):
            return []

        words = document.text.split()
        chunks: list[Chunk] = []
        for index, start in enumerate(range(0, len(words), self.chunk_size_words)):
            end = min(start + self.chunk_size_words, len(words))
            chunks.append(
                Chunk(
                    index=index,
                    text=" ".join(words[start:end]),
                    word_start=start,
                    word_end=end,
                )
            )
        return chunks


def split_for_processing(
    document: SourceDocument,
    threshold_words: int = DEFAULT_THRESHOLD_WORDS,
    chunk_size_words: int = DEFAULT_CHUNK_SIZE_WORDS,
) -> str | list[Chunk]:
    """Return the text unchanged when short enough, otherwise its word chunks."""

    chunker = WordChunker(threshold_words=threshold_words, chunk_size_words=chunk_size_words)
    if not chunker.needs_chunking(document):
        return document.text
    return chunker.to_chunks(document)
