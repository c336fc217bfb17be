"""Shared typed data models for Articlecast.

This package contains dataclasses used across pipeline modules to avoid
cross-module coupling and circular imports.
"""

from .datatypes import (
    AssemblyResult,
    AudioClip,
    Chunk,
    ChunkSummary,
    Host,
    PodcastMode,
    PodcastRequest,
    PodcastResult,
    PodcastScript,
    Segment,
    SourceDocument,
    SpeakerRole,
)

__all__ = [
    "AssemblyResult",
    "AudioClip",
    "Chunk",
    "ChunkSummary",
    "Host",
    "PodcastMode",
    "PodcastRequest",
    "PodcastResult",
    "PodcastScript",
    "Segment",
    "SourceDocument",
    "SpeakerRole",
]
