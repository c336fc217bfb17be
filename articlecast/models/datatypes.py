"""Core datatypes shared across Articlecast modules.

Responsibilities:
- Represent immutable records exchanged between pipeline stages.
- Provide explicit typing for request validation and response serialization.

Key types:
- `SourceDocument`, `Chunk`, `ChunkSummary`, `PodcastMode`, `Host`, `Segment`,
  `AudioClip`, `AssemblyResult`, `PodcastRequest`, `PodcastScript`, and
  `PodcastResult`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class PodcastMode(str, Enum):
    """Narrator count crossed with templated or custom instruction style."""

    NORMAL_ONE = "normal-one"
    NORMAL_TWO = "normal-two"
    CUSTOM_ONE = "custom-one"
    CUSTOM_TWO = "custom-two"

    @property
    def host_count(self) -> int:
        """Return how many hosts speak in this mode."""

        return 2 if self.value.endswith("-two") else 1

    @property
    def is_two_host(self) -> bool:
        """Return whether this mode produces a two-host dialogue."""

        return self.host_count == 2

    @property
    def is_custom(self) -> bool:
        """Return whether this mode requires user-supplied instructions."""

        return self.value.startswith("custom-")

    @property
    def label(self) -> str:
        """Return the display label used in script titles, e.g. `Normal two`."""

        return self.value.capitalize().replace("-", " ", 1)

    @classmethod
    def parse(cls, value: str) -> PodcastMode:
        """Parse a mode identifier, raising `ValueError` for unknown values."""

        token = value.strip().lower()
        for mode in cls:
            if mode.value == token:
                return mode
        supported = ", ".join(mode.value for mode in cls)
        raise ValueError(f"Unsupported podcast mode `{value}`. Supported modes: {supported}.")


class SpeakerRole(str, Enum):
    """Speaker-label position of a host within a transcript."""

    HOST_1 = "host-1"
    HOST_2 = "host-2"


@dataclass(frozen=True, slots=True)
class SourceDocument:
    """Raw article text plus its whitespace word count."""

    text: str
    word_count: int

    @classmethod
    def from_text(cls, text: str) -> SourceDocument:
        """Build a source document and count its words."""

        return cls(text=text, word_count=len(text.split()))


@dataclass(frozen=True, slots=True)
class Chunk:
    """A contiguous word-bounded slice of a source document.

    Attributes:
        index: 0-based chunk index in document order.
        text: Chunk text (words joined by single spaces).
        word_start: Inclusive word offset in the source document.
        word_end: Exclusive word offset in the source document.
    """

    index: int
    text: str
    word_start: int
    word_end: int


@dataclass(frozen=True, slots=True)
class ChunkSummary:
    """Compressed text representing one chunk.

    Attributes:
        chunk_index: Index of the summarized chunk.
        text: Summary text.
        sentence_budget: Sentence budget requested for this chunk.
        used_fallback: Whether the summary is verbatim leading sentences after a
            generation failure.
    """

    chunk_index: int
    text: str
    sentence_budget: int
    used_fallback: bool = False


@dataclass(frozen=True, slots=True)
class Host:
    """One conversational voice identity.

    Attributes:
        name: Conventional host name (`Alex`, `Sam`).
        role: Display role (`Host`, `Host 1`, `Host 2`).
        speaker: Speaker-label position this host answers to.
        voice: Assigned voice identifier, or `None` for script-only requests.
    """

    name: str
    role: str
    speaker: SpeakerRole
    voice: str | None = None


@dataclass(frozen=True, slots=True)
class Segment:
    """One attributed span of dialogue mapped to one synthesis call."""

    index: int
    speaker: SpeakerRole
    text: str
    voice: str | None = None


@dataclass(frozen=True, slots=True)
class AudioClip:
    """Intermediate synthesized audio for one segment, stored on disk."""

    segment_index: int
    voice: str
    path: Path
    byte_count: int


@dataclass(frozen=True, slots=True)
class AssemblyResult:
    """Final persisted audio artifact and whether assembly degraded.

    Attributes:
        public_ref: Servable reference, for example `/audio/podcast_1700000000000_0.mp3`.
        name: Stored artifact file name.
        segment_count: Number of clips included in the artifact.
        byte_count: Size of the stored artifact in bytes.
        degraded: `True` when combining failed and only the first clip was kept.
    """

    public_ref: str
    name: str
    segment_count: int
    byte_count: int
    degraded: bool = False


@dataclass(frozen=True, slots=True)
class PodcastRequest:
    """One podcast-generation request.

    Attributes:
        source_text: Article text to turn into a podcast.
        provider: Text-generation provider identifier.
        mode: Requested podcast mode.
        custom_instructions: Instructions required by custom modes.
        primary_voice: Voice for the first host.
        secondary_voice: Voice for the second host in two-host modes.
        include_audio: Whether narration audio should be synthesized.
    """

    source_text: str
    provider: str = "openai"
    mode: PodcastMode = PodcastMode.NORMAL_TWO
    custom_instructions: str | None = None
    primary_voice: str | None = "alloy"
    secondary_voice: str | None = None
    include_audio: bool = False


@dataclass(frozen=True, slots=True)
class PodcastScript:
    """Structured script returned to the caller."""

    title: str
    introduction: str
    main_content: str
    conclusion: str
    estimated_duration: str
    mode: PodcastMode
    hosts: tuple[Host, ...]

    def as_payload(self) -> dict[str, object]:
        """Return the camelCase response payload for this script."""

        return {
            "title": self.title,
            "introduction": self.introduction,
            "mainContent": self.main_content,
            "conclusion": self.conclusion,
            "estimatedDuration": self.estimated_duration,
            "mode": self.mode.value,
            "hosts": [{"name": host.name, "role": host.role} for host in self.hosts],
        }


@dataclass(frozen=True, slots=True)
class PodcastResult:
    """Durable output of one pipeline invocation.

    Attributes:
        script: Structured script sections and metadata.
        transcript: Full cleaned transcript text.
        audio_url: Public audio reference, or `None` for script-only results.
        audio_degraded: Whether the audio artifact was produced by a fallback path.
        chunk_count: Number of source chunks summarized (0 when not chunked).
        segment_count: Number of synthesis units attempted.
        skipped_segments: Indices of segments dropped after synthesis failure.
        extra: Additional diagnostics safe to show to users.
    """

    script: PodcastScript
    transcript: str
    audio_url: str | None = None
    audio_degraded: bool = False
    chunk_count: int = 0
    segment_count: int = 0
    skipped_segments: tuple[int, ...] = field(default_factory=tuple)
    extra: dict[str, str] = field(default_factory=dict)

    def as_payload(self) -> dict[str, object]:
        """Return the response payload: script object plus optional audio reference."""

        payload: dict[str, object] = {"script": self.script.as_payload()}
        if self.audio_url is not None:
            payload["audioUrl"] = self.audio_url
        return payload
