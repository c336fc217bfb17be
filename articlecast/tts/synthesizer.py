"""Speech synthesis interfaces, OpenAI-backed implementation, and segment policy.

Responsibilities:
- Define the protocol for `(text, voice) -> audio bytes` synthesis.
- Validate voices before any network call.
- Synthesize ordered segments sequentially, skipping failed segments.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, Sequence

from ..errors import PipelineStageError
from ..llm.http_client import ProviderError, SpeechClient
from ..llm.rate_limiter import RateLimiter
from ..models.datatypes import AudioClip, Segment
from ..telemetry.logger import RunLogger
from .voices import UnsupportedVoiceError, validate_voice


SPEECH_INPUT_LIMIT_CHARS = 4096
_TRUNCATE_AT_CHARS = 3900
_TRUNCATION_OUTRO = "... Thanks for listening to this episode!"


def fit_speech_input(text: str) -> str:
    """Cap text to the speech backend input ceiling, closing with an outro."""

    if len(text) <= SPEECH_INPUT_LIMIT_CHARS:
        return text
    return text[:_TRUNCATE_AT_CHARS] + _TRUNCATION_OUTRO


class SpeechSynthesizer(Protocol):
    """Protocol for speech synthesis backends."""

    def synthesize(self, text: str, voice: str) -> bytes:
        """Return encoded audio bytes for `text` spoken by `voice`."""


class OpenAISpeechSynthesizer:
    """OpenAI-backed synthesizer returning MP3 bytes."""

    audio_suffix = ".mp3"

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "tts-1",
        provider_id: str = "openai",
        base_url: str = "https://api.openai.com/v1",
        timeout_seconds: float = 120.0,
        rate_limiter: RateLimiter | None = None,
    ) -> None:
        """Initialize OpenAI-backed TTS synthesizer settings."""

        self.model = model
        self.provider_id = provider_id
        self.client = SpeechClient(
            provider_id=provider_id,
            api_key=api_key,
            base_url=base_url,
            timeout_seconds=timeout_seconds,
            rate_limiter=rate_limiter,
        )

    def synthesize(self, text: str, voice: str) -> bytes:
        """Validate the voice, then synthesize one MP3 payload."""

        validated = validate_voice(voice)
        return self.client.synthesize_speech(
            model=self.model,
            voice=validated,
            text=fit_speech_input(text),
            response_format="mp3",
        )


@dataclass(frozen=True, slots=True)
class SynthesisOutcome:
    """Clips synthesized in segment order plus the indices that were skipped."""

    clips: tuple[AudioClip, ...]
    skipped: tuple[int, ...] = field(default_factory=tuple)


class SegmentSynthesizer:
    """Synthesize segments one by one into scratch files, tolerating failures."""

    def __init__(
        self,
        synthesizer: SpeechSynthesizer,
        scratch_dir: Path,
        run_logger: RunLogger | None = None,
        audio_suffix: str = ".mp3",
    ) -> None:
        """Initialize the synthesis backend and intermediate clip directory."""

        self.synthesizer = synthesizer
        self.scratch_dir = scratch_dir
        self.audio_suffix = audio_suffix
        self._run_logger = run_logger

    def synthesize_all(self, segments: Sequence[Segment]) -> SynthesisOutcome:
        """Synthesize every segment in order.

        A failed segment is logged and skipped. Raises `PipelineStageError` when
        no segment could be synthesized.
        """

        clips: list[AudioClip] = []
        skipped: list[int] = []
        for segment in segments:
            try:
                clips.append(self._synthesize_segment(segment))
            except (ProviderError, UnsupportedVoiceError, OSError) as exc:
                skipped.append(segment.index)
                if self._run_logger is not None:
                    self._run_logger.log_segment_skipped(segment.index, type(exc).__name__)

        if not clips:
            raise PipelineStageError(
                stage="synthesize",
                detail=f"Speech synthesis failed for all {len(segments)} segment(s).",
                hint="Verify the OpenAI API key, TTS model, and voice selection.",
            )
        return SynthesisOutcome(clips=tuple(clips), skipped=tuple(skipped))

    def _synthesize_segment(self, segment: Segment) -> AudioClip:
        """Synthesize one segment and write its clip file."""

        voice = validate_voice(segment.voice)
        audio_bytes = self.synthesizer.synthesize(segment.text, voice)
        self.scratch_dir.mkdir(parents=True, exist_ok=True)
        path = self.scratch_dir / (
            f"segment_{segment.index:04d}_{segment.speaker.value}{self.audio_suffix}"
        )
        path.write_bytes(audio_bytes)
        return AudioClip(
            segment_index=segment.index,
            voice=voice,
            path=path,
            byte_count=len(audio_bytes),
        )
