"""Pipeline orchestration for Articlecast.

Responsibilities:
- Define the stage order for turning article text into a podcast.
- Validate requests before any backend call.
- Keep the script result when downstream audio stages fail.

Key types:
- `PipelineSettings`: chunking and summarization knobs.
- `PodcastPipeline`: orchestration facade.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from ..audio.merger import AudioAssembler
from ..config import ArticlecastConfig, ProviderRuntimeConfig
from ..errors import PipelineStageError, PodcastValidationError
from ..io.storage import ArtifactStore, unique_artifact_name
from ..llm.http_client import ProviderError
from ..llm.providers import SUPPORTED_PROVIDER_IDS, TextGenerator
from ..llm.script_generator import GeneratedScript, ScriptGenerator, require_custom_instructions
from ..llm.summarizer import ChunkSummarizer
from ..models.datatypes import (
    AssemblyResult,
    Host,
    PodcastMode,
    PodcastRequest,
    PodcastResult,
    PodcastScript,
    Segment,
    SourceDocument,
    SpeakerRole,
)
from ..parsing import normalize_identifier
from ..provider_factory import ProviderFactory
from ..telemetry.logger import RunLogger
from ..text.chunking import WordChunker
from ..text.dialogue import DialogueSegmenter
from ..text.duration import count_words, estimate_duration
from ..tts.synthesizer import SegmentSynthesizer, SpeechSynthesizer, SynthesisOutcome
from ..tts.voices import UnsupportedVoiceError, validate_voice
from .hosts import podcast_title, resolve_hosts
from .telemetry import PipelineTelemetryMixin


@dataclass(frozen=True, slots=True)
class PipelineSettings:
    """Chunking and summarization settings for pipeline runs."""

    chunk_threshold_words: int = 500
    chunk_size_words: int = 500
    summary_target_sentences: int = 10
    summary_workers: int = 4

    @classmethod
    def from_config(cls, config: ArticlecastConfig) -> PipelineSettings:
        """Copy pipeline knobs from a validated config."""

        return cls(
            chunk_threshold_words=config.chunk_threshold_words,
            chunk_size_words=config.chunk_size_words,
            summary_target_sentences=config.summary_target_sentences,
            summary_workers=config.summary_workers,
        )


@dataclass(frozen=True, slots=True)
class _ValidatedRequest:
    """Normalized request values produced by the validate stage."""

    source: SourceDocument
    provider: str
    mode: PodcastMode
    custom_instructions: str | None
    hosts: tuple[Host, ...]
    include_audio: bool


@dataclass(frozen=True, slots=True)
class _AudioOutcome:
    """Audio stage results; `assembly` is `None` when audio was abandoned."""

    assembly: AssemblyResult | None
    segment_count: int = 0
    skipped: tuple[int, ...] = ()


class PodcastPipeline(PipelineTelemetryMixin):
    """Coordinate all stages for podcast requests.

    Backends are injected once and shared across requests; each `run` call
    keeps its own state.
    """

    def __init__(
        self,
        generator: TextGenerator,
        synthesizer: SpeechSynthesizer | None,
        store: ArtifactStore,
        settings: PipelineSettings | None = None,
        run_logger: RunLogger | None = None,
        stage_progress_callback: Callable[[str, int, int], None] | None = None,
    ) -> None:
        """Initialize backends, artifact storage, and optional telemetry hooks."""

        self.generator = generator
        self.synthesizer = synthesizer
        self.store = store
        self.settings = settings or PipelineSettings()
        self._run_logger = run_logger
        self._stage_progress_callback = stage_progress_callback
        self._chunker = WordChunker(
            threshold_words=self.settings.chunk_threshold_words,
            chunk_size_words=self.settings.chunk_size_words,
        )
        self._script_generator = ScriptGenerator(generator)
        self._dialogue_segmenter = DialogueSegmenter()
        self._assembler = AudioAssembler(store, run_logger=run_logger)

    @classmethod
    def from_config(
        cls,
        config: ArticlecastConfig,
        runtime: ProviderRuntimeConfig | None = None,
        run_logger: RunLogger | None = None,
        stage_progress_callback: Callable[[str, int, int], None] | None = None,
    ) -> PodcastPipeline:
        """Build a pipeline with provider-backed capabilities from config."""

        config.validate()
        resolved_runtime = runtime if runtime is not None else config.resolved_provider_runtime()
        return cls(
            generator=ProviderFactory.create_text_generator(config, resolved_runtime),
            synthesizer=ProviderFactory.create_speech_synthesizer(config, resolved_runtime),
            store=ArtifactStore(config.output_dir, public_prefix=config.public_prefix),
            settings=PipelineSettings.from_config(config),
            run_logger=run_logger,
            stage_progress_callback=stage_progress_callback,
        )

    def run(self, request: PodcastRequest) -> PodcastResult:
        """Run the pipeline for one request.

        Raises:
            PodcastValidationError: When the request is rejected before any backend call.
            PipelineStageError: When script generation fails.
        """

        validated = self._run_stage("validate", lambda: self._validate(request))

        chunks = self._run_stage("segment", lambda: self._chunker.to_chunks(validated.source))
        if chunks:
            processing_text = self._run_stage(
                "summarize",
                lambda: self._summarize(chunks, validated.provider),
            )
        else:
            self._on_stage_skipped("summarize", "below_threshold")
            processing_text = validated.source.text

        generated = self._run_stage(
            "script",
            lambda: self._generate_script(processing_text, validated),
        )

        if validated.include_audio:
            audio = self._produce_audio(generated, validated)
        else:
            for stage_name in ("dialogue", "synthesize", "assemble"):
                self._on_stage_skipped(stage_name, "audio_not_requested")
            audio = _AudioOutcome(assembly=None)

        duration = self._run_stage(
            "estimate",
            lambda: estimate_duration(count_words(self._spoken_text(generated, validated))),
        )

        script = PodcastScript(
            title=podcast_title(validated.mode),
            introduction=generated.sections.introduction,
            main_content=generated.sections.main_content,
            conclusion=generated.sections.conclusion,
            estimated_duration=duration,
            mode=validated.mode,
            hosts=validated.hosts,
        )
        assembly = audio.assembly
        return PodcastResult(
            script=script,
            transcript=generated.transcript,
            audio_url=assembly.public_ref if assembly is not None else None,
            audio_degraded=validated.include_audio and (assembly is None or assembly.degraded),
            chunk_count=len(chunks),
            segment_count=audio.segment_count,
            skipped_segments=audio.skipped,
            extra={"provider": validated.provider},
        )

    def _validate(self, request: PodcastRequest) -> _ValidatedRequest:
        """Reject malformed requests before any backend call."""

        source = SourceDocument.from_text(request.source_text or "")
        if source.word_count == 0:
            raise PodcastValidationError(
                field="source_text",
                detail="Source text must contain at least one word.",
            )

        provider = normalize_identifier(request.provider)
        if provider not in SUPPORTED_PROVIDER_IDS:
            supported = ", ".join(sorted(SUPPORTED_PROVIDER_IDS))
            raise PodcastValidationError(
                field="provider",
                detail=f"Unsupported provider `{request.provider}`. Supported providers: {supported}.",
            )

        try:
            mode = (
                request.mode
                if isinstance(request.mode, PodcastMode)
                else PodcastMode.parse(str(request.mode))
            )
        except ValueError as exc:
            raise PodcastValidationError(field="mode", detail=str(exc)) from exc

        instructions = require_custom_instructions(mode, request.custom_instructions)

        primary_voice = self._validated_voice(request.primary_voice, "primary_voice")
        secondary_voice = self._validated_voice(request.secondary_voice, "secondary_voice")
        if request.include_audio:
            if primary_voice is None:
                raise PodcastValidationError(
                    field="primary_voice",
                    detail="A primary voice is required when audio is requested.",
                )
            if mode.is_two_host and secondary_voice is None:
                raise PodcastValidationError(
                    field="secondary_voice",
                    detail=(
                        f"Podcast mode `{mode.value}` requires a secondary voice "
                        "when audio is requested."
                    ),
                    hint="Pass `--secondary-voice` or set `ARTICLECAST_SECONDARY_VOICE`.",
                )
            if self.synthesizer is None:
                raise PodcastValidationError(
                    field="include_audio",
                    detail="Audio was requested but no speech synthesizer is configured.",
                )

        return _ValidatedRequest(
            source=source,
            provider=provider,
            mode=mode,
            custom_instructions=instructions,
            hosts=resolve_hosts(mode, primary_voice, secondary_voice),
            include_audio=request.include_audio,
        )

    @staticmethod
    def _validated_voice(voice: str | None, field_name: str) -> str | None:
        """Return a normalized voice or `None`; reject unsupported identifiers."""

        if voice is None or not voice.strip():
            return None
        try:
            return validate_voice(voice)
        except UnsupportedVoiceError as exc:
            raise PodcastValidationError(field=field_name, detail=str(exc)) from exc

    def _summarize(self, chunks, provider: str) -> str:
        """Summarize chunks into the text that replaces the oversized source."""

        summarizer = ChunkSummarizer(
            self.generator,
            provider,
            target_total_sentences=self.settings.summary_target_sentences,
            max_workers=self.settings.summary_workers,
            run_logger=self._run_logger,
        )
        return summarizer.summarize_to_text(chunks)

    def _generate_script(self, text: str, validated: _ValidatedRequest) -> GeneratedScript:
        """Generate the cleaned transcript, mapping provider failures to a stage error."""

        try:
            return self._script_generator.generate(
                text,
                validated.mode,
                validated.provider,
                validated.custom_instructions,
            )
        except (ProviderError, OSError) as exc:
            raise PipelineStageError(
                stage="script",
                detail=str(exc),
                hint=(
                    f"Verify the `{validated.provider}` API key, model, and quota, "
                    "or choose another provider."
                ),
            ) from exc

    def _spoken_text(self, generated: GeneratedScript, validated: _ValidatedRequest) -> str:
        """Return the words a listener hears, without `HOST N:` speaker labels."""

        if not validated.mode.is_two_host:
            return generated.transcript
        segments = self._dialogue_segmenter.segment(generated.transcript, validated.hosts)
        return " ".join(segment.text for segment in segments)

    def _produce_audio(
        self, generated: GeneratedScript, validated: _ValidatedRequest
    ) -> _AudioOutcome:
        """Run dialogue, synthesis, and assembly; audio failures are non-fatal."""

        if validated.mode.is_two_host:
            segments = self._run_stage(
                "dialogue",
                lambda: self._dialogue_segmenter.segment(generated.transcript, validated.hosts),
            )
        else:
            self._on_stage_skipped("dialogue", "single_host")
            segments = [
                Segment(
                    index=0,
                    speaker=SpeakerRole.HOST_1,
                    text=generated.transcript,
                    voice=validated.hosts[0].voice,
                )
            ]

        segment_synthesizer = SegmentSynthesizer(
            self.synthesizer,
            self.store.scratch_dir(unique_artifact_name(prefix="segments", suffix="")),
            run_logger=self._run_logger,
        )
        try:
            outcome: SynthesisOutcome = self._run_stage(
                "synthesize",
                lambda: segment_synthesizer.synthesize_all(segments),
            )
            assembly = self._run_stage(
                "assemble",
                lambda: self._assembler.assemble(outcome.clips),
            )
        except (PipelineStageError, OSError) as exc:
            if self._run_logger is not None:
                self._run_logger.log_degraded("audio", f"script_only_{type(exc).__name__}")
            return _AudioOutcome(assembly=None, segment_count=len(segments))

        if assembly.degraded and self._run_logger is not None:
            self._run_logger.log_degraded("assemble", "first_clip_only")
        return _AudioOutcome(
            assembly=assembly,
            segment_count=len(segments),
            skipped=outcome.skipped,
        )
