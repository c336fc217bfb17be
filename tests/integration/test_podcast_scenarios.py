"""End-to-end pipeline scenarios over deterministic backends."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from articlecast.config import ArticlecastConfig, RuntimeConfigSources
from articlecast.errors import PipelineStageError, PodcastValidationError
from articlecast.io.storage import ArtifactStore
from articlecast.llm.http_client import ProviderError
from articlecast.models.datatypes import PodcastMode, PodcastRequest
from articlecast.pipeline import PodcastPipeline
from articlecast.telemetry.logger import RunLogger


_THREE_LINE_DIALOGUE = "\n".join(
    [
        "HOST 1: The first point is about soil.",
        "HOST 2: The second point is about water.",
        "HOST 1: The third point wraps it up.",
    ]
)


def _scratch_clips(store: ArtifactStore) -> list[Path]:
    return list((store.root / ".segments").rglob("*.mp3"))


def test_short_single_host_article_with_audio(
    fake_generator, fake_synthesizer, artifact_store: ArtifactStore, make_words
) -> None:
    """A 200-word article skips summarization and yields one narrated clip."""

    pipeline = PodcastPipeline(fake_generator, fake_synthesizer, artifact_store)

    result = pipeline.run(
        PodcastRequest(
            source_text=make_words(200),
            mode=PodcastMode.NORMAL_ONE,
            primary_voice="alloy",
            include_audio=True,
        )
    )

    assert fake_generator.summary_calls == []
    assert len(fake_generator.script_calls) == 1
    assert result.script.title == "AI Generated Podcast - Normal one Mode"
    assert [host.name for host in result.script.hosts] == ["Alex"]
    assert result.script.introduction == "Welcome"
    assert result.script.main_content
    assert result.script.conclusion.endswith("see you next time.")
    assert result.script.estimated_duration == "1 minute"
    assert result.audio_url is not None
    assert result.audio_url.startswith("/audio/podcast_")
    assert result.audio_url.endswith(".mp3")
    assert result.audio_degraded is False
    assert [voice for _, voice in fake_synthesizer.calls] == ["alloy"]

    stored = artifact_store.path_for(result.audio_url.rsplit("/", 1)[1])
    assert stored.read_bytes().startswith(b"<alloy:Welcome")
    assert _scratch_clips(artifact_store) == []
    assert result.as_payload()["audioUrl"] == result.audio_url


def test_long_two_host_article_is_summarized_and_voiced_by_both_hosts(
    fake_generator, fake_synthesizer, artifact_store: ArtifactStore, make_words
) -> None:
    """A 3000-word article is summarized in six chunks and voiced by two hosts."""

    pipeline = PodcastPipeline(fake_generator, fake_synthesizer, artifact_store)

    result = pipeline.run(
        PodcastRequest(
            source_text=make_words(3000),
            mode=PodcastMode.NORMAL_TWO,
            primary_voice="alloy",
            secondary_voice="echo",
            include_audio=True,
        )
    )

    assert len(fake_generator.summary_calls) == 6
    assert result.chunk_count == 6
    script_prompt = fake_generator.script_calls[0][0]
    assert "This chunk makes one clear point." in script_prompt
    assert "word2999" not in script_prompt
    assert "HOST 1:" in result.transcript
    assert "HOST 2:" in result.transcript
    assert "**" not in result.transcript

    voices = [voice for _, voice in fake_synthesizer.calls]
    assert len(voices) == 6
    assert voices == ["alloy", "echo", "alloy", "echo", "alloy", "echo"]
    assert result.segment_count == 6
    assert result.audio_url is not None

    stored = artifact_store.path_for(result.audio_url.rsplit("/", 1)[1]).read_bytes()
    assert stored.startswith(b"<alloy:Welcome to the show")
    assert stored.endswith(b"<echo:That is all for today, thanks for listening!>")


def test_custom_mode_without_instructions_is_rejected_before_any_call(
    fake_generator, fake_synthesizer, artifact_store: ArtifactStore, make_words
) -> None:
    """Custom modes require instructions; nothing reaches the backends."""

    pipeline = PodcastPipeline(fake_generator, fake_synthesizer, artifact_store)

    with pytest.raises(PodcastValidationError) as exc_info:
        pipeline.run(
            PodcastRequest(
                source_text=make_words(3000),
                mode=PodcastMode.CUSTOM_ONE,
                custom_instructions="   ",
                include_audio=True,
            )
        )

    assert exc_info.value.field == "custom_instructions"
    assert exc_info.value.stage == "validate"
    assert fake_generator.calls == []
    assert fake_synthesizer.calls == []


@pytest.mark.parametrize(
    ("overrides", "field"),
    [
        ({"source_text": "   \n"}, "source_text"),
        ({"provider": "mystery"}, "provider"),
        ({"primary_voice": "robot"}, "primary_voice"),
        ({"secondary_voice": None, "include_audio": True}, "secondary_voice"),
    ],
)
def test_invalid_requests_name_the_offending_field(
    fake_generator, fake_synthesizer, artifact_store: ArtifactStore, overrides, field: str
) -> None:
    """Validation errors identify the request field at fault."""

    values = {
        "source_text": "A short article about rivers.",
        "mode": PodcastMode.NORMAL_TWO,
        "primary_voice": "alloy",
        "secondary_voice": "echo",
    }
    values.update(overrides)
    pipeline = PodcastPipeline(fake_generator, fake_synthesizer, artifact_store)

    with pytest.raises(PodcastValidationError) as exc_info:
        pipeline.run(PodcastRequest(**values))

    assert exc_info.value.field == field
    assert fake_generator.calls == []


def test_secondary_voice_is_optional_without_audio(
    fake_generator, artifact_store: ArtifactStore
) -> None:
    """Two-host scripts without audio do not need a second voice."""

    pipeline = PodcastPipeline(fake_generator, None, artifact_store)

    result = pipeline.run(
        PodcastRequest(
            source_text="A short article about rivers.",
            mode=PodcastMode.NORMAL_TWO,
            secondary_voice=None,
        )
    )

    assert result.audio_url is None
    assert result.audio_degraded is False
    assert [host.voice for host in result.script.hosts] == ["alloy", None]


def test_failed_segment_is_skipped_and_remaining_audio_assembled(
    generator_factory, synthesizer_factory, artifact_store: ArtifactStore
) -> None:
    """One failing segment out of three still yields audio from the other two."""

    generator = generator_factory(script_text=_THREE_LINE_DIALOGUE)
    synthesizer = synthesizer_factory(fail_when=lambda text, voice: "second" in text)
    sink = io.StringIO()
    pipeline = PodcastPipeline(generator, synthesizer, artifact_store, run_logger=RunLogger(sink=sink))

    result = pipeline.run(
        PodcastRequest(
            source_text="A short article about rivers.",
            mode=PodcastMode.NORMAL_TWO,
            primary_voice="alloy",
            secondary_voice="echo",
            include_audio=True,
        )
    )

    assert result.audio_url is not None
    assert result.skipped_segments == (1,)
    assert result.segment_count == 3
    assert result.audio_degraded is False
    stored = artifact_store.path_for(result.audio_url.rsplit("/", 1)[1]).read_bytes()
    assert stored == b"<alloy:The first point is about soil.><alloy:The third point wraps it up.>"
    assert "event=segment_skipped error_type=ProviderError segment=1" in sink.getvalue()
    assert _scratch_clips(artifact_store) == []


def test_total_synthesis_failure_returns_script_only(
    fake_generator, synthesizer_factory, artifact_store: ArtifactStore
) -> None:
    """When no segment can be voiced the script is still returned."""

    synthesizer = synthesizer_factory(fail_when=lambda text, voice: True)
    pipeline = PodcastPipeline(fake_generator, synthesizer, artifact_store)

    result = pipeline.run(
        PodcastRequest(
            source_text="A short article about rivers.",
            mode=PodcastMode.NORMAL_TWO,
            primary_voice="alloy",
            secondary_voice="echo",
            include_audio=True,
        )
    )

    assert result.audio_url is None
    assert result.audio_degraded is True
    assert result.script.main_content
    assert "audioUrl" not in result.as_payload()
    assert list(artifact_store.root.glob("*.mp3")) == []


@pytest.mark.parametrize(
    ("store_method", "mode", "secondary_voice"),
    [
        ("write", PodcastMode.NORMAL_TWO, "echo"),
        ("adopt", PodcastMode.NORMAL_ONE, None),
    ],
)
def test_store_failure_during_assembly_returns_script_only(
    fake_generator,
    fake_synthesizer,
    artifact_store: ArtifactStore,
    monkeypatch: pytest.MonkeyPatch,
    store_method: str,
    mode: PodcastMode,
    secondary_voice: str | None,
) -> None:
    """A disk failure while storing the final artifact degrades to script-only."""

    def _fail(self: ArtifactStore, *args: object, **kwargs: object) -> str:
        raise OSError(28, "No space left on device")

    monkeypatch.setattr(ArtifactStore, store_method, _fail)
    sink = io.StringIO()
    pipeline = PodcastPipeline(
        fake_generator, fake_synthesizer, artifact_store, run_logger=RunLogger(sink=sink)
    )

    result = pipeline.run(
        PodcastRequest(
            source_text="A short article about rivers.",
            mode=mode,
            primary_voice="alloy",
            secondary_voice=secondary_voice,
            include_audio=True,
        )
    )

    assert fake_synthesizer.calls
    assert result.audio_url is None
    assert result.audio_degraded is True
    assert result.script.introduction
    assert result.script.main_content
    assert result.script.conclusion
    assert "audioUrl" not in result.as_payload()
    assert _scratch_clips(artifact_store) == []
    assert list(artifact_store.root.glob("*.mp3")) == []
    assert "reason=script_only_OSError" in sink.getvalue()


def test_duration_estimate_ignores_host_labels(
    generator_factory, fake_synthesizer, artifact_store: ArtifactStore, make_words
) -> None:
    """Two-host estimates count spoken words only, not the HOST labels."""

    script_text = f"HOST 1: {make_words(75)}\nHOST 2: {make_words(75)}"
    generator = generator_factory(script_text=script_text)
    pipeline = PodcastPipeline(generator, fake_synthesizer, artifact_store)

    result = pipeline.run(
        PodcastRequest(
            source_text="A short article about rivers.",
            mode=PodcastMode.NORMAL_TWO,
        )
    )

    assert result.script.estimated_duration == "1 minute"


def test_script_provider_failure_is_a_script_stage_error(
    generator_factory, fake_synthesizer, artifact_store: ArtifactStore
) -> None:
    """Script generation failures abort the run with the provider error attached."""

    pipeline = PodcastPipeline(generator_factory(fail_scripts=True), fake_synthesizer, artifact_store)

    with pytest.raises(PipelineStageError) as exc_info:
        pipeline.run(
            PodcastRequest(
                source_text="A short article about rivers.",
                secondary_voice="echo",
                include_audio=True,
            )
        )

    assert exc_info.value.stage == "script"
    assert isinstance(exc_info.value.__cause__, ProviderError)
    assert fake_synthesizer.calls == []


def test_summary_failures_fall_back_to_leading_sentences(
    generator_factory, artifact_store: ArtifactStore, make_words
) -> None:
    """Failed chunk summaries never abort the run."""

    generator = generator_factory(fail_summaries=True)
    pipeline = PodcastPipeline(generator, None, artifact_store)

    result = pipeline.run(PodcastRequest(source_text=make_words(1200)))

    assert len(generator.summary_calls) == 3
    assert "word0" in generator.script_calls[0][0]
    assert result.chunk_count == 3


def test_progress_callback_reports_executed_stages(
    fake_generator, fake_synthesizer, artifact_store: ArtifactStore
) -> None:
    """Only stages that run are reported, with their fixed positions."""

    progress: list[tuple[str, int, int]] = []
    pipeline = PodcastPipeline(
        fake_generator,
        fake_synthesizer,
        artifact_store,
        stage_progress_callback=lambda name, index, total: progress.append((name, index, total)),
    )

    pipeline.run(PodcastRequest(source_text="A short article about rivers.", mode=PodcastMode.NORMAL_ONE))

    assert progress == [
        ("validate", 1, 8),
        ("segment", 2, 8),
        ("script", 4, 8),
        ("estimate", 8, 8),
    ]


def test_pipeline_from_config_uses_provider_clients(tmp_path: Path, provider_calls, make_words) -> None:
    """A config-built pipeline routes text and speech through the HTTP clients."""

    config = ArticlecastConfig(output_dir=tmp_path / "audio", chunk_threshold_words=100, chunk_size_words=100)
    runtime = config.resolved_provider_runtime(
        RuntimeConfigSources(
            cli={"provider": "anthropic"},
            env={"OPENAI_API_KEY": "sk-openai", "ANTHROPIC_API_KEY": "sk-ant"},
        )
    )
    pipeline = PodcastPipeline.from_config(config, runtime)

    result = pipeline.run(
        PodcastRequest(
            source_text=make_words(250),
            provider=runtime.provider,
            mode=PodcastMode.NORMAL_TWO,
            primary_voice=runtime.primary_voice,
            secondary_voice=runtime.secondary_voice,
            include_audio=True,
        )
    )

    providers = {provider for provider, _, _ in provider_calls.completions}
    assert providers == {"anthropic"}
    assert {model for _, model, _ in provider_calls.completions} == {"claude-sonnet-4-20250514"}
    assert len(provider_calls.completions) == 4
    assert [voice for _, voice, _ in provider_calls.speech] == ["alloy", "echo", "alloy"]
    assert {model for model, _, _ in provider_calls.speech} == {"tts-1"}
    assert result.audio_url is not None
    assert (tmp_path / "audio" / result.audio_url.rsplit("/", 1)[1]).read_bytes() == (
        b"ID3<alloy>ID3<echo>ID3<alloy>"
    )
    assert result.extra == {"provider": "anthropic"}
