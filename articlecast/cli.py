"""Command-line interface for Articlecast.

Responsibilities:
- Expose user-facing commands for podcast generation and catalogs.
- Convert CLI arguments into `ArticlecastConfig` and `PodcastRequest` values.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from dataclasses import replace
import os
from pathlib import Path
from typing import Annotated

import typer

from .cli_rendering import (
    echo_provider_list,
    echo_script_summary,
    echo_voice_list,
    exit_with_command_error,
)
from .cli_runtime import prompt_hidden_api_key, resolve_provider_runtime_sources
from .config import ArticlecastConfig, ConfigLoader, RuntimeConfigSources
from .credentials import create_credential_store
from .errors import PipelineStageError
from .io.source_reader import SourceReadError, SourceReader
from .io.storage import ArtifactStore
from .llm.providers import PROVIDER_SPECS
from .models.datatypes import PodcastMode, PodcastRequest, SourceDocument
from .parsing import normalize_identifier
from .pipeline import PodcastPipeline
from .telemetry.logger import RunLogger
from .tts.voices import VOICE_PROFILES

app = typer.Typer(
    name="articlecast",
    no_args_is_help=True,
    help="Articlecast CLI: turn articles into podcast scripts and audio.",
)


class BuildProgressIndicator:
    """Render deterministic per-stage progress lines for long-running commands."""

    _SPINNER_FRAMES = "|/-\\"

    def __init__(self, command_name: str) -> None:
        """Initialize progress indicator metadata for a command invocation."""

        self._command_name = command_name

    def on_stage_start(self, stage_name: str, stage_index: int, stage_total: int) -> None:
        """Print one progress line for a stage start transition."""

        spinner = self._SPINNER_FRAMES[(stage_index - 1) % len(self._SPINNER_FRAMES)]
        typer.echo(
            f"[progress] command={self._command_name} "
            f"{spinner} {stage_index}/{stage_total} stage={stage_name}"
        )


def _load_base_config(config_path: Path | None, out: Path | None) -> ArticlecastConfig:
    """Load YAML or environment config and apply the `--out` override."""

    try:
        loaded = (
            ConfigLoader.from_yaml(config_path)
            if config_path is not None
            else ConfigLoader.from_env()
        )
    except FileNotFoundError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise PipelineStageError(
            stage="config",
            detail=f"Invalid configuration: {exc}",
            hint="Fix config file or `ARTICLECAST_*` environment values and rerun.",
        ) from exc

    if out is not None:
        loaded.output_dir = out
    return loaded


def _load_source(source: Path) -> SourceDocument:
    """Read the source article and map read failures to stage errors."""

    try:
        return SourceReader().read(source)
    except (SourceReadError, OSError, UnicodeDecodeError) as exc:
        raise PipelineStageError(
            stage="source",
            detail=str(exc),
            hint="Pass a UTF-8 `.txt`/`.md` file or a text-based `.pdf`.",
        ) from exc


def _api_key_provider(provider: str | None, base_config: ArticlecastConfig) -> str:
    """Return the provider that `--api-key` and prompted keys belong to."""

    return (
        normalize_identifier(provider)
        or normalize_identifier(os.environ.get("ARTICLECAST_PROVIDER"))
        or base_config.provider
    )


@app.command("podcast")
def podcast_command(
    source: Annotated[
        Path,
        typer.Argument(help="Path to the source article (`.txt`, `.md`, or `.pdf`)."),
    ],
    mode: Annotated[
        str | None,
        typer.Option(
            "--mode",
            help="Podcast mode: `normal-one`, `normal-two`, `custom-one`, or `custom-two`.",
        ),
    ] = None,
    instructions: Annotated[
        str | None,
        typer.Option("--instructions", help="Custom instructions (required for custom modes)."),
    ] = None,
    provider: Annotated[
        str | None,
        typer.Option("--provider", help="Text-generation provider id."),
    ] = None,
    model: Annotated[
        str | None,
        typer.Option("--model", help="Text-generation model id override."),
    ] = None,
    voice: Annotated[
        str | None,
        typer.Option("--voice", help="Voice for the narrator or first host."),
    ] = None,
    secondary_voice: Annotated[
        str | None,
        typer.Option("--secondary-voice", help="Voice for the second host."),
    ] = None,
    audio: Annotated[
        bool,
        typer.Option("--audio/--no-audio", help="Synthesize and assemble podcast audio."),
    ] = False,
    out: Annotated[
        Path | None,
        typer.Option("--out", help="Audio output directory (overrides config value)."),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML config file with command defaults."),
    ] = None,
    api_key: Annotated[
        str | None,
        typer.Option(
            "--api-key",
            help="Provider API key override. Prefer `--prompt-api-key` to avoid shell history.",
        ),
    ] = None,
    prompt_api_key: Annotated[
        bool,
        typer.Option(
            "--prompt-api-key",
            help="Prompt for API key with hidden input (never echoed).",
        ),
    ] = False,
    store_api_key: Annotated[
        bool,
        typer.Option(
            "--store-api-key/--no-store-api-key",
            help="Persist CLI-entered API key to secure credential storage.",
        ),
    ] = True,
    script_out: Annotated[
        Path | None,
        typer.Option("--script-out", help="Write the response payload as JSON to this path."),
    ] = None,
) -> None:
    """Generate a podcast script, and optionally audio, from an article."""

    try:
        base_config = _load_base_config(config_file, out)
        runtime_cli_values, runtime_secure_values = resolve_provider_runtime_sources(
            api_key_provider=_api_key_provider(provider, base_config),
            provider=provider,
            model=model,
            primary_voice=voice,
            secondary_voice=secondary_voice,
            podcast_mode=mode,
            api_key=api_key,
            prompt_api_key=prompt_api_key,
            store_api_key=store_api_key,
            credential_store_factory=create_credential_store,
        )
        config = replace(
            base_config,
            runtime_sources=RuntimeConfigSources(
                cli=runtime_cli_values,
                secure=runtime_secure_values,
                env=os.environ,
            ),
        )
        try:
            runtime = config.resolved_provider_runtime()
        except ValueError as exc:
            raise PipelineStageError(
                stage="config",
                detail=str(exc),
                hint="Run `articlecast providers` or `articlecast voices` for valid ids.",
            ) from exc

        document = _load_source(source)
        progress = BuildProgressIndicator(command_name="podcast")
        pipeline = PodcastPipeline.from_config(
            config,
            runtime,
            run_logger=RunLogger(),
            stage_progress_callback=progress.on_stage_start,
        )
        result = pipeline.run(
            PodcastRequest(
                source_text=document.text,
                provider=runtime.provider,
                mode=PodcastMode.parse(runtime.podcast_mode),
                custom_instructions=instructions,
                primary_voice=runtime.primary_voice,
                secondary_voice=runtime.secondary_voice,
                include_audio=audio,
            )
        )
        if script_out is not None:
            payload = result.as_payload()
            payload["transcript"] = result.transcript
            ArtifactStore(script_out.parent).save_json(script_out.name, payload)
    except Exception as exc:
        exit_with_command_error("podcast", exc)

    echo_script_summary(result)
    if script_out is not None:
        typer.echo(f"Script payload: {script_out}")


@app.command("voices")
def voices_command() -> None:
    """List supported speech voices."""

    echo_voice_list(VOICE_PROFILES)


@app.command("providers")
def providers_command() -> None:
    """List text-generation providers with default model and output-token ceiling."""

    echo_provider_list(PROVIDER_SPECS.values())


@app.command("credentials")
def credentials_command(
    provider: Annotated[
        str,
        typer.Option("--provider", help="Provider whose API key is managed."),
    ] = "openai",
    set_api_key: Annotated[
        bool,
        typer.Option(
            "--set-api-key",
            help="Prompt for API key with hidden input and store it securely.",
        ),
    ] = False,
    clear_api_key: Annotated[
        bool,
        typer.Option(
            "--clear-api-key",
            help="Clear stored API key from secure credential storage.",
        ),
    ] = False,
) -> None:
    """Manage securely stored provider API keys."""

    provider_id = normalize_identifier(provider) or ""
    if provider_id not in PROVIDER_SPECS:
        supported = ", ".join(sorted(PROVIDER_SPECS))
        exit_with_command_error(
            "credentials",
            PipelineStageError(
                stage="credentials",
                detail=f"Unsupported provider `{provider}`. Supported providers: {supported}.",
            ),
        )
    if set_api_key and clear_api_key:
        exit_with_command_error(
            "credentials",
            PipelineStageError(
                stage="credentials",
                detail="`--set-api-key` and `--clear-api-key` cannot be used together.",
                hint="Run one credentials action per command invocation.",
            ),
        )

    credential_store = create_credential_store()
    if set_api_key:
        prompted_api_key = prompt_hidden_api_key(provider_id, allow_blank=False)
        if prompted_api_key is None:
            exit_with_command_error(
                "credentials",
                PipelineStageError(
                    stage="credentials",
                    detail="No API key entered.",
                    hint="Provide a non-empty API key when using `--set-api-key`.",
                ),
            )
        try:
            credential_store.set_api_key(provider_id, prompted_api_key)
        except (RuntimeError, ValueError) as exc:
            exit_with_command_error(
                "credentials",
                PipelineStageError(
                    stage="credentials",
                    detail=f"Failed to store API key securely: {exc}",
                    hint="Install and configure a keyring backend and retry.",
                ),
            )
        typer.echo(f"{provider_id} API key stored in secure credential storage.")
        return

    if clear_api_key:
        if credential_store.clear_api_key(provider_id):
            typer.echo(f"Stored {provider_id} API key cleared from secure credential storage.")
        else:
            typer.echo(f"No stored {provider_id} API key found in secure credential storage.")
        return

    availability = "available" if credential_store.is_available() else "unavailable"
    typer.echo(f"Secure credential storage: {availability}")
    for known_provider in sorted(PROVIDER_SPECS):
        status = "present" if credential_store.get_api_key(known_provider) is not None else "not set"
        typer.echo(f"Stored {known_provider} API key: {status}")


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
