"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
script summaries, and catalog listings.
"""

from __future__ import annotations

from typing import Iterable, NoReturn

import typer

from .errors import PipelineStageError
from .llm.http_client import ProviderError
from .llm.providers import ProviderSpec
from .models.datatypes import PodcastResult
from .tts.voices import VoiceProfile


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, PipelineStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}`: {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    elif isinstance(exc, ProviderError):
        typer.secho(
            f"{command_name} failed ({exc.failure_kind}): {exc}",
            fg=typer.colors.RED,
            err=True,
        )
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def _preview(text: str, limit: int = 160) -> str:
    flattened = " ".join(text.split())
    if len(flattened) <= limit:
        return flattened
    return flattened[: limit - 3].rstrip() + "..."


def echo_script_summary(result: PodcastResult) -> None:
    """Print the script title, hosts, section previews, duration, and audio reference."""

    script = result.script
    typer.echo(f"Title: {script.title}")
    typer.echo(f"Mode: {script.mode.value}")
    typer.echo("Hosts: " + ", ".join(f"{host.name} ({host.role})" for host in script.hosts))
    typer.echo(f"Introduction: {_preview(script.introduction)}")
    typer.echo(f"Main content: {_preview(script.main_content)}")
    typer.echo(f"Conclusion: {_preview(script.conclusion)}")
    typer.echo(f"Estimated duration: {script.estimated_duration}")
    if result.chunk_count:
        typer.echo(f"Source chunks summarized: {result.chunk_count}")

    if result.audio_url is not None:
        typer.echo(f"Audio: {result.audio_url}")
    elif result.audio_degraded:
        typer.secho("Audio: (not produced; script only)", fg=typer.colors.YELLOW)
    else:
        typer.echo("Audio: (not requested)")
    if result.skipped_segments:
        skipped = ", ".join(str(index) for index in result.skipped_segments)
        typer.secho(f"Skipped segments: {skipped}", fg=typer.colors.YELLOW)


def echo_voice_list(profiles: Iterable[VoiceProfile]) -> None:
    """Print one `voice_id  label` row per supported voice."""

    for profile in profiles:
        typer.echo(f"{profile.voice_id:<8} {profile.label}")


def echo_provider_list(specs: Iterable[ProviderSpec]) -> None:
    """Print provider ids with default model and output-token ceiling."""

    for spec in sorted(specs, key=lambda item: item.provider_id):
        typer.echo(
            f"{spec.provider_id:<11} model={spec.model} "
            f"max_output_tokens={spec.max_output_tokens} env={spec.api_key_env}"
        )
