"""CLI provider runtime resolution helpers.

This module isolates API-key prompting, runtime source assembly, and secure
API-key persistence from the command wiring layer.
"""

from __future__ import annotations

from typing import Callable, Protocol

import typer

from .config import api_key_runtime_key
from .credentials import create_credential_store
from .errors import PipelineStageError
from .parsing import normalize_identifier, normalize_optional_string


class CredentialStoreProtocol(Protocol):
    """Protocol for secure credential store operations used by CLI runtime resolution."""

    def load_all(self) -> dict[str, str]:
        """Return stored API keys keyed as `<provider>_api_key`."""

    def set_api_key(self, provider_id: str, api_key: str) -> None:
        """Persist an API key for one provider."""


def _set_runtime_cli_value(
    runtime_cli_values: dict[str, str],
    key: str,
    value: str | None,
    *,
    identifier: bool = False,
) -> None:
    """Set a normalized runtime CLI value when user input is present."""

    normalized = normalize_identifier(value) if identifier else normalize_optional_string(value)
    if normalized is not None:
        runtime_cli_values[key] = normalized


def prompt_hidden_api_key(provider_id: str, *, allow_blank: bool = True) -> str | None:
    """Prompt for a provider API key with hidden input."""

    suffix = "hidden; leave blank to skip" if allow_blank else "hidden input"
    return normalize_optional_string(
        typer.prompt(
            f"{provider_id} API key ({suffix})",
            default="",
            hide_input=True,
            show_default=False,
        )
    )


def resolve_provider_runtime_sources(
    api_key_provider: str,
    provider: str | None,
    model: str | None,
    primary_voice: str | None,
    secondary_voice: str | None,
    podcast_mode: str | None,
    api_key: str | None,
    prompt_api_key: bool,
    store_api_key: bool,
    credential_store_factory: Callable[[], CredentialStoreProtocol] = create_credential_store,
) -> tuple[dict[str, str], dict[str, str]]:
    """Resolve CLI and secure runtime source mappings for provider configuration.

    `--api-key` and prompted keys apply to `api_key_provider`, the provider the
    command will generate text with.
    """

    key_name = api_key_runtime_key(api_key_provider)
    runtime_cli_values: dict[str, str] = {}
    _set_runtime_cli_value(runtime_cli_values, "provider", provider, identifier=True)
    _set_runtime_cli_value(runtime_cli_values, "model", model)
    _set_runtime_cli_value(runtime_cli_values, "primary_voice", primary_voice, identifier=True)
    _set_runtime_cli_value(runtime_cli_values, "secondary_voice", secondary_voice, identifier=True)
    _set_runtime_cli_value(runtime_cli_values, "podcast_mode", podcast_mode, identifier=True)
    _set_runtime_cli_value(runtime_cli_values, key_name, api_key)

    if prompt_api_key and key_name not in runtime_cli_values:
        prompted_api_key = prompt_hidden_api_key(api_key_provider)
        if prompted_api_key is not None:
            runtime_cli_values[key_name] = prompted_api_key

    credential_store = credential_store_factory()
    runtime_secure_values = dict(credential_store.load_all())

    if store_api_key and key_name in runtime_cli_values:
        try:
            credential_store.set_api_key(api_key_provider, runtime_cli_values[key_name])
            typer.echo("Stored API key in secure credential storage.")
        except (RuntimeError, ValueError) as exc:
            raise PipelineStageError(
                stage="credentials",
                detail=f"Failed to store API key securely: {exc}",
                hint=(
                    "Install and configure a keyring backend, or rerun with "
                    "`--no-store-api-key` for one-off usage."
                ),
            ) from exc

    return runtime_cli_values, runtime_secure_values
