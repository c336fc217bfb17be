"""Configuration model and loaders for Articlecast.

Responsibilities:
- Define podcast pipeline settings as a typed dataclass.
- Resolve provider, model, voice, and API-key values with deterministic precedence.
- Provide loader entry points for YAML- and environment-based configuration.

Key types:
- `ArticlecastConfig`: normalized settings shared by all pipeline runs.
- `ProviderRuntimeConfig`: resolved provider/model/voice values for one run.
- `RuntimeConfigSources`: optional value sources for precedence resolution.
- `ConfigLoader`: static construction helpers for `ArticlecastConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .llm.providers import PROVIDER_SPECS, SUPPORTED_PROVIDER_IDS
from .models.datatypes import PodcastMode
from .parsing import normalize_identifier, normalize_optional_string, parse_positive_number
from .tts.voices import SUPPORTED_VOICES


_DEFAULT_OUTPUT_DIR = Path("public/audio")
_DEFAULT_PUBLIC_PREFIX = "/audio"
_DEFAULT_PROVIDER = "openai"
_DEFAULT_TTS_MODEL = "tts-1"
_DEFAULT_PRIMARY_VOICE = "alloy"
_DEFAULT_SECONDARY_VOICE = "echo"
_DEFAULT_PODCAST_MODE = PodcastMode.NORMAL_TWO.value

_ENV_KEYS: dict[str, str] = {
    "provider": "ARTICLECAST_PROVIDER",
    "model": "ARTICLECAST_MODEL",
    "tts_model": "ARTICLECAST_TTS_MODEL",
    "primary_voice": "ARTICLECAST_PRIMARY_VOICE",
    "secondary_voice": "ARTICLECAST_SECONDARY_VOICE",
    "podcast_mode": "ARTICLECAST_PODCAST_MODE",
}


def api_key_runtime_key(provider_id: str) -> str:
    """Return the runtime-source key that holds an API key for a provider."""

    return f"{provider_id}_api_key"


@dataclass(frozen=True, slots=True)
class RuntimeConfigSources:
    """Source mappings used for deterministic runtime value precedence.

    Attributes:
        cli: Values explicitly provided by CLI arguments.
        secure: Values loaded from secure local credential storage.
        env: Values loaded from environment variables.
    """

    cli: Mapping[str, str] = field(default_factory=dict)
    secure: Mapping[str, str] = field(default_factory=dict)
    env: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ProviderRuntimeConfig:
    """Resolved runtime provider, model, and voice values for one run.

    Attributes:
        provider: Text-generation provider identifier.
        model: Text-generation model identifier for `provider`.
        tts_model: Speech model identifier.
        primary_voice: Voice for the first host or solo narrator.
        secondary_voice: Voice for the second host.
        podcast_mode: Default podcast mode identifier.
        api_keys: Resolved API keys by provider identifier (never persisted).
    """

    provider: str
    model: str
    tts_model: str
    primary_voice: str
    secondary_voice: str
    podcast_mode: str
    api_keys: Mapping[str, str] = field(default_factory=dict)

    def api_key_for(self, provider_id: str) -> str | None:
        """Return the resolved API key for one provider, if any."""

        return self.api_keys.get(provider_id)

    def as_metadata(self) -> dict[str, str]:
        """Return non-secret runtime metadata safe to print or persist."""

        return {
            "provider": self.provider,
            "model": self.model,
            "tts_model": self.tts_model,
            "primary_voice": self.primary_voice,
            "secondary_voice": self.secondary_voice,
            "podcast_mode": self.podcast_mode,
        }


@dataclass(slots=True)
class ArticlecastConfig:
    """Settings for the podcast pipeline.

    Attributes:
        output_dir: Directory that receives final audio artifacts.
        public_prefix: URL prefix under which `output_dir` is served.
        provider: Default text-generation provider identifier.
        model: Optional model override for the default provider.
        tts_model: Speech model identifier.
        primary_voice: Default voice for the first host or narrator.
        secondary_voice: Default voice for the second host.
        podcast_mode: Default podcast mode identifier.
        chunk_threshold_words: Word count above which sources are chunked.
        chunk_size_words: Words per chunk.
        summary_target_sentences: Combined sentence budget across chunk summaries.
        summary_workers: Maximum concurrent chunk summarization calls.
        request_timeout_seconds: Per-request timeout for provider calls.
        runtime_sources: Optional runtime source overrides injected by CLI.
        extra: Additional metadata for future extensions.
    """

    output_dir: Path = _DEFAULT_OUTPUT_DIR
    public_prefix: str = _DEFAULT_PUBLIC_PREFIX
    provider: str = _DEFAULT_PROVIDER
    model: str | None = None
    tts_model: str = _DEFAULT_TTS_MODEL
    primary_voice: str = _DEFAULT_PRIMARY_VOICE
    secondary_voice: str = _DEFAULT_SECONDARY_VOICE
    podcast_mode: str = _DEFAULT_PODCAST_MODE
    chunk_threshold_words: int = 500
    chunk_size_words: int = 500
    summary_target_sentences: int = 10
    summary_workers: int = 4
    request_timeout_seconds: float = 120.0
    runtime_sources: RuntimeConfigSources = field(default_factory=RuntimeConfigSources)
    extra: dict[str, str] = field(default_factory=dict)

    def validate(self) -> None:
        """Validate configuration values before pipeline construction."""

        _validate_provider(self.provider, "provider")
        _validate_voice(self.primary_voice, "primary_voice")
        _validate_voice(self.secondary_voice, "secondary_voice")
        _validate_mode(self.podcast_mode, "podcast_mode")
        _require_non_empty(self.tts_model, "tts_model")
        _require_non_empty(self.public_prefix, "public_prefix")
        for field_name in (
            "chunk_threshold_words",
            "chunk_size_words",
            "summary_target_sentences",
            "summary_workers",
        ):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError(f"`{field_name}` must be a positive integer.")
        parse_positive_number(self.request_timeout_seconds, "request_timeout_seconds")

    def resolved_provider_runtime(
        self, sources: RuntimeConfigSources | None = None
    ) -> ProviderRuntimeConfig:
        """Resolve runtime settings with deterministic source precedence.

        Precedence for each key is `cli` > `secure` > `env` > config default.
        A CLI model always applies. Secure, env, and config model values are
        scoped to the provider resolved without CLI input, so switching provider
        on the command line falls back to that provider's default model. The
        config model further applies only to the configured default provider.
        """

        resolved_sources = sources if sources is not None else self.runtime_sources

        provider = normalize_identifier(
            self._resolve("provider", self.provider, resolved_sources)
        ) or self.provider
        _validate_provider(provider, "provider")

        model = normalize_optional_string(resolved_sources.cli.get("model"))
        if model is None:
            fallback_sources = replace(resolved_sources, cli={})
            fallback_provider = normalize_identifier(
                self._resolve("provider", self.provider, fallback_sources)
            ) or self.provider
            if provider == fallback_provider:
                default_model = self.model if provider == self.provider else None
                model = self._resolve_optional("model", default_model, fallback_sources)
        if model is None:
            model = PROVIDER_SPECS[provider].model

        primary_voice = normalize_identifier(
            self._resolve("primary_voice", self.primary_voice, resolved_sources)
        )
        secondary_voice = normalize_identifier(
            self._resolve("secondary_voice", self.secondary_voice, resolved_sources)
        )
        podcast_mode = normalize_identifier(
            self._resolve("podcast_mode", self.podcast_mode, resolved_sources)
        )
        tts_model = self._resolve("tts_model", self.tts_model, resolved_sources)

        _validate_voice(primary_voice, "primary_voice")
        _validate_voice(secondary_voice, "secondary_voice")
        _validate_mode(podcast_mode, "podcast_mode")

        api_keys: dict[str, str] = {}
        for provider_id, spec in PROVIDER_SPECS.items():
            api_key = self._resolve_optional(
                api_key_runtime_key(provider_id),
                None,
                resolved_sources,
                env_key=spec.api_key_env,
            )
            if api_key is not None:
                api_keys[provider_id] = api_key

        return ProviderRuntimeConfig(
            provider=provider,
            model=model,
            tts_model=tts_model,
            primary_voice=str(primary_voice),
            secondary_voice=str(secondary_voice),
            podcast_mode=str(podcast_mode),
            api_keys=api_keys,
        )

    def _resolve(self, key: str, default_value: str, sources: RuntimeConfigSources) -> str:
        """Resolve a required runtime value."""

        resolved = self._resolve_optional(key, default_value, sources)
        if resolved is None:
            raise ValueError(
                f"`{key}` could not be resolved from CLI, secure storage, env, or defaults."
            )
        return resolved

    @staticmethod
    def _resolve_optional(
        key: str,
        default_value: str | None,
        sources: RuntimeConfigSources,
        env_key: str | None = None,
    ) -> str | None:
        """Resolve an optional runtime value from sources in precedence order."""

        for mapping, lookup_key in (
            (sources.cli, key),
            (sources.secure, key),
            (sources.env, env_key or _ENV_KEYS.get(key, key)),
        ):
            if lookup_key in mapping:
                value = normalize_optional_string(mapping.get(lookup_key))
                if value is not None:
                    return value
        return normalize_optional_string(default_value)


def _validate_provider(provider_id: object, field_name: str) -> None:
    """Validate a provider identifier against the provider registry."""

    if provider_id not in SUPPORTED_PROVIDER_IDS:
        supported = ", ".join(sorted(SUPPORTED_PROVIDER_IDS))
        raise ValueError(
            f"Unsupported `{field_name}` value `{provider_id}`; supported: {supported}."
        )


def _validate_voice(voice: object, field_name: str) -> None:
    """Validate a voice identifier against the voice catalog."""

    if voice not in SUPPORTED_VOICES:
        supported = ", ".join(SUPPORTED_VOICES)
        raise ValueError(f"Unsupported `{field_name}` value `{voice}`; supported: {supported}.")


def _validate_mode(mode: object, field_name: str) -> None:
    """Validate a podcast mode identifier."""

    try:
        PodcastMode.parse(str(mode))
    except ValueError as exc:
        raise ValueError(f"Invalid `{field_name}`: {exc}") from exc


def _require_non_empty(value: object, field_name: str) -> None:
    """Validate that a string field is not empty."""

    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"`{field_name}` must be a non-empty string.")


class ConfigLoader:
    """Factory methods for creating `ArticlecastConfig` from external sources."""

    _STRING_KEYS = (
        "public_prefix",
        "provider",
        "model",
        "tts_model",
        "primary_voice",
        "secondary_voice",
        "podcast_mode",
    )
    _INT_KEYS = (
        "chunk_threshold_words",
        "chunk_size_words",
        "summary_target_sentences",
        "summary_workers",
    )
    _SUPPORTED_YAML_KEYS = frozenset(
        {"output_dir", "request_timeout_seconds", "extra", *_STRING_KEYS, *_INT_KEYS}
    )
    _RUNTIME_ENV_KEYS = frozenset(
        {
            *_ENV_KEYS.values(),
            *(spec.api_key_env for spec in PROVIDER_SPECS.values()),
        }
    )

    @staticmethod
    def from_yaml(path: Path) -> ArticlecastConfig:
        """Create a validated config from a YAML file."""

        raw_text = path.read_text(encoding="utf-8")
        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` could not be parsed: {exc}") from exc

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return ConfigLoader._build_config_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> ArticlecastConfig:
        """Create a validated config from environment variables.

        Provider, model, voice, and mode variables are also kept as runtime
        sources so they participate in precedence resolution.
        """

        env_map: Mapping[str, str] = os.environ if env is None else env
        payload: dict[str, Any] = {}
        for key, env_key in _ENV_KEYS.items():
            value = normalize_optional_string(env_map.get(env_key))
            if value is not None:
                payload[key] = value
        output_dir = normalize_optional_string(env_map.get("ARTICLECAST_OUTPUT_DIR"))
        if output_dir is not None:
            payload["output_dir"] = output_dir

        config = ConfigLoader._build_config_from_mapping(payload, source_label="Environment")
        config.runtime_sources = RuntimeConfigSources(
            env={
                key: value
                for key, value in env_map.items()
                if key in ConfigLoader._RUNTIME_ENV_KEYS
                and normalize_optional_string(value) is not None
            }
        )
        return config

    @staticmethod
    def _build_config_from_mapping(
        payload: Mapping[str, Any], source_label: str
    ) -> ArticlecastConfig:
        """Build a validated config from a mapping payload."""

        unknown = sorted(str(key) for key in set(payload) - ConfigLoader._SUPPORTED_YAML_KEYS)
        if unknown:
            raise ValueError(f"{source_label} includes unsupported key(s): {', '.join(unknown)}.")

        values: dict[str, Any] = {}
        for key in ConfigLoader._STRING_KEYS:
            value = normalize_optional_string(payload.get(key))
            if value is not None:
                values[key] = value if key in {"public_prefix", "model", "tts_model"} else value.lower()
        for key in ConfigLoader._INT_KEYS:
            if key in payload:
                values[key] = ConfigLoader._positive_int(payload[key], key, source_label)

        output_dir = normalize_optional_string(payload.get("output_dir"))
        if output_dir is not None:
            values["output_dir"] = Path(output_dir)
        if "request_timeout_seconds" in payload:
            try:
                values["request_timeout_seconds"] = parse_positive_number(
                    payload["request_timeout_seconds"], "request_timeout_seconds"
                )
            except ValueError as exc:
                raise ValueError(f"{source_label}: {exc}") from exc
        values["extra"] = ConfigLoader._string_map(payload.get("extra"), "extra", source_label)

        config = ArticlecastConfig(**values)
        try:
            config.validate()
        except ValueError as exc:
            raise ValueError(f"{source_label}: {exc}") from exc
        return config

    @staticmethod
    def _positive_int(raw_value: object, key: str, source_label: str) -> int:
        """Parse a strictly positive integer field."""

        message = f"{source_label} field `{key}` must be a positive integer."
        if isinstance(raw_value, bool):
            raise ValueError(message)
        if isinstance(raw_value, int):
            parsed = raw_value
        else:
            normalized = normalize_optional_string(raw_value)
            try:
                parsed = int(normalized) if normalized is not None else 0
            except ValueError as exc:
                raise ValueError(message) from exc
        if parsed <= 0:
            raise ValueError(message)
        return parsed

    @staticmethod
    def _string_map(raw: object, key: str, source_label: str) -> dict[str, str]:
        """Read an optional mapping with non-empty string keys and values."""

        if raw is None:
            return {}
        if not isinstance(raw, Mapping):
            raise ValueError(f"{source_label} field `{key}` must be a mapping/object.")

        normalized: dict[str, str] = {}
        for raw_key, raw_value in raw.items():
            key_value = normalize_optional_string(raw_key)
            value_value = normalize_optional_string(raw_value)
            if key_value is None or value_value is None:
                raise ValueError(
                    f"{source_label} field `{key}` contains a blank key or value."
                )
            normalized[key_value] = value_value
        return normalized
