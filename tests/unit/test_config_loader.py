"""Unit tests for configuration loading and runtime precedence."""

from __future__ import annotations

from pathlib import Path

import pytest

from articlecast.config import ArticlecastConfig, ConfigLoader, RuntimeConfigSources


def test_defaults_match_documented_values() -> None:
    """Default config targets OpenAI, tts-1, alloy/echo, and normal-two."""

    config = ArticlecastConfig()
    config.validate()

    assert config.output_dir == Path("public/audio")
    assert config.public_prefix == "/audio"
    assert config.provider == "openai"
    assert config.tts_model == "tts-1"
    assert (config.primary_voice, config.secondary_voice) == ("alloy", "echo")
    assert config.podcast_mode == "normal-two"
    assert (config.chunk_threshold_words, config.chunk_size_words) == (500, 500)
    assert config.summary_target_sentences == 10


def test_from_yaml_loads_and_normalizes_values(tmp_path: Path) -> None:
    """YAML values are stripped, identifiers lowercased, and numbers parsed."""

    config_path = tmp_path / "articlecast.yml"
    config_path.write_text(
        """
output_dir: " media/podcasts "
public_prefix: " /media/podcasts/ "
provider: " Anthropic "
model: " claude-custom "
tts_model: tts-1-hd
primary_voice: NOVA
secondary_voice: " onyx "
podcast_mode: custom-two
chunk_threshold_words: " 800 "
chunk_size_words: 400
summary_target_sentences: 12
summary_workers: 2
request_timeout_seconds: "45.5"
extra:
  profile: " nightly "
""".strip(),
        encoding="utf-8",
    )

    config = ConfigLoader.from_yaml(config_path)

    assert config.output_dir == Path("media/podcasts")
    assert config.public_prefix == "/media/podcasts/"
    assert config.provider == "anthropic"
    assert config.model == "claude-custom"
    assert config.tts_model == "tts-1-hd"
    assert (config.primary_voice, config.secondary_voice) == ("nova", "onyx")
    assert config.podcast_mode == "custom-two"
    assert config.chunk_threshold_words == 800
    assert config.chunk_size_words == 400
    assert config.summary_target_sentences == 12
    assert config.summary_workers == 2
    assert config.request_timeout_seconds == 45.5
    assert config.extra == {"profile": "nightly"}


def test_empty_yaml_yields_defaults(tmp_path: Path) -> None:
    """An empty file is a valid config with defaults."""

    config_path = tmp_path / "empty.yml"
    config_path.write_text("", encoding="utf-8")

    assert ConfigLoader.from_yaml(config_path).provider == "openai"


@pytest.mark.parametrize(
    ("yaml_text", "message"),
    [
        ("unknown_field: x\n", r"unsupported key\(s\): unknown_field"),
        ("- a\n- b\n", "top-level mapping"),
        ("provider: mystery\n", "Unsupported `provider` value `mystery`"),
        ("primary_voice: robot\n", "Unsupported `primary_voice` value `robot`"),
        ("podcast_mode: solo\n", "Invalid `podcast_mode`"),
        ("chunk_size_words: 0\n", "`chunk_size_words` must be a positive integer"),
        ("summary_workers: true\n", "`summary_workers` must be a positive integer"),
        ("request_timeout_seconds: -3\n", "`request_timeout_seconds` must be a positive number"),
        ("extra: [1, 2]\n", "`extra` must be a mapping"),
        ("provider: [unclosed\n", "could not be parsed"),
    ],
)
def test_from_yaml_rejects_invalid_payloads(tmp_path: Path, yaml_text: str, message: str) -> None:
    """Invalid YAML payloads fail with a message naming the problem."""

    config_path = tmp_path / "bad.yml"
    config_path.write_text(yaml_text, encoding="utf-8")

    with pytest.raises(ValueError, match=message):
        ConfigLoader.from_yaml(config_path)


def test_from_env_reads_settings_and_keeps_runtime_sources() -> None:
    """Environment loading sets defaults and keeps keys for precedence resolution."""

    env = {
        "ARTICLECAST_PROVIDER": "deepseek",
        "ARTICLECAST_PRIMARY_VOICE": "fable",
        "ARTICLECAST_OUTPUT_DIR": "/srv/audio",
        "DEEPSEEK_API_KEY": " ds-key ",
        "UNRELATED": "ignored",
    }

    config = ConfigLoader.from_env(env)
    runtime = config.resolved_provider_runtime()

    assert config.provider == "deepseek"
    assert config.output_dir == Path("/srv/audio")
    assert "UNRELATED" not in config.runtime_sources.env
    assert runtime.provider == "deepseek"
    assert runtime.model == "deepseek-chat"
    assert runtime.primary_voice == "fable"
    assert runtime.api_key_for("deepseek") == "ds-key"
    assert runtime.api_key_for("openai") is None


def test_runtime_precedence_is_cli_then_secure_then_env_then_default() -> None:
    """Each runtime key resolves from the highest-precedence non-blank source."""

    config = ArticlecastConfig(provider="openai", model="config-model")
    sources = RuntimeConfigSources(
        cli={"primary_voice": "Shimmer", "openai_api_key": "cli-key", "secondary_voice": "  "},
        secure={"primary_voice": "nova", "openai_api_key": "secure-key", "anthropic_api_key": "ant-secure"},
        env={
            "ARTICLECAST_SECONDARY_VOICE": "onyx",
            "OPENAI_API_KEY": "env-key",
            "ANTHROPIC_API_KEY": "ant-env",
            "PERPLEXITY_API_KEY": "pp-env",
        },
    )

    runtime = config.resolved_provider_runtime(sources)

    assert runtime.primary_voice == "shimmer"
    assert runtime.secondary_voice == "onyx"
    assert runtime.model == "config-model"
    assert runtime.api_keys == {
        "openai": "cli-key",
        "anthropic": "ant-secure",
        "perplexity": "pp-env",
    }
    assert "cli-key" not in str(runtime.as_metadata())


def test_config_model_override_only_applies_to_default_provider() -> None:
    """Switching provider at runtime falls back to that provider's default model."""

    config = ArticlecastConfig(provider="openai", model="gpt-custom")

    runtime = config.resolved_provider_runtime(RuntimeConfigSources(cli={"provider": "anthropic"}))

    assert runtime.provider == "anthropic"
    assert runtime.model == "claude-sonnet-4-20250514"


def test_env_model_does_not_follow_a_cli_provider_switch() -> None:
    """An env model meant for the env provider is not sent to a CLI-chosen provider."""

    config = ArticlecastConfig(provider="openai")
    sources = RuntimeConfigSources(
        cli={"provider": "anthropic"},
        env={"ARTICLECAST_MODEL": "gpt-x"},
    )

    runtime = config.resolved_provider_runtime(sources)

    assert runtime.provider == "anthropic"
    assert runtime.model == "claude-sonnet-4-20250514"


def test_env_model_applies_to_env_provider() -> None:
    """Provider and model set together in the environment stay paired."""

    config = ArticlecastConfig(provider="openai", model="gpt-custom")
    sources = RuntimeConfigSources(
        env={"ARTICLECAST_PROVIDER": "anthropic", "ARTICLECAST_MODEL": "claude-x"},
    )

    runtime = config.resolved_provider_runtime(sources)

    assert runtime.provider == "anthropic"
    assert runtime.model == "claude-x"


def test_cli_model_always_applies_to_cli_provider() -> None:
    """Provider and model passed together on the command line stay paired."""

    config = ArticlecastConfig(provider="openai", model="gpt-custom")
    sources = RuntimeConfigSources(
        cli={"provider": "perplexity", "model": "sonar-pro"},
        env={"ARTICLECAST_MODEL": "gpt-x"},
    )

    runtime = config.resolved_provider_runtime(sources)

    assert runtime.provider == "perplexity"
    assert runtime.model == "sonar-pro"


def test_runtime_resolution_rejects_invalid_cli_values() -> None:
    """Invalid runtime provider or voice overrides fail with `ValueError`."""

    config = ArticlecastConfig()

    with pytest.raises(ValueError, match="Unsupported `provider`"):
        config.resolved_provider_runtime(RuntimeConfigSources(cli={"provider": "mystery"}))
    with pytest.raises(ValueError, match="Unsupported `secondary_voice`"):
        config.resolved_provider_runtime(RuntimeConfigSources(cli={"secondary_voice": "robot"}))
