"""Text-generation provider registry and generator adapter.

Responsibilities:
- Describe the interchangeable text-generation backends and their limits.
- Expose one injected `generate(prompt, system_prompt, provider)` capability
  backed by one HTTP adapter per provider.

Notes:
- Output-token ceilings are long-form on purpose: full-article podcast scripts
  are verbose and short ceilings truncate them.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Protocol

from .http_client import AnthropicMessagesClient, ChatCompletionsClient, ProviderError
from .rate_limiter import RateLimiter


@dataclass(frozen=True, slots=True)
class ProviderSpec:
    """Static description of one text-generation backend.

    Attributes:
        provider_id: Stable provider identifier used in requests and config.
        model: Default model identifier.
        max_output_tokens: Output-token ceiling sent with each request.
        base_url: REST API base URL.
        api_key_env: Environment variable holding the provider API key.
        protocol: Wire protocol, `chat-completions` or `anthropic-messages`.
    """

    provider_id: str
    model: str
    max_output_tokens: int
    base_url: str
    api_key_env: str
    protocol: str = "chat-completions"


PROVIDER_SPECS: dict[str, ProviderSpec] = {
    "openai": ProviderSpec(
        provider_id="openai",
        model="gpt-4o",
        max_output_tokens=16384,
        base_url="https://api.openai.com/v1",
        api_key_env="OPENAI_API_KEY",
    ),
    "anthropic": ProviderSpec(
        provider_id="anthropic",
        model="claude-sonnet-4-20250514",
        max_output_tokens=16000,
        base_url="https://api.anthropic.com/v1",
        api_key_env="ANTHROPIC_API_KEY",
        protocol="anthropic-messages",
    ),
    "perplexity": ProviderSpec(
        provider_id="perplexity",
        model="sonar",
        max_output_tokens=8000,
        base_url="https://api.perplexity.ai",
        api_key_env="PERPLEXITY_API_KEY",
    ),
    "deepseek": ProviderSpec(
        provider_id="deepseek",
        model="deepseek-chat",
        max_output_tokens=8192,
        base_url="https://api.deepseek.com",
        api_key_env="DEEPSEEK_API_KEY",
    ),
}
SUPPORTED_PROVIDER_IDS = frozenset(PROVIDER_SPECS)
DEFAULT_TEMPERATURE = 0.7


def get_provider_spec(provider_id: str) -> ProviderSpec:
    """Return the `ProviderSpec` for a provider identifier or raise `ValueError`."""

    spec = PROVIDER_SPECS.get(provider_id.strip().lower())
    if spec is None:
        supported = ", ".join(sorted(PROVIDER_SPECS))
        raise ValueError(
            f"Unsupported text-generation provider `{provider_id}`. "
            f"Supported providers: {supported}."
        )
    return spec


class TextGenerator(Protocol):
    """Protocol for the text-generation capability injected into the pipeline."""

    def generate(self, prompt: str, system_prompt: str, provider: str) -> str:
        """Return generated text for a prompt from the selected provider.

        Raises:
            ProviderError: For any backend failure. Transport errors that escape
                as `OSError` are also tolerated by chunk summarization; any other
                exception type aborts the run.
        """


class _CompletionClient(Protocol):
    """Protocol shared by chat-completions and messages clients."""

    def complete_text(
        self,
        *,
        model: str,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> str:
        """Return generated text."""


class ProviderTextGenerator:
    """Route generation calls to per-provider HTTP adapters.

    Adapters are created lazily, once per provider, and reused for the
    lifetime of the generator.
    """

    def __init__(
        self,
        api_keys: Mapping[str, str],
        model_overrides: Mapping[str, str] | None = None,
        timeout_seconds: float = 120.0,
        rate_limiter: RateLimiter | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
    ) -> None:
        """Initialize API keys and optional per-provider model overrides."""

        self.api_keys = dict(api_keys)
        self.model_overrides = dict(model_overrides or {})
        self.timeout_seconds = timeout_seconds
        self.rate_limiter = rate_limiter
        self.temperature = temperature
        self._clients: dict[str, _CompletionClient] = {}

    def model_for(self, provider: str) -> str:
        """Return the effective model identifier for a provider."""

        spec = get_provider_spec(provider)
        return self.model_overrides.get(spec.provider_id, spec.model)

    def generate(self, prompt: str, system_prompt: str, provider: str) -> str:
        """Generate text with the selected provider and its output-token ceiling."""

        try:
            spec = get_provider_spec(provider)
        except ValueError as exc:
            raise ProviderError(str(exc), provider=provider, failure_kind="invalid_provider") from exc
        client = self._client_for(spec)
        return client.complete_text(
            model=self.model_for(spec.provider_id),
            system_prompt=system_prompt,
            user_prompt=prompt,
            max_tokens=spec.max_output_tokens,
            temperature=self.temperature,
        )

    def _client_for(self, spec: ProviderSpec) -> _CompletionClient:
        """Return the cached adapter for a provider, creating it on first use."""

        client = self._clients.get(spec.provider_id)
        if client is not None:
            return client
        client_class = (
            AnthropicMessagesClient
            if spec.protocol == "anthropic-messages"
            else ChatCompletionsClient
        )
        client = client_class(
            provider_id=spec.provider_id,
            api_key=self.api_keys.get(spec.provider_id),
            base_url=spec.base_url,
            timeout_seconds=self.timeout_seconds,
            rate_limiter=self.rate_limiter,
        )
        self._clients[spec.provider_id] = client
        return client
