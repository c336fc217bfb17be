"""Provider factory helpers for text generation and speech synthesis.

Responsibilities:
- Build the injected text-generation capability from resolved runtime config.
- Build the speech synthesizer from resolved runtime config.
"""

from __future__ import annotations

from .config import ArticlecastConfig, ProviderRuntimeConfig
from .llm.providers import ProviderTextGenerator, TextGenerator
from .llm.rate_limiter import RateLimiter
from .tts.synthesizer import OpenAISpeechSynthesizer, SpeechSynthesizer


class ProviderFactory:
    """Factory for provider-backed capabilities used by the pipeline."""

    @staticmethod
    def create_text_generator(
        config: ArticlecastConfig,
        runtime: ProviderRuntimeConfig,
        rate_limiter: RateLimiter | None = None,
    ) -> TextGenerator:
        """Create the multi-provider text generator, one adapter per backend."""

        return ProviderTextGenerator(
            api_keys=runtime.api_keys,
            model_overrides={runtime.provider: runtime.model},
            timeout_seconds=config.request_timeout_seconds,
            rate_limiter=rate_limiter,
        )

    @staticmethod
    def create_speech_synthesizer(
        config: ArticlecastConfig,
        runtime: ProviderRuntimeConfig,
        rate_limiter: RateLimiter | None = None,
    ) -> SpeechSynthesizer:
        """Create the OpenAI speech synthesizer; speech always uses the OpenAI key."""

        return OpenAISpeechSynthesizer(
            api_key=runtime.api_key_for("openai"),
            model=runtime.tts_model,
            timeout_seconds=config.request_timeout_seconds,
            rate_limiter=rate_limiter,
        )
