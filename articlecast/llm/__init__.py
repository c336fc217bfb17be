"""LLM-facing abstractions for summarization and script generation.

This package defines provider HTTP clients, the provider registry, prompt
libraries, and the stage components built on top of them.
"""

from .http_client import ProviderError
from .prompts import PromptLibrary, PromptPair
from .providers import PROVIDER_SPECS, ProviderSpec, ProviderTextGenerator, TextGenerator
from .rate_limiter import RateLimiter
from .script_generator import GeneratedScript, ScriptGenerator
from .summarizer import ChunkSummarizer, sentence_budget

__all__ = [
    "ProviderError",
    "PromptLibrary",
    "PromptPair",
    "PROVIDER_SPECS",
    "ProviderSpec",
    "ProviderTextGenerator",
    "TextGenerator",
    "RateLimiter",
    "GeneratedScript",
    "ScriptGenerator",
    "ChunkSummarizer",
    "sentence_budget",
]
