"""Integration-test fixtures for deterministic provider behavior."""

from __future__ import annotations

from dataclasses import dataclass, field

import pytest

from articlecast.llm.http_client import AnthropicMessagesClient, ChatCompletionsClient, SpeechClient


_CANNED_TWO_HOST = "\n".join(
    [
        "HOST 1: Welcome back, today we read an article about rivers.",
        "HOST 2: Rivers shape cities more than most people think.",
        "HOST 1: Thanks for listening, goodbye!",
    ]
)
_CANNED_SOLO = "\n".join(
    [
        "Welcome to this episode about rivers.",
        "Rivers shape cities more than most people think.",
        "Thanks for listening, goodbye!",
    ]
)


@dataclass(slots=True)
class ProviderCallLog:
    """Calls observed by the mocked HTTP clients."""

    completions: list[tuple[str, str, str]] = field(default_factory=list)
    speech: list[tuple[str, str, str]] = field(default_factory=list)


@pytest.fixture(autouse=True)
def provider_calls(monkeypatch: pytest.MonkeyPatch) -> ProviderCallLog:
    """Mock provider HTTP clients so integration tests never touch the network."""

    calls = ProviderCallLog()

    def _mock_complete_text(self, **kwargs: object) -> str:
        """Return a summary or a canned script depending on the prompts."""

        self._require_api_key()
        system_prompt = str(kwargs["system_prompt"])
        user_prompt = str(kwargs["user_prompt"])
        calls.completions.append((self.provider_id, str(kwargs["model"]), system_prompt))
        if "condenses long articles" in system_prompt:
            return "The passage argues one thing."
        return _CANNED_TWO_HOST if "HOST 1 and HOST 2" in user_prompt else _CANNED_SOLO

    def _mock_synthesize_speech(self, **kwargs: object) -> bytes:
        """Return deterministic placeholder MP3 bytes for the speech stage."""

        self._require_api_key()
        voice = str(kwargs["voice"])
        calls.speech.append((str(kwargs["model"]), voice, str(kwargs["text"])))
        return f"ID3<{voice}>".encode("utf-8")

    monkeypatch.setattr(ChatCompletionsClient, "complete_text", _mock_complete_text)
    monkeypatch.setattr(AnthropicMessagesClient, "complete_text", _mock_complete_text)
    monkeypatch.setattr(SpeechClient, "synthesize_speech", _mock_synthesize_speech)
    return calls
