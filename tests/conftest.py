"""Shared pytest fixtures for the full Articlecast test suite."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from threading import Lock

import pytest

from articlecast.io.storage import ArtifactStore
from articlecast.llm.http_client import ProviderError


TWO_HOST_SCRIPT = "\n".join(
    [
        "**HOST 1:** Welcome to the show, today we dig into city gardens.",
        "HOST 2: Thanks Alex, I have been looking forward to this one.",
        "HOST 1: Rooftop beds cool buildings in the summer.",
        "HOST 2: And they give neighbours a reason to meet.",
        "HOST 1: The article also covers water use.",
        "HOST 2: That is all for today, thanks for listening!",
    ]
)

SOLO_SCRIPT = "\n".join(
    [
        "# Welcome",
        "Hello and welcome to this episode about city gardens.",
        "Rooftop beds cool buildings in the summer.",
        "They also give neighbours a reason to meet.",
        "The article closes with advice on water use.",
        "Thanks for listening, see you next time.",
    ]
)


class FakeTextGenerator:
    """Deterministic text generator that records every call."""

    def __init__(
        self,
        script_text: str | None = None,
        fail_summaries: bool = False,
        fail_scripts: bool = False,
    ) -> None:
        """Initialize canned responses and failure switches."""

        self.script_text = script_text
        self.fail_summaries = fail_summaries
        self.fail_scripts = fail_scripts
        self.calls: list[tuple[str, str, str]] = []
        self._lock = Lock()

    @property
    def summary_calls(self) -> list[tuple[str, str, str]]:
        """Return calls issued for chunk summaries."""

        return [call for call in self.calls if "condenses long articles" in call[1]]

    @property
    def script_calls(self) -> list[tuple[str, str, str]]:
        """Return calls issued for podcast scripts."""

        return [call for call in self.calls if "condenses long articles" not in call[1]]

    def generate(self, prompt: str, system_prompt: str, provider: str) -> str:
        """Return a summary or a script depending on the system prompt."""

        with self._lock:
            self.calls.append((prompt, system_prompt, provider))
        if "condenses long articles" in system_prompt:
            if self.fail_summaries:
                raise ProviderError("Rate limit exceeded.", provider=provider, failure_kind="rate_limited")
            return "This chunk makes one clear point."
        if self.fail_scripts:
            raise ProviderError("Authentication failed.", provider=provider, failure_kind="invalid_api_key")
        if self.script_text is not None:
            return self.script_text
        return TWO_HOST_SCRIPT if "HOST 1 and HOST 2" in prompt else SOLO_SCRIPT


class FakeSpeechSynthesizer:
    """Deterministic synthesizer returning tagged bytes per call."""

    def __init__(self, fail_when: Callable[[str, str], bool] | None = None) -> None:
        """Initialize with an optional failure predicate over `(text, voice)`."""

        self.fail_when = fail_when
        self.calls: list[tuple[str, str]] = []

    def synthesize(self, text: str, voice: str) -> bytes:
        """Return `<voice>:<text>` bytes or raise when the predicate matches."""

        self.calls.append((text, voice))
        if self.fail_when is not None and self.fail_when(text, voice):
            raise ProviderError("Request failed (HTTP 500).", provider="openai", failure_kind="http_error")
        return f"<{voice}:{text}>".encode("utf-8")


def words(count: int, sentence_length: int = 10) -> str:
    """Build deterministic prose with exactly `count` words."""

    tokens: list[str] = []
    for index in range(count):
        token = f"word{index}"
        if (index + 1) % sentence_length == 0:
            token += "."
        tokens.append(token)
    return " ".join(tokens)


@pytest.fixture
def fake_generator() -> FakeTextGenerator:
    """Provide a fresh deterministic text generator."""

    return FakeTextGenerator()


@pytest.fixture
def fake_synthesizer() -> FakeSpeechSynthesizer:
    """Provide a fresh deterministic speech synthesizer."""

    return FakeSpeechSynthesizer()


@pytest.fixture
def artifact_store(tmp_path: Path) -> ArtifactStore:
    """Provide an artifact store rooted in a temporary directory."""

    return ArtifactStore(tmp_path / "public" / "audio")


@pytest.fixture
def make_words() -> Callable[[int], str]:
    """Provide the deterministic prose builder."""

    return words


@pytest.fixture
def generator_factory() -> type[FakeTextGenerator]:
    """Provide the fake generator class for tests that need custom responses."""

    return FakeTextGenerator


@pytest.fixture
def synthesizer_factory() -> type[FakeSpeechSynthesizer]:
    """Provide the fake synthesizer class for tests that need failure predicates."""

    return FakeSpeechSynthesizer
