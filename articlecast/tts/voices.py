"""Voice catalog for speech synthesis.

Responsibilities:
- Enumerate the fixed set of supported speech voices.
- Validate voice identifiers before any speech backend call.
"""

from __future__ import annotations

from dataclasses import dataclass


class UnsupportedVoiceError(ValueError):
    """Raised when a voice identifier is not in the supported voice set."""

    def __init__(self, voice: object) -> None:
        """Initialize with a message naming the rejected voice and the valid set."""

        supported = ", ".join(SUPPORTED_VOICES)
        super().__init__(f"Unsupported voice `{voice}`. Supported voices: {supported}.")
        self.voice = voice


@dataclass(frozen=True, slots=True)
class VoiceProfile:
    """Declarative voice profile shown to users.

    Attributes:
        voice_id: Provider-native voice identifier.
        label: Human-readable description.
    """

    voice_id: str
    label: str


VOICE_PROFILES: tuple[VoiceProfile, ...] = (
    VoiceProfile("alloy", "Alloy (neutral, balanced)"),
    VoiceProfile("echo", "Echo (male, warm)"),
    VoiceProfile("fable", "Fable (British, expressive)"),
    VoiceProfile("onyx", "Onyx (male, deep)"),
    VoiceProfile("nova", "Nova (female, bright)"),
    VoiceProfile("shimmer", "Shimmer (female, soft)"),
)
SUPPORTED_VOICES: tuple[str, ...] = tuple(profile.voice_id for profile in VOICE_PROFILES)


def is_supported_voice(voice: object) -> bool:
    """Return whether `voice` names a supported voice (case-insensitive)."""

    return isinstance(voice, str) and voice.strip().lower() in SUPPORTED_VOICES


def validate_voice(voice: object) -> str:
    """Return the normalized voice identifier or raise `UnsupportedVoiceError`."""

    if not is_supported_voice(voice):
        raise UnsupportedVoiceError(voice)
    return str(voice).strip().lower()
