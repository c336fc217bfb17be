"""Text-to-speech provider abstractions.

This package contains the voice catalog, synthesizer interfaces, and the
segment-level synthesis policy used by the pipeline.
"""

from .synthesizer import (
    OpenAISpeechSynthesizer,
    SegmentSynthesizer,
    SpeechSynthesizer,
    SynthesisOutcome,
    fit_speech_input,
)
from .voices import SUPPORTED_VOICES, UnsupportedVoiceError, VoiceProfile, validate_voice

__all__ = [
    "OpenAISpeechSynthesizer",
    "SegmentSynthesizer",
    "SpeechSynthesizer",
    "SynthesisOutcome",
    "fit_speech_input",
    "SUPPORTED_VOICES",
    "UnsupportedVoiceError",
    "VoiceProfile",
    "validate_voice",
]
