"""Speech capture for voice workout entry."""
from __future__ import annotations

from .base_capture import NO_SPEECH, NOT_SUPPORTED, SpeechCapture
from .factory import CaptureRegistry, create_speech_capture
from .number_words import spoken_numbers_to_digits
from .vosk_capture import VoskSpeechCapture, build_speech_vocabulary

__all__ = [
    "SpeechCapture",
    "VoskSpeechCapture",
    "CaptureRegistry",
    "create_speech_capture",
    "build_speech_vocabulary",
    "spoken_numbers_to_digits",
    "NOT_SUPPORTED",
    "NO_SPEECH",
]
