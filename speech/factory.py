"""Factory for creating speech capture instances with registry pattern."""
from __future__ import annotations

from typing import Any, Callable, Dict, List

from core.exceptions import SpeechCaptureError
from .base_capture import SpeechCapture


class CaptureRegistry:
    """Registry for speech capture factories.

    New engines can register themselves without modifying this class.
    """

    _factories: Dict[str, Callable[..., SpeechCapture]] = {}
    _metadata: Dict[str, Dict[str, Any]] = {}

    @classmethod
    def register(
        cls,
        name: str,
        factory: Callable[..., SpeechCapture],
        description: str = "",
        requires: List[str] = None,
    ) -> None:
        cls._factories[name.lower()] = factory
        cls._metadata[name.lower()] = {
            "description": description,
            "requires": requires or [],
        }

    @classmethod
    def create(cls, name: str, **kwargs) -> SpeechCapture:
        """Create a capture instance.

        Raises:
            SpeechCaptureError: If engine is unknown or creation fails
        """
        engine = name.lower().strip()

        if engine not in cls._factories:
            available = ", ".join(cls._factories.keys())
            raise SpeechCaptureError(
                f"Unknown speech capture engine: '{name}'. "
                f"Available engines: {available}"
            )

        try:
            return cls._factories[engine](**kwargs)
        except Exception as e:
            raise SpeechCaptureError(f"Failed to create {engine} speech capture: {e}") from e

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name.lower() in cls._factories

    @classmethod
    def get_available_engines(cls) -> List[str]:
        return list(cls._factories.keys())

    @classmethod
    def get_metadata(cls, name: str) -> Dict[str, Any]:
        return cls._metadata.get(name.lower(), {})


def _make_vosk(**kwargs) -> SpeechCapture:
    from .vosk_capture import VoskSpeechCapture
    return VoskSpeechCapture(**kwargs)


CaptureRegistry.register("vosk", _make_vosk, "Vosk (offline)", ["vosk", "sounddevice"])


def create_speech_capture(engine: str, **kwargs) -> SpeechCapture:
    """Create a speech capture for ``engine`` (currently only "vosk").

    Keyword arguments are passed to the engine class, e.g. ``model_path``,
    ``sample_rate``, ``vocabulary`` and ``language`` for Vosk.
    """
    return CaptureRegistry.create(engine, **kwargs)
