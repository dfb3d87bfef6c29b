"""Core infrastructure components for dependency injection and application foundation."""
from __future__ import annotations

from .container import Container
from .exceptions import (
    WorkoutLogException,
    ParsingError,
    CatalogError,
    PersistenceError,
    LoggingError,
    ValidationError,
    SpeechCaptureError,
    ConfigurationError,
)
from .result import Result, Success, Failure

__all__ = [
    "Container",
    "WorkoutLogException",
    "ParsingError",
    "CatalogError",
    "PersistenceError",
    "LoggingError",
    "ValidationError",
    "SpeechCaptureError",
    "ConfigurationError",
    "Result",
    "Success",
    "Failure",
]
