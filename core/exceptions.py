"""Custom exception hierarchy for the application."""
from __future__ import annotations


class WorkoutLogException(Exception):
    """Base exception for all workout logging errors."""
    pass


class ParsingError(WorkoutLogException):
    """Raised when transcript parsing fails."""
    pass


class CatalogError(WorkoutLogException):
    """Raised when an exercise catalog operation is rejected."""
    pass


class PersistenceError(WorkoutLogException):
    """Raised when loading or saving stored data fails."""
    pass


class LoggingError(WorkoutLogException):
    """Raised when a workout entry cannot be written."""
    pass


class ValidationError(WorkoutLogException):
    """Raised when a workout entry is incomplete."""
    pass


class SpeechCaptureError(WorkoutLogException):
    """Raised when a speech capture engine cannot be created."""
    pass


class ConfigurationError(WorkoutLogException):
    """Raised when configuration is invalid or missing."""
    pass
