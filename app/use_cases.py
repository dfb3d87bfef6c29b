"""Use cases for workout logging business logic.

Encapsulates the business rules between the presentation layer (CLI, voice
capture callbacks) and the parser and storage layers. Every use case exposes
``execute`` and returns a Result instead of raising.
"""
from __future__ import annotations

from typing import Any, Iterable, Optional

from loguru import logger

from core.error_handler import log_execution_time
from core.exceptions import CatalogError, LoggingError, ParsingError, PersistenceError, ValidationError
from core.result import Failure, Result, Success
from parser.exercise_resolver import ExerciseResolver
from parser.transcript_parser import ParsedWorkout, TranscriptParser
from storage.workout_logger import WorkoutEntry


def _optional_int(value: Any, field_name: str) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{field_name} must be a whole number, got {value!r}") from e
    if number <= 0:
        raise ValidationError(f"{field_name} must be positive, got {number}")
    return number


def _optional_float(value: Any) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return float(str(value).strip())
    except (TypeError, ValueError) as e:
        raise ValidationError(f"weight must be a number, got {value!r}") from e


class ParseTranscriptUseCase:
    """Turns a raw transcript into a ParsedWorkout candidate for confirmation."""

    def __init__(self, transcript_parser: TranscriptParser, session_logger=None):
        self.transcript_parser = transcript_parser
        self.session_logger = session_logger

    @log_execution_time(logger_instance=logger)
    def execute(self, transcript: str) -> Result[ParsedWorkout, ParsingError]:
        try:
            result = self.transcript_parser.parse(transcript)
        except Exception as e:
            logger.error(f"Failed to parse transcript '{transcript}': {e}")
            return Failure(ParsingError(f"Failed to parse: {e}"))

        logger.info(
            f"[parsed] exercise={result.exercise!r} sets={result.sets} "
            f"reps={result.reps} weight={result.weight}"
        )
        if self.session_logger:
            self.session_logger.log_kv("parsed", result.to_dict())
        return Success(result)


class LogWorkoutUseCase:
    """Confirms a (possibly edited) workout candidate and persists it.

    Exercise, sets and reps are required; weight is optional and notes are
    trimmed. The parser never writes to storage itself, this is the only path.
    """

    def __init__(self, workout_logger, session_logger=None):
        self.workout_logger = workout_logger
        self.session_logger = session_logger

    def execute(
        self,
        exercise: Optional[str],
        sets: Any,
        reps: Any,
        weight: Any = None,
        notes: Optional[str] = "",
        date: Optional[str] = None,
    ) -> Result[WorkoutEntry, Exception]:
        try:
            entry = self._build_entry(exercise, sets, reps, weight, notes, date)
        except ValidationError as e:
            logger.warning(f"Workout rejected: {e}")
            return Failure(e)

        try:
            self.workout_logger.add_workout(entry)
        except PersistenceError as e:
            logger.error(f"Failed to log workout: {e}")
            return Failure(LoggingError(f"Failed to log: {e}"))

        if self.session_logger:
            self.session_logger.log_kv("logged", entry.to_dict())
        return Success(entry)

    def execute_parsed(self, parsed: ParsedWorkout, notes: str = "") -> Result[WorkoutEntry, Exception]:
        """Log a parser candidate as-is."""
        return self.execute(parsed.exercise, parsed.sets, parsed.reps, parsed.weight, notes)

    @staticmethod
    def _build_entry(exercise, sets, reps, weight, notes, date) -> WorkoutEntry:
        name = (exercise or "").strip()
        if not name:
            raise ValidationError("Please enter an exercise name")
        set_count = _optional_int(sets, "sets")
        rep_count = _optional_int(reps, "reps")
        if set_count is None or rep_count is None:
            raise ValidationError("Please enter sets and reps")

        entry = WorkoutEntry(
            exercise=name,
            sets=set_count,
            reps=rep_count,
            weight=_optional_float(weight),
            notes=(notes or "").strip(),
        )
        if date:
            entry.date = date
        return entry


class CancelLastWorkoutUseCase:
    """Removes the most recently logged workout row."""

    def __init__(self, workout_logger):
        self.workout_logger = workout_logger

    def execute(self) -> Result[bool, LoggingError]:
        try:
            ok = self.workout_logger.cancel_last()
        except PersistenceError as e:
            logger.error(f"Failed to cancel last workout: {e}")
            return Failure(LoggingError(f"Failed to cancel: {e}"))
        logger.info("Removed last workout" if ok else "No workout to remove")
        return Success(ok)


class AddExerciseUseCase:
    def __init__(self, resolver: ExerciseResolver):
        self.resolver = resolver

    def execute(self, name: str, aliases: Iterable[str] = ()) -> Result[str, Exception]:
        try:
            return Success(self.resolver.add_exercise(name, aliases))
        except (CatalogError, PersistenceError) as e:
            logger.error(f"Failed to add exercise '{name}': {e}")
            return Failure(e)


class UpdateExerciseUseCase:
    def __init__(self, resolver: ExerciseResolver):
        self.resolver = resolver

    def execute(self, name: str, aliases: Iterable[str]) -> Result[str, Exception]:
        try:
            return Success(self.resolver.update_exercise(name, aliases))
        except (CatalogError, PersistenceError) as e:
            logger.error(f"Failed to update exercise '{name}': {e}")
            return Failure(e)


class DeleteExerciseUseCase:
    """Deletes a custom exercise; builtin-only exercises report False."""

    def __init__(self, resolver: ExerciseResolver):
        self.resolver = resolver

    def execute(self, name: str) -> Result[bool, PersistenceError]:
        try:
            return Success(self.resolver.delete_exercise(name))
        except PersistenceError as e:
            logger.error(f"Failed to delete exercise '{name}': {e}")
            return Failure(e)


def aliases_from_text(text: Optional[str]) -> list:
    """Split a comma separated alias field as typed in a form."""
    if not text:
        return []
    return [part for part in text.split(",") if part.strip()]

