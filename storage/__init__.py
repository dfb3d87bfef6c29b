"""Persistence for workouts, custom exercises, backups and session logs."""
from .analytics import WorkoutAnalytics
from .custom_exercise_store import JsonCustomExerciseStore
from .exporter import DataExporter
from .session_logger import SessionLogger
from .workout_logger import ExcelWorkoutLogger, WorkoutEntry

__all__ = [
    "WorkoutAnalytics",
    "JsonCustomExerciseStore",
    "DataExporter",
    "SessionLogger",
    "ExcelWorkoutLogger",
    "WorkoutEntry",
]
