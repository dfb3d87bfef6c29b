"""
Workout Parser Package.

Turns speech transcripts into structured workout candidates and resolves
free-text exercise phrases against the exercise catalog.

Main Components:
    TranscriptParser: Extracts exercise, sets, reps and weight from a transcript
    ParsedWorkout: Transient result of one parse call
    ExerciseResolver: Builtin + custom exercise catalog with phrase resolution
    ExerciseCatalogEntry: One canonical exercise with its aliases and origin
    ParserVocabulary: Filler words, stop words and unit labels
"""

from __future__ import annotations

from .transcript_parser import TranscriptParser, ParsedWorkout
from .exercise_resolver import ExerciseResolver, ExerciseMatch, MatchStrategy
from .catalog import ExerciseCatalogEntry, ExerciseOrigin, load_builtin_exercises
from .config import ParserVocabulary, DEFAULT_VOCABULARY
from .text_utils import capitalize_words

__all__ = [
    "TranscriptParser",
    "ParsedWorkout",
    "ExerciseResolver",
    "ExerciseMatch",
    "MatchStrategy",
    "ExerciseCatalogEntry",
    "ExerciseOrigin",
    "load_builtin_exercises",
    "ParserVocabulary",
    "DEFAULT_VOCABULARY",
    "capitalize_words",
]

__version__ = "1.0.0"

EXAMPLE_INPUTS = [
    "3 sets of 10 reps bench press at 135 pounds",
    "squats 5 5 225",
    "um deadlift 1 set 5 reps 315 lbs",
    "bicep curls, 3 sets of 12 reps at 30 pounds",
]
