"""
Transcript Parser for the Workout Logging Application.

Turns a raw speech transcript such as "3 sets of 10 reps bench press at 135
pounds" into a ParsedWorkout candidate that the confirmation step shows to the
user before anything is stored.

Classes:
    ParsedWorkout: Transient result of one parse call
    TranscriptParser: Extraction pipeline delegating names to ExerciseResolver

Processing Pipeline:
    1. Lowercase and trim
    2. Whole-word removal of filler words
    3. Labeled extraction ("<n> sets", "<n> reps", "<n> pounds"), first hit per field
    4. Positional fallback (sets, reps, weight) only when no label matched at all
    5. Exercise phrase isolation
    6. Name resolution, falling back to the capitalized raw phrase
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from loguru import logger

from .config import DEFAULT_VOCABULARY, ParserVocabulary
from .exercise_resolver import ExerciseResolver
from .text_utils import capitalize_words, collapse_whitespace, whole_word_pattern

_INTEGER = re.compile(r"\d+")


def _to_int(digits: str) -> Optional[int]:
    # Digit runs beyond the interpreter's int conversion limit count as unheard.
    try:
        return int(digits)
    except ValueError:
        return None


@dataclass
class ParsedWorkout:
    """
    Candidate workout extracted from one transcript.

    Unset numeric fields stay None rather than 0 so the confirmation step can
    tell "not heard" from "zero".

    Attributes:
        exercise: Canonical name, capitalized raw phrase, or "" when nothing remained
        sets: Number of sets
        reps: Repetitions per set
        weight: Load in the unit the user spoke (pounds by convention)
        raw_transcript: The untouched input, kept for diagnostics
    """
    exercise: str = ""
    sets: Optional[int] = None
    reps: Optional[int] = None
    weight: Optional[int] = None
    raw_transcript: str = ""

    @property
    def missing_fields(self) -> List[str]:
        """Fields the user still has to fill in before the entry can be logged."""
        missing = []
        if not self.exercise:
            missing.append("exercise")
        if self.sets is None:
            missing.append("sets")
        if self.reps is None:
            missing.append("reps")
        return missing

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exercise": self.exercise,
            "sets": self.sets,
            "reps": self.reps,
            "weight": self.weight,
            "raw_transcript": self.raw_transcript,
        }


class TranscriptParser:
    """
    Extracts exercise, sets, reps and weight from a speech transcript.

    The parser is a total function over strings: it never raises, and an
    empty or all-filler transcript yields an empty ParsedWorkout. Labeled
    numbers always take precedence over position; the positional fallback is
    all-or-nothing and never mixes with labeled matches.

    Usage:
        parser = TranscriptParser(ExerciseResolver())
        result = parser.parse("squats 5 5 225")
        # ParsedWorkout(exercise="Squats", sets=5, reps=5, weight=225, ...)
    """

    def __init__(
        self,
        resolver: ExerciseResolver,
        vocabulary: ParserVocabulary = DEFAULT_VOCABULARY,
    ) -> None:
        self.resolver = resolver
        self.vocabulary = vocabulary

        self._filler_pattern = whole_word_pattern(vocabulary.filler_words)
        self._stop_word_pattern = whole_word_pattern(vocabulary.stop_words)
        self._field_patterns = {
            "sets": self._labeled_pattern(vocabulary.set_labels),
            "reps": self._labeled_pattern(vocabulary.rep_labels),
            "weight": self._labeled_pattern(vocabulary.weight_labels),
        }

        self.stats = self._empty_stats()

    @staticmethod
    def _labeled_pattern(labels) -> "re.Pattern[str]":
        alternation = "|".join(re.escape(label) for label in labels)
        return re.compile(rf"(\d+)\s*(?:{alternation})", re.IGNORECASE)

    def parse(self, transcript: str) -> ParsedWorkout:
        """
        Parse one transcript into a ParsedWorkout.

        Args:
            transcript: Raw text from the speech engine or typed by the user

        Returns:
            ParsedWorkout: Candidate record; fields that were not heard are None
        """
        self.stats["total_parses"] += 1
        raw = transcript if isinstance(transcript, str) else ""

        cleaned = self._strip_fillers(raw.lower().strip())
        logger.debug(f"Parsing transcript: '{cleaned}'")

        fields = self._extract_labeled(cleaned)
        if all(value is None for value in fields.values()):
            fields = self._extract_positional(cleaned)
            if any(value is not None for value in fields.values()):
                self.stats["positional_parses"] += 1

        phrase = self._isolate_exercise_phrase(cleaned)
        exercise = self._resolve_exercise(phrase)

        result = ParsedWorkout(
            exercise=exercise,
            sets=fields["sets"],
            reps=fields["reps"],
            weight=fields["weight"],
            raw_transcript=raw,
        )
        self._update_parsing_stats(result)
        logger.debug(f"Parse result: {result}")
        return result

    def _strip_fillers(self, text: str) -> str:
        return self._filler_pattern.sub("", text)

    def _extract_labeled(self, text: str) -> Dict[str, Optional[int]]:
        fields: Dict[str, Optional[int]] = {}
        for field_name, pattern in self._field_patterns.items():
            match = pattern.search(text)
            fields[field_name] = _to_int(match.group(1)) if match else None
        return fields

    def _extract_positional(self, text: str) -> Dict[str, Optional[int]]:
        numbers = [_to_int(n) for n in _INTEGER.findall(text)]
        padded = numbers[:3] + [None] * (3 - min(len(numbers), 3))
        return dict(zip(("sets", "reps", "weight"), padded))

    def _isolate_exercise_phrase(self, text: str) -> str:
        phrase = text
        for pattern in self._field_patterns.values():
            phrase = pattern.sub("", phrase)
        phrase = _INTEGER.sub("", phrase)
        phrase = phrase.replace(",", "")
        phrase = self._stop_word_pattern.sub("", phrase)
        return collapse_whitespace(phrase)

    def _resolve_exercise(self, phrase: str) -> str:
        if not phrase:
            return ""
        resolved = self.resolver.resolve(phrase)
        if resolved:
            self.stats["resolved_exercises"] += 1
            return resolved
        logger.debug(f"Unknown exercise phrase '{phrase}', keeping it as typed")
        return capitalize_words(phrase)

    # ------------------------------------------------------------- statistics

    @staticmethod
    def _empty_stats() -> Dict[str, int]:
        return {
            "total_parses": 0,
            "complete_parses": 0,
            "partial_parses": 0,
            "empty_parses": 0,
            "positional_parses": 0,
            "resolved_exercises": 0,
        }

    def _update_parsing_stats(self, result: ParsedWorkout) -> None:
        if result.is_complete:
            self.stats["complete_parses"] += 1
        elif not result.exercise and result.sets is None and result.reps is None and result.weight is None:
            self.stats["empty_parses"] += 1
        else:
            self.stats["partial_parses"] += 1

    def get_parsing_stats(self) -> Dict[str, Any]:
        """Counters plus completion rate over all parse calls so far."""
        stats: Dict[str, Any] = dict(self.stats)
        total = stats["total_parses"]
        stats["completion_rate"] = stats["complete_parses"] / total if total else 0.0
        return stats

    def reset_stats(self) -> None:
        self.stats = self._empty_stats()
