"""Fixed vocabulary used by the transcript parser."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass(frozen=True)
class ParserVocabulary:
    """Word lists that drive labeled extraction and phrase cleanup.

    Label tuples are ordered longest-first so alternations built from them
    consume the whole unit word ("repetitions" rather than "rep").
    """
    filler_words: Tuple[str, ...] = ("um", "uh", "like", "you know")
    stop_words: Tuple[str, ...] = ("at", "with", "for", "of", "and")
    set_labels: Tuple[str, ...] = ("sets", "set", "x")
    rep_labels: Tuple[str, ...] = ("repetitions", "repetition", "reps", "rep")
    weight_labels: Tuple[str, ...] = ("pounds", "pound", "lbs", "lb", "kilos", "kilo", "kg")
    extra_words: Tuple[str, ...] = field(default=())

    @property
    def all_labels(self) -> Tuple[str, ...]:
        return self.set_labels + self.rep_labels + self.weight_labels

    def speech_words(self) -> List[str]:
        """Every single word the parser knows about, for recognizer vocabularies."""
        words = set()
        for phrase in self.filler_words + self.stop_words + self.all_labels + self.extra_words:
            words.update(phrase.split())
        return sorted(words)


DEFAULT_VOCABULARY = ParserVocabulary()
