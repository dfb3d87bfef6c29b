"""Spoken number conversion for recognizer output.

Offline engines spell numbers out ("three sets of ten reps at one hundred
thirty five pounds"); the transcript parser only understands digit runs, so
recognized text goes through ``spoken_numbers_to_digits`` first.
"""
from __future__ import annotations

from typing import Dict, List, Optional

UNITS: Dict[str, int] = {
    "zero": 0, "one": 1, "two": 2, "three": 3, "four": 4,
    "five": 5, "six": 6, "seven": 7, "eight": 8, "nine": 9,
}
TEENS: Dict[str, int] = {
    "ten": 10, "eleven": 11, "twelve": 12, "thirteen": 13, "fourteen": 14,
    "fifteen": 15, "sixteen": 16, "seventeen": 17, "eighteen": 18, "nineteen": 19,
}
TENS: Dict[str, int] = {
    "twenty": 20, "thirty": 30, "forty": 40, "fifty": 50,
    "sixty": 60, "seventy": 70, "eighty": 80, "ninety": 90,
}
SCALES: Dict[str, int] = {"hundred": 100, "thousand": 1000}

NUMBER_WORDS = set(UNITS) | set(TEENS) | set(TENS) | set(SCALES)


def _kind(word: str) -> Optional[str]:
    if word in UNITS:
        return "unit"
    if word in TEENS:
        return "teen"
    if word in TENS:
        return "tens"
    if word in SCALES:
        return word
    return None


class _NumberBuilder:
    """Accumulates consecutive number words into one or more integers."""

    def __init__(self) -> None:
        self.output: List[str] = []
        self._reset()

    def _reset(self) -> None:
        self.total = 0
        self.current = 0
        self.last: Optional[str] = None

    @property
    def active(self) -> bool:
        return self.last is not None

    def flush(self) -> None:
        if self.active:
            self.output.append(str(self.total + self.current))
        self._reset()

    def feed(self, word: str) -> None:
        kind = _kind(word)
        if kind == "unit":
            if self.last in ("unit", "teen"):
                self.flush()
            self.current += UNITS[word]
        elif kind in ("teen", "tens"):
            if self.last in ("unit", "teen", "tens"):
                self.flush()
            self.current += TEENS.get(word) or TENS[word]
        elif kind == "hundred":
            if self.current >= 100:
                self.flush()
            self.current = (self.current or 1) * 100
        elif kind == "thousand":
            self.total += (self.current or 1) * 1000
            self.current = 0
        self.last = kind


def _split_hyphenated(token: str) -> List[str]:
    parts = token.split("-")
    if len(parts) > 1 and all(p in NUMBER_WORDS for p in parts):
        return parts
    return [token]


def spoken_numbers_to_digits(text: str) -> str:
    """
    Replace spelled-out numbers with digits, keeping every other word.

    Adjacent numbers that cannot form one value are kept apart, so
    "squats five five two hundred twenty five" becomes "squats 5 5 225".

    Args:
        text: Recognizer output

    Returns:
        str: Text with number words replaced by digit runs
    """
    tokens: List[str] = []
    for raw in text.split():
        tokens.extend(_split_hyphenated(raw.lower()))

    builder = _NumberBuilder()
    for index, token in enumerate(tokens):
        if token in NUMBER_WORDS:
            builder.feed(token)
            continue
        if token == "and" and builder.last in ("hundred", "thousand"):
            following = tokens[index + 1] if index + 1 < len(tokens) else ""
            if following in NUMBER_WORDS:
                continue
        builder.flush()
        builder.output.append(token)
    builder.flush()
    return " ".join(builder.output)
