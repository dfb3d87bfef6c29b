"""Text helpers shared by the resolver and the transcript parser."""

import re
from typing import Iterable, List

_WORD_START = re.compile(r"\b\w")
_WHITESPACE = re.compile(r"\s+")


def capitalize_words(text: str) -> str:
    """Upper-case the first character of every word, leaving the rest untouched.

    Unlike ``str.title`` this keeps acronyms such as "EZ" intact, so an
    already canonical name is returned unchanged.
    """
    return _WORD_START.sub(lambda m: m.group(0).upper(), text)


def collapse_whitespace(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def whole_word_pattern(words: Iterable[str]) -> "re.Pattern[str]":
    """Compile an alternation matching any of ``words`` on word boundaries."""
    alternation = "|".join(re.escape(w) for w in words)
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)


def normalize_aliases(aliases: Iterable[str]) -> List[str]:
    """Lowercase and trim aliases, dropping blanks and keeping order."""
    normalized = []
    for alias in aliases:
        cleaned = str(alias).lower().strip()
        if cleaned:
            normalized.append(cleaned)
    return normalized


def tokenize_text(text: str) -> List[str]:
    """Split text into lowercase word tokens, breaking hyphenated words apart.

    Args:
        text: Input text to tokenize

    Returns:
        List of lowercase tokens
    """
    tokens = re.findall(r"[a-zA-Z]+(?:-[a-zA-Z]+)*", text)

    split_tokens = []
    for token in tokens:
        for part in token.split("-"):
            if part:
                split_tokens.append(part.lower())

    return split_tokens
