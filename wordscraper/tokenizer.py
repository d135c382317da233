"""
Word tokenization.

Extracts lowercase word tokens from raw text, in order of appearance and with
duplicates retained, after removing stopwords.

The word-character class is a policy:
- word: plain `\\w+` runs
- alpha: `\\w` runs containing at least one letter (no pure numbers)
- contractions: apostrophes and hyphens between word characters are word-internal
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Iterable


class WordPattern(str, Enum):
    """Word-character policies understood by the tokenizer."""

    WORD = "word"
    ALPHA = "alpha"
    CONTRACTIONS = "contractions"


_PATTERNS: dict[WordPattern, re.Pattern[str]] = {
    WordPattern.WORD: re.compile(r"\w+"),
    WordPattern.ALPHA: re.compile(r"\b\w*[^\W\d_]+\w*\b"),
    WordPattern.CONTRACTIONS: re.compile(r"\w+(?:['’-]\w+)*"),
}


def normalize_stopwords(words: Iterable[str]) -> frozenset[str]:
    """Trim and case-fold stopwords, dropping blanks."""
    return frozenset(w.strip().lower() for w in words if w.strip())


def tokenize(
    text: str,
    stopwords: Iterable[str] = (),
    pattern: WordPattern | str = WordPattern.WORD,
) -> list[str]:
    """
    Split text into lowercase word tokens.

    Args:
        text: Raw document text
        stopwords: Words to drop (compared case-insensitively)
        pattern: Word-character policy

    Returns:
        Tokens in order of appearance, duplicates retained
    """
    if not text:
        return []
    regex = _PATTERNS[WordPattern(pattern)]
    stop = normalize_stopwords(stopwords)
    tokens = []
    for match in regex.finditer(text):
        word = match.group(0).lower()
        if word not in stop:
            tokens.append(word)
    return tokens
