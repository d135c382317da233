"""
Frequency differencing between two token sequences.

This is a multiset difference, not a positional diff: moving a word inside a
document nets to zero, duplicating an instance nets +1.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable


def count_tokens(tokens: Iterable[str]) -> Counter[str]:
    """Build a word -> occurrence count map."""
    return Counter(tokens)


def diff(old_tokens: Iterable[str], new_tokens: Iterable[str]) -> dict[str, int]:
    """
    Compute signed per-word deltas between two token sequences.

    Returns:
        word -> (new count - old count), zero entries omitted
    """
    old_counts = count_tokens(old_tokens)
    new_counts = count_tokens(new_tokens)

    delta: dict[str, int] = {}
    # New-text order first so freshly typed words keep their reading order
    ordered = list(new_counts) + [w for w in old_counts if w not in new_counts]
    for word in ordered:
        d = new_counts[word] - old_counts[word]
        if d:
            delta[word] = d
    return delta
