"""
Daily aggregate store.

The system of record for today's tally. Invariant: every stored count is a
positive integer; a word whose count would drop to zero or below is removed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

logger = logging.getLogger(__name__)


@dataclass
class DailyAggregate:
    """Word counts for one local calendar date (YYYY-MM-DD)."""

    date: str
    frequencies: dict[str, int] = field(default_factory=dict)


def normalize_frequencies(raw: Any) -> dict[str, int]:
    """
    Coerce a loaded frequency mapping into a valid one.

    Keys are lowercased (colliding keys are summed) and any non-integer or
    non-positive count is dropped.
    """
    result: dict[str, int] = {}
    if not isinstance(raw, dict):
        return result
    for word, count in raw.items():
        if not isinstance(word, str) or isinstance(count, bool) or not isinstance(count, int):
            continue
        if count <= 0:
            continue
        key = word.lower()
        result[key] = result.get(key, 0) + count
    return result


class AggregateStore:
    """Owns the DailyAggregate and applies deltas to it."""

    def __init__(self, date: str, frequencies: Mapping[str, int] | None = None):
        self._aggregate = DailyAggregate(date=date, frequencies=normalize_frequencies(dict(frequencies or {})))

    @property
    def date(self) -> str:
        return self._aggregate.date

    def apply_delta(self, delta: Mapping[str, int]) -> bool:
        """
        Apply signed per-word deltas.

        Returns:
            True if the aggregate changed
        """
        freq = self._aggregate.frequencies
        changed = False
        for word, d in delta.items():
            if not d:
                continue
            value = freq.get(word, 0) + d
            if value <= 0:
                if word in freq:
                    del freq[word]
                    changed = True
            else:
                freq[word] = value
                changed = True
        return changed

    def reset(self, date: str | None = None) -> None:
        """Clear all counts, optionally moving the aggregate to a new date."""
        self._aggregate = DailyAggregate(date=date or self._aggregate.date)
        logger.info(f"Aggregate reset for {self._aggregate.date}")

    def snapshot(self) -> Mapping[str, int]:
        """Read-only view of the current counts."""
        return MappingProxyType(self._aggregate.frequencies)

    def __len__(self) -> int:
        return len(self._aggregate.frequencies)

    def total(self) -> int:
        return sum(self._aggregate.frequencies.values())
