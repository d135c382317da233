"""
Annotated JSON export of a ledger.

Output shape:

    {"words": [{"id": 1, "word": "good", "frequency": 1, "sentiment": 3}, ...]}

Entries keep the ledger's order; ids are 1-based over the exported entries.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Mapping

from .ledger import find_latest_ledger, ledger_basename, parse_ledger
from .vault import VaultStore, normalize_path

logger = logging.getLogger(__name__)

SentimentScorer = Callable[[str], int]


class AfinnScorer:
    """Integer AFINN lexicon score for a single word."""

    def __init__(self) -> None:
        from afinn import Afinn

        self._afinn = Afinn(language="en")

    def __call__(self, word: str) -> int:
        return int(round(self._afinn.score(word)))


def build_export(frequencies: Mapping[str, int], scorer: SentimentScorer) -> dict[str, Any]:
    """Build the export document, excluding non-positive frequencies."""
    words = []
    for word, frequency in frequencies.items():
        if frequency <= 0:
            continue
        words.append(
            {
                "id": len(words) + 1,
                "word": word,
                "frequency": frequency,
                "sentiment": scorer(word),
            }
        )
    return {"words": words}


def export_path(folder: str, basename: str) -> str:
    folder = normalize_path(folder)
    return f"{folder}/{basename}.json" if folder else f"{basename}.json"


def write_export(
    store: VaultStore,
    folder: str,
    basename: str,
    frequencies: Mapping[str, int],
    scorer: SentimentScorer,
) -> str | None:
    """
    Write an export file, overwriting any existing one.

    Returns:
        The written path, or None when there was nothing to export
    """
    document = build_export(frequencies, scorer)
    if not document["words"]:
        logger.info(f"Nothing to export for {basename}")
        return None
    path = export_path(folder, basename)
    store.write(path, json.dumps(document, indent=2))
    logger.info(f"Exported {len(document['words'])} words to {path}")
    return path


def export_latest_ledger(
    store: VaultStore,
    ledger_folder: str,
    export_folder: str,
    scorer: SentimentScorer,
) -> str | None:
    """
    Export the most recent ledger file found in the ledger folder.

    Returns:
        The written path, or None if there is no ledger or it is empty
    """
    latest = find_latest_ledger(store, ledger_folder)
    if latest is None:
        logger.info("No ledger found to export")
        return None
    frequencies = parse_ledger(store.read(latest))
    return write_export(store, export_folder, ledger_basename(latest), frequencies, scorer)
