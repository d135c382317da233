"""
Session state and its persisted form.

The persisted blob lives at <vault>/.wordscraper/state.json:

    {
      "wordFrequency": {"cat": 2},
      "lastKnownDate": "2024-05-01",
      "currentFile": "notes/today.md",
      "lastContent": "...",
      "initialized": true,
      "settings": {...},
      "dirty": false
    }

Counts and baseline are stored together; losing either half would make the
next diff double-count or drift.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .aggregate import normalize_frequencies
from .config import ConfigurationError, WordScraperSettings
from .tracker import ObservedDocumentState

logger = logging.getLogger(__name__)

STATE_DIR = ".wordscraper"
STATE_FILE = "state.json"
CONFIG_FILE = "config.toml"


def get_state_dir(vault_path: Path) -> Path:
    return vault_path / STATE_DIR


def get_state_path(vault_path: Path) -> Path:
    return get_state_dir(vault_path) / STATE_FILE


def get_config_path(vault_path: Path) -> Path:
    return get_state_dir(vault_path) / CONFIG_FILE


@dataclass
class SessionState:
    """Everything that must survive a restart."""

    date: str
    frequencies: dict[str, int] = field(default_factory=dict)
    observed: ObservedDocumentState = field(default_factory=ObservedDocumentState)
    settings: WordScraperSettings = field(default_factory=WordScraperSettings)
    # Counts changed since the last ledger write
    dirty: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "wordFrequency": dict(self.frequencies),
            "lastKnownDate": self.date,
            "currentFile": self.observed.document_identity,
            "lastContent": self.observed.baseline_content,
            "initialized": self.observed.initialized,
            "settings": self.settings.to_dict(),
            "dirty": self.dirty,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], today: str) -> "SessionState":
        """
        Rebuild state from a loaded blob.

        Blobs written by the Obsidian plugin carry no "initialized" flag; the
        baseline is then trusted only if both the file and content are present.
        """
        current_file = str(data.get("currentFile") or "")
        last_content = data.get("lastContent")
        last_content = last_content if isinstance(last_content, str) else ""
        initialized = data.get("initialized")
        if not isinstance(initialized, bool):
            initialized = bool(current_file and last_content)

        try:
            settings = WordScraperSettings.from_dict(data.get("settings") or {})
        except ConfigurationError as e:
            logger.warning(f"Ignoring invalid stored settings: {e}")
            settings = WordScraperSettings()

        date = data.get("lastKnownDate")
        return cls(
            date=date if isinstance(date, str) and date else today,
            frequencies=normalize_frequencies(data.get("wordFrequency")),
            observed=ObservedDocumentState(
                document_identity=current_file,
                baseline_content=last_content,
                initialized=initialized and bool(current_file),
            ),
            settings=settings,
            dirty=data.get("dirty") is True,
        )


class StateStore:
    """Loads and saves the state blob for one vault."""

    def __init__(self, vault_path: Path):
        self.vault_path = vault_path
        self.path = get_state_path(vault_path)

    def load(self, today: str) -> SessionState:
        """Load saved state, or fresh state dated today if none is usable."""
        if not self.path.exists():
            return SessionState(date=today)
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load state from {self.path}: {e}")
            return SessionState(date=today)
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed state in {self.path}")
            return SessionState(date=today)
        return SessionState.from_dict(data, today)

    def save(self, state: SessionState) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.path.with_suffix(".tmp")
        temp_path.write_text(json.dumps(state.to_dict(), indent=2), encoding="utf-8")
        temp_path.replace(self.path)
