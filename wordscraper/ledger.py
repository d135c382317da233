"""
Daily ledger files.

One markdown file per day, `<folder>/WordScraper-<YYYY-MM-DD>.md`, holding one
`<word>: <count>` line per word in the tally's iteration order.
"""

from __future__ import annotations

import logging
import re
from typing import Mapping

import frontmatter

from .vault import VaultStore, normalize_path

logger = logging.getLogger(__name__)

LEDGER_PREFIX = "WordScraper-"
LEDGER_SUFFIX = ".md"

_LINE_PATTERN = re.compile(r"^(\S+?):\s*(\d+)\s*$")
_NAME_PATTERN = re.compile(r"^WordScraper-(\d{4}-\d{2}-\d{2})\.md$")


def ledger_path(folder: str, date: str) -> str:
    """Vault-relative path of the ledger for a date."""
    folder = normalize_path(folder)
    name = f"{LEDGER_PREFIX}{date}{LEDGER_SUFFIX}"
    return f"{folder}/{name}" if folder else name


def ledger_basename(path: str) -> str:
    """File name without folder or extension."""
    name = normalize_path(path).rsplit("/", 1)[-1]
    return name[: -len(LEDGER_SUFFIX)] if name.endswith(LEDGER_SUFFIX) else name


def render_ledger(frequencies: Mapping[str, int]) -> str:
    """Render a tally as ledger text, skipping non-positive counts."""
    return "\n".join(f"{word}: {count}" for word, count in frequencies.items() if count > 0)


def parse_ledger(text: str) -> dict[str, int]:
    """
    Parse ledger text back into a tally.

    Front matter added by the editor and malformed lines are ignored.
    """
    body = frontmatter.loads(text).content if text.startswith("---") else text
    frequencies: dict[str, int] = {}
    for line in body.splitlines():
        match = _LINE_PATTERN.match(line.strip())
        if match:
            frequencies[match.group(1)] = int(match.group(2))
    return frequencies


def find_latest_ledger(store: VaultStore, folder: str) -> str | None:
    """Most recent ledger file in the folder, by the date in its name."""
    ledgers = [p for p in store.list_files(folder) if _NAME_PATTERN.match(p.rsplit("/", 1)[-1])]
    if not ledgers:
        return None
    return max(ledgers, key=lambda p: p.rsplit("/", 1)[-1])


class LedgerWriter:
    """Writes tallies to dated ledger files in the configured folder."""

    def __init__(self, store: VaultStore, folder: str = ""):
        self.store = store
        self.folder = folder

    def path_for(self, date: str) -> str:
        return ledger_path(self.folder, date)

    def exists(self, date: str) -> bool:
        return self.store.exists(self.path_for(date))

    def write(self, date: str, frequencies: Mapping[str, int]) -> str:
        """Create or overwrite the ledger for a date."""
        path = self.path_for(date)
        self.store.write(path, render_ledger(frequencies))
        logger.debug(f"Wrote {len(frequencies)} words to {path}")
        return path

    def ensure(self, date: str, frequencies: Mapping[str, int]) -> tuple[str, bool]:
        """
        Create the ledger for a date if missing.

        Returns:
            (path, created)
        """
        path = self.path_for(date)
        if self.store.exists(path):
            return path, False
        self.store.create(path, render_ledger(frequencies))
        logger.info(f"Created ledger {path}")
        return path, True

    def clear(self, date: str) -> bool:
        """Empty the ledger for a date. Returns False if there is none."""
        path = self.path_for(date)
        if not self.store.exists(path):
            return False
        self.store.modify(path, "")
        return True
