"""
WordScraper session: wires the tracker, aggregate, rollover and flush
components to one vault and exposes the inbound handlers hosts call.

Handlers (called by a host adapter, one at a time):
- on_content_changed(identity, text)
- on_document_deleted(identity)
- on_tick()

Commands:
- open_daily_ledger()
- export_to_json()
- reset_today()
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Mapping

from .aggregate import AggregateStore
from .config import ConfigurationError, WordScraperSettings, load_config_file
from .export import AfinnScorer, SentimentScorer, export_latest_ledger, write_export
from .flush import FlushScheduler
from .ledger import LedgerWriter, ledger_basename, ledger_path
from .rollover import RolloverController, local_date
from .state import SessionState, StateStore, get_config_path
from .tracker import ChangeTracker, TrackerState
from .vault import VaultStore

logger = logging.getLogger(__name__)


@dataclass
class SessionStatus:
    """Snapshot of the session for display."""

    date: str
    unique_words: int
    total_words: int
    tracker_state: TrackerState
    tracked_document: str | None
    flush_pending: bool
    ledger_path: str
    top_words: list[tuple[str, int]]


class WordScraper:
    """One tracking session over a vault."""

    def __init__(
        self,
        vault_path: Path,
        *,
        overrides: dict[str, Any] | None = None,
        scorer: SentimentScorer | None = None,
        today: Callable[[], str] = local_date,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.vault_path = vault_path.resolve()
        self.vault = VaultStore(self.vault_path)
        self.state_store = StateStore(self.vault_path)
        self._overrides = dict(overrides or {})
        self._scorer = scorer
        self._today = today

        state = self.state_store.load(today())
        # Settings persisted by `config set`; overrides are never written back
        self.stored_settings = state.settings
        self.settings = self._effective_settings()

        self.store = AggregateStore(state.date, state.frequencies)
        self.tracker = ChangeTracker(
            self.store,
            stopwords=self.settings.stopword_list(),
            excluded_prefixes=self.settings.excluded_prefixes(),
            pattern=self.settings.wordPattern,
            observed=state.observed,
        )
        self.ledger = LedgerWriter(self.vault, self.settings.folderPath)
        self.flusher = FlushScheduler(self._write_ledger, self.settings.updateFrequency, clock)
        self.rollover = RolloverController(
            self.store,
            self.tracker,
            today=today,
            before_reset=self._close_day,
        )
        if state.dirty:
            # Unwritten counts from the previous run
            self.flusher.on_dirty()

    def _effective_settings(self) -> WordScraperSettings:
        file_overrides = load_config_file(get_config_path(self.vault_path))
        return self.stored_settings.merged(file_overrides).merged(self._overrides)

    # --- Inbound handlers ---

    def on_content_changed(self, document_identity: str, content: str) -> dict[str, int] | None:
        """Editor-change notification: the full current text of a document."""
        if self.rollover.check():
            self.save()
        delta = self.tracker.on_content_changed(document_identity, content)
        if delta:
            self.flusher.on_dirty()
        if delta is not None or self.tracker.tracked_identity == document_identity:
            self.save()
        return delta

    def on_document_deleted(self, document_identity: str) -> None:
        if self.tracker.on_document_deleted(document_identity):
            logger.debug(f"Tracked document deleted: {document_identity}")
            self.save()

    def on_document_renamed(self, old_identity: str, new_identity: str) -> None:
        if old_identity == self.tracker.tracked_identity:
            self.tracker.on_document_renamed(old_identity, new_identity)
            self.save()

    def on_tick(self) -> None:
        """Periodic tick: rollover check, then any due flush."""
        rolled = self.rollover.check()
        flushed = self.flusher.poll()
        if rolled or flushed:
            self.save()

    # --- Ledger writing ---

    def _write_ledger(self) -> None:
        path = self.ledger.write(self.store.date, self.store.snapshot())
        self.stored_settings.lastUpdated = datetime.now().isoformat(timespec="seconds")
        logger.debug(f"Flushed ledger {path}")

    def _close_day(self, old_date: str, frequencies: Mapping[str, int]) -> None:
        """Finish the old day before the aggregate is reset."""
        if self.flusher.pending:
            self.flusher.cancel()
            try:
                self.ledger.write(old_date, frequencies)
            except (OSError, ConfigurationError) as e:
                logger.error(f"Failed to write final ledger for {old_date}: {e}")

        if self.settings.enableJsonExport and self.settings.enableAutomaticJsonExport:
            basename = ledger_basename(ledger_path(self.settings.folderPath, old_date))
            write_export(self.vault, self.settings.export_folder(), basename, frequencies, self.scorer)

    @property
    def scorer(self) -> SentimentScorer:
        if self._scorer is None:
            self._scorer = AfinnScorer()
        return self._scorer

    # --- Commands ---

    def open_daily_ledger(self) -> tuple[Path, bool]:
        """
        Open or create today's ledger.

        Returns:
            (absolute path, created)
        """
        self.rollover.check()
        if self.flusher.pending:
            self.flusher.flush_now()
        path, created = self.ledger.ensure(self.store.date, self.store.snapshot())
        self.save()
        return self.vault.resolve(path), created

    def export_to_json(self) -> Path | None:
        """
        Export the latest ledger to JSON.

        Raises:
            ConfigurationError: if export is disabled or a folder is missing
        """
        if not self.settings.enableJsonExport:
            raise ConfigurationError("JSON export is disabled in settings. Enable enableJsonExport to proceed.")
        self.rollover.check()
        if self.flusher.pending:
            self.flusher.flush_now()
        path = export_latest_ledger(
            self.vault,
            self.settings.folderPath,
            self.settings.export_folder(),
            self.scorer,
        )
        self.save()
        return self.vault.resolve(path) if path else None

    def reset_today(self) -> bool:
        """
        Clear today's tally and ledger.

        Returns:
            True if a ledger file existed and was emptied
        """
        self.rollover.check()
        self.flusher.cancel()
        self.store.reset(self.store.date)
        self.tracker.invalidate()
        cleared = self.ledger.clear(self.store.date)
        self.save()
        return cleared

    def update_setting(self, key: str, value: Any) -> WordScraperSettings:
        """Persist one setting and apply it to the running session."""
        self.stored_settings.set(key, value)
        self.settings = self._effective_settings()
        self.tracker.configure(
            stopwords=self.settings.stopword_list(),
            excluded_prefixes=self.settings.excluded_prefixes(),
            pattern=self.settings.wordPattern,
        )
        self.ledger.folder = self.settings.folderPath
        self.flusher.delay_ms = self.settings.updateFrequency
        self.save()
        return self.settings

    def status(self, top: int = 10) -> SessionStatus:
        snapshot = self.store.snapshot()
        ranked = sorted(snapshot.items(), key=lambda kv: (-kv[1], kv[0]))
        return SessionStatus(
            date=self.store.date,
            unique_words=len(snapshot),
            total_words=self.store.total(),
            tracker_state=self.tracker.state,
            tracked_document=self.tracker.tracked_identity,
            flush_pending=self.flusher.pending,
            ledger_path=self.ledger.path_for(self.store.date),
            top_words=ranked[:top],
        )

    # --- Persistence ---

    def save(self) -> None:
        state = SessionState(
            date=self.store.date,
            frequencies=dict(self.store.snapshot()),
            observed=self.tracker.observed,
            settings=self.stored_settings,
            dirty=self.flusher.pending,
        )
        try:
            self.state_store.save(state)
        except OSError as e:
            logger.error(f"Failed to save state to {self.state_store.path}: {e}")

    def shutdown(self) -> None:
        """Flush anything pending and persist state."""
        if self.flusher.pending:
            self.flusher.flush_now()
        self.save()
