"""
File system host for a WordScraper session.

Each saved note becomes an editor-change notification carrying the file's
full text. This module provides:
- Watchdog-based file monitoring
- Debounced per-path events (editor save cycles collapse into one)
- A single dispatch loop, so the session only ever sees one event at a time
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable

from watchdog.events import (
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from .app import WordScraper
from .ledger import LEDGER_PREFIX
from .vault import NOTE_EXTENSIONS

logger = logging.getLogger(__name__)


class ChangeKind(str, Enum):
    """Kinds of host notifications produced by the watcher."""

    CHANGED = "changed"
    DELETED = "deleted"
    RENAMED = "renamed"


@dataclass
class PendingEvent:
    """Tracks a pending event for debouncing."""

    kind: ChangeKind
    path: Path
    timestamp: float
    dest_path: Path | None = None
    # A rename whose destination was also written before dispatch
    modified: bool = False


class VaultChangeHandler(FileSystemEventHandler):
    """
    Collects file system events for note files.

    Runs on the observer thread and only records pending events; drain()
    hands ready events to the dispatch loop.
    """

    RELEVANT_EXTENSIONS = NOTE_EXTENSIONS
    DEBOUNCE_SECONDS = 0.3

    def __init__(self, vault_path: Path, clock: Callable[[], float] = time.monotonic):
        super().__init__()
        self.vault_path = vault_path.resolve()
        self.clock = clock
        self.pending: dict[str, PendingEvent] = {}
        self._lock = threading.Lock()

    def _is_relevant(self, path: str) -> bool:
        """Check if the file is a note worth tracking."""
        p = Path(path)
        try:
            rel = p.resolve().relative_to(self.vault_path)
        except ValueError:
            return False

        # Skip hidden files and directories (including .wordscraper)
        if any(part.startswith(".") for part in rel.parts):
            return False

        if p.suffix.lower() not in self.RELEVANT_EXTENSIONS:
            return False

        # Our own ledgers must never feed back into the tally
        if p.name.startswith(LEDGER_PREFIX):
            return False

        return True

    def _put(self, path_str: str, event: PendingEvent) -> None:
        with self._lock:
            self.pending[path_str] = event

    def on_created(self, event: FileCreatedEvent) -> None:
        if event.is_directory or not self._is_relevant(event.src_path):
            return
        self._put(event.src_path, PendingEvent(ChangeKind.CHANGED, Path(event.src_path), self.clock()))

    def on_modified(self, event: FileModifiedEvent) -> None:
        if event.is_directory or not self._is_relevant(event.src_path):
            return
        with self._lock:
            pending = self.pending.get(event.src_path)
            # Don't override a pending rename with a modification
            if pending is not None and pending.kind == ChangeKind.RENAMED:
                pending.modified = True
                pending.timestamp = self.clock()
                return
            self.pending[event.src_path] = PendingEvent(ChangeKind.CHANGED, Path(event.src_path), self.clock())

    def on_deleted(self, event: FileDeletedEvent) -> None:
        if event.is_directory or not self._is_relevant(event.src_path):
            return
        self._put(event.src_path, PendingEvent(ChangeKind.DELETED, Path(event.src_path), self.clock()))

    def on_moved(self, event: FileMovedEvent) -> None:
        if event.is_directory:
            return

        src_relevant = self._is_relevant(event.src_path)
        dest_relevant = self._is_relevant(event.dest_path)

        if src_relevant and dest_relevant:
            with self._lock:
                self.pending.pop(event.src_path, None)
                self.pending[event.dest_path] = PendingEvent(
                    ChangeKind.RENAMED,
                    Path(event.src_path),
                    self.clock(),
                    dest_path=Path(event.dest_path),
                )
        elif src_relevant:
            # Moved out of the tracked area - treat as delete
            self._put(event.src_path, PendingEvent(ChangeKind.DELETED, Path(event.src_path), self.clock()))
        elif dest_relevant:
            # Moved into the tracked area - treat as a change
            self._put(event.dest_path, PendingEvent(ChangeKind.CHANGED, Path(event.dest_path), self.clock()))

    def drain(self) -> list[PendingEvent]:
        """Remove and return events whose debounce window has passed, oldest first."""
        now = self.clock()
        ready: list[PendingEvent] = []
        with self._lock:
            for path_str, pending in list(self.pending.items()):
                if now - pending.timestamp >= self.DEBOUNCE_SECONDS:
                    ready.append(pending)
                    del self.pending[path_str]
        ready.sort(key=lambda e: e.timestamp)
        return ready


def _deliver_change(
    app: WordScraper, identity: str, path: Path, on_event: Callable[[str], None] | None
) -> None:
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        app.on_document_deleted(identity)
        return
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Skipping unreadable note {identity}: {e}")
        return
    delta = app.on_content_changed(identity, content)
    if on_event and delta:
        changes = ", ".join(f"{w} {d:+d}" for w, d in delta.items())
        on_event(f"~ {identity}: {changes}")


def dispatch(app: WordScraper, events: list[PendingEvent], on_event: Callable[[str], None] | None = None) -> None:
    """Deliver drained events to the session, one at a time."""
    for pending in events:
        try:
            identity = app.vault.relative(pending.path)
        except ValueError:
            continue

        if pending.kind == ChangeKind.CHANGED:
            _deliver_change(app, identity, pending.path, on_event)

        elif pending.kind == ChangeKind.DELETED:
            app.on_document_deleted(identity)
            if on_event:
                on_event(f"- {identity}")

        elif pending.kind == ChangeKind.RENAMED and pending.dest_path is not None:
            dest_identity = app.vault.relative(pending.dest_path)
            app.on_document_renamed(identity, dest_identity)
            if on_event:
                on_event(f"> {identity} -> {dest_identity}")
            if pending.modified:
                _deliver_change(app, dest_identity, pending.dest_path, on_event)


def watch_vault(app: WordScraper, recursive: bool = True) -> tuple[Observer, VaultChangeHandler]:
    """
    Start watching the session's vault.

    Returns:
        Tuple of (observer, handler) - caller should call observer.stop() to stop watching
    """
    handler = VaultChangeHandler(app.vault_path)
    observer = Observer()
    observer.schedule(handler, str(app.vault_path), recursive=recursive)
    observer.start()
    return observer, handler


def run_watch_loop(
    app: WordScraper,
    poll_interval: float = 0.5,
    on_event: Callable[[str], None] | None = None,
    stop: Callable[[], bool] | None = None,
) -> None:
    """
    Run the watch loop until interrupted.

    Each iteration dispatches ready events, then ticks the session
    (rollover check and due flush). On exit, pending work is flushed and
    state saved.
    """
    observer, handler = watch_vault(app)
    try:
        while stop is None or not stop():
            time.sleep(poll_interval)
            dispatch(app, handler.drain(), on_event)
            app.on_tick()
    except KeyboardInterrupt:
        pass
    finally:
        observer.stop()
        observer.join()
        dispatch(app, handler.drain(), on_event)
        app.shutdown()
