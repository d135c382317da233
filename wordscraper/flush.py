"""
Debounced ledger flush.

A single pending slot: the first on_dirty() arms a flush due `delay` seconds
later, further calls before it fires are absorbed. The host calls poll() on
every tick; there is no timer thread, so a flush never runs concurrently
with a notification handler.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from .config import ConfigurationError

logger = logging.getLogger(__name__)


class FlushScheduler:
    """Coalesces bursts of edits into one ledger write."""

    def __init__(
        self,
        flush: Callable[[], None],
        delay_ms: int = 10000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._flush = flush
        self.delay_ms = delay_ms
        self.clock = clock
        self._due_at: float | None = None

    @property
    def pending(self) -> bool:
        return self._due_at is not None

    @property
    def due_at(self) -> float | None:
        return self._due_at

    def on_dirty(self) -> None:
        """Mark the aggregate dirty; arms the slot if it is empty."""
        if self._due_at is None:
            self._due_at = self.clock() + self.delay_ms / 1000.0

    def poll(self) -> bool:
        """
        Fire the pending flush if its delay has elapsed.

        Returns:
            True if a flush was attempted
        """
        if self._due_at is None or self.clock() < self._due_at:
            return False
        self.flush_now()
        return True

    def flush_now(self) -> bool:
        """
        Write immediately and free the slot.

        Failures are logged; the aggregate is never touched here, and the
        next on_dirty() re-arms the slot.

        Returns:
            True if the write succeeded
        """
        self._due_at = None
        try:
            self._flush()
        except (OSError, ConfigurationError) as e:
            logger.error(f"Ledger flush failed: {e}")
            return False
        return True

    def cancel(self) -> None:
        self._due_at = None
