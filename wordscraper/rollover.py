"""
Daily rollover.

Detects when the local calendar date moves past the aggregate's date and
performs the reset-and-export transition.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Mapping

from .aggregate import AggregateStore
from .config import ConfigurationError
from .tracker import ChangeTracker

logger = logging.getLogger(__name__)


def local_date() -> str:
    """Today's date on the user's wall clock (not UTC), as YYYY-MM-DD."""
    return datetime.now().strftime("%Y-%m-%d")


class RolloverController:
    """
    Resets the aggregate when the day changes.

    Order on rollover: before_reset (flush/export the old day, given the old
    date and its frozen counts), store reset to the new date, tracker re-armed.
    """

    def __init__(
        self,
        store: AggregateStore,
        tracker: ChangeTracker,
        *,
        today: Callable[[], str] = local_date,
        before_reset: Callable[[str, Mapping[str, int]], None] | None = None,
    ):
        self.store = store
        self.tracker = tracker
        self.today = today
        self.before_reset = before_reset

    def is_due(self) -> bool:
        return self.today() != self.store.date

    def check(self) -> bool:
        """
        Roll over if the date changed.

        Returns:
            True if a rollover happened
        """
        new_date = self.today()
        old_date = self.store.date
        if new_date == old_date:
            return False

        logger.info(f"Day rollover {old_date} -> {new_date}")
        if self.before_reset is not None:
            frozen = dict(self.store.snapshot())
            try:
                self.before_reset(old_date, frozen)
            except (OSError, ConfigurationError) as e:
                logger.error(f"Export of {old_date} failed during rollover: {e}")

        self.store.reset(new_date)
        self.tracker.invalidate()
        return True
