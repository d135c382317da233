"""Pytest configuration and fixtures."""

from pathlib import Path
from typing import Callable

import pytest

from wordscraper.app import WordScraper


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeToday:
    """Settable local date."""

    def __init__(self, date: str = "2024-05-01"):
        self.date = date

    def __call__(self) -> str:
        return self.date


SENTIMENT = {"good": 3, "great": 3, "bad": -3, "sad": -2}


def fake_scorer(word: str) -> int:
    return SENTIMENT.get(word, 0)


@pytest.fixture
def vault_path(tmp_path: Path) -> Path:
    """An empty vault with an .obsidian marker folder."""
    vault = tmp_path / "vault"
    (vault / ".obsidian").mkdir(parents=True)
    return vault


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def today() -> FakeToday:
    return FakeToday()


@pytest.fixture
def make_app(vault_path: Path, clock: FakeClock, today: FakeToday) -> Callable[..., WordScraper]:
    """Build a session over the fixture vault with injected time and scorer."""

    def _make(**overrides: object) -> WordScraper:
        return WordScraper(
            vault_path,
            overrides=overrides or None,
            scorer=fake_scorer,
            today=today,
            clock=clock,
        )

    return _make
