from wordscraper.aggregate import AggregateStore
from wordscraper.rollover import RolloverController, local_date
from wordscraper.tracker import ChangeTracker, TrackerState

from .conftest import FakeToday


def test_no_rollover_on_same_day() -> None:
    store = AggregateStore("2024-05-01", {"cat": 1})
    tracker = ChangeTracker(store)
    controller = RolloverController(store, tracker, today=FakeToday("2024-05-01"))

    assert controller.check() is False
    assert dict(store.snapshot()) == {"cat": 1}


def test_rollover_exports_before_reset_then_rearms_tracker() -> None:
    today = FakeToday("2024-05-01")
    store = AggregateStore("2024-05-01")
    tracker = ChangeTracker(store)
    seen: list[tuple[str, dict[str, int]]] = []
    controller = RolloverController(store, tracker, today=today, before_reset=lambda d, f: seen.append((d, dict(f))))

    tracker.on_content_changed("a.md", "")
    tracker.on_content_changed("a.md", "late night words")

    today.date = "2024-05-02"
    assert controller.is_due()
    assert controller.check() is True

    assert seen == [("2024-05-01", {"late": 1, "night": 1, "words": 1})]
    assert store.date == "2024-05-02"
    assert len(store) == 0
    assert tracker.state == TrackerState.UNINITIALIZED


def test_words_before_rollover_do_not_leak_into_new_day() -> None:
    today = FakeToday("2024-05-01")
    store = AggregateStore("2024-05-01")
    tracker = ChangeTracker(store)
    controller = RolloverController(store, tracker, today=today)

    tracker.on_content_changed("a.md", "")
    tracker.on_content_changed("a.md", "yesterday")
    today.date = "2024-05-02"
    controller.check()

    # Same document keeps growing: first notice after rollover is a baseline
    assert tracker.on_content_changed("a.md", "yesterday today") is None
    assert tracker.on_content_changed("a.md", "yesterday today more") == {"more": 1}
    assert dict(store.snapshot()) == {"more": 1}


def test_failed_export_does_not_block_rollover() -> None:
    today = FakeToday("2024-05-01")
    store = AggregateStore("2024-05-01", {"cat": 1})

    def failing(date: str, freq: dict) -> None:
        raise OSError("disk full")

    controller = RolloverController(store, ChangeTracker(store), today=today, before_reset=failing)
    today.date = "2024-05-02"
    assert controller.check() is True
    assert len(store) == 0


def test_local_date_format() -> None:
    value = local_date()
    assert len(value) == 10 and value[4] == "-" and value[7] == "-"
