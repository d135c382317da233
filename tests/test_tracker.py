from wordscraper.aggregate import AggregateStore
from wordscraper.tracker import ChangeTracker, ObservedDocumentState, TrackerState, is_excluded


def _tracker(**kwargs) -> ChangeTracker:
    return ChangeTracker(AggregateStore("2024-05-01"), **kwargs)


def test_typing_scenario_with_stopwords() -> None:
    tracker = _tracker(stopwords=["the"])

    assert tracker.on_content_changed("note.md", "") is None
    assert tracker.state == TrackerState.TRACKING

    assert tracker.on_content_changed("note.md", "the cat sat") == {"cat": 1, "sat": 1}
    assert tracker.on_content_changed("note.md", "the cat sat on the mat") == {"on": 1, "mat": 1}

    assert dict(tracker.store.snapshot()) == {"cat": 1, "sat": 1, "on": 1, "mat": 1}


def test_deleting_words_and_clearing_the_document() -> None:
    store = AggregateStore("2024-05-01", {"cat": 2})
    tracker = ChangeTracker(store)
    tracker.on_content_changed("note.md", "cat cat")

    assert tracker.on_content_changed("note.md", "cat") == {"cat": -1}
    assert dict(store.snapshot()) == {"cat": 1}

    # Clearing is not counted as deleting every word
    assert tracker.on_content_changed("note.md", "") is None
    assert tracker.state == TrackerState.UNINITIALIZED
    assert dict(store.snapshot()) == {"cat": 1}


def test_first_notification_for_a_document_is_a_baseline() -> None:
    tracker = _tracker()
    long_text = "lorem ipsum dolor sit amet " * 100

    assert tracker.on_content_changed("existing.md", long_text) is None
    assert len(tracker.store) == 0
    assert tracker.tracked_identity == "existing.md"


def test_switching_documents_rebaselines() -> None:
    tracker = _tracker()
    tracker.on_content_changed("a.md", "one")
    tracker.on_content_changed("a.md", "one two")

    assert tracker.on_content_changed("b.md", "three four five") is None
    assert tracker.on_content_changed("b.md", "three four five six") == {"six": 1}
    assert dict(tracker.store.snapshot()) == {"two": 1, "six": 1}


def test_identical_content_twice_is_a_zero_delta() -> None:
    tracker = _tracker()
    tracker.on_content_changed("a.md", "same words here")
    assert tracker.on_content_changed("a.md", "same words here") == {}
    assert len(tracker.store) == 0


def test_empty_content_against_empty_baseline_stays_tracking() -> None:
    tracker = _tracker()
    tracker.on_content_changed("a.md", "")
    assert tracker.on_content_changed("a.md", "") == {}
    assert tracker.state == TrackerState.TRACKING


def test_excluded_documents_are_ignored_entirely() -> None:
    tracker = _tracker(excluded_prefixes=["Templates/", "", "Daily"])
    tracker.on_content_changed("note.md", "hello")

    assert tracker.on_content_changed("Templates/t.md", "hello world") is None
    assert tracker.on_content_changed("Daily/2024.md", "hello world") is None

    assert tracker.tracked_identity == "note.md"
    assert tracker.on_content_changed("note.md", "hello there") == {"there": 1}


def test_stopwords_never_appear_in_deltas() -> None:
    tracker = _tracker(stopwords=["The", "a"])
    tracker.on_content_changed("n.md", "")
    delta = tracker.on_content_changed("n.md", "THE cat and a dog, the end")
    assert "the" not in delta and "a" not in delta
    delta = tracker.on_content_changed("n.md", "cat")
    assert "the" not in delta and "a" not in delta


def test_deletion_of_tracked_document_rearms() -> None:
    tracker = _tracker()
    tracker.on_content_changed("a.md", "one")

    assert tracker.on_document_deleted("other.md") is False
    assert tracker.state == TrackerState.TRACKING

    assert tracker.on_document_deleted("a.md") is True
    assert tracker.state == TrackerState.UNINITIALIZED
    assert tracker.on_content_changed("a.md", "one two three") is None


def test_rename_keeps_the_baseline() -> None:
    tracker = _tracker()
    tracker.on_content_changed("old.md", "one")
    tracker.on_document_renamed("old.md", "new.md")

    assert tracker.tracked_identity == "new.md"
    assert tracker.on_content_changed("new.md", "one two") == {"two": 1}


def test_resume_from_restored_observed_state() -> None:
    observed = ObservedDocumentState("a.md", "one two", initialized=True)
    tracker = ChangeTracker(AggregateStore("2024-05-01", {"one": 1, "two": 1}), observed=observed)

    assert tracker.on_content_changed("a.md", "one two three") == {"three": 1}
    assert dict(tracker.store.snapshot()) == {"one": 1, "two": 1, "three": 1}


def test_configure_changes_stopwords_without_rebaselining() -> None:
    tracker = _tracker()
    tracker.on_content_changed("a.md", "")
    tracker.configure(stopwords=["cat"])
    assert tracker.on_content_changed("a.md", "cat dog") == {"dog": 1}


def test_is_excluded() -> None:
    assert is_excluded("Archive/x.md", ["Archive"])
    assert not is_excluded("Notes/x.md", ["Archive"])
    assert not is_excluded("Notes/x.md", [])
