import json
from pathlib import Path

from wordscraper.export import build_export, export_latest_ledger, export_path, write_export
from wordscraper.vault import VaultStore

from .conftest import fake_scorer


def test_export_scenario_single_word() -> None:
    document = build_export({"good": 1}, lambda word: 3 if word == "good" else 0)
    assert document == {"words": [{"id": 1, "word": "good", "frequency": 1, "sentiment": 3}]}


def test_export_excludes_non_positive_and_numbers_contiguously() -> None:
    document = build_export({"bad": 2, "zero": 0, "great": 1}, fake_scorer)
    assert document["words"] == [
        {"id": 1, "word": "bad", "frequency": 2, "sentiment": -3},
        {"id": 2, "word": "great", "frequency": 1, "sentiment": 3},
    ]


def test_export_path() -> None:
    assert export_path("", "WordScraper-2024-05-01") == "WordScraper-2024-05-01.json"
    assert export_path("/Exports/", "WordScraper-2024-05-01") == "Exports/WordScraper-2024-05-01.json"


def test_write_export_overwrites_existing_file(vault_path: Path) -> None:
    store = VaultStore(vault_path)
    target = vault_path / "WordScraper-2024-05-01.json"
    target.write_text("stale", encoding="utf-8")

    path = write_export(store, "", "WordScraper-2024-05-01", {"sad": 1}, fake_scorer)

    assert path == "WordScraper-2024-05-01.json"
    assert json.loads(target.read_text(encoding="utf-8")) == {
        "words": [{"id": 1, "word": "sad", "frequency": 1, "sentiment": -2}]
    }


def test_write_export_with_nothing_to_export(vault_path: Path) -> None:
    assert write_export(VaultStore(vault_path), "", "WordScraper-2024-05-01", {}, fake_scorer) is None
    assert list(vault_path.glob("*.json")) == []


def test_export_latest_ledger_reads_newest_file(vault_path: Path) -> None:
    store = VaultStore(vault_path)
    (vault_path / "Words").mkdir()
    (vault_path / "Exports").mkdir()
    (vault_path / "Words" / "WordScraper-2024-04-30.md").write_text("old: 1", encoding="utf-8")
    (vault_path / "Words" / "WordScraper-2024-05-01.md").write_text("good: 2\nday: 1", encoding="utf-8")

    path = export_latest_ledger(store, "Words", "Exports", fake_scorer)

    assert path == "Exports/WordScraper-2024-05-01.json"
    data = json.loads((vault_path / path).read_text(encoding="utf-8"))
    assert [w["word"] for w in data["words"]] == ["good", "day"]


def test_export_without_ledger_is_a_no_op(vault_path: Path) -> None:
    assert export_latest_ledger(VaultStore(vault_path), "", "", fake_scorer) is None
