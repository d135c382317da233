"""Ledger commands - open, export, reset and inspect today's tally."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from ..app import WordScraper
from ..config import ConfigurationError


def run_open(vault_path: Path, *, overrides: dict[str, Any] | None = None, launch: bool = False) -> int:
    """Open or create today's ledger and print its path."""
    console = Console(stderr=True)
    try:
        app = WordScraper(vault_path, overrides=overrides)
        path, created = app.open_daily_ledger()
    except ConfigurationError as e:
        console.print(f"[red]Failed to open or create daily word file: {e}[/red]")
        return 1

    if created:
        console.print(f"Created {path}", style="green")
    print(path)
    if launch:
        click.launch(str(path))
    return 0


def run_export(vault_path: Path, *, overrides: dict[str, Any] | None = None) -> int:
    """Export the latest ledger to JSON."""
    console = Console(stderr=True)
    try:
        app = WordScraper(vault_path, overrides=overrides)
        path = app.export_to_json()
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        return 1

    if path is None:
        console.print("[dim]No ledger to export.[/dim]")
        return 0
    console.print(f"JSON file {path} created", style="green")
    return 0


def run_reset(vault_path: Path, *, overrides: dict[str, Any] | None = None) -> int:
    """Reset today's tally and empty today's ledger."""
    console = Console(stderr=True)
    try:
        app = WordScraper(vault_path, overrides=overrides)
        cleared = app.reset_today()
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        return 1

    console.print(f"Reset word counts for {app.store.date}", style="green")
    if not cleared:
        console.print("[yellow]No daily ledger file to reset.[/yellow]")
    return 0


def run_status(
    vault_path: Path,
    *,
    overrides: dict[str, Any] | None = None,
    top: int = 10,
    output_json: bool = False,
) -> int:
    """Show today's tally and tracker state."""
    try:
        app = WordScraper(vault_path, overrides=overrides)
    except ConfigurationError as e:
        Console(stderr=True).print(f"[red]{e}[/red]")
        return 1

    status = app.status(top=top)

    if output_json:
        print(
            json.dumps(
                {
                    "date": status.date,
                    "unique_words": status.unique_words,
                    "total_words": status.total_words,
                    "tracker_state": status.tracker_state.value,
                    "tracked_document": status.tracked_document,
                    "flush_pending": status.flush_pending,
                    "ledger": status.ledger_path,
                    "top_words": [{"word": w, "count": c} for w, c in status.top_words],
                },
                indent=2,
            )
        )
        return 0

    console = Console()
    table = Table(title=f"WordScraper {status.date}")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Unique words", str(status.unique_words))
    table.add_row("Total words", str(status.total_words))
    table.add_row("Tracker", status.tracker_state.value)
    table.add_row("Document", status.tracked_document or "-")
    table.add_row("Ledger", status.ledger_path)
    console.print(table)

    if status.top_words:
        words = Table(title="Top words")
        words.add_column("Word")
        words.add_column("Count", justify="right")
        for word, count in status.top_words:
            words.add_row(word, str(count))
        console.print(words)
    return 0
