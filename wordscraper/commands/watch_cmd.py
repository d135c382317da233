"""Watch command - track typing in the vault until interrupted."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any

from rich.console import Console

from ..app import WordScraper
from ..config import ConfigurationError
from ..watcher import run_watch_loop


def run_watch(
    vault_path: Path,
    *,
    overrides: dict[str, Any] | None = None,
    poll_interval: float = 0.5,
    verbose: bool = False,
) -> int:
    """
    Watch the vault for note changes and keep today's ledger current.

    This is a blocking command that runs until interrupted (Ctrl+C).
    """
    console = Console(stderr=True)

    try:
        app = WordScraper(vault_path, overrides=overrides)
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        return 1

    settings = app.settings
    console.print(f"[bold]Watching[/bold] {app.vault_path}")
    console.print(f"  Ledger: {app.ledger.path_for(app.store.date)}")
    console.print(f"  Flush delay: {settings.updateFrequency} ms")
    if settings.excluded_prefixes():
        console.print(f"  Excluded: {', '.join(settings.excluded_prefixes())}")
    if settings.stopword_list():
        console.print(f"  Stopwords: {len(settings.stopword_list())}")
    console.print()
    console.print("[dim]Press Ctrl+C to stop watching[/dim]")
    console.print()

    event_count = 0

    def on_event(formatted: str) -> None:
        nonlocal event_count
        event_count += 1
        if verbose:
            timestamp = datetime.now().strftime("%H:%M:%S")
            console.print(f"[dim]{timestamp}[/dim] {formatted}", highlight=False)

    run_watch_loop(app, poll_interval=poll_interval, on_event=on_event)

    console.print()
    console.print(
        f"[bold]Stopped.[/bold] {event_count} changes, "
        f"{len(app.store)} unique words today."
    )
    return 0
