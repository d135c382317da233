"""Config commands - show and change persisted settings."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.table import Table

from ..app import WordScraper
from ..config import ConfigurationError
from ..state import get_config_path


def run_config_show(vault_path: Path) -> int:
    """Display effective settings and where overrides come from."""
    try:
        app = WordScraper(vault_path)
    except ConfigurationError as e:
        Console(stderr=True).print(f"[red]{e}[/red]")
        return 1

    console = Console()
    table = Table(title="Settings")
    table.add_column("Key", style="bold")
    table.add_column("Value")
    stored = app.stored_settings.to_dict()
    for key, value in app.settings.to_dict().items():
        shown = repr(value) if isinstance(value, str) and "\n" in value else str(value)
        if value != stored.get(key):
            shown += " [dim](config.toml)[/dim]"
        table.add_row(key, shown)
    console.print(table)

    config_path = get_config_path(app.vault_path)
    if config_path.exists():
        console.print(f"[dim]Overrides from {config_path}[/dim]")
    return 0


def run_config_set(vault_path: Path, key: str, value: str) -> int:
    """Persist one setting in the state file."""
    console = Console(stderr=True)
    try:
        app = WordScraper(vault_path)
        settings = app.update_setting(key, value.replace("\\n", "\n"))
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        return 1

    console.print(f"{key} = {getattr(settings, key)!r}", style="green")
    return 0
