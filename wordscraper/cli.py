"""CLI entrypoint for wordscraper."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__


def _auto_detect_vault(start: Path) -> Path | None:
    """Find an Obsidian vault (a folder holding .obsidian or .wordscraper) by walking up from `start`."""
    cur = start.resolve()
    for p in (cur, *cur.parents):
        if (p / ".obsidian").is_dir() or (p / ".wordscraper").is_dir():
            return p
    return None


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _overrides(**options: object) -> dict[str, object]:
    """Drop unset command-line options."""
    return {k: v for k, v in options.items() if v is not None}


@click.group()
@click.version_option(__version__, prog_name="wordscraper")
@click.option(
    "--vault",
    "-v",
    type=click.Path(exists=False, file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Path to the vault directory (defaults to the enclosing Obsidian vault)",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="warning",
    show_default=True,
    help="Logging verbosity",
)
@click.option(
    "--folder",
    "folder_path",
    type=str,
    default=None,
    help="Ledger folder inside the vault (overrides folderPath)",
)
@click.pass_context
def cli(ctx: click.Context, vault: Path | None, log_level: str, folder_path: str | None) -> None:
    """wordscraper - daily word-frequency ledger for your notes.

    Tracks which words you type, keeps a per-day WordScraper-YYYY-MM-DD.md
    ledger and optionally exports it to JSON with sentiment scores.
    """
    ctx.ensure_object(dict)
    _configure_logging(log_level)

    if vault is None:
        detected = _auto_detect_vault(Path.cwd())
        if detected is None:
            raise click.ClickException("Vault not found. Pass --vault /path/to/vault or run from inside one.")
        vault = detected

    if not vault.exists() or not vault.is_dir():
        raise click.BadParameter(f"Directory '{vault}' does not exist.", param_hint="--vault / -v")

    ctx.obj["vault"] = vault.resolve()
    ctx.obj["overrides"] = _overrides(folderPath=folder_path)


@cli.command()
@click.option(
    "--update-frequency",
    type=click.IntRange(min=1),
    default=None,
    help="Ledger flush delay in milliseconds (overrides updateFrequency)",
)
@click.option(
    "--poll-interval",
    type=click.FloatRange(min=0.05),
    default=0.5,
    show_default=True,
    help="Seconds between event dispatch and rollover checks",
)
@click.option("--verbose", is_flag=True, help="Print every counted change")
@click.pass_context
def watch(ctx: click.Context, update_frequency: int | None, poll_interval: float, verbose: bool) -> None:
    """Watch the vault and tally words as notes are saved.

    Runs until interrupted (Ctrl+C). The ledger is rewritten at most once
    per update frequency, and again on exit.

    Examples:

        wordscraper watch

        wordscraper -v ~/Notes watch --update-frequency 2000 --verbose
    """
    from .commands.watch_cmd import run_watch

    overrides = dict(ctx.obj["overrides"], **_overrides(updateFrequency=update_frequency))
    exit_code = run_watch(ctx.obj["vault"], overrides=overrides, poll_interval=poll_interval, verbose=verbose)
    sys.exit(exit_code)


@cli.command("open")
@click.option("--launch", is_flag=True, help="Open the ledger with the system editor")
@click.pass_context
def open_ledger(ctx: click.Context, launch: bool) -> None:
    """Open or create today's ledger file."""
    from .commands.ledger_cmd import run_open

    sys.exit(run_open(ctx.obj["vault"], overrides=ctx.obj["overrides"], launch=launch))


@cli.command()
@click.option(
    "--export-path",
    "json_export_path",
    type=str,
    default=None,
    help="Folder for the JSON file (overrides jsonExportPath)",
)
@click.pass_context
def export(ctx: click.Context, json_export_path: str | None) -> None:
    """Export the latest ledger to JSON with sentiment scores.

    Requires enableJsonExport. Overwrites an existing export of the same day.
    """
    from .commands.ledger_cmd import run_export

    overrides = dict(ctx.obj["overrides"], **_overrides(jsonExportPath=json_export_path))
    sys.exit(run_export(ctx.obj["vault"], overrides=overrides))


@cli.command()
@click.option("--force", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def reset(ctx: click.Context, force: bool) -> None:
    """Reset today's word counts and empty today's ledger."""
    from .commands.ledger_cmd import run_reset

    if not force:
        click.confirm("Erase today's word counts?", abort=True)
    sys.exit(run_reset(ctx.obj["vault"], overrides=ctx.obj["overrides"]))


@cli.command()
@click.option("--top", type=int, default=10, show_default=True, help="How many words to list")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def status(ctx: click.Context, top: int, output_json: bool) -> None:
    """Show today's tally and tracker state."""
    from .commands.ledger_cmd import run_status

    sys.exit(run_status(ctx.obj["vault"], overrides=ctx.obj["overrides"], top=top, output_json=output_json))


# -----------------------------------------------------------------------------
# Config commands
# -----------------------------------------------------------------------------


@cli.group()
def config() -> None:
    """Show or change settings.

    Settings are stored in .wordscraper/state.json. Values in
    .wordscraper/config.toml take precedence over stored ones.
    """
    pass


@config.command("show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Display effective settings."""
    from .commands.config_cmd import run_config_show

    sys.exit(run_config_show(ctx.obj["vault"]))


@config.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_context
def config_set(ctx: click.Context, key: str, value: str) -> None:
    """Change one setting.

    Use \\n inside VALUE to separate stopwords or excluded folders.

    Examples:

        wordscraper config set folderPath Journal/Words

        wordscraper config set stopwords "the\\na\\nand"

        wordscraper config set enableJsonExport true
    """
    from .commands.config_cmd import run_config_set

    sys.exit(run_config_set(ctx.obj["vault"], key, value))


# -----------------------------------------------------------------------------
# LSP server command
# -----------------------------------------------------------------------------


@cli.command("lsp")
@click.option(
    "--transport",
    type=click.Choice(["stdio", "tcp"]),
    default="stdio",
    show_default=True,
    help="Transport method (stdio for editors, tcp for debugging)",
)
@click.pass_context
def lsp(ctx: click.Context, transport: str) -> None:
    """Start the LSP server so an editor can report keystrokes directly.

    Every didChange carries the full note text, so words are counted as
    they are typed rather than on save.

    Examples:

        wordscraper -v ~/Notes lsp

        wordscraper -v ~/Notes lsp --transport tcp
    """
    from .lsp import start_server

    start_server(vault_path=ctx.obj.get("vault"), transport=transport)


def main() -> None:
    """Main entrypoint."""
    cli()


if __name__ == "__main__":
    main()
