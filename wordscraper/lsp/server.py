"""
LSP host for a WordScraper session.

Provides:
- Editor-change notifications from didOpen/didChange (full document text)
- Deletion and rename tracking via workspace file operations
- A periodic tick on the server's event loop for rollover and flushing
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from urllib.parse import unquote, urlparse

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer

from .. import __version__
from ..app import WordScraper
from ..ledger import LEDGER_PREFIX
from ..vault import NOTE_EXTENSIONS

logger = logging.getLogger(__name__)

TICK_SECONDS = 0.5

_NOTE_FILTERS = lsp.FileOperationRegistrationOptions(
    filters=[lsp.FileOperationFilter(pattern=lsp.FileOperationPattern(glob="**/*.{md,txt}"))]
)


class WordScraperLanguageServer(LanguageServer):
    """Language server that feeds editor changes into a WordScraper session."""

    def __init__(self, vault_path: Path | None = None):
        super().__init__(
            name="wordscraper-lsp",
            version=__version__,
            text_document_sync_kind=lsp.TextDocumentSyncKind.Full,
        )
        self.app: WordScraper | None = None
        self._tick_task: asyncio.Task | None = None
        if vault_path:
            self.set_vault_path(vault_path)

    def set_vault_path(self, path: Path) -> None:
        """Open the session for a vault (once)."""
        if self.app is None:
            self.app = WordScraper(path)

    def identity_for(self, uri: str) -> str | None:
        """Vault-relative identity of a note URI, or None if it is not a tracked note."""
        if self.app is None:
            return None
        path = uri_to_path(uri)
        if path.suffix.lower() not in NOTE_EXTENSIONS or path.name.startswith(LEDGER_PREFIX):
            return None
        try:
            identity = self.app.vault.relative(path)
        except ValueError:
            return None
        if any(part.startswith(".") for part in identity.split("/")):
            return None
        return identity

    async def tick_forever(self) -> None:
        while True:
            await asyncio.sleep(TICK_SECONDS)
            if self.app is None:
                continue
            try:
                self.app.on_tick()
            except Exception:
                logger.exception("Tick failed")


def uri_to_path(uri: str) -> Path:
    """Convert a file URI to a Path."""
    parsed = urlparse(uri)
    # Handle Windows paths
    path = unquote(parsed.path)
    if path.startswith("/") and len(path) > 2 and path[2] == ":":
        path = path[1:]  # Remove leading slash for Windows paths
    return Path(path)


def create_server(vault_path: Path | None = None) -> WordScraperLanguageServer:
    """Create and configure the LSP server."""
    server = WordScraperLanguageServer(vault_path)

    def _content_changed(uri: str) -> None:
        identity = server.identity_for(uri)
        if identity is None or server.app is None:
            return
        document = server.workspace.get_text_document(uri)
        server.app.on_content_changed(identity, document.source)

    @server.feature(lsp.INITIALIZE)
    def initialize(params: lsp.InitializeParams) -> None:
        """Handle initialize - use the workspace root as the vault if none was given."""
        if server.app is None and params.root_uri:
            server.set_vault_path(uri_to_path(params.root_uri))

    @server.feature(lsp.INITIALIZED)
    async def initialized(params: lsp.InitializedParams) -> None:
        """Start the periodic tick on the server's own loop."""
        server._tick_task = asyncio.ensure_future(server.tick_forever())

    @server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
    def did_open(params: lsp.DidOpenTextDocumentParams) -> None:
        """Opening a note establishes its baseline."""
        _content_changed(params.text_document.uri)

    @server.feature(lsp.TEXT_DOCUMENT_DID_CHANGE)
    def did_change(params: lsp.DidChangeTextDocumentParams) -> None:
        """Every edit is diffed against the previous text."""
        _content_changed(params.text_document.uri)

    @server.feature(lsp.WORKSPACE_DID_DELETE_FILES, _NOTE_FILTERS)
    def did_delete_files(params: lsp.DeleteFilesParams) -> None:
        for f in params.files:
            identity = server.identity_for(f.uri)
            if identity and server.app is not None:
                server.app.on_document_deleted(identity)

    @server.feature(lsp.WORKSPACE_DID_RENAME_FILES, _NOTE_FILTERS)
    def did_rename_files(params: lsp.RenameFilesParams) -> None:
        for f in params.files:
            old_identity = server.identity_for(f.old_uri)
            new_identity = server.identity_for(f.new_uri)
            if server.app is None or old_identity is None:
                continue
            if new_identity is None:
                server.app.on_document_deleted(old_identity)
            else:
                server.app.on_document_renamed(old_identity, new_identity)

    @server.feature(lsp.SHUTDOWN)
    def shutdown(params: None) -> None:
        """Flush and persist before the client exits."""
        if server._tick_task is not None:
            server._tick_task.cancel()
        if server.app is not None:
            server.app.shutdown()

    return server


def start_server(vault_path: Path | None = None, transport: str = "stdio") -> None:
    """Start the LSP server.

    Args:
        vault_path: Path to the vault directory
        transport: Transport method ("stdio" or "tcp")
    """
    server = create_server(vault_path)

    if transport == "stdio":
        server.start_io()
    else:
        # TCP transport for debugging
        server.start_tcp("localhost", 2087)
