"""
LSP host for live word tracking.

This module provides:
- LSP server that editors (Obsidian, VSCode, Neovim) can attach to
- Editor-change notifications with the full document text
- Periodic ledger flush and day rollover on the server loop
"""

from .server import create_server, start_server

__all__ = ["create_server", "start_server"]
