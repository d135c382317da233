"""
Hierarchical file store rooted at the vault directory.

Paths are vault-relative POSIX strings ("Daily/WordScraper-2024-05-01.md").
Folders are never created implicitly: writing into a missing folder is a
configuration error, and nothing is left behind when it happens.
"""

from __future__ import annotations

from pathlib import Path

from .config import ConfigurationError

NOTE_EXTENSIONS = {".md", ".txt"}


def normalize_path(path: str) -> str:
    """Strip leading/trailing separators and collapse backslashes."""
    return path.replace("\\", "/").strip("/")


class VaultStore:
    """Create, read, modify and delete files inside a vault."""

    def __init__(self, root: Path):
        self.root = root.resolve()

    def resolve(self, path: str) -> Path:
        rel = normalize_path(path)
        full = (self.root / rel).resolve() if rel else self.root
        if full != self.root and self.root not in full.parents:
            raise ConfigurationError(f"Path escapes the vault: {path}")
        return full

    def relative(self, path: Path) -> str:
        """Vault-relative identity for an absolute path."""
        return path.resolve().relative_to(self.root).as_posix()

    def exists(self, path: str) -> bool:
        return self.resolve(path).is_file()

    def folder_exists(self, path: str) -> bool:
        return self.resolve(path).is_dir()

    def _require_parent(self, full: Path) -> None:
        if not full.parent.is_dir():
            folder = full.parent.relative_to(self.root).as_posix() if full.parent != self.root else "/"
            raise ConfigurationError(f"Folder does not exist: {folder}")

    def _write(self, full: Path, content: str) -> None:
        # Write atomically (write to temp, then rename)
        temp_path = full.with_name(full.name + ".tmp")
        try:
            temp_path.write_text(content, encoding="utf-8")
            temp_path.replace(full)
        finally:
            if temp_path.exists():
                temp_path.unlink()

    def create(self, path: str, content: str = "") -> str:
        """Create a new file. Fails if it already exists or its folder is missing."""
        full = self.resolve(path)
        self._require_parent(full)
        if full.exists():
            raise FileExistsError(f"File already exists: {normalize_path(path)}")
        self._write(full, content)
        return normalize_path(path)

    def modify(self, path: str, content: str) -> None:
        """Replace the content of an existing file."""
        full = self.resolve(path)
        if not full.is_file():
            raise FileNotFoundError(f"File not found: {normalize_path(path)}")
        self._write(full, content)

    def write(self, path: str, content: str) -> None:
        """Create or overwrite a file (its folder must exist)."""
        full = self.resolve(path)
        self._require_parent(full)
        self._write(full, content)

    def read(self, path: str) -> str:
        return self.resolve(path).read_text(encoding="utf-8")

    def delete(self, path: str) -> None:
        self.resolve(path).unlink()

    def list_files(self, folder: str = "") -> list[str]:
        """Vault-relative paths of the files directly inside a folder."""
        full = self.resolve(folder)
        if not full.is_dir():
            return []
        return sorted(self.relative(p) for p in full.iterdir() if p.is_file())
