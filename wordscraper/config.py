"""
Settings for wordscraper.

Keys use the camelCase names of the Obsidian plugin settings so an existing
data file can be reused. Sources, lowest precedence first:
built-in defaults, `settings` in .wordscraper/state.json, the optional
.wordscraper/config.toml, then command-line options.
"""

from __future__ import annotations

import tomllib
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

from .tokenizer import WordPattern


class ConfigurationError(ValueError):
    """A setting or configured location is unusable."""


@dataclass
class WordScraperSettings:
    """User-configurable options."""

    folderPath: str = ""
    excludedFolders: str = ""
    updateFrequency: int = 10000
    stopwords: str = ""
    enableJsonExport: bool = False
    jsonExportPath: str = ""
    enableAutomaticJsonExport: bool = False
    wordPattern: str = WordPattern.WORD.value
    lastUpdated: str = ""

    def stopword_list(self) -> list[str]:
        return [w.strip().lower() for w in self.stopwords.split("\n") if w.strip()]

    def excluded_prefixes(self) -> list[str]:
        return [p.strip() for p in self.excludedFolders.split("\n") if p.strip()]

    def export_folder(self) -> str:
        return self.jsonExportPath or self.folderPath

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "WordScraperSettings":
        """Build settings from a mapping; unknown keys are ignored, bad values rejected."""
        settings = cls()
        if not data:
            return settings
        if not isinstance(data, dict):
            raise ConfigurationError(f"Settings must be a table, got {type(data).__name__}")
        known = {f.name for f in fields(cls)}
        for key, value in data.items():
            if key in known:
                settings.set(key, value)
        return settings

    def merged(self, overrides: dict[str, Any] | None) -> "WordScraperSettings":
        """Return a copy with overrides applied."""
        merged = WordScraperSettings.from_dict(self.to_dict())
        for key, value in (overrides or {}).items():
            if value is not None:
                merged.set(key, value)
        return merged

    def set(self, key: str, value: Any) -> None:
        """Set one option, coercing strings from the command line."""
        types = {f.name: f.type for f in fields(self)}
        if key not in types:
            raise ConfigurationError(f"Unknown setting: {key}")
        setattr(self, key, _coerce(key, types[key], value))


def _coerce(key: str, type_name: Any, value: Any) -> Any:
    type_name = type_name if isinstance(type_name, str) else getattr(type_name, "__name__", "")
    if type_name == "bool":
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in ("1", "true", "yes", "on"):
            return True
        if text in ("0", "false", "no", "off"):
            return False
        raise ConfigurationError(f"{key} must be true or false, got {value!r}")
    if type_name == "int":
        try:
            number = int(value)
        except (TypeError, ValueError):
            raise ConfigurationError(f"{key} must be an integer, got {value!r}") from None
        if number <= 0:
            raise ConfigurationError(f"{key} must be positive, got {number}")
        return number
    text = "" if value is None else str(value)
    if key == "wordPattern":
        try:
            return WordPattern(text.strip().lower()).value
        except ValueError:
            choices = ", ".join(p.value for p in WordPattern)
            raise ConfigurationError(f"wordPattern must be one of: {choices}") from None
    # TOML multi-line strings and list values both map to newline-separated text
    if isinstance(value, list):
        return "\n".join(str(v) for v in value)
    return text


def load_config_file(path: Path) -> dict[str, Any]:
    """
    Load setting overrides from TOML.

    Missing file means no overrides.
    """
    if not path.exists():
        return {}
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigurationError(f"Failed to parse {path}: {e}") from e
    section = data.get("wordscraper", data)
    if not isinstance(section, dict):
        raise ConfigurationError(f"{path}: [wordscraper] must be a table")
    return section
