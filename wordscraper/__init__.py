"""wordscraper - incremental daily word-frequency tracking for markdown vaults."""

__version__ = "0.1.0"
