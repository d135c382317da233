"""
Change tracker for the single active document.

Decides, for each editor-change notification, whether the content is a new
baseline or an edit to diff against the previous baseline, and drives the
tokenizer -> differ -> aggregate pipeline.

States:
- UNINITIALIZED: no baseline for the tracked document
- TRACKING: baseline established, next notification is diffed
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .aggregate import AggregateStore
from .differ import diff
from .tokenizer import WordPattern, normalize_stopwords, tokenize

logger = logging.getLogger(__name__)


class TrackerState(str, Enum):
    """Tracker states."""

    UNINITIALIZED = "uninitialized"
    TRACKING = "tracking"


@dataclass
class ObservedDocumentState:
    """The text content as of the last successful diff."""

    document_identity: str = ""
    baseline_content: str = ""
    initialized: bool = False


def is_excluded(document_identity: str, excluded_prefixes: Iterable[str]) -> bool:
    """Check whether a document path starts with any excluded prefix."""
    return any(prefix and document_identity.startswith(prefix) for prefix in excluded_prefixes)


class ChangeTracker:
    """
    Per-document controller feeding deltas into the aggregate store.

    Calls must be serialized by the caller; a notification is fully applied
    before the next one is handled.
    """

    def __init__(
        self,
        store: AggregateStore,
        *,
        stopwords: Iterable[str] = (),
        excluded_prefixes: Iterable[str] = (),
        pattern: WordPattern | str = WordPattern.WORD,
        observed: ObservedDocumentState | None = None,
    ):
        self.store = store
        self.stopwords = normalize_stopwords(stopwords)
        self.excluded_prefixes = [p for p in excluded_prefixes if p]
        self.pattern = WordPattern(pattern)
        self.observed = observed or ObservedDocumentState()

    @property
    def state(self) -> TrackerState:
        return TrackerState.TRACKING if self.observed.initialized else TrackerState.UNINITIALIZED

    @property
    def tracked_identity(self) -> str | None:
        return self.observed.document_identity or None

    def configure(
        self,
        *,
        stopwords: Iterable[str] | None = None,
        excluded_prefixes: Iterable[str] | None = None,
        pattern: WordPattern | str | None = None,
    ) -> None:
        """Swap tokenization settings without touching the baseline."""
        if stopwords is not None:
            self.stopwords = normalize_stopwords(stopwords)
        if excluded_prefixes is not None:
            self.excluded_prefixes = [p for p in excluded_prefixes if p]
        if pattern is not None:
            self.pattern = WordPattern(pattern)

    def _baseline(self, document_identity: str, content: str) -> None:
        self.observed = ObservedDocumentState(
            document_identity=document_identity,
            baseline_content=content,
            initialized=True,
        )

    def on_content_changed(self, document_identity: str, content: str) -> dict[str, int] | None:
        """
        Handle an editor-change notification.

        Empty content re-arms the tracker only when it clears a non-empty
        baseline; against an empty baseline it is a zero delta.

        Returns:
            The delta applied to the store (possibly empty), or None if the
            notification was ignored or only (re)established a baseline
        """
        if is_excluded(document_identity, self.excluded_prefixes):
            logger.debug(f"Ignoring excluded document {document_identity}")
            return None

        if not self.observed.initialized or document_identity != self.observed.document_identity:
            logger.debug(f"Baseline established for {document_identity}")
            self._baseline(document_identity, content)
            return None

        if not content and self.observed.baseline_content:
            # Cleared document: treated as an external clear, no deletions counted
            logger.debug(f"Document {document_identity} cleared; tracker re-armed")
            self.invalidate()
            return None

        old_tokens = tokenize(self.observed.baseline_content, self.stopwords, self.pattern)
        new_tokens = tokenize(content, self.stopwords, self.pattern)
        delta = diff(old_tokens, new_tokens)
        self.store.apply_delta(delta)
        self.observed.baseline_content = content
        return delta

    def on_document_deleted(self, document_identity: str) -> bool:
        """Invalidate the baseline if the tracked document was deleted."""
        if document_identity and document_identity == self.observed.document_identity:
            self.invalidate()
            return True
        return False

    def on_document_renamed(self, old_identity: str, new_identity: str) -> None:
        """Follow a rename of the tracked document without re-baselining."""
        if old_identity == self.observed.document_identity:
            self.observed.document_identity = new_identity

    def invalidate(self) -> None:
        """Force UNINITIALIZED; the next notification re-baselines."""
        self.observed.initialized = False
