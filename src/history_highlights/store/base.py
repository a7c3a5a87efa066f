"""Abstract query contracts the highlights engine needs from a history store."""

from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager

from history_highlights.store.models import (
    BookmarkOverlay,
    FaviconRecord,
    HighlightsCacheEntry,
    HistoryEntry,
    PageMetadataRecord,
    VisitSummary,
)


class HistorySnapshot(ABC):
    """Read contracts over history, bookmarks, favicons, metadata and the blocklist."""

    @abstractmethod
    def history_with_visits_older_than(self, cutoff: int) -> list[VisitSummary]:
        """Entries with at least one visit before ``cutoff`` (microseconds).

        ``visit_count`` covers all visits; ``latest_visit`` only pre-cutoff ones.
        """
        ...

    @abstractmethod
    def favicon_for(self, history_id: int) -> FaviconRecord | None:
        """The widest icon recorded for a page, if any."""
        ...

    @abstractmethod
    def metadata_for(self, url: str) -> PageMetadataRecord | None:
        ...

    @abstractmethod
    def bookmarks_modified_since(
        self, timestamp: int
    ) -> list[tuple[BookmarkOverlay, HistoryEntry]]:
        """Bookmarks changed locally or remotely after ``timestamp`` (milliseconds),
        newest first, joined to their history entry."""
        ...

    @abstractmethod
    def is_bookmarked(self, url: str) -> bool:
        ...

    @abstractmethod
    def is_blocked(self, url: str) -> bool:
        ...


class HighlightsTransaction(ABC):
    """Cache writes that must commit or roll back together."""

    @abstractmethod
    def clear_highlights(self) -> None:
        ...

    @abstractmethod
    def insert_highlights(self, entries: list[HighlightsCacheEntry]) -> None:
        ...


class BaseHistoryStore(HistorySnapshot):
    """Abstract history store.

    The inherited read methods each see the latest committed state on their
    own. Reads that must agree with each other go through ``snapshot()``.
    Every method raises ``StoreError`` when the backing store fails.
    """

    @abstractmethod
    def snapshot(self) -> AbstractContextManager[HistorySnapshot]:
        """Scope reads to one consistent view of the store."""
        ...

    @abstractmethod
    def insert_blocked(self, url: str) -> None:
        """Add a URL to the blocklist; a no-op if already present."""
        ...

    @abstractmethod
    def read_highlights(self) -> list[HighlightsCacheEntry]:
        """Cached highlights in rank order, read as one snapshot."""
        ...

    @abstractmethod
    def transaction(self) -> AbstractContextManager[HighlightsTransaction]:
        """Scope cache writes; commits on clean exit, rolls back on any error."""
        ...
