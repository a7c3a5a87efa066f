"""Records read from the history store."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class HistoryEntry:
    """A page in history. ``url`` is unique per entry."""

    id: int
    url: str
    title: str
    guid: str
    domain: str
    domain_id: int


@dataclass(frozen=True)
class VisitSummary:
    """A history entry with its all-time visit count and latest pre-cutoff visit."""

    entry: HistoryEntry
    visit_count: int
    latest_visit: int  # microseconds since epoch


@dataclass(frozen=True)
class BookmarkOverlay:
    """A bookmarked URL; timestamps are milliseconds since epoch."""

    url: str
    local_modified: int | None = None
    server_modified: int | None = None

    @property
    def modified(self) -> int:
        return max(self.local_modified or 0, self.server_modified or 0)


@dataclass(frozen=True)
class FaviconRecord:
    url: str
    type: int
    width: int | None
    date: int | None


@dataclass(frozen=True)
class PageMetadataRecord:
    """Metadata scraped for a page, keyed by the page URL."""

    cache_key: str
    title: str | None = None
    media_url: str | None = None
    type: str | None = None
    description: str | None = None
    provider_name: str | None = None


@dataclass
class ParsedVisit:
    """A normalized visit row ready for ingestion."""

    url: str
    title: str
    domain: str
    visited_at: int  # microseconds since epoch


@dataclass(frozen=True)
class HighlightsCacheEntry:
    """A materialized, ready-to-render highlight row.

    Display fields are denormalized at repopulation time so a read is a single
    query against the cache table. Rows are only ever replaced as a whole set.
    """

    history_id: int
    url: str
    title: str
    guid: str
    visit_count: int
    visit_date: int | None
    is_bookmarked: bool
    score: int
    favicon: FaviconRecord | None = None
    metadata: PageMetadataRecord | None = None

    @property
    def cache_key(self) -> str:
        return self.url
