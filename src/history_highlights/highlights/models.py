"""Value types produced while computing highlights."""

from __future__ import annotations

from dataclasses import dataclass

from history_highlights.store.models import (
    FaviconRecord,
    HighlightsCacheEntry,
    HistoryEntry,
    PageMetadataRecord,
)

ICON_WEIGHT = 2
MEDIA_WEIGHT = 4


@dataclass(frozen=True)
class HighlightCandidate:
    """A scored page considered during one repopulation; never persisted."""

    entry: HistoryEntry
    visit_count: int
    latest_visit: int
    is_bookmarked: bool = False
    favicon: FaviconRecord | None = None
    metadata: PageMetadataRecord | None = None

    @property
    def has_icon(self) -> bool:
        return self.favicon is not None

    @property
    def has_media(self) -> bool:
        return self.metadata is not None and self.metadata.media_url is not None

    @property
    def score(self) -> int:
        return (
            self.visit_count
            * (ICON_WEIGHT if self.has_icon else 1)
            * (MEDIA_WEIGHT if self.has_media else 1)
        )

    def to_cache_entry(self) -> HighlightsCacheEntry:
        return HighlightsCacheEntry(
            history_id=self.entry.id,
            url=self.entry.url,
            title=self.entry.title,
            guid=self.entry.guid,
            visit_count=self.visit_count,
            visit_date=self.latest_visit,
            is_bookmarked=self.is_bookmarked,
            score=self.score,
            favicon=self.favicon,
            metadata=self.metadata,
        )


@dataclass(frozen=True)
class RecentBookmark:
    """A recently changed bookmark, ready to render."""

    history_id: int
    url: str
    title: str
    guid: str
    modified: int  # milliseconds since epoch
    favicon: FaviconRecord | None = None
    metadata: PageMetadataRecord | None = None
    is_bookmarked: bool = True


__all__ = ["HighlightCandidate", "HighlightsCacheEntry", "RecentBookmark"]
