"""History store contracts and the SQLite implementation."""

from history_highlights.store.base import BaseHistoryStore, HighlightsTransaction, HistorySnapshot
from history_highlights.store.sqlite import SQLiteHistoryStore
from history_highlights.store.parser import parse_visit
from history_highlights.store.models import (
    BookmarkOverlay,
    FaviconRecord,
    HighlightsCacheEntry,
    HistoryEntry,
    PageMetadataRecord,
    ParsedVisit,
    VisitSummary,
)

__all__ = [
    "BaseHistoryStore",
    "HighlightsTransaction",
    "HistorySnapshot",
    "SQLiteHistoryStore",
    "parse_visit",
    "BookmarkOverlay",
    "FaviconRecord",
    "HighlightsCacheEntry",
    "HistoryEntry",
    "PageMetadataRecord",
    "ParsedVisit",
    "VisitSummary",
]
