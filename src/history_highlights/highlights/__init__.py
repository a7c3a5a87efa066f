"""Highlights recommendation, cache and recent bookmarks."""

from history_highlights.highlights.engine import HighlightsEngine
from history_highlights.highlights.scoring import ScoringEngine
from history_highlights.highlights.cache import HighlightsCache
from history_highlights.highlights.blocklist import BlocklistManager
from history_highlights.highlights.bookmarks import RecentBookmarksView
from history_highlights.highlights.blacklist import DomainQualityBlacklist, load_quality_blacklist
from history_highlights.highlights.models import HighlightCandidate, HighlightsCacheEntry, RecentBookmark

__all__ = [
    "HighlightsEngine",
    "ScoringEngine",
    "HighlightsCache",
    "BlocklistManager",
    "RecentBookmarksView",
    "DomainQualityBlacklist",
    "load_quality_blacklist",
    "HighlightCandidate",
    "HighlightsCacheEntry",
    "RecentBookmark",
]
