"""Caller-facing highlights operations with sync and async interfaces."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable

from history_highlights.highlights.blacklist import (
    DomainQualityBlacklist,
    load_quality_blacklist,
)
from history_highlights.highlights.blocklist import BlocklistManager
from history_highlights.highlights.bookmarks import RECENT_BOOKMARKS_LIMIT, RecentBookmarksView
from history_highlights.highlights.cache import HighlightsCache
from history_highlights.highlights.models import RecentBookmark
from history_highlights.highlights.scoring import ScoringEngine
from history_highlights.store.base import BaseHistoryStore
from history_highlights.store.models import HighlightsCacheEntry
from history_highlights.store.sqlite import SQLiteHistoryStore

logger = logging.getLogger(__name__)


class HighlightsEngine:
    """Highlights and recent bookmarks over a history store.

    Args:
        store: History store holding history, bookmarks and the cache tables.
        quality_blacklist: Hosts never surfaced. Defaults to the built-in list
            plus ``HISTORY_HIGHLIGHTS_EXTRA_BLACKLIST``.
        top_sites_refresher: Called by ``repopulate_all`` when top sites are
            invalidated. Top sites are maintained elsewhere.
    """

    def __init__(
        self,
        store: BaseHistoryStore,
        quality_blacklist: DomainQualityBlacklist | None = None,
        top_sites_refresher: Callable[[], None] | None = None,
    ):
        self.store = store
        self.blocklist = BlocklistManager(store)
        self.cache = HighlightsCache(store)
        if quality_blacklist is None:
            quality_blacklist = load_quality_blacklist()
        self.scoring = ScoringEngine(store, self.blocklist, quality_blacklist)
        self.recent_bookmarks = RecentBookmarksView(store, self.blocklist)
        self.top_sites_refresher = top_sites_refresher

    @classmethod
    def open(cls, db_path: Path | None = None, **kwargs) -> HighlightsEngine:
        """Engine over a SQLite store at ``db_path`` (or ``HISTORY_HIGHLIGHTS_DB``)."""
        return cls(SQLiteHistoryStore(db_path), **kwargs)

    def get_highlights(self) -> list[HighlightsCacheEntry]:
        """Cached highlights, best first. Reflects the last repopulation."""
        return self.cache.read()

    def get_recent_bookmarks(self, limit: int = RECENT_BOOKMARKS_LIMIT) -> list[RecentBookmark]:
        return self.recent_bookmarks.get(limit=limit)

    def remove_highlight(self, url: str) -> None:
        """Block ``url`` from future highlights.

        The current cache is left alone; the URL disappears at the next
        repopulation.
        """
        self.blocklist.block(url)

    def repopulate_highlights(self, now: datetime | None = None) -> list[HighlightsCacheEntry]:
        """Recompute highlights and atomically replace the cache."""
        entries = self.scoring.compute(now)
        self.cache.replace_all(entries)
        return entries

    def repopulate_all(
        self,
        invalidate_top_sites: bool,
        invalidate_highlights: bool,
    ) -> None:
        if invalidate_highlights:
            self.repopulate_highlights()
        if invalidate_top_sites:
            if self.top_sites_refresher is None:
                logger.debug("Top sites invalidated but no refresher configured")
            else:
                self.top_sites_refresher()

    # ---- Async wrappers (asyncio.to_thread) ----

    async def aget_highlights(self) -> list[HighlightsCacheEntry]:
        """Async version of get_highlights."""
        return await asyncio.to_thread(self.get_highlights)

    async def aget_recent_bookmarks(
        self, limit: int = RECENT_BOOKMARKS_LIMIT
    ) -> list[RecentBookmark]:
        """Async version of get_recent_bookmarks."""
        return await asyncio.to_thread(self.get_recent_bookmarks, limit)

    async def aremove_highlight(self, url: str) -> None:
        """Async version of remove_highlight."""
        return await asyncio.to_thread(self.remove_highlight, url)

    async def arepopulate_highlights(self) -> list[HighlightsCacheEntry]:
        """Async version of repopulate_highlights."""
        return await asyncio.to_thread(self.repopulate_highlights)

    async def arepopulate_all(
        self, invalidate_top_sites: bool, invalidate_highlights: bool
    ) -> None:
        """Async version of repopulate_all."""
        return await asyncio.to_thread(
            self.repopulate_all, invalidate_top_sites, invalidate_highlights
        )
