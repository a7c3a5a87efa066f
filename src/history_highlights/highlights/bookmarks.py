"""Recently changed bookmarks, queried live."""

from __future__ import annotations

from datetime import datetime, timedelta

from history_highlights.highlights.blocklist import BlocklistManager
from history_highlights.highlights.dedup import collapse_domains, collapse_urls
from history_highlights.highlights.models import RecentBookmark
from history_highlights.store.base import BaseHistoryStore, HistorySnapshot
from history_highlights.store.models import BookmarkOverlay, HistoryEntry
from history_highlights.store.parser import to_millis

RECENT_BOOKMARKS_WINDOW = timedelta(days=5)
RECENT_BOOKMARKS_LIMIT = 3


class RecentBookmarksView:
    """Bookmarks modified locally or remotely in the last five days.

    Titled, unblocked pages only; the newest bookmark per domain; newest first.
    Nothing is cached.
    """

    def __init__(
        self,
        store: BaseHistoryStore,
        blocklist: BlocklistManager,
        window: timedelta = RECENT_BOOKMARKS_WINDOW,
    ):
        self.store = store
        self.blocklist = blocklist
        self.window = window

    def get(
        self, limit: int = RECENT_BOOKMARKS_LIMIT, now: datetime | None = None
    ) -> list[RecentBookmark]:
        if limit <= 0:
            return []
        since = to_millis((now or datetime.now()) - self.window)
        with self.store.snapshot() as snapshot:
            rows = snapshot.bookmarks_modified_since(since)
            rows = collapse_urls(rows, url=lambda r: r[1].url)
            rows = [
                r for r in rows
                if r[1].title.strip() and not self.blocklist.is_blocked(r[1].url, snapshot)
            ]
            rows = collapse_domains(rows, domain=lambda r: r[1].domain, newest=lambda r: r[0].modified)
            return [self._display(snapshot, bookmark, entry) for bookmark, entry in rows[:limit]]

    def _display(
        self, snapshot: HistorySnapshot, bookmark: BookmarkOverlay, entry: HistoryEntry
    ) -> RecentBookmark:
        return RecentBookmark(
            history_id=entry.id,
            url=entry.url,
            title=entry.title,
            guid=entry.guid,
            modified=bookmark.modified,
            favicon=snapshot.favicon_for(entry.id),
            metadata=snapshot.metadata_for(entry.url),
        )
