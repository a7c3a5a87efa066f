"""Tests for the recent bookmarks view."""

from datetime import timedelta

import pytest

from history_highlights.highlights.blocklist import BlocklistManager
from history_highlights.highlights.bookmarks import RecentBookmarksView


@pytest.fixture
def view(store):
    return RecentBookmarksView(store, BlocklistManager(store))


def _bookmark(store, now, url, title="Saved", days_ago=1, remote=False):
    store.add_visit(url, now - timedelta(days=30), title=title)
    when = now - timedelta(days=days_ago)
    if remote:
        store.add_bookmark(url, server_modified=when)
    else:
        store.add_bookmark(url, local_modified=when)


def test_recent_bookmark_included_old_excluded(view, store, now):
    _bookmark(store, now, "https://recent.com", days_ago=2)
    _bookmark(store, now, "https://stale.com", days_ago=10)
    assert [b.url for b in view.get(now=now)] == ["https://recent.com"]


def test_remote_modification_counts(view, store, now):
    _bookmark(store, now, "https://synced.com", days_ago=1, remote=True)
    [bookmark] = view.get(now=now)
    assert bookmark.is_bookmarked
    assert bookmark.title == "Saved"


def test_newer_of_local_and_remote_used(view, store, now):
    store.add_visit("https://both.com", now - timedelta(days=30), title="Both")
    store.add_bookmark(
        "https://both.com",
        local_modified=now - timedelta(days=20),
        server_modified=now - timedelta(days=1),
    )
    [bookmark] = view.get(now=now)
    assert bookmark.url == "https://both.com"


def test_empty_title_and_blocked_excluded(view, store, now):
    _bookmark(store, now, "https://untitled.com", title="")
    _bookmark(store, now, "https://blocked.com")
    store.insert_blocked("https://blocked.com")
    assert view.get(now=now) == []


def test_one_per_domain_newest_first_limited(view, store, now):
    _bookmark(store, now, "https://a.com/old", days_ago=3)
    _bookmark(store, now, "https://a.com/new", days_ago=1)
    _bookmark(store, now, "https://b.com", days_ago=2)
    _bookmark(store, now, "https://c.com", days_ago=2.5)
    _bookmark(store, now, "https://d.com", days_ago=4)

    bookmarks = view.get(now=now)
    assert [b.url for b in bookmarks] == ["https://a.com/new", "https://b.com", "https://c.com"]
    assert view.get(limit=1, now=now)[0].url == "https://a.com/new"
    assert view.get(limit=0, now=now) == []


def test_carries_favicon(view, store, now):
    _bookmark(store, now, "https://a.com")
    store.add_favicon("https://a.com", "https://a.com/icon.png", width=32)
    [bookmark] = view.get(now=now)
    assert bookmark.favicon.url == "https://a.com/icon.png"
    assert bookmark.metadata is None
