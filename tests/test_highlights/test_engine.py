"""Tests for the highlights engine facade."""

import asyncio
import sqlite3
from datetime import datetime, timedelta
from unittest.mock import MagicMock, patch

import pytest

from history_highlights.exceptions import StoreError
from history_highlights.highlights.engine import HighlightsEngine
from history_highlights.store.sqlite import SQLiteHistoryStore, _SQLiteSnapshot


def _urls(entries):
    return [e.url for e in entries]


def test_highlights_empty_before_repopulation(engine, add_page):
    add_page("https://example.com")
    assert engine.get_highlights() == []


def test_repopulate_then_read(engine, add_page, now):
    add_page("https://a.com", favicon=True)
    add_page("https://b.com")
    computed = engine.repopulate_highlights(now)
    assert _urls(engine.get_highlights()) == ["https://a.com", "https://b.com"]
    assert engine.get_highlights() == computed


def test_repopulate_is_idempotent(engine, add_page, now):
    for i in range(6):
        add_page(f"https://site{i}.com", visits=1 + i % 2, minutes_ago=40 + i)
    engine.repopulate_highlights(now)
    first = engine.get_highlights()
    engine.repopulate_highlights(now)
    assert engine.get_highlights() == first


def test_removal_is_lazy(engine, add_page, now):
    add_page("https://a.com")
    add_page("https://b.com")
    engine.repopulate_highlights(now)

    engine.remove_highlight("https://a.com")
    assert "https://a.com" in _urls(engine.get_highlights())

    engine.repopulate_highlights(now)
    assert _urls(engine.get_highlights()) == ["https://b.com"]


def test_failed_repopulation_keeps_cache(engine, store, add_page, now):
    add_page("https://a.com")
    engine.repopulate_highlights(now)
    add_page("https://b.com")

    with patch.object(
        _SQLiteSnapshot, "favicon_for", side_effect=sqlite3.OperationalError("disk I/O error")
    ):
        with pytest.raises(StoreError, match="read history snapshot"):
            engine.repopulate_highlights(now)
    assert _urls(engine.get_highlights()) == ["https://a.com"]


def test_read_failure_is_an_error_not_empty(engine, store):
    with patch.object(store, "read_highlights", side_effect=StoreError("corrupt")):
        with pytest.raises(StoreError):
            engine.get_highlights()


def test_repopulate_all(store, add_page, now):
    refresher = MagicMock()
    engine = HighlightsEngine(store, top_sites_refresher=refresher)
    add_page("https://a.com", now=datetime.now())

    engine.repopulate_all(invalidate_top_sites=False, invalidate_highlights=True)
    assert _urls(engine.get_highlights()) == ["https://a.com"]
    refresher.assert_not_called()

    engine.repopulate_all(invalidate_top_sites=True, invalidate_highlights=False)
    refresher.assert_called_once_with()


def test_repopulate_all_without_refresher(engine):
    engine.repopulate_all(invalidate_top_sites=True, invalidate_highlights=False)
    assert engine.get_highlights() == []


def test_recent_bookmarks(engine, store):
    now = datetime.now()
    store.add_visit("https://saved.com", now - timedelta(days=10), title="Saved")
    store.add_bookmark("https://saved.com", local_modified=now - timedelta(days=2))
    assert [b.url for b in engine.get_recent_bookmarks()] == ["https://saved.com"]


def test_async_wrappers(engine, add_page):
    add_page("https://a.com", now=datetime.now())

    async def run():
        await engine.aremove_highlight("https://blocked.com")
        await engine.arepopulate_highlights()
        await engine.arepopulate_all(False, True)
        return await engine.aget_highlights(), await engine.aget_recent_bookmarks()

    highlights, bookmarks = asyncio.run(run())
    assert _urls(highlights) == ["https://a.com"]
    assert bookmarks == []


def test_open_uses_sqlite_store(tmp_path):
    engine = HighlightsEngine.open(tmp_path / "h.db")
    assert isinstance(engine.store, SQLiteHistoryStore)
    assert engine.get_highlights() == []
