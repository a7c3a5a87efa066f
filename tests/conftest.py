"""Shared fixtures: a real SQLite history store under tmp_path."""

from datetime import datetime, timedelta

import pytest

from history_highlights.highlights.blacklist import load_quality_blacklist
from history_highlights.highlights.engine import HighlightsEngine
from history_highlights.store.models import PageMetadataRecord
from history_highlights.store.sqlite import SQLiteHistoryStore

NOW = datetime(2024, 6, 1, 12, 0, 0)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def store(tmp_path):
    return SQLiteHistoryStore(tmp_path / "history.db")


@pytest.fixture
def engine(store):
    return HighlightsEngine(store, quality_blacklist=load_quality_blacklist(""))


@pytest.fixture
def add_page(store):
    """Record a page with ``visits`` visits, the latest ``minutes_ago`` before NOW."""

    def _add(
        url,
        title="Page",
        visits=1,
        minutes_ago=60,
        favicon=False,
        media=False,
        now=NOW,
    ):
        for i in range(visits):
            store.add_visit(url, now - timedelta(minutes=minutes_ago + i), title=title)
        if favicon:
            store.add_favicon(url, f"{url}/favicon.ico", width=32)
        if media:
            store.set_page_metadata(
                PageMetadataRecord(
                    cache_key=url,
                    title=title,
                    media_url=f"{url}/image.png",
                    type="article",
                    description="",
                    provider_name="Example",
                )
            )

    return _add
