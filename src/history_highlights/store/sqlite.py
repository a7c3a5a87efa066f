"""SQLite-backed history store."""

from __future__ import annotations

import logging
import os
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterable, Iterator

from history_highlights.exceptions import StoreError
from history_highlights.store.base import BaseHistoryStore, HighlightsTransaction, HistorySnapshot
from history_highlights.store.models import (
    BookmarkOverlay,
    FaviconRecord,
    HighlightsCacheEntry,
    HistoryEntry,
    PageMetadataRecord,
    VisitSummary,
)
from history_highlights.store.parser import (
    coerce_datetime,
    domain_of,
    parse_visit,
    to_micros,
    to_millis,
)
from history_highlights.store.schema import SCHEMA_VERSION, TABLES

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path(
    os.environ.get(
        "HISTORY_HIGHLIGHTS_DB",
        str(Path.home() / ".history-highlights" / "history.db"),
    )
)

_HISTORY_COLUMNS = "h.id AS id, h.url AS url, h.title AS title, h.guid AS guid, h.domain_id AS domain_id, d.domain AS domain"


class _SQLiteSnapshot(HistorySnapshot):
    """Read contracts bound to one connection, and so to one read transaction."""

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    def history_with_visits_older_than(self, cutoff: int) -> list[VisitSummary]:
        rows = self._conn.execute(
            f"""
            SELECT
                {_HISTORY_COLUMNS},
                (SELECT COUNT(1) FROM visits v WHERE v.site_id = h.id) AS visit_count,
                recent.latest_visit AS latest_visit
            FROM (
                SELECT site_id, MAX(date) AS latest_visit
                FROM visits
                WHERE date < ?
                GROUP BY site_id
            ) AS recent
            JOIN history h ON h.id = recent.site_id
            JOIN domains d ON d.id = h.domain_id
            ORDER BY recent.latest_visit DESC
            """,
            (cutoff,),
        ).fetchall()
        return [
            VisitSummary(
                entry=_history_entry(row),
                visit_count=int(row["visit_count"]),
                latest_visit=int(row["latest_visit"]),
            )
            for row in rows
        ]

    def favicon_for(self, history_id: int) -> FaviconRecord | None:
        row = self._conn.execute(
            """
            SELECT url, type, width, date FROM favicons
            WHERE site_id = ?
            ORDER BY COALESCE(width, 0) DESC, date DESC, id
            LIMIT 1
            """,
            (history_id,),
        ).fetchone()
        if row is None:
            return None
        return FaviconRecord(url=row["url"], type=row["type"], width=row["width"], date=row["date"])

    def metadata_for(self, url: str) -> PageMetadataRecord | None:
        row = self._conn.execute(
            """
            SELECT cache_key, title, media_url, type, description, provider_name
            FROM page_metadata WHERE cache_key = ?
            """,
            (url,),
        ).fetchone()
        if row is None:
            return None
        return PageMetadataRecord(**dict(row))

    def bookmarks_modified_since(
        self, timestamp: int
    ) -> list[tuple[BookmarkOverlay, HistoryEntry]]:
        rows = self._conn.execute(
            f"""
            SELECT
                {_HISTORY_COLUMNS},
                b.local_modified AS local_modified,
                b.server_modified AS server_modified
            FROM bookmarks b
            JOIN history h ON h.url = b.url
            JOIN domains d ON d.id = h.domain_id
            WHERE b.server_modified > ? OR b.local_modified > ?
            ORDER BY MAX(COALESCE(b.local_modified, 0), COALESCE(b.server_modified, 0)) DESC,
                     b.url
            """,
            (timestamp, timestamp),
        ).fetchall()
        return [
            (
                BookmarkOverlay(
                    url=row["url"],
                    local_modified=row["local_modified"],
                    server_modified=row["server_modified"],
                ),
                _history_entry(row),
            )
            for row in rows
        ]

    def is_bookmarked(self, url: str) -> bool:
        row = self._conn.execute("SELECT 1 FROM bookmarks WHERE url = ?", (url,)).fetchone()
        return row is not None

    def is_blocked(self, url: str) -> bool:
        row = self._conn.execute(
            "SELECT 1 FROM activity_stream_blocklist WHERE url = ?", (url,)
        ).fetchone()
        return row is not None


class _SQLiteHighlightsTransaction(HighlightsTransaction):
    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    def clear_highlights(self) -> None:
        self._conn.execute("DELETE FROM highlights")

    def insert_highlights(self, entries: list[HighlightsCacheEntry]) -> None:
        self._conn.executemany(
            """
            INSERT INTO highlights (
                url, position, history_id, title, guid, visit_count, visit_date,
                is_bookmarked, score, icon_url, icon_type, icon_width, icon_date,
                metadata_key, metadata_title, media_url, metadata_type,
                description, provider_name
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [_highlight_params(position, entry) for position, entry in enumerate(entries)],
        )


class SQLiteHistoryStore(BaseHistoryStore):
    """History store in a local SQLite file.

    A fresh connection is opened per operation, or per ``snapshot()`` scope.
    The database runs in WAL mode so readers see the last committed state
    while a writer is active.
    """

    def __init__(self, db_path: Path | None = None, timeout: float = 30.0):
        self.db_path = Path(db_path or DEFAULT_DB_PATH)
        self.timeout = timeout
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()

    def _connect(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(
                str(self.db_path), timeout=self.timeout, isolation_level=None
            )
        except sqlite3.Error as e:
            raise StoreError(f"Failed to open history store at {self.db_path}: {e}") from e
        try:
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA foreign_keys=ON")
            return conn
        except sqlite3.Error as e:
            conn.close()
            raise StoreError(f"Failed to configure history store at {self.db_path}: {e}") from e

    @contextmanager
    def _reading(self, what: str) -> Iterator[sqlite3.Connection]:
        conn = self._connect()
        try:
            yield conn
        except sqlite3.Error as e:
            raise StoreError(f"Failed to {what}: {e}") from e
        finally:
            conn.close()

    @contextmanager
    def _transaction(self, what: str, begin: str) -> Iterator[sqlite3.Connection]:
        conn = self._connect()
        try:
            conn.execute(begin)
            yield conn
            conn.execute("COMMIT")
        except BaseException as e:
            self._rollback(conn, what)
            if isinstance(e, sqlite3.Error):
                raise StoreError(f"Failed to {what}: {e}") from e
            raise
        finally:
            conn.close()

    def _writing(self, what: str):
        return self._transaction(what, "BEGIN IMMEDIATE")

    @staticmethod
    def _rollback(conn: sqlite3.Connection, what: str) -> None:
        """Roll back without masking the error that caused it."""
        try:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
        except sqlite3.Error as e:
            logger.warning("Rollback after failed %s also failed: %s", what, e)

    def _ensure_schema(self) -> None:
        with self._reading("initialize schema") as conn:
            conn.execute("PRAGMA journal_mode=WAL")
            version = conn.execute("PRAGMA user_version").fetchone()[0]
            if version > SCHEMA_VERSION:
                raise StoreError(
                    f"Unsupported history store schema version {version}, expected {SCHEMA_VERSION}"
                )
            for statement in TABLES:
                conn.execute(statement)
            conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")

    # ---- Query contracts ----

    @contextmanager
    def snapshot(self) -> Iterator[HistorySnapshot]:
        # A deferred BEGIN pins the WAL snapshot at the first read.
        with self._transaction("read history snapshot", "BEGIN") as conn:
            yield _SQLiteSnapshot(conn)

    def history_with_visits_older_than(self, cutoff: int) -> list[VisitSummary]:
        with self._reading("query visited history") as conn:
            return _SQLiteSnapshot(conn).history_with_visits_older_than(cutoff)

    def favicon_for(self, history_id: int) -> FaviconRecord | None:
        with self._reading("query favicon") as conn:
            return _SQLiteSnapshot(conn).favicon_for(history_id)

    def metadata_for(self, url: str) -> PageMetadataRecord | None:
        with self._reading("query page metadata") as conn:
            return _SQLiteSnapshot(conn).metadata_for(url)

    def bookmarks_modified_since(
        self, timestamp: int
    ) -> list[tuple[BookmarkOverlay, HistoryEntry]]:
        with self._reading("query recent bookmarks") as conn:
            return _SQLiteSnapshot(conn).bookmarks_modified_since(timestamp)

    def is_bookmarked(self, url: str) -> bool:
        with self._reading("query bookmarks") as conn:
            return _SQLiteSnapshot(conn).is_bookmarked(url)

    def insert_blocked(self, url: str) -> None:
        with self._writing("block url") as conn:
            conn.execute(
                "INSERT OR IGNORE INTO activity_stream_blocklist (url, created_at) VALUES (?, ?)",
                (url, to_micros(datetime.now())),
            )

    def is_blocked(self, url: str) -> bool:
        with self._reading("query blocklist") as conn:
            return _SQLiteSnapshot(conn).is_blocked(url)

    def read_highlights(self) -> list[HighlightsCacheEntry]:
        with self._reading("read highlights") as conn:
            rows = conn.execute("SELECT * FROM highlights ORDER BY position").fetchall()
        return [_highlight_from_row(row) for row in rows]

    @contextmanager
    def transaction(self) -> Iterator[HighlightsTransaction]:
        with self._writing("replace highlights") as conn:
            yield _SQLiteHighlightsTransaction(conn)

    # ---- Writes from browsing activity and sync ----

    def add_visit(
        self,
        url: str,
        visited_at: datetime | int | float | str,
        title: str | None = None,
    ) -> int:
        """Record a visit, creating the history entry if needed. Returns its id."""
        date = to_micros(coerce_datetime(visited_at))
        with self._writing("record visit") as conn:
            history_id = self._upsert_history(conn, url, title)
            conn.execute("INSERT INTO visits (site_id, date) VALUES (?, ?)", (history_id, date))
        return history_id

    def ingest_visits(self, raw_visits: Iterable[dict]) -> int:
        """Normalize and record raw visit rows in one transaction.

        Rows ``parse_visit`` rejects are skipped. Returns the number recorded.
        """
        parsed = [v for v in (parse_visit(raw) for raw in raw_visits) if v is not None]
        with self._writing("ingest visits") as conn:
            for visit in parsed:
                history_id = self._upsert_history(conn, visit.url, visit.title, visit.domain)
                conn.execute(
                    "INSERT INTO visits (site_id, date) VALUES (?, ?)",
                    (history_id, visit.visited_at),
                )
        logger.debug("Ingested %d visits", len(parsed))
        return len(parsed)

    def add_bookmark(
        self,
        url: str,
        local_modified: datetime | int | float | str | None = None,
        server_modified: datetime | int | float | str | None = None,
    ) -> None:
        local_ms = to_millis(coerce_datetime(local_modified)) if local_modified is not None else None
        server_ms = to_millis(coerce_datetime(server_modified)) if server_modified is not None else None
        with self._writing("record bookmark") as conn:
            conn.execute(
                """
                INSERT INTO bookmarks (url, local_modified, server_modified) VALUES (?, ?, ?)
                ON CONFLICT(url) DO UPDATE SET
                    local_modified = COALESCE(excluded.local_modified, local_modified),
                    server_modified = COALESCE(excluded.server_modified, server_modified)
                """,
                (url, local_ms, server_ms),
            )

    def add_favicon(
        self,
        page_url: str,
        icon_url: str,
        icon_type: int = 0,
        width: int | None = None,
        date: datetime | None = None,
    ) -> None:
        icon_date = to_millis(date or datetime.now())
        with self._writing("record favicon") as conn:
            history_id = self._upsert_history(conn, page_url, None)
            conn.execute(
                """
                INSERT INTO favicons (site_id, url, type, width, date) VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(site_id, url) DO UPDATE SET
                    type = excluded.type, width = excluded.width, date = excluded.date
                """,
                (history_id, icon_url, icon_type, width, icon_date),
            )

    def set_page_metadata(self, metadata: PageMetadataRecord) -> None:
        with self._writing("record page metadata") as conn:
            conn.execute(
                """
                INSERT OR REPLACE INTO page_metadata
                    (cache_key, title, media_url, type, description, provider_name)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    metadata.cache_key,
                    metadata.title,
                    metadata.media_url,
                    metadata.type,
                    metadata.description,
                    metadata.provider_name,
                ),
            )

    def _upsert_history(
        self,
        conn: sqlite3.Connection,
        url: str,
        title: str | None,
        domain: str | None = None,
    ) -> int:
        domain = domain or domain_of(url)
        if not domain:
            raise StoreError(f"Cannot derive a domain from {url!r}")
        conn.execute("INSERT OR IGNORE INTO domains (domain) VALUES (?)", (domain,))
        domain_id = conn.execute(
            "SELECT id FROM domains WHERE domain = ?", (domain,)
        ).fetchone()[0]
        conn.execute(
            """
            INSERT INTO history (guid, url, title, domain_id) VALUES (?, ?, ?, ?)
            ON CONFLICT(url) DO UPDATE SET
                title = CASE WHEN excluded.title != '' THEN excluded.title ELSE title END
            """,
            (uuid.uuid4().hex[:12], url, (title or "").strip(), domain_id),
        )
        return conn.execute("SELECT id FROM history WHERE url = ?", (url,)).fetchone()[0]


def _history_entry(row: sqlite3.Row) -> HistoryEntry:
    return HistoryEntry(
        id=row["id"],
        url=row["url"],
        title=row["title"] or "",
        guid=row["guid"],
        domain=row["domain"],
        domain_id=row["domain_id"],
    )


def _highlight_params(position: int, entry: HighlightsCacheEntry) -> tuple:
    icon = entry.favicon
    meta = entry.metadata
    return (
        entry.url,
        position,
        entry.history_id,
        entry.title,
        entry.guid,
        entry.visit_count,
        entry.visit_date,
        int(entry.is_bookmarked),
        entry.score,
        icon.url if icon else None,
        icon.type if icon else None,
        icon.width if icon else None,
        icon.date if icon else None,
        meta.cache_key if meta else None,
        meta.title if meta else None,
        meta.media_url if meta else None,
        meta.type if meta else None,
        meta.description if meta else None,
        meta.provider_name if meta else None,
    )


def _highlight_from_row(row: sqlite3.Row) -> HighlightsCacheEntry:
    favicon = None
    if row["icon_url"] is not None:
        favicon = FaviconRecord(
            url=row["icon_url"],
            type=row["icon_type"],
            width=row["icon_width"],
            date=row["icon_date"],
        )
    metadata = None
    if row["metadata_key"] is not None:
        metadata = PageMetadataRecord(
            cache_key=row["metadata_key"],
            title=row["metadata_title"],
            media_url=row["media_url"],
            type=row["metadata_type"],
            description=row["description"],
            provider_name=row["provider_name"],
        )
    return HighlightsCacheEntry(
        history_id=row["history_id"],
        url=row["url"],
        title=row["title"],
        guid=row["guid"],
        visit_count=row["visit_count"],
        visit_date=row["visit_date"],
        is_bookmarked=bool(row["is_bookmarked"]),
        score=row["score"],
        favicon=favicon,
        metadata=metadata,
    )
