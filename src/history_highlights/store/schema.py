"""SQLite schema for the history store.

Visit dates are microseconds since the Unix epoch; bookmark modification times
are milliseconds.
"""

SCHEMA_VERSION = 1

TABLES = [
    """
    CREATE TABLE IF NOT EXISTS domains (
        id INTEGER PRIMARY KEY,
        domain TEXT NOT NULL UNIQUE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS history (
        id INTEGER PRIMARY KEY,
        guid TEXT NOT NULL UNIQUE,
        url TEXT NOT NULL UNIQUE,
        title TEXT NOT NULL DEFAULT '',
        domain_id INTEGER NOT NULL REFERENCES domains(id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS visits (
        id INTEGER PRIMARY KEY,
        site_id INTEGER NOT NULL REFERENCES history(id) ON DELETE CASCADE,
        date INTEGER NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_visits_site_date ON visits (site_id, date)",
    """
    CREATE TABLE IF NOT EXISTS bookmarks (
        url TEXT PRIMARY KEY,
        local_modified INTEGER,
        server_modified INTEGER
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS favicons (
        id INTEGER PRIMARY KEY,
        site_id INTEGER NOT NULL REFERENCES history(id) ON DELETE CASCADE,
        url TEXT NOT NULL,
        type INTEGER NOT NULL DEFAULT 0,
        width INTEGER,
        date INTEGER,
        UNIQUE (site_id, url)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS page_metadata (
        cache_key TEXT PRIMARY KEY,
        title TEXT,
        media_url TEXT,
        type TEXT,
        description TEXT,
        provider_name TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS activity_stream_blocklist (
        url TEXT PRIMARY KEY,
        created_at INTEGER
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS highlights (
        url TEXT PRIMARY KEY,
        position INTEGER NOT NULL,
        history_id INTEGER NOT NULL,
        title TEXT NOT NULL,
        guid TEXT NOT NULL,
        visit_count INTEGER NOT NULL,
        visit_date INTEGER,
        is_bookmarked INTEGER NOT NULL DEFAULT 0,
        score INTEGER NOT NULL,
        icon_url TEXT,
        icon_type INTEGER,
        icon_width INTEGER,
        icon_date INTEGER,
        metadata_key TEXT,
        metadata_title TEXT,
        media_url TEXT,
        metadata_type TEXT,
        description TEXT,
        provider_name TEXT
    )
    """,
]
