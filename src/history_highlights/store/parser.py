"""Parse raw history rows into normalized visit records."""

from __future__ import annotations

from datetime import datetime
from urllib.parse import urlparse

import dateutil.parser

from history_highlights.store.models import ParsedVisit


def parse_visit(
    raw: dict,
    max_url_length: int = 2000,
    max_title_length: int = 300,
) -> ParsedVisit | None:
    """Normalize one raw visit row; returns None for invalid rows."""
    url = (raw.get("url") or "").strip()
    if not url:
        return None
    if len(url) > max_url_length:
        url = url[:max_url_length]

    parsed = urlparse(url)
    if parsed.scheme not in {"http", "https"}:
        return None

    domain = normalize_domain(parsed.hostname or "")
    if not domain:
        return None

    try:
        visited_at = to_micros(coerce_datetime(raw.get("visited_at")))
    except (TypeError, ValueError, OverflowError):
        return None

    title = (raw.get("title") or "").strip()
    if len(title) > max_title_length:
        title = title[:max_title_length]

    return ParsedVisit(url=url, title=title, domain=domain, visited_at=visited_at)


def domain_of(url: str) -> str:
    return normalize_domain(urlparse(url).hostname or "")


def normalize_domain(host: str) -> str:
    domain = (host or "").strip().lower()
    if domain.startswith("www."):
        domain = domain[4:]
    return domain


def coerce_datetime(value: datetime | int | float | str | None) -> datetime:
    """Accept a datetime, epoch seconds or an ISO-8601 string."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value)
    if isinstance(value, str) and value.strip():
        return dateutil.parser.isoparse(value.strip())
    raise ValueError(f"Unusable timestamp: {value!r}")


def to_micros(dt: datetime) -> int:
    return int(dt.timestamp() * 1_000_000)


def to_millis(dt: datetime) -> int:
    return int(dt.timestamp() * 1_000)
