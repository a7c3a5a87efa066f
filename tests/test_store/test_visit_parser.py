"""Tests for the raw visit parser."""

from datetime import datetime

from history_highlights.store.parser import parse_visit, normalize_domain, to_micros
from history_highlights.store.models import ParsedVisit


def test_parse_valid_visit():
    raw = {
        "url": "https://example.com/page",
        "title": "Example Page",
        "visited_at": "2024-01-01T12:00:00",
    }
    result = parse_visit(raw)
    assert result is not None
    assert isinstance(result, ParsedVisit)
    assert result.domain == "example.com"
    assert result.visited_at == to_micros(datetime(2024, 1, 1, 12, 0, 0))


def test_parse_filters_non_http():
    raw = {"url": "file:///Users/test/file.html", "visited_at": "2024-01-01T12:00:00"}
    assert parse_visit(raw) is None


def test_parse_strips_www():
    raw = {"url": "https://www.Example.com/", "title": "Example", "visited_at": "2024-01-01T12:00:00"}
    result = parse_visit(raw)
    assert result is not None
    assert result.domain == "example.com"


def test_parse_accepts_epoch_and_datetime():
    dt = datetime(2024, 1, 1, 12, 0, 0)
    assert parse_visit({"url": "https://a.com", "visited_at": dt}).visited_at == to_micros(dt)
    assert parse_visit({"url": "https://a.com", "visited_at": dt.timestamp()}).visited_at == to_micros(dt)


def test_parse_rejects_bad_timestamp():
    assert parse_visit({"url": "https://a.com", "visited_at": "not a date"}) is None
    assert parse_visit({"url": "https://a.com"}) is None


def test_parse_truncates_title():
    raw = {"url": "https://a.com", "title": "x" * 500, "visited_at": "2024-01-01"}
    assert len(parse_visit(raw).title) == 300


def test_parse_empty_url():
    assert parse_visit({"url": "", "visited_at": "2024-01-01"}) is None


def test_normalize_domain():
    assert normalize_domain(" WWW.Mozilla.org ") == "mozilla.org"
    assert normalize_domain("") == ""
