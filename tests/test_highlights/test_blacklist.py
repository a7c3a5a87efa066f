"""Tests for the domain quality blacklist."""

import dataclasses

import pytest

from history_highlights.highlights.blacklist import (
    DEFAULT_BLACKLISTED_HOSTS,
    DomainQualityBlacklist,
    load_quality_blacklist,
)


def test_defaults_loaded(monkeypatch):
    monkeypatch.delenv("HISTORY_HIGHLIGHTS_EXTRA_BLACKLIST", raising=False)
    blacklist = load_quality_blacklist()
    assert len(blacklist) == len(DEFAULT_BLACKLISTED_HOSTS)
    assert "google.com" in blacklist
    assert "mail.google.com" in blacklist


def test_exact_match_only():
    blacklist = load_quality_blacklist("")
    assert "docs.google.com" not in blacklist
    assert "WWW.Google.com" in blacklist


def test_extra_hosts_from_env(monkeypatch):
    monkeypatch.setenv("HISTORY_HIGHLIGHTS_EXTRA_BLACKLIST", "bit.ly, www.facebook.com ,")
    blacklist = load_quality_blacklist()
    assert "bit.ly" in blacklist
    assert "facebook.com" in blacklist


def test_is_immutable():
    blacklist = DomainQualityBlacklist.from_hosts(["a.com"])
    with pytest.raises(dataclasses.FrozenInstanceError):
        blacklist.hosts = frozenset()
    assert 42 not in blacklist
