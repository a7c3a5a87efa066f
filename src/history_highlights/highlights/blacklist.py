"""Fixed list of low-value hosts never surfaced as highlights."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable

from history_highlights.store.parser import normalize_domain

DEFAULT_BLACKLISTED_HOSTS = (
    "google.com",
    "google.ca",
    "calendar.google.com",
    "mail.google.com",
    "mail.yahoo.com",
    "search.yahoo.com",
    "localhost",
    "t.co",
)

EXTRA_BLACKLIST_ENV = "HISTORY_HIGHLIGHTS_EXTRA_BLACKLIST"


@dataclass(frozen=True)
class DomainQualityBlacklist:
    """Immutable set of hosts excluded from scoring. Matching is exact, so
    ``mail.google.com`` must be listed even though ``google.com`` is."""

    hosts: frozenset[str]

    @classmethod
    def from_hosts(cls, hosts: Iterable[str]) -> DomainQualityBlacklist:
        return cls(frozenset(d for d in (normalize_domain(h) for h in hosts) if d))

    def __contains__(self, domain: object) -> bool:
        return isinstance(domain, str) and normalize_domain(domain) in self.hosts

    def __len__(self) -> int:
        return len(self.hosts)


def load_quality_blacklist(extra_hosts: str | None = None) -> DomainQualityBlacklist:
    """Built-in hosts plus comma-separated extras from the argument or environment."""
    raw = extra_hosts if extra_hosts is not None else os.environ.get(EXTRA_BLACKLIST_ENV, "")
    extras = [h for h in raw.split(",") if h.strip()]
    return DomainQualityBlacklist.from_hosts([*DEFAULT_BLACKLISTED_HOSTS, *extras])
