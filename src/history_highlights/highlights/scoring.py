"""Rank non-recent, rarely visited history pages as highlight candidates."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta

from history_highlights.highlights.blacklist import DomainQualityBlacklist
from history_highlights.highlights.blocklist import BlocklistManager
from history_highlights.highlights.dedup import collapse_domains, collapse_urls
from history_highlights.highlights.models import HighlightCandidate
from history_highlights.store.base import BaseHistoryStore, HistorySnapshot
from history_highlights.store.models import HighlightsCacheEntry, VisitSummary
from history_highlights.store.parser import to_micros

logger = logging.getLogger(__name__)

HIGHLIGHTS_LIMIT = 8
RECENCY_CUTOFF = timedelta(minutes=30)
MAX_VISIT_COUNT = 3


class ScoringEngine:
    """Compute the ranked highlight set from a snapshot of the history store.

    A page qualifies when it was last visited before the recency cutoff, has
    been visited at most ``max_visit_count`` times, has a title, is not
    bookmarked, blocked or on a blacklisted domain. Each domain contributes its
    most recently visited qualifying page, scored as::

        visit_count * (2 if favicon) * (4 if media metadata)

    Ties rank by latest visit (newest first) and then URL.

    Args:
        store: History store to read from.
        blocklist: User removals to exclude.
        quality_blacklist: Hosts never surfaced.
    """

    def __init__(
        self,
        store: BaseHistoryStore,
        blocklist: BlocklistManager,
        quality_blacklist: DomainQualityBlacklist,
        limit: int = HIGHLIGHTS_LIMIT,
        recency_cutoff: timedelta = RECENCY_CUTOFF,
        max_visit_count: int = MAX_VISIT_COUNT,
    ):
        self.store = store
        self.blocklist = blocklist
        self.quality_blacklist = quality_blacklist
        self.limit = limit
        self.recency_cutoff = recency_cutoff
        self.max_visit_count = max_visit_count

    def compute(self, now: datetime | None = None) -> list[HighlightsCacheEntry]:
        """Score, dedup and rank; returns at most ``limit`` cache entries."""
        candidates = self.candidates(now)
        ranked = self.rank(candidates)
        return [c.to_cache_entry() for c in ranked]

    def candidates(self, now: datetime | None = None) -> list[HighlightCandidate]:
        """Qualifying candidates, one per domain, in no particular order.

        All reads go through a single store snapshot, so writes committed while
        this runs are not mixed into the result.
        """
        cutoff = to_micros((now or datetime.now()) - self.recency_cutoff)
        with self.store.snapshot() as snapshot:
            summaries = snapshot.history_with_visits_older_than(cutoff)
            summaries = collapse_urls(summaries, url=lambda s: s.entry.url)
            candidates = [
                self._enrich(snapshot, summary)
                for summary in summaries
                if self._qualifies(snapshot, summary)
            ]
        logger.debug(
            "%d of %d visited pages qualify as highlights", len(candidates), len(summaries)
        )

        # Sort by URL first so equal dedup keys resolve to the smallest URL.
        candidates.sort(key=lambda c: c.entry.url)
        return collapse_domains(
            candidates,
            domain=lambda c: c.entry.domain,
            newest=lambda c: (c.latest_visit, c.score),
        )

    def rank(self, candidates: list[HighlightCandidate]) -> list[HighlightCandidate]:
        ordered = sorted(candidates, key=lambda c: (-c.score, -c.latest_visit, c.entry.url))
        return ordered[: self.limit]

    def _qualifies(self, snapshot: HistorySnapshot, summary: VisitSummary) -> bool:
        entry = summary.entry
        if summary.visit_count > self.max_visit_count:
            return False
        if not entry.title.strip():
            return False
        if entry.domain in self.quality_blacklist:
            return False
        if snapshot.is_bookmarked(entry.url):
            return False
        return not self.blocklist.is_blocked(entry.url, snapshot)

    def _enrich(self, snapshot: HistorySnapshot, summary: VisitSummary) -> HighlightCandidate:
        return HighlightCandidate(
            entry=summary.entry,
            visit_count=summary.visit_count,
            latest_visit=summary.latest_visit,
            is_bookmarked=False,
            favicon=snapshot.favicon_for(summary.entry.id),
            metadata=snapshot.metadata_for(summary.entry.url),
        )
