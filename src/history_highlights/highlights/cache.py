"""Materialized highlights, replaced as one unit."""

from __future__ import annotations

import logging
from typing import Iterable

from history_highlights.store.base import BaseHistoryStore
from history_highlights.store.models import HighlightsCacheEntry

logger = logging.getLogger(__name__)


class HighlightsCache:
    """Ordered cache of ranked highlights.

    ``replace_all`` clears and repopulates inside a single store transaction,
    so readers see either the previous set or the new one, never an empty or
    partial cache. A failed replace leaves the previous set in place.
    """

    def __init__(self, store: BaseHistoryStore):
        self.store = store

    def read(self) -> list[HighlightsCacheEntry]:
        return self.store.read_highlights()

    def replace_all(self, entries: Iterable[HighlightsCacheEntry]) -> None:
        entries = list(entries)
        with self.store.transaction() as tx:
            tx.clear_highlights()
            tx.insert_highlights(entries)
        logger.info("Replaced highlights cache with %d entries", len(entries))
