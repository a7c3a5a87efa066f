"""User-controlled list of URLs removed from highlights."""

from __future__ import annotations

import logging

from history_highlights.store.base import BaseHistoryStore, HistorySnapshot

logger = logging.getLogger(__name__)


class BlocklistManager:
    """Persisted set of URLs the user removed.

    Blocking is lazy: the URL stays in the materialized highlights cache until
    the next repopulation drops it.
    """

    def __init__(self, store: BaseHistoryStore):
        self.store = store

    def block(self, url: str) -> None:
        self.store.insert_blocked(url)
        logger.info("Blocked %s from highlights", url)

    def is_blocked(self, url: str, snapshot: HistorySnapshot | None = None) -> bool:
        """Membership check, read through ``snapshot`` when one is open."""
        reader = self.store if snapshot is None else snapshot
        return reader.is_blocked(url)
