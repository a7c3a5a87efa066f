"""Turn decrypted account push messages into highlights invalidations."""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from enum import Enum

from history_highlights.exceptions import IncompleteInput, UnsupportedMessage
from history_highlights.highlights.engine import HighlightsEngine

logger = logging.getLogger(__name__)

# Synced collections whose changes can alter highlights or top sites.
INVALIDATING_COLLECTIONS = frozenset({"history", "bookmarks"})


class PushMessageType(str, Enum):
    DEVICE_CONNECTED = "fxaccounts:device_connected"
    DEVICE_DISCONNECTED = "fxaccounts:device_disconnected"
    PROFILE_UPDATED = "fxaccounts:profile_updated"
    PASSWORD_CHANGED = "fxaccounts:password_changed"
    PASSWORD_RESET = "fxaccounts:password_reset"
    COLLECTION_CHANGED = "sync:collection_changed"
    # Not sent by the server; an empty message means the account was verified.
    ACCOUNT_VERIFIED = "account_verified"


@dataclass(frozen=True)
class PushMessage:
    type: PushMessageType
    collections: tuple[str, ...] = field(default_factory=tuple)
    repopulated: bool = False


class InvalidationHandler:
    """Dispatch a decrypted push message to the highlights engine.

    Only ``sync:collection_changed`` does work: when history or bookmarks
    changed, highlights and top sites are recomputed.
    """

    def __init__(self, engine: HighlightsEngine):
        self.engine = engine

    def handle(self, message: str | dict | None) -> PushMessage:
        payload = self._decode(message)
        if not payload:
            logger.info("Empty push message, treating as account verification")
            return PushMessage(PushMessageType.ACCOUNT_VERIFIED)

        command = payload.get("command")
        try:
            message_type = PushMessageType(command)
        except ValueError:
            logger.warning("Command %r received but not recognized", command)
            raise IncompleteInput(f"Unrecognized push command: {command!r}") from None

        if message_type is PushMessageType.COLLECTION_CHANGED:
            return self._collection_changed(payload.get("data"))
        if message_type is PushMessageType.ACCOUNT_VERIFIED:
            return PushMessage(message_type)

        logger.warning("%s message received, but unimplemented", message_type.value)
        raise UnsupportedMessage(f"Unsupported push message: {message_type.value}")

    async def ahandle(self, message: str | dict | None) -> PushMessage:
        """Async version of handle."""
        return await asyncio.to_thread(self.handle, message)

    def _collection_changed(self, data: object) -> PushMessage:
        collections = data.get("collections") if isinstance(data, dict) else None
        if not isinstance(collections, list) or not all(isinstance(c, str) for c in collections):
            logger.warning("collection_changed received but incomplete: %r", data)
            raise IncompleteInput("collection_changed message has no collections list")

        repopulate = bool(INVALIDATING_COLLECTIONS.intersection(collections))
        if repopulate:
            self.engine.repopulate_all(invalidate_top_sites=True, invalidate_highlights=True)
            logger.info("Repopulated highlights after change to %s", ", ".join(collections))
        return PushMessage(
            PushMessageType.COLLECTION_CHANGED,
            collections=tuple(collections),
            repopulated=repopulate,
        )

    @staticmethod
    def _decode(message: str | dict | None) -> dict:
        if message is None:
            return {}
        if isinstance(message, dict):
            return message
        if not message.strip():
            return {}
        try:
            payload = json.loads(message)
        except json.JSONDecodeError as e:
            raise IncompleteInput(f"Push message is not valid JSON: {e}") from e
        if not isinstance(payload, dict):
            return {}
        return payload
