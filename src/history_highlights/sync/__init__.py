"""Sync-triggered invalidation of cached highlights."""

from history_highlights.sync.invalidation import (
    InvalidationHandler,
    PushMessage,
    PushMessageType,
)

__all__ = ["InvalidationHandler", "PushMessage", "PushMessageType"]
