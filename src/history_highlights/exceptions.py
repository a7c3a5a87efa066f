"""Unified exception hierarchy for history-highlights."""


class HighlightsError(Exception):
    """Base exception for all history-highlights errors."""


# Store
class StoreError(HighlightsError):
    """Failed to read from or write to the history store."""


# Invalidation messages
class PushMessageError(HighlightsError):
    """Base exception for invalidation message handling."""


class IncompleteInput(PushMessageError):
    """Message is missing required fields or names an unknown command."""


class UnsupportedMessage(PushMessageError):
    """Message type is recognized but not acted on."""
