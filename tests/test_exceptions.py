"""Tests for exception hierarchy."""

from history_highlights.exceptions import (
    HighlightsError,
    IncompleteInput,
    PushMessageError,
    StoreError,
    UnsupportedMessage,
)


def test_all_inherit_from_base():
    for exc_class in [StoreError, PushMessageError, IncompleteInput, UnsupportedMessage]:
        assert issubclass(exc_class, HighlightsError)


def test_push_message_hierarchy():
    assert issubclass(IncompleteInput, PushMessageError)
    assert issubclass(UnsupportedMessage, PushMessageError)
    assert not issubclass(StoreError, PushMessageError)


def test_exception_message():
    e = StoreError("test error")
    assert str(e) == "test error"
