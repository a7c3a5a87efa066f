"""Collapse duplicate URLs and keep one item per domain."""

from __future__ import annotations

from typing import Any, Callable, Iterable, TypeVar

T = TypeVar("T")


def collapse_urls(items: Iterable[T], url: Callable[[T], str]) -> list[T]:
    """Drop repeated URLs, keeping the first occurrence."""
    seen: set[str] = set()
    result = []
    for item in items:
        key = url(item)
        if key in seen:
            continue
        seen.add(key)
        result.append(item)
    return result


def collapse_domains(
    items: Iterable[T],
    domain: Callable[[T], str],
    newest: Callable[[T], Any],
) -> list[T]:
    """Keep the item with the greatest ``newest`` key for each domain.

    On equal keys the earlier item wins. Output follows the order in which
    each domain first appeared.
    """
    best: dict[str, T] = {}
    for item in items:
        key = domain(item)
        current = best.get(key)
        if current is None or newest(item) > newest(current):
            best[key] = item
    return list(best.values())
