"""Helpers for building CORS header values."""

from __future__ import annotations

from collections.abc import Iterable

_ALL_METHODS = frozenset(
    {"GET", "POST", "PUT", "DELETE", "HEAD", "OPTIONS", "CONNECT", "PATCH", "TRACE"}
)


def all_methods() -> set[str]:
    """Return a fresh set holding every standard HTTP method."""
    return set(_ALL_METHODS)


def intersperse_header_values(values: Iterable[str]) -> str:
    """Join values with ``", "`` into a single header value.

    Raises ValueError when there are no values to join.
    """
    parts = list(values)
    if not parts:
        raise ValueError("cannot build a header value from an empty collection")
    return ", ".join(parts)