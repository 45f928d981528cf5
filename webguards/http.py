"""Minimal HTTP request, response and header types used by the guards."""

from __future__ import annotations

import string
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Optional, Union

ORIGIN = "origin"
VARY = "vary"
ACCESS_CONTROL_ALLOW_ORIGIN = "access-control-allow-origin"
ACCESS_CONTROL_ALLOW_METHODS = "access-control-allow-methods"
ACCESS_CONTROL_ALLOW_HEADERS = "access-control-allow-headers"
ACCESS_CONTROL_ALLOW_CREDENTIALS = "access-control-allow-credentials"
ACCESS_CONTROL_EXPOSE_HEADERS = "access-control-expose-headers"
ACCESS_CONTROL_MAX_AGE = "access-control-max-age"
ACCESS_CONTROL_REQUEST_METHOD = "access-control-request-method"
ACCESS_CONTROL_REQUEST_HEADERS = "access-control-request-headers"

_TOKEN_CHARS = frozenset(string.ascii_letters + string.digits + "!#$%&'*+-.^_`|~")


def _is_token(value: object) -> bool:
    return isinstance(value, str) and bool(value) and all(c in _TOKEN_CHARS for c in value)


def parse_method(value: str) -> str:
    """Validate an HTTP method token and return it unchanged (methods are case-sensitive)."""
    if not _is_token(value):
        raise ValueError(f"invalid HTTP method: {value!r}")
    return value


def parse_header_name(value: str) -> str:
    """Validate a header name and return its canonical lower-case form."""
    if not _is_token(value):
        raise ValueError(f"invalid header name: {value!r}")
    return value.lower()


def _check_header_value(value: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"header value must be a string, not {type(value).__name__}")
    if any((ord(c) < 32 and c != "\t") or ord(c) == 127 for c in value):
        raise ValueError(f"invalid header value: {value!r}")
    return value


HeaderSource = Union[Mapping[str, str], Iterable[tuple[str, str]], None]


class HeaderMap:
    """Case-insensitive map of header names to a single value each."""

    def __init__(self, items: HeaderSource = None) -> None:
        self._entries: dict[str, str] = {}
        if items is None:
            return
        pairs = items.items() if isinstance(items, Mapping) else items
        for name, value in pairs:
            self.insert(name, value)

    def get(self, name: str) -> Optional[str]:
        return self._entries.get(name.lower())

    def insert(self, name: str, value: str) -> None:
        """Set a header, replacing any previous value."""
        self._entries[parse_header_name(name)] = _check_header_value(value)

    def remove(self, name: str) -> Optional[str]:
        """Remove a header, returning its value if it was present."""
        return self._entries.pop(name.lower(), None)

    def names(self) -> list[str]:
        return list(self._entries)

    def items(self) -> list[tuple[str, str]]:
        return list(self._entries.items())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeaderMap):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"HeaderMap({self._entries!r})"


def _as_header_map(headers: object) -> HeaderMap:
    if isinstance(headers, HeaderMap):
        return headers
    return HeaderMap(headers)  # type: ignore[arg-type]


@dataclass
class Request:
    """An incoming request as seen by a middleware."""

    method: str = "GET"
    path: str = "/"
    headers: HeaderMap = field(default_factory=HeaderMap)

    def __post_init__(self) -> None:
        self.headers = _as_header_map(self.headers)

    def cookie(self, name: str) -> Optional[str]:
        """Return the value of the named cookie from the Cookie header, if present."""
        header = self.headers.get("cookie")
        if header is None:
            return None
        for part in header.split(";"):
            key, sep, value = part.strip().partition("=")
            if sep and key == name:
                return value
        return None


@dataclass
class Response:
    """An outgoing response."""

    status: int = 200
    headers: HeaderMap = field(default_factory=HeaderMap)
    body: str = ""

    def __post_init__(self) -> None:
        self.headers = _as_header_map(self.headers)