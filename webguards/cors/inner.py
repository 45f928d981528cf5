"""Resolved CORS configuration and the request checks built on it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional

from webguards.cors.all_or_some import AllOrSome
from webguards.cors.errors import CorsError, CorsErrorKind
from webguards.http import (
    ACCESS_CONTROL_REQUEST_HEADERS,
    ACCESS_CONTROL_REQUEST_METHOD,
    ORIGIN,
    VARY,
    HeaderMap,
    Request,
    parse_header_name,
    parse_method,
)

OriginFn = Callable[[str, Request], bool]

_VARY_VALUE = "Origin, Access-Control-Request-Method, Access-Control-Request-Headers"


def _is_visible_ascii(value: str) -> bool:
    return all(32 <= ord(c) < 127 or c == "\t" for c in value)


def header_value_try_into_method(value: str) -> Optional[str]:
    """Parse a header value as an HTTP method, or return None if it is not one."""
    if not _is_visible_ascii(value):
        return None
    try:
        return parse_method(value)
    except ValueError:
        return None


def _empty_some() -> AllOrSome[set[str]]:
    return AllOrSome.some(set())


@dataclass
class CorsConfig:
    """CORS settings; the defaults are the restrictive ones."""

    allowed_origins: AllOrSome[set[str]] = field(default_factory=_empty_some)
    allowed_origin_fns: list[OriginFn] = field(default_factory=list)

    allowed_methods: set[str] = field(default_factory=set)
    allowed_methods_baked: Optional[str] = None

    allowed_headers: AllOrSome[set[str]] = field(default_factory=_empty_some)
    allowed_headers_baked: Optional[str] = None

    expose_headers: AllOrSome[set[str]] = field(default_factory=_empty_some)
    expose_headers_baked: Optional[str] = None

    max_age: Optional[int] = None
    preflight: bool = True
    send_wildcard: bool = False
    supports_credentials: bool = False
    vary_header: bool = True
    block_on_origin_mismatch: bool = False

    def validate_origin(self, request: Request) -> bool:
        """Return whether ``Access-Control-Allow-Origin`` should be added to the response.

        Raises CorsError when the origin is missing, or mismatched while blocking is on.
        """
        if self.allowed_origins.is_all():
            if not self.allowed_origin_fns:
                return True
            allowed: set[str] | frozenset[str] = frozenset()
        else:
            allowed = self.allowed_origins.items or frozenset()

        origin = request.headers.get(ORIGIN)
        if origin is None:
            raise CorsError(CorsErrorKind.MISSING_ORIGIN)

        if origin in allowed or self._validate_origin_fns(origin, request):
            return True
        if self.block_on_origin_mismatch:
            raise CorsError(CorsErrorKind.ORIGIN_NOT_ALLOWED)
        return False

    def _validate_origin_fns(self, origin: str, request: Request) -> bool:
        return any(origin_fn(origin, request) for origin_fn in self.allowed_origin_fns)

    def access_control_allow_origin(self, request: Request) -> Optional[str]:
        """Value for ``Access-Control-Allow-Origin``; call only after the origin is validated."""
        if self.allowed_origins.is_all() and self.send_wildcard:
            return "*"
        return request.headers.get(ORIGIN)

    def validate_allowed_method(self, request: Request) -> None:
        """Check ``Access-Control-Request-Method`` against the allowed methods."""
        raw = request.headers.get(ACCESS_CONTROL_REQUEST_METHOD)
        if raw is None:
            raise CorsError(CorsErrorKind.MISSING_REQUEST_METHOD)
        method = header_value_try_into_method(raw)
        if method is None:
            raise CorsError(CorsErrorKind.BAD_REQUEST_METHOD)
        if method not in self.allowed_methods:
            raise CorsError(CorsErrorKind.METHOD_NOT_ALLOWED)

    def validate_allowed_headers(self, request: Request) -> None:
        """Check ``Access-Control-Request-Headers`` against the allowed request headers."""
        if self.allowed_headers.is_all():
            return
        allowed = self.allowed_headers.items or set()

        raw = request.headers.get(ACCESS_CONTROL_REQUEST_HEADERS)
        if raw is None:
            return
        if not _is_visible_ascii(raw):
            raise CorsError(CorsErrorKind.BAD_REQUEST_HEADERS)

        try:
            requested = {parse_header_name(part.strip()) for part in raw.split(",")}
        except ValueError:
            raise CorsError(CorsErrorKind.BAD_REQUEST_HEADERS) from None

        if not requested:
            raise CorsError(CorsErrorKind.BAD_REQUEST_HEADERS)
        if not requested <= allowed:
            raise CorsError(CorsErrorKind.HEADERS_NOT_ALLOWED)


def add_vary_header(headers: HeaderMap) -> None:
    """Append the CORS request headers to the response's ``Vary`` header."""
    existing = headers.get(VARY)
    value = _VARY_VALUE if existing is None else f"{existing}, {_VARY_VALUE}"
    headers.insert(VARY, value)