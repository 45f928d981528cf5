"""Fluent builder producing a configured CORS middleware."""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable
from typing import Optional

from webguards.cors.all_or_some import AllOrSome
from webguards.cors.errors import CorsConfigError, CorsErrorKind
from webguards.cors.inner import CorsConfig, OriginFn
from webguards.cors.middleware import CorsMiddleware, Service
from webguards.cors.values import all_methods, intersperse_header_values
from webguards.http import parse_header_name, parse_method

logger = logging.getLogger(__name__)

_URI_FORBIDDEN = frozenset('"<>\\^`{}')


def _check_uri(value: str) -> None:
    if not isinstance(value, str) or not value:
        raise CorsConfigError(f"invalid origin uri: {value!r}")
    for char in value:
        if not 33 <= ord(char) <= 126 or char in _URI_FORBIDDEN:
            raise CorsConfigError(f"invalid origin uri: {value!r}")


class Cors:
    """Builder for CORS middleware.

    A fresh builder is restrictive: no origins, methods, request headers or exposed
    headers are allowed. Configuration errors are remembered (the first one wins) and
    raised from :meth:`new_transform`.
    """

    def __init__(self) -> None:
        self._config = CorsConfig()
        self._error: Optional[CorsConfigError] = None

    @classmethod
    def permissive(cls) -> Cors:
        """Allow every origin, method and header; credentials on; max age one hour.

        Intended for local development only.
        """
        cors = cls()
        cors._config = CorsConfig(
            allowed_origins=AllOrSome.any(),
            allowed_methods=all_methods(),
            allowed_headers=AllOrSome.any(),
            expose_headers=AllOrSome.any(),
            max_age=3600,
            supports_credentials=True,
        )
        return cors

    def _editable(self) -> Optional[CorsConfig]:
        return None if self._error is not None else self._config

    def allow_any_origin(self) -> Cors:
        """Accept requests from any origin."""
        config = self._editable()
        if config is not None:
            config.allowed_origins = AllOrSome.any()
        return self

    def allowed_origin(self, origin: str) -> Cors:
        """Add an origin allowed to make requests; compared case-sensitively."""
        config = self._editable()
        if config is None:
            return self
        try:
            _check_uri(origin)
        except CorsConfigError as err:
            self._error = err
            return self
        if origin == "*":
            logger.error("Wildcard in `allowed_origin` is not allowed. Use `send_wildcard`.")
            self._error = CorsConfigError(
                CorsErrorKind.WILDCARD_ORIGIN.value, CorsErrorKind.WILDCARD_ORIGIN
            )
            return self
        if config.allowed_origins.is_all():
            config.allowed_origins = AllOrSome.some(set())
        config.allowed_origins.items.add(origin)
        return self

    def allowed_origin_fn(self, fn: OriginFn) -> Cors:
        """Add a predicate consulted for origins not in the allowed list."""
        config = self._editable()
        if config is not None:
            config.allowed_origin_fns.append(fn)
        return self

    def allow_any_method(self) -> Cors:
        """Allow every standard HTTP method."""
        config = self._editable()
        if config is not None:
            config.allowed_methods = all_methods()
        return self

    def allowed_methods(self, methods: Iterable[str]) -> Cors:
        """Add methods that allowed origins may use."""
        config = self._editable()
        if config is None:
            return self
        for method in methods:
            try:
                config.allowed_methods.add(parse_method(method))
            except ValueError as err:
                self._error = CorsConfigError(str(err))
                break
        return self

    def allow_any_header(self) -> Cors:
        """Accept any request header."""
        config = self._editable()
        if config is not None:
            config.allowed_headers = AllOrSome.any()
        return self

    def allowed_header(self, header: str) -> Cors:
        """Add one allowed request header."""
        config = self._editable()
        if config is None:
            return self
        try:
            name = parse_header_name(header)
        except ValueError as err:
            self._error = CorsConfigError(str(err))
            return self
        self._add_allowed_header(config, name)
        return self

    def allowed_headers(self, headers: Iterable[str]) -> Cors:
        """Add request headers that allowed origins may send."""
        config = self._editable()
        if config is None:
            return self
        for header in headers:
            try:
                name = parse_header_name(header)
            except ValueError as err:
                self._error = CorsConfigError(str(err))
                break
            self._add_allowed_header(config, name)
        return self

    @staticmethod
    def _add_allowed_header(config: CorsConfig, name: str) -> None:
        if config.allowed_headers.is_all():
            config.allowed_headers = AllOrSome.some(set())
        config.allowed_headers.items.add(name)

    def expose_any_header(self) -> Cors:
        """Expose every response header."""
        config = self._editable()
        if config is not None:
            config.expose_headers = AllOrSome.any()
        return self

    def expose_headers(self, headers: Iterable[str]) -> Cors:
        """Add response headers that are safe to expose."""
        for header in headers:
            try:
                name = parse_header_name(header)
            except ValueError as err:
                self._error = CorsConfigError(str(err))
                break
            config = self._editable()
            if config is not None:
                if config.expose_headers.is_all():
                    config.expose_headers = AllOrSome.some(set())
                config.expose_headers.items.add(name)
        return self

    def max_age(self, max_age: Optional[int]) -> Cors:
        """Set the preflight cache time in seconds, or None to omit the header."""
        if max_age is not None and (
            isinstance(max_age, bool) or not isinstance(max_age, int) or max_age < 0
        ):
            raise ValueError(f"max_age must be a non-negative integer or None, not {max_age!r}")
        config = self._editable()
        if config is not None:
            config.max_age = max_age
        return self

    def send_wildcard(self) -> Cors:
        """Send ``*`` instead of the echoed origin when all origins are allowed."""
        config = self._editable()
        if config is not None:
            config.send_wildcard = True
        return self

    def supports_credentials(self) -> Cors:
        """Send ``Access-Control-Allow-Credentials: true``."""
        config = self._editable()
        if config is not None:
            config.supports_credentials = True
        return self

    def disable_vary_header(self) -> Cors:
        """Stop adding CORS request headers to ``Vary``."""
        config = self._editable()
        if config is not None:
            config.vary_header = False
        return self

    def disable_preflight(self) -> Cors:
        """Pass OPTIONS requests through instead of answering preflights."""
        config = self._editable()
        if config is not None:
            config.preflight = False
        return self

    def block_on_origin_mismatch(self, block: bool) -> Cors:
        """Answer 400 immediately when the origin does not validate."""
        config = self._editable()
        if config is not None:
            config.block_on_origin_mismatch = block
        return self

    def new_transform(self, service: Service) -> CorsMiddleware:
        """Build the middleware around ``service``.

        Raises CorsConfigError for any recorded configuration error or for the
        illegal combination of credentials, wildcard and all origins.
        """
        if self._error is not None:
            logger.error("%s", self._error)
            raise self._error

        config = copy.deepcopy(self._config)

        if config.supports_credentials and config.send_wildcard and config.allowed_origins.is_all():
            message = (
                "Illegal combination of CORS options: credentials can not be supported when all "
                "origins are allowed and `send_wildcard` is enabled."
            )
            logger.error(message)
            raise CorsConfigError(message)

        if config.allowed_headers.is_some() and config.allowed_headers.items:
            config.allowed_headers_baked = intersperse_header_values(config.allowed_headers.items)

        if config.allowed_methods:
            config.allowed_methods_baked = intersperse_header_values(config.allowed_methods)

        if config.expose_headers.is_some() and config.expose_headers.items:
            config.expose_headers_baked = intersperse_header_values(config.expose_headers.items)

        return CorsMiddleware(service, config)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cors):
            return NotImplemented
        return self._config == other._config

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Cors({self._config!r})"