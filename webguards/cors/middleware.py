"""Middleware applying CORS checks and headers around a request handler."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable
from typing import Callable, Union

from webguards.cors.errors import CorsError, CorsErrorKind
from webguards.cors.inner import CorsConfig, add_vary_header, header_value_try_into_method
from webguards.cors.values import intersperse_header_values
from webguards.http import (
    ACCESS_CONTROL_ALLOW_CREDENTIALS,
    ACCESS_CONTROL_ALLOW_HEADERS,
    ACCESS_CONTROL_ALLOW_METHODS,
    ACCESS_CONTROL_ALLOW_ORIGIN,
    ACCESS_CONTROL_EXPOSE_HEADERS,
    ACCESS_CONTROL_MAX_AGE,
    ACCESS_CONTROL_REQUEST_HEADERS,
    ACCESS_CONTROL_REQUEST_METHOD,
    ORIGIN,
    Request,
    Response,
)

logger = logging.getLogger(__name__)

Service = Callable[[Request], Union[Response, Awaitable[Response]]]


class CorsMiddleware:
    """Wraps a service, validating CORS requests and adding CORS response headers."""

    def __init__(self, service: Service, config: CorsConfig) -> None:
        self.service = service
        self.config = config

    @staticmethod
    def is_request_preflight(request: Request) -> bool:
        """Return True for an OPTIONS request with a valid ``Access-Control-Request-Method``."""
        if request.method != "OPTIONS":
            return False
        raw = request.headers.get(ACCESS_CONTROL_REQUEST_METHOD)
        return raw is not None and header_value_try_into_method(raw) is not None

    def handle_preflight(self, request: Request) -> Response:
        """Validate a preflight request and build its response."""
        config = self.config

        try:
            if not config.validate_origin(request):
                raise CorsError(CorsErrorKind.ORIGIN_NOT_ALLOWED)
            config.validate_allowed_method(request)
            config.validate_allowed_headers(request)
        except CorsError as err:
            return err.error_response()

        response = Response(status=200)
        headers = response.headers

        origin = config.access_control_allow_origin(request)
        if origin is not None:
            headers.insert(ACCESS_CONTROL_ALLOW_ORIGIN, origin)

        if config.allowed_methods_baked is not None:
            headers.insert(ACCESS_CONTROL_ALLOW_METHODS, config.allowed_methods_baked)

        if config.allowed_headers_baked is not None:
            headers.insert(ACCESS_CONTROL_ALLOW_HEADERS, config.allowed_headers_baked)
        else:
            requested = request.headers.get(ACCESS_CONTROL_REQUEST_HEADERS)
            if requested is not None:
                headers.insert(ACCESS_CONTROL_ALLOW_HEADERS, requested)

        if config.supports_credentials:
            headers.insert(ACCESS_CONTROL_ALLOW_CREDENTIALS, "true")

        if config.max_age is not None:
            headers.insert(ACCESS_CONTROL_MAX_AGE, str(config.max_age))

        if config.vary_header:
            add_vary_header(headers)

        return response

    def _augment_response(self, origin_allowed: bool, request: Request, response: Response) -> Response:
        config = self.config
        headers = response.headers

        if origin_allowed:
            origin = config.access_control_allow_origin(request)
            if origin is not None:
                headers.insert(ACCESS_CONTROL_ALLOW_ORIGIN, origin)

        if config.expose_headers_baked is not None:
            logger.debug("exposing selected headers: %s", config.expose_headers_baked)
            headers.insert(ACCESS_CONTROL_EXPOSE_HEADERS, config.expose_headers_baked)
        elif config.expose_headers.is_all() and len(headers):
            exposed = intersperse_header_values(set(headers.names()))
            logger.debug("exposing all response headers: %s", exposed)
            headers.insert(ACCESS_CONTROL_EXPOSE_HEADERS, exposed)

        if config.supports_credentials:
            headers.insert(ACCESS_CONTROL_ALLOW_CREDENTIALS, "true")

        if config.vary_header:
            add_vary_header(headers)

        return response

    async def __call__(self, request: Request) -> Response:
        config = self.config

        if config.preflight and self.is_request_preflight(request):
            return self.handle_preflight(request)

        if request.headers.get(ORIGIN) is None:
            origin_allowed = False
        else:
            try:
                origin_allowed = config.validate_origin(request)
            except CorsError as err:
                logger.debug("origin validation failed; inner service is not called")
                response = err.error_response()
                if config.vary_header:
                    add_vary_header(response.headers)
                return response

        result = self.service(request)
        response = await result if inspect.isawaitable(result) else result
        return self._augment_response(origin_allowed, request, response)