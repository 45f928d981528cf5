"""Errors raised while validating CORS requests or configuring CORS."""

from __future__ import annotations

import enum
from typing import Optional

from webguards.http import Response


class CorsErrorKind(enum.Enum):
    """The kinds of CORS failure, each with its message."""

    WILDCARD_ORIGIN = "`allowed_origin` argument must not be wildcard (`*`)"
    MISSING_ORIGIN = "Request header `Origin` is required but was not provided"
    MISSING_REQUEST_METHOD = (
        "Request header `Access-Control-Request-Method` is required but is missing"
    )
    BAD_REQUEST_METHOD = "Request header `Access-Control-Request-Method` has an invalid value"
    BAD_REQUEST_HEADERS = "Request header `Access-Control-Request-Headers` has an invalid value"
    ORIGIN_NOT_ALLOWED = "Origin is not allowed to make this request"
    METHOD_NOT_ALLOWED = "Requested method is not allowed"
    HEADERS_NOT_ALLOWED = "One or more request headers are not allowed"


class CorsError(Exception):
    """A CORS-guarded request failed validation; answered with 400 Bad Request."""

    status_code = 400

    def __init__(self, kind: CorsErrorKind) -> None:
        super().__init__(kind.value)
        self.kind = kind

    def error_response(self) -> Response:
        return Response(status=self.status_code, body=str(self))


class CorsConfigError(ValueError):
    """The CORS configuration is invalid and the middleware cannot be built."""

    def __init__(self, message: str, kind: Optional[CorsErrorKind] = None) -> None:
        super().__init__(message)
        self.kind = kind