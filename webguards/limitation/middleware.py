"""Middleware rejecting requests whose key has exceeded its rate limit."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable
from http import HTTPStatus
from typing import Callable, Union

from webguards.http import Request, Response
from webguards.limitation.errors import ClientError, LimitationError, LimitExceededError
from webguards.limitation.limiter import Limiter

logger = logging.getLogger(__name__)

Service = Callable[[Request], Union[Response, Awaitable[Response]]]


class RateLimiter:
    """Factory wrapping services in rate limiting middleware."""

    def __init__(self, limiter: Limiter) -> None:
        self.limiter = limiter

    def new_transform(self, service: Service) -> RateLimiterMiddleware:
        return RateLimiterMiddleware(service, self.limiter)


class RateLimiterMiddleware:
    """Counts each keyed request and answers 429 once the limit is exceeded."""

    def __init__(self, service: Service, limiter: Limiter) -> None:
        self.service = service
        self.limiter = limiter

    async def _call_service(self, request: Request) -> Response:
        result = self.service(request)
        return await result if inspect.isawaitable(result) else result

    async def __call__(self, request: Request) -> Response:
        key = self.limiter.get_key_fn(request)
        if key is None:
            return await self._call_service(request)

        try:
            await self.limiter.count(key)
        except LimitExceededError:
            logger.warning("Rate limit exceed error for %s", key)
            return Response(status=HTTPStatus.TOO_MANY_REQUESTS)
        except ClientError as err:
            logger.error("Client request failed, redis error: %s", err.detail)
            return Response(status=HTTPStatus.INTERNAL_SERVER_ERROR)
        except LimitationError as err:
            logger.error("Count failed: %s", err)
            return Response(status=HTTPStatus.INTERNAL_SERVER_ERROR)

        return await self._call_service(request)