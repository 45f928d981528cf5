"""Fixed-window rate limiter for arbitrary keys, backed by Redis."""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Callable, Optional, Union
from urllib.parse import urlsplit

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from webguards.http import Request
from webguards.limitation.errors import ClientError, LimitExceededError
from webguards.limitation.status import Status, epoch_utc_plus

DEFAULT_REQUEST_LIMIT = 5000
DEFAULT_PERIOD_SECS = 3600
DEFAULT_COOKIE_NAME = "sid"

_REDIS_SCHEMES = frozenset({"redis", "rediss", "unix"})

KeyFn = Callable[[Request], Optional[str]]
PeriodLike = Union[timedelta, int, float]


def _as_period(period: PeriodLike) -> timedelta:
    return period if isinstance(period, timedelta) else timedelta(seconds=period)


class Limiter:
    """Counts requests per key within a fixed period."""

    def __init__(self, client: Any, limit: int, period: PeriodLike, get_key_fn: KeyFn) -> None:
        self.client = client
        self.limit = limit
        self.period = _as_period(period)
        self.get_key_fn = get_key_fn

    @classmethod
    def builder(cls, redis_url: str) -> Builder:
        """Start a builder with the default limit, period and cookie name."""
        return Builder(redis_url)

    async def count(self, key: object) -> Status:
        """Consume one unit for ``key`` and return the status.

        Raises LimitExceededError once the count passes the limit.
        """
        count, reset = await self._track(str(key))
        status = Status.from_parts(count, self.limit, reset)
        if count > self.limit:
            raise LimitExceededError(status)
        return status

    async def _track(self, key: str) -> tuple[int, int]:
        expires = self.period // timedelta(seconds=1)
        try:
            pipe = self.client.pipeline(transaction=True)
            pipe.set(key, 0, ex=expires, nx=True)
            pipe.incr(key)
            pipe.ttl(key)
            results = await pipe.execute()
        except RedisError as err:
            raise ClientError(str(err)) from err

        count, ttl = int(results[1]), int(results[2])
        if ttl < 0:
            raise ClientError(f"unexpected time-to-live {ttl} for key {key!r}")
        return count, epoch_utc_plus(ttl)

    def __repr__(self) -> str:
        return f"Limiter(limit={self.limit!r}, period={self.period!r})"


class Builder:
    """Builder for a Limiter."""

    def __init__(self, redis_url: str) -> None:
        self.redis_url = redis_url
        self._limit = DEFAULT_REQUEST_LIMIT
        self._period = timedelta(seconds=DEFAULT_PERIOD_SECS)
        self._get_key_fn: Optional[KeyFn] = None
        self._cookie_name = DEFAULT_COOKIE_NAME

    def limit(self, limit: int) -> Builder:
        """Set the upper limit per period."""
        self._limit = limit
        return self

    def period(self, period: PeriodLike) -> Builder:
        """Set the window length, as a timedelta or a number of seconds."""
        self._period = _as_period(period)
        return self

    def key_by(self, resolver: KeyFn) -> Builder:
        """Set the function deriving the rate limit key from a request."""
        self._get_key_fn = resolver
        return self

    def cookie_name(self, cookie_name: str) -> Builder:
        """Set the cookie whose value keys the limit; conflicts with key_by."""
        if self._get_key_fn is not None:
            raise RuntimeError(
                "This method should not be used in combination of get_key as they "
                "overwrite each other"
            )
        self._cookie_name = cookie_name
        return self

    def build(self, client: Any = None) -> Limiter:
        """Return the Limiter, creating a Redis client from the URL unless one is given.

        Raises ClientError when the Redis URL does not parse.
        """
        if urlsplit(self.redis_url).scheme not in _REDIS_SCHEMES:
            raise ClientError(f"Redis URL did not parse: {self.redis_url!r}")
        if client is None:
            try:
                client = aioredis.Redis.from_url(self.redis_url)
            except ValueError as err:
                raise ClientError(f"Redis URL did not parse: {err}") from err

        get_key = self._get_key_fn
        if get_key is None:
            cookie_name = self._cookie_name

            def get_key(request: Request) -> Optional[str]:
                value = request.cookie(cookie_name)
                return None if value is None else f"{cookie_name}={value}"

        return Limiter(client=client, limit=self._limit, period=self._period, get_key_fn=get_key)