import math
from http import HTTPStatus

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from webguards.http import Request, Response
from webguards.limitation.limiter import Limiter
from webguards.limitation.middleware import RateLimiter, RateLimiterMiddleware


class FakePipeline:
    def __init__(self, server):
        self.server = server
        self.ops = []

    def set(self, key, value, ex=None, nx=False):
        self.ops.append(("set", key, value, ex, nx))
        return self

    def incr(self, key):
        self.ops.append(("incr", key))
        return self

    def ttl(self, key):
        self.ops.append(("ttl", key))
        return self

    async def execute(self):
        return [self.server.apply(op) for op in self.ops]


class FakeRedis:
    def __init__(self):
        self.now = 0.0
        self.store = {}

    def pipeline(self, transaction=True):
        return FakePipeline(self)

    def apply(self, op):
        name, key = op[0], op[1]
        entry = self.store.get(key)
        if entry is not None and entry[1] <= self.now:
            del self.store[key]
        if name == "set":
            _, _, value, ex, nx = op
            if nx and key in self.store:
                return None
            self.store[key] = (value, self.now + ex)
            return True
        if name == "incr":
            value, expires = self.store[key]
            self.store[key] = (value + 1, expires)
            return value + 1
        return math.ceil(self.store[key][1] - self.now)


class BrokenRedis:
    def pipeline(self, transaction=True):
        raise RedisConnectionError("connection refused")


class CountingService:
    def __init__(self):
        self.calls = 0

    async def __call__(self, request):
        self.calls += 1
        return Response(body="ok")


def make_limiter(client, limit=2, period=1, key="fix_key"):
    return (
        Limiter.builder("redis://127.0.0.1:6379/3")
        .limit(limit)
        .period(period)
        .key_by(lambda _: key)
        .build(client)
    )


@pytest.mark.asyncio
async def test_limiter_key_by():
    server = FakeRedis()
    middleware = RateLimiter(make_limiter(server)).new_transform(CountingService())
    assert isinstance(middleware, RateLimiterMiddleware)

    for _ in range(2):
        for index in range(1, 4):
            response = await middleware(Request())
            if index <= 2:
                assert response.status == HTTPStatus.OK
                assert response.body == "ok"
            else:
                assert response.status == HTTPStatus.TOO_MANY_REQUESTS
        server.now += 1


@pytest.mark.asyncio
async def test_rejected_request_does_not_reach_service():
    service = CountingService()
    middleware = RateLimiterMiddleware(service, make_limiter(FakeRedis(), limit=1))
    await middleware(Request())
    response = await middleware(Request())
    assert response.status == HTTPStatus.TOO_MANY_REQUESTS
    assert service.calls == 1


@pytest.mark.asyncio
async def test_request_without_key_is_not_counted():
    server = FakeRedis()
    service = CountingService()
    middleware = RateLimiterMiddleware(service, make_limiter(server, limit=1, key=None))
    for _ in range(3):
        response = await middleware(Request())
        assert response.status == HTTPStatus.OK
    assert service.calls == 3
    assert server.store == {}


@pytest.mark.asyncio
async def test_redis_failure_answers_internal_error():
    service = CountingService()
    middleware = RateLimiterMiddleware(service, make_limiter(BrokenRedis()))
    response = await middleware(Request())
    assert response.status == HTTPStatus.INTERNAL_SERVER_ERROR
    assert service.calls == 0


@pytest.mark.asyncio
async def test_sync_service_is_supported():
    middleware = RateLimiterMiddleware(
        lambda request: Response(body=request.path), make_limiter(FakeRedis())
    )
    response = await middleware(Request(path="/items"))
    assert response.body == "/items"