# webguards

Two guards to put in front of an HTTP request handler:

- **`webguards.cors`**: Cross-Origin Resource Sharing controls. Checks the
  `Origin`, `Access-Control-Request-Method` and `Access-Control-Request-Headers`
  request headers against a configuration, answers `OPTIONS` preflight requests,
  and adds the `Access-Control-*` and `Vary` headers to responses.
- **`webguards.limitation`**: a fixed-window rate limiter for arbitrary keys,
  with the counters kept in Redis.

Both work on the small request and response types in `webguards.http`:
`Request` (`method`, `path`, `headers`, and `cookie(name)`), `Response`
(`status`, `headers`, `body`) and `HeaderMap`, a case-insensitive map holding
one value per header name.

## Installation

```
pip install webguards
```

To run the test suite, install the `test` extra and run pytest:

```
pip install "webguards[test]"
pytest
```

## Services and middleware

A service is any callable that takes a `Request` and returns a `Response`,
either directly or as an awaitable. Both middlewares are themselves async
callables: `response = await middleware(request)`.

## CORS

The `Cors` builder starts out restrictive. It allows no origins, methods,
request headers or exposed headers. You open it up one call at a time:

```python
from webguards.cors.builder import Cors
from webguards.http import Request, Response


def service(request: Request) -> Response:
    return Response(body="Hello, cross-origin world!")


cors = (
    Cors()
    .allowed_origin("https://project.example.com")
    .allowed_origin_fn(lambda origin, request: origin.startswith("http://localhost"))
    .allowed_methods(["GET", "POST"])
    .allowed_headers(["Authorization", "Accept"])
    .allowed_header("Content-Type")
    .expose_headers(["Content-Disposition"])
    .block_on_origin_mismatch(False)
    .max_age(3600)
)

middleware = cors.new_transform(service)
response = await middleware(
    Request(method="GET", headers={"Origin": "https://project.example.com"})
)
```

Header names are stored in lower case; methods are case-sensitive.

`new_transform` wraps the service in a `CorsMiddleware`. Configuration errors
are remembered by the builder (the first one wins, later calls are ignored) and
raised as `CorsConfigError` from `new_transform`: a wildcard `*` or an invalid
URI passed to `allowed_origin`, an invalid method or header name, or
credentials combined with `send_wildcard()` while every origin is allowed.
`max_age` raises `ValueError` straight away for anything but a non-negative
integer or `None`.

What the middleware does:

- A preflight request is an `OPTIONS` request that carries a valid
  `Access-Control-Request-Method`. The middleware answers it itself, without
  calling the service. The response is `200 OK` with the allowed origin,
  methods, headers, credentials and max age. If the request fails validation,
  the response is `400 Bad Request` with the error message as its body, built by
  `CorsError.error_response()`. Call `disable_preflight()` to pass these
  requests through to the service instead.
- Any other request is passed to the service and the CORS headers are added to
  its response. `Access-Control-Allow-Origin` is only added when the request
  has an allowed `Origin`. With `block_on_origin_mismatch(True)`, a request
  whose origin is not allowed is refused with `400 Bad Request` and the service
  is not called.
- When every exposed header is allowed (`expose_any_header()`), the names of all
  the response's headers are sent in `Access-Control-Expose-Headers`.
- `Vary: Origin, Access-Control-Request-Method, Access-Control-Request-Headers`
  is appended to every handled response unless you call `disable_vary_header()`.

For local development, `Cors.permissive()` allows every origin, method and
header, exposes every header, supports credentials and sets a max age of one
hour. Do not use it in production.

The checks themselves live on `webguards.cors.inner.CorsConfig`
(`validate_origin`, `validate_allowed_method`, `validate_allowed_headers`),
which raise `CorsError`; its `kind` is a `CorsErrorKind`.

## Rate limiting

`Limiter` counts requests per key in fixed windows. The first request for a key
sets a Redis counter with an expiry equal to the period. Each request
increments the counter. Once the count goes past the limit, requests are
refused until the key expires.

```python
from webguards.limitation.limiter import Limiter
from webguards.limitation.middleware import RateLimiter

limiter = (
    Limiter.builder("redis://127.0.0.1:6379/0")
    .key_by(lambda request: request.cookie("session-id"))
    .limit(5000)
    .period(3600)
    .build()
)

status = await limiter.count("some-key")
print(status.limit, status.remaining, status.reset_epoch_utc)
```

`build()` creates an asyncio Redis client from the URL; you may pass your own
client instead, as `build(client)`. A URL whose scheme is not `redis`, `rediss`
or `unix` raises `ClientError`. `period` takes a `timedelta` or a number of
seconds.

`count` returns a `Status`. When the limit is exceeded it raises
`LimitExceededError` instead, and the exception carries the `Status` in its
`status` attribute. A failure of the Redis client is reported as `ClientError`.
All of these errors derive from `LimitationError`.

The default limit is 5000 requests per hour. If no key function is given,
requests are keyed by the `sid` cookie (`cookie_name()` chooses another one and
raises `RuntimeError` if `key_by` was already called). A request with no key is
not counted at all.

`RateLimiter(limiter).new_transform(service)` wraps a service in a
`RateLimiterMiddleware`. It answers `429 Too Many Requests` when the limit is
exceeded and `500 Internal Server Error` when counting fails; otherwise it
calls the wrapped service.

## What this package does not do

It has no HTTP server and no integration with any web framework: you adapt
your framework's requests and responses to `webguards.http.Request` and
`Response` yourself. It has no session or identity handling, so rate limit keys
come only from your key function or a cookie. It offers no command-line tool.