"""Fixed-window rate limiting for arbitrary keys, backed by Redis."""

__all__ = ["errors", "status", "limiter", "middleware"]