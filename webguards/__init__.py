"""CORS controls and Redis-backed rate limiting for HTTP services."""

__version__ = "0.1.0"
__all__ = ["http", "cors", "limitation"]