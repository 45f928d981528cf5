"""Failure modes of the rate limiter."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from webguards.limitation.status import Status


class LimitationError(Exception):
    """Base class for every rate limiter failure."""


class ClientError(LimitationError):
    """The Redis client failed to connect or run a query."""

    def __init__(self, detail: str = "") -> None:
        super().__init__("Redis client failed to connect or run a query")
        self.detail = detail


class LimitExceededError(LimitationError):
    """The limit is exceeded for a key; ``status`` holds the report."""

    def __init__(self, status: Status) -> None:
        super().__init__("Limit is exceeded for a key")
        self.status = status


class TimeConversionError(LimitationError):
    """A time conversion failed."""

    def __init__(self, detail: str = "") -> None:
        super().__init__("Time conversion failed")
        self.detail = detail


class OtherError(LimitationError):
    """Any other failure; ``message`` describes it."""

    def __init__(self, message: str) -> None:
        super().__init__("Generic error")
        self.message = message