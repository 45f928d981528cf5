"""Rate limit status reports."""

from __future__ import annotations

import time
from dataclasses import dataclass

from webguards.limitation.errors import OtherError

# Largest whole number of seconds a signed 64-bit millisecond span can hold.
_MAX_SECONDS = (2**63 - 1) // 1000
_NS_PER_SECOND = 1_000_000_000


@dataclass(frozen=True)
class Status:
    """A report for a given key containing the limit status."""

    limit: int
    remaining: int
    reset_epoch_utc: int

    @classmethod
    def from_parts(cls, count: int, limit: int, reset_epoch_utc: int) -> Status:
        """Build a status from the current count; ``remaining`` never drops below zero."""
        return cls(limit=limit, remaining=max(limit - count, 0), reset_epoch_utc=reset_epoch_utc)


def epoch_utc_plus(seconds: float) -> int:
    """Return the UNIX timestamp, rounded to whole seconds, ``seconds`` from now.

    Raises OtherError when the span is negative or too large to represent.
    """
    if seconds < 0 or seconds > _MAX_SECONDS:
        raise OtherError("Source duration value is out of range for the target type")
    total_ns = time.time_ns() + int(seconds * _NS_PER_SECOND)
    rounded = (total_ns + _NS_PER_SECOND // 2) // _NS_PER_SECOND
    return max(rounded, 0)