"""A value that is either "everything allowed" or a specific collection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class AllOrSome(Generic[T]):
    """Either all values are allowed, or only those in ``items``.

    The default instance allows everything.
    """

    items: Optional[T] = None
    allows_all: bool = True

    @classmethod
    def any(cls) -> AllOrSome[T]:
        return cls(items=None, allows_all=True)

    @classmethod
    def some(cls, items: T) -> AllOrSome[T]:
        return cls(items=items, allows_all=False)

    def is_all(self) -> bool:
        return self.allows_all

    def is_some(self) -> bool:
        return not self.allows_all