"""Result value objects returned by the cache and its durable layer."""

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class CacheLookup:
    """Outcome of a cache read.

    A miss is reported as ``value=None, is_stale=True`` so callers can
    treat "absent" and "stale" the same way when deciding to refetch.
    """

    value: Any | None
    is_stale: bool

    @property
    def is_hit(self) -> bool:
        return self.value is not None

    @classmethod
    def miss(cls) -> "CacheLookup":
        return cls(value=None, is_stale=True)


@dataclass(frozen=True)
class StoreResult(Generic[T]):
    """Outcome of a durable store operation.

    Either ``ok`` with an optional ``value``, or not ok with the
    ``error`` the store raised.
    """

    ok: bool
    value: T | None = None
    error: Exception | None = None

    @classmethod
    def success(cls, value: T | None = None) -> "StoreResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: Exception) -> "StoreResult[T]":
        return cls(ok=False, error=error)
