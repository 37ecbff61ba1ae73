"""Cache entry entity."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any


def utc_now() -> datetime:
    """Return the current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CacheEntry:
    """Immutable cache entry value object.

    Holds a cached payload together with the time it was written and the
    time it turns stale. Entries are never mutated; a refresh is a new
    entry written under the same key.
    """

    key: str
    value: Any
    written_at: datetime
    expires_at: datetime

    def __post_init__(self) -> None:
        """Reject entries that would expire before they were written."""
        if self.expires_at < self.written_at:
            raise ValueError(
                f"Entry {self.key!r} expires before it was written"
            )

    @property
    def ttl(self) -> timedelta:
        """Time-to-live the entry was written with."""
        return self.expires_at - self.written_at

    def is_stale(self, now: datetime | None = None) -> bool:
        """Check if the entry is past its expiry.

        Args:
            now: Point in time to compare against. Defaults to UTC now.

        Returns:
            True once ``now`` is strictly after ``expires_at``.
        """
        return (now or utc_now()) > self.expires_at

    @classmethod
    def create(
        cls,
        key: str,
        value: Any,
        ttl: timedelta,
        now: datetime | None = None,
    ) -> "CacheEntry":
        """Factory method to create a new cache entry.

        Args:
            key: The logical cache key.
            value: The value to cache.
            ttl: Time-to-live; must not be negative.
            now: Write time. Defaults to UTC now.

        Returns:
            A new CacheEntry instance.

        Raises:
            ValueError: If ``ttl`` is negative.
        """
        if ttl < timedelta(0):
            raise ValueError(f"ttl must not be negative, got {ttl!r}")

        written_at = now or utc_now()
        return cls(
            key=key,
            value=value,
            written_at=written_at,
            expires_at=written_at + ttl,
        )

    def to_payload(self) -> dict[str, Any]:
        """Convert the entry into a JSON-friendly dict for durable storage."""
        return {
            "key": self.key,
            "value": self.value,
            "written_at": self.written_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
        }

    @classmethod
    def from_payload(cls, payload: Any) -> "CacheEntry":
        """Rebuild an entry from a dict produced by :meth:`to_payload`.

        Args:
            payload: The decoded durable record.

        Returns:
            The restored CacheEntry.

        Raises:
            ValueError: If the payload is malformed.
        """
        if not isinstance(payload, dict):
            raise ValueError("Cache payload must be an object")

        try:
            written_at = datetime.fromisoformat(payload["written_at"])
            expires_at = datetime.fromisoformat(payload["expires_at"])
            key = payload["key"]
            value = payload["value"]
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed cache payload: {e}") from e

        # Naive timestamps would not compare against an aware clock
        if written_at.tzinfo is None or expires_at.tzinfo is None:
            raise ValueError("Cache payload timestamps must be timezone-aware")

        return cls(
            key=key,
            value=value,
            written_at=written_at,
            expires_at=expires_at,
        )
