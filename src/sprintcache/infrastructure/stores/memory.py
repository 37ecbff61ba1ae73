"""In-memory durable store implementation."""

from sprintcache.core.interfaces.durable_store import DurableStoreError


class StoreQuotaExceededError(DurableStoreError):
    """Raised when a write would push the store past its byte quota."""

    pass


class InMemoryDurableStore:
    """Dict-backed stand-in for browser local storage.

    Survives as long as the object does, so tests can share one instance
    between two caches to simulate a process restart. An optional quota
    mimics the storage limits browsers enforce.
    """

    def __init__(self, quota_bytes: int | None = None) -> None:
        """Initialize the store.

        Args:
            quota_bytes: Maximum total size of keys plus values, in
                UTF-8 bytes. None means unlimited.
        """
        self._data: dict[str, str] = {}
        self._quota_bytes = quota_bytes

    def read(self, key: str) -> str | None:
        return self._data.get(key)

    def write(self, key: str, data: str) -> None:
        """Store a string, enforcing the quota if one is set.

        Raises:
            StoreQuotaExceededError: If the write does not fit.
        """
        if self._quota_bytes is not None:
            current = self.size_bytes
            if key in self._data:
                current -= _sizeof(key, self._data[key])
            if current + _sizeof(key, data) > self._quota_bytes:
                raise StoreQuotaExceededError(
                    f"Writing {key!r} exceeds quota of {self._quota_bytes} bytes"
                )
        self._data[key] = data

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def list_keys(self) -> list[str]:
        return list(self._data)

    def clear(self) -> None:
        """Remove every key, including ones no cache owns."""
        self._data.clear()

    @property
    def size_bytes(self) -> int:
        """Total size of stored keys and values in UTF-8 bytes."""
        return sum(_sizeof(k, v) for k, v in self._data.items())

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: object) -> bool:
        return key in self._data


def _sizeof(key: str, data: str) -> int:
    return len(key.encode("utf-8")) + len(data.encode("utf-8"))
