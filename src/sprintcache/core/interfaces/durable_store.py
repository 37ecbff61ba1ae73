"""Durable backing store interface."""

from typing import Protocol


class DurableStoreError(Exception):
    """Raised by durable stores when an operation cannot be completed."""

    pass


class IDurableStore(Protocol):
    """Contract for the persistent layer behind the cache.

    A simple string key/value API in the shape of browser local storage.
    Implementations are allowed to raise from any method; the cache
    never lets those failures reach its own callers.
    """

    def read(self, key: str) -> str | None:
        """Read the stored string for a key.

        Args:
            key: The full (prefixed) storage key.

        Returns:
            The stored string, or None if the key is absent.
        """
        ...

    def write(self, key: str, data: str) -> None:
        """Store a string under a key, replacing any previous value.

        Args:
            key: The full (prefixed) storage key.
            data: The serialized entry.
        """
        ...

    def remove(self, key: str) -> None:
        """Remove a key. Removing an absent key is a no-op.

        Args:
            key: The full (prefixed) storage key.
        """
        ...

    def list_keys(self) -> list[str]:
        """List every key in the store, including ones the cache does not own.

        Returns:
            All storage keys.
        """
        ...
