"""Guard that turns durable store faults into result values."""

import logging
from collections.abc import Callable
from typing import TypeVar

from sprintcache.core.entities.results import StoreResult
from sprintcache.core.interfaces.durable_store import IDurableStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class GuardedStore:
    """Wraps an untrusted durable store so that nothing it raises escapes.

    Every operation returns a :class:`StoreResult`. Storage can be
    missing, full, disabled or simply broken; all of it is reported as a
    failure result and logged.
    """

    def __init__(self, store: IDurableStore) -> None:
        """Initialize the guard.

        Args:
            store: The durable store to protect.
        """
        self._store = store

    @property
    def store(self) -> IDurableStore:
        """The wrapped store."""
        return self._store

    def read(self, key: str) -> StoreResult[str]:
        """Read a record.

        Args:
            key: The durable key.

        Returns:
            The stored text, None when absent, or a failure.
        """
        return self._call("read", key, lambda: self._store.read(key))

    def write(self, key: str, data: str) -> StoreResult[None]:
        """Write a record, replacing any previous one.

        Args:
            key: The durable key.
            data: Serialized record.

        Returns:
            Success, or a failure carrying the store's exception.
        """
        return self._call("write", key, lambda: self._store.write(key, data))

    def remove(self, key: str) -> StoreResult[None]:
        """Remove a record. Absent keys count as success.

        Args:
            key: The durable key.

        Returns:
            Success, or a failure carrying the store's exception.
        """
        return self._call("remove", key, lambda: self._store.remove(key))

    def list_keys(self) -> StoreResult[list[str]]:
        """List every key in the store, including foreign ones.

        Returns:
            The keys, or a failure.
        """
        return self._call("list_keys", None, lambda: list(self._store.list_keys()))

    def _call(
        self,
        operation: str,
        key: str | None,
        func: Callable[[], T],
    ) -> StoreResult[T]:
        try:
            return StoreResult.success(func())
        except Exception as e:  # noqa: BLE001
            logger.warning(
                "Durable store %s failed for key %r: %s",
                operation,
                key,
                e,
            )
            return StoreResult.failure(e)
