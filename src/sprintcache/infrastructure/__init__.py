"""Infrastructure layer implementations for sprintcache."""

from sprintcache.infrastructure.serializers import JsonSerializer, SerializationError
from sprintcache.infrastructure.stores import (
    GuardedStore,
    InMemoryDurableStore,
    SQLiteDurableStore,
    StoreQuotaExceededError,
)

__all__ = [
    "GuardedStore",
    "InMemoryDurableStore",
    "SQLiteDurableStore",
    "StoreQuotaExceededError",
    "JsonSerializer",
    "SerializationError",
]
