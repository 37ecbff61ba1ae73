"""Durable store implementations.

``RedisDurableStore`` lives in :mod:`sprintcache.infrastructure.stores.redis`
and needs the ``redis`` extra, so it is not imported here.
"""

from sprintcache.infrastructure.stores.guarded import GuardedStore
from sprintcache.infrastructure.stores.memory import (
    InMemoryDurableStore,
    StoreQuotaExceededError,
)
from sprintcache.infrastructure.stores.sqlite import SQLiteDurableStore

__all__ = [
    "GuardedStore",
    "InMemoryDurableStore",
    "SQLiteDurableStore",
    "StoreQuotaExceededError",
]
