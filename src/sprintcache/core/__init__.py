"""Core domain layer for sprintcache."""

from sprintcache.core.entities import (
    CacheConfig,
    CacheEntry,
    CacheKey,
    CacheLookup,
    CacheTTL,
    StoreResult,
    derive_key,
)
from sprintcache.core.interfaces import DurableStoreError, IDurableStore, ISerializer
from sprintcache.core.services import ReadThroughCache, RefreshState, Revalidator

__all__ = [
    # Entities
    "CacheConfig",
    "CacheEntry",
    "CacheKey",
    "CacheLookup",
    "CacheTTL",
    "StoreResult",
    "derive_key",
    # Interfaces
    "IDurableStore",
    "ISerializer",
    "DurableStoreError",
    # Services
    "ReadThroughCache",
    "Revalidator",
    "RefreshState",
]
