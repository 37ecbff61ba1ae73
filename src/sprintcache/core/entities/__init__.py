"""Domain entities for sprintcache."""

from sprintcache.core.entities.cache_config import CacheConfig, CacheTTL
from sprintcache.core.entities.cache_entry import CacheEntry, utc_now
from sprintcache.core.entities.cache_key import CacheKey, derive_key
from sprintcache.core.entities.results import CacheLookup, StoreResult

__all__ = [
    "CacheEntry",
    "CacheKey",
    "CacheConfig",
    "CacheTTL",
    "CacheLookup",
    "StoreResult",
    "derive_key",
    "utc_now",
]
