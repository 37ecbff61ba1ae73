"""sprintcache - Read-through cache for the SprintSaaS storefront.

Serves the last known-good result of a remote query instantly, marks it
stale after a time-to-live and lets callers refresh it in the
background. Entries live in an in-memory layer and are mirrored to a
durable store so they survive a restart; durable storage faults never
reach the caller.

Example:
    from sprintcache import (
        CacheTTL,
        ReadThroughCache,
        Revalidator,
        SQLiteDurableStore,
        derive_key,
    )

    cache = ReadThroughCache(store=SQLiteDurableStore("cache.db"))

    # Plain read-through with the decision left to the caller
    key = derive_key("listings", {"category_id": "saas", "limit": 12})
    lookup = cache.get(key)
    if lookup.is_stale:
        cache.set(key, await fetch_listings(), ttl=CacheTTL.LISTINGS)

    # Or let the revalidator serve stale data while it refreshes
    revalidator = Revalidator(cache, accept=bool)
    plans = await revalidator.load("plans", fetch_plans, ttl=CacheTTL.PLANS)

Key namespacing:
    Every instance prefixes its durable keys (``CacheConfig.key_prefix``)
    and only ever clears keys under that prefix. Within a cache, any
    caller can read or overwrite any key; callers are responsible for
    choosing key bases that do not collide.
"""

from sprintcache.core.entities import (
    CacheConfig,
    CacheEntry,
    CacheKey,
    CacheLookup,
    CacheTTL,
    StoreResult,
    derive_key,
)
from sprintcache.core.interfaces import (
    DurableStoreError,
    IDurableStore,
    ISerializer,
)
from sprintcache.core.services import (
    ReadThroughCache,
    RefreshState,
    Revalidator,
)
from sprintcache.decorators import cached, invalidates
from sprintcache.infrastructure import (
    GuardedStore,
    InMemoryDurableStore,
    JsonSerializer,
    SerializationError,
    SQLiteDurableStore,
    StoreQuotaExceededError,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Core entities
    "CacheConfig",
    "CacheEntry",
    "CacheKey",
    "CacheLookup",
    "CacheTTL",
    "StoreResult",
    "derive_key",
    # Core interfaces
    "IDurableStore",
    "ISerializer",
    "DurableStoreError",
    # Core services
    "ReadThroughCache",
    "Revalidator",
    "RefreshState",
    # Infrastructure implementations
    "GuardedStore",
    "InMemoryDurableStore",
    "SQLiteDurableStore",
    "StoreQuotaExceededError",
    "JsonSerializer",
    "SerializationError",
    # Decorators
    "cached",
    "invalidates",
]
