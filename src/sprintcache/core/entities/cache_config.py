"""Cache configuration entity."""

from dataclasses import dataclass
from datetime import timedelta


class CacheTTL:
    """TTL presets for storefront data, by how often it changes."""

    LISTINGS = timedelta(minutes=3)
    CATEGORIES = timedelta(minutes=10)
    FEATURED = timedelta(minutes=5)
    PLANS = timedelta(minutes=30)
    STATIC = timedelta(hours=1)


@dataclass
class CacheConfig:
    """Cache configuration.

    Provides configuration options for the read-through cache.

    The key prefix namespaces every durable key the cache owns, so that
    ``evict_all`` can leave unrelated data in a shared store alone.
    Logical keys inside the namespace are the callers' responsibility:
    any caller can read or overwrite any key.
    """

    enabled: bool = True
    default_ttl: timedelta | None = None
    max_size: int = 1000  # Memory layer only; the durable layer is unbounded
    key_prefix: str = "wcp_cache_"

    def __post_init__(self) -> None:
        """Set default TTL if not provided."""
        if self.default_ttl is None:
            self.default_ttl = timedelta(minutes=5)
