"""Read-through cache - main entry point for cached storefront queries."""

import copy
import fnmatch
import logging
from collections.abc import Callable, Mapping
from datetime import datetime, timedelta
from typing import Any

from cachetools import LRUCache  # type: ignore[import-untyped]

from sprintcache.core.entities.cache_config import CacheConfig
from sprintcache.core.entities.cache_entry import CacheEntry, utc_now
from sprintcache.core.entities.cache_key import derive_key
from sprintcache.core.entities.results import CacheLookup
from sprintcache.core.interfaces.durable_store import IDurableStore
from sprintcache.core.interfaces.serializer import ISerializer
from sprintcache.infrastructure.serializers.json import (
    JsonSerializer,
    SerializationError,
)
from sprintcache.infrastructure.stores.guarded import GuardedStore

logger = logging.getLogger(__name__)


class ReadThroughCache:
    """Two-layer cache serving the last known-good result for a key.

    Reads hit an in-memory layer first and fall back to the durable
    store, promoting what they find. Writes go to memory unconditionally
    and are mirrored to the durable store on a best-effort basis. Stale
    entries stay readable until they are overwritten or evicted; the
    cache only reports staleness and never refreshes anything itself.

    No operation raises for storage or serialization faults. A broken
    durable store only costs durability across restarts: evictions the
    durable store failed to apply are remembered for the rest of the
    session, so an evicted value is never read back from it.

    ``set`` stores a deep copy of the value, so later changes to the
    caller's object do not leak into the cache. Values returned by ``get``
    are shared between readers and must be treated as read-only.

    Each instance owns its memory layer. Build one per application and
    pass it to the code that needs it.
    """

    def __init__(
        self,
        store: IDurableStore | None = None,
        serializer: ISerializer | None = None,
        config: CacheConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the cache.

        Args:
            store: Durable backing store. None keeps the cache memory-only.
            serializer: Serializer for durable records. Defaults to JSON.
            config: Optional cache configuration. Uses defaults if not provided.
            clock: Callable returning the current aware datetime.
        """
        self._config = config or CacheConfig()
        self._store = GuardedStore(store) if store is not None else None
        self._serializer = serializer or JsonSerializer()
        self._clock = clock or utc_now
        self._memory: LRUCache[str, CacheEntry] = LRUCache(
            maxsize=self._config.max_size,
        )

        # Durable copies that must not be read back this session
        self._tombstones: set[str] = set()
        self._masks: list[str] = []
        self._rewritten: set[str] = set()
        self._evict_listeners: list[Callable[[Callable[[str], bool]], None]] = []

        # Statistics
        self._hits = 0
        self._stale_hits = 0
        self._misses = 0
        self._durable_errors = 0

    @property
    def config(self) -> CacheConfig:
        """Get the cache configuration."""
        return self._config

    @property
    def stats(self) -> dict[str, int]:
        """Get cache statistics.

        Returns:
            Dictionary with hits, stale hits, misses, durable errors and
            total lookups. Stale hits are counted in hits as well.
        """
        return {
            "hits": self._hits,
            "stale_hits": self._stale_hits,
            "misses": self._misses,
            "durable_errors": self._durable_errors,
            "total": self._hits + self._misses,
        }

    def reset_stats(self) -> None:
        """Reset all statistics counters."""
        self._hits = 0
        self._stale_hits = 0
        self._misses = 0
        self._durable_errors = 0

    def on_evict(self, listener: Callable[[Callable[[str], bool]], None]) -> None:
        """Register a callback run on every eviction.

        The listener receives a predicate telling which logical keys were
        evicted.
        """
        self._evict_listeners.append(listener)

    @staticmethod
    def derive_key(base: str, params: Mapping[str, Any] | None = None) -> str:
        """Derive a deterministic cache key. See :func:`derive_key`."""
        return derive_key(base, params)

    def get(self, key: str) -> CacheLookup:
        """Look up a key without ever blocking on or raising from storage.

        Args:
            key: The logical cache key.

        Returns:
            The cached value and whether it is stale, or a miss.
        """
        if not self._config.enabled:
            return CacheLookup.miss()

        entry = self._memory.get(key)
        if entry is None:
            entry = self._read_durable(key)
            if entry is not None:
                # Read-repair so the next lookup is served from memory
                self._memory[key] = entry
                logger.debug("Promoted %r from durable store", key)

        if entry is None:
            self._misses += 1
            return CacheLookup.miss()

        is_stale = entry.is_stale(self._clock())
        self._hits += 1
        if is_stale:
            self._stale_hits += 1
        return CacheLookup(value=entry.value, is_stale=is_stale)

    def set(
        self,
        key: str,
        value: Any,
        ttl: timedelta | None = None,
    ) -> CacheEntry:
        """Store a copy of a value under a key, replacing any previous entry.

        Args:
            key: The logical cache key.
            value: A JSON-serializable payload.
            ttl: Time-to-live. Uses the config default if not provided.

        Returns:
            The entry that was written.

        Raises:
            ValueError: If ``ttl`` is negative.
        """
        effective_ttl = ttl if ttl is not None else self._config.default_ttl
        entry = CacheEntry.create(
            key=key,
            value=_snapshot(key, value),
            ttl=effective_ttl,
            now=self._clock(),
        )

        if not self._config.enabled:
            return entry

        self._memory[key] = entry
        self._tombstones.discard(key)
        if self._masks:
            self._rewritten.add(key)
        self._write_durable(entry)
        return entry

    def evict(self, key: str) -> None:
        """Remove a key from both layers. Absent keys are ignored.

        Args:
            key: The logical cache key.
        """
        self._memory.pop(key, None)
        if not self._remove_durable(key):
            self._durable_errors += 1
        self._notify_evicted(lambda k: k == key)
        logger.debug("Evicted %r", key)

    def evict_all(self) -> None:
        """Clear every entry this cache owns.

        Only durable keys carrying this cache's prefix are removed, so
        unrelated data in a shared store is left alone. If the durable
        store cannot be cleared completely, the whole namespace is
        treated as empty until keys are written again.
        """
        self._memory.clear()
        self._notify_evicted(lambda k: True)
        if self._store is None:
            return

        durable_keys = self._owned_durable_keys()
        complete = durable_keys is not None
        for durable_key in durable_keys or []:
            if not self._store.remove(durable_key).ok:
                self._durable_errors += 1
                complete = False

        self._rewritten.clear()
        if complete:
            self._tombstones.clear()
            self._masks.clear()
        else:
            self._masks = ["*"]

    def evict_matching(self, pattern: str) -> int:
        """Evict every logical key matching a glob pattern.

        Args:
            pattern: Glob-style pattern, e.g. ``"listings*"``.

        Returns:
            Number of distinct keys evicted.
        """
        matched = {
            key for key in list(self._memory.keys())
            if fnmatch.fnmatchcase(key, pattern)
        }

        durable_keys = self._owned_durable_keys()
        prefix = self._config.key_prefix
        for durable_key in durable_keys or []:
            key = durable_key[len(prefix):]
            if fnmatch.fnmatchcase(key, pattern):
                matched.add(key)

        for key in matched:
            self.evict(key)
        self._notify_evicted(lambda k: fnmatch.fnmatchcase(k, pattern))

        if durable_keys is None and self._store is not None:
            # Unlisted durable matches stay hidden until rewritten
            self._masks.append(pattern)
            self._rewritten = {
                key for key in self._rewritten
                if not fnmatch.fnmatchcase(key, pattern)
            }

        return len(matched)

    def __len__(self) -> int:
        """Return the number of entries held in the memory layer."""
        return len(self._memory)

    def _durable_key(self, key: str) -> str:
        return f"{self._config.key_prefix}{key}"

    def _notify_evicted(self, matches: Callable[[str], bool]) -> None:
        for listener in self._evict_listeners:
            listener(matches)

    def _is_masked(self, key: str) -> bool:
        if key in self._tombstones:
            return True
        if key in self._rewritten:
            return False
        return any(fnmatch.fnmatchcase(key, mask) for mask in self._masks)

    def _owned_durable_keys(self) -> list[str] | None:
        """List durable keys under this cache's prefix, or None on failure."""
        if self._store is None:
            return []
        result = self._store.list_keys()
        if not result.ok:
            self._durable_errors += 1
            return None
        prefix = self._config.key_prefix
        return [k for k in result.value or [] if k.startswith(prefix)]

    def _remove_durable(self, key: str) -> bool:
        """Remove a durable copy, hiding it for the session if that fails."""
        if self._store is None:
            return True
        if self._store.remove(self._durable_key(key)).ok:
            self._tombstones.discard(key)
            return True
        self._tombstones.add(key)
        return False

    def _read_durable(self, key: str) -> CacheEntry | None:
        """Read and decode a durable entry, treating every fault as a miss."""
        if self._store is None or self._is_masked(key):
            return None

        result = self._store.read(self._durable_key(key))
        if not result.ok:
            self._durable_errors += 1
            return None
        if result.value is None:
            return None

        try:
            entry = CacheEntry.from_payload(self._serializer.deserialize(result.value))
        except (SerializationError, ValueError) as e:
            self._durable_errors += 1
            logger.warning("Ignoring corrupt durable entry for %r: %s", key, e)
            return None

        if entry.key != key:
            self._durable_errors += 1
            logger.warning(
                "Ignoring durable entry for %r stored under key %r", key, entry.key
            )
            return None

        return entry

    def _write_durable(self, entry: CacheEntry) -> None:
        """Mirror an entry to the durable store on a best-effort basis."""
        if self._store is None:
            return

        durable_key = self._durable_key(entry.key)
        data: str | None
        try:
            data = self._serializer.serialize(entry.to_payload())
        except SerializationError as e:
            logger.warning("Not persisting %r: %s", entry.key, e)
            data = None

        if data is None or not self._store.write(durable_key, data).ok:
            self._durable_errors += 1
            # The superseded durable copy must not come back
            self._remove_durable(entry.key)


def _snapshot(key: str, value: Any) -> Any:
    """Deep-copy a value so the cached entry cannot be changed afterwards."""
    try:
        return copy.deepcopy(value)
    except (TypeError, copy.Error) as e:
        logger.warning("Caching %r by reference, it cannot be copied: %s", key, e)
        return value
