"""Stale-while-revalidate wrapper around the read-through cache."""

import asyncio
import functools
import logging
from collections.abc import Awaitable, Callable
from datetime import timedelta
from enum import Enum
from typing import Any

from sprintcache.core.services.read_through_cache import ReadThroughCache

logger = logging.getLogger(__name__)

Fetch = Callable[[], Awaitable[Any]]


class RefreshState(Enum):
    """Refresh state of a single key."""

    IDLE = "idle"
    REFRESHING = "refreshing"


def _is_present(value: Any) -> bool:
    return value is not None


class Revalidator:
    """Serves cached values and refreshes stale ones in the background.

    Keeps at most one refresh in flight per key: every caller asking for
    a key that is already being fetched joins the running fetch instead
    of starting another one. Once a fetch finishes, successfully or not,
    the key is idle again and a later stale read may refresh it anew.

    Evicting a key from the cache discards the result of a refresh that
    is still running for it. Callers awaiting that refresh still receive
    the value, but it is not written back over the eviction.

    Example:
        revalidator = Revalidator(cache, accept=bool)

        async def fetch_categories() -> list[dict]:
            return await api.select("categories")

        categories = await revalidator.load(
            "categories", fetch_categories, ttl=CacheTTL.CATEGORIES
        )
    """

    def __init__(
        self,
        cache: ReadThroughCache,
        accept: Callable[[Any], bool] | None = None,
    ) -> None:
        """Initialize the revalidator.

        Args:
            cache: The cache to read from and write fetched values to.
            accept: Predicate deciding whether a cached value is usable.
                Defaults to "not None"; pass ``bool`` to also treat empty
                results as a miss.
        """
        self._cache = cache
        self._accept = accept or _is_present
        self._inflight: dict[str, asyncio.Task[Any]] = {}
        cache.on_evict(self._discard_inflight)

    @property
    def cache(self) -> ReadThroughCache:
        """Get the underlying cache."""
        return self._cache

    def state(self, key: str) -> RefreshState:
        """Get the refresh state of a key."""
        if key in self._inflight:
            return RefreshState.REFRESHING
        return RefreshState.IDLE

    async def load(
        self,
        key: str,
        fetch: Fetch,
        ttl: timedelta | None = None,
    ) -> Any:
        """Return the value for a key, fetching only when it is unusable.

        A fresh cached value is returned as is. A stale one is returned
        immediately while a background refresh is started. Without a
        usable cached value the call waits for a fetch.

        Args:
            key: The logical cache key.
            fetch: Async function producing the authoritative value.
            ttl: TTL for the refreshed entry. Uses the cache default if None.

        Returns:
            The cached or freshly fetched value.

        Raises:
            Exception: Whatever ``fetch`` raises when there is nothing to
                fall back on.
        """
        lookup = self._cache.get(key)

        if lookup.value is not None and self._accept(lookup.value):
            if lookup.is_stale:
                self.revalidate(key, fetch, ttl)
            return lookup.value

        return await self.refresh(key, fetch, ttl)

    def revalidate(
        self,
        key: str,
        fetch: Fetch,
        ttl: timedelta | None = None,
    ) -> "asyncio.Task[Any]":
        """Start a background refresh, or return the one already running.

        Must be called from within a running event loop.

        Args:
            key: The logical cache key.
            fetch: Async function producing the authoritative value.
            ttl: TTL for the refreshed entry.

        Returns:
            The task performing the refresh.
        """
        task = self._inflight.get(key)
        if task is not None:
            logger.debug("Joining in-flight refresh of %r", key)
            return task

        task = asyncio.create_task(self._run(key, fetch, ttl))
        self._inflight[key] = task
        task.add_done_callback(functools.partial(self._on_done, key))
        return task

    async def refresh(
        self,
        key: str,
        fetch: Fetch,
        ttl: timedelta | None = None,
    ) -> Any:
        """Fetch a key now, sharing any refresh already in flight.

        Cancelling the caller does not cancel the shared fetch.

        Args:
            key: The logical cache key.
            fetch: Async function producing the authoritative value.
            ttl: TTL for the refreshed entry. Ignored when joining a
                refresh that is already running.

        Returns:
            The fetched value.
        """
        return await asyncio.shield(self.revalidate(key, fetch, ttl))

    async def wait_idle(self) -> None:
        """Wait until no refresh is in flight, ignoring their failures."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight.values()), return_exceptions=True)

    async def _run(self, key: str, fetch: Fetch, ttl: timedelta | None) -> Any:
        value = await fetch()
        # Dropped if the key was evicted while fetching
        if self._inflight.get(key) is asyncio.current_task():
            self._cache.set(key, value, ttl)
        return value

    def _discard_inflight(self, matches: Callable[[str], bool]) -> None:
        for key in [k for k in self._inflight if matches(k)]:
            del self._inflight[key]
            logger.debug("Discarding in-flight refresh of %r", key)

    def _on_done(self, key: str, task: "asyncio.Task[Any]") -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]

        if task.cancelled():
            logger.debug("Refresh of %r was cancelled", key)
            return

        error = task.exception()
        if error is not None:
            logger.warning("Refresh of %r failed: %s", key, error)
