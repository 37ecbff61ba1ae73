"""Pytest configuration for sprintcache tests."""

from datetime import datetime, timedelta, timezone

import pytest

from sprintcache import CacheConfig, InMemoryDurableStore, ReadThroughCache


class FakeClock:
    """Manually advanced clock returning aware UTC datetimes."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


class FailingStore:
    """Durable store that raises on every operation."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def read(self, key: str) -> str | None:
        self.calls.append("read")
        raise OSError("storage disabled")

    def write(self, key: str, data: str) -> None:
        self.calls.append("write")
        raise OSError("storage disabled")

    def remove(self, key: str) -> None:
        self.calls.append("remove")
        raise OSError("storage disabled")

    def list_keys(self) -> list[str]:
        self.calls.append("list_keys")
        raise OSError("storage disabled")


@pytest.fixture
def clock() -> FakeClock:
    """Create a fake clock for testing."""
    return FakeClock()


@pytest.fixture
def store() -> InMemoryDurableStore:
    """Create a durable store for testing."""
    return InMemoryDurableStore()


@pytest.fixture
def failing_store() -> FailingStore:
    """Create a durable store that always fails."""
    return FailingStore()


@pytest.fixture
def cache(store: InMemoryDurableStore, clock: FakeClock) -> ReadThroughCache:
    """Create a cache backed by the shared test store and clock."""
    return ReadThroughCache(
        store=store,
        config=CacheConfig(default_ttl=timedelta(minutes=5)),
        clock=clock,
    )
