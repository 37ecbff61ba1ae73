"""Tests for cache decorators."""

from datetime import timedelta

import asyncio

import pytest

from sprintcache import CacheLookup, ReadThroughCache, Revalidator, derive_key
from sprintcache.decorators import cached, invalidates


@pytest.fixture
def revalidator(cache: ReadThroughCache) -> Revalidator:
    """Create a revalidator over the test cache."""
    return Revalidator(cache)


class TestCachedDecorator:
    """Tests for @cached decorator."""

    @pytest.mark.asyncio
    async def test_cached_function(self, revalidator: Revalidator) -> None:
        """Test that @cached caches function results."""
        call_count = 0

        @cached(revalidator, "listing")
        async def get_listing(id: str) -> dict:
            nonlocal call_count
            call_count += 1
            return {"id": id, "title": "SaaS Starter"}

        # First call - should execute function
        result1 = await get_listing(id="kit-1")
        assert result1 == {"id": "kit-1", "title": "SaaS Starter"}
        assert call_count == 1

        # Second call - should return cached result
        result2 = await get_listing(id="kit-1")
        assert result2 == result1
        assert call_count == 1  # Not incremented

    @pytest.mark.asyncio
    async def test_cached_different_args(self, revalidator: Revalidator) -> None:
        """Test that different args create different cache entries."""
        call_count = 0

        @cached(revalidator, "listing")
        async def get_listing(id: str) -> dict:
            nonlocal call_count
            call_count += 1
            return {"id": id}

        await get_listing(id="1")
        await get_listing(id="2")
        await get_listing(id="1")  # Should be cached

        assert call_count == 2  # Only 2 unique calls

    @pytest.mark.asyncio
    async def test_cached_key_uses_derive_key(
        self, revalidator: Revalidator, cache: ReadThroughCache
    ) -> None:
        """Test that the key is derived from base and kwargs."""

        @cached(revalidator, "listings")
        async def get_listings(
            category_id: str | None = None,
            limit: int | None = None,
        ) -> list:
            return ["kit-1"]

        await get_listings(limit=3, category_id=None)

        assert cache.get(derive_key("listings", {"limit": 3})).value == ["kit-1"]

    @pytest.mark.asyncio
    async def test_cached_with_ttl(
        self, revalidator: Revalidator, cache: ReadThroughCache, clock
    ) -> None:
        """Test @cached with custom TTL."""

        @cached(revalidator, "plans", ttl=timedelta(seconds=10))
        async def get_plans() -> list:
            return ["pro"]

        await get_plans()
        clock.advance(timedelta(seconds=11))

        assert cache.get("plans").is_stale

    @pytest.mark.asyncio
    async def test_cached_serves_stale_and_refreshes(
        self, revalidator: Revalidator, cache: ReadThroughCache, clock
    ) -> None:
        """Test stale-while-revalidate through the decorator."""
        versions = iter([["v1"], ["v2"]])

        @cached(revalidator, "categories", ttl=timedelta(seconds=10))
        async def get_categories() -> list:
            return next(versions)

        assert await get_categories() == ["v1"]
        clock.advance(timedelta(seconds=11))
        assert await get_categories() == ["v1"]

        await revalidator.wait_idle()

        assert await get_categories() == ["v2"]

    @pytest.mark.asyncio
    async def test_cached_rejects_positional_args(
        self, revalidator: Revalidator
    ) -> None:
        """Test that positional arguments are refused."""

        @cached(revalidator, "listing")
        async def get_listing(id: str) -> dict:
            return {"id": id}

        with pytest.raises(TypeError):
            await get_listing("kit-1")

    def test_cached_preserves_function_metadata(
        self, revalidator: Revalidator
    ) -> None:
        """Test that @cached preserves function name and docstring."""

        @cached(revalidator, "listing")
        async def get_listing(id: str) -> dict:
            """Fetch one listing."""
            return {"id": id}

        assert get_listing.__name__ == "get_listing"
        assert get_listing.__doc__ == "Fetch one listing."


class TestInvalidatesDecorator:
    """Tests for @invalidates decorator."""

    @pytest.mark.asyncio
    async def test_invalidates_exact_key(self, cache: ReadThroughCache) -> None:
        """Test that a mutation evicts an exact key."""
        cache.set("plans", ["pro"])

        @invalidates(cache, ["plans"])
        async def update_plan(plan_id: str) -> str:
            return plan_id

        assert await update_plan(plan_id="pro") == "pro"
        assert cache.get("plans") == CacheLookup.miss()

    @pytest.mark.asyncio
    async def test_invalidates_with_interpolation(
        self, cache: ReadThroughCache
    ) -> None:
        """Test {arg} interpolation in key templates."""
        cache.set("listing:kit-1", {"id": "kit-1"})
        cache.set("listing:kit-2", {"id": "kit-2"})

        @invalidates(cache, ["listing:{listing_id}"])
        async def approve_listing(listing_id: str) -> None:
            pass

        await approve_listing(listing_id="kit-1")

        assert cache.get("listing:kit-1") == CacheLookup.miss()
        assert cache.get("listing:kit-2").value == {"id": "kit-2"}

    @pytest.mark.asyncio
    async def test_invalidates_with_pattern(self, cache: ReadThroughCache) -> None:
        """Test glob templates evict every matching key."""
        cache.set(derive_key("listings", {"limit": 3}), ["a"])
        cache.set(derive_key("listings", {"featured": True}), ["b"])
        cache.set("categories", ["ai"])

        @invalidates(cache, ["listings*"])
        async def publish_listing() -> None:
            pass

        await publish_listing()

        assert cache.get("listings?limit=3") == CacheLookup.miss()
        assert cache.get("listings?featured=true") == CacheLookup.miss()
        assert cache.get("categories").value == ["ai"]

    @pytest.mark.asyncio
    async def test_invalidates_not_run_on_failure(
        self, cache: ReadThroughCache
    ) -> None:
        """Test that a failed mutation leaves the cache untouched."""
        cache.set("plans", ["pro"])

        @invalidates(cache, ["plans"])
        async def update_plan() -> None:
            raise RuntimeError("update rejected")

        with pytest.raises(RuntimeError):
            await update_plan()

        assert cache.get("plans").value == ["pro"]

    @pytest.mark.asyncio
    async def test_invalidates_positional_args(self, cache: ReadThroughCache) -> None:
        """Test that templates are filled from positional arguments."""
        cache.set("listing:42", {"id": "42"})

        @invalidates(cache, ["listing:{listing_id}"])
        async def approve_listing(listing_id: str) -> None:
            pass

        await approve_listing("42")

        assert cache.get("listing:42") == CacheLookup.miss()

    @pytest.mark.asyncio
    async def test_invalidates_uses_defaults(self, cache: ReadThroughCache) -> None:
        """Test that omitted arguments interpolate their default."""
        cache.set("plans:monthly", ["pro"])

        @invalidates(cache, ["plans:{period}"])
        async def update_plans(period: str = "monthly") -> None:
            pass

        await update_plans()

        assert cache.get("plans:monthly") == CacheLookup.miss()

    @pytest.mark.asyncio
    async def test_invalidates_query_key_from_cached(
        self, revalidator: Revalidator, cache: ReadThroughCache
    ) -> None:
        """Test that a query template matches the key @cached stores."""

        @cached(revalidator, "listings")
        async def get_listings(category_id: str | None = None) -> list:
            return [1]

        @invalidates(cache, ["listings?category_id={category_id}"])
        async def touch_category(category_id: str) -> None:
            pass

        await get_listings(category_id="saas")
        await get_listings(category_id="ai")
        await touch_category(category_id="saas")

        assert cache.get('listings?category_id="saas"') == CacheLookup.miss()
        assert cache.get('listings?category_id="ai"').value == [1]

    @pytest.mark.asyncio
    async def test_invalidates_query_pattern(self, cache: ReadThroughCache) -> None:
        """Test a glob template with an encoded query value."""
        cache.set(derive_key("listings", {"category_id": "saas", "limit": 3}), ["a"])
        cache.set(derive_key("listings", {"category_id": "ai", "limit": 3}), ["b"])

        @invalidates(cache, ["listings?category_id={category_id}*"])
        async def touch_category(category_id: str) -> None:
            pass

        await touch_category(category_id="saas")

        assert cache.get('listings?category_id="saas"&limit=3') == CacheLookup.miss()
        assert cache.get('listings?category_id="ai"&limit=3').value == ["b"]

    @pytest.mark.asyncio
    async def test_invalidates_discards_refresh_in_flight(
        self, revalidator: Revalidator, cache: ReadThroughCache
    ) -> None:
        """Test that a refresh begun before the mutation is not written back."""
        gate = asyncio.Event()
        table = {"value": "old"}

        async def fetch_item() -> str:
            snapshot = table["value"]
            await gate.wait()
            return snapshot

        @invalidates(cache, ["item"])
        async def update(value: str) -> None:
            table["value"] = value

        refresh = revalidator.revalidate("item", fetch_item)
        await asyncio.sleep(0)
        await update(value="new")
        gate.set()
        await refresh

        assert cache.get("item") == CacheLookup.miss()


class TestInterpolation:
    """Tests for template interpolation."""

    def test_interpolate_string(self) -> None:
        """Test string interpolation."""
        from sprintcache.decorators import _interpolate_string

        result = _interpolate_string(
            "listing:{id}:{missing}",
            {"id": "kit-1"},
        )

        assert result == "listing:kit-1:{missing}"

    def test_interpolate_query_part(self) -> None:
        """Test that query placeholders are JSON-encoded."""
        from sprintcache.decorators import _interpolate_string

        result = _interpolate_string(
            "listings?category_id={category_id}&featured={featured}",
            {"category_id": "saas", "featured": True},
        )

        assert result == 'listings?category_id="saas"&featured=true'
        assert result == derive_key("listings", {"featured": True, "category_id": "saas"})

    def test_interpolate_escapes_glob_characters(self) -> None:
        """Test that filled-in values match literally in patterns."""
        from sprintcache.decorators import _interpolate_string

        result = _interpolate_string(
            "search:{term}*",
            {"term": "a*b?"},
            escape=True,
        )

        assert result == "search:a[*]b[?]*"
