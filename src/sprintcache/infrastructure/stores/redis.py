"""Redis durable store implementation."""

import redis


class RedisDurableStore:
    """Redis-backed durable store for shared or server-side deployments.

    Keys are stored exactly as the cache passes them in (already carrying
    the cache prefix), so several caches with different prefixes can share
    one Redis database.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        client: redis.Redis | None = None,
        scan_count: int = 100,
    ) -> None:
        """Initialize the Redis store.

        Args:
            redis_url: Redis connection URL, used when no client is given.
            client: An existing Redis client to use instead.
            scan_count: Batch size hint for SCAN when listing keys.
        """
        self._redis: redis.Redis = client or redis.Redis.from_url(redis_url)
        self._scan_count = scan_count

    def read(self, key: str) -> str | None:
        return _decode(self._redis.get(key))

    def write(self, key: str, data: str) -> None:
        self._redis.set(key, data)

    def remove(self, key: str) -> None:
        self._redis.delete(key)

    def list_keys(self) -> list[str]:
        """List keys using SCAN.

        Uses SCAN instead of KEYS for production safety.
        """
        keys: list[str] = []
        cursor = 0

        while True:
            cursor, batch = self._redis.scan(cursor, count=self._scan_count)
            keys.extend(_decode(key) for key in batch)

            if cursor == 0:
                break

        return keys

    def close(self) -> None:
        """Close the Redis connection."""
        self._redis.close()

    def __enter__(self) -> "RedisDurableStore":
        return self

    def __exit__(self, exc_type: type, exc_val: Exception, exc_tb: object) -> None:
        self.close()


def _decode(raw: bytes | str | None) -> str | None:
    if isinstance(raw, bytes):
        return raw.decode("utf-8")
    return raw
