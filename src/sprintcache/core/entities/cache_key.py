"""Cache key value object."""

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


def encode_param(value: Any) -> str:
    """Encode a single query parameter value.

    Values are JSON-encoded in compact form with sorted object keys, so
    strings stay quoted and nested mappings encode the same regardless of
    insertion order.
    """
    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    )


@dataclass(frozen=True)
class CacheKey:
    """Immutable cache key value object.

    Encapsulates a logical resource name and its canonicalized query
    parameters before they are flattened into a string.
    """

    base: str
    params: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        """Return the full cache key string.

        Returns:
            ``base`` alone when there are no parameters, otherwise
            ``"{base}?{name=value&...}"``.
        """
        if not self.params:
            return self.base
        encoded = "&".join(f"{name}={value}" for name, value in self.params)
        return f"{self.base}?{encoded}"

    @classmethod
    def from_params(
        cls,
        base: str,
        params: Mapping[str, Any] | None = None,
    ) -> "CacheKey":
        """Create a CacheKey from a base name and raw parameters.

        ``None`` values are dropped, the rest are sorted by name.

        Args:
            base: Logical resource name, e.g. ``"listings"``.
            params: Query parameters in any order.

        Returns:
            A new CacheKey instance.
        """
        if not params:
            return cls(base=base)

        canonical = tuple(
            (name, encode_param(value))
            for name, value in sorted(params.items())
            if value is not None
        )
        return cls(base=base, params=canonical)


def derive_key(base: str, params: Mapping[str, Any] | None = None) -> str:
    """Derive a deterministic cache key string.

    Example:
        >>> derive_key("listings", {"limit": 3, "featured": True})
        'listings?featured=true&limit=3'
    """
    return str(CacheKey.from_params(base, params))
