"""Cache decorators for storefront fetch and mutation functions.

``cached`` routes an async fetch function through a Revalidator so that
repeat calls are served from the cache and stale results are refreshed
in the background. ``invalidates`` evicts the affected keys after a
mutation succeeds.
"""

import functools
import inspect
import re
from collections.abc import Callable
from datetime import timedelta
from typing import Any, TypeVar

from sprintcache.core.entities.cache_key import derive_key, encode_param
from sprintcache.core.services.read_through_cache import ReadThroughCache
from sprintcache.core.services.revalidator import Revalidator

F = TypeVar("F", bound=Callable[..., Any])

# "?" starts the query part of a key, so templates treat it literally
_GLOB_CHARS = re.compile(r"[*\[]")
_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def cached(
    revalidator: Revalidator,
    base: str,
    ttl: timedelta | None = None,
) -> Callable[[F], F]:
    """Decorator for caching async fetch results.

    The cache key is derived from ``base`` and the keyword arguments of
    the call, so the decorated function must be called with keyword
    arguments only. ``None`` arguments do not take part in the key.

    Args:
        revalidator: The revalidator serving and refreshing the results.
        base: Logical resource name used as the key base.
        ttl: Time-to-live for cached results. Uses config default if None.

    Returns:
        Decorated function.

    Example:
        @cached(revalidator, "listings", ttl=CacheTTL.LISTINGS)
        async def fetch_listings(category_id=None, limit=None) -> list[dict]:
            return await api.listings(category_id=category_id, limit=limit)
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            if args:
                raise TypeError(
                    f"{func.__name__}() is cached by keyword arguments only"
                )

            key = derive_key(base, kwargs)
            return await revalidator.load(
                key,
                functools.partial(func, **kwargs),
                ttl=ttl,
            )

        return wrapper  # type: ignore

    return decorator


def invalidates(
    cache: ReadThroughCache,
    keys: list[str],
) -> Callable[[F], F]:
    """Decorator for evicting cache entries after a mutation.

    Executes the decorated function and then evicts every key. Keys
    support ``{arg_name}`` interpolation from the call's arguments,
    positional or keyword, with defaults applied. Keys containing glob
    characters evict every matching entry.

    Placeholders after a ``?`` are encoded the way :func:`derive_key`
    encodes parameter values, so ``"listings?category_id={category_id}"``
    matches the key ``cached`` stores for ``category_id="saas"``. List
    query parameters in name order, as ``derive_key`` does.

    Evicting a key also discards any refresh of it that a Revalidator
    started before the mutation, so pre-mutation data is not written back.

    Args:
        cache: The cache to evict from.
        keys: Key templates to evict.

    Returns:
        Decorated function.

    Example:
        @invalidates(cache, ["listings*", "listing:{listing_id}"])
        async def approve_listing(listing_id: str) -> None:
            await api.update("listings", listing_id, moderation_status="live")
    """

    def decorator(func: F) -> F:
        signature = inspect.signature(func)

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            # Execute function first
            result = await func(*args, **kwargs)

            arguments = _bind_arguments(signature, args, kwargs)
            for template in keys:
                if _GLOB_CHARS.search(_PLACEHOLDER.sub("", template)):
                    cache.evict_matching(
                        _interpolate_string(template, arguments, escape=True)
                    )
                else:
                    cache.evict(_interpolate_string(template, arguments))

            return result

        return wrapper  # type: ignore

    return decorator


def _bind_arguments(
    signature: inspect.Signature,
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
) -> dict[str, Any]:
    """Map a call's arguments to parameter names, defaults included."""
    bound = signature.bind(*args, **kwargs)
    bound.apply_defaults()
    arguments = dict(bound.arguments)
    for name, param in signature.parameters.items():
        if param.kind is inspect.Parameter.VAR_KEYWORD:
            arguments.update(arguments.pop(name, {}))
    return arguments


def _interpolate_string(
    template: str,
    kwargs: dict[str, Any],
    escape: bool = False,
) -> str:
    """Interpolate {arg_name} placeholders in string.

    Placeholders in the query part, after the first ``?``, are filled in
    with :func:`encode_param`; the rest use ``str()``.

    Args:
        template: String with {arg_name} placeholders.
        kwargs: Argument values for interpolation.
        escape: Escape glob characters in the filled-in values.

    Returns:
        Interpolated string.
    """
    query_start = template.find("?")

    def replacer(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in kwargs:
            return match.group(0)  # Keep original if not found
        if 0 <= query_start < match.start():
            value = encode_param(kwargs[name])
        else:
            value = str(kwargs[name])
        if escape:
            value = re.sub(r"([*?\[])", r"[\1]", value)
        return value

    return _PLACEHOLDER.sub(replacer, template)
