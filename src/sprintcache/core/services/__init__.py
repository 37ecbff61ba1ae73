"""Domain services for sprintcache."""

from sprintcache.core.services.read_through_cache import ReadThroughCache
from sprintcache.core.services.revalidator import Fetch, RefreshState, Revalidator

__all__ = [
    "ReadThroughCache",
    "Revalidator",
    "RefreshState",
    "Fetch",
]
