"""Core interfaces (Protocol classes) for sprintcache."""

from sprintcache.core.interfaces.durable_store import DurableStoreError, IDurableStore
from sprintcache.core.interfaces.serializer import ISerializer

__all__ = [
    "IDurableStore",
    "ISerializer",
    "DurableStoreError",
]
