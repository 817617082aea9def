from functools import lru_cache

from rsvp_engine.config.settings import settings
from rsvp_engine.storage.base import KeyValueStore, MemoryKeyValueStore
from rsvp_engine.storage.resilient import ResilientKeyValueStore
from rsvp_engine.storage.sql_store import SqlKeyValueStore


@lru_cache
def get_key_value_store() -> KeyValueStore:
    if settings.storage_backend == "memory":
        return MemoryKeyValueStore()
    return ResilientKeyValueStore(
        SqlKeyValueStore(),
        required=settings.persistence_required,
    )


__all__ = [
    "KeyValueStore",
    "MemoryKeyValueStore",
    "ResilientKeyValueStore",
    "SqlKeyValueStore",
    "get_key_value_store",
]
