from functools import lru_cache

from hireprep.core.config import settings

from .backends import InMemoryKeyValueStore, KeyValueStore, SqliteKeyValueStore
from .collections import KeyedCollection, SingletonSlot
from .prep_store import HistoryCollection, PrepStore, SavedInputCollection, generate_id


@lru_cache(maxsize=1)
def get_kv_store() -> KeyValueStore:
    if settings.storage_backend == "memory":
        return InMemoryKeyValueStore()
    return SqliteKeyValueStore(settings.storage_db_path)


__all__ = [
    "KeyValueStore",
    "InMemoryKeyValueStore",
    "SqliteKeyValueStore",
    "KeyedCollection",
    "SingletonSlot",
    "SavedInputCollection",
    "HistoryCollection",
    "PrepStore",
    "generate_id",
    "get_kv_store",
]
