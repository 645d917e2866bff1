"""Storage backends for the auth state.

Learn: build_store() is the only place that maps the
CREDSTORE_STORAGE_BACKEND setting to a concrete class. Everything
else depends on the KeyValueStore interface.
"""

from credstore.config import Settings, settings as default_settings
from credstore.storage.base import KeyValueStore, StorageError
from credstore.storage.file_store import JsonFileStore
from credstore.storage.memory_store import MemoryStore
from credstore.storage.redis_store import RedisStore

__all__ = [
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "RedisStore",
    "StorageError",
    "build_store",
]


def build_store(settings: Settings = default_settings) -> KeyValueStore:
    """Create the backend selected by settings (not yet opened)."""
    if settings.storage_backend == "memory":
        return MemoryStore()
    if settings.storage_backend == "redis":
        return RedisStore(url=settings.redis_url, key_prefix=settings.redis_key_prefix)
    return JsonFileStore(settings.storage_path)
