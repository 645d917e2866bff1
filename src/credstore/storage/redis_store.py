"""Redis store: keys live in Redis under a namespace prefix.

Learn: Uses redis.asyncio with decode_responses=True, so GET returns str,
not bytes. Keys are namespaced (credstore:session, credstore:registry)
so several apps can share one Redis database.

The connection pool is created in open() and closed in close(); a
client can also be injected directly (tests, shared pools), in which
case close() leaves it alone.
"""

from typing import Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from credstore.storage.base import KeyValueStore, StorageError


class RedisStore(KeyValueStore):
    """KeyValueStore backed by a Redis server."""

    name = "redis"

    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        key_prefix: str = "credstore:",
        client: Optional[aioredis.Redis] = None,
    ):
        self.url = url
        self.key_prefix = key_prefix
        self._redis = client
        self._owns_client = client is None

    def _key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def _client(self, operation: str, key: str) -> aioredis.Redis:
        if self._redis is None:
            raise StorageError(operation, key, "Redis not initialized. Call open() first.")
        return self._redis

    async def open(self) -> None:
        if self._redis is not None:
            return
        self._redis = aioredis.from_url(
            self.url,
            encoding="utf-8",
            decode_responses=True,
        )
        # Verify connection
        try:
            await self._redis.ping()
        except RedisError as e:
            raise StorageError("open", self.url, str(e)) from e

    async def close(self) -> None:
        if self._redis is not None and self._owns_client:
            await self._redis.aclose()
            self._redis = None

    async def get(self, key: str) -> Optional[str]:
        r = self._client("get", key)
        try:
            return await r.get(self._key(key))
        except RedisError as e:
            raise StorageError("get", key, str(e)) from e

    async def set(self, key: str, value: str) -> None:
        r = self._client("set", key)
        try:
            await r.set(self._key(key), value)
        except RedisError as e:
            raise StorageError("set", key, str(e)) from e

    async def remove(self, key: str) -> None:
        r = self._client("remove", key)
        try:
            await r.delete(self._key(key))
        except RedisError as e:
            raise StorageError("remove", key, str(e)) from e
