"""Redis implementation of StoreRegistry.

Stores survive process restarts, which makes generation cutover observable
across deployments. Layout:

- ``{prefix}:stores``: sorted set of store names scored by creation time
- ``{prefix}:store:{name}``: hash mapping ``str(RequestKey)`` to the JSON
  form of a CachedResponse
"""

import json
import time

import redis.asyncio as redis
import structlog

from offline_cache.config import get_redis_client, settings
from offline_cache.entities import CachedResponse, RequestKey
from offline_cache.errors import StoreReadFailure, StoreWriteFailure

logger = structlog.get_logger(__name__)


class RedisResponseStore:
    """Named store kept in a single Redis hash.

    Satisfies the ResponseStore protocol. HSET and HDEL are atomic per
    field, which gives per-key atomicity.
    """

    def __init__(self, client: redis.Redis, name: str, hash_key: str) -> None:
        self._client = client
        self._name = name
        self._hash_key = hash_key

    @property
    def name(self) -> str:
        return self._name

    async def put(self, key: RequestKey, response: CachedResponse) -> None:
        """Store a response in the hash.

        Raises:
            StoreWriteFailure: On any Redis error
        """
        try:
            await self._client.hset(self._hash_key, str(key), json.dumps(response.to_dict()))
        except redis.RedisError as e:
            raise StoreWriteFailure(self._name, str(key), str(e)) from e

    async def match(self, key: RequestKey) -> CachedResponse | None:
        """Look up a stored response.

        Raises:
            StoreReadFailure: On any Redis error
        """
        try:
            raw = await self._client.hget(self._hash_key, str(key))
        except redis.RedisError as e:
            raise StoreReadFailure(self._name, str(key), str(e)) from e
        if raw is None:
            return None
        return CachedResponse.from_dict(json.loads(raw))

    async def keys(self) -> list[RequestKey]:
        try:
            fields = await self._client.hkeys(self._hash_key)
        except redis.RedisError as e:
            raise StoreReadFailure(self._name, "*", str(e)) from e
        return [RequestKey.parse(f.decode() if isinstance(f, bytes) else f) for f in fields]

    async def delete(self, key: RequestKey) -> bool:
        removed: int = await self._client.hdel(self._hash_key, str(key))
        return removed > 0


class RedisStoreRegistry:
    """Redis-backed registry of named stores.

    Satisfies the StoreRegistry protocol through structural typing.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        prefix: str | None = None,
    ) -> None:
        """Initialize the Redis store registry.

        Args:
            redis_client: Async Redis client. If None, creates default.
            prefix: Key prefix for every key this registry writes.
        """
        self._client = redis_client or get_redis_client()
        self._prefix = prefix or settings.redis_prefix

    @classmethod
    def create(cls, prefix: str | None = None) -> "RedisStoreRegistry":
        """Factory method to create RedisStoreRegistry with defaults."""
        return cls(prefix=prefix)

    @property
    def _index_key(self) -> str:
        return f"{self._prefix}:stores"

    def _hash_key(self, name: str) -> str:
        return f"{self._prefix}:store:{name}"

    async def open(self, name: str) -> RedisResponseStore:
        # NX keeps the original creation score when the store already exists
        added = await self._client.zadd(self._index_key, {name: time.time()}, nx=True)
        if added:
            logger.debug("store_created", store=name, backend="redis")
        return RedisResponseStore(self._client, name, self._hash_key(name))

    async def has(self, name: str) -> bool:
        return await self._client.zscore(self._index_key, name) is not None

    async def keys(self) -> list[str]:
        names = await self._client.zrange(self._index_key, 0, -1)
        return [n.decode() if isinstance(n, bytes) else n for n in names]

    async def delete(self, name: str) -> bool:
        pipe = self._client.pipeline()
        pipe.zrem(self._index_key, name)
        pipe.delete(self._hash_key(name))
        removed, _ = await pipe.execute()
        if removed:
            logger.debug("store_deleted", store=name, backend="redis")
        return bool(removed)

    async def match(self, key: RequestKey, store_name: str | None = None) -> CachedResponse | None:
        """Look up a response in one store, or in every store in creation order.

        Raises:
            StoreReadFailure: On any Redis error
        """
        try:
            names = [store_name] if store_name is not None else await self.keys()
            present = [name for name in names if await self.has(name)]
        except redis.RedisError as e:
            raise StoreReadFailure(store_name, str(key), str(e)) from e
        for name in present:
            response = await RedisResponseStore(self._client, name, self._hash_key(name)).match(key)
            if response is not None:
                return response
        return None

    async def health_check(self) -> bool:
        """Check if Redis is accessible."""
        try:
            return bool(await self._client.ping())
        except redis.RedisError:
            return False

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
