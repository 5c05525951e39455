"""In-memory implementation of StoreRegistry.

The default backend. Stores live for the lifetime of the process and are
shared by every request task without external locking.
"""

import asyncio

import structlog

from offline_cache.entities import CachedResponse, RequestKey

logger = structlog.get_logger(__name__)


class InMemoryResponseStore:
    """Dictionary-backed named store.

    Satisfies the ResponseStore protocol. Each put or delete is a single
    dict operation with no suspension point, so it is atomic per key.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._entries: dict[RequestKey, CachedResponse] = {}

    @property
    def name(self) -> str:
        return self._name

    async def put(self, key: RequestKey, response: CachedResponse) -> None:
        self._entries[key] = response

    async def match(self, key: RequestKey) -> CachedResponse | None:
        return self._entries.get(key)

    async def keys(self) -> list[RequestKey]:
        return list(self._entries)

    async def delete(self, key: RequestKey) -> bool:
        return self._entries.pop(key, None) is not None

    def __len__(self) -> int:
        return len(self._entries)


class InMemoryStoreRegistry:
    """In-process registry of named stores.

    Satisfies the StoreRegistry protocol. Dicts preserve insertion order,
    which gives creation-order enumeration for free.
    """

    def __init__(self) -> None:
        self._stores: dict[str, InMemoryResponseStore] = {}
        self._lock = asyncio.Lock()

    async def open(self, name: str) -> InMemoryResponseStore:
        async with self._lock:
            store = self._stores.get(name)
            if store is None:
                store = InMemoryResponseStore(name)
                self._stores[name] = store
                logger.debug("store_created", store=name)
            return store

    async def has(self, name: str) -> bool:
        return name in self._stores

    async def keys(self) -> list[str]:
        return list(self._stores)

    async def delete(self, name: str) -> bool:
        async with self._lock:
            removed = self._stores.pop(name, None) is not None
        if removed:
            logger.debug("store_deleted", store=name)
        return removed

    async def match(self, key: RequestKey, store_name: str | None = None) -> CachedResponse | None:
        if store_name is not None:
            store = self._stores.get(store_name)
            return await store.match(key) if store else None

        for store in list(self._stores.values()):
            response = await store.match(key)
            if response is not None:
                return response
        return None

    async def health_check(self) -> bool:
        return True
