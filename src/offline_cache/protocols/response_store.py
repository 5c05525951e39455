"""Response storage protocols.

Defines the interface for the named stores that hold cached responses and
for the registry that creates, enumerates and deletes them.

Implementations can include:
- In-process dictionaries (default)
- Redis hashes
"""

from typing import Protocol, runtime_checkable

from offline_cache.entities import CachedResponse, RequestKey


@runtime_checkable
class ResponseStore(Protocol):
    """Protocol for one named store.

    put and delete are atomic per key; concurrent writers to the same key
    resolve last-writer-wins.
    """

    @property
    def name(self) -> str:
        """Return the store name (``{version}-{purpose}``)."""
        ...

    async def put(self, key: RequestKey, response: CachedResponse) -> None:
        """Store a response, overwriting any entry for the same key.

        Raises:
            StoreWriteFailure: If the entry could not be persisted
        """
        ...

    async def match(self, key: RequestKey) -> CachedResponse | None:
        """Look up a response by key.

        Returns:
            The stored response, or None on a miss
        """
        ...

    async def keys(self) -> list[RequestKey]:
        """Enumerate the keys currently stored."""
        ...

    async def delete(self, key: RequestKey) -> bool:
        """Delete one entry.

        Returns:
            True if an entry was removed
        """
        ...


@runtime_checkable
class StoreRegistry(Protocol):
    """Protocol for the process-wide set of named stores.

    Example:
        ```python
        registry: StoreRegistry = InMemoryStoreRegistry()
        store = await registry.open("zenflow-v1-static")
        await store.put(RequestKey.for_url(url), response)
        ```
    """

    async def open(self, name: str) -> ResponseStore:
        """Return the named store, creating it if absent."""
        ...

    async def has(self, name: str) -> bool:
        """Check whether a store exists."""
        ...

    async def keys(self) -> list[str]:
        """Enumerate existing store names in creation order."""
        ...

    async def delete(self, name: str) -> bool:
        """Delete a store and everything in it.

        Returns:
            True if the store existed
        """
        ...

    async def match(self, key: RequestKey, store_name: str | None = None) -> CachedResponse | None:
        """Look up a key in one store, or in every store in creation order."""
        ...

    async def health_check(self) -> bool:
        """Check if the backend is accessible."""
        ...
