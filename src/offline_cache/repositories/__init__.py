"""Repository layer for data access.

This layer abstracts external dependencies (Redis, the network, the client
environment) behind protocol-based interfaces. The repositories are
protocol-based (structural typing), not inheritance-based.
"""

from offline_cache.protocols import ClientHost, Fetcher, ResponseStore, StoreRegistry

from .httpx_fetcher import HttpxFetcher
from .memory_client_host import InMemoryClientHost
from .memory_repository import InMemoryResponseStore, InMemoryStoreRegistry
from .redis_repository import RedisResponseStore, RedisStoreRegistry

__all__ = [
    "ClientHost",
    "Fetcher",
    "ResponseStore",
    "StoreRegistry",
    "HttpxFetcher",
    "InMemoryClientHost",
    "InMemoryResponseStore",
    "InMemoryStoreRegistry",
    "RedisResponseStore",
    "RedisStoreRegistry",
]
