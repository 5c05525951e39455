"""Offline Cache - resource-caching interception layer with versioned stores.

This package provides a layered architecture for offline resilience:

Layers:
    - protocols: Interface contracts (StoreRegistry, Fetcher, ClientHost)
    - repositories: Backend implementations (in-memory, Redis, httpx)
    - services: Routing, caching strategies and lifecycle sequencing
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from offline_cache.repositories import HttpxFetcher, InMemoryClientHost, InMemoryStoreRegistry
    from offline_cache.services import LifecycleController

    controller = LifecycleController.create(
        settings, InMemoryStoreRegistry(), HttpxFetcher.create(), InMemoryClientHost()
    )
    await controller.install()
    response = await controller.handle(InterceptedRequest("GET", "http://localhost:3000/app.js", "script"))
    ```

For HTTP API:
    ```python
    from offline_cache.api.app import app
    ```
"""

from offline_cache.config import get_redis_client, settings
from offline_cache.entities import CachedResponse, InterceptedRequest, RequestKey
from offline_cache.errors import (
    MalformedPayload,
    NetworkFailure,
    NonCacheableResponse,
    OfflineCacheError,
    StoreMiss,
    StoreReadFailure,
    StoreWriteFailure,
)
from offline_cache.protocols import ClientHost, Fetcher, ResponseStore, StoreRegistry
from offline_cache.repositories import (
    HttpxFetcher,
    InMemoryClientHost,
    InMemoryStoreRegistry,
    RedisStoreRegistry,
)
from offline_cache.services import (
    GenerationManager,
    LifecycleController,
    NotificationService,
    Router,
    StrategyEngine,
)

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Protocols (interfaces)
    "ClientHost",
    "Fetcher",
    "ResponseStore",
    "StoreRegistry",
    # Services (business logic)
    "GenerationManager",
    "LifecycleController",
    "NotificationService",
    "Router",
    "StrategyEngine",
    # Repositories (data access)
    "HttpxFetcher",
    "InMemoryClientHost",
    "InMemoryStoreRegistry",
    "RedisStoreRegistry",
    # Entities (domain models)
    "CachedResponse",
    "InterceptedRequest",
    "RequestKey",
    # Errors
    "OfflineCacheError",
    "NetworkFailure",
    "StoreMiss",
    "StoreReadFailure",
    "StoreWriteFailure",
    "NonCacheableResponse",
    "MalformedPayload",
]
