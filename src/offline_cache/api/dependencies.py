"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Backends preset on app.state before startup (tests) are used as-is
"""

import asyncio
import contextlib
from contextlib import asynccontextmanager
from typing import Annotated

import structlog
from fastapi import Depends, FastAPI, Request

from offline_cache.config import Settings, get_settings
from offline_cache.handlers import ControlHandler, ProxyHandler
from offline_cache.protocols import Fetcher, StoreRegistry
from offline_cache.repositories import (
    HttpxFetcher,
    InMemoryClientHost,
    InMemoryStoreRegistry,
    RedisStoreRegistry,
)
from offline_cache.services import LifecycleController, NotificationService

logger = structlog.get_logger(__name__)


def build_registry(settings: Settings) -> StoreRegistry:
    if settings.store_backend == "redis":
        return RedisStoreRegistry.create(prefix=settings.redis_prefix)
    return InMemoryStoreRegistry()


def get_controller(request: Request) -> LifecycleController:
    """Dependency injection for LifecycleController from app.state.

    Raises:
        RuntimeError: If the controller is not initialized
    """
    controller = getattr(request.app.state, "controller", None)
    if controller is None:
        raise RuntimeError("LifecycleController not initialized. Check lifespan setup.")
    return controller


def get_proxy_handler(request: Request) -> ProxyHandler:
    handler = getattr(request.app.state, "proxy_handler", None)
    if handler is None:
        raise RuntimeError("ProxyHandler not initialized. Check lifespan setup.")
    return handler


def get_control_handler(request: Request) -> ControlHandler:
    handler = getattr(request.app.state, "control_handler", None)
    if handler is None:
        raise RuntimeError("ControlHandler not initialized. Check lifespan setup.")
    return handler


async def run_wellness_checks(notifications: NotificationService, interval: float) -> None:
    """Recurring wellness ping; runs until cancelled."""
    while True:
        await asyncio.sleep(interval)
        await notifications.wellness_check()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores them in app.state:
    1. Backends (store registry, fetcher, client host)
    2. LifecycleController, then installs and, when allowed, activates
    3. Handlers for the proxy and control routes

    Cleanup:
        Cancels the wellness loop, drains pending store writes and removes
        everything from app.state
    """
    settings: Settings = getattr(app.state, "settings", None) or get_settings()
    registry: StoreRegistry = getattr(app.state, "registry", None) or build_registry(settings)
    fetcher: Fetcher = getattr(app.state, "fetcher", None) or HttpxFetcher.create(settings.fetch_timeout)
    client_host: InMemoryClientHost = getattr(app.state, "client_host", None) or InMemoryClientHost()

    controller = LifecycleController.create(settings, registry, fetcher, client_host)
    notifications = NotificationService(client_host, settings)

    app.state.settings = settings
    app.state.registry = registry
    app.state.fetcher = fetcher
    app.state.client_host = client_host
    app.state.controller = controller
    app.state.notifications = notifications
    app.state.proxy_handler = ProxyHandler(controller, settings)
    app.state.control_handler = ControlHandler(controller, notifications, registry, client_host)

    await controller.install()
    logger.info("offline_cache_started", state=controller.state.value, version=settings.cache_version)

    wellness_task = None
    if settings.wellness_interval > 0:
        wellness_task = asyncio.create_task(run_wellness_checks(notifications, settings.wellness_interval))

    yield

    if wellness_task is not None:
        wellness_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await wellness_task

    await controller.shutdown()
    if isinstance(registry, RedisStoreRegistry):
        await registry.aclose()

    for name in (
        "control_handler",
        "proxy_handler",
        "notifications",
        "controller",
        "client_host",
        "fetcher",
        "registry",
        "settings",
    ):
        delattr(app.state, name)
    logger.info("offline_cache_stopped")


# Type aliases for cleaner dependency injection
ControllerDep = Annotated[LifecycleController, Depends(get_controller)]
ProxyHandlerDep = Annotated[ProxyHandler, Depends(get_proxy_handler)]
ControlHandlerDep = Annotated[ControlHandler, Depends(get_control_handler)]
