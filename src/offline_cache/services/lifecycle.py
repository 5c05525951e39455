"""Lifecycle controller.

One instance per process owns the active generation and sequences the
lifecycle: installing → waiting → activating → active.
"""

import asyncio

import structlog

from offline_cache.config import Settings
from offline_cache.entities import (
    CachedResponse,
    ClearResult,
    InterceptedRequest,
    LifecycleState,
    StorePurpose,
)
from offline_cache.errors import NetworkFailure, StoreWriteFailure
from offline_cache.protocols import ClientHost, Fetcher, StoreRegistry

from .background import BackgroundWriter
from .generation_manager import GenerationManager
from .router import Router
from .strategy_engine import StrategyEngine

logger = structlog.get_logger(__name__)


class LifecycleController:
    """Sequences installation, activation and cache clearing.

    Install, activate and clear_all share one lock, so pruning never runs
    concurrently with population of the current generation. Ordinary
    request handling takes no lock.

    Example:
        ```python
        controller = LifecycleController.create(settings, registry, fetcher, client_host)
        await controller.install()        # ends ACTIVE when skip-waiting applies
        response = await controller.handle(request)
        ```
    """

    def __init__(
        self,
        settings: Settings,
        registry: StoreRegistry,
        fetcher: Fetcher,
        client_host: ClientHost,
        generations: GenerationManager,
        engine: StrategyEngine,
        router: Router,
        writer: BackgroundWriter,
    ) -> None:
        self._settings = settings
        self._registry = registry
        self._fetcher = fetcher
        self._client_host = client_host
        self._generations = generations
        self._engine = engine
        self._router = router
        self._writer = writer
        self._state = LifecycleState.INSTALLING
        self._skip_requested = False
        self._sequencer = asyncio.Lock()

    @classmethod
    def create(
        cls,
        settings: Settings,
        registry: StoreRegistry,
        fetcher: Fetcher,
        client_host: ClientHost,
    ) -> "LifecycleController":
        """Factory method wiring the generation manager, engine and router."""
        writer = BackgroundWriter()
        generations = GenerationManager(
            registry,
            cache_version=settings.cache_version,
            namespace=settings.cache_namespace,
            legacy_store_names=settings.legacy_store_names,
        )
        engine = StrategyEngine(
            registry,
            fetcher,
            writer,
            fallback_document_url=settings.resolve(settings.fallback_document),
            app_name=settings.app_name,
        )
        return cls(
            settings=settings,
            registry=registry,
            fetcher=fetcher,
            client_host=client_host,
            generations=generations,
            engine=engine,
            router=Router.create(settings, generations),
            writer=writer,
        )

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def generations(self) -> GenerationManager:
        return self._generations

    @property
    def router(self) -> Router:
        return self._router

    @property
    def writer(self) -> BackgroundWriter:
        return self._writer

    def _transition(self, state: LifecycleState) -> None:
        logger.info("lifecycle_transition", previous=self._state.value, state=state.value)
        self._state = state

    async def install(self) -> None:
        """Create the current generation and pre-populate it.

        Individual asset failures are logged and never abort installation.
        """
        async with self._sequencer:
            if self._state is not LifecycleState.INSTALLING:
                logger.debug("install_skipped", state=self._state.value)
                return

            logger.info("installing", version=self._generations.cache_version)
            await self._generations.ensure_generations()
            await asyncio.gather(self._populate_static(), self._populate_cdn())
            logger.info("installation_complete")
            self._transition(LifecycleState.WAITING)

        if self._skip_requested or self._settings.skip_waiting_on_install:
            await self.activate()

    async def _populate(self, store_name: str, requests: list[InterceptedRequest]) -> int:
        store = await self._registry.open(store_name)

        async def add(request: InterceptedRequest) -> bool:
            try:
                response = await self._fetcher.fetch(request)
            except NetworkFailure as e:
                logger.warning("precache_fetch_failed", url=request.url, store=store_name, error=str(e))
                return False
            if not response.ok:
                logger.warning("precache_failed_status", url=request.url, store=store_name, status=response.status)
                return False
            try:
                await store.put(request.key, response)
            except StoreWriteFailure as e:
                logger.warning("precache_store_failed", url=request.url, store=store_name, error=str(e))
                return False
            return True

        results = await asyncio.gather(*(add(r) for r in requests))
        cached = sum(results)
        logger.info("precache_complete", store=store_name, cached=cached, total=len(requests))
        return cached

    async def _populate_static(self) -> int:
        requests = [
            InterceptedRequest("GET", self._settings.resolve(path)) for path in self._settings.static_assets
        ]
        return await self._populate(self._generations.store_name(StorePurpose.STATIC), requests)

    async def _populate_cdn(self) -> int:
        requests = [InterceptedRequest("GET", url, credentials="omit") for url in self._settings.cdn_resources]
        return await self._populate(self._generations.store_name(StorePurpose.CDN), requests)

    async def skip_waiting(self) -> LifecycleState:
        """Handle the skip-wait signal.

        Activates immediately when waiting; during installation the request
        is remembered and honoured once installation completes.
        """
        logger.info("skip_waiting_received", state=self._state.value)
        if self._state is LifecycleState.INSTALLING:
            self._skip_requested = True
        elif self._state is LifecycleState.WAITING:
            await self.activate()
        return self._state

    async def activate(self) -> None:
        """Cut over to the current generation and claim clients."""
        async with self._sequencer:
            if self._state is not LifecycleState.WAITING:
                logger.debug("activate_skipped", state=self._state.value)
                return
            self._transition(LifecycleState.ACTIVATING)
            deleted = await self._generations.prune_stale()
            logger.info("activation_complete", deleted_stores=deleted)
            await self._client_host.claim()
            self._transition(LifecycleState.ACTIVE)

    async def handle(self, request: InterceptedRequest) -> CachedResponse:
        """Answer an intercepted request.

        Until activation, and for pass-through routes, the request goes
        straight to the network without touching any store.

        Raises:
            NetworkFailure: When a direct or store-preferred fetch fails
        """
        route = self._router.route(request) if self._state is LifecycleState.ACTIVE else None
        if route is None:
            return await self._fetcher.fetch(request)
        return await self._engine.execute(route, request)

    async def clear_all(self) -> ClearResult:
        """Delete every store regardless of version.

        The lifecycle state is left unchanged.
        """
        logger.info("clearing_all_stores")
        async with self._sequencer:
            try:
                names = await self._registry.keys()
                for name in names:
                    await self._registry.delete(name)
            except Exception as e:
                logger.error("clear_all_failed", error=str(e))
                return ClearResult(success=False, error=str(e))
        return ClearResult(success=True, message="Caches cleared", deleted=tuple(names))

    async def store_names(self) -> list[str]:
        return await self._registry.keys()

    async def is_healthy(self) -> bool:
        return await self._registry.health_check()

    async def shutdown(self, timeout: float | None = 5.0) -> None:
        """Let pending store writes finish and release the fetcher."""
        await self._writer.drain(timeout)
        await self._fetcher.aclose()
