"""Caching strategies.

Two algorithms decide how a routed request is answered:

- origin-preferred: fresh network result first, stores as fallback. Used
  for documents and API calls.
- store-preferred: stored result first, network on a miss. Used for static
  assets and third-party bundles that rarely change.
"""

import structlog

from offline_cache.entities import CachedResponse, InterceptedRequest, RequestKey, Route, Strategy
from offline_cache.errors import NetworkFailure, NonCacheableResponse
from offline_cache.protocols import Fetcher, StoreRegistry

from .background import BackgroundWriter

logger = structlog.get_logger(__name__)

SERVICE_UNAVAILABLE = 503
OFFLINE_REASON = "Service Unavailable"

PLACEHOLDER_IMAGE = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100">'
    '<rect fill="#e5e7eb" width="100" height="100"/></svg>'
)


def offline_document(app_name: str) -> CachedResponse:
    """Minimal HTML page returned when a document has no fallback."""
    return CachedResponse.build(
        status=SERVICE_UNAVAILABLE,
        reason=OFFLINE_REASON,
        headers={"Content-Type": "text/html; charset=utf-8"},
        body=(
            "<h1>Offline</h1>"
            f"<p>{app_name} is currently offline. Please check your connection.</p>"
        ),
    )


def offline_response() -> CachedResponse:
    return CachedResponse.build(
        status=SERVICE_UNAVAILABLE,
        reason=OFFLINE_REASON,
        headers={"Content-Type": "text/plain; charset=utf-8"},
        body="Service unavailable - offline",
    )


def placeholder_image() -> CachedResponse:
    return CachedResponse.build(
        status=200,
        reason="OK",
        headers={"Content-Type": "image/svg+xml"},
        body=PLACEHOLDER_IMAGE,
    )


def admit(response: CachedResponse) -> CachedResponse:
    """Return the response if it may be stored.

    Raises:
        NonCacheableResponse: For anything but a plain 200
    """
    if not response.is_cacheable:
        raise NonCacheableResponse(response)
    return response


class StrategyEngine:
    """Executes the origin-preferred and store-preferred strategies.

    Store writes are handed to a BackgroundWriter and may complete after
    the response has already been returned.

    Example:
        ```python
        engine = StrategyEngine(registry, fetcher, BackgroundWriter(), fallback_document_url=url)
        response = await engine.store_preferred(request, "zenflow-v1-cdn")
        ```
    """

    def __init__(
        self,
        registry: StoreRegistry,
        fetcher: Fetcher,
        writer: BackgroundWriter,
        fallback_document_url: str | None = None,
        app_name: str = "ZenFlow",
    ) -> None:
        """Initialize the strategy engine.

        Args:
            registry: Registry holding the named stores (required).
            fetcher: Network fetcher (required).
            writer: Sink for fire-and-forget store writes (required).
            fallback_document_url: Document served for uncached documents
                while offline.
            app_name: Application name used in the offline page.
        """
        self._registry = registry
        self._fetcher = fetcher
        self._writer = writer
        self._fallback_key = RequestKey.for_url(fallback_document_url) if fallback_document_url else None
        self._app_name = app_name

    async def execute(self, route: Route, request: InterceptedRequest) -> CachedResponse:
        """Run the strategy selected by the router."""
        if route.strategy is Strategy.STORE_PREFERRED:
            return await self.store_preferred(request, route.store_name)
        return await self.origin_preferred(request, route.store_name)

    def _store_in_background(self, store_name: str, key: RequestKey, response: CachedResponse) -> None:
        async def write() -> None:
            store = await self._registry.open(store_name)
            await store.put(key, response)

        self._writer.schedule(write(), description=f"{store_name} <- {key}")

    async def _lookup(self, key: RequestKey, store_name: str | None = None) -> CachedResponse | None:
        # A store that cannot be read counts as a miss
        try:
            return await self._registry.match(key, store_name)
        except Exception as e:
            logger.warning("store_read_failed", key=str(key), store=store_name, error=str(e))
            return None

    async def origin_preferred(self, request: InterceptedRequest, store_name: str) -> CachedResponse:
        """Prefer the network, fall back to the store.

        Business logic:
        1. Fetch from the network
        2. On a 200, store a copy in the background and return it
        3. Any other status passes through unmodified and is not stored
        4. On network failure, return the stored entry, the fallback
           document, or a synthesized 503

        Always resolves; never raises NetworkFailure.
        """
        key = request.key
        try:
            response = await self._fetcher.fetch(request)
        except NetworkFailure as e:
            logger.warning("network_failed_checking_store", url=request.url, store=store_name, error=str(e))
            return await self._fallback(request, store_name)

        try:
            self._store_in_background(store_name, key, admit(response))
        except NonCacheableResponse:
            logger.debug("response_not_cached", url=request.url, status=response.status)
        return response

    async def _fallback(self, request: InterceptedRequest, store_name: str) -> CachedResponse:
        cached = await self._lookup(request.key, store_name)
        if cached is not None:
            logger.info("returning_stored_response", url=request.url, store=store_name)
            return cached

        if request.is_document:
            if self._fallback_key is not None:
                fallback = await self._lookup(self._fallback_key)
                if fallback is not None:
                    logger.info("returning_fallback_document", url=request.url)
                    return fallback
            return offline_document(self._app_name)

        return offline_response()

    async def store_preferred(self, request: InterceptedRequest, store_name: str) -> CachedResponse:
        """Prefer the store, fall back to the network.

        Business logic:
        1. Return the stored entry on a hit, with no network round-trip
        2. On a miss, fetch; store a 200 in the background and return it
        3. Otherwise images get a placeholder; other non-200 responses pass
           through and network failures propagate

        Raises:
            NetworkFailure: If a non-image fetch fails on a store miss
        """
        key = request.key
        cached = await self._lookup(key, store_name)
        if cached is not None:
            logger.debug("store_hit", url=request.url, store=store_name)
            return cached

        logger.debug("store_miss_fetching", url=request.url, store=store_name)
        try:
            response = admit(await self._fetcher.fetch(request))
        except NetworkFailure as e:
            logger.warning("fetch_failed", url=request.url, error=str(e))
            if request.is_image:
                return placeholder_image()
            raise
        except NonCacheableResponse as e:
            if request.is_image:
                return placeholder_image()
            return e.response

        self._store_in_background(store_name, key, response)
        return response
