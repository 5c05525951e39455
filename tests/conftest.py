"""
Pytest configuration and fixtures for offline cache tests.
"""

from collections.abc import Callable

import pytest

from offline_cache.config import Settings
from offline_cache.entities import CachedResponse, InterceptedRequest
from offline_cache.errors import NetworkFailure
from offline_cache.repositories import InMemoryClientHost, InMemoryStoreRegistry
from offline_cache.services import BackgroundWriter, GenerationManager, StrategyEngine

ORIGIN = "http://app.test"


class FakeFetcher:
    """Fetcher returning canned responses and recording every call.

    URLs without a canned response fail like an unreachable network.
    """

    def __init__(self) -> None:
        self.responses: dict[str, CachedResponse | Exception | Callable[[], CachedResponse]] = {}
        self.calls: list[InterceptedRequest] = []
        self.offline = False
        self.closed = False

    def add(
        self,
        url: str,
        body: bytes | str = b"ok",
        status: int = 200,
        headers: dict[str, str] | list[tuple[str, str]] | None = None,
    ) -> CachedResponse:
        response = CachedResponse.build(status=status, body=body, headers=headers, url=url)
        self.responses[url] = response
        return response

    def fail(self, url: str) -> None:
        self.responses[url] = NetworkFailure(url)

    @property
    def urls(self) -> list[str]:
        return [c.url for c in self.calls]

    async def fetch(self, request: InterceptedRequest) -> CachedResponse:
        self.calls.append(request)
        if self.offline:
            raise NetworkFailure(request.url, "offline")
        outcome = self.responses.get(request.url)
        if outcome is None:
            raise NetworkFailure(request.url, "unreachable")
        if isinstance(outcome, Exception):
            raise outcome
        if callable(outcome):
            return outcome()
        return outcome

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment."""
    return Settings(
        cache_version="zenflow-v2",
        cache_namespace="zenflow",
        legacy_store_names=("default-cache",),
        app_name="ZenFlow",
        origin_url=ORIGIN,
        base_path="/",
        fallback_document="./index.html",
        static_assets=("./", "./index.html", "./icons/icon-192.svg"),
        cdn_resources=("https://cdn.tailwindcss.com/", "https://cdn.jsdelivr.net/npm/lib@1/+esm"),
        api_hosts=("generativelanguage.googleapis.com",),
        cdn_hosts=("cdn.tailwindcss.com", "fonts.googleapis.com", "cdn.jsdelivr.net", "fonts.gstatic.com"),
        static_suffixes=(".svg", ".png", ".jpg", ".jpeg", ".webp"),
        skip_waiting_on_install=True,
        wellness_interval=0,
        store_backend="memory",
    )


@pytest.fixture
def registry() -> InMemoryStoreRegistry:
    return InMemoryStoreRegistry()


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def client_host() -> InMemoryClientHost:
    return InMemoryClientHost()


@pytest.fixture
def writer() -> BackgroundWriter:
    return BackgroundWriter()


@pytest.fixture
def generations(registry, settings) -> GenerationManager:
    return GenerationManager(
        registry,
        cache_version=settings.cache_version,
        namespace=settings.cache_namespace,
        legacy_store_names=settings.legacy_store_names,
    )


@pytest.fixture
def engine(registry, fetcher, writer, settings) -> StrategyEngine:
    return StrategyEngine(
        registry,
        fetcher,
        writer,
        fallback_document_url=settings.resolve(settings.fallback_document),
        app_name=settings.app_name,
    )
