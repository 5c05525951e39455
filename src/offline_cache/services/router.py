"""Request classification.

The routing table is an ordered tuple of RouteRule rows evaluated top to
bottom; the first match wins. API detection precedes static-asset
detection so that API paths are never treated as static files.
"""

from collections.abc import Callable, Iterable

import httpx
import structlog

from offline_cache.config import Settings
from offline_cache.entities import InterceptedRequest, Route, RouteRule, StorePurpose, Strategy

from .generation_manager import GenerationManager

logger = structlog.get_logger(__name__)

NETWORK_SCHEMES = frozenset({"http", "https"})
STATIC_DESTINATIONS = frozenset({"image", "font", "style", "script"})
MANIFEST_SUFFIX = "manifest.json"

Predicate = Callable[[InterceptedRequest], bool]


def is_passthrough(request: InterceptedRequest) -> bool:
    """Non-read methods and non-network schemes are never intercepted."""
    return request.method.upper() != "GET" or request.parsed_url.scheme not in NETWORK_SCHEMES


def has_api_label(host: str) -> bool:
    """Check for an ``api`` DNS label, e.g. api.example.com or eu.api.example.com."""
    return "api" in host.lower().split(".")[:-1]


def api_matcher(api_hosts: Iterable[str]) -> Predicate:
    hosts = frozenset(h.lower() for h in api_hosts)

    def is_api(request: InterceptedRequest) -> bool:
        url = request.parsed_url
        return url.host in hosts or "/api/" in url.path or has_api_label(url.host)

    return is_api


def host_matcher(allowed_hosts: Iterable[str]) -> Predicate:
    hosts = frozenset(h.lower() for h in allowed_hosts)

    def is_allowed_host(request: InterceptedRequest) -> bool:
        return request.parsed_url.host in hosts

    return is_allowed_host


def same_origin(origin_url: str) -> Callable[[httpx.URL], bool]:
    origin = httpx.URL(origin_url)

    def check(url: httpx.URL) -> bool:
        return (url.scheme, url.host, url.port) == (origin.scheme, origin.host, origin.port)

    return check


def static_asset_matcher(origin_url: str, suffixes: Iterable[str]) -> Predicate:
    is_same_origin = same_origin(origin_url)
    suffix_tuple = tuple(s.lower() for s in suffixes)

    def is_static_asset(request: InterceptedRequest) -> bool:
        url = request.parsed_url
        if not is_same_origin(url):
            return False
        return request.destination in STATIC_DESTINATIONS or url.path.lower().endswith(suffix_tuple)

    return is_static_asset


def document_matcher(origin_url: str) -> Predicate:
    is_same_origin = same_origin(origin_url)

    def is_document(request: InterceptedRequest) -> bool:
        url = request.parsed_url
        return is_same_origin(url) and (request.is_document or url.path.endswith(MANIFEST_SUFFIX))

    return is_document


def always(request: InterceptedRequest) -> bool:
    return True


def build_route_table(settings: Settings, generations: GenerationManager) -> tuple[RouteRule, ...]:
    """Build the fixed routing table for the current generation."""
    static_store = generations.store_name(StorePurpose.STATIC)
    return (
        RouteRule("passthrough", is_passthrough),
        RouteRule(
            "api",
            api_matcher(settings.api_hosts),
            Strategy.ORIGIN_PREFERRED,
            generations.store_name(StorePurpose.API),
        ),
        RouteRule(
            "cdn",
            host_matcher(settings.cdn_hosts),
            Strategy.STORE_PREFERRED,
            generations.store_name(StorePurpose.CDN),
        ),
        RouteRule(
            "static-asset",
            static_asset_matcher(settings.origin_url, settings.static_suffixes),
            Strategy.STORE_PREFERRED,
            static_store,
        ),
        RouteRule("document", document_matcher(settings.origin_url), Strategy.ORIGIN_PREFERRED, static_store),
        RouteRule("default", always, Strategy.ORIGIN_PREFERRED, static_store),
    )


class Router:
    """Selects the (strategy, store) pair for each request."""

    def __init__(self, rules: Iterable[RouteRule]) -> None:
        self._rules = tuple(rules)

    @classmethod
    def create(cls, settings: Settings, generations: GenerationManager) -> "Router":
        return cls(build_route_table(settings, generations))

    @property
    def rules(self) -> tuple[RouteRule, ...]:
        return self._rules

    def route(self, request: InterceptedRequest) -> Route | None:
        """Classify a request.

        Returns:
            The selected route, or None when the request must pass through
        """
        for rule in self._rules:
            if not rule.matches(request):
                continue
            if rule.is_passthrough or rule.store_name is None:
                return None
            logger.debug("request_routed", url=request.url, rule=rule.name, strategy=rule.strategy.value)
            return Route(rule=rule.name, strategy=rule.strategy, store_name=rule.store_name)
        return None
