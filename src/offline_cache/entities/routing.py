"""Routing and strategy entities."""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from .request import InterceptedRequest


class Strategy(str, Enum):
    """Caching algorithm bound to a route."""

    ORIGIN_PREFERRED = "origin-preferred"
    STORE_PREFERRED = "store-preferred"


class StorePurpose(str, Enum):
    """Purpose segment of a store name."""

    STATIC = "static"
    API = "api"
    CDN = "cdn"


@dataclass(frozen=True)
class RouteRule:
    """One row of the routing table.

    Attributes:
        name: Rule identifier, used in logs
        matcher: Predicate deciding whether the rule applies
        strategy: Strategy to run, or None to pass the request through
        store_name: Target store, None for pass-through rules
    """

    name: str
    matcher: Callable[[InterceptedRequest], bool]
    strategy: Strategy | None = None
    store_name: str | None = None

    @property
    def is_passthrough(self) -> bool:
        return self.strategy is None

    def matches(self, request: InterceptedRequest) -> bool:
        return self.matcher(request)


@dataclass(frozen=True)
class Route:
    """The (strategy, store) pair selected for a request."""

    rule: str
    strategy: Strategy
    store_name: str
