"""Domain entities for internal representation.

These are plain dataclasses used internally by services and repositories.
They are NOT used for API contracts - use DTOs from the dto package for that.
"""

from .lifecycle import ClearResult, Client, LifecycleState, Notification, NotificationAction
from .request import InterceptedRequest, RequestKey, normalize_url
from .response import CachedResponse
from .routing import Route, RouteRule, StorePurpose, Strategy

__all__ = [
    "CachedResponse",
    "ClearResult",
    "Client",
    "InterceptedRequest",
    "LifecycleState",
    "Notification",
    "NotificationAction",
    "RequestKey",
    "Route",
    "RouteRule",
    "StorePurpose",
    "Strategy",
    "normalize_url",
]
