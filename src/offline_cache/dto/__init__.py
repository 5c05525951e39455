"""Data Transfer Objects for API contracts.

These Pydantic models define the external API contract.
They are used for request/response validation and serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import (
    ClientMessageRequest,
    NotificationClickRequest,
    NotificationCloseRequest,
    RegisterClientRequest,
)
from .responses import (
    ClearCacheResponse,
    ClientRegisteredResponse,
    ErrorResponse,
    HealthCheckResponse,
    LifecycleStatusResponse,
    NotificationActionItem,
    NotificationItem,
    PushResponse,
    SkipWaitingResponse,
    StoredEntryResponse,
    StoreKeysResponse,
    WellnessCheckResponse,
)

__all__ = [
    "ClientMessageRequest",
    "NotificationClickRequest",
    "NotificationCloseRequest",
    "RegisterClientRequest",
    "ClearCacheResponse",
    "ClientRegisteredResponse",
    "ErrorResponse",
    "HealthCheckResponse",
    "LifecycleStatusResponse",
    "NotificationActionItem",
    "NotificationItem",
    "PushResponse",
    "SkipWaitingResponse",
    "StoredEntryResponse",
    "StoreKeysResponse",
    "WellnessCheckResponse",
]
