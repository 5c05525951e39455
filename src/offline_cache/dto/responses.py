"""Response DTOs for API endpoints."""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: dict[str, Any] = Field(default_factory=dict)


class ClearCacheResponse(BaseModel):
    """Response DTO for the clear-cache command."""

    success: bool = Field(..., description="Whether every store was deleted")
    message: str | None = Field(None, description="Status message on success")
    error: str | None = Field(None, description="Failure reason")


class SkipWaitingResponse(BaseModel):
    """Response DTO for the skip-waiting command."""

    state: str = Field(..., description="Lifecycle state after the signal")


class LifecycleStatusResponse(BaseModel):
    """Response DTO for lifecycle status."""

    state: str = Field(..., description="installing, waiting, activating or active")
    cache_version: str = Field(..., description="Active cache version")
    stores: list[str] = Field(default_factory=list, description="Existing store names")


class StoreKeysResponse(BaseModel):
    """Response DTO for enumerating a store."""

    store: str
    keys: list[str] = Field(default_factory=list)


class StoredEntryResponse(BaseModel):
    """Response DTO describing one stored entry."""

    store: str | None
    key: str
    status: int
    headers: list[tuple[str, str]] = Field(default_factory=list)
    size: int = Field(..., ge=0, description="Body size in bytes")


class PushResponse(BaseModel):
    """Response DTO for a push delivery."""

    shown: bool = Field(..., description="Whether a notification was displayed")


class NotificationActionItem(BaseModel):
    action: str
    title: str
    icon: str | None = None


class NotificationItem(BaseModel):
    """A displayed notification."""

    title: str
    body: str
    icon: str | None = None
    badge: str | None = None
    tag: str | None = None
    require_interaction: bool = False
    actions: list[NotificationActionItem] = Field(default_factory=list)


class ClientRegisteredResponse(BaseModel):
    id: str = Field(..., description="Identifier of the registered client")


class WellnessCheckResponse(BaseModel):
    notified: int = Field(..., ge=0, description="Number of clients notified")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy' or 'unhealthy'")
    state: str = Field(..., description="Lifecycle state")
    store_healthy: bool = Field(..., description="Whether the store backend is reachable")
