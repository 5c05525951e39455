"""Request DTOs for API endpoints."""

from typing import Literal

from pydantic import BaseModel, Field


class ClientMessageRequest(BaseModel):
    """Command sent by a page to the interception layer."""

    type: Literal["SKIP_WAITING", "CLEAR_CACHE"] = Field(..., description="Command name")


class NotificationClickRequest(BaseModel):
    """Request DTO for a notification click."""

    tag: str | None = Field(None, description="Tag of the clicked notification")
    action: str | None = Field(
        None,
        description="Clicked action ('open', 'close'); empty for a click on the body",
    )


class NotificationCloseRequest(BaseModel):
    """Request DTO for a notification dismissal."""

    tag: str | None = Field(None, description="Tag of the dismissed notification")


class RegisterClientRequest(BaseModel):
    """Request DTO for registering a connected page."""

    url: str = Field(..., description="URL the page is showing", min_length=1)
    type: str = Field("window", description="Client type")
