"""Client host protocol.

The client host is the environment around the interception layer: the
connected pages it controls and the notification surface it draws on.
"""

from typing import Any, Protocol, runtime_checkable

from offline_cache.entities import Client, Notification


@runtime_checkable
class ClientHost(Protocol):
    """Protocol for the hosting environment's client operations."""

    async def claim(self) -> None:
        """Take control of already-connected clients."""
        ...

    async def match_all(self, client_type: str | None = None) -> list[Client]:
        """List connected clients, optionally filtered by type."""
        ...

    async def post_message(self, client_id: str, message: dict[str, Any]) -> None:
        """Deliver a message to one client."""
        ...

    async def focus(self, client_id: str) -> Client:
        """Focus a window client."""
        ...

    async def open_window(self, url: str) -> Client:
        """Open a new window client at a URL."""
        ...

    async def show_notification(self, notification: Notification) -> None:
        """Display a notification."""
        ...

    async def close_notification(self, tag: str | None) -> None:
        """Close displayed notifications with this tag."""
        ...
