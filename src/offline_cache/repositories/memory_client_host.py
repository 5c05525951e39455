"""In-memory implementation of ClientHost.

Pages register themselves over the control API and poll for the messages
posted to them; notifications are kept in a list for the host application
to render.
"""

import uuid
from typing import Any

import structlog

from offline_cache.entities import Client, Notification

logger = structlog.get_logger(__name__)


class InMemoryClientHost:
    """ClientHost backed by process memory."""

    def __init__(self) -> None:
        self._clients: dict[str, Client] = {}
        self._notifications: list[Notification] = []
        self.claimed = False

    def register(self, url: str, client_type: str = "window") -> Client:
        client = Client(id=uuid.uuid4().hex, url=url, type=client_type)
        self._clients[client.id] = client
        return client

    def unregister(self, client_id: str) -> None:
        """Forget a page that has closed.

        Raises:
            LookupError: For an unknown client
        """
        del self._clients[self.get(client_id).id]

    def get(self, client_id: str) -> Client:
        try:
            return self._clients[client_id]
        except KeyError:
            raise LookupError(f"Unknown client: {client_id}") from None

    def drain_messages(self, client_id: str) -> list[dict[str, Any]]:
        """Return and forget the messages queued for a client."""
        client = self.get(client_id)
        messages, client.messages = client.messages, []
        return messages

    @property
    def notifications(self) -> list[Notification]:
        return list(self._notifications)

    async def claim(self) -> None:
        self.claimed = True
        logger.debug("clients_claimed", count=len(self._clients))

    async def match_all(self, client_type: str | None = None) -> list[Client]:
        return [c for c in self._clients.values() if client_type is None or c.type == client_type]

    async def post_message(self, client_id: str, message: dict[str, Any]) -> None:
        self.get(client_id).messages.append(message)

    async def focus(self, client_id: str) -> Client:
        target = self.get(client_id)
        for client in self._clients.values():
            client.focused = client is target
        return target

    async def open_window(self, url: str) -> Client:
        client = self.register(url, "window")
        return await self.focus(client.id)

    async def show_notification(self, notification: Notification) -> None:
        # A notification with the same tag replaces the previous one
        if notification.tag is not None:
            self._notifications = [n for n in self._notifications if n.tag != notification.tag]
        self._notifications.append(notification)

    async def close_notification(self, tag: str | None) -> None:
        self._notifications = [n for n in self._notifications if n.tag != tag]
