"""Push notifications, notification clicks and wellness pings."""

import json
from datetime import datetime, timezone
from typing import Any

import structlog

from offline_cache.config import Settings
from offline_cache.entities import Notification, NotificationAction
from offline_cache.errors import MalformedPayload
from offline_cache.protocols import ClientHost

logger = structlog.get_logger(__name__)

OPEN_ACTION = "open"
CLOSE_ACTION = "close"
WELLNESS_CHECK = "WELLNESS_CHECK"


def parse_push_payload(data: bytes | str) -> dict[str, Any]:
    """Decode a push payload into a dict.

    Raises:
        MalformedPayload: If the data is not a JSON object
    """
    try:
        payload = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedPayload(str(e)) from e
    if not isinstance(payload, dict):
        raise MalformedPayload(f"expected a JSON object, got {type(payload).__name__}")
    return payload


def text_field(payload: dict[str, Any], name: str) -> str | None:
    """Read a display string from a push payload.

    Numbers and booleans are shown as text; lists, objects and null are
    ignored so the default applies.
    """
    value = payload.get(name)
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return None


class NotificationService:
    """Turns push deliveries and clicks into client-host operations."""

    def __init__(self, client_host: ClientHost, settings: Settings) -> None:
        self._clients = client_host
        self._settings = settings
        self._icon = settings.resolve("./icons/icon-192.svg")

    @property
    def tag(self) -> str:
        return f"{self._settings.cache_namespace}-notification"

    def build_notification(self, payload: dict[str, Any]) -> Notification:
        app_name = self._settings.app_name
        return Notification(
            title=text_field(payload, "title") or app_name,
            body=text_field(payload, "body") or f"{app_name} wellness reminder",
            icon=self._icon,
            badge=self._icon,
            tag=self.tag,
            require_interaction=False,
            actions=(
                NotificationAction(OPEN_ACTION, f"Open {app_name}", self._icon),
                NotificationAction(CLOSE_ACTION, "Dismiss", self._icon),
            ),
        )

    async def handle_push(self, data: bytes | str | None) -> Notification | None:
        """Display the notification carried by a push payload.

        A malformed payload is logged and nothing is shown.

        Returns:
            The displayed notification, or None
        """
        if not data:
            return None
        try:
            payload = parse_push_payload(data)
        except MalformedPayload as e:
            logger.error("push_notification_error", error=e.message)
            return None

        notification = self.build_notification(payload)
        await self._clients.show_notification(notification)
        logger.info("notification_shown", title=notification.title, tag=notification.tag)
        return notification

    async def handle_click(self, tag: str | None, action: str | None) -> str | None:
        """Close the clicked notification and bring the application forward.

        Returns:
            Id of the focused or opened client, or None for a dismissal
        """
        await self._clients.close_notification(tag)
        if action not in (None, "", OPEN_ACTION):
            return None

        base_url = self._settings.base_url
        for client in await self._clients.match_all("window"):
            if client.url.startswith(base_url):
                focused = await self._clients.focus(client.id)
                return focused.id

        opened = await self._clients.open_window(base_url)
        return opened.id

    async def handle_close(self, tag: str | None) -> None:
        logger.info("notification_dismissed", tag=tag)

    async def wellness_check(self) -> int:
        """Post a WELLNESS_CHECK message to every connected client.

        Failures are logged and not retried.

        Returns:
            Number of clients that received the message
        """
        logger.info("running_wellness_check")
        message = {"type": WELLNESS_CHECK, "timestamp": datetime.now(timezone.utc).isoformat()}
        try:
            clients = await self._clients.match_all()
        except Exception as e:
            logger.error("wellness_check_error", error=str(e))
            return 0

        notified = 0
        for client in clients:
            try:
                await self._clients.post_message(client.id, message)
            except Exception as e:
                logger.error("wellness_check_delivery_failed", client=client.id, error=str(e))
                continue
            notified += 1
        return notified
