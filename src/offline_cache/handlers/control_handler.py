"""HTTP handlers for the control surface.

These endpoints stand in for the events a page or the push service would
deliver: commands, pushes, notification clicks and client registration.
"""

from fastapi import HTTPException, status

from offline_cache.dto import (
    ClearCacheResponse,
    ClientMessageRequest,
    ClientRegisteredResponse,
    HealthCheckResponse,
    LifecycleStatusResponse,
    NotificationActionItem,
    NotificationClickRequest,
    NotificationCloseRequest,
    NotificationItem,
    PushResponse,
    RegisterClientRequest,
    SkipWaitingResponse,
    StoredEntryResponse,
    StoreKeysResponse,
    WellnessCheckResponse,
)
from offline_cache.entities import Notification, RequestKey
from offline_cache.errors import StoreMiss
from offline_cache.protocols import StoreRegistry
from offline_cache.repositories import InMemoryClientHost
from offline_cache.services import LifecycleController, NotificationService


def to_notification_item(notification: Notification) -> NotificationItem:
    return NotificationItem(
        title=notification.title,
        body=notification.body,
        icon=notification.icon,
        badge=notification.badge,
        tag=notification.tag,
        require_interaction=notification.require_interaction,
        actions=[
            NotificationActionItem(action=a.action, title=a.title, icon=a.icon) for a in notification.actions
        ],
    )


class ControlHandler:
    """HTTP handlers for lifecycle commands, notifications and clients.

    Example:
        ```python
        handler = ControlHandler(controller, notifications, registry, client_host)

        @app.post("/_sw/messages")
        async def post_message(request: ClientMessageRequest):
            return await handler.post_message(request)
        ```
    """

    def __init__(
        self,
        controller: LifecycleController,
        notifications: NotificationService,
        registry: StoreRegistry,
        client_host: InMemoryClientHost,
    ) -> None:
        self._controller = controller
        self._notifications = notifications
        self._registry = registry
        self._clients = client_host

    async def post_message(self, request: ClientMessageRequest) -> ClearCacheResponse | SkipWaitingResponse:
        """Handle POST /_sw/messages (SKIP_WAITING, CLEAR_CACHE)."""
        if request.type == "SKIP_WAITING":
            state = await self._controller.skip_waiting()
            return SkipWaitingResponse(state=state.value)

        result = await self._controller.clear_all()
        return ClearCacheResponse(success=result.success, message=result.message, error=result.error)

    async def push(self, data: bytes) -> PushResponse:
        """Handle POST /_sw/push with the raw push payload."""
        notification = await self._notifications.handle_push(data)
        return PushResponse(shown=notification is not None)

    async def notification_click(self, request: NotificationClickRequest) -> dict:
        client_id = await self._notifications.handle_click(request.tag, request.action)
        return {"client_id": client_id}

    async def notification_close(self, request: NotificationCloseRequest) -> dict:
        await self._notifications.handle_close(request.tag)
        return {"success": True}

    async def list_notifications(self) -> list[NotificationItem]:
        return [to_notification_item(n) for n in self._clients.notifications]

    async def register_client(self, request: RegisterClientRequest) -> ClientRegisteredResponse:
        client = self._clients.register(request.url, request.type)
        return ClientRegisteredResponse(id=client.id)

    async def unregister_client(self, client_id: str) -> dict:
        """Handle DELETE /_sw/clients/{id}.

        Raises:
            HTTPException: 404 for an unknown client
        """
        try:
            self._clients.unregister(client_id)
        except LookupError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
        return {"success": True}

    async def drain_messages(self, client_id: str) -> list[dict]:
        """Handle GET /_sw/clients/{id}/messages.

        Raises:
            HTTPException: 404 for an unknown client
        """
        try:
            return self._clients.drain_messages(client_id)
        except LookupError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e

    async def wellness_check(self) -> WellnessCheckResponse:
        return WellnessCheckResponse(notified=await self._notifications.wellness_check())

    async def status(self) -> LifecycleStatusResponse:
        return LifecycleStatusResponse(
            state=self._controller.state.value,
            cache_version=self._controller.generations.cache_version,
            stores=await self._controller.store_names(),
        )

    async def store_keys(self, name: str) -> StoreKeysResponse:
        """Handle GET /_sw/stores/{name}/keys.

        Raises:
            HTTPException: 404 if the store does not exist
        """
        if not await self._registry.has(name):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No store named {name}")
        store = await self._registry.open(name)
        return StoreKeysResponse(store=name, keys=[str(k) for k in await store.keys()])

    async def match_entry(self, name: str | None, url: str) -> StoredEntryResponse:
        """Handle GET /_sw/stores/{name}/match?url=...

        Raises:
            StoreMiss: If no entry exists for the URL
        """
        key = RequestKey.for_url(url)
        response = await self._registry.match(key, name)
        if response is None:
            raise StoreMiss(name, str(key))
        return StoredEntryResponse(
            store=name,
            key=str(key),
            status=response.status,
            headers=list(response.headers),
            size=len(response.body),
        )

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        healthy = await self._controller.is_healthy()
        return HealthCheckResponse(
            status="healthy" if healthy else "unhealthy",
            state=self._controller.state.value,
            store_healthy=healthy,
        )
