from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse

from offline_cache.api.dependencies import ControlHandlerDep, ProxyHandlerDep, lifespan
from offline_cache.config import Settings, settings
from offline_cache.dto import (
    ClearCacheResponse,
    ClientMessageRequest,
    ClientRegisteredResponse,
    HealthCheckResponse,
    LifecycleStatusResponse,
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
from offline_cache.errors import NetworkFailure, OfflineCacheError, StoreMiss, StoreReadFailure
from offline_cache.logging import configure_logging
from offline_cache.protocols import Fetcher, StoreRegistry
from offline_cache.repositories import InMemoryClientHost

PROXY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

ERROR_STATUS = {
    NetworkFailure: 502,
    StoreMiss: 404,
    StoreReadFailure: 503,
}


async def offline_cache_error_handler(request: Request, exc: OfflineCacheError) -> JSONResponse:
    status_code = next((code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)), 500)
    return JSONResponse(status_code=status_code, content=exc.to_response().model_dump())


def create_app(
    app_settings: Settings | None = None,
    *,
    registry: StoreRegistry | None = None,
    fetcher: Fetcher | None = None,
    client_host: InMemoryClientHost | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Backends passed here replace the ones the lifespan would build from
    settings, which is how tests inject fakes.
    """
    app = FastAPI(
        title="Offline Cache",
        description="Resource-caching interception layer with versioned stores",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.registry = registry
    app.state.fetcher = fetcher
    app.state.client_host = client_host
    app.add_exception_handler(OfflineCacheError, offline_cache_error_handler)

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(handler: ControlHandlerDep) -> HealthCheckResponse:
        """Health check endpoint."""
        return await handler.health_check()

    @app.get("/_sw/status", response_model=LifecycleStatusResponse)
    async def lifecycle_status(handler: ControlHandlerDep) -> LifecycleStatusResponse:
        return await handler.status()

    @app.post("/_sw/messages", response_model=ClearCacheResponse | SkipWaitingResponse)
    async def post_message(
        request: ClientMessageRequest, handler: ControlHandlerDep
    ) -> ClearCacheResponse | SkipWaitingResponse:
        """Deliver a SKIP_WAITING or CLEAR_CACHE command."""
        return await handler.post_message(request)

    @app.post("/_sw/push", response_model=PushResponse)
    async def push(request: Request, handler: ControlHandlerDep) -> PushResponse:
        """Deliver a raw push payload."""
        return await handler.push(await request.body())

    @app.post("/_sw/notifications/click")
    async def notification_click(request: NotificationClickRequest, handler: ControlHandlerDep) -> dict:
        return await handler.notification_click(request)

    @app.post("/_sw/notifications/close")
    async def notification_close(request: NotificationCloseRequest, handler: ControlHandlerDep) -> dict:
        return await handler.notification_close(request)

    @app.get("/_sw/notifications", response_model=list[NotificationItem])
    async def list_notifications(handler: ControlHandlerDep) -> list[NotificationItem]:
        return await handler.list_notifications()

    @app.post("/_sw/clients", response_model=ClientRegisteredResponse)
    async def register_client(request: RegisterClientRequest, handler: ControlHandlerDep) -> ClientRegisteredResponse:
        return await handler.register_client(request)

    @app.delete("/_sw/clients/{client_id}")
    async def unregister_client(client_id: str, handler: ControlHandlerDep) -> dict:
        return await handler.unregister_client(client_id)

    @app.get("/_sw/clients/{client_id}/messages")
    async def client_messages(client_id: str, handler: ControlHandlerDep) -> list[dict]:
        return await handler.drain_messages(client_id)

    @app.post("/_sw/wellness", response_model=WellnessCheckResponse)
    async def wellness(handler: ControlHandlerDep) -> WellnessCheckResponse:
        return await handler.wellness_check()

    @app.get("/_sw/stores/{name}/keys", response_model=StoreKeysResponse)
    async def store_keys(name: str, handler: ControlHandlerDep) -> StoreKeysResponse:
        return await handler.store_keys(name)

    @app.get("/_sw/stores/{name}/match", response_model=StoredEntryResponse)
    async def match_entry(name: str, url: str, handler: ControlHandlerDep) -> StoredEntryResponse:
        return await handler.match_entry(name, url)

    @app.get("/_sw/fetch")
    async def third_party(request: Request, url: str, handler: ProxyHandlerDep) -> Response:
        """Intercept a request for an absolute third-party URL."""
        return await handler.third_party(request, url)

    # Registered last so the control routes above take precedence
    @app.api_route("/{path:path}", methods=PROXY_METHODS)
    async def same_origin(request: Request, path: str, handler: ProxyHandlerDep) -> Response:
        """Intercept a request for the application origin."""
        return await handler.same_origin(request, path)

    return app


app = create_app()


def run() -> None:
    import uvicorn

    configure_logging(settings.log_level, settings.log_json)
    uvicorn.run(
        "offline_cache.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )


if __name__ == "__main__":
    run()
