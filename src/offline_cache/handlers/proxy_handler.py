"""HTTP handler for intercepted requests.

Converts incoming HTTP requests to InterceptedRequest entities, lets the
lifecycle controller answer them, and converts the CachedResponse back.
"""

from fastapi import HTTPException, Request, Response, status

from offline_cache.config import Settings
from offline_cache.entities import CachedResponse, InterceptedRequest
from offline_cache.services import LifecycleController

# Request headers consumed by this layer rather than forwarded
HOP_BY_HOP = frozenset({"host", "content-length", "connection", "keep-alive", "transfer-encoding"})


class ProxyHandler:
    """HTTP handlers for same-origin and third-party interception.

    Same-origin requests arrive as ordinary paths and are rebuilt against
    the configured origin; third-party requests name their absolute URL.
    The declared resource type is read from the ``Sec-Fetch-Dest`` header.
    """

    def __init__(self, controller: LifecycleController, settings: Settings) -> None:
        self._controller = controller
        self._settings = settings

    @staticmethod
    async def to_intercepted(request: Request, url: str, credentials: str = "same-origin") -> InterceptedRequest:
        headers = {
            name: value for name, value in request.headers.items() if name.lower() not in HOP_BY_HOP
        }
        return InterceptedRequest(
            method=request.method,
            url=url,
            destination=request.headers.get("sec-fetch-dest", ""),
            credentials=credentials,
            headers=headers,
            body=await request.body(),
        )

    @staticmethod
    def to_response(response: CachedResponse) -> Response:
        result = Response(content=response.body, status_code=response.status)
        # Repeated headers such as Set-Cookie are kept as separate lines
        for name, value in response.headers:
            if name.lower() == "content-length":
                continue
            result.headers.append(name, value)
        return result

    async def same_origin(self, request: Request, path: str) -> Response:
        """Handle any request for a path on the application origin."""
        url = self._settings.origin_url.rstrip("/") + "/" + path
        if request.url.query:
            url = f"{url}?{request.url.query}"
        intercepted = await self.to_intercepted(request, url)
        return self.to_response(await self._controller.handle(intercepted))

    async def third_party(self, request: Request, url: str) -> Response:
        """Handle GET /_sw/fetch?url=... for absolute third-party URLs.

        Raises:
            HTTPException: If the URL is not absolute
        """
        if "://" not in url:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Expected an absolute URL, got {url!r}",
            )
        # Cookies for this service are not credentials for the third party
        intercepted = await self.to_intercepted(request, url, credentials="omit")
        return self.to_response(await self._controller.handle(intercepted))
