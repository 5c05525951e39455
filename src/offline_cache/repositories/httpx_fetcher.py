"""httpx-based network fetcher.

Performs the network leg of every strategy and snapshots the result into
an immutable CachedResponse.
"""

import httpx
import structlog

from offline_cache.config import settings
from offline_cache.entities import CachedResponse, InterceptedRequest
from offline_cache.errors import NetworkFailure

logger = structlog.get_logger(__name__)

# Headers that no longer describe the snapshot once httpx has decoded the body
DROPPED_RESPONSE_HEADERS = frozenset(
    {"content-encoding", "content-length", "transfer-encoding", "connection", "keep-alive"}
)

# Headers never forwarded upstream
DROPPED_REQUEST_HEADERS = frozenset(
    {"host", "content-length", "connection", "keep-alive", "transfer-encoding", "accept-encoding"}
)

CREDENTIAL_HEADERS = frozenset({"cookie", "authorization"})


class HttpxFetcher:
    """httpx implementation of the Fetcher protocol.

    The client follows redirects like a browser fetch does, so only the
    final response is seen by the strategies.

    Example:
        ```python
        fetcher = HttpxFetcher.create(timeout=10.0)
        response = await fetcher.fetch(InterceptedRequest("GET", "https://example.com/"))
        ```
    """

    def __init__(
        self,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            timeout: Request timeout in seconds. Defaults to settings.
            transport: Optional transport override (e.g. httpx.MockTransport).
        """
        self._timeout = timeout or settings.fetch_timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def create(cls, timeout: float | None = None) -> "HttpxFetcher":
        """Factory method to create HttpxFetcher with defaults."""
        return cls(timeout=timeout)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                transport=self._transport,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    @staticmethod
    def outbound_headers(request: InterceptedRequest) -> dict[str, str]:
        """Headers to send upstream, honouring the credentials mode."""
        headers = {}
        for name, value in request.headers.items():
            lowered = name.lower()
            if lowered in DROPPED_REQUEST_HEADERS:
                continue
            if request.credentials == "omit" and lowered in CREDENTIAL_HEADERS:
                continue
            headers[name] = value
        return headers

    async def fetch(self, request: InterceptedRequest) -> CachedResponse:
        """Fetch a request and read the whole body.

        Raises:
            NetworkFailure: On connection errors, timeouts and protocol errors
        """
        try:
            response = await self.client.request(
                request.method,
                request.url,
                headers=self.outbound_headers(request),
                content=request.body or None,
            )
        except httpx.HTTPError as e:
            logger.debug("fetch_failed", url=request.url, error=str(e))
            raise NetworkFailure(request.url, type(e).__name__) from e

        return CachedResponse(
            status=response.status_code,
            headers=tuple(
                (name, value)
                for name, value in response.headers.multi_items()
                if name.lower() not in DROPPED_RESPONSE_HEADERS
            ),
            body=response.content,
            reason=response.reason_phrase,
            url=str(response.url),
        )

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
