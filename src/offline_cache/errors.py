"""Error taxonomy for the interception layer.

None of these are fatal to the host process. NetworkFailure is recovered
from the stores where a fallback exists. StoreReadFailure counts as a miss
and StoreWriteFailure is always logged and swallowed. NonCacheableResponse
only skips the store write, and MalformedPayload only aborts notification
display.
"""

from typing import TYPE_CHECKING, Any

from offline_cache.dto import ErrorResponse

if TYPE_CHECKING:
    from offline_cache.entities import CachedResponse


class OfflineCacheError(Exception):
    """Base exception for the offline cache."""

    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(code=self.code, message=self.message, details=self.details)


class NetworkFailure(OfflineCacheError):
    """The network fetch could not complete."""

    def __init__(self, url: str, reason: str = "Network request failed"):
        self.url = url
        super().__init__("NETWORK_FAILURE", f"{reason}: {url}", {"url": url})


class StoreMiss(OfflineCacheError):
    """A key is absent from the store it was looked up in."""

    def __init__(self, store_name: str | None, key: str):
        self.store_name = store_name
        self.key = key
        super().__init__(
            "STORE_MISS",
            f"No entry for {key}" + (f" in {store_name}" if store_name else ""),
            {"store": store_name, "key": key},
        )


class StoreWriteFailure(OfflineCacheError):
    """Persisting an entry into a store failed."""

    def __init__(self, store_name: str, key: str, reason: str):
        self.store_name = store_name
        self.key = key
        super().__init__(
            "STORE_WRITE_FAILURE",
            f"Failed to store {key} in {store_name}: {reason}",
            {"store": store_name, "key": key},
        )


class StoreReadFailure(OfflineCacheError):
    """Reading from a store backend failed."""

    def __init__(self, store_name: str | None, key: str, reason: str):
        self.store_name = store_name
        self.key = key
        super().__init__(
            "STORE_READ_FAILURE",
            f"Failed to read {key}" + (f" from {store_name}" if store_name else "") + f": {reason}",
            {"store": store_name, "key": key},
        )


class NonCacheableResponse(OfflineCacheError):
    """The response status excludes it from being stored."""

    def __init__(self, response: "CachedResponse"):
        self.response = response
        super().__init__(
            "NON_CACHEABLE_RESPONSE",
            f"Response with status {response.status} is not cacheable",
            {"status": response.status, "url": response.url},
        )


class MalformedPayload(OfflineCacheError):
    """A push payload could not be parsed."""

    def __init__(self, reason: str):
        super().__init__("MALFORMED_PAYLOAD", f"Malformed push payload: {reason}")
