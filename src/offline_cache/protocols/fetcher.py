"""Network fetch protocol."""

from typing import Protocol, runtime_checkable

from offline_cache.entities import CachedResponse, InterceptedRequest


@runtime_checkable
class Fetcher(Protocol):
    """Protocol for performing the network round-trip.

    Implementations rely on their own timeout semantics so that a fetch
    always resolves or fails, and must let task cancellation abort the
    in-flight request.
    """

    async def fetch(self, request: InterceptedRequest) -> CachedResponse:
        """Fetch a request from the network.

        Args:
            request: The request to perform

        Returns:
            The full response, whatever its status

        Raises:
            NetworkFailure: If the fetch could not complete
        """
        ...

    async def aclose(self) -> None:
        """Release network resources."""
        ...
