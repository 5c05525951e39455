"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (in-memory → Redis, httpx → fakes)
- Unit testing with fake implementations
- Clear separation of concerns
"""

from .client_host import ClientHost
from .fetcher import Fetcher
from .response_store import ResponseStore, StoreRegistry

__all__ = [
    "ClientHost",
    "Fetcher",
    "ResponseStore",
    "StoreRegistry",
]
