"""Request identity and intercepted request entities."""

from dataclasses import dataclass, field

import httpx

CACHEABLE_METHOD = "GET"


def normalize_url(url: str) -> str:
    """Return the absolute URL without its fragment."""
    return str(httpx.URL(url.split("#", 1)[0]))


@dataclass(frozen=True)
class RequestKey:
    """Normalized identity of a cacheable request.

    One entry per key per store; a later put for the same key overwrites.
    """

    method: str
    url: str

    @classmethod
    def for_url(cls, url: str, method: str = CACHEABLE_METHOD) -> "RequestKey":
        return cls(method=method.upper(), url=normalize_url(url))

    @classmethod
    def parse(cls, raw: str) -> "RequestKey":
        """Parse the string form produced by ``str(key)``."""
        method, _, url = raw.partition(" ")
        if not url:
            raise ValueError(f"Not a request key: {raw!r}")
        return cls(method=method, url=url)

    def __str__(self) -> str:
        return f"{self.method} {self.url}"


@dataclass(frozen=True)
class InterceptedRequest:
    """An outbound request entering the router.

    Attributes:
        method: HTTP method
        url: Absolute request URL
        destination: Declared resource type (document, image, font, style,
            script, manifest, or empty when unknown)
        credentials: Credentials mode: include, same-origin or omit
        headers: Request headers to forward
        body: Request body to forward
    """

    method: str
    url: str
    destination: str = ""
    credentials: str = "same-origin"
    headers: dict[str, str] = field(default_factory=dict, hash=False, compare=False)
    body: bytes = field(default=b"", repr=False, compare=False)

    @property
    def key(self) -> RequestKey:
        return RequestKey.for_url(self.url, self.method)

    @property
    def parsed_url(self) -> httpx.URL:
        return httpx.URL(self.url)

    @property
    def is_document(self) -> bool:
        return self.destination == "document"

    @property
    def is_image(self) -> bool:
        return self.destination == "image"
