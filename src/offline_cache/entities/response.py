"""Stored response domain entity."""

import base64
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CachedResponse:
    """Immutable snapshot of a response's status, headers and body.

    The body is an in-memory buffer that can be read any number of times,
    so the same instance can be stored and returned to the caller.

    Attributes:
        status: HTTP status code
        headers: Header (name, value) pairs in received order
        body: Full response body
        reason: Status text
        url: Final URL the response was served from
    """

    status: int
    headers: tuple[tuple[str, str], ...] = ()
    body: bytes = b""
    reason: str = ""
    url: str = ""

    @classmethod
    def build(
        cls,
        status: int,
        body: bytes | str = b"",
        headers: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
        reason: str = "",
        url: str = "",
    ) -> "CachedResponse":
        """Alternative constructor accepting str bodies and header mappings."""
        if isinstance(body, str):
            body = body.encode("utf-8")
        if headers is None:
            pairs: tuple[tuple[str, str], ...] = ()
        elif isinstance(headers, Mapping):
            pairs = tuple(headers.items())
        else:
            pairs = tuple(headers)
        return cls(status=status, headers=pairs, body=body, reason=reason, url=url)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def is_cacheable(self) -> bool:
        """Only a plain 200 OK is ever written to a store."""
        return self.status == 200

    @property
    def content_type(self) -> str | None:
        return self.header("content-type")

    def header(self, name: str) -> str | None:
        """Case-insensitive lookup of the first header with this name."""
        name = name.lower()
        for key, value in self.headers:
            if key.lower() == name:
                return value
        return None

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe representation for persistent stores."""
        return {
            "status": self.status,
            "reason": self.reason,
            "url": self.url,
            "headers": [list(pair) for pair in self.headers],
            "body": base64.b64encode(self.body).decode("ascii"),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CachedResponse":
        return cls(
            status=int(data["status"]),
            reason=data.get("reason", ""),
            url=data.get("url", ""),
            headers=tuple((str(k), str(v)) for k, v in data.get("headers", [])),
            body=base64.b64decode(data.get("body", "")),
        )
