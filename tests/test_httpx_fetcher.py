"""
Tests for the httpx fetcher using a mock transport.
"""

import httpx
import pytest

from offline_cache.entities import InterceptedRequest
from offline_cache.errors import NetworkFailure
from offline_cache.protocols import Fetcher
from offline_cache.repositories import HttpxFetcher


def make_fetcher(handler) -> HttpxFetcher:
    return HttpxFetcher(timeout=5.0, transport=httpx.MockTransport(handler))


async def test_fetch_snapshots_response():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"body{}", headers={"Content-Type": "text/css"})

    fetcher = make_fetcher(handler)
    response = await fetcher.fetch(InterceptedRequest("GET", "https://fonts.googleapis.com/css2"))
    await fetcher.aclose()

    assert isinstance(fetcher, Fetcher)
    assert response.status == 200
    assert response.body == b"body{}"
    assert response.content_type == "text/css"
    assert response.header("content-length") is None
    assert response.url == "https://fonts.googleapis.com/css2"


async def test_fetch_follows_redirects():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old":
            return httpx.Response(301, headers={"Location": "https://app.test/new"})
        return httpx.Response(200, content=b"moved")

    fetcher = make_fetcher(handler)
    response = await fetcher.fetch(InterceptedRequest("GET", "https://app.test/old"))

    assert response.status == 200
    assert response.url == "https://app.test/new"


async def test_connection_error_becomes_network_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    fetcher = make_fetcher(handler)

    with pytest.raises(NetworkFailure) as exc_info:
        await fetcher.fetch(InterceptedRequest("GET", "https://app.test/"))
    assert exc_info.value.url == "https://app.test/"


async def test_omit_credentials_strips_cookies():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(request.headers)
        return httpx.Response(200)

    fetcher = make_fetcher(handler)
    await fetcher.fetch(
        InterceptedRequest(
            "GET",
            "https://cdn.tailwindcss.com/",
            credentials="omit",
            headers={"Cookie": "session=1", "Authorization": "Bearer x", "Accept": "text/css"},
        )
    )

    assert "cookie" not in seen
    assert "authorization" not in seen
    assert seen["accept"] == "text/css"


def test_same_origin_keeps_credentials():
    request = InterceptedRequest("GET", "http://app.test/", headers={"Cookie": "session=1", "Host": "proxy"})
    assert HttpxFetcher.outbound_headers(request) == {"Cookie": "session=1"}


async def test_request_body_is_forwarded():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["body"] = request.content
        return httpx.Response(201)

    fetcher = make_fetcher(handler)
    response = await fetcher.fetch(InterceptedRequest("POST", "http://app.test/api/login", body=b'{"user":"a"}'))

    assert response.status == 201
    assert seen == {"method": "POST", "body": b'{"user":"a"}'}


async def test_repeated_response_headers_are_kept():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, headers=[("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")])

    fetcher = make_fetcher(handler)
    response = await fetcher.fetch(InterceptedRequest("GET", "http://app.test/"))

    assert [value for name, value in response.headers if name.lower() == "set-cookie"] == ["a=1", "b=2"]
