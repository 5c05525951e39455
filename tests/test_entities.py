"""
Tests for request keys and stored responses.
"""

import pytest

from offline_cache.entities import CachedResponse, InterceptedRequest, RequestKey


def test_request_key_drops_fragment():
    key = RequestKey.for_url("https://fonts.gstatic.com/font.woff2#x")
    assert key == RequestKey.for_url("https://fonts.gstatic.com/font.woff2")
    assert key.method == "GET"


def test_request_key_keeps_query():
    assert RequestKey.for_url("http://app.test/a?v=1") != RequestKey.for_url("http://app.test/a?v=2")


def test_request_key_string_form_parses_back():
    key = RequestKey.for_url("http://app.test/app.js?v=3")
    assert str(key) == "GET http://app.test/app.js?v=3"
    assert RequestKey.parse(str(key)) == key


def test_request_key_parse_rejects_garbage():
    with pytest.raises(ValueError):
        RequestKey.parse("nonsense")


def test_intercepted_request_key_uses_method():
    request = InterceptedRequest("post", "http://app.test/form")
    assert request.key.method == "POST"


def test_intercepted_request_destination_flags():
    assert InterceptedRequest("GET", "http://app.test/", "document").is_document
    assert InterceptedRequest("GET", "http://app.test/a.png", "image").is_image
    assert not InterceptedRequest("GET", "http://app.test/a.js", "script").is_image


def test_cached_response_header_lookup_is_case_insensitive():
    response = CachedResponse.build(200, "x", {"Content-Type": "text/css"})
    assert response.header("content-type") == "text/css"
    assert response.content_type == "text/css"
    assert response.header("etag") is None


def test_only_plain_200_is_cacheable():
    assert CachedResponse(status=200).is_cacheable
    assert not CachedResponse(status=204).is_cacheable
    assert not CachedResponse(status=301).is_cacheable
    assert CachedResponse(status=204).ok


def test_cached_response_dict_form_preserves_binary_body():
    original = CachedResponse.build(
        200, b"\x00\xffbinary", [("Content-Type", "font/woff2"), ("X-A", "1")], reason="OK", url="https://x/y"
    )
    restored = CachedResponse.from_dict(original.to_dict())
    assert restored == original


def test_cached_response_is_immutable():
    response = CachedResponse(status=200, body=b"a")
    with pytest.raises(AttributeError):
        response.body = b"b"  # type: ignore[misc]
