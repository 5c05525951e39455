"""
Tests for the offline cache API.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from offline_cache.api.app import create_app
from offline_cache.entities import RequestKey
from offline_cache.repositories import HttpxFetcher

ORIGIN = "http://app.test"


@pytest.fixture
def client(settings, registry, fetcher, client_host):
    """Create a test client with fake backends; startup runs the install."""
    fetcher.add(f"{ORIGIN}/index.html", body=b"<html>index</html>", headers={"Content-Type": "text/html"})
    app = create_app(settings, registry=registry, fetcher=fetcher, client_host=client_host)
    with TestClient(app) as test_client:
        yield test_client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "state": "active", "store_healthy": True}


def test_status_lists_current_generation(client):
    data = client.get("/_sw/status").json()
    assert data["state"] == "active"
    assert data["cache_version"] == "zenflow-v2"
    assert data["stores"] == ["zenflow-v2-static", "zenflow-v2-api", "zenflow-v2-cdn"]


def test_same_origin_document_is_fetched_from_origin(client, fetcher):
    fetcher.add(f"{ORIGIN}/about?x=1", body=b"<h1>about</h1>", headers={"Content-Type": "text/html"})

    response = client.get("/about?x=1", headers={"Sec-Fetch-Dest": "document"})

    assert response.status_code == 200
    assert response.text == "<h1>about</h1>"
    assert fetcher.calls[-1].destination == "document"


def test_offline_document_falls_back_to_index(client, fetcher):
    fetcher.offline = True

    response = client.get("/settings", headers={"Sec-Fetch-Dest": "document"})

    assert response.status_code == 200
    assert response.text == "<html>index</html>"


def test_offline_api_call_is_503(client, fetcher):
    fetcher.offline = True

    response = client.get("/api/sessions")

    assert response.status_code == 503
    assert response.text == "Service unavailable - offline"


def test_offline_script_miss_is_bad_gateway(client, fetcher):
    fetcher.offline = True

    response = client.get("/app.js", headers={"Sec-Fetch-Dest": "script"})

    assert response.status_code == 502
    assert response.json()["code"] == "NETWORK_FAILURE"


def test_third_party_font_is_cached(client, fetcher):
    url = "https://fonts.gstatic.com/font.woff2"
    fetcher.add(url, body=b"woff2")

    first = client.get("/_sw/fetch", params={"url": url}, headers={"Sec-Fetch-Dest": "font"})
    keys = client.get("/_sw/stores/zenflow-v2-cdn/keys").json()["keys"]
    second = client.get("/_sw/fetch", params={"url": url}, headers={"Sec-Fetch-Dest": "font"})

    assert first.content == second.content == b"woff2"
    assert str(RequestKey.for_url(url)) in keys
    assert fetcher.urls.count(url) == 1


def test_third_party_requires_absolute_url(client):
    response = client.get("/_sw/fetch", params={"url": "/relative"})
    assert response.status_code == 400


def test_match_entry_and_store_miss(client):
    found = client.get("/_sw/stores/zenflow-v2-static/match", params={"url": f"{ORIGIN}/index.html"})
    missing = client.get("/_sw/stores/zenflow-v2-static/match", params={"url": f"{ORIGIN}/nope"})

    assert found.status_code == 200
    assert found.json()["size"] == len(b"<html>index</html>")
    assert missing.status_code == 404
    assert missing.json()["code"] == "STORE_MISS"


def test_unknown_store_keys_is_404(client):
    assert client.get("/_sw/stores/nope/keys").status_code == 404


def test_clear_cache_message(client, registry):
    response = client.post("/_sw/messages", json={"type": "CLEAR_CACHE"})

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert client.get("/_sw/status").json()["stores"] == []


def test_skip_waiting_message(client):
    response = client.post("/_sw/messages", json={"type": "SKIP_WAITING"})
    assert response.json() == {"state": "active"}


def test_unknown_message_is_rejected(client):
    assert client.post("/_sw/messages", json={"type": "REBOOT"}).status_code == 422


def test_push_and_notifications(client):
    shown = client.post("/_sw/push", content=b'{"title":"Reminder","body":"Breathe"}')
    ignored = client.post("/_sw/push", content=b"not-json")
    listed = client.get("/_sw/notifications").json()

    assert shown.json() == {"shown": True}
    assert ignored.json() == {"shown": False}
    assert listed[0]["title"] == "Reminder"
    assert [a["action"] for a in listed[0]["actions"]] == ["open", "close"]


def test_notification_click_opens_window(client):
    client.post("/_sw/push", content=b"{}")

    response = client.post("/_sw/notifications/click", json={"tag": "zenflow-notification", "action": "open"})

    assert response.json()["client_id"] is not None
    assert client.get("/_sw/notifications").json() == []


def test_client_receives_wellness_check(client):
    client_id = client.post("/_sw/clients", json={"url": f"{ORIGIN}/"}).json()["id"]

    assert client.post("/_sw/wellness").json() == {"notified": 1}
    messages = client.get(f"/_sw/clients/{client_id}/messages").json()

    assert messages[0]["type"] == "WELLNESS_CHECK"
    assert client.get(f"/_sw/clients/{client_id}/messages").json() == []


def test_unknown_client_messages_is_404(client):
    assert client.get("/_sw/clients/missing/messages").status_code == 404


def test_posted_body_reaches_origin(settings, registry, client_host):
    seen = []

    def origin(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path, request.content))
        return httpx.Response(200, content=b"ok")

    fetcher = HttpxFetcher(timeout=5.0, transport=httpx.MockTransport(origin))
    app = create_app(settings, registry=registry, fetcher=fetcher, client_host=client_host)
    with TestClient(app) as test_client:
        response = test_client.post("/api/login", content=b'{"user":"a"}')

    assert response.status_code == 200
    assert ("POST", "/api/login", b'{"user":"a"}') in seen


def test_repeated_headers_are_returned_separately(client, fetcher):
    fetcher.add(f"{ORIGIN}/api/session", body=b"{}", headers=[("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")])

    response = client.get("/api/session")

    assert response.headers.get_list("set-cookie") == ["a=1", "b=2"]


def test_unregister_client(client):
    client_id = client.post("/_sw/clients", json={"url": f"{ORIGIN}/"}).json()["id"]

    assert client.delete(f"/_sw/clients/{client_id}").json() == {"success": True}
    assert client.post("/_sw/wellness").json() == {"notified": 0}
    assert client.delete(f"/_sw/clients/{client_id}").status_code == 404


def test_push_with_numeric_title_is_listed(client):
    client.post("/_sw/push", content=b'{"title": 5}')

    listed = client.get("/_sw/notifications")

    assert listed.status_code == 200
    assert listed.json()[0]["title"] == "5"
