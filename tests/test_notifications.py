"""
Tests for push notifications, notification clicks and wellness checks.
"""

import pytest
from structlog.testing import capture_logs

from offline_cache.errors import MalformedPayload
from offline_cache.services import NotificationService
from offline_cache.services.notifications import parse_push_payload


@pytest.fixture
def notifications(client_host, settings) -> NotificationService:
    return NotificationService(client_host, settings)


async def test_push_shows_notification_with_two_actions(notifications, client_host):
    shown = await notifications.handle_push(b'{"title":"Reminder","body":"Breathe"}')

    assert client_host.notifications == [shown]
    assert shown.title == "Reminder"
    assert shown.body == "Breathe"
    assert [a.action for a in shown.actions] == ["open", "close"]
    assert shown.tag == "zenflow-notification"
    assert shown.icon == "http://app.test/icons/icon-192.svg"


async def test_push_defaults_title_and_body(notifications):
    shown = await notifications.handle_push("{}")

    assert shown.title == "ZenFlow"
    assert shown.body == "ZenFlow wellness reminder"


async def test_push_with_non_string_fields_still_yields_text(notifications):
    shown = await notifications.handle_push('{"title": 5, "body": {"text": "hi"}}')

    assert shown.title == "5"
    assert shown.body == "ZenFlow wellness reminder"


async def test_malformed_push_is_logged_and_ignored(notifications, client_host):
    with capture_logs() as logs:
        shown = await notifications.handle_push(b"not-json")

    assert shown is None
    assert client_host.notifications == []
    assert any(log["event"] == "push_notification_error" and log["log_level"] == "error" for log in logs)


async def test_empty_push_is_ignored(notifications, client_host):
    assert await notifications.handle_push(b"") is None
    assert await notifications.handle_push(None) is None
    assert client_host.notifications == []


@pytest.mark.parametrize("data", [b"[1, 2]", b'"text"', b"\xff\xfe"])
def test_parse_push_payload_rejects_non_objects(data):
    with pytest.raises(MalformedPayload):
        parse_push_payload(data)


async def test_same_tag_replaces_notification(notifications, client_host):
    await notifications.handle_push(b'{"title":"one"}')
    await notifications.handle_push(b'{"title":"two"}')

    assert [n.title for n in client_host.notifications] == ["two"]


async def test_click_focuses_existing_window(notifications, client_host):
    client_host.register("https://elsewhere.test/")
    app_window = client_host.register("http://app.test/settings")
    await notifications.handle_push(b"{}")

    client_id = await notifications.handle_click("zenflow-notification", "open")

    assert client_id == app_window.id
    assert app_window.focused
    assert client_host.notifications == []


async def test_default_click_opens_window_when_none_matches(notifications, client_host):
    client_id = await notifications.handle_click("zenflow-notification", None)

    opened = client_host.get(client_id)
    assert opened.url == "http://app.test/"
    assert opened.focused


async def test_close_action_only_dismisses(notifications, client_host):
    await notifications.handle_push(b"{}")

    client_id = await notifications.handle_click("zenflow-notification", "close")

    assert client_id is None
    assert client_host.notifications == []
    assert await client_host.match_all() == []


async def test_wellness_check_messages_every_client(notifications, client_host):
    first = client_host.register("http://app.test/")
    second = client_host.register("http://app.test/other")

    assert await notifications.wellness_check() == 2

    for client in (first, second):
        (message,) = client_host.drain_messages(client.id)
        assert message["type"] == "WELLNESS_CHECK"
        assert "T" in message["timestamp"]


async def test_wellness_check_logs_delivery_failures(notifications, client_host, monkeypatch):
    client_host.register("http://app.test/")

    async def broken_post(client_id, message):
        raise ConnectionError("client gone")

    monkeypatch.setattr(client_host, "post_message", broken_post)

    with capture_logs() as logs:
        assert await notifications.wellness_check() == 0

    assert any(log["event"] == "wellness_check_delivery_failed" for log in logs)
