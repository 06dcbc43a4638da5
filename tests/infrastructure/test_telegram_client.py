"""Telegram Client - tests for sendMessage requests and failure mapping."""

import json

import httpx
import pytest

from tipjar.core.errors import NotificationError
from tipjar.infrastructure.telegram_client import TelegramClient


def _make_client(handler, token="123:abc", chat_id="42") -> TelegramClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TelegramClient(http, token, chat_id)


async def test_posts_html_message():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"ok": True, "result": {"message_id": 1}})

    body = await _make_client(handler).send_message("<b>hi</b>")
    assert body["ok"] is True

    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == "https://api.telegram.org/bot123:abc/sendMessage"
    assert json.loads(request.content) == {
        "chat_id": "42",
        "text": "<b>hi</b>",
        "parse_mode": "HTML",
        "disable_web_page_preview": True,
    }


async def test_unconfigured_never_calls_network():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"ok": True})

    client = _make_client(handler, token="", chat_id="")
    assert client.configured is False
    with pytest.raises(NotificationError):
        await client.send_message("hi")
    assert calls == []


async def test_http_error_raises():
    client = _make_client(lambda request: httpx.Response(400, json={"ok": False}))
    with pytest.raises(NotificationError) as exc_info:
        await client.send_message("hi")
    assert exc_info.value.context.status_code == 400


async def test_ok_false_raises():
    client = _make_client(
        lambda request: httpx.Response(200, json={"ok": False, "description": "chat not found"}),
    )
    with pytest.raises(NotificationError, match="chat not found"):
        await client.send_message("hi")


async def test_transport_error_raises():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(NotificationError, match="ReadTimeout"):
        await _make_client(handler).send_message("hi")
