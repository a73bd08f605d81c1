import json

import httpx
import pytest

from app.api.notifications.channels.channel_factory import ChannelFactory
from app.api.notifications.channels.whatsapp_channel import WhatsAppChannel

API_URL = "https://wasender.test/api/send-message"


def make_channel(handler, api_key="secret-key"):
    return WhatsAppChannel({
        "api_key": api_key,
        "api_url": API_URL,
        "timeout": 2,
        "transport": httpx.MockTransport(handler),
    })


@pytest.mark.asyncio
async def test_successful_send_posts_normalized_phone_and_returns_id():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["auth"] = request.headers["Authorization"]
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"success": True, "data": {"msgId": 98765}})

    result = await make_channel(handler).deliver("0501234567", "Hello", subject="Reminder")

    assert result.success
    assert result.message_id == "98765"
    assert result.retryable is False
    assert captured["url"] == API_URL
    assert captured["auth"] == "Bearer secret-key"
    assert captured["body"] == {"to": "+966501234567", "text": "*Reminder*\n\nHello"}


@pytest.mark.asyncio
async def test_missing_api_key_fails_without_calling_the_api():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={})

    result = await make_channel(handler, api_key="").deliver("0501234567", "Hello")

    assert not result.success
    assert result.retryable is False
    assert "não configurada" in result.error
    assert calls == []


@pytest.mark.asyncio
async def test_invalid_phone_is_not_retryable():
    result = await make_channel(lambda r: httpx.Response(200, json={})).deliver("12", "Hello")
    assert not result.success
    assert result.retryable is False


@pytest.mark.asyncio
async def test_server_error_is_retryable_and_keeps_details():
    def handler(request):
        return httpx.Response(500, json={"message": "upstream down"})

    result = await make_channel(handler).deliver("0501234567", "Hello")

    assert not result.success
    assert result.retryable is True
    assert "upstream down" in result.error
    assert result.error_details["status_code"] == 500


@pytest.mark.asyncio
async def test_rejected_credentials_are_not_retryable():
    result = await make_channel(lambda r: httpx.Response(401, text="")).deliver("0501234567", "Hello")
    assert not result.success
    assert result.retryable is False
    assert "HTTP 401" in result.error


@pytest.mark.asyncio
async def test_timeout_becomes_retryable_failure():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    result = await make_channel(handler).deliver("0501234567", "Hello")

    assert not result.success
    assert result.retryable is True
    assert "Timeout" in result.error


def test_factory_creates_every_channel():
    channels = ChannelFactory.create_all({"whatsapp": {"api_key": "k"}})
    assert set(channels) == {"whatsapp", "email", "sms", "in_app"}
    assert channels["whatsapp"].api_key == "k"
    with pytest.raises(ValueError):
        ChannelFactory.create_channel("pigeon")
