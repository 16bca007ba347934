"""
Green-API Client Tests

Requests are served by httpx.MockTransport; nothing leaves the process.
"""

import json

import httpx
import pytest

from transport.whatsapp.sender import GreenApiClient, GreenApiError


def _client(handler):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GreenApiClient(
        instance_id="1101000001",
        api_token="tok",
        api_url="https://api.green-api.com/",
        http_client=http,
    )


class TestSendMessage:

    @pytest.mark.asyncio
    async def test_posts_chat_and_text(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"idMessage": "3EB0C767D097B7C7C030"})

        client = _client(handler)
        result = await client.send_message("79001234567@c.us", "Hello")

        assert result.idMessage == "3EB0C767D097B7C7C030"
        assert seen["method"] == "POST"
        assert seen["url"] == "https://api.green-api.com/waInstance1101000001/sendMessage/tok"
        assert seen["body"] == {"chatId": "79001234567@c.us", "message": "Hello"}

    @pytest.mark.asyncio
    async def test_non_200_raises(self):
        client = _client(lambda request: httpx.Response(401, text="Unauthorized"))

        with pytest.raises(GreenApiError):
            await client.send_message("79001234567@c.us", "Hello")

    @pytest.mark.asyncio
    async def test_network_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(GreenApiError):
            await _client(handler).send_message("79001234567@c.us", "Hello")


class TestNotificationQueue:

    @pytest.mark.asyncio
    async def test_receive_returns_none_when_empty(self):
        client = _client(lambda request: httpx.Response(200, content=b"null"))

        assert await client.receive_notification() is None

    @pytest.mark.asyncio
    async def test_receive_and_delete(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append((request.method, request.url.path, dict(request.url.params)))
            if request.method == "GET":
                return httpx.Response(200, json={"receiptId": 7, "body": {"typeWebhook": "incomingMessageReceived"}})
            return httpx.Response(200, json={"result": True})

        client = _client(handler)
        notification = await client.receive_notification(receive_timeout_s=3)
        deleted = await client.delete_notification(notification.receiptId)

        assert notification.receiptId == 7
        assert deleted is True
        assert calls[0] == ("GET", "/waInstance1101000001/receiveNotification/tok", {"receiveTimeout": "3"})
        assert calls[1][:2] == ("DELETE", "/waInstance1101000001/deleteNotification/tok/7")

    @pytest.mark.asyncio
    async def test_clear_queue_drains_everything(self):
        queue = [1, 2, 3]

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                if not queue:
                    return httpx.Response(200, content=b"null")
                return httpx.Response(200, json={"receiptId": queue[0], "body": {}})
            queue.pop(0)
            return httpx.Response(200, json={"result": True})

        assert await _client(handler).clear_queue() == 3
        assert queue == []

    @pytest.mark.asyncio
    async def test_unreadable_item_is_deleted_and_reported(self):
        deleted = []

        def handler(request: httpx.Request) -> httpx.Response:
            if request.method == "GET":
                return httpx.Response(200, json={"receiptId": 9, "body": None})
            deleted.append(request.url.path)
            return httpx.Response(200, json={"result": True})

        with pytest.raises(GreenApiError):
            await _client(handler).receive_notification()

        assert deleted == ["/waInstance1101000001/deleteNotification/tok/9"]

    @pytest.mark.asyncio
    async def test_malformed_send_response_raises(self):
        client = _client(lambda request: httpx.Response(200, json={"unexpected": True}))

        with pytest.raises(GreenApiError):
            await client.send_message("79001234567@c.us", "Hello")


class TestConstruction:

    def test_credentials_required(self):
        with pytest.raises(GreenApiError):
            GreenApiClient(instance_id="", api_token="tok")

    @pytest.mark.asyncio
    async def test_download(self):
        client = _client(lambda request: httpx.Response(200, content=b"OggS"))

        assert await client.download("https://media.green-api.com/v.ogg") == b"OggS"
