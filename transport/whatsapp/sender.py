"""
Green-API Client

Sends text back to WhatsApp and reads the notification queue.
No formatting intelligence. No retries.
"""

import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from .schemas import QueuedNotification, SendMessageResponse

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.green-api.com"


class GreenApiError(Exception):
    """Green-API request failed."""
    pass


class GreenApiClient:
    """
    Minimal async client for the Green-API instance methods the bot uses.

    Every call goes to ``{api_url}/waInstance{id}/{method}/{token}``.
    """

    def __init__(
        self,
        instance_id: str,
        api_token: str,
        api_url: str = DEFAULT_API_URL,
        timeout_s: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        if not instance_id or not api_token:
            raise GreenApiError("Green-API instance id and token are required")

        self.instance_id = instance_id
        self.api_token = api_token
        self.api_url = api_url.rstrip("/")
        self.timeout_s = timeout_s
        self._http = http_client or httpx.AsyncClient(timeout=timeout_s)

    def _endpoint(self, method: str, suffix: str = "") -> str:
        url = f"{self.api_url}/waInstance{self.instance_id}/{method}/{self.api_token}"
        return f"{url}/{suffix}" if suffix else url

    async def _request(self, http_method: str, method: str, suffix: str = "", **kwargs):
        url = self._endpoint(method, suffix)
        try:
            response = await self._http.request(http_method, url, **kwargs)
        except httpx.RequestError as e:
            logger.error(
                f"Green-API {method} request failed: {e}",
                extra={"method": method, "error": str(e)},
            )
            raise GreenApiError(f"HTTP request failed: {e}")

        if response.status_code != 200:
            error_text = response.text
            logger.error(
                f"Green-API error: {response.status_code} - {error_text}",
                extra={
                    "method": method,
                    "status_code": response.status_code,
                    "error_body": error_text,
                },
            )
            raise GreenApiError(f"Green-API {method} returned {response.status_code}")

        try:
            return response.json()
        except ValueError:
            raise GreenApiError(f"Green-API {method} returned invalid JSON")

    async def send_message(self, chat_id: str, text: str) -> SendMessageResponse:
        """
        Send a text message to a chat.

        Raises:
            GreenApiError: If the send fails
        """
        result = await self._request(
            "POST",
            "sendMessage",
            json={"chatId": chat_id, "message": text},
        )
        try:
            sent = SendMessageResponse(**result)
        except (TypeError, ValidationError) as e:
            raise GreenApiError(f"Unexpected sendMessage response: {e}")
        logger.info(
            f"Message sent to {chat_id}",
            extra={"chat_id": chat_id, "response_id": sent.idMessage},
        )
        return sent

    async def receive_notification(self, receive_timeout_s: int = 5) -> Optional[QueuedNotification]:
        """
        Pop the next notification from the instance queue (None when empty).

        Raises:
            GreenApiError: If the request fails or the item cannot be read;
                an unreadable item is deleted first
        """
        result = await self._request(
            "GET",
            "receiveNotification",
            params={"receiveTimeout": receive_timeout_s},
            timeout=receive_timeout_s + self.timeout_s,
        )
        if not result:
            return None
        try:
            return QueuedNotification(**result)
        except (TypeError, ValidationError) as e:
            receipt_id = result.get("receiptId") if isinstance(result, dict) else None
            logger.error(
                f"Unreadable notification {receipt_id}: {e}",
                extra={"receipt_id": receipt_id},
            )
            # Drop it so the queue can advance
            if isinstance(receipt_id, int):
                await self.delete_notification(receipt_id)
            raise GreenApiError(f"Unexpected receiveNotification item: {e}")

    async def delete_notification(self, receipt_id: int) -> bool:
        """Acknowledge a notification so the queue advances."""
        result = await self._request("DELETE", "deleteNotification", suffix=str(receipt_id))
        return isinstance(result, dict) and bool(result.get("result"))

    async def clear_queue(self) -> int:
        """
        Discard every queued notification.

        Returns:
            Number of notifications deleted
        """
        cleared = 0
        while True:
            notification = await self.receive_notification(receive_timeout_s=0)
            if notification is None:
                break
            await self.delete_notification(notification.receiptId)
            cleared += 1
        if cleared:
            logger.info(f"Cleared {cleared} queued notifications")
        return cleared

    async def download(self, url: str) -> bytes:
        """Fetch a media file from its Green-API download URL."""
        try:
            response = await self._http.get(url)
        except httpx.RequestError as e:
            raise GreenApiError(f"Media download failed: {e}")
        if response.status_code != 200:
            raise GreenApiError(f"Media download returned {response.status_code}")
        return response.content

    async def aclose(self) -> None:
        await self._http.aclose()
