"""
WhatsApp Input Normalization

PURE CONVERSION - NO MODEL CALLS

Converts Green-API notifications into the canonical IncomingMessage.
- TEXT: textMessage / extendedTextMessage / quotedMessage body, trimmed
- MEDIA: download URL, mime type, file name and caption preserved
- LOCATION / CONTACT: structured payloads
"""

from datetime import datetime
from typing import Any, Optional

from .schemas import (
    ContactPayload,
    GreenApiNotification,
    IncomingMessage,
    LocationPayload,
    MediaPayload,
)


INCOMING_WEBHOOK_TYPE = "incomingMessageReceived"

_MEDIA_TYPES = {
    "imageMessage": "image",
    "videoMessage": "video",
    "audioMessage": "audio",
    "documentMessage": "document",
}


class NormalizationError(Exception):
    """Input normalization failed."""
    pass


def is_incoming_message(body: dict) -> bool:
    """True for notifications carrying a message from a user."""
    return isinstance(body, dict) and body.get("typeWebhook") == INCOMING_WEBHOOK_TYPE


def normalize_notification(
    body: dict | GreenApiNotification,
) -> Optional[IncomingMessage]:
    """
    Convert a Green-API notification into an IncomingMessage.

    Args:
        body: Webhook body, or the "body" of a receiveNotification item

    Returns:
        IncomingMessage, or None for notifications that are not incoming
        messages (status updates, outgoing echoes, instance state changes)

    Raises:
        NormalizationError: Invalid incoming-message structure
    """

    if isinstance(body, GreenApiNotification):
        body = body.dict()

    if not is_incoming_message(body):
        return None

    try:
        sender = body["senderData"]
        chat_id = sender["chatId"]
        sender_id = sender.get("sender") or chat_id
        message_id = body["idMessage"]
        message_data = body["messageData"]
        type_message = message_data["typeMessage"]
    except (KeyError, TypeError) as e:
        raise NormalizationError(f"Invalid notification structure: {e}")

    raw_ts = body.get("timestamp")
    try:
        timestamp = datetime.fromtimestamp(int(raw_ts)) if raw_ts is not None else datetime.now()
    except (TypeError, ValueError):
        raise NormalizationError(f"Invalid timestamp: {raw_ts!r}")

    fields = {
        "message_id": message_id,
        "chat_id": chat_id,
        "sender_id": sender_id,
        "sender_name": sender.get("senderName") or None,
        "timestamp": timestamp,
    }
    fields.update(_extract_content(type_message, message_data))

    return IncomingMessage(**fields)


def _extract_content(type_message: str, data: dict) -> dict[str, Any]:
    """Map messageData onto IncomingMessage content fields."""

    if type_message == "textMessage":
        try:
            text = data["textMessageData"]["textMessage"]
        except KeyError:
            raise NormalizationError("Text message missing 'textMessageData.textMessage'")
        return {"type": "text", "text": text.strip()}

    if type_message in ("extendedTextMessage", "quotedMessage"):
        try:
            text = data["extendedTextMessageData"]["text"]
        except KeyError:
            raise NormalizationError("Extended text message missing 'extendedTextMessageData.text'")
        return {"type": "text", "text": text.strip()}

    if type_message in _MEDIA_TYPES:
        file_data = data.get("fileMessageData")
        if not isinstance(file_data, dict):
            raise NormalizationError(f"{type_message} missing 'fileMessageData'")
        caption = (file_data.get("caption") or "").strip() or None
        return {
            "type": _MEDIA_TYPES[type_message],
            "text": caption,
            "media": MediaPayload(
                url=file_data.get("downloadUrl"),
                mime_type=file_data.get("mimeType"),
                file_name=file_data.get("fileName"),
                caption=caption,
            ),
        }

    if type_message == "locationMessage":
        loc = data.get("locationMessageData") or {}
        try:
            location = LocationPayload(
                latitude=float(loc["latitude"]),
                longitude=float(loc["longitude"]),
                name=loc.get("nameLocation") or None,
                address=loc.get("address") or None,
            )
        except (KeyError, TypeError, ValueError):
            raise NormalizationError("Location message missing coordinates")
        return {"type": "location", "location": location}

    if type_message == "contactMessage":
        contact = data.get("contactMessageData") or {}
        return {
            "type": "contact",
            "contact": ContactPayload(
                display_name=contact.get("displayName") or "",
                vcard=contact.get("vcard"),
            ),
        }

    if type_message == "stickerMessage":
        return {"type": "sticker"}

    return {"type": "unknown"}


def extract_chat_id(body: dict) -> str:
    """
    Extract the chat id from a notification.

    Useful for routing/logging without full normalization.
    """
    try:
        return body["senderData"]["chatId"]
    except (KeyError, TypeError):
        raise NormalizationError("Cannot extract chat_id from notification")
