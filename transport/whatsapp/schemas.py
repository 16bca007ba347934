"""
WhatsApp Transport Layer - Pydantic Schemas

PURE DATA MODELS - NO LOGIC
Defines the contract between Green-API notifications and the bot engine.
"""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field


MessageType = Literal[
    "text",
    "image",
    "video",
    "audio",
    "document",
    "location",
    "contact",
    "sticker",
    "unknown",
]


# ============================================================================
# INCOMING MESSAGE (THE CONTRACT)
# ============================================================================

class MediaPayload(BaseModel):
    """File attached to an image/video/audio/document message."""

    url: Optional[str] = Field(None, description="Green-API download URL")
    mime_type: Optional[str] = None
    file_name: Optional[str] = None
    caption: Optional[str] = None

    class Config:
        frozen = True


class LocationPayload(BaseModel):
    """Shared location."""

    latitude: float
    longitude: float
    name: Optional[str] = None
    address: Optional[str] = None

    class Config:
        frozen = True


class ContactPayload(BaseModel):
    """Shared contact card."""

    display_name: str = ""
    vcard: Optional[str] = None

    class Config:
        frozen = True


class IncomingMessage(BaseModel):
    """
    Canonical inbound message that handlers and middleware consume.

    Handlers never see the raw Green-API notification.
    """

    message_id: str = Field(..., description="Green-API idMessage")
    chat_id: str = Field(..., description="Chat identifier, e.g. 79001234567@c.us")
    sender_id: str = Field(..., description="Sender identifier (differs from chat_id in groups)")
    sender_name: Optional[str] = None
    type: MessageType = Field(..., description="Content modality")
    text: Optional[str] = Field(
        None,
        description="Message text; caption for media messages; None otherwise",
    )
    media: Optional[MediaPayload] = None
    location: Optional[LocationPayload] = None
    contact: Optional[ContactPayload] = None
    timestamp: datetime = Field(default_factory=datetime.now)

    class Config:
        """Pydantic config."""
        frozen = True  # Immutable - handlers work on copies of the text


# ============================================================================
# GREEN-API NOTIFICATION SCHEMAS (INPUT)
# ============================================================================

class SenderData(BaseModel):
    """senderData block of an incoming notification."""
    chatId: str
    sender: str
    senderName: Optional[str] = None

    class Config:
        extra = "allow"


class GreenApiNotification(BaseModel):
    """
    Webhook body (or receiveNotification "body") sent by Green-API.

    ref: https://green-api.com/en/docs/api/receiving/notifications-format/
    """

    typeWebhook: str = Field(..., description="e.g. 'incomingMessageReceived'")
    idMessage: Optional[str] = None
    timestamp: Optional[int] = None
    senderData: Optional[SenderData] = None
    messageData: Optional[dict[str, Any]] = None

    class Config:
        extra = "allow"  # Green-API may add fields


class QueuedNotification(BaseModel):
    """Item returned by GET receiveNotification."""

    receiptId: int
    body: dict[str, Any]


# ============================================================================
# GREEN-API RESPONSE (OUTPUT)
# ============================================================================

class SendMessageResponse(BaseModel):
    """Response from Green-API sendMessage."""

    idMessage: str
