"""WhatsApp Transport Layer - Module Exports"""

from .normalize import (
    NormalizationError,
    extract_chat_id,
    is_incoming_message,
    normalize_notification,
)
from .schemas import (
    ContactPayload,
    GreenApiNotification,
    IncomingMessage,
    LocationPayload,
    MediaPayload,
    QueuedNotification,
    SendMessageResponse,
)
from .security import verify_webhook_token
from .sender import GreenApiClient, GreenApiError
from .webhook import router

__all__ = [
    # Schemas
    "IncomingMessage",
    "MediaPayload",
    "LocationPayload",
    "ContactPayload",
    "GreenApiNotification",
    "QueuedNotification",
    "SendMessageResponse",
    # Normalization
    "normalize_notification",
    "is_incoming_message",
    "extract_chat_id",
    "NormalizationError",
    # Security
    "verify_webhook_token",
    # Client
    "GreenApiClient",
    "GreenApiError",
    # Router
    "router",
]
