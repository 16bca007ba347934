"""
Default content handlers for the model route.

Each message category maps to a handler that turns the incoming message into
the user content sent to the model:

    async def handler(bot, message) -> str | list[dict]

The registry is keyed by category so a single entry can be swapped out
(e.g. wrapping the image handler) without touching the others.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from inference import supports_images
from transport.whatsapp.schemas import IncomingMessage
from transport.whatsapp.sender import GreenApiError

logger = logging.getLogger(__name__)


Content = Union[str, List[Dict[str, Any]]]
ContentHandler = Callable[[Any, IncomingMessage], Awaitable[Content]]


def _caption_suffix(message: IncomingMessage) -> str:
    caption = message.media.caption if message.media else None
    return f' with caption: "{caption}"' if caption else ""


async def text_handler(bot, message: IncomingMessage) -> Content:
    return message.text or ""


async def image_handler(bot, message: IncomingMessage) -> Content:
    """
    Vision-capable models get the image itself as an image_url part; other
    models get a bracketed note they can relay to the user.
    """
    url = message.media.url if message.media else None
    if url and supports_images(bot.config.model):
        caption = message.media.caption or "Describe this image."
        return [
            {"type": "text", "text": caption},
            {"type": "image_url", "image_url": {"url": url}},
        ]

    return (
        f"[The user sent an image{_caption_suffix(message)}. "
        f"The current model cannot see images, let them know.]"
    )


async def audio_handler(bot, message: IncomingMessage) -> Content:
    """Download the voice note and replace it with its transcription."""
    url = message.media.url if message.media else None
    if not url:
        return "[Audio message could not be transcribed]"

    file_name = message.media.file_name or "audio.ogg"
    try:
        audio = await bot.client.download(url)
    except GreenApiError as e:
        logger.warning(f"Could not download audio {message.message_id}: {e}")
        return "[Audio message could not be transcribed]"

    transcript = await bot.model.transcribe(audio, file_name)
    if not transcript:
        return "[Audio message could not be transcribed]"
    return f"[Voice message transcription]: {transcript}"


async def video_handler(bot, message: IncomingMessage) -> Content:
    return f"[The user sent a video{_caption_suffix(message)}]"


async def document_handler(bot, message: IncomingMessage) -> Content:
    file_name = message.media.file_name if message.media else None
    return f"[The user sent a document: {file_name or 'unnamed file'}{_caption_suffix(message)}]"


async def location_handler(bot, message: IncomingMessage) -> Content:
    loc = message.location
    if loc is None:
        return "[The user shared a location]"
    label = ", ".join(part for part in (loc.name, loc.address) if part)
    where = f"{label} " if label else ""
    return f"[The user shared a location: {where}({loc.latitude}, {loc.longitude})]"


async def contact_handler(bot, message: IncomingMessage) -> Content:
    name = message.contact.display_name if message.contact else ""
    return f"[The user shared a contact: {name or 'unknown'}]"


async def sticker_handler(bot, message: IncomingMessage) -> Content:
    return "[The user sent a sticker]"


async def unknown_handler(bot, message: IncomingMessage) -> Content:
    return "[The user sent a message of an unsupported type]"


DEFAULT_CONTENT_HANDLERS: Dict[str, ContentHandler] = {
    "text": text_handler,
    "image": image_handler,
    "audio": audio_handler,
    "video": video_handler,
    "document": document_handler,
    "location": location_handler,
    "contact": contact_handler,
    "sticker": sticker_handler,
    "unknown": unknown_handler,
}


class ContentHandlerRegistry:
    """Map from message category to content handler."""

    def __init__(self, handlers: Optional[Dict[str, ContentHandler]] = None):
        self._handlers: Dict[str, ContentHandler] = dict(handlers or DEFAULT_CONTENT_HANDLERS)

    def get(self, category: str) -> ContentHandler:
        return self._handlers.get(category, self._handlers["unknown"])

    def replace(self, category: str, handler: ContentHandler) -> ContentHandler:
        """Swap the handler for a category; returns the previous one."""
        previous = self.get(category)
        self._handlers[category] = handler
        return previous

    async def resolve(self, bot, message: IncomingMessage) -> Content:
        return await self.get(message.type)(bot, message)
