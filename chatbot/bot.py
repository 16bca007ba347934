"""
GptBot: the context object handed to every handler and middleware.

Owns the immutable configuration, the Green-API client, the model backend,
the session store, the command router, the content-handler registry and the
two middleware pipelines.

Message flow:
  IncomingMessage → router (handlers first) → content handler
    → message middleware → model → response middleware → history → send_text
"""

import asyncio
import logging
from typing import Optional

from inference import ModelBackend, ModelRequest
from transport.whatsapp.normalize import NormalizationError, normalize_notification
from transport.whatsapp.schemas import IncomingMessage
from transport.whatsapp.sender import GreenApiClient, GreenApiError

from .config import BotConfig
from .media import ContentHandler, ContentHandlerRegistry
from .pipeline import MessageMiddleware, MessagePipeline, ResponseMiddleware, ResponsePipeline
from .router import CommandRouter
from .session import Session, SessionStore, trim_history

logger = logging.getLogger(__name__)

POLL_ERROR_BACKOFF_S = 5.0


class GptBot:
    """WhatsApp bot backed by a chat model."""

    def __init__(
        self,
        config: BotConfig,
        model: Optional[ModelBackend] = None,
        client: Optional[GreenApiClient] = None,
        sessions: Optional[SessionStore] = None,
    ):
        self.config = config
        self.model = model or config.create_model_backend()
        self.client = client or GreenApiClient(
            instance_id=config.instance_id,
            api_token=config.api_token,
            api_url=config.api_url,
        )
        self.sessions = sessions or SessionStore(
            system_message=config.system_message,
            timeout_s=config.session_timeout_s,
        )
        self.router = CommandRouter()
        self.content_handlers = ContentHandlerRegistry()
        self.message_pipeline = MessagePipeline()
        self.response_pipeline = ResponsePipeline()
        self._running = False

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def on_text(self, trigger, handler=None):
        return self.router.on_text(trigger, handler)

    def on_regex(self, pattern, handler=None):
        return self.router.on_regex(pattern, handler)

    def on_type(self, message_type, handler=None):
        return self.router.on_type(message_type, handler)

    def get_handler(self, category: str) -> ContentHandler:
        return self.content_handlers.get(category)

    def replace_handler(self, category: str, handler: ContentHandler) -> ContentHandler:
        return self.content_handlers.replace(category, handler)

    def add_message_middleware(self, middleware: MessageMiddleware) -> None:
        self.message_pipeline.add(middleware)

    def add_response_middleware(self, middleware: ResponseMiddleware) -> None:
        self.response_pipeline.add(middleware)

    # ------------------------------------------------------------------
    # Outbound
    # ------------------------------------------------------------------

    async def send_text(self, chat_id: str, text: str) -> bool:
        """
        Send a text message to a chat.

        Returns:
            True if Green-API accepted the message
        """
        try:
            await self.client.send_message(chat_id, text)
            return True
        except GreenApiError as e:
            logger.error(f"Failed to send message to {chat_id}: {e}")
            return False

    # ------------------------------------------------------------------
    # Inbound
    # ------------------------------------------------------------------

    async def process_message(self, message: IncomingMessage) -> None:
        """
        Route one incoming message.

        Messages from the same chat are serialized by the session lock.
        Failures are logged so one bad message never stops the bot.
        """
        async with self.sessions.lock(message.chat_id):
            session = self.sessions.get_or_create(message.chat_id)
            try:
                if self.config.handlers_first:
                    if await self.router.dispatch(self, message, session):
                        return
                    await self._reply_with_model(message, session)
                else:
                    await self._reply_with_model(message, session)
                    await self.router.dispatch(self, message, session)
            except Exception as e:
                logger.error(
                    f"Failed to process message {message.message_id}: {e}",
                    exc_info=True,
                    extra={"chat_id": message.chat_id, "message_type": message.type},
                )

    async def _reply_with_model(self, message: IncomingMessage, session: Session) -> None:
        content = await self.content_handlers.resolve(self, message)

        # Work on a copy so a failed turn leaves the session as it was
        history = [dict(record) for record in session.messages or []]

        content, history = await self.message_pipeline.run(self, message, content, history, session)
        history.append({"role": "user", "content": content})
        history = trim_history(history, self.config.max_history_length)

        response = await self.model.complete(
            ModelRequest(
                messages=list(history),
                model=self.config.model,
                temperature=self.config.temperature,
                trace_id=message.message_id,
            )
        )

        if not response.ok:
            logger.warning(
                f"Model call failed: {response.error_type}",
                extra={"chat_id": message.chat_id, "status": response.status},
            )
            await self.send_text(message.chat_id, self.config.fallback_reply)
            return

        reply, history = await self.response_pipeline.run(self, response.output, history, session)
        history.append({"role": "assistant", "content": reply})
        session.messages = trim_history(history, self.config.max_history_length)

        await self.send_text(message.chat_id, reply)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self._running

    async def initialize(self) -> None:
        """Prepare for receiving; drains the notification queue when configured."""
        if self.config.clear_webhook_queue_on_start:
            cleared = await self.client.clear_queue()
            logger.info(f"Notification queue cleared ({cleared} discarded)")
        self._running = True

    async def start(self) -> None:
        """
        Poll Green-API for notifications until stop() is called.

        Each notification is deleted after processing, whatever the outcome.

        Raises:
            GreenApiError: If the initial queue drain fails
        """
        await self.initialize()
        logger.info(f"Polling instance {self.config.instance_id} for notifications")

        while self._running:
            try:
                notification = await self.client.receive_notification(self.config.poll_timeout_s)
            except GreenApiError as e:
                logger.error(f"Polling failed: {e}")
                await asyncio.sleep(POLL_ERROR_BACKOFF_S)
                continue

            if notification is None:
                continue

            try:
                message = normalize_notification(notification.body)
                if message is not None:
                    await self.process_message(message)
            except NormalizationError as e:
                logger.warning(f"Skipping notification {notification.receiptId}: {e}")
            finally:
                try:
                    await self.client.delete_notification(notification.receiptId)
                except GreenApiError as e:
                    logger.error(f"Could not delete notification {notification.receiptId}: {e}")

        logger.info("Polling stopped")

    def stop(self) -> None:
        """Stop accepting new notifications. In-flight work is not drained."""
        self._running = False

    async def aclose(self) -> None:
        self.stop()
        await self.client.aclose()
