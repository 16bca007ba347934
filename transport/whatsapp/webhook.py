"""
WhatsApp Webhook Receiver

FastAPI router that receives Green-API notifications and hands them to the bot
stored on ``app.state.bot``. No bot imports. Pure transport.
"""

import json
import logging

from fastapi import APIRouter, BackgroundTasks, HTTPException, Request, status

from .normalize import NormalizationError, normalize_notification
from .security import verify_webhook_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhook", tags=["WhatsApp Transport"])


@router.post("/whatsapp")
async def whatsapp_webhook_receiver(
    request: Request,
    background_tasks: BackgroundTasks,
) -> dict[str, str]:
    """
    Receive Green-API notifications via webhook.

    Flow:
    1. Verify webhook token (401 missing, 403 invalid)
    2. Parse JSON body
    3. Normalize to IncomingMessage (non-message notifications are acknowledged and dropped)
    4. Schedule bot processing and acknowledge immediately

    Returns:
        {"status": "ok"} (Green-API redelivers on anything else)

    Raises:
        HTTPException(401/403): Authorization failure
        HTTPException(422): Invalid JSON or not an object
        HTTPException(400): Malformed incoming message
        HTTPException(503): No bot attached to the application
    """

    verify_webhook_token(request)

    try:
        body = await request.body()
        payload = json.loads(body)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Invalid JSON payload"
        )

    if not isinstance(payload, dict):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Notification must be a JSON object"
        )

    try:
        message = normalize_notification(payload)
    except NormalizationError as e:
        logger.error(f"Normalization failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Normalization failed: {str(e)}"
        )

    if message is None:
        logger.debug(f"Ignoring notification {payload.get('typeWebhook')}")
        return {"status": "ok"}

    bot = getattr(request.app.state, "bot", None)
    if bot is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Bot not initialized"
        )

    logger.info(
        f"Message normalized",
        extra={
            "chat_id": message.chat_id,
            "message_id": message.message_id,
            "message_type": message.type,
        }
    )
    background_tasks.add_task(bot.process_message, message)

    return {"status": "ok"}


@router.get("/whatsapp/health")
async def whatsapp_health(request: Request) -> dict:
    """Health check for the WhatsApp webhook."""
    bot = getattr(request.app.state, "bot", None)
    return {
        "status": "ok" if bot is not None else "not_ready",
        "bot_attached": bot is not None,
    }
