"""
Demo middleware.

Message middleware:  logging → time context → moderation
Response middleware: logging → signature
"""

import json
import logging
import re
from datetime import datetime

from .prompts import MODERATION_NOTICE, SIGNATURE

logger = logging.getLogger(__name__)

SENSITIVE_KEYWORDS = ["stupid", "bad", "awful"]

_TIME_LINE_RE = re.compile(r"Current time:.*$", re.MULTILINE)


async def logging_message_middleware(bot, message, content, messages, session):
    shown = content if isinstance(content, str) else json.dumps(content, ensure_ascii=False)
    logger.info(f"[{datetime.now().isoformat()}] User ({message.chat_id}): {shown}")
    return content, messages


async def logging_response_middleware(bot, response, messages, session):
    logger.info(f"[{datetime.now().isoformat()}] Bot: {response}")
    return response, messages


def apply_time_context(system_content: str, now: datetime = None) -> str:
    """Append a 'Current time:' line, or refresh the one already there."""
    now = now or datetime.now()
    time_context = f"Current time: {now.strftime('%c')}"

    if "Current time:" not in system_content:
        return f"{system_content}\n{time_context}"
    return _TIME_LINE_RE.sub(lambda _: time_context, system_content, count=1)


async def time_context_middleware(bot, message, content, messages, session):
    """Keep the system record stamped with the current wall-clock time."""
    for record in messages:
        if record.get("role") == "system":
            if isinstance(record.get("content"), str):
                record["content"] = apply_time_context(record["content"])
            break
    return content, messages


async def moderation_middleware(bot, message, content, messages, session):
    """Replace text containing a sensitive keyword with a moderation notice."""
    if isinstance(content, str):
        lower_content = content.lower()
        for keyword in SENSITIVE_KEYWORDS:
            if keyword in lower_content:
                logger.info(f"Moderation triggered on keyword: {keyword}")
                return MODERATION_NOTICE, messages
    return content, messages


async def signature_middleware(bot, response, messages, session):
    if SIGNATURE in response:
        return response, messages
    return f"{response}\n\n{SIGNATURE}", messages
