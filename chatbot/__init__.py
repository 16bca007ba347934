"""
Bot engine: sessions, command routing, content handlers and middleware
pipelines around a chat model.

Example usage:
    from chatbot import BotConfig, GptBot

    bot = GptBot(BotConfig.from_env(model="gpt-4o"))

    @bot.on_text("/ping")
    async def ping(bot, message, session):
        await bot.send_text(message.chat_id, "pong")
"""

from .bot import GptBot
from .config import BotConfig
from .media import ContentHandlerRegistry, DEFAULT_CONTENT_HANDLERS
from .pipeline import MessagePipeline, ResponsePipeline
from .router import CommandRouter
from .session import Session, SessionStore, trim_history

__all__ = [
    "GptBot",
    "BotConfig",
    "CommandRouter",
    "ContentHandlerRegistry",
    "DEFAULT_CONTENT_HANDLERS",
    "MessagePipeline",
    "ResponsePipeline",
    "Session",
    "SessionStore",
    "trim_history",
]
