"""
WhatsApp GPT demo bot configuration.

``create_demo_config`` pins the fixed demo settings; ``register_demo`` wires
the commands, type handlers, image handler replacement and middleware onto a
GptBot in the order they run.
"""

from chatbot import BotConfig, GptBot

from .commands import (
    MODE_PATTERN,
    WEATHER_PATTERN,
    clear_command,
    help_command,
    mode_command,
    weather_command,
)
from .media import document_handler, enhance_image_handler, location_handler
from .middleware import (
    logging_message_middleware,
    logging_response_middleware,
    moderation_middleware,
    signature_middleware,
    time_context_middleware,
)
from .prompts import SYSTEM_MESSAGE

DEMO_MODEL = "gpt-4o"
DEMO_MAX_HISTORY_LENGTH = 15
DEMO_TEMPERATURE = 0.5


def create_demo_config(**overrides) -> BotConfig:
    """Credentials from the environment, everything else fixed."""
    settings = {
        "model": DEMO_MODEL,
        "system_message": SYSTEM_MESSAGE,
        "max_history_length": DEMO_MAX_HISTORY_LENGTH,
        "temperature": DEMO_TEMPERATURE,
        "handlers_first": True,
        "clear_webhook_queue_on_start": True,
    }
    settings.update(overrides)
    return BotConfig.from_env(**settings)


def register_demo(bot: GptBot) -> GptBot:
    # Commands
    bot.on_text("/help", help_command)
    bot.on_text("/clear", clear_command)
    bot.on_regex(MODE_PATTERN, mode_command)
    bot.on_regex(WEATHER_PATTERN, weather_command)

    # Payload types
    bot.on_type("location", location_handler)
    bot.on_type("document", document_handler)

    # Replace default image handler with enhanced version
    bot.replace_handler("image", enhance_image_handler(bot.get_handler("image")))

    # Middleware, in execution order
    bot.add_message_middleware(logging_message_middleware)
    bot.add_response_middleware(logging_response_middleware)
    bot.add_message_middleware(time_context_middleware)
    bot.add_message_middleware(moderation_middleware)
    bot.add_response_middleware(signature_middleware)

    return bot


__all__ = ["create_demo_config", "register_demo"]
