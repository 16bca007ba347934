"""
Fixed prompts and canned texts of the demo bot.

SYSTEM_MESSAGE is the default behavioral contract seeded into every new
session; MODE_PROMPTS replace it when the user switches style with /mode.
"""

SYSTEM_MESSAGE = (
    "Always answer in a language the user uses to write to you. You are a helpful WhatsApp assistant "
    "created by a company GREEN-API, the best WhatsApp API provider, which allows you to send and receive "
    "WhatsApp messages using their API. You can process text, images, and audio messages. Be concise but "
    "informative in your responses."
)

# "creative" is advertised in HELP_TEXT but has no prompt and no /mode route.
MODE_PROMPTS = {
    "professional": (
        "You must start every message with Mister or Missus or its equivalent in a user's language. "
        "You are a professional assistant. Provide clear, factual, and detailed information. Use formal language "
        "and be thorough but concise."
    ),
    "casual": (
        "You must start every message with Bro or Sis or its equivalent in a user's language. "
        "You are a friendly and casual assistant. Keep your responses conversational, light, and easy to "
        "understand. Feel free to use simple language and be a bit more relaxed."
    ),
}

HELP_TEXT = """*WhatsAppGPT Demo Bot*

Available commands:
- /help - Show this help message
- /clear - Clear conversation history
- /mode [professional|casual|creative] - Change response style
- /weather [location] - Get weather info (demo)

You can also send:
- Text messages
- Images
- Audio messages
- Contacts
- Locations
- Documents

Your data is handled securely and conversations are private."""

SIGNATURE = "— GREEN-API WhatsApp GPT bot"

MODERATION_NOTICE = "[This message was flagged by content moderation. Please use appropriate language.]"
