"""
Text and regex command handlers: /help, /clear, /mode, /weather.

Handlers take ``(bot, message, session)`` and reply through ``bot.send_text``.
A missing or non-matching text aborts the handler without a reply.
"""

import random
import re

from .prompts import HELP_TEXT, MODE_PROMPTS

MODE_PATTERN = re.compile(r"^/mode\s+(professional|casual)$", re.IGNORECASE)
WEATHER_PATTERN = re.compile(r"^/weather\s+(.+)$", re.IGNORECASE)

WEATHER_CONDITIONS = ["Sunny", "Partly Cloudy", "Cloudy", "Light Rain", "Heavy Rain"]


async def help_command(bot, message, session):
    await bot.send_text(message.chat_id, HELP_TEXT)


async def clear_command(bot, message, session):
    """Drop everything but the system record."""
    if session.messages is not None:
        system = next((m for m in session.messages if m.get("role") == "system"), None)
        session.messages = [system] if system else []
        await bot.send_text(message.chat_id, "✓ Conversation history cleared!")
    else:
        await bot.send_text(message.chat_id, "No conversation history to clear.")


async def mode_command(bot, message, session):
    """Rewrite the system record with the prompt of the chosen style."""
    match = MODE_PATTERN.match((message.text or "").strip())
    if not match:
        return

    mode = match.group(1).lower()
    system_prompt = MODE_PROMPTS.get(mode, "")

    if session.messages is not None:
        index = session.system_index()
        if index >= 0:
            session.messages[index]["content"] = system_prompt
        else:
            session.messages.insert(0, {"role": "system", "content": system_prompt})

        await bot.send_text(message.chat_id, f"Mode switched to *{mode}* style! 🎭")


def simulate_weather(location: str, rng=random) -> dict:
    """Synthetic weather report; no real lookup happens."""
    return {
        "location": location,
        "temperature": round(10 + rng.random() * 25),
        "condition": WEATHER_CONDITIONS[int(rng.random() * len(WEATHER_CONDITIONS))],
        "humidity": round(40 + rng.random() * 40),
        "wind": round(5 + rng.random() * 20),
    }


def format_weather(weather: dict) -> str:
    return (
        f"*Weather for {weather['location']}*\n"
        f"Temperature: {weather['temperature']}°C\n"
        f"Condition: {weather['condition']}\n"
        f"Humidity: {weather['humidity']}%\n"
        f"Wind: {weather['wind']} km/h\n\n"
        f"_Note: This is simulated data for demonstration purposes._"
    )


async def weather_command(bot, message, session):
    match = WEATHER_PATTERN.match((message.text or "").strip())
    if not match:
        return

    weather = simulate_weather(match.group(1))
    await bot.send_text(message.chat_id, format_weather(weather))
