"""
Configuration management for the WhatsApp GPT demo bot.

Loads environment variables from .env file and provides typed access to the
process settings. Bot settings (credentials, model, sessions) are read by
``chatbot.BotConfig.from_env``.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file
env_path = Path(__file__).parent / ".env"
load_dotenv(env_path)


class Config:
    """Configuration class for the demo bot process."""

    RECEIVE_MODE = os.getenv("RECEIVE_MODE", "polling")
    BOT_PORT = int(os.getenv("BOT_PORT", "8000"))
    ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls, bot_config) -> bool:
        """Validate that the bot has the credentials it needs."""
        required = {
            "INSTANCE_ID": bot_config.instance_id,
            "INSTANCE_TOKEN": bot_config.api_token,
        }
        if bot_config.llm_backend == "openai":
            required["OPENAI_API_KEY"] = bot_config.openai_api_key
        missing = [key for key, value in required.items() if not value]

        if missing:
            print(f"⚠️  Missing required environment variables: {', '.join(missing)}")
            print(f"   Please set them in .env file")
            return False

        return True


if __name__ == "__main__":
    from chatbot import BotConfig

    bot_config = BotConfig.from_env()
    # Test configuration loading
    print("Configuration loaded:")
    print(f"  Instance ID: {'✓ Set' if bot_config.instance_id else '✗ Missing'}")
    print(f"  Instance Token: {'✓ Set' if bot_config.api_token else '✗ Missing'}")
    print(f"  OpenAI Key: {'✓ Set' if bot_config.openai_api_key else '✗ Missing'}")
    print(f"  LLM Backend: {bot_config.llm_backend}")
    print(f"  Receive Mode: {Config.RECEIVE_MODE}")
    print(f"  Environment: {Config.ENVIRONMENT}")
    print(f"\n  Validation: {'✓ PASSED' if Config.validate(bot_config) else '✗ FAILED'}")
