"""
Bot configuration.

Immutable settings shared by every handler and middleware, built once at
process start. Environment-based backend selection with sensible defaults.
"""

import os
from dataclasses import dataclass, replace
from typing import Literal

from inference import ModelBackend, OpenAIModelBackend, StubModelBackend


LLMBackendType = Literal["openai", "stub"]

DEFAULT_SYSTEM_MESSAGE = "You are a helpful WhatsApp assistant. Be concise but informative."
DEFAULT_FALLBACK_REPLY = "Sorry, I couldn't process that."


@dataclass(frozen=True)
class BotConfig:
    """Bot configuration."""

    # Green-API
    instance_id: str
    api_token: str
    api_url: str = "https://api.green-api.com"

    # Model
    openai_api_key: str = ""
    llm_backend: LLMBackendType = "openai"
    model: str = "gpt-4o"
    system_message: str = DEFAULT_SYSTEM_MESSAGE
    temperature: float = 0.5
    max_retries: int = 2

    # Conversation
    max_history_length: int = 10
    session_timeout_s: int = 1800
    fallback_reply: str = DEFAULT_FALLBACK_REPLY

    # Routing / receiving
    handlers_first: bool = True
    clear_webhook_queue_on_start: bool = False
    poll_timeout_s: int = 5

    @classmethod
    def from_env(cls, **overrides) -> "BotConfig":
        """
        Load configuration from environment variables.

        Keyword overrides win over the environment, so callers can pin the
        fixed demo settings (model, prompt, history cap) in code.
        """
        config = cls(
            instance_id=os.getenv("INSTANCE_ID", ""),
            api_token=os.getenv("INSTANCE_TOKEN", ""),
            api_url=os.getenv("GREEN_API_URL", "https://api.green-api.com"),
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            llm_backend=os.getenv("LLM_BACKEND", "openai"),  # type: ignore
            session_timeout_s=int(os.getenv("SESSION_TIMEOUT_SECONDS", "1800")),
        )
        return replace(config, **overrides)

    def create_model_backend(self) -> ModelBackend:
        """Create model backend instance based on configuration."""
        if self.llm_backend == "stub":
            return StubModelBackend()
        return OpenAIModelBackend(
            api_key=self.openai_api_key,
            max_retries=self.max_retries,
        )
