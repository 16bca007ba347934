from abc import ABC, abstractmethod
from typing import Optional

from .types import ModelRequest, ModelResponse


# Models that accept image_url content parts
VISION_MODELS = (
    "gpt-4o",
    "gpt-4o-mini",
    "gpt-4-turbo",
    "gpt-4.1",
    "gpt-4.1-mini",
    "gpt-4.1-nano",
)


def supports_images(model: str) -> bool:
    """True when the chat model can read image parts."""
    return any(model == name or model.startswith(f"{name}-") for name in VISION_MODELS)


class ModelBackend(ABC):
    """
    Abstract model boundary.
    Bot code must depend ONLY on this interface.
    """

    @abstractmethod
    async def complete(self, request: ModelRequest) -> ModelResponse:
        """Generate a chat completion for the given history."""
        raise NotImplementedError

    @abstractmethod
    async def transcribe(self, audio: bytes, filename: str) -> Optional[str]:
        """Transcribe an audio clip. Returns None when transcription fails."""
        raise NotImplementedError
