import io
import logging
from typing import Optional

import httpx
import openai
from openai import AsyncOpenAI

from .base import ModelBackend
from .types import ModelRequest, ModelResponse

logger = logging.getLogger(__name__)

TRANSCRIPTION_MODEL = "whisper-1"


class OpenAIModelBackend(ModelBackend):
    """
    OpenAI chat completions backend.

    Retries (429, connection errors, 5xx) are delegated to the client's
    ``max_retries``; whatever still fails is mapped to a ModelResponse status
    instead of being raised.
    """

    def __init__(
        self,
        api_key: str,
        max_retries: int = 2,
        timeout_s: float = 60.0,
        client: Optional[AsyncOpenAI] = None,
    ):
        """
        Initialize OpenAI backend.

        Args:
            api_key:     Model-provider API key
            max_retries: Retries performed by the client before giving up
            timeout_s:   Total request timeout in seconds
            client:      Pre-built client (tests inject a fake here)
        """
        self.client = client or AsyncOpenAI(
            api_key=api_key,
            max_retries=max_retries,
            timeout=httpx.Timeout(timeout_s, connect=10.0),
        )

    async def complete(self, request: ModelRequest) -> ModelResponse:
        """
        Generate a response using /v1/chat/completions.

        Args:
            request: ModelRequest with the full message history

        Returns:
            ModelResponse with the assistant text on success
        """
        base_metadata = {
            "backend": "openai",
            "model": request.model,
            "trace_id": request.trace_id,
        }

        kwargs = {
            "model": request.model,
            "messages": request.messages,
            "temperature": request.temperature,
        }
        if request.max_tokens is not None:
            kwargs["max_tokens"] = request.max_tokens
        if request.timeout_s is not None:
            kwargs["timeout"] = request.timeout_s

        try:
            completion = await self.client.chat.completions.create(**kwargs)
        except openai.APITimeoutError:
            return ModelResponse(
                status="recoverable_error",
                error_type="timeout",
                metadata=base_metadata,
            )
        except openai.RateLimitError as e:
            return ModelResponse(
                status="recoverable_error",
                error_type="rate_limited",
                metadata={**base_metadata, "error": str(e)},
            )
        except openai.OpenAIError as e:
            logger.error(f"OpenAI request failed: {e}", exc_info=True)
            return ModelResponse(
                status="fatal_error",
                error_type="backend_unavailable",
                metadata={**base_metadata, "error": str(e)},
            )

        choice = completion.choices[0] if completion.choices else None
        output = choice.message.content if choice else None
        if not output:
            return ModelResponse(
                status="recoverable_error",
                error_type="empty_output",
                metadata=base_metadata,
            )

        usage = getattr(completion, "usage", None)
        if usage is not None:
            base_metadata["total_tokens"] = getattr(usage, "total_tokens", None)

        return ModelResponse(status="success", output=output, metadata=base_metadata)

    async def transcribe(self, audio: bytes, filename: str) -> Optional[str]:
        """Transcribe a voice note with the Whisper API."""
        buffer = io.BytesIO(audio)
        buffer.name = filename
        try:
            result = await self.client.audio.transcriptions.create(
                model=TRANSCRIPTION_MODEL,
                file=buffer,
            )
        except openai.OpenAIError as e:
            logger.warning(f"Transcription failed for {filename}: {e}")
            return None
        return result.text or None
