from typing import Optional

from .base import ModelBackend
from .types import ModelRequest, ModelResponse


class StubModelBackend(ModelBackend):
    """
    Deterministic fake model for testing and CI.

    Replies with a fixed string, or echoes the last user message when
    ``echo`` is enabled. Every request is recorded in ``requests``.
    """

    def __init__(self, reply: str = "This is a stubbed response.", echo: bool = False):
        self.reply = reply
        self.echo = echo
        self.requests: list[ModelRequest] = []

    async def complete(self, request: ModelRequest) -> ModelResponse:
        self.requests.append(request)

        if self.echo:
            user_turns = [m for m in request.messages if m.get("role") == "user"]
            content = user_turns[-1]["content"] if user_turns else ""
            output = content if isinstance(content, str) else str(content)
        else:
            output = self.reply

        return ModelResponse(
            status="success",
            output=output,
            metadata={"backend": "stub", "model": request.model, "trace_id": request.trace_id},
        )

    async def transcribe(self, audio: bytes, filename: str) -> Optional[str]:
        return f"[stub transcription of {filename}]"
