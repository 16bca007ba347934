"""
Model boundary layer for LLM inference.

This package provides a clean abstraction for model invocation,
allowing the bot to remain agnostic of the underlying backend.

Supported backends:
- StubModelBackend: Deterministic fake model (default for CI/tests)
- OpenAIModelBackend: Hosted OpenAI chat completions

Example usage:
    from inference import StubModelBackend, ModelRequest

    backend = StubModelBackend()
    request = ModelRequest(messages=[{"role": "user", "content": "Hi"}], model="gpt-4o")
    response = await backend.complete(request)
"""

from .types import ModelRequest, ModelResponse, ModelStatus
from .base import ModelBackend, supports_images
from .stub import StubModelBackend
from .openai_backend import OpenAIModelBackend

__all__ = [
    "ModelRequest",
    "ModelResponse",
    "ModelStatus",
    "ModelBackend",
    "supports_images",
    "StubModelBackend",
    "OpenAIModelBackend",
]
