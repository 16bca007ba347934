"""
Message and response middleware pipelines.

Message middleware run before the model call:
    async def mw(bot, message, content, messages, session) -> (content, messages)

Response middleware run after it:
    async def mw(bot, response, messages, session) -> (response, messages)

Units execute strictly in registration order; each unit's output is the next
unit's input.
"""

from typing import Any, Awaitable, Callable, List, Tuple

from transport.whatsapp.schemas import IncomingMessage

from .session import ChatRecord, Session


MessageMiddleware = Callable[
    [Any, IncomingMessage, Any, List[ChatRecord], Session],
    Awaitable[Tuple[Any, List[ChatRecord]]],
]
ResponseMiddleware = Callable[
    [Any, str, List[ChatRecord], Session],
    Awaitable[Tuple[str, List[ChatRecord]]],
]


class MessagePipeline:
    """Ordered pre-model transformations."""

    def __init__(self):
        self._middleware: List[MessageMiddleware] = []

    def add(self, middleware: MessageMiddleware) -> None:
        self._middleware.append(middleware)

    async def run(
        self,
        bot: Any,
        message: IncomingMessage,
        content: Any,
        messages: List[ChatRecord],
        session: Session,
    ) -> Tuple[Any, List[ChatRecord]]:
        for middleware in self._middleware:
            content, messages = await middleware(bot, message, content, messages, session)
        return content, messages

    def __len__(self) -> int:
        return len(self._middleware)


class ResponsePipeline:
    """Ordered post-model transformations."""

    def __init__(self):
        self._middleware: List[ResponseMiddleware] = []

    def add(self, middleware: ResponseMiddleware) -> None:
        self._middleware.append(middleware)

    async def run(
        self,
        bot: Any,
        response: str,
        messages: List[ChatRecord],
        session: Session,
    ) -> Tuple[str, List[ChatRecord]]:
        for middleware in self._middleware:
            response, messages = await middleware(bot, response, messages, session)
        return response, messages

    def __len__(self) -> int:
        return len(self._middleware)
