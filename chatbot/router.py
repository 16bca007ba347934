"""
Command router.

Binds handlers to triggers:
- exact text  (``/help``)
- regex       (``^/weather\\s+(.+)$``)
- payload type (``location``, ``document``, ...)

A handler has the signature ``async def handler(bot, message, session)``.
Once its trigger matches, the message counts as handled unless the handler
returns ``False``.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional, Pattern, Union

from transport.whatsapp.schemas import IncomingMessage

from .session import Session

logger = logging.getLogger(__name__)


Handler = Callable[[Any, IncomingMessage, Session], Awaitable[Optional[bool]]]


@dataclass
class Route:
    kind: str  # "text", "regex", "type"
    trigger: Union[str, Pattern[str]]
    handler: Handler

    def matches(self, message: IncomingMessage) -> bool:
        if self.kind == "type":
            return message.type == self.trigger

        if message.type != "text" or message.text is None:
            return False

        if self.kind == "text":
            return message.text.strip() == self.trigger
        return self.trigger.search(message.text.strip()) is not None


class CommandRouter:
    """Exact-text, regex and payload-type triggers, matched in that order."""

    def __init__(self):
        self._routes: List[Route] = []

    def on_text(self, trigger: str, handler: Optional[Handler] = None):
        """Register a handler for an exact text command. Usable as a decorator."""
        return self._register("text", trigger, handler)

    def on_regex(self, pattern: Union[str, Pattern[str]], handler: Optional[Handler] = None):
        """Register a handler for a regex command. Usable as a decorator."""
        compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
        return self._register("regex", compiled, handler)

    def on_type(self, message_type: str, handler: Optional[Handler] = None):
        """Register a handler for a payload type. Usable as a decorator."""
        return self._register("type", message_type, handler)

    def _register(self, kind, trigger, handler):
        if handler is not None:
            self._routes.append(Route(kind, trigger, handler))
            return handler

        def decorator(func: Handler) -> Handler:
            self._routes.append(Route(kind, trigger, func))
            return func

        return decorator

    def find(self, message: IncomingMessage) -> Optional[Route]:
        for kind in ("text", "regex", "type"):
            for route in self._routes:
                if route.kind == kind and route.matches(message):
                    return route
        return None

    async def dispatch(self, bot: Any, message: IncomingMessage, session: Session) -> bool:
        """
        Run the first matching handler.

        Returns:
            True if a handler took the message
        """
        route = self.find(message)
        if route is None:
            return False

        logger.debug(f"Routing {message.message_id} to {route.kind} handler {route.handler.__name__}")
        result = await route.handler(bot, message, session)
        return result is not False

    def __len__(self) -> int:
        return len(self._routes)
