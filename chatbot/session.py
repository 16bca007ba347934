"""
In-memory conversation sessions.

One Session per chat, holding the role-tagged history sent to the model.
Sessions live in process memory only and expire after a period of inactivity.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


ChatRecord = Dict[str, Any]


@dataclass
class Session:
    """Per-chat state: message history plus free-form user data."""

    chat_id: str
    messages: Optional[List[ChatRecord]] = None
    last_activity: datetime = field(default_factory=datetime.now)
    user_data: Dict[str, Any] = field(default_factory=dict)

    def touch(self) -> None:
        self.last_activity = datetime.now()

    def system_index(self) -> int:
        """Index of the system record, or -1."""
        for index, record in enumerate(self.messages or []):
            if record.get("role") == "system":
                return index
        return -1


def trim_history(messages: List[ChatRecord], max_length: int) -> List[ChatRecord]:
    """
    Cap a history at ``max_length`` records.

    The system record always survives; the oldest user/assistant records are
    dropped first.
    """
    if max_length <= 0 or len(messages) <= max_length:
        return messages

    system = [m for m in messages if m.get("role") == "system"][:1]
    others = [m for m in messages if m.get("role") != "system"]
    keep = max(max_length - len(system), 0)
    return system + (others[-keep:] if keep else [])


class SessionStore:
    """
    Sessions keyed by chat id.

    Each chat also gets an asyncio.Lock so two messages from the same chat
    never run through the pipelines at the same time.
    """

    def __init__(self, system_message: str, timeout_s: int = 1800):
        self.system_message = system_message
        self.timeout = timedelta(seconds=timeout_s)
        self._sessions: Dict[str, Session] = {}
        self._locks: Dict[str, asyncio.Lock] = {}

    def _new_session(self, chat_id: str) -> Session:
        messages = [{"role": "system", "content": self.system_message}] if self.system_message else []
        return Session(chat_id=chat_id, messages=messages)

    def _expired(self, session: Session, now: datetime) -> bool:
        return now - session.last_activity > self.timeout

    def _evict(self, chat_id: str) -> None:
        """Forget a chat; its lock goes too unless a message is in flight."""
        self._sessions.pop(chat_id, None)
        lock = self._locks.get(chat_id)
        if lock is not None and not lock.locked():
            del self._locks[chat_id]

    def sweep(self) -> int:
        """
        Drop every expired session.

        Returns:
            Number of sessions evicted
        """
        now = datetime.now()
        expired = [chat_id for chat_id, session in self._sessions.items() if self._expired(session, now)]
        for chat_id in expired:
            self._evict(chat_id)
        if expired:
            logger.debug(f"Evicted {len(expired)} expired sessions")
        return len(expired)

    def get_or_create(self, chat_id: str) -> Session:
        """Return the live session for a chat, starting a new one if missing or expired."""
        session = self._sessions.get(chat_id)
        if session is not None and self._expired(session, datetime.now()):
            logger.info(f"Session for {chat_id} expired, starting fresh")
        self.sweep()

        session = self._sessions.get(chat_id)

        if session is None:
            session = self._new_session(chat_id)
            self._sessions[chat_id] = session

        session.touch()
        return session

    def get(self, chat_id: str) -> Optional[Session]:
        return self._sessions.get(chat_id)

    def lock(self, chat_id: str) -> asyncio.Lock:
        if chat_id not in self._locks:
            self._locks[chat_id] = asyncio.Lock()
        return self._locks[chat_id]

    def reset(self, chat_id: str) -> None:
        self._evict(chat_id)

    def __len__(self) -> int:
        return len(self._sessions)
