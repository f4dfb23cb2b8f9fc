"""Core data models for devpilot chat sessions."""

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

DEFAULT_MODEL = "claude-3"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """A single message within a chat session."""

    role: Role
    content: str
    timestamp: datetime = field(default_factory=utcnow)


@dataclass
class Session:
    """The in-memory record of one interactive chat exchange.

    The history is append-only. Use ``add_exchange`` to record a turn; it
    always appends the user message followed by the assistant reply.
    """

    id: str  # "session-<epoch ms>" unless resumed under an explicit id
    model: str
    context: Optional[str] = None  # path given with --context
    history: list[Message] = field(default_factory=list)
    created: datetime = field(default_factory=utcnow)
    updated: datetime = field(default_factory=utcnow)

    @property
    def messages(self) -> tuple[Message, ...]:
        return tuple(self.history)

    @property
    def message_count(self) -> int:
        return len(self.history)

    @property
    def title(self) -> str:
        """First user prompt, or the session id for an empty session."""
        for msg in self.history:
            if msg.role is Role.USER:
                return (msg.content.splitlines() or [""])[0][:80] or self.id
        return self.id

    def add_exchange(self, user_text: str, assistant_text: str) -> tuple[Message, Message]:
        user_msg = Message(Role.USER, user_text, utcnow())
        assistant_msg = Message(Role.ASSISTANT, assistant_text, utcnow())
        self.history.extend((user_msg, assistant_msg))
        self.updated = assistant_msg.timestamp
        return user_msg, assistant_msg


def new_session(model: Optional[str] = None, context: Optional[str] = None) -> Session:
    """Create an empty session with a time-based id."""
    return Session(
        id=f"session-{int(time.time() * 1000)}",
        model=model or DEFAULT_MODEL,
        context=context,
    )
