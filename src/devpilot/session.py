"""Interactive chat loop and on-disk session storage."""

import json
import logging
import re
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

import click

from .core import DEFAULT_MODEL, Session
from .errors import DevpilotError, wrap_errors
from .export import session_from_json, session_to_json
from .operations import ChatParams, Operation
from .provider import AIProvider

logger = logging.getLogger(__name__)

EXIT_COMMAND = "exit"
EMPTY_MESSAGE = "Message cannot be empty"

_SESSION_ID_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class LoopState(Enum):
    AWAITING_INPUT = "awaiting_input"
    PROCESSING = "processing"
    TERMINATED = "terminated"


class ChatLoop:
    """Read-eval loop between the operator and the provider's chat operation.

    Input and output are injected so the loop can run against a terminal or
    a scripted list of messages. Each accepted message produces exactly one
    user/assistant pair in ``session.history``; a failed turn adds nothing.
    """

    def __init__(
        self,
        session: Session,
        provider: AIProvider,
        read_input: Callable[[str], str],
        echo: Callable[[str], None] = print,
        on_exit: Optional[Callable[[Session], None]] = None,
    ):
        self.session = session
        self.provider = provider
        self.read_input = read_input
        self.echo = echo
        self.on_exit = on_exit
        self.state = LoopState.AWAITING_INPUT

    def step(self, text: str) -> Optional[str]:
        """Handle one line of operator input and return the reply, if any."""
        if self.state is not LoopState.AWAITING_INPUT:
            raise RuntimeError(f"Chat loop is {self.state.value}, cannot accept input")

        if not text or not text.strip():
            self.echo(EMPTY_MESSAGE)
            return None

        if text.lower() == EXIT_COMMAND:
            self.state = LoopState.TERMINATED
            return None

        self.state = LoopState.PROCESSING
        try:
            with wrap_errors("CHAT", session_id=self.session.id, message=text):
                reply = self.provider.invoke(
                    Operation.CHAT, ChatParams(message=text, session=self.session)
                )
        finally:
            self.state = LoopState.AWAITING_INPUT

        self.session.add_exchange(text, reply)
        return reply

    def run(self) -> Session:
        self.echo(f"\nAI Chat Session ({self.session.model})")
        self.echo('Type "exit" to end the session\n')

        try:
            while self.state is not LoopState.TERMINATED:
                try:
                    text = self.read_input("You:")
                except (EOFError, KeyboardInterrupt, click.Abort):
                    self.state = LoopState.TERMINATED
                    break
                reply = self.step(text)
                if reply is not None:
                    self.echo(f"AI: {reply}")
        finally:
            self.state = LoopState.TERMINATED
            if self.on_exit is not None:
                self.on_exit(self.session)

        logger.info("Chat session %s ended with %d messages", self.session.id, self.session.message_count)
        return self.session


class SessionStore:
    """Saves chat sessions as ``<id>.json`` files in one directory."""

    def __init__(self, base_path: Path, default_model: str = DEFAULT_MODEL):
        self.base_path = Path(base_path)
        self.default_model = default_model

    def _path_for(self, session_id: str) -> Path:
        if not _SESSION_ID_RE.match(session_id):
            raise DevpilotError(
                "SESSION_ID_INVALID",
                f"Invalid session id: {session_id!r}",
                {"session_id": session_id},
            )
        return self.base_path / f"{session_id}.json"

    def exists(self, session_id: str) -> bool:
        return self._path_for(session_id).exists()

    def load(self, session_id: str) -> Session:
        """Return the stored session, or a new empty one under that id."""
        path = self._path_for(session_id)
        if not path.exists():
            logger.info("No stored session %s, starting a new one", session_id)
            return Session(id=session_id, model=self.default_model)
        return session_from_json(path.read_text(encoding="utf-8"))

    def save(self, session: Session) -> Path:
        path = self._path_for(session.id)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(session_to_json(session), encoding="utf-8")
        logger.debug("Saved session %s to %s", session.id, path)
        return path

    def list(self) -> list[Session]:
        """Return stored sessions, most recently updated first."""
        if not self.base_path.is_dir():
            return []

        sessions = []
        for path in self.base_path.glob("*.json"):
            try:
                sessions.append(session_from_json(path.read_text(encoding="utf-8")))
            except (json.JSONDecodeError, KeyError, TypeError, ValueError, OSError) as e:
                logger.warning("Skipping unreadable session file %s: %s", path, e)
        sessions.sort(key=lambda s: s.updated, reverse=True)
        return sessions
