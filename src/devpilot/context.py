"""Per-invocation state handed to every command through ``click.Context.obj``."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from .backends import get_provider
from .config import ConfigStore, get_sessions_path
from .core import DEFAULT_MODEL
from .provider import AIProvider
from .session import SessionStore


@dataclass
class AppContext:
    config: ConfigStore
    provider: Optional[AIProvider] = None
    sessions: Optional[SessionStore] = None
    cwd: Path = field(default_factory=Path.cwd)

    @classmethod
    def from_config(cls, config: ConfigStore, cwd: Optional[Path] = None) -> "AppContext":
        app = cls(config=config, cwd=cwd or Path.cwd())
        app.sessions = SessionStore(get_sessions_path(config.path), default_model=app.default_model)
        return app

    @property
    def default_model(self) -> str:
        return self.config.get("ai.model") or DEFAULT_MODEL

    def get_provider(self) -> AIProvider:
        """Return the configured provider, creating it on first use."""
        if self.provider is None:
            self.provider = get_provider(self.config.get("ai.provider"))
        return self.provider
