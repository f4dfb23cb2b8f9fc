"""Configuration file handling and platform-aware path resolution."""

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Optional, Union

from .errors import ConfigError

logger = logging.getLogger(__name__)


def get_config_dir() -> Path:
    """Return the directory holding devpilot's config and sessions."""
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "devpilot"
    elif sys.platform == "win32":
        return Path(os.environ.get("APPDATA", "")) / "devpilot"
    else:  # Linux
        return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "devpilot"


def get_config_path() -> Path:
    """Return the path to config.json."""
    env = os.environ.get("DEVPILOT_CONFIG_PATH")
    if env:
        return Path(env)

    return get_config_dir() / "config.json"


def get_sessions_path(config_path: Optional[Path] = None) -> Path:
    """Return the directory where chat sessions are saved."""
    env = os.environ.get("DEVPILOT_SESSIONS_PATH")
    if env:
        return Path(env)

    if config_path is not None:
        return Path(config_path).parent / "sessions"
    return get_config_dir() / "sessions"


class ConfigStore:
    """JSON-backed settings addressed by dotted paths (``ai.model``).

    Loaded once at startup and handed to the commands that need it. Changes
    stay in memory until ``save()`` is called.
    """

    def __init__(self, path: Union[str, Path], data: Optional[dict] = None):
        self.path = Path(path)
        self._data: dict = data if data is not None else {}

    @classmethod
    def load(cls, path: Union[str, Path, None] = None) -> "ConfigStore":
        path = Path(path) if path else get_config_path()
        if not path.exists():
            logger.debug("No config at %s, using defaults", path)
            return cls(path)

        try:
            data = json.loads(path.read_text(encoding="utf-8") or "{}")
        except (json.JSONDecodeError, OSError) as e:
            raise ConfigError(f"Could not read config file {path}: {e}", {"path": str(path)}) from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a JSON object", {"path": str(path)})
        logger.debug("Loaded config from %s", path)
        return cls(path, data)

    def get(self, key: str = "", default: Any = None) -> Any:
        if not key:
            return self._data
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any) -> None:
        parts = key.split(".")
        if not all(parts):
            raise ConfigError(f"Invalid config key: {key!r}", {"key": key})

        node = self._data
        for i, part in enumerate(parts[:-1]):
            child = node.setdefault(part, {})
            if not isinstance(child, dict):
                prefix = ".".join(parts[: i + 1])
                raise ConfigError(
                    f"Cannot set {key}: {prefix} is not a section",
                    {"key": key, "value": value},
                )
            node = child
        node[parts[-1]] = value

    def save(self) -> Path:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        logger.debug("Saved config to %s", self.path)
        return self.path
