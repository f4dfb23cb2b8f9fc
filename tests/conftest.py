"""Shared test fixtures for devpilot."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from devpilot.backends.mock import MockProvider
from devpilot.config import ConfigStore
from devpilot.context import AppContext
from devpilot.session import SessionStore


class RecordingProvider(MockProvider):
    """Mock provider that records calls and can be told to answer or fail."""

    name = "recording"

    def __init__(self):
        self.calls = []
        self.responses = {}
        self.failures = {}

    def call(self, operation, params):
        self.calls.append((operation, params))
        if operation in self.failures:
            raise self.failures[operation]
        if operation in self.responses:
            return self.responses[operation]
        return super().call(operation, params)


@pytest.fixture
def tmp_config(tmp_path) -> ConfigStore:
    """A config store backed by a file in tmp_path (not yet written)."""
    return ConfigStore(tmp_path / "config" / "config.json")


@pytest.fixture
def mock_provider() -> MockProvider:
    return MockProvider()


@pytest.fixture
def recording_provider() -> RecordingProvider:
    return RecordingProvider()


@pytest.fixture
def workdir(tmp_path) -> Path:
    path = tmp_path / "project"
    path.mkdir()
    return path


@pytest.fixture
def source_file(workdir) -> Path:
    """A small JavaScript source file inside the working directory."""
    path = workdir / "src" / "user.js"
    path.parent.mkdir(parents=True)
    path.write_text("export function getUser(id) {\n  return db.find(id);\n}\n", encoding="utf-8")
    return path


@pytest.fixture
def app(tmp_config, recording_provider, workdir, tmp_path) -> AppContext:
    return AppContext(
        config=tmp_config,
        provider=recording_provider,
        sessions=SessionStore(tmp_path / "sessions"),
        cwd=workdir,
    )


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()
