"""Shared test fixtures for metacache.

Provides in-memory stores and scripted fetchers for exercising the refresh
controller without touching the network, an isolated config environment,
and output-state management. These fixtures are automatically discovered
by pytest and available to all test modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Optional

import pytest

from metacache.exceptions import FetchError
from metacache.fetchers import Fetcher
from metacache.output import OutputFormat, OutputManager, reset_output, set_output
from metacache.store import PayloadStore, TimestampStore


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time; a manager created inside a CliRunner invocation must
    not leak into the next test.
    """
    yield
    reset_output()


@pytest.fixture
def plain_output() -> OutputManager:
    """Install a colourless PLAIN OutputManager bound to the current (captured) streams."""
    output = OutputManager(format=OutputFormat.PLAIN, no_color=True)
    set_output(output)
    return output


# ---------------------------------------------------------------------------
# In-memory stores
# ---------------------------------------------------------------------------


class MemoryPayloadStore(PayloadStore):
    def __init__(self, payload: Optional[bytes] = None, fail_writes: bool = False) -> None:
        self.payload = payload
        self.fail_writes = fail_writes
        self.writes = 0

    @property
    def location(self) -> str:
        return "memory://payload"

    def exists(self) -> bool:
        return self.payload is not None

    def read(self) -> Optional[bytes]:
        return self.payload

    def write(self, payload: bytes) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        self.writes += 1
        self.payload = payload

    def clear(self) -> bool:
        existed = self.payload is not None
        self.payload = None
        return existed


class MemoryTimestampStore(TimestampStore):
    def __init__(self, timestamp: Optional[int] = None) -> None:
        self.timestamp = timestamp
        self.writes = 0

    @property
    def location(self) -> str:
        return "memory://timestamp"

    def exists(self) -> bool:
        return self.timestamp is not None

    def read(self) -> Optional[int]:
        return self.timestamp

    def write(self, timestamp: int) -> None:
        self.writes += 1
        self.timestamp = timestamp

    def clear(self) -> bool:
        existed = self.timestamp is not None
        self.timestamp = None
        return existed


@pytest.fixture
def payload_store() -> MemoryPayloadStore:
    return MemoryPayloadStore()


@pytest.fixture
def timestamp_store() -> MemoryTimestampStore:
    return MemoryTimestampStore()


# ---------------------------------------------------------------------------
# Scripted fetchers
# ---------------------------------------------------------------------------


class ScriptedFetcher(Fetcher):
    """Fetcher whose availability and result are fixed up front.

    Records how often :meth:`is_available` and :meth:`fetch` were called.
    """

    def __init__(
        self,
        name: str,
        payload: Optional[bytes] = None,
        error: Optional[FetchError] = None,
        available: bool = True,
    ) -> None:
        self._name = name
        self._payload = payload
        self._error = error
        self._available = available
        self.availability_checks = 0
        self.fetch_calls = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return f"{self._name} fetcher"

    def is_available(self) -> bool:
        self.availability_checks += 1
        return self._available

    def unavailable_reason(self) -> str:
        return f"{self._name} not authenticated"

    def fetch(self) -> bytes:
        self.fetch_calls += 1
        if self._error is not None:
            raise self._error
        assert self._payload is not None
        return self._payload


@pytest.fixture
def make_fetcher() -> Callable[..., ScriptedFetcher]:
    """Factory for :class:`ScriptedFetcher` instances."""

    def _make(
        name: str = "fake",
        payload: Optional[bytes] = None,
        error: Optional[FetchError] = None,
        available: bool = True,
    ) -> ScriptedFetcher:
        return ScriptedFetcher(name, payload=payload, error=error, available=available)

    return _make


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration and the default cache directory to tmp_path.

    Points HOME and the XDG variables at subdirectories of tmp_path, and
    clears every METACACHE_* variable and GITHUB_TOKEN so that the real
    user environment never leaks into tests.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("metacache.config._is_xdg_platform", lambda: True)

    for var in [
        "METACACHE_DIR",
        "METACACHE_MAX_AGE",
        "METACACHE_TIMEOUT",
        "GITHUB_TOKEN",
    ]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path
