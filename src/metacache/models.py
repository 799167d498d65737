"""Canonical Pydantic models shared across all metacache modules.

This is the single source of truth for data shapes in the project:

**Configuration** -- :class:`Settings`, serialised as JSON in the user's
config directory and merged with environment variables and CLI flags by
:func:`~metacache.config.resolve_config`.

**Run results** -- :class:`RefreshOutcome`, the four possible endings of a
refresh run, and :class:`CacheStatus`, a snapshot of the cache directory
used by ``metacache status``.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from metacache.exit_codes import EXIT_GENERIC_FAILURE, EXIT_SUCCESS


DEFAULT_CACHE_DIRNAME = ".github-meta-cache"
DEFAULT_RATE_LIMIT_MARKER = "API rate limit exceeded"


def _default_cache_dir() -> Path:
    return Path.home() / DEFAULT_CACHE_DIRNAME


# --- Settings ---


class Settings(BaseModel):
    """Effective configuration for a refresh run.

    Every field has a default so that ``metacache refresh`` works with no
    config file at all. Unknown keys in the config file are rejected so
    that typos surface as a :class:`~metacache.exceptions.ConfigError`
    instead of being silently ignored.

    Example::

        Settings(cache_dir=Path("/tmp/meta"), max_age_seconds=600)
    """

    model_config = ConfigDict(extra="forbid")

    cache_dir: Path = Field(
        default_factory=_default_cache_dir,
        description="Directory holding the cached payload and timestamp files",
    )
    max_age_seconds: int = Field(
        default=3600, ge=0, description="Cache is fresh while age <= this value"
    )
    url: str = Field(
        default="https://api.github.com/meta",
        description="Endpoint fetched by the direct HTTP path",
    )
    gh_endpoint: str = Field(
        default="meta", description="Endpoint passed to 'gh api'"
    )
    gh_command: str = Field(
        default="gh", description="Name or path of the GitHub CLI binary"
    )
    token_env: str = Field(
        default="GITHUB_TOKEN",
        description="Environment variable holding the bearer token for the HTTP path",
    )
    timeout: float = Field(
        default=30.0, gt=0, description="Timeout in seconds for each fetch attempt"
    )
    rate_limit_marker: str = Field(
        default=DEFAULT_RATE_LIMIT_MARKER,
        description="Substring that marks a rate-limited response body",
    )
    payload_filename: str = "meta.json"
    timestamp_filename: str = "meta-timestamp.txt"

    @field_validator("cache_dir")
    @classmethod
    def _expand_cache_dir(cls, value: Path) -> Path:
        return value.expanduser()

    @property
    def payload_path(self) -> Path:
        return self.cache_dir / self.payload_filename

    @property
    def timestamp_path(self) -> Path:
        return self.cache_dir / self.timestamp_filename


# --- Run results ---


class RefreshOutcome(str, enum.Enum):
    """How a refresh run ended.

    Only ``FAILED`` maps to a non-zero exit code: serving stale data is
    preferred over breaking the build that invoked us.
    """

    FRESH = "fresh"
    FETCHED = "fetched"
    STALE = "stale"
    FAILED = "failed"

    @property
    def exit_code(self) -> int:
        if self is RefreshOutcome.FAILED:
            return EXIT_GENERIC_FAILURE
        return EXIT_SUCCESS


class CacheStatus(BaseModel):
    """Point-in-time view of the cache directory."""

    cache_dir: str
    payload_exists: bool
    timestamp_exists: bool
    payload_bytes: Optional[int] = None
    timestamp: Optional[int] = None
    age_seconds: Optional[int] = None
    max_age_seconds: int
    valid: bool = False
