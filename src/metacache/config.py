"""Configuration management with XDG paths, atomic writes, and precedence resolution.

This module handles all persistent configuration for metacache:

* **Directory layout** -- XDG Base Directory compliant on Linux/BSD,
  ``~/.metacache/`` on macOS and Windows. See :func:`get_config_dir` and
  :func:`get_data_dir`. The *cache* directory itself defaults to
  ``~/.github-meta-cache`` and is part of :class:`~metacache.models.Settings`.
* **User config** -- A single JSON file deserialised into
  :class:`~metacache.models.Settings`. See :func:`load_user_config` and
  :func:`save_user_config`.
* **Precedence resolution** -- :func:`resolve_config` merges CLI flags,
  environment variables, the user config file, and defaults.
* **Token lookup** -- :func:`resolve_token` reads the bearer credential from
  the environment variable named by ``Settings.token_env``.

All file writes go through :func:`atomic_write` (temp file then rename), which
the cache stores in :mod:`metacache.store` share.
"""

from __future__ import annotations

import json
import os
import platform
import tempfile
from pathlib import Path
from typing import IO, Any, Optional, Union

from pydantic import ValidationError

from metacache.exceptions import ConfigError
from metacache.models import Settings

_APP_NAME = "metacache"
_CONFIG_FILENAME = "config.json"

ENV_CACHE_DIR = "METACACHE_DIR"
ENV_MAX_AGE = "METACACHE_MAX_AGE"
ENV_TIMEOUT = "METACACHE_TIMEOUT"


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform supports XDG Base Directory spec (Linux/FreeBSD)."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _fallback_base_dir() -> Path:
    """Fallback base directory for non-XDG platforms (macOS, Windows)."""
    return Path.home() / f".{_APP_NAME}"


def _xdg_base(env_var: str, default_segments: tuple[str, ...]) -> Path:
    """Resolve an XDG base directory from an env var with fallback segments under $HOME."""
    env_value = os.environ.get(env_var, "")
    if env_value:
        return Path(env_value)
    base = Path.home()
    for seg in default_segments:
        base = base / seg
    return base


def get_config_dir() -> Path:
    """Return the configuration directory, creating it if necessary.

    On Linux/BSD: ``$XDG_CONFIG_HOME/metacache/`` (default ``~/.config/metacache/``).
    On macOS/Windows: ``~/.metacache/``.

    Returns:
        Absolute path to the configuration directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_CONFIG_HOME", (".config",))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir()
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/metacache/`` (default ``~/.local/share/metacache/``).
    On macOS/Windows: ``~/.metacache/logs/``.

    Returns:
        Absolute path to the data directory (guaranteed to exist).
    """
    if _is_xdg_platform():
        base = _xdg_base("XDG_DATA_HOME", (".local", "share"))
        path = base / _APP_NAME
    else:
        path = _fallback_base_dir() / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path


# --- Atomic file writes ---


def atomic_write(path: Path, data: Union[str, bytes]) -> None:
    """Write data to file atomically using temp file + rename.

    The temporary file is created in the same directory as *path* so that
    ``os.replace`` is guaranteed to be an atomic rename on POSIX systems.
    ``str`` data is written as UTF-8 text, ``bytes`` verbatim. On success
    the temp file is renamed over *path*; on any failure the temp file is
    cleaned up and the original file is left untouched.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd: Optional[IO[Any]] = None
    tmp_path: Optional[str] = None
    try:
        if isinstance(data, bytes):
            fd = tempfile.NamedTemporaryFile(
                mode="wb",
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
            )
        else:
            fd = tempfile.NamedTemporaryFile(
                mode="w",
                dir=path.parent,
                prefix=f".{path.name}.",
                suffix=".tmp",
                delete=False,
                encoding="utf-8",
            )
        tmp_path = fd.name
        fd.write(data)
        fd.flush()
        os.fsync(fd.fileno())
        fd.close()
        fd = None  # prevent double-close in finally
        os.replace(tmp_path, path)
    except BaseException:
        # Clean up the temp file on any error (including KeyboardInterrupt).
        if fd is not None:
            fd.close()
        if tmp_path is not None:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
        raise


# --- User config ---


def config_path() -> Path:
    """Path to the user config file."""
    return get_config_dir() / _CONFIG_FILENAME


def load_user_config() -> dict[str, Any]:
    """Load the raw user configuration from the XDG config directory.

    The raw dict is returned (rather than a :class:`Settings`) so that
    :func:`resolve_config` can tell which keys the user actually set.

    Returns:
        The parsed JSON object, or an empty dict if the file does not exist.

    Raises:
        ConfigError: If the file exists but is not a JSON object.
    """
    path = config_path()
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, ValueError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config at {path}: expected a JSON object")
    return data


def save_user_config(data: dict[str, Any]) -> None:
    """Validate and persist the user configuration atomically.

    Args:
        data: Raw config mapping; only the keys present are written.

    Raises:
        ConfigError: If *data* fails :class:`Settings` validation.
    """
    _validate(data, source=str(config_path()))
    _atomic_write_json(config_path(), data)


def _atomic_write_json(path: Path, data: dict[str, Any]) -> None:
    atomic_write(path, json.dumps(data, indent=2, default=str) + "\n")


def _validate(data: dict[str, Any], source: str) -> Settings:
    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'config'}: {err['msg']}"
            for err in exc.errors()
        )
        raise ConfigError(f"Invalid configuration ({source}): {details}") from exc


# --- Precedence resolution ---


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    cache_dir = os.environ.get(ENV_CACHE_DIR)
    if cache_dir:
        overrides["cache_dir"] = Path(cache_dir)
    max_age = os.environ.get(ENV_MAX_AGE)
    if max_age:
        overrides["max_age_seconds"] = max_age
    timeout = os.environ.get(ENV_TIMEOUT)
    if timeout:
        overrides["timeout"] = timeout
    return overrides


def resolve_config(
    cli_cache_dir: Optional[Path] = None,
    cli_max_age: Optional[int] = None,
    cli_timeout: Optional[float] = None,
) -> Settings:
    """Resolve settings with the full precedence chain.

    Precedence (high to low):
        1. CLI flags (``cli_cache_dir``, ``cli_max_age``, ``cli_timeout``)
        2. Environment variables (``METACACHE_DIR``, ``METACACHE_MAX_AGE``,
           ``METACACHE_TIMEOUT``)
        3. User config (``~/.config/metacache/config.json``)
        4. Defaults

    Returns:
        The validated effective :class:`Settings`.

    Raises:
        ConfigError: If any layer supplies an invalid value.
    """
    # 4 + 3. Defaults are filled in by the model; layer the user file on top.
    merged = dict(load_user_config())

    # 2. Environment variables
    merged.update(_env_overrides())

    # 1. CLI flags (highest precedence)
    if cli_cache_dir is not None:
        merged["cache_dir"] = cli_cache_dir
    if cli_max_age is not None:
        merged["max_age_seconds"] = cli_max_age
    if cli_timeout is not None:
        merged["timeout"] = cli_timeout

    return _validate(merged, source="resolved settings")


# --- Credential resolution ---


def resolve_token(settings: Settings) -> Optional[str]:
    """Return the bearer token for the HTTP fetch path, if one is set.

    An empty variable counts as unset, matching ``[[ -n "$GITHUB_TOKEN" ]]``.

    Args:
        settings: Effective settings; ``token_env`` names the variable.

    Returns:
        The token string, or ``None`` when the variable is unset or empty.
    """
    value = os.environ.get(settings.token_env, "")
    return value or None
