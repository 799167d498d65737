"""Built-in CLI commands for metacache.

Each sub-module defines either a Typer sub-application or a single command
function, which :mod:`metacache.app` registers on the root application.

Sub-modules:
    refresh: ``metacache refresh`` -- reuse, refetch, or fall back to the cache.
    cache: ``metacache status``, ``show`` and ``clear``.
    config: ``metacache config`` sub-group for the user config file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from metacache.models import Settings


def settings_from_context(ctx: typer.Context) -> Settings:
    """Resolve effective settings from the root callback's options.

    Raises:
        ConfigError: If the config file, environment, or flags hold an
            invalid value.
    """
    from metacache.config import resolve_config

    obj = ctx.obj or {}
    cache_dir: Optional[Path] = obj.get("cache_dir")
    return resolve_config(
        cli_cache_dir=cache_dir,
        cli_max_age=obj.get("max_age"),
        cli_timeout=obj.get("timeout"),
    )
