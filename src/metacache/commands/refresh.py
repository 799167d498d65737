"""Refresh command -- reuse, refetch, or fall back to the cached payload.

``metacache refresh`` (also the default when no sub-command is given) is
meant to be dropped into a container build or CI step. It exits ``0``
whenever usable data is on disk afterwards, even if that data is stale,
and ``1`` only when nothing could be fetched and nothing was cached before.
"""

from __future__ import annotations

import typer

from metacache.output import error


def refresh_command(
    ctx: typer.Context,
    force: bool = typer.Option(
        False, "--force", "-f", help="Fetch even if the cache is still fresh."
    ),
) -> None:
    """Refresh the cached GitHub API meta data if it has expired.

    Tries the authenticated ``gh`` CLI first, then a direct HTTP request
    (using ``GITHUB_TOKEN`` when set), and finally falls back to the
    existing cache file.

    Raises:
        typer.Exit: With the run's exit code (0 on fresh, fetched, or stale
            data; 1 when nothing is available; 2 on invalid configuration).

    Example::

        metacache refresh
        metacache --max-age 600 refresh --force
    """
    from metacache.commands import settings_from_context
    from metacache.config import resolve_token
    from metacache.exceptions import MetacacheError
    from metacache.refresh import CacheRefresher

    try:
        settings = settings_from_context(ctx)
        refresher = CacheRefresher.from_settings(settings, token=resolve_token(settings))
        code = refresher.run(force=force)
    except MetacacheError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    raise typer.Exit(code=code)
