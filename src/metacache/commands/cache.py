"""Cache inspection commands -- ``status``, ``show`` and ``clear``.

These never touch the network. They resolve the same settings as
``refresh`` so that ``--cache-dir`` and ``METACACHE_DIR`` point them at
the same files.
"""

from __future__ import annotations

import typer

from metacache.output import error, format_response, info, print_table, success, suggest


def status_command(ctx: typer.Context) -> None:
    """Show where the cache lives, how old it is, and whether it is fresh.

    Example::

        metacache status
        metacache --json status
    """
    from metacache.commands import settings_from_context
    from metacache.exceptions import MetacacheError
    from metacache.refresh import CacheRefresher

    try:
        settings = settings_from_context(ctx)
    except MetacacheError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    status = CacheRefresher.from_settings(settings, fetchers=[]).status()

    def _fmt(value: object) -> str:
        return "-" if value is None else str(value)

    rows = [
        ["cache_dir", status.cache_dir],
        ["payload", "present" if status.payload_exists else "missing"],
        ["payload_bytes", _fmt(status.payload_bytes)],
        ["timestamp", _fmt(status.timestamp)],
        ["age_seconds", _fmt(status.age_seconds)],
        ["max_age_seconds", str(status.max_age_seconds)],
        ["valid", "yes" if status.valid else "no"],
    ]
    print_table(["field", "value"], rows, title="GitHub API meta cache")


def show_command(ctx: typer.Context) -> None:
    """Print the cached payload to stdout without refreshing it.

    Raises:
        typer.Exit: With code 4 if nothing is cached.
    """
    from metacache.commands import settings_from_context
    from metacache.exceptions import CacheMissError, MetacacheError
    from metacache.store import FilePayloadStore

    try:
        settings = settings_from_context(ctx)
        payload = FilePayloadStore(settings.payload_path).read()
        if payload is None:
            raise CacheMissError(f"No cached payload at {settings.payload_path}")
    except MetacacheError as exc:
        error(str(exc))
        if isinstance(exc, CacheMissError):
            suggest("Run: metacache refresh")
        raise typer.Exit(code=exc.exit_code) from None

    format_response(payload.decode("utf-8", errors="replace"))


def clear_command(ctx: typer.Context) -> None:
    """Delete the cached payload and timestamp.

    The next ``metacache refresh`` will always fetch.
    """
    from metacache.commands import settings_from_context
    from metacache.exceptions import MetacacheError
    from metacache.store import FilePayloadStore, FileTimestampStore

    try:
        settings = settings_from_context(ctx)
    except MetacacheError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    removed = [
        store.location
        for store in (
            FilePayloadStore(settings.payload_path),
            FileTimestampStore(settings.timestamp_path),
        )
        if store.clear()
    ]
    if removed:
        success(f"Removed {len(removed)} cache file(s) from {settings.cache_dir}")
    else:
        info(f"Nothing to remove in {settings.cache_dir}")
