"""Typer application and CLI entry point for metacache.

This module wires together the top-level Typer application and registers
the built-in commands (``refresh``, ``status``, ``show``, ``clear``,
``config``). Running ``metacache`` with no sub-command performs a refresh,
which is what container build scripts call.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. It installs a SIGINT handler and invokes the Typer app.
Unhandled exceptions are written to a crash log under the data directory.

See Also:
    :mod:`metacache.config`: Settings resolution.
    :mod:`metacache.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import typer

from metacache import __version__
from metacache.commands.cache import clear_command, show_command, status_command
from metacache.commands.config import config_app
from metacache.commands.refresh import refresh_command
from metacache.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED


app = typer.Typer(
    name="metacache",
    help="Cache the GitHub API meta endpoint on disk to avoid rate limits.",
    add_completion=False,
    invoke_without_command=True,
    rich_markup_mode="rich",
)

app.command("refresh")(refresh_command)
app.command("status")(status_command)
app.command("show")(show_command)
app.command("clear")(clear_command)
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"metacache {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    cache_dir: Optional[Path] = typer.Option(
        None, "--cache-dir", "-d", help="Cache directory (default: ~/.github-meta-cache)."
    ),
    max_age: Optional[int] = typer.Option(
        None, "--max-age", min=0, help="Maximum cache age in seconds (default: 3600)."
    ),
    timeout: Optional[float] = typer.Option(
        None, "--timeout", help="Timeout in seconds for each fetch attempt (default: 30)."
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~metacache.output.OutputManager` from the
    output flags and stores the settings overrides in ``ctx.obj`` for
    :func:`~metacache.commands.settings_from_context`. When no sub-command
    is given, runs ``refresh``.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        cache_dir: Cache directory override (highest precedence).
        max_age: Max cache age override in seconds.
        timeout: Fetch timeout override in seconds.
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output.
    """
    from metacache.output import OutputFormat, OutputManager, set_output

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN

    set_output(
        OutputManager(
            format=fmt,
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
        )
    )

    ctx.ensure_object(dict)
    ctx.obj["cache_dir"] = cache_dir
    ctx.obj["max_age"] = max_age
    ctx.obj["timeout"] = timeout

    if ctx.invoked_subcommand is None:
        ctx.invoke(refresh_command, ctx=ctx, force=False)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path.

    Args:
        exc: The unhandled exception to log.

    Returns:
        Absolute path to the written crash log file.
    """
    from metacache.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``metacache`` console script.

    Unhandled :class:`~metacache.exceptions.MetacacheError` instances
    cause a clean exit with the error's ``exit_code``. All other exceptions
    produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        from metacache.exceptions import MetacacheError
        from metacache.output import error

        if isinstance(exc, MetacacheError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
