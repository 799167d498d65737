"""Config commands -- view and modify the user configuration file.

Provides the ``metacache config`` sub-command group. Settings are stored
as JSON in the metacache config directory and sit below environment
variables and CLI flags in the precedence chain (see
:func:`~metacache.config.resolve_config`).
"""

from __future__ import annotations

import typer

from metacache.output import error, format_response, info, print_data, success


config_app = typer.Typer(no_args_is_help=True)


@config_app.command("show")
def config_show(ctx: typer.Context) -> None:
    """Show the effective configuration after all overrides are applied.

    Example::

        metacache config show
        metacache --max-age 60 config show
    """
    from metacache.commands import settings_from_context
    from metacache.config import config_path
    from metacache.exceptions import MetacacheError

    try:
        settings = settings_from_context(ctx)
    except MetacacheError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    info(f"Config file: {config_path()}")
    format_response(settings.model_dump(mode="json"))


@config_app.command("set")
def config_set(
    key: str = typer.Argument(help="Config key (e.g. 'max_age_seconds')."),
    value: str = typer.Argument(help="Value to set."),
) -> None:
    """Set a value in the user config file.

    The value is validated against :class:`~metacache.models.Settings`
    before anything is written, so Pydantic handles the coercion of
    numbers and paths.

    Raises:
        typer.Exit: With code 2 if the key is unknown or the value invalid.

    Example::

        metacache config set max_age_seconds 600
        metacache config set cache_dir ~/.cache/github-meta
    """
    from metacache.config import load_user_config, save_user_config
    from metacache.exceptions import InvalidUsageError, MetacacheError
    from metacache.models import Settings

    try:
        if key not in Settings.model_fields:
            raise InvalidUsageError(f"Invalid config key: {key}")
        data = load_user_config()
        data[key] = value
        save_user_config(data)
    except MetacacheError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f"Set {key} = {value}")


@config_app.command("unset")
def config_unset(
    key: str = typer.Argument(help="Config key to remove."),
) -> None:
    """Remove a key from the user config file so its default applies again."""
    from metacache.config import load_user_config, save_user_config
    from metacache.exceptions import MetacacheError

    try:
        data = load_user_config()
        if key not in data:
            info(f"{key} is not set")
            return
        del data[key]
        save_user_config(data)
    except MetacacheError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    success(f"Unset {key}")


@config_app.command("path")
def config_path_command() -> None:
    """Print the location of the user config file."""
    from metacache.config import config_path

    print_data(str(config_path()))
