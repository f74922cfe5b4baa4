"""Configuration commands.

Show the effective configuration, print the config file location, and
write a default config file.
"""

from pathlib import Path
from typing import Annotated

import tomli_w
import typer

from dirwarden.cli.types import get_config_file, get_settings
from dirwarden.core.config import ConfigError, ServerConfig, config_to_dict, save_config
from dirwarden.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show and initialize the configuration.",
    no_args_is_help=True,
)


@app.command()
def show(ctx: typer.Context) -> None:
    """Print the effective configuration as TOML."""
    config_file = get_config_file(ctx)
    settings = get_settings(ctx)

    source = str(config_file) if config_file.exists() else "defaults (no config file)"
    print_info(f"# Source: {source}")
    console.print(tomli_w.dumps(config_to_dict(settings)), markup=False, highlight=False)


@app.command()
def path(ctx: typer.Context) -> None:
    """Print the config file location."""
    console.print(str(get_config_file(ctx)), markup=False, highlight=False)


@app.command()
def init(
    ctx: typer.Context,
    root: Annotated[
        Path | None,
        typer.Option("--root", "-r", help="Root directory to manage."),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with default retention and upload settings."""
    config_file = get_config_file(ctx)
    if config_file.exists() and not force:
        print_error(f"Config already exists: {config_file} (use --force to overwrite)")
        raise typer.Exit(code=1)

    config = ServerConfig().with_root(root.resolve() if root is not None else None)
    try:
        saved = save_config(config, config_file)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Config written to {saved}")
