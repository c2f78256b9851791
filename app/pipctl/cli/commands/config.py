"""Config commands.

Provides commands to show and create the configuration file and to
mark the package index as trusted.
"""

from pathlib import Path
from typing import Annotated

import tomli_w
import typer

from pipctl.cli.types import load_app_config
from pipctl.core.config import AppConfig, ConfigError, config_to_dict, save_config
from pipctl.core.paths import get_config_path
from pipctl.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show and edit the pipctl configuration.",
    invoke_without_command=True,
    no_args_is_help=True,
)

ConfigPathOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to the config file.",
    ),
]


@app.command()
def show(config_path: ConfigPathOption = None) -> None:
    """Print the effective configuration as TOML."""
    config = load_app_config(config_path)
    path = config_path or get_config_path()
    source = str(path) if path.exists() else "defaults (no config file)"
    console.print(f"[dim]# {source}[/]")
    console.print(tomli_w.dumps(config_to_dict(config)), markup=False, highlight=False)


@app.command()
def init(
    config_path: ConfigPathOption = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing config file.",
        ),
    ] = False,
) -> None:
    """Write a config file with default settings."""
    path = config_path or get_config_path()
    if path.exists() and not force:
        print_error(f"Config already exists: {path}")
        print_info("Use --force to overwrite it.")
        raise typer.Exit(code=1)

    try:
        saved = save_config(AppConfig(), path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_success(f"Config written to {saved}")


@app.command()
def trust(config_path: ConfigPathOption = None) -> None:
    """Mark the configured package index as trusted."""
    config = load_app_config(config_path)
    if config.index.trusted:
        print_info(f"Package index {config.index.name} is already trusted.")
        return

    updated = config.model_copy(
        update={"index": config.index.model_copy(update={"trusted": True})}
    )
    try:
        saved = save_config(updated, config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_success(f"Package index {config.index.name} ({config.index.url}) is now trusted.")
    print_info(f"Saved to {saved}")
