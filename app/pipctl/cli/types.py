"""Shared types and helpers for CLI commands.

This module provides common enums and helper functions used across
multiple CLI command modules to avoid code duplication.
"""

from enum import Enum
from pathlib import Path

import typer

from pipctl.cli.display import format_action
from pipctl.core.config import AppConfig, ConfigError, load_config_or_default
from pipctl.core.reconciler import ConfirmFn, always_confirm
from pipctl.models.action import PlannedAction
from pipctl.utils.formatting import console, print_error


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def load_app_config(path: Path | None = None) -> AppConfig:
    """Load the configuration or exit with an error message.

    Args:
        path: Config file path, or None for the default location.

    Returns:
        The loaded configuration (defaults if the file does not exist).

    Raises:
        typer.Exit: If the config file exists but is invalid.
    """
    try:
        return load_config_or_default(path)
    except ConfigError as e:
        print_error(f"Failed to load config: {e}")
        raise typer.Exit(code=1) from e


def _prompt_action(action: PlannedAction) -> bool:
    """Ask the user to confirm a single planned action."""
    console.print(format_action(action))
    return typer.confirm("Proceed?", default=False)


def get_confirm(yes: bool) -> ConfirmFn:
    """Return the confirmation capability for a command.

    Args:
        yes: Skip prompts and approve every action.

    Returns:
        always_confirm with --yes, an interactive prompt otherwise.
    """
    return always_confirm if yes else _prompt_action
