"""CLI commands for pipctl.

This package contains all subcommand implementations.
"""

from pipctl.cli.commands import config, history, reconcile, report

__all__ = ["config", "history", "reconcile", "report"]
