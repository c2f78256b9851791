"""History command for viewing past reconcile runs.

This module provides the `pipctl history` command for viewing
the history of reconcile runs.
"""

import json
from datetime import datetime
from typing import Annotated

import typer
from rich.table import Table

from pipctl.cli.display import STATUS_STYLES
from pipctl.core.state import StateManager
from pipctl.models.history import HistoryEntry, HistoryItem
from pipctl.utils.formatting import console, print_info

app = typer.Typer(
    name="history",
    help="View history of reconcile runs.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def history(
    ctx: typer.Context,
    limit: Annotated[
        int,
        typer.Option(
            "--limit",
            "-n",
            help="Maximum number of entries to show.",
        ),
    ] = 20,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show history of reconcile runs.

    Each entry lists the packages a run changed or failed on.

    Examples:
        pipctl history              # Show last 20 entries
        pipctl history -n 50        # Show last 50 entries
        pipctl history --json       # JSON output for scripting
    """
    if ctx.invoked_subcommand is not None:
        return

    entries = StateManager().get_history(limit=limit)

    if not entries:
        print_info("No history entries found.")
        return

    if json_output:
        console.print_json(json.dumps([entry.to_dict() for entry in entries]))
    else:
        _print_table(entries)


def _format_item(item: HistoryItem) -> str:
    label, style = STATUS_STYLES[item.status]
    version = f" {item.version}" if item.version else ""
    return f"{item.name}{version} [{style}]({label})[/{style}]"


def _print_table(entries: list[HistoryEntry]) -> None:
    """Print history as Rich table."""
    table = Table(title="Reconcile History")
    table.add_column("ID", style="dim")
    table.add_column("Timestamp", style="info")
    table.add_column("Run", style="header")
    table.add_column("Packages")
    table.add_column("OK?")

    for entry in entries:
        pkg_count = len(entry.items)
        packages = ", ".join(_format_item(item) for item in entry.items[:3])
        if pkg_count > 3:
            packages += f" (+{pkg_count - 3} more)"

        table.add_row(
            entry.id[:8],
            _format_timestamp(entry.timestamp),
            entry.action_type.value,
            packages,
            "[success]Yes[/]" if entry.success else "[error]No[/]",
        )

    console.print(table)


def _format_timestamp(iso_timestamp: str) -> str:
    """Format ISO timestamp as YYYY-MM-DD HH:MM."""
    dt = datetime.fromisoformat(iso_timestamp.replace("Z", "+00:00"))
    return dt.strftime("%Y-%m-%d %H:%M")
