"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from pipctl.core.theme import get_theme

if TYPE_CHECKING:
    from pipctl.models.result import ComparisonRecord


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def create_comparison_table(title: str = "Package Status") -> Table:
    """Create a pre-configured table for comparison records.

    Args:
        title: Table title.

    Returns:
        Rich Table configured for report display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],  # Zebra striping for readability
    )
    table.add_column("", width=2, justify="center")
    table.add_column("Package", no_wrap=True)
    table.add_column("Installed", style="muted")
    table.add_column("Latest", style="info")
    table.add_column("Copies", justify="right")
    table.add_column("Location", style="muted", overflow="ellipsis")
    return table


def format_comparison_row(record: ComparisonRecord) -> tuple[str, str, str, str, str, str]:
    """Format a comparison record as a table row.

    Up-to-date packages get a filled circle, outdated ones an arrow and
    packages unknown to the index a question mark.

    Args:
        record: The comparison record to format.

    Returns:
        Tuple of (icon, name, installed, latest, copies, location) with Rich markup.
    """
    if record.latest is None:
        icon = "[unknown]?[/]"
        name = f"[unknown]{record.name}[/]"
    elif record.up_to_date:
        icon = "[up_to_date]●[/]"  # Filled circle
        name = f"[up_to_date]{record.name}[/]"
    else:
        icon = "[outdated]↑[/]"  # Up arrow
        name = f"[outdated]{record.name}[/]"

    installed = ", ".join(record.installed_versions) or "-"
    latest = record.latest or "unknown"
    copies = str(record.count)
    if record.count > 1:
        copies = f"[warning]{copies}[/]"
    location = record.path or "-"

    return (icon, name, installed, latest, copies, location)


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
