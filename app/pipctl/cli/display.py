"""Shared Rich display functions for reconcile results.

Provides table builders and summary printers for the results of a
reconcile run.
"""

from collections import Counter

from rich.table import Table

from pipctl.models.action import ActionType, PlannedAction
from pipctl.models.result import ReconcileStatus, ReconciliationResult
from pipctl.utils.formatting import console, print_success

# Short label and style per terminal status.
STATUS_STYLES: dict[ReconcileStatus, tuple[str, str]] = {
    ReconcileStatus.NOT_FOUND: ("not found", "unknown"),
    ReconcileStatus.UP_TO_DATE: ("up to date", "up_to_date"),
    ReconcileStatus.NEW_INSTALL: ("new", "added"),
    ReconcileStatus.UPDATED: ("updated", "changed"),
    ReconcileStatus.INSTALLED: ("installed", "changed"),
    ReconcileStatus.REMOVED_OLDER: ("removed older", "changed"),
    ReconcileStatus.MOVED_TO_ALL_USERS: ("moved", "changed"),
    ReconcileStatus.MOVED_TO_CURRENT_USER: ("moved", "changed"),
    ReconcileStatus.INSTALLED_TO_LATEST: ("reinstalled", "added"),
    ReconcileStatus.FAILED: ("FAIL", "error"),
    ReconcileStatus.SKIPPED: ("skipped", "muted"),
}


def format_action(action: PlannedAction) -> str:
    """Format a planned action for a confirmation prompt.

    Args:
        action: The action to describe.

    Returns:
        Rich markup string.
    """
    if action.action_type == ActionType.UNINSTALL:
        verb = "[removed]-uninstall[/removed]"
    elif action.action_type == ActionType.TRUST:
        verb = "[warning]!trust[/warning]"
    else:
        verb = f"[added]+{action.action_type.value}[/added]"

    text = f"{verb} [bold]{action.package}[/bold]"
    if action.version:
        text += f" {action.version}"
    if action.scope is not None:
        text += f" [muted]({action.scope.label})[/muted]"
    if action.reason:
        text += f" [muted]- {action.reason}[/muted]"
    return text


def create_results_table(results: list[ReconciliationResult]) -> Table:
    """Create a Rich table displaying reconcile results.

    Failed results show the error text instead of the message.

    Args:
        results: List of reconcile results to display.

    Returns:
        Rich Table configured for results display.
    """
    table = Table(
        title="Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=14)
    table.add_column("Package", no_wrap=True)
    table.add_column("Version", style="info")
    table.add_column("Message")

    for result in results:
        label, style = STATUS_STYLES[result.status]
        message = result.error if result.failed else result.message
        if result.import_error:
            message = f"{message} [warning](import failed: {result.import_error})[/warning]"

        table.add_row(
            f"[{style}]{label}[/{style}]",
            result.name,
            result.installed_version or "-",
            f"[muted]{message}[/muted]",
        )

    return table


def print_results_summary(results: list[ReconciliationResult]) -> None:
    """Print a summary of reconcile results.

    Shows a success message when nothing failed, or the status counts
    otherwise.

    Args:
        results: List of reconcile results.
    """
    counts = Counter(r.status for r in results)
    changed = sum(n for status, n in counts.items() if status.is_change)
    failed = counts[ReconcileStatus.FAILED]
    not_found = counts[ReconcileStatus.NOT_FOUND]

    if not failed and not not_found:
        print_success(
            f"All {len(results)} package(s) reconciled ({changed} changed, "
            f"{counts[ReconcileStatus.UP_TO_DATE]} up to date)."
        )
        return

    parts = [f"[success]{changed} changed[/success]"]
    if failed:
        parts.append(f"[error]{failed} failed[/error]")
    if not_found:
        parts.append(f"[unknown]{not_found} not found[/unknown]")
    if counts[ReconcileStatus.SKIPPED]:
        parts.append(f"[muted]{counts[ReconcileStatus.SKIPPED]} skipped[/muted]")
    console.print(f"\n{', '.join(parts)}")


def exit_code_for(results: list[ReconciliationResult]) -> int:
    """Return the process exit code for a reconcile run.

    Zero if every package ended in a state other than FAILED and
    NOT_FOUND, one otherwise.
    """
    return 1 if any(r.status.is_error for r in results) else 0
