"""Store construction and history recording.

Provides the store factory and history recording shared between the
`reconcile` and `report` CLI commands.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pipctl.core.state import StateManager
from pipctl.models.history import (
    HistoryActionType,
    HistoryItem,
    create_history_entry,
)
from pipctl.store.pip import PipPackageStore
from pipctl.utils.formatting import print_warning

if TYPE_CHECKING:
    from pipctl.core.config import AppConfig
    from pipctl.models.result import ReconciliationResult

logger = logging.getLogger(__name__)


def get_store(config: AppConfig, config_path: Path | None = None) -> PipPackageStore:
    """Build the pip-backed package store for a configuration.

    Args:
        config: Application configuration.
        config_path: Config file that trust changes are written to.

    Returns:
        PipPackageStore for the configured interpreter and index.
    """
    return PipPackageStore(config, config_path=config_path)


def record_results_to_history(
    results: list[ReconciliationResult],
    force: bool = False,
    command: str = "pipctl reconcile",
    state_dir: Path | None = None,
) -> None:
    """Record a reconcile run to history.

    Only packages whose installed state changed, or that failed, are
    recorded; a run with neither writes nothing.

    Errors during history recording are logged but do **not** interrupt
    the calling command's flow.

    Args:
        results: Results of the run.
        force: Whether the run was a forced reinstall.
        command: Command string stored in the history entry metadata.
        state_dir: Optional override for the state directory.
    """
    items = [
        HistoryItem.from_result(r) for r in results if r.status.is_change or r.failed
    ]
    if not items:
        return

    try:
        entry = create_history_entry(
            action_type=HistoryActionType.REINSTALL if force else HistoryActionType.RECONCILE,
            items=items,
            success=not any(r.failed for r in results),
            metadata={"command": command},
        )
        StateManager(state_dir).record_run(entry)
        logger.debug("Recorded %d package(s) to history", len(items))
    except (OSError, RuntimeError) as e:
        logger.warning("Failed to record run to history: %s", str(e))
        print_warning(f"Could not record run to history: {e}")
