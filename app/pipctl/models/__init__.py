"""Data models for pipctl.

This module exports the core data structures used throughout the application.
"""

from pipctl.models.action import (
    ActionType,
    PlannedAction,
    create_install_action,
    create_uninstall_action,
    create_upgrade_action,
)
from pipctl.models.history import (
    HistoryActionType,
    HistoryEntry,
    HistoryItem,
    create_history_entry,
)
from pipctl.models.package import InstalledRecord, InstallScope, PackageQuery, RemoteRecord
from pipctl.models.result import ComparisonRecord, ReconcileStatus, ReconciliationResult

__all__ = [
    "ActionType",
    "ComparisonRecord",
    "HistoryActionType",
    "HistoryEntry",
    "HistoryItem",
    "InstallScope",
    "InstalledRecord",
    "PackageQuery",
    "PlannedAction",
    "ReconcileStatus",
    "ReconciliationResult",
    "RemoteRecord",
    "create_history_entry",
    "create_install_action",
    "create_uninstall_action",
    "create_upgrade_action",
]
