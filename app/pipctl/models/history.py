"""History entry model for tracking reconcile runs.

This module defines data structures for recording the outcome of
reconcile runs in a history file.
"""

import json
import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pipctl.models.result import ReconcileStatus, ReconciliationResult


class HistoryActionType(str, Enum):
    """Type of run recorded in history.

    Attributes:
        RECONCILE: Regular reconcile run.
        REINSTALL: Reconcile run with --force.
    """

    RECONCILE = "reconcile"
    REINSTALL = "reinstall"


@dataclass(frozen=True, slots=True)
class HistoryItem:
    """Single package affected by a run.

    Attributes:
        name: Package name.
        status: Terminal reconcile status of the package.
        version: Version installed after the run.
        previous_versions: Versions removed or replaced by the run.
    """

    name: str
    status: ReconcileStatus
    version: str | None = None
    previous_versions: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        """Validate item data after initialization."""
        if not self.name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage.

        Returns:
            Dictionary representation of the history item.
        """
        result: dict[str, Any] = {
            "name": self.name,
            "status": self.status.value,
        }
        if self.version is not None:
            result["version"] = self.version
        if self.previous_versions:
            result["previous_versions"] = list(self.previous_versions)
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HistoryItem":
        """Deserialize from dictionary.

        Args:
            data: Dictionary containing item data.

        Returns:
            HistoryItem instance.

        Raises:
            KeyError: If required fields are missing.
            ValueError: If status is invalid.
        """
        return cls(
            name=data["name"],
            status=ReconcileStatus(data["status"]),
            version=data.get("version"),
            previous_versions=tuple(data.get("previous_versions", ())),
        )

    @classmethod
    def from_result(cls, result: ReconciliationResult) -> "HistoryItem":
        """Build a history item from a reconciliation result."""
        return cls(
            name=result.name,
            status=result.status,
            version=result.installed_version,
            previous_versions=result.previous_versions,
        )


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """Record of a single reconcile run in history.

    Attributes:
        id: Unique identifier (12-character hex string from UUID).
        timestamp: When the run finished (ISO 8601 format with timezone).
        action_type: Type of run.
        items: Tuple of packages affected by this run.
        success: Whether every package in the run succeeded.
        metadata: Additional context (command, interpreter, etc.).
    """

    id: str
    timestamp: str
    action_type: HistoryActionType
    items: tuple[HistoryItem, ...]
    success: bool = True
    metadata: dict[str, Any] = field(default_factory=lambda: {})

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.id:
            msg = "History entry ID cannot be empty"
            raise ValueError(msg)
        if not self.timestamp:
            msg = "Timestamp cannot be empty"
            raise ValueError(msg)
        if not self.items:
            msg = "History entry must have at least one item"
            raise ValueError(msg)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "action_type": self.action_type.value,
            "items": [item.to_dict() for item in self.items],
            "success": self.success,
            "metadata": self.metadata,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HistoryEntry":
        """Deserialize from dictionary.

        Raises:
            KeyError: If required fields are missing.
            ValueError: If action_type or item data is invalid.
        """
        items = tuple(HistoryItem.from_dict(item) for item in data["items"])
        return cls(
            id=data["id"],
            timestamp=data["timestamp"],
            action_type=HistoryActionType(data["action_type"]),
            items=items,
            success=data.get("success", True),
            metadata=data.get("metadata", {}),
        )

    def to_json_line(self) -> str:
        """Serialize to JSON line for JSONL storage (no trailing newline)."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json_line(cls, line: str) -> "HistoryEntry":
        """Deserialize from JSON line.

        Raises:
            json.JSONDecodeError: If line is not valid JSON.
            KeyError: If required fields are missing.
            ValueError: If data is invalid.
        """
        data = json.loads(line.strip())
        return cls.from_dict(data)


def create_history_entry(
    action_type: HistoryActionType,
    items: list[HistoryItem],
    success: bool = True,
    metadata: dict[str, Any] | None = None,
) -> HistoryEntry:
    """Factory function to create a new HistoryEntry.

    Automatically generates a unique ID and current timestamp.

    Args:
        action_type: Type of run being recorded.
        items: List of packages affected by this run.
        success: Whether every package in the run succeeded.
        metadata: Optional additional context.

    Returns:
        New HistoryEntry with auto-generated ID and timestamp.

    Raises:
        ValueError: If items list is empty.
    """
    if not items:
        msg = "Cannot create history entry with no items"
        raise ValueError(msg)

    return HistoryEntry(
        id=uuid.uuid4().hex[:12],
        timestamp=datetime.now(UTC).isoformat(),
        action_type=action_type,
        items=tuple(items),
        success=success,
        metadata=metadata or {},
    )
