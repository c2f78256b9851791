"""Result models for reconcile and report operations.

This module defines the per-package outcome records produced by the
reconciler and the status reporter.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ReconcileStatus(str, Enum):
    """Terminal state of a package after reconciliation.

    Attributes:
        NOT_FOUND: The index does not know the package.
        UP_TO_DATE: A single copy of the latest version is installed.
        NEW_INSTALL: The package was not installed and now is.
        UPDATED: An installed copy was upgraded in place.
        INSTALLED: The latest version was installed after replacing copies.
        REMOVED_OLDER: Duplicate copies were removed, keeping the latest.
        MOVED_TO_ALL_USERS: Reinstalled machine-wide from the user site.
        MOVED_TO_CURRENT_USER: Reinstalled in the user site from machine-wide.
        INSTALLED_TO_LATEST: Forced reinstall of the latest version.
        FAILED: A mutating step raised an error.
        SKIPPED: The action was declined or the run was cancelled.
    """

    NOT_FOUND = "not_found"
    UP_TO_DATE = "up_to_date"
    NEW_INSTALL = "new_install"
    UPDATED = "updated"
    INSTALLED = "installed"
    REMOVED_OLDER = "removed_older"
    MOVED_TO_ALL_USERS = "moved_to_all_users"
    MOVED_TO_CURRENT_USER = "moved_to_current_user"
    INSTALLED_TO_LATEST = "installed_to_latest"
    FAILED = "failed"
    SKIPPED = "skipped"

    @property
    def has_installed_version(self) -> bool:
        """Check if this status changed or confirmed the installed state."""
        return self not in (
            ReconcileStatus.NOT_FOUND,
            ReconcileStatus.FAILED,
            ReconcileStatus.SKIPPED,
        )

    @property
    def is_change(self) -> bool:
        """Check if this status means the package store was modified."""
        return self.has_installed_version and self != ReconcileStatus.UP_TO_DATE

    @property
    def is_error(self) -> bool:
        """Check if this status counts as a failure for the exit code."""
        return self in (ReconcileStatus.FAILED, ReconcileStatus.NOT_FOUND)


@dataclass(frozen=True, slots=True)
class ReconciliationResult:
    """Outcome of reconciling one package.

    Attributes:
        name: Package name as requested.
        status: Terminal status.
        installed_version: Version installed after the operation.
        previous_versions: Versions that were removed or replaced.
        message: Human-readable description of what happened.
        error: Error detail; always set when status is FAILED.
        import_error: Why loading the package into the session failed.
    """

    name: str
    status: ReconcileStatus
    installed_version: str | None = None
    previous_versions: tuple[str, ...] = ()
    message: str = ""
    error: str | None = None
    import_error: str | None = None

    def __post_init__(self) -> None:
        """Validate result invariants after initialization."""
        if not self.name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)
        if self.status == ReconcileStatus.FAILED and not self.error:
            msg = "Failed result requires an error detail"
            raise ValueError(msg)
        if self.installed_version is not None and not self.status.has_installed_version:
            msg = f"Status {self.status.value} cannot carry an installed version"
            raise ValueError(msg)

    @property
    def failed(self) -> bool:
        """Check if reconciliation failed."""
        return self.status == ReconcileStatus.FAILED

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result: dict[str, Any] = {
            "name": self.name,
            "status": self.status.value,
            "installed_version": self.installed_version,
            "previous_versions": list(self.previous_versions),
            "message": self.message,
        }
        if self.error is not None:
            result["error"] = self.error
        if self.import_error is not None:
            result["import_error"] = self.import_error
        return result


@dataclass(frozen=True, slots=True)
class ComparisonRecord:
    """Read-only comparison of installed and latest versions.

    Attributes:
        name: Package name as requested (or as found when listing all).
        path: Site directory of the matched installed copy.
        count: Number of installed copies.
        installed_version: Highest installed version (None if not installed).
        installed_versions: All installed versions.
        latest: Latest published version, or None if unknown.
        up_to_date: Whether the matched installed version equals the latest.
    """

    name: str
    path: str | None
    count: int
    installed_version: str | None
    installed_versions: tuple[str, ...] = field(default=())
    latest: str | None = None
    up_to_date: bool = False

    @property
    def is_installed(self) -> bool:
        """Check if at least one copy is installed."""
        return self.count > 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "name": self.name,
            "path": self.path,
            "count": self.count,
            "installed_version": self.installed_version,
            "installed_versions": list(self.installed_versions),
            "latest": self.latest,
            "up_to_date": self.up_to_date,
        }
