"""Action models for package mutations.

This module defines data structures describing a mutating step the
reconciler is about to take. They are handed to the confirmation
capability before anything touches the package store.
"""

from dataclasses import dataclass
from enum import Enum

from pipctl.models.package import InstallScope


class ActionType(Enum):
    """Type of package store mutation.

    Attributes:
        INSTALL: Install a specific version of a package.
        UNINSTALL: Remove one installed copy of a package.
        UPGRADE: Upgrade an installed copy in place.
        TRUST: Mark the package source as trusted.
    """

    INSTALL = "install"
    UNINSTALL = "uninstall"
    UPGRADE = "upgrade"
    TRUST = "trust"


@dataclass(frozen=True, slots=True)
class PlannedAction:
    """A single mutation the reconciler intends to perform.

    Attributes:
        action_type: The type of mutation.
        package: Name of the package to operate on.
        version: Version being installed, upgraded to, or removed.
        scope: Scope the mutation applies to (if relevant).
        reason: Optional explanation shown to the user.
    """

    action_type: ActionType
    package: str
    version: str
    scope: InstallScope | None = None
    reason: str | None = None

    def __post_init__(self) -> None:
        """Validate action data after initialization."""
        if not self.package:
            msg = "Package name cannot be empty"
            raise ValueError(msg)

    @property
    def is_destructive(self) -> bool:
        """Check if this action removes an installed copy."""
        return self.action_type == ActionType.UNINSTALL

    def describe(self) -> str:
        """Return a one-line description for prompts and logs."""
        text = f"{self.action_type.value} {self.package}"
        if self.version:
            text += f" {self.version}"
        if self.scope is not None:
            text += f" ({self.scope.label})"
        if self.reason:
            text += f": {self.reason}"
        return text


def create_install_action(
    package: str,
    version: str,
    scope: InstallScope,
    reason: str | None = None,
) -> PlannedAction:
    """Create an install action for a package.

    Args:
        package: Name of the package to install.
        version: Version to install.
        scope: Scope to install into.
        reason: Optional explanation for the installation.

    Returns:
        PlannedAction configured for installation.
    """
    return PlannedAction(
        action_type=ActionType.INSTALL,
        package=package,
        version=version,
        scope=scope,
        reason=reason,
    )


def create_uninstall_action(
    package: str,
    version: str,
    scope: InstallScope | None = None,
    reason: str | None = None,
) -> PlannedAction:
    """Create an uninstall action for one installed copy.

    Args:
        package: Name of the package to remove.
        version: Installed version being removed.
        scope: Scope of the copy being removed.
        reason: Optional explanation for the removal.

    Returns:
        PlannedAction configured for removal.
    """
    return PlannedAction(
        action_type=ActionType.UNINSTALL,
        package=package,
        version=version,
        scope=scope,
        reason=reason,
    )


def create_upgrade_action(
    package: str,
    version: str,
    reason: str | None = None,
) -> PlannedAction:
    """Create an in-place upgrade action.

    Args:
        package: Name of the package to upgrade.
        version: Target version.
        reason: Optional explanation for the upgrade.

    Returns:
        PlannedAction configured for an upgrade.
    """
    return PlannedAction(
        action_type=ActionType.UPGRADE,
        package=package,
        version=version,
        reason=reason,
    )
