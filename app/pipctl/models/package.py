"""Package models for local and remote package state.

This module defines the core data structures describing what is
installed in an interpreter and what the package index publishes.
"""

from dataclasses import dataclass, field
from enum import Enum


class InstallScope(str, Enum):
    """Installation visibility of a distribution.

    Attributes:
        CURRENT_USER: Installed in the interpreter's user site directory.
        ALL_USERS: Installed in a machine-wide site-packages directory.
    """

    CURRENT_USER = "user"
    ALL_USERS = "all-users"

    @property
    def label(self) -> str:
        """Return a human-readable label for messages."""
        if self is InstallScope.CURRENT_USER:
            return "current user"
        return "all users"


@dataclass(frozen=True, slots=True)
class InstalledRecord:
    """A single installed copy of a distribution.

    A name may have several records at once, e.g. one copy in the user
    site and another in the system site-packages.

    Attributes:
        name: Distribution name as found in its metadata.
        version: Installed version string.
        path: Site directory holding the distribution's metadata.
        scope: Installation scope, or None if it could not be determined.
        installer: Tool that installed the copy (from the INSTALLER file).
    """

    name: str
    version: str
    path: str
    scope: InstallScope | None = None
    installer: str | None = field(default=None)

    def __post_init__(self) -> None:
        """Validate record data after initialization."""
        if not self.name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)
        if not self.version:
            msg = "Package version cannot be empty"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class RemoteRecord:
    """Latest published release of a package on the index.

    Attributes:
        name: Project name as reported by the index.
        version: Latest published version string.
        summary: One-line project summary (if available).
    """

    name: str
    version: str
    summary: str | None = None

    def __post_init__(self) -> None:
        """Validate record data after initialization."""
        if not self.name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)
        if not self.version:
            msg = "Package version cannot be empty"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class PackageQuery:
    """A request to reconcile one package.

    Attributes:
        name: Package name to reconcile.
        force: Reinstall the latest version unconditionally.
        allow_import: Import the package after it is installed.
        scope: Scope the package should end up installed in.
    """

    name: str
    force: bool = False
    allow_import: bool = False
    scope: InstallScope = InstallScope.CURRENT_USER

    def __post_init__(self) -> None:
        """Validate query data after initialization."""
        if not self.name or not self.name.strip():
            msg = "Package name cannot be empty"
            raise ValueError(msg)
