"""Abstract base class for package stores.

This module defines the PackageStore interface the reconciler and the
status reporter talk to. A store combines a remote index lookup with the
local installed state and the mutations that change it.
"""

from abc import ABC, abstractmethod

from pipctl.models.package import InstalledRecord, InstallScope, RemoteRecord


class PackageStore(ABC):
    """Abstract base class for package registry and store collaborators.

    Read operations never change anything. Mutating operations either
    complete for the one package they are called for or raise a
    StoreOperationError subclass.

    Example:
        >>> store = PipPackageStore(config)
        >>> latest = store.find_latest("requests")
        >>> if latest is not None and not store.list_installed("requests"):
        ...     store.install("requests", latest.version, InstallScope.CURRENT_USER)
    """

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Return the display name of the package source."""

    @abstractmethod
    def is_source_trusted(self) -> bool:
        """Check if installs from the package source are allowed."""

    @abstractmethod
    def trust_source(self) -> None:
        """Mark the package source as trusted. Calling it twice is a no-op."""

    @abstractmethod
    def find_latest(self, name: str) -> RemoteRecord | None:
        """Look up the latest published release of a package.

        Args:
            name: Package name.

        Returns:
            RemoteRecord, or None if the index does not know the package.

        Raises:
            RegistryUnavailableError: If the index cannot be queried.
        """

    @abstractmethod
    def list_installed(self, name: str | None = None) -> list[InstalledRecord]:
        """List installed copies of a package, or of every package.

        Args:
            name: Package name, or None for everything installed.

        Returns:
            List of InstalledRecord, possibly several per name.
        """

    @abstractmethod
    def install(
        self,
        name: str,
        version: str,
        scope: InstallScope,
        allow_side_by_side: bool = False,
    ) -> None:
        """Install an exact version of a package.

        Args:
            name: Package name.
            version: Version to install.
            scope: Scope to install into.
            allow_side_by_side: Leave copies in other locations untouched.

        Raises:
            InstallConflictError: If the install fails.
            PermissionDeniedError: If the target location is not writable.
            UntrustedSourceError: If the index is not trusted.
        """

    @abstractmethod
    def uninstall(self, record: InstalledRecord) -> None:
        """Remove one installed copy of a package.

        Raises:
            UninstallError: If the copy cannot be removed.
            PermissionDeniedError: If the location is not writable.
        """

    @abstractmethod
    def upgrade(self, name: str, version: str) -> None:
        """Upgrade an installed copy in place.

        Raises:
            UpgradeUnsupportedError: If the copy cannot be upgraded in place.
            StoreOperationError: On any other failure.
        """

    @abstractmethod
    def load_into_session(self, name: str) -> None:
        """Import an installed package into the running interpreter.

        Raises:
            ImportError: If the package cannot be imported.
        """
