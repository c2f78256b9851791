"""Exception hierarchy for pipctl.

Registry and store failures are raised by the package store and caught
per package by the reconciler. Only UntrustedSourceError raised by the
trust gate aborts a whole run.
"""


class PipctlError(Exception):
    """Base exception for all pipctl errors."""


class RegistryUnavailableError(PipctlError):
    """Raised when the package index cannot be reached or answers garbage."""


class StoreOperationError(PipctlError):
    """Base exception for failed install, uninstall or upgrade calls.

    Attributes:
        package: Name of the package the operation was for.
    """

    def __init__(self, message: str, package: str | None = None) -> None:
        super().__init__(message)
        self.package = package


class InstallConflictError(StoreOperationError):
    """Raised when pip cannot install a version (conflict, missing wheel, ...)."""


class PermissionDeniedError(StoreOperationError):
    """Raised when the target site directory is not writable."""


class UntrustedSourceError(StoreOperationError):
    """Raised when installing from an index that is not trusted."""


class UninstallError(StoreOperationError):
    """Raised when an installed copy cannot be removed."""


class UpgradeUnsupportedError(StoreOperationError):
    """Raised when pip refuses to upgrade an installed copy in place."""
