"""pip package operator implementation.

Executes package installation, removal and upgrades by running pip in
the managed interpreter.
"""

import logging
import subprocess

from pipctl.core.errors import (
    InstallConflictError,
    PermissionDeniedError,
    StoreOperationError,
    UninstallError,
    UntrustedSourceError,
    UpgradeUnsupportedError,
)
from pipctl.models.package import InstalledRecord, InstallScope
from pipctl.utils.shell import CommandResult, run_command

logger = logging.getLogger(__name__)

# Markers in pip's stderr, checked in order.
_PERMISSION_MARKERS = (
    "Permission denied",
    "[Errno 13]",
    "Consider using the `--user` option",
)
_UNTRUSTED_MARKERS = ("is not a trusted or secure host",)
_NOT_UPGRADABLE_MARKERS = (
    "Cannot uninstall",
    "distutils installed project",
    "uninstall-no-record-file",
)


class PipOperator:
    """Operator running pip for one interpreter and index.

    Attributes:
        python: Path of the managed interpreter.
        index_url: Simple API URL passed to pip --index-url.
    """

    # Timeout for pip operations (10 minutes)
    _PIP_TIMEOUT: float = 600.0

    def __init__(
        self,
        python: str,
        index_url: str,
        timeout: float | None = None,
    ) -> None:
        self.python = python
        self.index_url = index_url
        self.timeout = timeout if timeout is not None else self._PIP_TIMEOUT

    def _pip(self, *args: str) -> list[str]:
        return [self.python, "-m", "pip", *args, "--disable-pip-version-check", "--no-input"]

    def install(
        self,
        name: str,
        version: str,
        scope: InstallScope,
        allow_side_by_side: bool = False,
    ) -> None:
        """Install an exact version with pip install.

        Args:
            name: Package name.
            version: Version to install.
            scope: CURRENT_USER installs with --user; ALL_USERS installs
                into site-packages with the user site hidden from pip.
            allow_side_by_side: Pass --ignore-installed so copies in other
                locations are neither reused nor removed.

        Raises:
            InstallConflictError: If pip fails.
            PermissionDeniedError: If the site directory is not writable.
            UntrustedSourceError: If pip rejects the index host.
        """
        args = self._pip("install", "--index-url", self.index_url)
        if scope == InstallScope.CURRENT_USER:
            args.append("--user")
        if allow_side_by_side:
            args.append("--ignore-installed")
        args.append(f"{name}=={version}")

        env = {"PYTHONNOUSERSITE": "1"} if scope == InstallScope.ALL_USERS else None

        logger.info("Installing %s %s for %s", name, version, scope.label)
        result = self._run(args, name, env=env, error_type=InstallConflictError)
        if not result.success:
            raise self._install_error(result, name, InstallConflictError)

    def uninstall(self, record: InstalledRecord) -> None:
        """Remove one installed copy with pip uninstall.

        pip removes the first copy it finds on sys.path; the user site is
        hidden for machine-wide copies so that pip finds the right one.

        Raises:
            UninstallError: If pip fails.
            PermissionDeniedError: If the site directory is not writable.
        """
        args = self._pip("uninstall", "-y", record.name)
        env = {"PYTHONNOUSERSITE": "1"} if record.scope == InstallScope.ALL_USERS else None

        logger.info("Uninstalling %s %s from %s", record.name, record.version, record.path)
        result = self._run(args, record.name, env=env, error_type=UninstallError)
        if not result.success:
            raise self._install_error(result, record.name, UninstallError)

    def upgrade(self, name: str, version: str) -> None:
        """Upgrade the installed copy in place with pip install --upgrade.

        Raises:
            UpgradeUnsupportedError: If pip cannot replace the installed copy.
            StoreOperationError: On any other pip failure.
        """
        args = self._pip("install", "--upgrade", "--index-url", self.index_url)
        args.append(f"{name}=={version}")

        logger.info("Upgrading %s to %s", name, version)
        result = self._run(args, name, error_type=UpgradeUnsupportedError)
        if result.success:
            return

        if any(marker in result.output for marker in _NOT_UPGRADABLE_MARKERS):
            raise UpgradeUnsupportedError(_error_text(result), package=name)
        raise self._install_error(result, name, InstallConflictError)

    def _run(
        self,
        args: list[str],
        package: str,
        *,
        env: dict[str, str] | None = None,
        error_type: type[StoreOperationError],
    ) -> CommandResult:
        try:
            return run_command(args, timeout=self.timeout, env=env, new_session=True)
        except subprocess.TimeoutExpired as e:
            msg = f"pip timed out after {self.timeout:.0f}s"
            raise error_type(msg, package=package) from e
        except (FileNotFoundError, OSError) as e:
            msg = f"Cannot run pip with {self.python}: {e}"
            raise error_type(msg, package=package) from e

    def _install_error(
        self,
        result: CommandResult,
        package: str,
        default: type[StoreOperationError],
    ) -> StoreOperationError:
        """Map a failed pip run onto the error taxonomy."""
        output = result.output
        text = _error_text(result)
        if any(marker in output for marker in _UNTRUSTED_MARKERS):
            return UntrustedSourceError(text, package=package)
        if any(marker in output for marker in _PERMISSION_MARKERS):
            return PermissionDeniedError(text, package=package)
        return default(text, package=package)


def _error_text(result: CommandResult) -> str:
    """Return pip's error output verbatim, or a fallback message."""
    return result.output or f"pip exited with status {result.returncode}"
