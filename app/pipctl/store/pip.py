"""pip-backed package store.

Combines the index client, the site scanner and the pip operator into
the PackageStore used by the CLI.
"""

import logging
import os
import sys
from pathlib import Path

from pipctl.core.config import AppConfig, save_config
from pipctl.core.errors import UntrustedSourceError
from pipctl.models.package import InstalledRecord, InstallScope, RemoteRecord
from pipctl.store.base import PackageStore
from pipctl.store.index import IndexClient
from pipctl.store.operator import PipOperator
from pipctl.store.session import load_package
from pipctl.store.site import SiteScanner

logger = logging.getLogger(__name__)


class PipPackageStore(PackageStore):
    """Package store for one interpreter and one PyPI-compatible index.

    Attributes:
        config: Application configuration the store was built from.
    """

    def __init__(
        self,
        config: AppConfig,
        config_path: Path | None = None,
        index: IndexClient | None = None,
        scanner: SiteScanner | None = None,
        operator: PipOperator | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            config: Application configuration.
            config_path: Where trust changes are persisted (default path if None).
            index: Index client override.
            scanner: Site scanner override.
            operator: pip operator override.
        """
        self.config = config
        self._config_path = config_path
        self._index = index or IndexClient(
            config.index.url,
            timeout=config.registry_timeout_seconds,
        )
        self._scanner = scanner or SiteScanner(config.python)
        self._operator = operator or PipOperator(
            config.python,
            config.index.simple_url,
            timeout=config.pip_timeout_seconds,
        )

    @property
    def source_name(self) -> str:
        """Display name of the configured index."""
        return self.config.index.name

    def is_available(self) -> bool:
        """Check if the managed interpreter exists."""
        return self._scanner.is_available()

    def is_source_trusted(self) -> bool:
        return self.config.index.trusted

    def trust_source(self) -> None:
        """Mark the configured index as trusted and persist the change.

        Raises:
            ConfigError: If the config file cannot be written.
        """
        if self.config.index.trusted:
            return
        self.config = self.config.model_copy(
            update={"index": self.config.index.model_copy(update={"trusted": True})}
        )
        path = save_config(self.config, self._config_path)
        logger.info("Marked index %s as trusted in %s", self.config.index.url, path)

    def close(self) -> None:
        """Release network resources."""
        self._index.close()

    def find_latest(self, name: str) -> RemoteRecord | None:
        return self._index.find_latest(name)

    def list_installed(self, name: str | None = None) -> list[InstalledRecord]:
        return list(self._scanner.scan(name))

    def install(
        self,
        name: str,
        version: str,
        scope: InstallScope,
        allow_side_by_side: bool = False,
    ) -> None:
        if not self.config.index.trusted:
            msg = f"Package index {self.config.index.name} ({self.config.index.url}) is not trusted"
            raise UntrustedSourceError(msg, package=name)
        if scope == InstallScope.CURRENT_USER and not self._scanner.layout.has_user_site:
            logger.debug("%s has no user site, installing %s into it", self.config.python, name)
            scope = InstallScope.ALL_USERS
        self._operator.install(name, version, scope, allow_side_by_side=allow_side_by_side)

    def uninstall(self, record: InstalledRecord) -> None:
        self._operator.uninstall(record)

    def upgrade(self, name: str, version: str) -> None:
        if not self.config.index.trusted:
            msg = f"Package index {self.config.index.name} ({self.config.index.url}) is not trusted"
            raise UntrustedSourceError(msg, package=name)
        self._operator.upgrade(name, version)

    def load_into_session(self, name: str) -> None:
        """Import the package into this process.

        Raises:
            ImportError: If the store manages another interpreter or the
                import fails.
        """
        if not _same_interpreter(self.config.python, sys.executable):
            msg = f"{name} was installed for {self.config.python}, not this interpreter"
            raise ImportError(msg)
        load_package(name)


def _same_interpreter(a: str, b: str) -> bool:
    try:
        return os.path.samefile(a, b)
    except OSError:
        return a == b
