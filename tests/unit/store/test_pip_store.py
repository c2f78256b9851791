"""Unit tests for the pip-backed package store."""

import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from pipctl.core.config import AppConfig, IndexConfig, load_config
from pipctl.core.errors import UntrustedSourceError
from pipctl.models.package import InstalledRecord, InstallScope, RemoteRecord
from pipctl.store.pip import PipPackageStore
from pipctl.store.site import SiteLayout


def _store(trusted: bool = True, python: str = sys.executable, config_path: Path | None = None):
    """Create a store with mocked collaborators."""
    config = AppConfig(python=python, index=IndexConfig(name="mirror", trusted=trusted))
    index = MagicMock()
    scanner = MagicMock()
    operator = MagicMock()
    store = PipPackageStore(
        config,
        config_path=config_path,
        index=index,
        scanner=scanner,
        operator=operator,
    )
    return store, index, scanner, operator


class TestReads:
    """Tests for the read operations."""

    def test_find_latest_delegates_to_index(self) -> None:
        """find_latest asks the index client."""
        store, index, _, _ = _store()
        index.find_latest.return_value = RemoteRecord(name="rich", version="2.0")

        assert store.find_latest("rich") == RemoteRecord(name="rich", version="2.0")
        index.find_latest.assert_called_once_with("rich")

    def test_list_installed_delegates_to_scanner(self) -> None:
        """list_installed returns the scanner's records as a list."""
        store, _, scanner, _ = _store()
        record = InstalledRecord(name="rich", version="1.0", path="/site")
        scanner.scan.return_value = iter([record])

        assert store.list_installed("rich") == [record]
        scanner.scan.assert_called_once_with("rich")

    def test_source_name(self) -> None:
        """The source is named after the configured index."""
        store, _, _, _ = _store()
        assert store.source_name == "mirror"

    def test_close(self) -> None:
        """close() closes the index client."""
        store, index, _, _ = _store()
        store.close()
        index.close.assert_called_once()


class TestMutations:
    """Tests for the mutating operations."""

    def test_install_delegates(self) -> None:
        """install passes everything to the operator."""
        store, _, _, operator = _store()

        store.install("rich", "2.0", InstallScope.ALL_USERS, allow_side_by_side=True)

        operator.install.assert_called_once_with(
            "rich", "2.0", InstallScope.ALL_USERS, allow_side_by_side=True
        )

    def test_user_install_with_user_site(self) -> None:
        """A current-user install keeps its scope when a user site exists."""
        store, _, scanner, operator = _store()
        scanner.layout = SiteLayout(site_dirs=("/usr/site",), user_site="/home/u/site")

        store.install("rich", "2.0", InstallScope.CURRENT_USER)

        operator.install.assert_called_once_with(
            "rich", "2.0", InstallScope.CURRENT_USER, allow_side_by_side=False
        )

    def test_user_install_without_user_site(self) -> None:
        """Without a user site (virtualenv) the package goes into the environment."""
        store, _, scanner, operator = _store()
        scanner.layout = SiteLayout(site_dirs=("/venv/lib/site-packages",))

        store.install("rich", "2.0", InstallScope.CURRENT_USER)

        operator.install.assert_called_once_with(
            "rich", "2.0", InstallScope.ALL_USERS, allow_side_by_side=False
        )

    def test_install_requires_trust(self) -> None:
        """Installs from an untrusted index are refused."""
        store, _, _, operator = _store(trusted=False)

        with pytest.raises(UntrustedSourceError, match="not trusted"):
            store.install("rich", "2.0", InstallScope.CURRENT_USER)

        operator.install.assert_not_called()

    def test_upgrade_requires_trust(self) -> None:
        """Upgrades from an untrusted index are refused."""
        store, _, _, operator = _store(trusted=False)

        with pytest.raises(UntrustedSourceError):
            store.upgrade("rich", "2.0")

        operator.upgrade.assert_not_called()

    def test_uninstall_does_not_require_trust(self) -> None:
        """Removing a copy needs no trusted index."""
        store, _, _, operator = _store(trusted=False)
        record = InstalledRecord(name="rich", version="1.0", path="/site")

        store.uninstall(record)

        operator.uninstall.assert_called_once_with(record)


class TestTrust:
    """Tests for trust handling."""

    def test_trust_source_persists(self, tmp_path: Path) -> None:
        """Trusting the index updates and saves the config."""
        path = tmp_path / "config.toml"
        store, _, _, _ = _store(trusted=False, config_path=path)

        store.trust_source()

        assert store.is_source_trusted() is True
        assert load_config(path).index.trusted is True

    def test_trusted_source_is_not_saved(self, tmp_path: Path) -> None:
        """An already trusted index writes nothing."""
        path = tmp_path / "config.toml"
        store, _, _, _ = _store(trusted=True, config_path=path)

        store.trust_source()

        assert not path.exists()


class TestLoadIntoSession:
    """Tests for load_into_session."""

    @patch("pipctl.store.pip.load_package")
    def test_same_interpreter(self, mock_load: MagicMock) -> None:
        """Packages of the running interpreter are imported."""
        store, _, _, _ = _store()

        store.load_into_session("rich")

        mock_load.assert_called_once_with("rich")

    @patch("pipctl.store.pip.load_package")
    def test_other_interpreter(self, mock_load: MagicMock) -> None:
        """Packages of another interpreter cannot be imported."""
        store, _, _, _ = _store(python="/nonexistent/python3")

        with pytest.raises(ImportError, match="not this interpreter"):
            store.load_into_session("rich")

        mock_load.assert_not_called()
