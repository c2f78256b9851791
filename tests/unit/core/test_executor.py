"""Unit tests for core/executor.py.

Tests the store factory and history recording.
"""

from pathlib import Path
from unittest.mock import MagicMock, patch

from pipctl.core.config import AppConfig, IndexConfig
from pipctl.core.executor import get_store, record_results_to_history
from pipctl.core.state import StateManager
from pipctl.models.history import HistoryActionType
from pipctl.models.result import ReconcileStatus, ReconciliationResult
from pipctl.store.pip import PipPackageStore


def _result(name: str, status: ReconcileStatus) -> ReconciliationResult:
    """Create a test ReconciliationResult."""
    if status == ReconcileStatus.FAILED:
        return ReconciliationResult(name=name, status=status, error="boom")
    version = "1.0" if status.has_installed_version else None
    return ReconciliationResult(name=name, status=status, installed_version=version)


class TestGetStore:
    """Tests for get_store."""

    def test_builds_pip_store(self) -> None:
        """The store uses the configured interpreter and index."""
        config = AppConfig(
            python="/usr/bin/python3",
            index=IndexConfig(name="mirror", url="https://mirror.example.com"),
        )

        store = get_store(config)

        assert isinstance(store, PipPackageStore)
        assert store.source_name == "mirror"
        assert store.config.index.url == "https://mirror.example.com"


class TestRecordResultsToHistory:
    """Tests for record_results_to_history."""

    def test_records_changes_and_failures(self, tmp_path: Path) -> None:
        """Only changed and failed packages are recorded."""
        results = [
            _result("a", ReconcileStatus.UPDATED),
            _result("b", ReconcileStatus.UP_TO_DATE),
            _result("c", ReconcileStatus.FAILED),
            _result("d", ReconcileStatus.SKIPPED),
            _result("e", ReconcileStatus.NOT_FOUND),
        ]

        record_results_to_history(results, state_dir=tmp_path)

        (entry,) = StateManager(tmp_path).get_history()
        assert [item.name for item in entry.items] == ["a", "c"]
        assert entry.success is False
        assert entry.action_type == HistoryActionType.RECONCILE
        assert entry.metadata == {"command": "pipctl reconcile"}

    def test_force_records_reinstall(self, tmp_path: Path) -> None:
        """Forced runs are recorded as reinstalls."""
        results = [_result("a", ReconcileStatus.INSTALLED_TO_LATEST)]

        record_results_to_history(results, force=True, state_dir=tmp_path)

        (entry,) = StateManager(tmp_path).get_history()
        assert entry.action_type == HistoryActionType.REINSTALL
        assert entry.success is True

    def test_nothing_to_record(self, tmp_path: Path) -> None:
        """A run without changes writes nothing."""
        record_results_to_history([_result("a", ReconcileStatus.UP_TO_DATE)], state_dir=tmp_path)

        assert not (tmp_path / "history.jsonl").exists()

    @patch("pipctl.core.executor.print_warning")
    @patch("pipctl.core.executor.StateManager")
    def test_write_failure_is_reported(
        self, mock_state: MagicMock, mock_warning: MagicMock
    ) -> None:
        """A failing write prints a warning instead of raising."""
        mock_state.return_value.record_run.side_effect = OSError("disk full")

        record_results_to_history([_result("a", ReconcileStatus.NEW_INSTALL)])

        mock_warning.assert_called_once()
        assert "disk full" in mock_warning.call_args[0][0]
