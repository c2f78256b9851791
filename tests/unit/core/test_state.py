"""Unit tests for StateManager.

Tests for the StateManager class that handles history persistence.
"""

import json
import logging
from pathlib import Path

import pytest
from pipctl.core.state import StateManager
from pipctl.models.history import (
    HistoryActionType,
    HistoryEntry,
    HistoryItem,
    create_history_entry,
)
from pipctl.models.result import ReconcileStatus


def _entry(name: str = "rich") -> HistoryEntry:
    return create_history_entry(
        action_type=HistoryActionType.RECONCILE,
        items=[HistoryItem(name=name, status=ReconcileStatus.NEW_INSTALL, version="1.0")],
    )


class TestStateManagerInit:
    """Tests for StateManager initialization."""

    def test_default_state_dir(self, isolated_dirs: Path) -> None:
        """StateManager follows XDG_STATE_HOME."""
        manager = StateManager()
        assert manager.history_path == isolated_dirs / "state" / "pipctl" / "history.jsonl"

    def test_custom_state_dir(self, tmp_path: Path) -> None:
        """StateManager uses a custom state directory when provided."""
        manager = StateManager(state_dir=tmp_path)
        assert manager.history_path == tmp_path / "history.jsonl"


class TestRecordRun:
    """Tests for StateManager.record_run."""

    def test_creates_directories_and_file(self, tmp_path: Path) -> None:
        """record_run creates the state directory and history file."""
        manager = StateManager(state_dir=tmp_path / "nested" / "state")

        manager.record_run(_entry())

        assert manager.history_path.exists()

    def test_appends_one_line_per_run(self, tmp_path: Path) -> None:
        """Each run is a single JSON line."""
        manager = StateManager(state_dir=tmp_path)

        manager.record_run(_entry("rich"))
        manager.record_run(_entry("httpx"))

        lines = manager.history_path.read_text().splitlines()
        assert len(lines) == 2
        assert json.loads(lines[1])["items"][0]["name"] == "httpx"

    def test_default_dir_is_created(self, isolated_dirs: Path) -> None:
        """The default XDG state directory is created on demand."""
        StateManager().record_run(_entry())

        assert (isolated_dirs / "state" / "pipctl" / "history.jsonl").exists()


class TestGetHistory:
    """Tests for StateManager.get_history."""

    def test_missing_file(self, tmp_path: Path) -> None:
        """No history file means no entries."""
        assert StateManager(state_dir=tmp_path).get_history() == []

    def test_newest_first_with_limit(self, tmp_path: Path) -> None:
        """Entries come back newest first and honor the limit."""
        manager = StateManager(state_dir=tmp_path)
        for name in ("a", "b", "c"):
            manager.record_run(_entry(name))

        entries = manager.get_history(limit=2)

        assert [e.items[0].name for e in entries] == ["c", "b"]

    def test_skips_corrupt_lines(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Corrupt and blank lines are skipped with a warning."""
        manager = StateManager(state_dir=tmp_path)
        manager.record_run(_entry("good"))
        with manager.history_path.open("a") as f:
            f.write("{broken\n\n")
            f.write('{"id": "x"}\n')

        with caplog.at_level(logging.WARNING):
            entries = manager.get_history()

        assert [e.items[0].name for e in entries] == ["good"]
        assert "Skipping corrupt history line" in caplog.text
