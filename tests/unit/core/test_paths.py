"""Unit tests for XDG path helpers."""

from pathlib import Path
from unittest.mock import patch

import pytest
from pipctl.core.paths import (
    ensure_config_dir,
    ensure_state_dir,
    get_config_dir,
    get_config_path,
    get_history_path,
    get_state_dir,
    get_theme_path,
)


class TestXdgPaths:
    """Tests for directory resolution."""

    def test_respects_xdg_variables(self, isolated_dirs: Path) -> None:
        """XDG environment variables override the defaults."""
        assert get_config_dir() == isolated_dirs / "config" / "pipctl"
        assert get_state_dir() == isolated_dirs / "state" / "pipctl"
        assert get_config_path().name == "config.toml"
        assert get_theme_path().name == "theme.toml"
        assert get_history_path() == isolated_dirs / "state" / "pipctl" / "history.jsonl"

    def test_defaults_under_home(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Without XDG variables the home directory is used."""
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.delenv("XDG_STATE_HOME", raising=False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)

        assert get_config_dir() == tmp_path / ".config" / "pipctl"
        assert get_state_dir() == tmp_path / ".local" / "state" / "pipctl"


class TestEnsureDirs:
    """Tests for directory creation."""

    def test_creates_directories(self, isolated_dirs: Path) -> None:
        """ensure_* create the directories."""
        assert ensure_config_dir().is_dir()
        assert ensure_state_dir().is_dir()

    def test_permission_error(self, isolated_dirs: Path) -> None:
        """Permission problems become RuntimeError."""
        with (
            patch.object(Path, "mkdir", side_effect=PermissionError("denied")),
            pytest.raises(RuntimeError, match="Permission denied"),
        ):
            ensure_state_dir()
