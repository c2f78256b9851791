"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest
from fakes import FakeStore


@pytest.fixture
def store() -> FakeStore:
    """Create an empty, trusted fake store."""
    return FakeStore()


@pytest.fixture
def untrusted_store() -> FakeStore:
    """Create an empty fake store whose source is not trusted."""
    return FakeStore(trusted=False)


@pytest.fixture
def isolated_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG config and state directories at a temporary directory."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    return tmp_path


@pytest.fixture
def pypi_project_json() -> dict[str, object]:
    """Sample JSON API response for a project."""
    return {
        "info": {
            "name": "requests",
            "version": "2.32.3",
            "summary": "Python HTTP for Humans.",
        },
        "releases": {},
        "urls": [],
    }
