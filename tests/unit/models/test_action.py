"""Unit tests for action models."""

import pytest
from pipctl.models.action import (
    ActionType,
    PlannedAction,
    create_install_action,
    create_uninstall_action,
    create_upgrade_action,
)
from pipctl.models.package import InstallScope


class TestPlannedAction:
    """Tests for PlannedAction dataclass."""

    def test_empty_package_raises(self) -> None:
        """Empty package name is rejected."""
        with pytest.raises(ValueError, match="cannot be empty"):
            PlannedAction(action_type=ActionType.INSTALL, package="", version="1.0")

    def test_is_destructive(self) -> None:
        """Only uninstall actions are destructive."""
        assert create_uninstall_action("rich", "1.0").is_destructive is True
        assert create_upgrade_action("rich", "2.0").is_destructive is False
        install = create_install_action("rich", "2.0", InstallScope.CURRENT_USER)
        assert install.is_destructive is False

    def test_describe_install(self) -> None:
        """Install description contains version, scope and reason."""
        action = create_install_action(
            "rich", "13.7.1", InstallScope.ALL_USERS, reason="new install"
        )

        assert action.describe() == "install rich 13.7.1 (all users): new install"

    def test_describe_without_version(self) -> None:
        """Trust actions have no version in their description."""
        action = PlannedAction(action_type=ActionType.TRUST, package="pypi", version="")

        assert action.describe() == "trust pypi"


class TestActionFactories:
    """Tests for action factory functions."""

    def test_install_action(self) -> None:
        """create_install_action sets type and scope."""
        action = create_install_action("httpx", "0.27.0", InstallScope.CURRENT_USER)

        assert action.action_type == ActionType.INSTALL
        assert action.scope == InstallScope.CURRENT_USER
        assert action.version == "0.27.0"

    def test_uninstall_action(self) -> None:
        """create_uninstall_action records the removed version."""
        action = create_uninstall_action("httpx", "0.26.0", InstallScope.ALL_USERS, reason="dup")

        assert action.action_type == ActionType.UNINSTALL
        assert action.version == "0.26.0"
        assert action.reason == "dup"

    def test_upgrade_action_has_no_scope(self) -> None:
        """Upgrades happen in place."""
        action = create_upgrade_action("httpx", "0.27.0")

        assert action.action_type == ActionType.UPGRADE
        assert action.scope is None
