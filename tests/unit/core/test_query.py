"""Unit tests for the shared query helpers."""

import pytest
from fakes import FakeStore
from pipctl.core.query import (
    PackageState,
    highest_record,
    iter_package_states,
    parse_version,
    query_package,
    version_sort_key,
    versions_equal,
)
from pipctl.models.package import InstalledRecord


def _record(version: str) -> InstalledRecord:
    return InstalledRecord(name="rich", version=version, path="/site")


class TestVersions:
    """Tests for version parsing and comparison."""

    def test_parse_invalid(self) -> None:
        """Unparseable versions return None."""
        assert parse_version("not a version") is None
        assert parse_version("1.2.3") is not None

    @pytest.mark.parametrize(
        ("a", "b", "expected"),
        [
            ("1.0", "1.0.0", True),
            ("1.0", "1.1", False),
            ("2.0rc1", "2.0.0rc1", True),
            ("custom-build", "custom-build", True),
            ("custom-build", "1.0", False),
        ],
    )
    def test_versions_equal(self, a: str, b: str, expected: bool) -> None:
        """Equality uses PEP 440 and falls back to string comparison."""
        assert versions_equal(a, b) is expected

    def test_sort_key_orders_invalid_first(self) -> None:
        """Invalid versions sort before valid ones."""
        versions = ["2.0", "weird", "10.0", "1.0"]

        assert sorted(versions, key=version_sort_key) == ["weird", "1.0", "2.0", "10.0"]

    def test_highest_record(self) -> None:
        """highest_record picks the highest version, not the last."""
        records = [_record("1.10"), _record("1.9"), _record("1.2")]

        assert highest_record(records) == records[0]
        assert highest_record([]) is None


class TestPackageState:
    """Tests for PackageState."""

    def test_find_installed(self) -> None:
        """find_installed matches PEP 440 equal versions."""
        state = PackageState(name="rich", installed=(_record("1.0"), _record("2.0.0")))

        assert state.find_installed("2.0") == _record("2.0.0")
        assert state.find_installed("3.0") is None
        assert state.installed_versions == ("1.0", "2.0.0")


class TestQueryPackage:
    """Tests for query_package."""

    def test_collects_local_and_remote(self, store: FakeStore) -> None:
        """The state holds installed copies and the latest release."""
        store.publish("rich", "2.0")
        store.add_installed("rich", "1.0")

        state = query_package(store, "rich")

        assert state.installed_versions == ("1.0",)
        assert state.remote is not None
        assert state.remote.version == "2.0"
        assert state.error is None

    def test_registry_error_is_recorded(self, store: FakeStore) -> None:
        """A registry outage is stored on the state."""
        store.add_installed("rich", "1.0")
        store.unavailable.add("rich")

        state = query_package(store, "rich")

        assert state.remote is None
        assert state.error is not None
        assert state.installed_versions == ("1.0",)


class TestIterPackageStates:
    """Tests for iter_package_states."""

    @pytest.mark.parametrize("workers", [1, 3, 16])
    def test_preserves_order(self, store: FakeStore, workers: int) -> None:
        """States come back in input order for any worker count."""
        names = [f"pkg{i}" for i in range(8)]
        for i, name in enumerate(names):
            store.publish(name, f"{i}.0")

        states = list(iter_package_states(store, names, workers=workers))

        assert [s.name for s in states] == names
        assert [s.remote.version for s in states if s.remote] == [f"{i}.0" for i in range(8)]

    def test_empty(self, store: FakeStore) -> None:
        """No names yield nothing."""
        assert list(iter_package_states(store, [], workers=4)) == []

    def test_close_early(self, store: FakeStore) -> None:
        """Closing the generator early does not raise."""
        names = [f"pkg{i}" for i in range(8)]
        states = iter_package_states(store, names, workers=4)

        first = next(states)
        states.close()

        assert first.name == "pkg0"
