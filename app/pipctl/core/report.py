"""Read-only status reporting.

Compares the installed copies of each package with its latest release
without changing anything.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING

from packaging.utils import canonicalize_name

from pipctl.core.query import PackageState, highest_record, iter_package_states, versions_equal
from pipctl.models.result import ComparisonRecord

if TYPE_CHECKING:
    from pipctl.store.base import PackageStore

logger = logging.getLogger(__name__)


class StatusReporter:
    """Produces comparison records for installed packages.

    Only the read operations of the store are used.
    """

    def __init__(self, store: PackageStore, query_workers: int = 1) -> None:
        self._store = store
        self._query_workers = query_workers

    def resolve_names(self, names: Sequence[str] = ()) -> list[str]:
        """Return the names to report on.

        An empty sequence means every locally installed package, one name
        per distinct distribution, sorted case-insensitively.
        """
        if names:
            return list(names)

        seen: dict[str, str] = {}
        for record in self._store.list_installed(None):
            seen.setdefault(canonicalize_name(record.name), record.name)
        return sorted(seen.values(), key=str.lower)

    def report(self, names: Sequence[str] = ()) -> list[ComparisonRecord]:
        """Compare installed and latest versions.

        Args:
            names: Package names, or empty for everything installed.

        Returns:
            One ComparisonRecord per resolved name, in order.
        """
        resolved = self.resolve_names(names)
        logger.debug("Reporting on %d package(s)", len(resolved))
        return [
            compare(state)
            for state in iter_package_states(self._store, resolved, workers=self._query_workers)
        ]


def compare(state: PackageState) -> ComparisonRecord:
    """Build the comparison record for one package state.

    A failed lookup is reported like an unknown package: no latest
    version, not up to date.
    """
    matched = highest_record(state.installed)
    latest = state.remote.version if state.remote is not None else None

    up_to_date = (
        matched is not None and latest is not None and versions_equal(matched.version, latest)
    )

    return ComparisonRecord(
        name=state.name,
        path=matched.path if matched is not None else None,
        count=len(state.installed),
        installed_version=matched.version if matched is not None else None,
        installed_versions=state.installed_versions,
        latest=latest,
        up_to_date=up_to_date,
    )
