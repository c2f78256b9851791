"""Shared query and version comparison helpers.

Both the reconciler and the status reporter start by looking up the
installed copies and the latest release of each package. The lookups
are read-only, so they may run on a thread pool.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from packaging.version import InvalidVersion, Version

from pipctl.core.errors import RegistryUnavailableError

if TYPE_CHECKING:
    from pipctl.models.package import InstalledRecord, RemoteRecord
    from pipctl.store.base import PackageStore

logger = logging.getLogger(__name__)


def parse_version(version: str) -> Version | None:
    """Parse a PEP 440 version, returning None if it does not parse."""
    try:
        return Version(version)
    except InvalidVersion:
        return None


def versions_equal(a: str, b: str) -> bool:
    """Compare two version strings for equality.

    PEP 440 equality is used when both parse (so "1.0" equals "1.0.0");
    otherwise the strings are compared literally.
    """
    va, vb = parse_version(a), parse_version(b)
    if va is not None and vb is not None:
        return va == vb
    return a.strip() == b.strip()


def version_sort_key(version: str) -> tuple[int, Version | str]:
    """Sort key ordering unparseable versions before every valid one."""
    parsed = parse_version(version)
    if parsed is None:
        return (0, version)
    return (1, parsed)


def highest_record(records: Sequence[InstalledRecord]) -> InstalledRecord | None:
    """Return the installed copy with the highest version."""
    if not records:
        return None
    return max(records, key=lambda r: version_sort_key(r.version))


@dataclass(frozen=True, slots=True)
class PackageState:
    """Local and remote state of one package.

    Attributes:
        name: Package name as requested.
        installed: Installed copies (possibly empty).
        remote: Latest release, or None if unknown to the index.
        error: Why the remote lookup failed, if it did.
    """

    name: str
    installed: tuple[InstalledRecord, ...] = field(default=())
    remote: RemoteRecord | None = None
    error: str | None = None

    @property
    def installed_versions(self) -> tuple[str, ...]:
        """Installed versions in discovery order."""
        return tuple(r.version for r in self.installed)

    def find_installed(self, version: str) -> InstalledRecord | None:
        """Return the first installed copy with the given version."""
        for record in self.installed:
            if versions_equal(record.version, version):
                return record
        return None


def query_package(store: PackageStore, name: str) -> PackageState:
    """Look up the installed copies and the latest release of a package.

    A registry transport failure or a failed local scan is recorded on
    the returned state instead of being raised.

    Args:
        store: Package store to query.
        name: Package name.

    Returns:
        PackageState for the package.
    """
    try:
        installed = tuple(store.list_installed(name))
    except RuntimeError as e:
        logger.warning("Listing installed copies of %s failed: %s", name, e)
        return PackageState(name=name, error=str(e))

    try:
        remote = store.find_latest(name)
    except RegistryUnavailableError as e:
        logger.warning("Registry lookup failed for %s: %s", name, e)
        return PackageState(name=name, installed=installed, error=str(e))
    return PackageState(name=name, installed=installed, remote=remote)


def iter_package_states(
    store: PackageStore,
    names: Sequence[str],
    workers: int = 1,
) -> Iterator[PackageState]:
    """Query packages, yielding states in input order.

    With more than one worker the lookups run on a thread pool ahead of
    the consumer; results are still yielded in the order of ``names``.

    Args:
        store: Package store to query.
        names: Package names to query.
        workers: Number of threads for the lookups.

    Yields:
        PackageState for each name, in order.
    """
    if workers <= 1 or len(names) <= 1:
        for name in names:
            yield query_package(store, name)
        return

    with ThreadPoolExecutor(max_workers=min(workers, len(names))) as pool:
        futures = [pool.submit(query_package, store, name) for name in names]
        try:
            for future in futures:
                yield future.result()
        finally:
            for future in futures:
                future.cancel()
