"""Reconciliation of installed packages with their latest releases.

This module provides the Reconciler, which classifies each requested
package into one case of a fixed decision table and issues the
matching install, uninstall or upgrade calls on the package store.

Decision table (first match wins):

    force                           -> reinstall latest      INSTALLED_TO_LATEST
    nothing installed               -> install latest        NEW_INSTALL
    one copy in the wrong scope     -> move to requested     MOVED_TO_*
    one copy at latest              -> nothing               UP_TO_DATE
    several copies, latest among    -> remove the others     REMOVED_OLDER
    several copies, latest missing  -> remove all, install   INSTALLED
    one older/newer copy            -> upgrade, or install   UPDATED / INSTALLED
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from pipctl.core.query import PackageState, iter_package_states, versions_equal
from pipctl.core.trust import ensure_source_trusted
from pipctl.models.action import (
    PlannedAction,
    create_install_action,
    create_uninstall_action,
    create_upgrade_action,
)
from pipctl.models.package import InstalledRecord, InstallScope, PackageQuery
from pipctl.models.result import ReconcileStatus, ReconciliationResult

if TYPE_CHECKING:
    from pipctl.store.base import PackageStore

logger = logging.getLogger(__name__)

ConfirmFn = Callable[[PlannedAction], bool]


def always_confirm(action: PlannedAction) -> bool:
    """Confirmation capability that approves every action."""
    return True


@dataclass(frozen=True, slots=True)
class ReconcileOptions:
    """Options applied to every package of a reconcile run.

    Attributes:
        force: Reinstall the latest version unconditionally.
        allow_import: Import each package after it is installed.
        scope: Scope packages should end up installed in.
    """

    force: bool = False
    allow_import: bool = False
    scope: InstallScope = InstallScope.CURRENT_USER

    @property
    def scope_all_users(self) -> bool:
        """Check if packages should be installed machine-wide."""
        return self.scope == InstallScope.ALL_USERS

    def query_for(self, name: str) -> PackageQuery:
        """Build the per-package query for a name."""
        return PackageQuery(
            name=name,
            force=self.force,
            allow_import=self.allow_import,
            scope=self.scope,
        )


@dataclass(slots=True)
class _Decision:
    """Outcome of the decision table for one package."""

    status: ReconcileStatus
    target: str
    removals: list[InstalledRecord] = field(default_factory=list)
    install: bool = False
    upgrade_from: InstalledRecord | None = None
    kept: InstalledRecord | None = None

    @property
    def previous_versions(self) -> tuple[str, ...]:
        versions = [r.version for r in self.removals]
        if self.upgrade_from is not None:
            versions.append(self.upgrade_from.version)
        return tuple(versions)


class Reconciler:
    """Brings installed packages in line with their latest releases.

    Packages are processed one at a time in input order. Lookups may run
    ahead on a thread pool; mutations never overlap.

    Example:
        >>> reconciler = Reconciler(store)
        >>> for result in reconciler.reconcile(["requests"], ReconcileOptions()):
        ...     print(result.name, result.status.value)
    """

    def __init__(
        self,
        store: PackageStore,
        confirm: ConfirmFn = always_confirm,
        query_workers: int = 1,
    ) -> None:
        """Initialize the reconciler.

        Args:
            store: Package store to query and mutate.
            confirm: Asked before every mutating action; declining skips
                the package.
            query_workers: Threads used for the read-only lookups.
        """
        self._store = store
        self._confirm = confirm
        self._query_workers = query_workers

    def reconcile(
        self,
        names: Sequence[str],
        options: ReconcileOptions | None = None,
        cancel: threading.Event | None = None,
    ) -> list[ReconciliationResult]:
        """Reconcile each package and return one result per name.

        Args:
            names: Package names, processed in order.
            options: Run options (defaults if None).
            cancel: Checked between packages; once set, the remaining
                packages are reported as SKIPPED.

        Returns:
            One ReconciliationResult per name, in input order.

        Raises:
            ValueError: If a name is empty.
            UntrustedSourceError: If the package source is untrusted and
                the confirmation capability declines to trust it.
        """
        options = options or ReconcileOptions()
        queries = [options.query_for(name) for name in names]

        ensure_source_trusted(self._store, self._confirm)

        results: list[ReconciliationResult] = []
        states = iter_package_states(self._store, names, workers=self._query_workers)
        try:
            for query in queries:
                if cancel is not None and cancel.is_set():
                    results.append(
                        ReconciliationResult(
                            name=query.name,
                            status=ReconcileStatus.SKIPPED,
                            message="Cancelled before processing",
                        )
                    )
                    continue

                state = next(states)
                result = self._reconcile_one(query, state)
                logger.info("%s: %s", query.name, result.status.value)
                results.append(result)
        finally:
            states.close()

        return results

    def _reconcile_one(self, query: PackageQuery, state: PackageState) -> ReconciliationResult:
        """Run the decision table and the resulting actions for one package."""
        if state.error is not None:
            return ReconciliationResult(
                name=query.name,
                status=ReconcileStatus.FAILED,
                message="Package lookup failed",
                error=state.error,
            )

        if state.remote is None:
            return ReconciliationResult(
                name=query.name,
                status=ReconcileStatus.NOT_FOUND,
                message=f"{query.name} was not found on {self._store.source_name}",
            )

        decision = decide(query, state)

        actions = planned_actions(query, decision)
        for action in actions:
            if not self._confirm(action):
                logger.info("Declined: %s", action.describe())
                return ReconciliationResult(
                    name=query.name,
                    status=ReconcileStatus.SKIPPED,
                    message=f"Declined: {action.describe()}",
                )

        try:
            status, message = self._execute(query, decision)
        except Exception as e:  # any failure ends only this package
            logger.warning("Reconciling %s failed: %s", query.name, e)
            return ReconciliationResult(
                name=query.name,
                status=ReconcileStatus.FAILED,
                previous_versions=decision.previous_versions,
                message=f"Failed to reconcile {query.name}",
                error=str(e) or type(e).__name__,
            )

        installed_version = decision.kept.version if decision.kept else decision.target
        import_error = None
        if query.allow_import:
            import_error = self._load(query.name)

        return ReconciliationResult(
            name=query.name,
            status=status,
            installed_version=installed_version,
            previous_versions=decision.previous_versions,
            message=message,
            import_error=import_error,
        )

    def _execute(self, query: PackageQuery, decision: _Decision) -> tuple[ReconcileStatus, str]:
        """Perform the store calls of a decision.

        Returns:
            The final status (an upgrade may fall back to INSTALLED) and
            a human-readable message.
        """
        name = query.name
        target = decision.target

        for record in decision.removals:
            self._store.uninstall(record)

        if decision.upgrade_from is not None:
            previous = decision.upgrade_from.version
            try:
                self._store.upgrade(name, target)
            except Exception as e:
                logger.info("Upgrade of %s failed (%s), installing %s instead", name, e, target)
                self._store.install(name, target, query.scope, allow_side_by_side=True)
                message = f"Installed {target} (upgrade from {previous} failed: {e})"
                return ReconcileStatus.INSTALLED, message
            return ReconcileStatus.UPDATED, f"Updated from {previous} to {target}"

        if decision.install:
            self._store.install(name, target, query.scope)

        return decision.status, _describe(decision, query.scope)

    def _load(self, name: str) -> str | None:
        """Import the package; return the error text if that fails."""
        try:
            self._store.load_into_session(name)
        except Exception as e:  # arbitrary package code runs on import
            logger.warning("Importing %s failed: %s", name, e)
            return str(e) or type(e).__name__
        return None


def decide(query: PackageQuery, state: PackageState) -> _Decision:
    """Classify a package into one row of the decision table.

    Args:
        query: Per-package request.
        state: Installed copies and latest release; remote must be set.

    Returns:
        The decision for the package.
    """
    if state.remote is None:
        msg = "decide() requires a remote record"
        raise ValueError(msg)

    target = state.remote.version
    installed = list(state.installed)

    if query.force:
        return _Decision(
            status=ReconcileStatus.INSTALLED_TO_LATEST,
            target=target,
            removals=installed,
            install=True,
        )

    if not installed:
        return _Decision(status=ReconcileStatus.NEW_INSTALL, target=target, install=True)

    if len(installed) == 1:
        record = installed[0]
        if record.scope is not None and record.scope != query.scope:
            status = (
                ReconcileStatus.MOVED_TO_ALL_USERS
                if query.scope == InstallScope.ALL_USERS
                else ReconcileStatus.MOVED_TO_CURRENT_USER
            )
            return _Decision(status=status, target=target, removals=[record], install=True)

        if versions_equal(record.version, target):
            return _Decision(status=ReconcileStatus.UP_TO_DATE, target=target, kept=record)

        return _Decision(status=ReconcileStatus.UPDATED, target=target, upgrade_from=record)

    kept = state.find_installed(target)
    if kept is not None:
        return _Decision(
            status=ReconcileStatus.REMOVED_OLDER,
            target=target,
            removals=[r for r in installed if r is not kept],
            kept=kept,
        )

    return _Decision(
        status=ReconcileStatus.INSTALLED,
        target=target,
        removals=installed,
        install=True,
    )


def planned_actions(query: PackageQuery, decision: _Decision) -> list[PlannedAction]:
    """List the mutating actions a decision will perform, in order."""
    actions: list[PlannedAction] = [
        create_uninstall_action(
            package=query.name,
            version=record.version,
            scope=record.scope,
            reason=f"installed in {record.path}",
        )
        for record in decision.removals
    ]

    if decision.upgrade_from is not None:
        actions.append(
            create_upgrade_action(
                package=query.name,
                version=decision.target,
                reason=f"installed version is {decision.upgrade_from.version}",
            )
        )
    elif decision.install:
        actions.append(
            create_install_action(
                package=query.name,
                version=decision.target,
                scope=query.scope,
                reason=decision.status.value.replace("_", " "),
            )
        )

    return actions


def _describe(decision: _Decision, scope: InstallScope) -> str:
    """Return the result message for a decision that went as planned."""
    target = decision.target
    removed = ", ".join(decision.previous_versions)

    status = decision.status
    if status == ReconcileStatus.UP_TO_DATE:
        return f"{target} is the latest version"
    if status == ReconcileStatus.NEW_INSTALL:
        return f"Installed {target} for {scope.label}"
    if status == ReconcileStatus.INSTALLED_TO_LATEST:
        if removed:
            return f"Reinstalled {target} (removed {removed})"
        return f"Installed {target}"
    if status in (ReconcileStatus.MOVED_TO_ALL_USERS, ReconcileStatus.MOVED_TO_CURRENT_USER):
        return f"Moved to {scope.label}: removed {removed}, installed {target}"
    if status == ReconcileStatus.REMOVED_OLDER:
        return f"Kept {target}, removed {removed}"
    return f"Installed {target} (removed {removed})"
