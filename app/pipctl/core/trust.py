"""Trust-policy gate for the package source.

Installs are only allowed from a trusted source. The gate runs once
before any package is reconciled and asks for confirmation before it
marks an untrusted source as trusted.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from pipctl.core.errors import UntrustedSourceError
from pipctl.models.action import ActionType, PlannedAction

if TYPE_CHECKING:
    from pipctl.store.base import PackageStore

logger = logging.getLogger(__name__)


def ensure_source_trusted(
    store: PackageStore,
    confirm: Callable[[PlannedAction], bool],
) -> None:
    """Make sure the store's package source is trusted.

    Does nothing if the source is already trusted.

    Args:
        store: Package store whose source is checked.
        confirm: Capability asked before the source is marked trusted.

    Raises:
        UntrustedSourceError: If the source is untrusted and the caller
            declines to trust it.
    """
    if store.is_source_trusted():
        return

    action = PlannedAction(
        action_type=ActionType.TRUST,
        package=store.source_name,
        version="",
        reason="installs are only allowed from trusted sources",
    )
    if not confirm(action):
        msg = f"Package source {store.source_name} is not trusted"
        raise UntrustedSourceError(msg)

    store.trust_source()
    logger.info("Package source %s is now trusted", store.source_name)
