"""Package store collaborators.

This module exports the PackageStore interface and its pip-backed
implementation.
"""

from pipctl.store.base import PackageStore
from pipctl.store.index import IndexClient
from pipctl.store.operator import PipOperator
from pipctl.store.pip import PipPackageStore
from pipctl.store.site import SiteScanner

__all__ = ["IndexClient", "PackageStore", "PipOperator", "PipPackageStore", "SiteScanner"]
