"""Installed package scanner for a Python interpreter.

Asks the managed interpreter for its site directories and reads the
distribution metadata found in each of them. Every directory is scanned
separately so that shadowed duplicate installs are reported too.
"""

import json
import logging
import subprocess
from collections.abc import Iterator
from dataclasses import dataclass
from importlib import metadata
from pathlib import Path

from packaging.utils import canonicalize_name

from pipctl.models.package import InstalledRecord, InstallScope
from pipctl.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)

# Printed by the managed interpreter; keep it free of third-party imports.
_PROBE_SCRIPT = """\
import json, site, sys
dirs = []
try:
    dirs.extend(site.getsitepackages())
except AttributeError:
    pass
dirs.extend(p for p in sys.path if p.endswith(("site-packages", "dist-packages")))
print(json.dumps({
    "user_site": site.getusersitepackages() if site.ENABLE_USER_SITE else None,
    "site_dirs": dirs,
}))
"""


@dataclass(frozen=True, slots=True)
class SiteLayout:
    """Site directories of an interpreter.

    Attributes:
        site_dirs: Machine-wide site directories in sys.path order.
        user_site: User site directory, or None if user site is disabled
            (virtual environments, python -s).
    """

    site_dirs: tuple[str, ...]
    user_site: str | None = None

    @property
    def has_user_site(self) -> bool:
        """Whether --user installs are possible for this interpreter."""
        return self.user_site is not None

    @property
    def all_dirs(self) -> tuple[str, ...]:
        """All site directories, user site first (it shadows site-packages)."""
        dirs: list[str] = []
        for d in (self.user_site, *self.site_dirs):
            if d and d not in dirs:
                dirs.append(d)
        return tuple(dirs)

    def scope_for(self, path: str) -> InstallScope | None:
        """Return the scope of a site directory.

        Without a user site there is no second scope to move between, so
        the scope is unknown (None) and never treated as wrong.
        """
        if self.user_site is None:
            return None
        if Path(path).resolve() == Path(self.user_site).resolve():
            return InstallScope.CURRENT_USER
        return InstallScope.ALL_USERS


class SiteScanner:
    """Scanner for distributions installed in an interpreter.

    Attributes:
        python: Path of the managed interpreter.
    """

    _PROBE_TIMEOUT: float = 30.0

    def __init__(self, python: str) -> None:
        self.python = python
        self._layout: SiteLayout | None = None

    def is_available(self) -> bool:
        """Check if the managed interpreter exists."""
        return command_exists(self.python)

    @property
    def layout(self) -> SiteLayout:
        """Site layout of the managed interpreter, probed once and cached.

        Raises:
            RuntimeError: If the interpreter cannot be probed.
        """
        if self._layout is None:
            self._layout = self._probe_layout()
        return self._layout

    def refresh(self) -> None:
        """Forget the cached layout; the next scan probes again."""
        self._layout = None

    def _probe_layout(self) -> SiteLayout:
        try:
            result = run_command([self.python, "-c", _PROBE_SCRIPT], timeout=self._PROBE_TIMEOUT)
        except (FileNotFoundError, OSError, subprocess.TimeoutExpired) as e:
            msg = f"Cannot run interpreter {self.python}: {e}"
            raise RuntimeError(msg) from e

        if not result.success:
            msg = f"Interpreter probe failed: {result.output or 'unknown error'}"
            raise RuntimeError(msg)

        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            msg = f"Unexpected interpreter probe output: {result.stdout[:200]!r}"
            raise RuntimeError(msg) from e

        site_dirs: list[str] = []
        for d in data.get("site_dirs", []):
            if d not in site_dirs and d != data.get("user_site"):
                site_dirs.append(d)

        layout = SiteLayout(
            site_dirs=tuple(site_dirs),
            user_site=data.get("user_site"),
        )
        logger.debug("Site layout of %s: %s", self.python, layout)
        return layout

    def scan(self, name: str | None = None) -> Iterator[InstalledRecord]:
        """Yield installed copies, optionally only those of one package.

        Args:
            name: Package name to filter on (any normalization), or None.

        Yields:
            InstalledRecord for every distribution found, including
            copies shadowed by an earlier site directory.

        Raises:
            RuntimeError: If the interpreter cannot be probed.
        """
        wanted = canonicalize_name(name) if name else None
        layout = self.layout

        for site_dir in layout.all_dirs:
            if not Path(site_dir).is_dir():
                continue

            scope = layout.scope_for(site_dir)
            for dist in metadata.distributions(path=[site_dir]):
                record = self._to_record(dist, site_dir, scope)
                if record is None:
                    continue
                if wanted is not None and canonicalize_name(record.name) != wanted:
                    continue
                yield record

    def _to_record(
        self,
        dist: metadata.Distribution,
        site_dir: str,
        scope: InstallScope | None,
    ) -> InstalledRecord | None:
        """Convert distribution metadata into an InstalledRecord.

        Returns:
            InstalledRecord, or None if the metadata is incomplete.
        """
        dist_name = dist.metadata.get("Name") if dist.metadata is not None else None
        version = dist.version
        if not dist_name or not version:
            logger.debug("Skipping distribution with incomplete metadata in %s", site_dir)
            return None

        installer = (dist.read_text("INSTALLER") or "").strip() or None
        return InstalledRecord(
            name=dist_name,
            version=version,
            path=site_dir,
            scope=scope,
            installer=installer,
        )
