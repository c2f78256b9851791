"""Loading installed packages into the running interpreter."""

import importlib
import logging
import site
import sys
from importlib import metadata
from types import ModuleType

logger = logging.getLogger(__name__)


def top_level_modules(name: str) -> list[str]:
    """Return the importable top-level module names of a distribution.

    Reads top_level.txt when the distribution ships one, otherwise derives
    the names from the installed file list.

    Args:
        name: Distribution name.

    Returns:
        Module names, never empty (falls back to the normalized name).
    """
    fallback = [name.replace("-", "_").replace(".", "_").lower()]
    try:
        dist = metadata.distribution(name)
    except metadata.PackageNotFoundError:
        return fallback

    top_level = dist.read_text("top_level.txt")
    if top_level:
        listed = [line.strip() for line in top_level.splitlines() if line.strip()]
        if listed:
            return listed

    modules: list[str] = []
    for file in dist.files or []:
        parts = file.parts
        if not parts or parts[0] in ("..", "__pycache__") or parts[0].endswith(
            (".dist-info", ".egg-info", ".data")
        ):
            continue
        if len(parts) == 1:
            if not parts[0].endswith(".py"):
                continue
            module = parts[0][:-3]
        else:
            module = parts[0]
        if module.isidentifier() and module not in modules:
            modules.append(module)

    return modules or fallback


def _refresh_user_site() -> None:
    """Put the user site on sys.path if it was created after startup."""
    if not site.ENABLE_USER_SITE:
        return
    user_site = site.getusersitepackages()
    if user_site not in sys.path:
        site.addsitedir(user_site)


def load_package(name: str) -> list[ModuleType]:
    """Import every top-level module of an installed distribution.

    Args:
        name: Distribution name.

    Returns:
        The imported modules.

    Raises:
        ImportError: If any module fails to import.
    """
    _refresh_user_site()
    importlib.invalidate_caches()

    loaded: list[ModuleType] = []
    for module_name in top_level_modules(name):
        if module_name.startswith("_"):
            continue
        logger.debug("Importing %s for %s", module_name, name)
        loaded.append(importlib.import_module(module_name))

    if not loaded:
        msg = f"No importable modules found for {name}"
        raise ImportError(msg)
    return loaded
