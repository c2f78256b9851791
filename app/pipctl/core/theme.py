"""Color theme for pipctl output.

The bundled data/theme.toml holds the defaults; a theme.toml in the
config directory may override any subset of them.
"""

import functools
import logging
import re
import tomllib
from importlib import resources
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator
from rich.theme import Theme

from pipctl.core.paths import get_theme_path

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}){1,2}")


class ThemeColors(BaseModel):
    """Hex colors (#RGB or #RRGGBB) for the styles used in tables and messages."""

    model_config = ConfigDict(extra="forbid")

    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"

    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    # Reconcile results
    added: str = "#c1ff62"
    removed: str = "#f53263"
    changed: str = "#0e8ac8"

    # Report rows
    up_to_date: str = "#03b971"
    outdated: str = "#faf870"
    unknown: str = "#d44ebc"

    @field_validator("*", mode="before")
    @classmethod
    def check_hex(cls, v: object) -> str:
        """Accept only hex color strings."""
        if not isinstance(v, str) or not _HEX_COLOR.fullmatch(v.strip()):
            msg = f"invalid hex color {v!r}"
            raise ValueError(msg)
        return v.strip()


def _read_colors(path: Path) -> dict[str, str]:
    """Return the string entries of the [colors] table, or {} if unreadable."""
    try:
        with open(path, "rb") as f:
            colors = tomllib.load(f).get("colors", {})
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return {}

    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: [colors] is not a table", path)
        return {}
    return {k: v for k, v in colors.items() if isinstance(v, str)}


def load_theme() -> ThemeColors:
    """Load the bundled colors with the user's overrides applied.

    An invalid override set is logged and the defaults are used instead.
    """
    bundled = resources.files("pipctl.data").joinpath("theme.toml")
    colors = _read_colors(Path(str(bundled)))
    colors.update(_read_colors(get_theme_path()))

    try:
        return ThemeColors(**colors)
    except ValueError as e:
        logger.warning("Invalid theme, using defaults: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme, loading the colors if none are given."""
    colors = colors or load_theme()
    styles = colors.model_dump()
    styles["error"] = f"bold {colors.error}"
    styles["outdated"] = f"bold {colors.outdated}"
    styles["bold_header"] = f"bold {colors.header}"
    styles["dim"] = colors.muted
    return Theme(styles)


@functools.cache
def get_theme() -> Theme:
    """Rich theme shared by the console instances, built once."""
    return get_rich_theme()
