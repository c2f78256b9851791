"""Application configuration and settings.

This module provides the configuration model and I/O functions for
pipctl. Configuration is stored in ~/.config/pipctl/config.toml and
passed explicitly to the reconciler and reporter.
"""

import logging
import os
import sys
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pipctl.core.paths import get_config_path
from pipctl.models.package import InstallScope

logger = logging.getLogger(__name__)

DEFAULT_INDEX_URL = "https://pypi.org"


class IndexConfig(BaseModel):
    """Package index the reconciler installs from.

    Attributes:
        name: Display name of the index.
        url: Base URL; the JSON API lives under <url>/pypi/<name>/json
            and the simple API under <url>/simple.
        trusted: Whether installs from this index are allowed.
    """

    model_config = ConfigDict(extra="forbid")

    name: Annotated[str, Field(min_length=1, description="Display name")] = "pypi"
    url: Annotated[str, Field(description="Index base URL")] = DEFAULT_INDEX_URL
    trusted: Annotated[bool, Field(description="Allow installs from this index")] = False

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Require an http(s) URL and strip trailing slashes."""
        url = v.strip().rstrip("/")
        if not url.startswith(("http://", "https://")):
            msg = f"Index URL must start with http:// or https://, got {v!r}"
            raise ValueError(msg)
        return url

    @property
    def simple_url(self) -> str:
        """URL of the simple API, as passed to pip --index-url."""
        return f"{self.url}/simple"


class AppConfig(BaseModel):
    """Configuration for pipctl.

    Attributes:
        python: Interpreter whose packages are managed.
        index: Package index settings.
        default_scope: Scope used when the CLI is not given one.
        query_workers: Threads used for the read-only query phase.
        registry_timeout_seconds: Timeout for each index request.
        pip_timeout_seconds: Timeout for each pip subprocess.
        record_history: Append reconcile runs to the history file.
    """

    model_config = ConfigDict(extra="forbid")

    python: Annotated[str, Field(min_length=1, description="Managed interpreter")] = (
        sys.executable
    )
    index: IndexConfig = Field(default_factory=IndexConfig)
    default_scope: InstallScope = InstallScope.CURRENT_USER
    query_workers: Annotated[int, Field(ge=1, le=16)] = 4
    registry_timeout_seconds: Annotated[float, Field(ge=1, le=300)] = 15.0
    pip_timeout_seconds: Annotated[float, Field(ge=30, le=3600)] = 600.0
    record_history: bool = True


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> AppConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default path.

    Returns:
        Validated AppConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def load_config_or_default(path: Path | None = None) -> AppConfig:
    """Load configuration, falling back to defaults if the file is missing.

    Raises:
        ConfigError: If the file exists but is invalid.
    """
    try:
        return load_config(path)
    except ConfigNotFoundError:
        logger.debug("No config file found, using defaults")
        return AppConfig()


def save_config(config: AppConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The AppConfig object to save.
        path: Path to save the config. If None, uses the default path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(config_to_dict(config), f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def config_to_dict(config: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to a dictionary for TOML serialization.

    Args:
        config: The AppConfig to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    return config.model_dump(mode="json", exclude_none=True)
