"""User configuration for emcp-tools.

Configuration is optional and stored in ~/.config/emcp-tools/config.toml.
It supplies defaults for command options so that scheduled runs can
invoke a command without repeating its arguments:

    [cleanup]
    dir = "/local/work"
    age = "7d"
"""

import logging
import os
import tomllib
from datetime import timedelta
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from emcptools.core.duration import DurationParseError, parse_duration
from emcptools.core.paths import get_config_path

logger = logging.getLogger(__name__)


class CleanupSettings(BaseModel):
    """Defaults for the cleanup-stale-data command.

    Attributes:
        dir: Directory to clean when --dir is not given.
        age: Age threshold (e.g. "7d") when --age is not given.
    """

    model_config = ConfigDict(extra="forbid")

    dir: Annotated[
        Path | None,
        Field(description="Default directory to clean"),
    ] = None
    age: Annotated[
        str | None,
        Field(description="Default age threshold (e.g. 7d or 5h)"),
    ] = None

    @field_validator("age")
    @classmethod
    def validate_age(cls, v: str | None) -> str | None:
        """Reject age strings that cannot be parsed as a duration."""
        if v is None:
            return v
        try:
            parse_duration(v)
        except DurationParseError as e:
            raise ValueError(str(e)) from None
        return v.strip()

    @property
    def age_delta(self) -> timedelta | None:
        """Parsed age threshold, or None if not configured."""
        if self.age is None:
            return None
        return parse_duration(self.age)


class ToolsConfig(BaseModel):
    """Top-level emcp-tools configuration."""

    model_config = ConfigDict(extra="forbid")

    cleanup: CleanupSettings = Field(default_factory=CleanupSettings)


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the config file is not valid TOML."""


def load_config(path: Path | None = None) -> ToolsConfig:
    """Load configuration from a TOML file.

    A missing file is not an error: the default configuration is returned.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated ToolsConfig object.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        logger.debug("No config file at %s, using defaults", config_path)
        return ToolsConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config {config_path}: {e}") from e

    try:
        return ToolsConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content in {config_path}: {e}") from e


def save_config(config: ToolsConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written to a temporary file in the same directory and
    moved into place with os.replace().

    Args:
        config: The ToolsConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    data = _config_to_dict(config)

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
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config {config_path}: {e}") from e

    return config_path


def _config_to_dict(config: ToolsConfig) -> dict[str, object]:
    """Convert ToolsConfig to a dictionary for TOML serialization.

    TOML has no null, so unset values are omitted.
    """
    cleanup: dict[str, object] = {}
    if config.cleanup.dir is not None:
        cleanup["dir"] = str(config.cleanup.dir)
    if config.cleanup.age is not None:
        cleanup["age"] = config.cleanup.age

    return {"cleanup": cleanup}
