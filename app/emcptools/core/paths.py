"""XDG-compliant path management for emcp-tools.

Only configuration is persisted; the config directory follows the XDG Base
Directory Specification:

- Config: ~/.config/emcp-tools/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "emcp-tools"


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/emcp-tools/ (or XDG_CONFIG_HOME/emcp-tools/).
    """
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_config_path() -> Path:
    """Get the configuration file path.

    Returns:
        Path to ~/.config/emcp-tools/config.toml.
    """
    return get_config_dir() / "config.toml"
