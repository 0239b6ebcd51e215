"""Locations of brewsync's files.

All files live in one directory, resolved in this order:

1. ``$BREWSYNC_CONFIG_DIR`` (used as-is)
2. ``$XDG_CONFIG_HOME/brewsync``
3. ``~/.config/brewsync``

Brewfiles may live anywhere; their paths come from config.toml.
"""

import os
from pathlib import Path

APP_NAME = "brewsync"

CONFIG_DIR_ENV = "BREWSYNC_CONFIG_DIR"


def get_config_dir() -> Path:
    """Return the directory holding config.toml, ignore.toml and theme.toml."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    xdg_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg_home) if xdg_home else Path.home() / ".config"
    return base / APP_NAME


def get_config_path() -> Path:
    return get_config_dir() / "config.toml"


def get_ignore_path() -> Path:
    return get_config_dir() / "ignore.toml"


def get_theme_path() -> Path:
    return get_config_dir() / "theme.toml"


def ensure_config_dir() -> Path:
    """Create the config directory (and parents) if needed.

    Returns:
        Path to the config directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    path = get_config_dir()
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        msg = f"Cannot create config directory {path}: {e.strerror or e}"
        raise RuntimeError(msg) from e
    return path
