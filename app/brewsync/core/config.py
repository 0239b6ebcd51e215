"""Configuration file I/O.

Loads and saves ``config.toml`` (machines and machine-specific packages)
and ``ignore.toml`` (ignore rules). Both files are TOML, read with
tomllib and written atomically with tomli_w.
"""

import logging
import os
import socket
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile

import tomli_w
from pydantic import BaseModel, ValidationError

from brewsync.core.paths import get_config_path, get_ignore_path
from brewsync.models.config import AppConfig, IgnoreConfiguration, MachineConfig

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when a config file has invalid TOML syntax."""


class ConfigValidationError(ConfigError):
    """Raised when a config file does not match the schema."""


def get_local_hostname() -> str:
    """Return the short local hostname (without domain)."""
    return socket.gethostname().split(".")[0]


def _read_toml(path: Path, label: str) -> dict[str, object]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML syntax in {label} {path}: {e}"
        raise ConfigParseError(msg) from e
    except OSError as e:
        msg = f"Failed to read {label} {path}: {e}"
        raise ConfigError(msg) from e


def _write_toml(data: dict[str, object], path: Path, label: str) -> Path:
    """Write a TOML document atomically.

    Raises:
        ConfigError: If the file cannot be written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        msg = f"Failed to write {label}: {e}"
        raise ConfigError(msg) from e

    logger.debug("Wrote %s to %s", label, path)
    return path


def _to_toml_data(model: BaseModel) -> dict[str, object]:
    """Dump a model to TOML-compatible data (no None values)."""
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


def load_config(path: Path | None = None) -> AppConfig:
    """Load the main configuration.

    Args:
        path: Path to config.toml. If None, uses the default path.

    Returns:
        Validated AppConfig.

    Raises:
        ConfigNotFoundError: If the file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigValidationError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        msg = f"Config not found: {config_path}"
        raise ConfigNotFoundError(msg)

    data = _read_toml(config_path, "config")
    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid config content in {config_path}: {e}"
        raise ConfigValidationError(msg) from e


def save_config(config: AppConfig, path: Path | None = None) -> Path:
    """Save the main configuration atomically.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    return _write_toml(_to_toml_data(config), path or get_config_path(), "config")


def load_ignore(path: Path | None = None) -> IgnoreConfiguration:
    """Load ignore rules.

    A missing file is not an error: it yields an empty configuration.

    Args:
        path: Path to ignore.toml. If None, uses the default path.

    Returns:
        Validated IgnoreConfiguration.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigValidationError: If the content doesn't match the schema.
    """
    ignore_path = path or get_ignore_path()

    if not ignore_path.exists():
        logger.debug("No ignore file at %s; using empty rules", ignore_path)
        return IgnoreConfiguration()

    data = _read_toml(ignore_path, "ignore file")
    try:
        return IgnoreConfiguration.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid ignore rules in {ignore_path}: {e}"
        raise ConfigValidationError(msg) from e


def save_ignore(config: IgnoreConfiguration, path: Path | None = None) -> Path:
    """Save ignore rules atomically.

    Returns:
        Path where the rules were saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    return _write_toml(_to_toml_data(config), path or get_ignore_path(), "ignore file")


def create_default_config() -> AppConfig:
    """Create a starter config describing the local machine.

    The machine is named after the short hostname and its Brewfile lives
    at ``~/.config/brewsync/Brewfile.<hostname>``.

    Returns:
        AppConfig with a single machine marked as current.
    """
    hostname = get_local_hostname()
    brewfile = get_config_path().parent / f"Brewfile.{hostname}"
    return AppConfig(
        machines={hostname: MachineConfig(hostname=hostname, brewfile=brewfile)},
        current_machine=hostname,
    )


def get_machine(config: AppConfig, name: str) -> MachineConfig:
    """Look up a configured machine by name.

    Raises:
        ConfigError: If no machine with that name exists.
    """
    machine = config.machines.get(name)
    if machine is None:
        known = ", ".join(sorted(config.machines)) or "none"
        msg = f"Unknown machine '{name}' (configured: {known})"
        raise ConfigError(msg)
    return machine


def require_current_machine(config: AppConfig) -> str:
    """Resolve this machine's name or fail.

    Raises:
        ConfigError: If neither ``current_machine`` nor a hostname match
            identifies a configured machine.
    """
    name = config.resolve_current_machine(get_local_hostname())
    if name is None:
        msg = (
            "Cannot determine the current machine; set 'current_machine' "
            "in config.toml or a matching 'hostname' for one of the machines"
        )
        raise ConfigError(msg)
    get_machine(config, name)
    return name


def resolve_source(config: AppConfig, requested: str | None, current: str) -> str:
    """Pick the source machine for sync/diff.

    Args:
        config: Loaded configuration.
        requested: Machine given on the command line, if any.
        current: Name of the current machine.

    Returns:
        Name of a configured machine.

    Raises:
        ConfigError: If no source is given or configured, it is unknown, or
            it is the current machine.
    """
    source = requested or config.default_source
    if source is None:
        msg = "No source machine given; use --from or set 'default_source'"
        raise ConfigError(msg)
    if source == current:
        msg = f"Cannot use the current machine '{source}' as the source"
        raise ConfigError(msg)
    get_machine(config, source)
    return source
