"""Shared option parsing and loading helpers for CLI commands.

This module provides helpers used across multiple CLI command modules:
parsing comma-separated options, loading configuration and Brewfiles
with user-friendly errors, and running install/remove batches.
"""

import typer
from rich.markup import escape

from brewsync.cli.display import print_output_line, print_progress
from brewsync.core.brewfile import BrewfileError, BrewfileNotFoundError, load_brewfile
from brewsync.core.config import (
    ConfigError,
    ConfigNotFoundError,
    get_machine,
    load_config,
    load_ignore,
    require_current_machine,
)
from brewsync.core.executor import Orchestrator
from brewsync.core.paths import get_config_path
from brewsync.installers import build_registry
from brewsync.models.action import BatchResult
from brewsync.models.config import AppConfig, IgnoreConfiguration
from brewsync.models.package import PackageCollection, PackageType
from brewsync.utils.formatting import console, print_error, print_info, print_warning


def split_csv(value: str | None) -> list[str]:
    """Split a comma-separated option into trimmed, non-empty items."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def parse_package_types(value: str | None) -> tuple[PackageType, ...]:
    """Parse a comma-separated list of package types.

    Args:
        value: Option value such as "brew,cask". None or empty means all.

    Returns:
        Tuple of PackageType, without duplicates.

    Raises:
        typer.Exit: If any type is unknown.
    """
    types: list[PackageType] = []
    for item in split_csv(value):
        try:
            package_type = PackageType.parse(item)
        except ValueError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e
        if package_type not in types:
            types.append(package_type)
    return tuple(types)


def require_config() -> AppConfig:
    """Load config.toml or exit with a helpful error message.

    Raises:
        typer.Exit: If the config cannot be loaded.
    """
    try:
        return load_config()
    except ConfigNotFoundError as e:
        print_error(f"Config not found: {get_config_path()}")
        print_info("Run 'brewsync config init' to create one.")
        raise typer.Exit(code=1) from e
    except ConfigError as e:
        print_error(f"Failed to load config: {e}")
        raise typer.Exit(code=1) from e


def require_ignore() -> IgnoreConfiguration:
    """Load ignore.toml (empty if missing) or exit on a broken file.

    Raises:
        typer.Exit: If the ignore file cannot be parsed.
    """
    try:
        return load_ignore()
    except ConfigError as e:
        print_error(f"Failed to load ignore rules: {e}")
        raise typer.Exit(code=1) from e


def require_current(config: AppConfig) -> str:
    """Resolve the current machine or exit.

    Raises:
        typer.Exit: If the current machine cannot be determined.
    """
    try:
        return require_current_machine(config)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def load_machine_packages(
    config: AppConfig,
    machine: str,
    missing_ok: bool = False,
) -> PackageCollection:
    """Load a machine's Brewfile, reporting skipped lines as warnings.

    Args:
        config: Loaded configuration.
        machine: Machine name.
        missing_ok: Treat a missing Brewfile as empty instead of failing.

    Returns:
        Packages declared in the Brewfile.

    Raises:
        typer.Exit: If the machine is unknown or the Brewfile unreadable.
    """
    try:
        path = get_machine(config, machine).brewfile
        result = load_brewfile(path)
    except BrewfileNotFoundError as e:
        if missing_ok:
            print_warning(f"Brewfile for '{machine}' not found, assuming empty")
            return PackageCollection()
        print_error(str(e))
        raise typer.Exit(code=1) from e
    except (ConfigError, BrewfileError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    for warning in result.warnings:
        line = escape(warning.line)
        print_warning(f"{path}:{warning.line_number}: skipped ({warning.reason}): {line}")
    return result.packages


def run_plan(
    additions: PackageCollection,
    removals: PackageCollection,
    stream_output: bool = False,
) -> list[BatchResult]:
    """Install then remove packages, printing per-item progress.

    Args:
        additions: Packages to install.
        removals: Packages to remove.
        stream_output: Show live output from installers that support it.

    Returns:
        Batch results for the batches that ran (installs first).
    """
    orchestrator = Orchestrator(build_registry())
    batches: list[BatchResult] = []

    if additions:
        console.print(f"\n[bold]Installing {len(additions)} package(s)...[/bold]")
        batches.append(
            orchestrator.install_many(
                additions,
                on_progress=lambda event: print_progress(event, "Installed"),
                on_output=print_output_line if stream_output else None,
            )
        )

    if removals:
        console.print(f"\n[bold]Removing {len(removals)} package(s)...[/bold]")
        batches.append(
            orchestrator.uninstall_many(
                removals,
                on_progress=lambda event: print_progress(event, "Removed"),
            )
        )

    return batches
