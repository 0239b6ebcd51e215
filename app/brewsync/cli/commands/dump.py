"""Dump command implementation.

Writes the packages installed on this machine to its Brewfile.
"""

from typing import Annotated

import typer

from brewsync.cli.types import require_config, require_current
from brewsync.core.brewfile import (
    BrewfileError,
    BrewfileNotFoundError,
    load_brewfile,
    save_brewfile,
)
from brewsync.core.config import ConfigError, get_machine
from brewsync.core.dump import collect_packages, preserve_descriptions
from brewsync.installers import build_registry
from brewsync.models.package import PackageCollection
from brewsync.utils.formatting import console, print_error, print_info, print_success, print_warning

app = typer.Typer(
    help="Write installed packages to this machine's Brewfile.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def dump_brewfile(
    ctx: typer.Context,
    machine: Annotated[
        str | None,
        typer.Option(
            "--machine",
            "-m",
            help="Machine whose Brewfile to write (default: current machine).",
        ),
    ] = None,
    brew_bundle: Annotated[
        bool,
        typer.Option(
            "--brew-bundle/--no-brew-bundle",
            help="Use 'brew bundle dump' for Homebrew packages (includes descriptions).",
        ),
    ] = True,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be written without writing.",
        ),
    ] = False,
) -> None:
    """Write installed packages to a Brewfile.

    Descriptions already present in the Brewfile are kept for packages
    that are still installed.

    Examples:
        brewsync dump                   # Update this machine's Brewfile
        brewsync dump --dry-run         # Show counts only
    """
    # Skip if a subcommand is being invoked
    if ctx.invoked_subcommand is not None:
        return

    config = require_config()
    name = machine or require_current(config)
    try:
        path = get_machine(config, name).brewfile
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    with console.status("Collecting installed packages..."):
        packages, errors = collect_packages(build_registry(), use_brew_bundle=brew_bundle)
    for error in errors:
        print_warning(f"Could not list {error}")

    try:
        existing = load_brewfile(path).packages
    except BrewfileNotFoundError:
        existing = PackageCollection()
    except BrewfileError as e:
        print_warning(f"Existing Brewfile unreadable, descriptions not preserved: {e}")
        existing = PackageCollection()
    packages = preserve_descriptions(packages, existing)

    for type_value, total in packages.count_by_type().items():
        console.print(f"  [package.type]{type_value}[/package.type]: {total}")

    if dry_run:
        print_info(f"\nDry-run mode: would write {len(packages)} package(s) to {path}")
        return

    try:
        save_brewfile(packages, path)
    except BrewfileError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Wrote {len(packages)} package(s) to {path}")
