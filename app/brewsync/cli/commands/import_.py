"""Import command implementation.

Installs packages that one or more source machines have and the current
machine lacks. Import never removes anything.
"""

from typing import Annotated

import typer

from brewsync.cli.display import create_results_table, format_grouped, print_results_summary
from brewsync.cli.types import (
    load_machine_packages,
    parse_package_types,
    require_config,
    require_current,
    require_ignore,
    run_plan,
    split_csv,
)
from brewsync.core.brewfile import BrewfileError, load_brewfile
from brewsync.core.config import get_machine
from brewsync.core.reconcile import plan_import
from brewsync.models.config import AppConfig
from brewsync.models.package import PackageCollection
from brewsync.utils.formatting import console, print_error, print_info, print_success, print_warning

app = typer.Typer(
    help="Install packages other machines have and this one lacks.",
    invoke_without_command=True,
)


def _resolve_sources(config: AppConfig, requested: str | None, current: str) -> list[str]:
    """Validate the source machines, falling back to default_source.

    Raises:
        typer.Exit: If no source is available, a source is unknown, or a
            source is the current machine.
    """
    sources = split_csv(requested)
    if not sources and config.default_source:
        sources = [config.default_source]
    if not sources:
        print_error("No source machine given; use --from or set 'default_source'")
        raise typer.Exit(code=1)

    for name in sources:
        if name == current:
            print_error(f"Cannot import from the current machine '{name}'")
            raise typer.Exit(code=1)
        if name not in config.machines:
            print_error(f"Unknown source machine: {name}")
            raise typer.Exit(code=1)
    return sources


def _load_sources(config: AppConfig, sources: list[str]) -> list[PackageCollection]:
    """Load each source Brewfile; unreadable sources are skipped with a warning."""
    collections: list[PackageCollection] = []
    for name in sources:
        try:
            result = load_brewfile(get_machine(config, name).brewfile)
        except BrewfileError as e:
            print_warning(f"Skipping {name}: {e}")
            continue
        collections.append(result.packages)
    return collections


@app.callback(invoke_without_command=True)
def import_packages(
    ctx: typer.Context,
    source: Annotated[
        str | None,
        typer.Option(
            "--from",
            "-f",
            help="Source machine(s) to import from (comma-separated).",
        ),
    ] = None,
    only: Annotated[
        str | None,
        typer.Option(
            "--only",
            "-o",
            help="Only import these package types (comma-separated).",
        ),
    ] = None,
    skip: Annotated[
        str | None,
        typer.Option(
            "--skip",
            "-s",
            help="Skip these package types (comma-separated).",
        ),
    ] = None,
    include_machine_specific: Annotated[
        bool,
        typer.Option(
            "--include-machine-specific",
            help="Include packages marked as specific to another machine.",
        ),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompt and proceed.",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be installed without making changes.",
        ),
    ] = False,
) -> None:
    """Install packages from other machines that this machine is missing.

    Ignored packages and packages marked as specific to another machine
    are left out. Nothing is ever removed.

    Examples:
        brewsync import                      # From default_source
        brewsync import --from air,studio    # Merge several sources
        brewsync import --skip mas,go        # Leave out some types
        brewsync import --dry-run            # Show what would be installed
    """
    # Skip if a subcommand is being invoked
    if ctx.invoked_subcommand is not None:
        return

    only_types = parse_package_types(only)
    skip_types = parse_package_types(skip)
    config = require_config()
    current = require_current(config)
    sources = _resolve_sources(config, source, current)
    ignore = require_ignore()

    print_info(f"Importing to {current} from {', '.join(sources)}")

    current_packages = load_machine_packages(config, current, missing_ok=True)
    missing = plan_import(
        current,
        _load_sources(config, sources),
        current_packages,
        ignore,
        config.machine_specific,
        only=only_types,
        skip=skip_types,
        include_machine_specific=include_machine_specific,
    )

    if not missing:
        print_success("No new packages to import.")
        return

    console.print(f"\nFound [added]{len(missing)}[/added] package(s) to import:")
    for line in format_grouped(missing):
        console.print(f"  {line}")

    if dry_run:
        print_info("\nDry-run mode: No changes were made.")
        return

    if not yes and not typer.confirm(f"\nInstall {len(missing)} package(s)?", default=False):
        print_info("Aborted.")
        raise typer.Exit(code=0)

    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    batches = run_plan(missing, PackageCollection(), stream_output=verbose)

    if any(not batch.ok for batch in batches):
        console.print(create_results_table(batches))
    print_results_summary(batches)

    if any(not batch.ok for batch in batches):
        raise typer.Exit(code=1)
