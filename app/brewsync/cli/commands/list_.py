"""List command implementation.

Shows the packages installed on this machine, or the packages declared
in a machine's Brewfile.
"""

import json
from enum import Enum
from typing import Annotated

import typer

from brewsync.cli.types import load_machine_packages, parse_package_types, require_config
from brewsync.installers import InstallerError, build_registry, list_installed
from brewsync.utils.formatting import (
    console,
    create_package_table,
    format_package_row,
    print_error,
    print_info,
)

app = typer.Typer(
    help="List installed or declared packages.",
    invoke_without_command=True,
)


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


@app.callback(invoke_without_command=True)
def list_packages(
    ctx: typer.Context,
    only: Annotated[
        str | None,
        typer.Option(
            "--only",
            "-o",
            help="Only list these package types (comma-separated).",
        ),
    ] = None,
    machine: Annotated[
        str | None,
        typer.Option(
            "--machine",
            "-m",
            help="List a machine's Brewfile instead of installed packages.",
        ),
    ] = None,
    count: Annotated[
        bool,
        typer.Option(
            "--count",
            "-c",
            help="Show counts per type only.",
        ),
    ] = False,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-F",
            help="Output format: table or json.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """List packages.

    Without --machine, asks every available installer what is installed.
    With --machine, reads that machine's Brewfile.

    Examples:
        brewsync list                   # Everything installed here
        brewsync list --only vscode     # Installed VS Code extensions
        brewsync list --machine air     # Packages in air's Brewfile
        brewsync list --format json     # JSON output for scripting
    """
    # Skip if a subcommand is being invoked
    if ctx.invoked_subcommand is not None:
        return

    types = parse_package_types(only)

    if machine is not None:
        packages = load_machine_packages(require_config(), machine)
        if types:
            packages = packages.filter(*types)
        title = f"{machine} Brewfile"
    else:
        try:
            packages = list_installed(build_registry(), types)
        except InstallerError as e:
            print_error(f"Listing failed: {e}")
            raise typer.Exit(code=1) from e
        title = "Installed Packages"

    # JSON output format
    if output_format == OutputFormat.JSON:
        data = {
            "machine": machine,
            "total": len(packages),
            "counts": packages.count_by_type(),
            "packages": [] if count else [p.to_dict() for p in packages],
        }
        console.print_json(json.dumps(data))
        return

    if not packages:
        print_info("No packages found.")
        return

    if count:
        for type_value, total in packages.count_by_type().items():
            console.print(f"[package.type]{type_value}[/package.type]: {total}")
        console.print(f"[muted]Total: {len(packages)}[/muted]")
        return

    table = create_package_table(title)
    for package in packages:
        table.add_row(*format_package_row(package))
    console.print(table)
    console.print(f"\n[muted]Total: {len(packages)} package(s)[/muted]")
