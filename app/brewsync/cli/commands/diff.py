"""Diff command implementation.

Compares a source machine's Brewfile with the current machine's Brewfile.
"""

import json
from typing import Annotated

import typer

from brewsync.cli.display import create_diff_table, print_diff_summary
from brewsync.cli.types import (
    load_machine_packages,
    parse_package_types,
    require_config,
    require_current,
)
from brewsync.core.config import ConfigError, resolve_source
from brewsync.core.diff import compute_diff_by_type
from brewsync.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show differences between machines.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def diff_machines(
    ctx: typer.Context,
    source: Annotated[
        str | None,
        typer.Option(
            "--from",
            "-f",
            help="Source machine to compare with (default: default_source).",
        ),
    ] = None,
    only: Annotated[
        str | None,
        typer.Option(
            "--only",
            "-o",
            help="Only include these package types (comma-separated).",
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            "-j",
            help="Output as JSON for scripting.",
        ),
    ] = False,
) -> None:
    """Show differences between the current machine and a source machine.

    Missing packages are in the source Brewfile but not in this machine's;
    extra packages are only in this machine's Brewfile.

    Examples:
        brewsync diff                   # Compare with default source
        brewsync diff --from air        # Compare with a specific machine
        brewsync diff --only brew,cask  # Filter to specific types
        brewsync diff --json            # JSON output for scripting
    """
    # Skip if a subcommand is being invoked
    if ctx.invoked_subcommand is not None:
        return

    types = parse_package_types(only)
    config = require_config()
    current = require_current(config)

    try:
        source_name = resolve_source(config, source, current)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if not json_output:
        print_info(f"Comparing {source_name} -> {current}")

    source_packages = load_machine_packages(config, source_name)
    current_packages = load_machine_packages(config, current, missing_ok=True)
    result = compute_diff_by_type(source_packages, current_packages, types)

    if json_output:
        console.print_json(json.dumps(result.to_dict()))
        return

    if result.is_empty:
        print_success(f"{current} is in sync with {source_name}.")
        return

    console.print(create_diff_table(result, source_name, current))
    print_diff_summary(result)
