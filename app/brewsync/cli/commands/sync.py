"""Sync command implementation.

Makes the current machine match a source machine exactly: installs what
is missing and removes what the source does not have, except packages
that are ignored or marked as machine-specific.
"""

import logging
from typing import Annotated

import typer

from brewsync.cli.display import create_plan_table, create_results_table, print_results_summary
from brewsync.cli.types import (
    load_machine_packages,
    parse_package_types,
    require_config,
    require_current,
    require_ignore,
    run_plan,
)
from brewsync.core.config import ConfigError, resolve_source
from brewsync.core.reconcile import plan_sync
from brewsync.utils.formatting import console, print_error, print_info, print_success

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Make this machine match a source machine exactly.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def sync_machine(
    ctx: typer.Context,
    source: Annotated[
        str | None,
        typer.Option(
            "--from",
            "-f",
            help="Source machine to sync from (default: default_source).",
        ),
    ] = None,
    only: Annotated[
        str | None,
        typer.Option(
            "--only",
            "-o",
            help="Only sync these package types (comma-separated).",
        ),
    ] = None,
    apply: Annotated[
        bool,
        typer.Option(
            "--apply",
            help="Apply changes (default is preview only).",
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
            help="Show what would be done without making changes, even with --apply.",
        ),
    ] = False,
) -> None:
    """Make this machine match a source machine exactly.

    Unlike import, sync both installs missing packages and removes
    packages the source does not have. Ignored and machine-specific
    packages are never removed.

    Examples:
        brewsync sync                   # Preview
        brewsync sync --apply           # Execute changes
        brewsync sync --from air        # Sync from a specific machine
        brewsync sync --only brew       # Only formulae
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

    ignore = require_ignore()
    source_packages = load_machine_packages(config, source_name)
    current_packages = load_machine_packages(config, current, missing_ok=True)

    plan = plan_sync(
        current,
        source_packages,
        current_packages,
        ignore,
        config.machine_specific,
        only=types,
    )

    if plan.is_empty:
        print_success(f"{current} is already in sync with {source_name}. Nothing to do.")
        return

    console.print(create_plan_table(plan, source_name, current, dry_run=dry_run))
    console.print(
        f"\nSummary: [added]{len(plan.additions)} to install[/added], "
        f"[removed]{len(plan.removals)} to remove[/removed], "
        f"[protected]{len(plan.protected)} protected[/protected]"
    )

    if dry_run:
        print_info("\nDry-run mode: No changes were made.")
        return
    if not apply:
        print_info("\nRun 'brewsync sync --apply' to execute these changes.")
        return

    if not yes and not typer.confirm(
        f"\nInstall {len(plan.additions)} and remove {len(plan.removals)} package(s)?",
        default=False,
    ):
        print_info("Aborted.")
        raise typer.Exit(code=0)

    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    batches = run_plan(plan.additions, plan.removals, stream_output=verbose)
    logger.debug("Sync %s -> %s finished", source_name, current)

    if any(not batch.ok for batch in batches):
        console.print(create_results_table(batches))
    print_results_summary(batches)

    if any(not batch.ok for batch in batches):
        raise typer.Exit(code=1)
