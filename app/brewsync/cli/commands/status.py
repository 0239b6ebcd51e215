"""Status command implementation.

One-screen overview of the current machine: where its Brewfile lives,
what it declares, what is ignored, and what a sync from the default
source would change.
"""

import logging

import typer
from rich.markup import escape

from brewsync.cli.types import (
    load_machine_packages,
    require_config,
    require_current,
    require_ignore,
)
from brewsync.core.reconcile import SyncPlan, plan_sync
from brewsync.models.config import AppConfig, IgnoreConfiguration
from brewsync.models.package import PackageCollection, PackageType, parse_package_id
from brewsync.utils.formatting import console, print_info, print_success, print_warning

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Show an overview of this machine.",
    invoke_without_command=True,
)


def _print_machine(config: AppConfig, current: str) -> None:
    machine = config.machines[current]
    header = f"Status: {escape(current)}"
    if machine.description:
        header += f" - {escape(machine.description)}"
    console.print(f"[bold_header]{header}[/bold_header]\n")
    console.print(f"  Hostname: [info]{escape(machine.hostname or '-')}[/info]")
    console.print(f"  Brewfile: {escape(str(machine.brewfile))}", highlight=False)
    console.print(f"  Source:   [info]{escape(config.default_source or '-')}[/info]")


def _print_counts(packages: PackageCollection) -> None:
    console.print("\n[bold_header]Packages[/bold_header]")
    for type_value, total in packages.count_by_type().items():
        console.print(f"  [package.type]{type_value}[/package.type]: {total}")
    console.print(f"  [muted]Total: {len(packages)} package(s)[/muted]")


def ignored_summary(ignore: IgnoreConfiguration, machine: str) -> tuple[list[str], dict[str, int]]:
    """Summarize the ignore rules that apply to a machine.

    Global and machine rules are combined.

    Returns:
        Ignored category names, and ignored package counts per type.
    """
    categories: list[str] = []
    package_ids: list[str] = []
    for scope in (ignore.scope(None), ignore.scope(machine)):
        categories.extend(c.value for c in scope.categories if c.value not in categories)
        package_ids.extend(p for p in scope.packages if p not in package_ids)

    counts: dict[str, int] = {}
    for package_id in package_ids:
        type_value = parse_package_id(package_id).type.value
        counts[type_value] = counts.get(type_value, 0) + 1
    return categories, counts


def _print_ignored(ignore: IgnoreConfiguration, machine: str) -> None:
    categories, counts = ignored_summary(ignore, machine)
    if not (categories or counts):
        return
    console.print("\n[bold_header]Ignored[/bold_header]")
    if categories:
        console.print(f"  Categories: [muted]{', '.join(categories)}[/muted]")
    if counts:
        parts = ", ".join(f"{t}: {n}" for t, n in counts.items())
        console.print(f"  Packages:   [muted]{parts}[/muted]")


def _print_pending(plan: SyncPlan, source: str) -> None:
    console.print(f"\n[bold_header]Pending from {escape(source)}[/bold_header]")
    console.print(
        f"  [added]+{len(plan.additions)} to install[/added], "
        f"[removed]-{len(plan.removals)} to remove[/removed], "
        f"[protected]{len(plan.protected)} protected[/protected]"
    )
    additions = plan.additions.by_type()
    removals = plan.removals.by_type()
    for package_type in PackageType:
        parts = []
        if package_type in additions:
            parts.append(f"[added]+{len(additions[package_type])}[/added]")
        if package_type in removals:
            parts.append(f"[removed]-{len(removals[package_type])}[/removed]")
        if parts:
            label = f"[package.type]{package_type.value}[/package.type]"
            console.print(f"    {label}: {' '.join(parts)}")
    print_info("Run 'brewsync sync' to preview these changes.")


@app.callback(invoke_without_command=True)
def show_status(ctx: typer.Context) -> None:
    """Show machine info, package counts, ignore rules and pending changes.

    Pending changes are what 'brewsync sync' would do from the default
    source, after ignore rules and machine-specific packages are applied.

    Examples:
        brewsync status
    """
    # Skip if a subcommand is being invoked
    if ctx.invoked_subcommand is not None:
        return

    config = require_config()
    current = require_current(config)
    ignore = require_ignore()

    packages = load_machine_packages(config, current, missing_ok=True)

    _print_machine(config, current)
    _print_counts(packages)
    _print_ignored(ignore, current)

    source = config.default_source
    if source is None or source == current:
        return
    if source not in config.machines:
        print_warning(f"Default source '{source}' is not a configured machine")
        return
    if not config.machines[source].brewfile.exists():
        print_warning(f"Brewfile for '{source}' not found; pending changes unknown")
        return

    plan = plan_sync(
        current,
        load_machine_packages(config, source),
        packages,
        ignore,
        config.machine_specific,
    )
    logger.debug(
        "Status plan from %s: %d additions, %d removals",
        source,
        len(plan.additions),
        len(plan.removals),
    )

    if plan.is_empty:
        console.print()
        print_success(f"In sync with {source}.")
        return
    _print_pending(plan, source)
