"""Shared Rich display functions for diffs, plans and results.

Provides reusable table builders and summary printers used by the diff,
sync and import commands.
"""

from rich.markup import escape
from rich.table import Table

from brewsync.core.diff import DiffResult
from brewsync.core.executor import OutputEvent, ProgressEvent
from brewsync.core.reconcile import SyncPlan
from brewsync.models.action import BatchResult
from brewsync.models.package import PackageCollection
from brewsync.utils.formatting import console, print_success

# Names shown per type before collapsing into "(+N more)"
PREVIEW_LIMIT = 5


def _changes_table(title: str) -> Table:
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Change", width=10, justify="center")
    table.add_column("Type", width=12)
    table.add_column("Package", no_wrap=True)
    table.add_column("Description")
    return table


def _add_packages(table: Table, packages: PackageCollection, label: str, style: str) -> None:
    """Add one row per package, grouped by type."""
    for package_type, group in packages.by_type().items():
        for package in group:
            table.add_row(
                f"[{style}]{label}[/{style}]",
                f"[package.type]{package_type.value}[/package.type]",
                f"[{style}]{package.display_name}[/{style}]",
                f"[muted]{package.description or ''}[/muted]",
            )


def create_diff_table(result: DiffResult, source: str, current: str) -> Table:
    """Create a table of additions and removals between two machines.

    Args:
        result: Diff of ``source`` against ``current``.
        source: Source machine name.
        current: Current machine name.

    Returns:
        Rich Table with one row per differing package.
    """
    table = _changes_table(f"{source} -> {current}")
    _add_packages(table, result.additions, "+missing", "added")
    _add_packages(table, result.removals, "-extra", "removed")
    return table


def create_plan_table(plan: SyncPlan, source: str, current: str, dry_run: bool = False) -> Table:
    """Create a table of what a sync would install, remove and keep.

    Args:
        plan: Planned sync.
        source: Source machine name.
        current: Machine being synced.
        dry_run: Whether this is a dry-run (changes table title).

    Returns:
        Rich Table with one row per affected package.
    """
    suffix = " (Dry Run)" if dry_run else ""
    table = _changes_table(f"Sync Preview: {source} -> {current}{suffix}")
    _add_packages(table, plan.additions, "+install", "added")
    _add_packages(table, plan.removals, "-remove", "removed")
    _add_packages(table, plan.protected, "protected", "protected")
    return table


def format_grouped(packages: PackageCollection) -> list[str]:
    """Summarize packages as one line per type, e.g. ``brew: git, jq``."""
    lines: list[str] = []
    for package_type, group in packages.by_type().items():
        names = [p.display_name for p in group]
        shown = ", ".join(names[:PREVIEW_LIMIT])
        if len(names) > PREVIEW_LIMIT:
            shown += f" (+{len(names) - PREVIEW_LIMIT} more)"
        lines.append(f"{package_type.value}: {shown}")
    return lines


def print_diff_summary(result: DiffResult) -> None:
    """Print a one-line summary of a diff."""
    console.print(
        f"\nSummary: [added]{len(result.additions)} missing[/added], "
        f"[removed]{len(result.removals)} extra[/removed], "
        f"[muted]{len(result.common)} in common[/muted]"
    )


def print_progress(event: ProgressEvent, verb: str) -> None:
    """Print a ``[i/n]`` line for a finished item.

    Args:
        event: Progress event of the finished item.
        verb: Past-tense verb for success, e.g. "Installed".
    """
    prefix = f"[muted]{escape(f'[{event.index}/{event.total}]')}[/muted]"
    if event.error is not None:
        error = escape(str(event.error))
        console.print(f"{prefix} [error]FAIL[/error] {event.package.id}: {error}")
    elif event.message:
        console.print(f"{prefix} [warning]SKIP[/warning] {event.package.id}: {event.message}")
    else:
        console.print(f"{prefix} [success]OK[/success] {verb} {event.package.id}")


def print_output_line(event: OutputEvent) -> None:
    """Print a line of live installer output."""
    console.print(f"    [muted]{escape(event.line)}[/muted]", highlight=False)


def create_results_table(batches: list[BatchResult]) -> Table:
    """Create a table of failed actions across batches.

    Args:
        batches: Batch results to report.

    Returns:
        Rich Table listing every failed action with its error.
    """
    table = Table(
        title="Failures",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Action", width=10)
    table.add_column("Package", no_wrap=True)
    table.add_column("Error")

    for batch in batches:
        for result in batch.failed:
            table.add_row(
                result.action_type.value,
                result.package.id,
                f"[muted]{escape(result.error or 'Unknown error')}[/muted]",
            )

    return table


def print_results_summary(batches: list[BatchResult]) -> None:
    """Print a summary of batch results.

    Shows a success message when all actions succeed, or a count of
    succeeded/failed actions when there are failures.

    Args:
        batches: Batch results to summarize.
    """
    success_count = sum(len(b.succeeded) for b in batches)
    fail_count = sum(len(b.failed) for b in batches)

    if fail_count == 0:
        print_success(f"All {success_count} action(s) completed successfully.")
    else:
        console.print(
            f"\n[success]{success_count} succeeded[/success], [error]{fail_count} failed[/error]"
        )
