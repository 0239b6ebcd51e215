"""Shared Rich consoles and message helpers.

Normal output goes to ``console`` (stdout); warnings, errors and log
records go to ``err_console`` (stderr) so piped output such as
``brewsync diff --json`` stays clean.
"""

from __future__ import annotations

import sys

from rich.console import Console
from rich.table import Table

from brewsync.core.theme import get_theme
from brewsync.models.package import Package


def _make_console(stderr: bool = False) -> Console:
    stream = sys.stderr if stderr else sys.stdout
    # Hex colors need truecolor; leave detection to Rich when not a TTY.
    color_system = "truecolor" if stream.isatty() else None
    return Console(theme=get_theme(), stderr=stderr, color_system=color_system)


console = _make_console()
err_console = _make_console(stderr=True)


def create_package_table(title: str) -> Table:
    """Create a table with Type, Package and Description columns."""
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("Type", style="package.type", no_wrap=True)
    table.add_column("Package", style="package.name", no_wrap=True)
    table.add_column("Description", style="package.description", overflow="ellipsis")
    return table


def format_package_row(pkg: Package) -> tuple[str, str, str]:
    """Format a package as a (type, name, description) row.

    App Store titles show their full name with the numeric ID in
    parentheses, e.g. ``Xcode (497799835)``.
    """
    name = pkg.name if pkg.full_name is None else f"{pkg.full_name} ({pkg.name})"
    return (pkg.type.value, name, pkg.description or "-")


def print_info(message: str) -> None:
    console.print(f"[info]{message}[/]")


def print_success(message: str) -> None:
    console.print(f"[success]{message}[/]")


def print_warning(message: str) -> None:
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    err_console.print(f"[error]Error:[/] {message}")
