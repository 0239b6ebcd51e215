"""Ignore command implementation.

Manages ignore.toml: whole categories (package types) and single packages,
globally or for one machine.
"""

from typing import Annotated

import typer

from brewsync.core.config import ConfigError, load_ignore, save_ignore
from brewsync.core.paths import get_ignore_path
from brewsync.models.config import IgnoreConfiguration, IgnoreScope
from brewsync.models.package import PackageType, parse_package_id
from brewsync.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Manage ignored categories and packages.",
    no_args_is_help=True,
)
category_app = typer.Typer(
    help="Manage ignored categories (package types).",
    no_args_is_help=True,
)
app.add_typer(category_app, name="category")

MachineOption = Annotated[
    str | None,
    typer.Option("--machine", "-m", help="Apply to a specific machine's ignore list."),
]
GlobalOption = Annotated[
    bool,
    typer.Option("--global", "-g", help="Apply to the global ignore list (default)."),
]


def _target(machine: str | None, global_: bool) -> str | None:
    """Resolve the scope flags to a machine name, or None for global.

    Raises:
        typer.Exit: If both --machine and --global are given.
    """
    if machine and global_:
        print_error("Use either --machine or --global, not both.")
        raise typer.Exit(code=1)
    return machine or None


def _scope_label(machine: str | None) -> str:
    return f"{machine}'s" if machine else "global"


def _load() -> IgnoreConfiguration:
    try:
        return load_ignore()
    except ConfigError as e:
        print_error(f"Failed to load ignore rules: {e}")
        raise typer.Exit(code=1) from e


def _save(config: IgnoreConfiguration) -> None:
    try:
        save_ignore(config)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def _parse_category(value: str) -> PackageType:
    try:
        return PackageType.parse(value)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def _parse_id(value: str) -> str:
    try:
        return parse_package_id(value).id
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def _print_scope(title: str, scope: IgnoreScope, categories_only: bool = False) -> None:
    console.print(f"[bold_header]{title}[/bold_header]")
    if scope.categories:
        console.print("  Categories:")
        for category in scope.categories:
            console.print(f"    - [package.type]{category.value}[/package.type]")
    if scope.packages and not categories_only:
        console.print("  Packages:")
        for package_id in scope.packages:
            console.print(f"    - {package_id}")


def _list(machine: str | None, categories_only: bool) -> None:
    config = _load()
    scopes: list[tuple[str, IgnoreScope]] = []
    if machine is None:
        scopes.append(("Global ignores", config.global_scope))
        scopes.extend((f"Machine '{name}'", scope) for name, scope in config.machines.items())
    elif machine in config.machines:
        scopes.append((f"Machine '{machine}'", config.machines[machine]))

    shown = False
    for title, scope in scopes:
        has_entries = bool(scope.categories) if categories_only else not scope.is_empty
        if not has_entries:
            continue
        if shown:
            console.print()
        _print_scope(title, scope, categories_only)
        shown = True

    if not shown:
        what = "categories are" if categories_only else "packages or categories are"
        print_info(f"No {what} being ignored.")


@category_app.command("add")
def category_add(
    category: Annotated[str, typer.Argument(help="Package type to ignore, e.g. mas.")],
    machine: MachineOption = None,
    global_: GlobalOption = False,
) -> None:
    """Ignore a whole package type."""
    target = _target(machine, global_)
    package_type = _parse_category(category)
    config = _load()
    if config.add_category(package_type, target):
        _save(config)
        label = _scope_label(target)
        print_success(f"Added category '{package_type.value}' to {label} ignore list")
    else:
        print_info(f"Category '{package_type.value}' is already ignored")


@category_app.command("remove")
def category_remove(
    category: Annotated[str, typer.Argument(help="Package type to stop ignoring.")],
    machine: MachineOption = None,
    global_: GlobalOption = False,
) -> None:
    """Stop ignoring a package type."""
    target = _target(machine, global_)
    package_type = _parse_category(category)
    config = _load()
    if config.remove_category(package_type, target):
        _save(config)
        label = _scope_label(target)
        print_success(f"Removed category '{package_type.value}' from {label} ignore list")
    else:
        print_info(f"Category '{package_type.value}' was not ignored")


@category_app.command("list")
def category_list(machine: MachineOption = None) -> None:
    """List ignored categories."""
    _list(machine, categories_only=True)


@app.command("add")
def add(
    package_id: Annotated[str, typer.Argument(help="Package ID in type:name form.")],
    machine: MachineOption = None,
    global_: GlobalOption = False,
) -> None:
    """Ignore a single package, e.g. ``cask:docker``."""
    target = _target(machine, global_)
    normalized = _parse_id(package_id)
    config = _load()
    if config.add_package(normalized, target):
        _save(config)
        print_success(f"Added {normalized} to {_scope_label(target)} ignore list")
    else:
        print_info(f"{normalized} is already ignored")


@app.command("remove")
def remove(
    package_id: Annotated[str, typer.Argument(help="Package ID in type:name form.")],
    machine: MachineOption = None,
    global_: GlobalOption = False,
) -> None:
    """Stop ignoring a single package."""
    target = _target(machine, global_)
    normalized = _parse_id(package_id)
    config = _load()
    if config.remove_package(normalized, target):
        _save(config)
        print_success(f"Removed {normalized} from {_scope_label(target)} ignore list")
    else:
        print_info(f"{normalized} was not ignored")


@app.command("list")
def list_ignores(machine: MachineOption = None) -> None:
    """Show all ignored categories and packages."""
    _list(machine, categories_only=False)


@app.command("path")
def path() -> None:
    """Show the ignore file path."""
    console.print(str(get_ignore_path()), highlight=False)


@app.command("init")
def init(
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing ignore file."),
    ] = False,
) -> None:
    """Create an empty ignore file."""
    ignore_path = get_ignore_path()
    if ignore_path.exists() and not force:
        print_info(f"Ignore file already exists: {ignore_path}")
        return
    _save(IgnoreConfiguration())
    print_success(f"Created {ignore_path}")
