"""Config command implementation.

Shows, locates and initializes config.toml, and registers machines.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from brewsync.cli.types import require_config
from brewsync.core.config import (
    ConfigError,
    create_default_config,
    get_local_hostname,
    save_config,
)
from brewsync.core.paths import ensure_config_dir, get_config_dir, get_config_path
from brewsync.models.config import MachineConfig
from brewsync.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Manage configuration.",
    no_args_is_help=True,
)


@app.command("show")
def show() -> None:
    """Display the current configuration."""
    config = require_config()
    current = config.resolve_current_machine(get_local_hostname())

    table = Table(
        title="Machines",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("", width=2, justify="center")
    table.add_column("Name", no_wrap=True)
    table.add_column("Hostname", style="muted")
    table.add_column("Brewfile")
    table.add_column("Description", style="muted")

    for name, machine in config.machines.items():
        marker = "[success]●[/]" if name == current else ""
        table.add_row(
            marker,
            name,
            machine.hostname or "-",
            str(machine.brewfile),
            machine.description or "",
        )

    console.print(table)
    console.print(f"\nCurrent machine: [info]{current or 'unknown'}[/info]")
    console.print(f"Default source:  [info]{config.default_source or '-'}[/info]")

    if config.machine_specific:
        console.print("\n[bold_header]Machine-specific packages[/bold_header]")
        for name, package_ids in config.machine_specific.items():
            console.print(f"  {name}: {', '.join(package_ids) or '-'}")


@app.command("path")
def path() -> None:
    """Show the config file path."""
    console.print(str(get_config_path()), highlight=False)


@app.command("init")
def init(
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Create a starter config for this machine."""
    config_path = get_config_path()
    if config_path.exists() and not force:
        print_info(f"Config already exists: {config_path}")
        print_info("Use --force to overwrite it.")
        return

    try:
        ensure_config_dir()
        save_config(create_default_config(), config_path)
    except (ConfigError, RuntimeError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Created {config_path}")
    print_info("Add your other machines and set 'default_source' to start syncing.")


@app.command("add-machine")
def add_machine(
    name: Annotated[str, typer.Argument(help="Short machine name (e.g. 'mini').")],
    hostname: Annotated[
        str | None,
        typer.Option("--hostname", help="Hostname used to detect this machine."),
    ] = None,
    brewfile: Annotated[
        Path | None,
        typer.Option(
            "--brewfile",
            help="Path to the machine's Brewfile (default: Brewfile.<name> in the config dir).",
        ),
    ] = None,
    description: Annotated[
        str | None,
        typer.Option("--description", help="Free-text description."),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", help="Replace an existing machine with the same name."),
    ] = False,
) -> None:
    """Add a machine to config.toml.

    Examples:
        brewsync config add-machine mini --hostname Mac-mini
        brewsync config add-machine work --brewfile ~/dotfiles/Brewfile.work
    """
    name = name.strip()
    if not name:
        print_error("Machine name cannot be empty")
        raise typer.Exit(code=1)

    config = require_config()
    if name in config.machines and not force:
        print_error(f"Machine '{name}' already exists")
        print_info("Use --force to replace it.")
        raise typer.Exit(code=1)

    machine = MachineConfig(
        hostname=hostname or None,
        brewfile=brewfile or get_config_dir() / f"Brewfile.{name}",
        description=description or None,
    )
    config.machines[name] = machine

    try:
        save_config(config)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Added machine '{name}' ({machine.brewfile})")
    if config.default_source is None:
        print_info("Set 'default_source' in config.toml to sync from one machine.")
