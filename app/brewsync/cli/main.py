"""brewsync command-line entry point: the root Typer app, global options and logging."""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from brewsync import __version__
from brewsync.cli.commands import (
    config,
    diff,
    doctor,
    dump,
    ignore,
    import_,
    list_,
    status,
    sync,
)
from brewsync.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="brewsync",
    help="Keep Homebrew and friends in sync across your Macs.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"brewsync version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool, quiet: bool = False) -> None:
    """Route log records through Rich on stderr.

    Args:
        verbose: Log at DEBUG instead of WARNING.
        quiet: Log errors only. Ignored when verbose is set.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=verbose, rich_tracebacks=True)],
        force=True,
    )


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output (debug logging, live installer output).",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Only log errors (hides skipped-line and listing warnings).",
        ),
    ] = False,
) -> None:
    """brewsync - Keep Brewfile-managed packages in sync across machines.

    Each machine has a Brewfile. Compare them, import what you are missing,
    or make one machine match another exactly.
    """
    configure_logging(verbose, quiet)

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


# Register commands
app.add_typer(status.app, name="status")
app.add_typer(diff.app, name="diff")
app.add_typer(sync.app, name="sync")
app.add_typer(import_.app, name="import")
app.add_typer(ignore.app, name="ignore")
app.add_typer(list_.app, name="list")
app.add_typer(dump.app, name="dump")
app.add_typer(config.app, name="config")
app.add_typer(doctor.app, name="doctor")


if __name__ == "__main__":
    app()
