"""CLI package for brewsync.

This package contains the Typer application and all subcommands.
"""

from brewsync.cli.main import app

__all__ = ["app"]
