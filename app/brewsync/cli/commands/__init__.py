"""CLI commands for brewsync.

This package contains all subcommand implementations.
"""
