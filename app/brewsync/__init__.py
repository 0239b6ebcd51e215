"""brewsync - keep Brewfile-managed packages in sync across machines."""

__version__ = "0.1.0"
