"""Data models for brewsync.

This module exports the core data structures used throughout the application.
"""

from brewsync.models.action import ActionResult, ActionType, BatchResult
from brewsync.models.config import AppConfig, IgnoreConfiguration, IgnoreScope, MachineConfig
from brewsync.models.package import (
    PRIMARY_TYPES,
    Package,
    PackageCollection,
    PackageType,
    parse_package_id,
)

__all__ = [
    "PRIMARY_TYPES",
    "ActionResult",
    "ActionType",
    "AppConfig",
    "BatchResult",
    "IgnoreConfiguration",
    "IgnoreScope",
    "MachineConfig",
    "Package",
    "PackageCollection",
    "PackageType",
    "parse_package_id",
]
