"""Package installers for each supported package type.

This module provides the Installer interface, the concrete installers and
the factory that builds the type-to-installer registry.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from brewsync.installers.base import Installer, InstallerError, InstallerUnavailableError
from brewsync.installers.brew import BrewInstaller
from brewsync.installers.extensions import (
    AntigravityInstaller,
    CursorInstaller,
    ExtensionInstaller,
    VSCodeInstaller,
)
from brewsync.installers.gotools import GoToolsInstaller
from brewsync.installers.mas import MasInstaller
from brewsync.models.package import PackageCollection, PackageType

logger = logging.getLogger(__name__)


def build_registry() -> dict[PackageType, Installer]:
    """Build the default package type to installer mapping.

    Every PackageType maps to exactly one installer; tap, brew and cask
    share a single BrewInstaller.

    Returns:
        Mapping covering every PackageType.
    """
    installers: list[Installer] = [
        BrewInstaller(),
        VSCodeInstaller(),
        CursorInstaller(),
        AntigravityInstaller(),
        GoToolsInstaller(),
        MasInstaller(),
    ]
    registry: dict[PackageType, Installer] = {}
    for installer in installers:
        for package_type in installer.package_types:
            registry[package_type] = installer
    return registry


def unique_installers(registry: Mapping[PackageType, Installer]) -> list[Installer]:
    """Return each distinct installer once, in PackageType order."""
    seen: list[Installer] = []
    for package_type in PackageType:
        installer = registry.get(package_type)
        if installer is not None and not any(installer is s for s in seen):
            seen.append(installer)
    return seen


def list_installed(
    registry: Mapping[PackageType, Installer],
    types: tuple[PackageType, ...] = (),
) -> PackageCollection:
    """List installed packages from every available installer.

    Args:
        registry: Type to installer mapping.
        types: Restrict the result to these types. Empty means all.

    Returns:
        Union of the installers' listings, deduplicated by ID.

    Raises:
        InstallerError: If an available installer fails to list.
    """
    installed = PackageCollection()
    for installer in unique_installers(registry):
        if types and not set(installer.package_types) & set(types):
            continue
        if not installer.is_available():
            logger.debug("Skipping %s listing: not available", installer.name)
            continue
        try:
            installed.merge_unique(installer.list_packages())
        except OSError as e:
            msg = f"{installer.name} listing failed: {e}"
            raise InstallerError(msg) from e
    return installed.filter(*types) if types else installed


__all__ = [
    "AntigravityInstaller",
    "BrewInstaller",
    "CursorInstaller",
    "ExtensionInstaller",
    "GoToolsInstaller",
    "Installer",
    "InstallerError",
    "InstallerUnavailableError",
    "MasInstaller",
    "VSCodeInstaller",
    "build_registry",
    "list_installed",
    "unique_installers",
]
