"""Collect the installed package list for writing a machine's Brewfile."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from tempfile import TemporaryDirectory

from brewsync.core.brewfile import BrewfileError, load_brewfile
from brewsync.installers import BrewInstaller, Installer, InstallerError, unique_installers
from brewsync.models.package import PackageCollection, PackageType

logger = logging.getLogger(__name__)


def _brew_bundle_packages(installer: BrewInstaller) -> PackageCollection | None:
    """Dump Homebrew packages with descriptions via ``brew bundle dump``.

    Returns:
        Taps, formulae and casks, or None if the dump could not be read.
    """
    with TemporaryDirectory(prefix="brewsync-") as tmp:
        path = Path(tmp) / "Brewfile"
        try:
            installer.dump_to_file(path)
            result = load_brewfile(path)
        except (InstallerError, BrewfileError, OSError) as e:
            logger.warning("brew bundle dump failed, falling back to listing: %s", e)
            return None
    primary = (PackageType.TAP, PackageType.BREW, PackageType.CASK)
    return result.packages.filter(*primary)


def collect_packages(
    registry: Mapping[PackageType, Installer],
    use_brew_bundle: bool = True,
) -> tuple[PackageCollection, list[str]]:
    """List everything installed, in Brewfile type order.

    Installers that are not available are skipped. A failing installer
    does not abort the collection; its error is returned instead.

    Args:
        registry: Type to installer mapping.
        use_brew_bundle: Prefer ``brew bundle dump`` for Homebrew types,
            which includes descriptions.

    Returns:
        Tuple of (packages, error messages).
    """
    packages = PackageCollection()
    errors: list[str] = []

    for installer in unique_installers(registry):
        if not installer.is_available():
            logger.debug("Skipping %s: not available", installer.name)
            continue

        listed: PackageCollection | None = None
        if use_brew_bundle and isinstance(installer, BrewInstaller):
            listed = _brew_bundle_packages(installer)
        try:
            if listed is None:
                listed = installer.list_packages()
        except (InstallerError, OSError) as e:
            errors.append(f"{installer.name}: {e}")
            continue

        logger.debug("Collected %d package(s) from %s", len(listed), installer.name)
        packages.merge_unique(listed)

    return _in_type_order(packages), errors


def _in_type_order(packages: PackageCollection) -> PackageCollection:
    groups = packages.by_type()
    ordered = PackageCollection()
    for package_type in PackageType:
        ordered.merge_unique(groups.get(package_type, ()))
    return ordered


def preserve_descriptions(
    packages: PackageCollection,
    existing: PackageCollection,
) -> PackageCollection:
    """Carry descriptions from an existing Brewfile onto fresh packages.

    A package keeps its own description when it has one; otherwise it
    inherits the description of the same ID in ``existing``.

    Returns:
        New collection in the same order as ``packages``.
    """
    result = PackageCollection()
    for package in packages:
        previous = existing.get(package.id)
        if package.description is None and previous is not None and previous.description:
            package = package.with_description(previous.description)
        result.add_unique(package)
    return result
