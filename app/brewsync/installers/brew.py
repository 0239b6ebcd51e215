"""Homebrew installer implementation.

Handles taps, formulae and casks through the ``brew`` command. This is the
only installer that streams subprocess output while installing.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

from brewsync.installers.base import Installer, InstallerError, _failure_message
from brewsync.models.package import Package, PackageCollection, PackageType
from brewsync.utils.shell import command_exists, iter_command

logger = logging.getLogger(__name__)


class BrewInstaller(Installer):
    """Installer for Homebrew taps, formulae and casks."""

    supports_streaming = True

    @property
    def package_types(self) -> tuple[PackageType, ...]:
        """Return tap, brew and cask."""
        return (PackageType.TAP, PackageType.BREW, PackageType.CASK)

    def is_available(self) -> bool:
        """Check if brew is available."""
        return command_exists("brew")

    def list_taps(self) -> PackageCollection:
        """List registered taps."""
        return self._list_lines(["brew", "tap"], PackageType.TAP)

    def list_formulae(self) -> PackageCollection:
        """List installed formulae (without descriptions)."""
        return self._list_lines(["brew", "list", "--formula", "-1"], PackageType.BREW)

    def list_casks(self) -> PackageCollection:
        """List installed casks (without descriptions)."""
        return self._list_lines(["brew", "list", "--cask", "-1"], PackageType.CASK)

    def list_packages(self) -> PackageCollection:
        """List taps, formulae and casks, in that order."""
        return self.list_taps().merge_unique(self.list_formulae()).merge_unique(self.list_casks())

    def install(self, package: Package) -> None:
        """Install a tap, formula or cask."""
        self._run(["brew", *_install_args(package)], package)

    def iter_install_output(self, package: Package) -> Generator[str, None, None]:
        """Install a package, yielding each line of brew output."""
        args = ["brew", *_install_args(package)]
        logger.debug("Installing %s (streaming)", package.id)
        result = yield from iter_command(args)
        if not result.success:
            raise InstallerError(_failure_message(args, result, package))

    def uninstall(self, package: Package) -> None:
        """Untap or uninstall a package."""
        if package.type == PackageType.TAP:
            args = ["brew", "untap", package.name]
        elif package.type == PackageType.CASK:
            args = ["brew", "uninstall", "--cask", package.name]
        else:
            args = ["brew", "uninstall", package.name]
        self._run(args, package)

    def dump_to_file(self, path: Path) -> None:
        """Write a described Brewfile with ``brew bundle dump``.

        Args:
            path: Destination Brewfile path (overwritten).

        Raises:
            InstallerError: If brew bundle fails.
        """
        self._run(["brew", "bundle", "dump", "--force", "--describe", f"--file={path}"])

    def _list_lines(self, args: list[str], package_type: PackageType) -> PackageCollection:
        result = self._run(args, timeout=self._LIST_TIMEOUT)
        return PackageCollection(Package(type=package_type, name=line) for line in result.lines)


def _install_args(package: Package) -> list[str]:
    """Build brew arguments for installing a package."""
    if package.type == PackageType.TAP:
        return ["tap", package.name]
    if package.type == PackageType.CASK:
        return ["install", "--cask", package.name]
    if package.type == PackageType.BREW:
        return ["install", package.name]
    msg = f"Homebrew cannot install {package.id}"
    raise InstallerError(msg)
