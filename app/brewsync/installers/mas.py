"""Mac App Store installer implementation.

Uses the ``mas`` CLI. App Store titles cannot be removed programmatically,
so uninstall is declared unsupported.
"""

import logging
import re

from brewsync.installers.base import Installer
from brewsync.models.package import Package, PackageCollection, PackageType
from brewsync.utils.shell import command_exists

logger = logging.getLogger(__name__)

# Matches "497799835 Xcode (15.2)"
MAS_LIST_PATTERN = re.compile(r"^(\d+)\s+(.+?)\s+\([\d.]+\)$")


class MasInstaller(Installer):
    """Installer for Mac App Store titles, keyed by numeric ID."""

    supports_uninstall = False

    @property
    def package_types(self) -> tuple[PackageType, ...]:
        """Return the mas type."""
        return (PackageType.MAS,)

    def is_available(self) -> bool:
        """Check if mas is available."""
        return command_exists("mas")

    def list_packages(self) -> PackageCollection:
        """List installed App Store titles."""
        result = self._run(["mas", "list"], timeout=self._LIST_TIMEOUT)
        packages = PackageCollection()
        for line in result.lines:
            match = MAS_LIST_PATTERN.match(line)
            if match is None:
                logger.debug("Skipping unrecognized mas output: %s", line)
                continue
            app_id, title = match.groups()
            packages.add_unique(
                Package(
                    type=PackageType.MAS,
                    name=app_id,
                    full_name=title,
                    options={"id": app_id},
                )
            )
        return packages

    def install(self, package: Package) -> None:
        """Install a title by its App Store ID."""
        app_id = package.options.get("id", package.name)
        self._run(["mas", "install", app_id], package)

    def uninstall(self, package: Package) -> None:
        """Do nothing; mas cannot remove apps."""
        logger.info("Skipping uninstall of %s: not supported by mas", package.id)
