"""Editor extension installer implementation.

VS Code, Cursor and Antigravity share the same extension CLI, differing
only in the executable name.
"""

from brewsync.installers.base import Installer, InstallerError
from brewsync.models.package import Package, PackageCollection, PackageType
from brewsync.utils.shell import command_exists


class ExtensionInstaller(Installer):
    """Installer for editor extensions managed by a ``--install-extension`` CLI.

    Attributes:
        command: Editor executable (e.g. 'code', 'cursor', 'agy').
    """

    def __init__(self, package_type: PackageType, command: str) -> None:
        """Initialize the installer.

        Args:
            package_type: Package type this editor's extensions are tracked as.
            command: Editor executable name.
        """
        self._package_type = package_type
        self.command = command

    @property
    def package_types(self) -> tuple[PackageType, ...]:
        """Return the single editor type."""
        return (self._package_type,)

    def is_available(self) -> bool:
        """Check if the editor CLI is available."""
        return command_exists(self.command)

    def list_packages(self) -> PackageCollection:
        """List installed extensions."""
        result = self._run([self.command, "--list-extensions"], timeout=self._LIST_TIMEOUT)
        return PackageCollection(
            Package(type=self._package_type, name=line) for line in result.lines
        )

    def install(self, package: Package) -> None:
        """Install an extension."""
        self._check_type(package)
        self._run([self.command, "--install-extension", package.name], package)

    def uninstall(self, package: Package) -> None:
        """Uninstall an extension."""
        self._check_type(package)
        self._run([self.command, "--uninstall-extension", package.name], package)

    def _check_type(self, package: Package) -> None:
        if package.type != self._package_type:
            msg = f"{self.command} cannot handle {package.id}"
            raise InstallerError(msg)


class VSCodeInstaller(ExtensionInstaller):
    """VS Code extensions via ``code``."""

    def __init__(self) -> None:
        super().__init__(PackageType.VSCODE, "code")


class CursorInstaller(ExtensionInstaller):
    """Cursor extensions via ``cursor``."""

    def __init__(self) -> None:
        super().__init__(PackageType.CURSOR, "cursor")


class AntigravityInstaller(ExtensionInstaller):
    """Antigravity extensions via ``agy``."""

    def __init__(self) -> None:
        super().__init__(PackageType.ANTIGRAVITY, "agy")
