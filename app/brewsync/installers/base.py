"""Abstract base class for package installers.

This module defines the Installer interface that every per-type handler
implements, plus the exceptions raised by installer operations.
"""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator

from brewsync.models.package import Package, PackageCollection, PackageType
from brewsync.utils.shell import CommandResult, run_command

logger = logging.getLogger(__name__)


class InstallerError(Exception):
    """Raised when an install, uninstall or list operation fails."""


class InstallerUnavailableError(InstallerError):
    """Raised when the tool backing a package type is not present."""


class Installer(ABC):
    """Abstract base class for all package installers.

    An installer owns one or more package types and wraps the external
    tool that manages them. Operations block until the tool exits and
    raise :class:`InstallerError` on failure.

    Example:
        >>> installer = VSCodeInstaller()
        >>> if installer.is_available():
        ...     for pkg in installer.list_packages():
        ...         print(pkg.id)
    """

    # Timeout for listing commands; install/uninstall run unbounded.
    _LIST_TIMEOUT: float = 120.0

    #: Whether ``iter_install_output`` yields output line by line.
    supports_streaming: bool = False

    #: Whether the tool can remove packages at all.
    supports_uninstall: bool = True

    @property
    @abstractmethod
    def package_types(self) -> tuple[PackageType, ...]:
        """Return the package types this installer handles."""

    @abstractmethod
    def list_packages(self) -> PackageCollection:
        """List installed packages.

        Raises:
            InstallerError: If the listing command fails.
        """

    @abstractmethod
    def install(self, package: Package) -> None:
        """Install a single package.

        Raises:
            InstallerError: If installation fails.
        """

    @abstractmethod
    def uninstall(self, package: Package) -> None:
        """Remove a single package.

        Raises:
            InstallerError: If removal fails.
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the backing tool is available on the system."""

    def iter_install_output(self, package: Package) -> Iterator[str]:
        """Install a package, yielding output lines as they are produced.

        Installers without streaming support run :meth:`install` and
        yield nothing.

        Raises:
            InstallerError: If installation fails.
        """
        self.install(package)
        yield from ()

    def install_streaming(self, package: Package, on_line: Callable[[str], None]) -> None:
        """Install a package, passing each output line to ``on_line``."""
        for line in self.iter_install_output(package):
            on_line(line)

    @property
    def name(self) -> str:
        """Short name used in logs and availability reports."""
        return self.package_types[0].value

    def _run(
        self,
        args: list[str],
        package: Package | None = None,
        timeout: float | None = None,
    ) -> CommandResult:
        """Run a command and raise InstallerError on a non-zero exit.

        Args:
            args: Command and arguments.
            package: Package being operated on, used in the error message.
            timeout: Optional timeout in seconds.

        Returns:
            CommandResult of the successful command.

        Raises:
            InstallerError: If the command exits with a non-zero status or
                does not finish within ``timeout``.
        """
        logger.debug("Running: %s", " ".join(args))
        try:
            result = run_command(args, timeout=timeout)
        except subprocess.TimeoutExpired as e:
            command = " ".join(args[:2])
            target = f" for {package.id}" if package is not None else ""
            msg = f"'{command}' timed out{target} after {e.timeout:g}s"
            raise InstallerError(msg) from e
        if not result.success:
            raise InstallerError(_failure_message(args, result, package))
        return result


def _failure_message(args: list[str], result: CommandResult, package: Package | None) -> str:
    """Build an error message from a failed command."""
    detail = result.stderr.strip() or result.stdout.strip() or f"exit status {result.returncode}"
    target = f" for {package.id}" if package is not None else ""
    return f"'{' '.join(args[:2])}' failed{target}: {detail}"
