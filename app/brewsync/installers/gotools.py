"""Go tools installer implementation.

Tracks binaries installed with ``go install`` by their module path.
"""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from brewsync.installers.base import Installer, InstallerError
from brewsync.models.package import Package, PackageCollection, PackageType
from brewsync.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)


class GoToolsInstaller(Installer):
    """Installer for Go binaries in ``$GOBIN`` or ``$GOPATH/bin``."""

    @property
    def package_types(self) -> tuple[PackageType, ...]:
        """Return the go type."""
        return (PackageType.GO,)

    def is_available(self) -> bool:
        """Check if the go toolchain is available."""
        return command_exists("go")

    def get_bin_dir(self) -> Path:
        """Return the directory ``go install`` writes binaries to.

        ``$GOBIN`` wins, then ``$GOPATH/bin``, then ``~/go/bin``.
        """
        gobin = os.environ.get("GOBIN")
        if gobin:
            return Path(gobin)
        gopath = os.environ.get("GOPATH")
        if gopath:
            return Path(gopath) / "bin"
        return Path.home() / "go" / "bin"

    def list_packages(self) -> PackageCollection:
        """List executables in the Go bin directory by module path.

        Binaries whose module path cannot be read are listed by file name.
        """
        bin_dir = self.get_bin_dir()
        packages = PackageCollection()
        if not bin_dir.is_dir():
            return packages

        try:
            entries = sorted(bin_dir.iterdir())
        except OSError as e:
            msg = f"Cannot read Go bin directory {bin_dir}: {e}"
            raise InstallerError(msg) from e

        for entry in entries:
            if not entry.is_file() or not os.access(entry, os.X_OK):
                continue
            module_path = self.get_module_path(entry)
            packages.add_unique(Package(type=PackageType.GO, name=module_path or entry.name))
        return packages

    def get_module_path(self, binary: Path) -> str | None:
        """Read the main module path embedded in a Go binary.

        Returns:
            Module path, or None if ``go version -m`` cannot read it.
        """
        try:
            result = run_command(["go", "version", "-m", str(binary)], timeout=30.0)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug("go version -m failed for %s: %s", binary, e)
            return None
        if not result.success:
            return None

        for line in result.stdout.splitlines():
            parts = line.split()
            if len(parts) >= 2 and parts[0] == "path":
                return parts[1]
        return None

    def install(self, package: Package) -> None:
        """Install a tool with ``go install``, defaulting to ``@latest``."""
        target = package.name if "@" in package.name else f"{package.name}@latest"
        self._run(["go", "install", target], package)

    def uninstall(self, package: Package) -> None:
        """Delete the tool's binary from the Go bin directory."""
        binary = self.get_bin_dir() / package.name.split("@")[0].rstrip("/").rsplit("/", 1)[-1]
        try:
            binary.unlink()
        except FileNotFoundError as e:
            msg = f"Binary not found for {package.id}: {binary}"
            raise InstallerError(msg) from e
        except OSError as e:
            msg = f"Cannot remove {binary}: {e}"
            raise InstallerError(msg) from e
        logger.info("Removed Go binary %s", binary)
