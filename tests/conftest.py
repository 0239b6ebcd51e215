"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from brewsync.core.config import save_config
from brewsync.installers.base import Installer, InstallerError
from brewsync.models.config import AppConfig, MachineConfig
from brewsync.models.package import Package, PackageCollection, PackageType


class FakeInstaller(Installer):
    """In-memory installer that records calls and fails on request."""

    def __init__(
        self,
        types: tuple[PackageType, ...],
        installed: PackageCollection | None = None,
        fail: set[str] | None = None,
        available: bool = True,
        streaming_lines: list[str] | None = None,
    ) -> None:
        self._types = types
        self.installed = installed if installed is not None else PackageCollection()
        self.fail = fail or set()
        self.available = available
        self.streaming_lines = streaming_lines
        self.supports_streaming = streaming_lines is not None
        self.calls: list[tuple[str, str]] = []

    @property
    def package_types(self) -> tuple[PackageType, ...]:
        return self._types

    def is_available(self) -> bool:
        return self.available

    def list_packages(self) -> PackageCollection:
        return self.installed

    def install(self, package: Package) -> None:
        self.calls.append(("install", package.id))
        if package.name in self.fail:
            msg = f"install of {package.name} failed"
            raise InstallerError(msg)

    def iter_install_output(self, package: Package) -> Iterator[str]:
        if self.streaming_lines is None:
            yield from super().iter_install_output(package)
            return
        self.calls.append(("install", package.id))
        for line in self.streaming_lines:
            yield f"{package.name}: {line}"
        if package.name in self.fail:
            msg = f"install of {package.name} failed"
            raise InstallerError(msg)

    def uninstall(self, package: Package) -> None:
        self.calls.append(("uninstall", package.id))
        if package.name in self.fail:
            msg = f"uninstall of {package.name} failed"
            raise InstallerError(msg)


@pytest.fixture
def make_installer() -> Callable[..., FakeInstaller]:
    """Factory for FakeInstaller instances."""
    return FakeInstaller


@pytest.fixture
def config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point BREWSYNC_CONFIG_DIR at a temporary directory."""
    directory = tmp_path / "brewsync"
    directory.mkdir()
    monkeypatch.setenv("BREWSYNC_CONFIG_DIR", str(directory))
    return directory


@pytest.fixture
def sample_brewfile() -> str:
    """Brewfile as written by 'brew bundle dump --describe'."""
    return """tap "homebrew/bundle"
tap "oven-sh/bun"

# Distributed revision control system
brew "git"
# Lightweight and flexible command-line JSON processor
brew "jq"
brew "ripgrep"

# Web browser
cask "firefox"
cask "iterm2"

vscode "ms-python.python"
cursor "esbenp.prettier-vscode"
go "golang.org/x/tools/gopls"
mas "Xcode", id: 497799835
"""


@pytest.fixture
def mock_mas_output() -> str:
    """Sample 'mas list' output."""
    return """497799835  Xcode        (15.2)
1333542190 1Password 7 (7.9.11)
904280696  Things 3     (3.20.1)
not a valid line"""


@pytest.fixture
def machines_config(config_dir: Path) -> AppConfig:
    """Save a config with air (current), studio (default source) and mini."""
    config = AppConfig(
        machines={
            name: MachineConfig(hostname=name, brewfile=config_dir / f"Brewfile.{name}")
            for name in ("air", "studio", "mini")
        },
        current_machine="air",
        default_source="studio",
    )
    save_config(config)
    return config


@pytest.fixture
def write_brewfile_for(config_dir: Path) -> Callable[[str, str], Path]:
    """Write Brewfile text for a machine configured by machines_config."""

    def write(machine: str, text: str) -> Path:
        path = config_dir / f"Brewfile.{machine}"
        path.write_text(text)
        return path

    return write
