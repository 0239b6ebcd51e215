"""Unit tests for package collection used by dump."""

import subprocess
from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

from brewsync.core.dump import collect_packages, preserve_descriptions
from brewsync.installers.base import InstallerError
from brewsync.installers.brew import BrewInstaller
from brewsync.installers.extensions import VSCodeInstaller
from brewsync.models.package import Package, PackageCollection, PackageType

BREW_TYPES = (PackageType.TAP, PackageType.BREW, PackageType.CASK)


def _registry(*installers: Any) -> dict[PackageType, Any]:
    registry: dict[PackageType, Any] = {}
    for installer in installers:
        for package_type in installer.package_types:
            registry[package_type] = installer
    return registry


class TestCollectPackages:
    """Tests for collect_packages function."""

    def test_type_order_and_skip_unavailable(self, make_installer: Callable[..., Any]) -> None:
        """Packages come back in type order; unavailable tools are skipped."""
        go = make_installer(
            (PackageType.GO,),
            installed=PackageCollection([Package(PackageType.GO, "golang.org/x/tools/gopls")]),
        )
        brew = make_installer(
            BREW_TYPES,
            installed=PackageCollection(
                [Package(PackageType.CASK, "arc"), Package(PackageType.TAP, "oven-sh/bun")]
            ),
        )
        mas = make_installer(
            (PackageType.MAS,),
            installed=PackageCollection([Package(PackageType.MAS, "1")]),
            available=False,
        )

        packages, errors = collect_packages(_registry(go, brew, mas))

        assert [p.id for p in packages] == [
            "tap:oven-sh/bun",
            "cask:arc",
            "go:golang.org/x/tools/gopls",
        ]
        assert errors == []

    def test_failing_installer_reported(self, make_installer: Callable[..., Any]) -> None:
        """A listing failure is returned as an error and others still run."""
        broken = make_installer((PackageType.VSCODE,))
        broken.list_packages = MagicMock(side_effect=InstallerError("code crashed"))
        go = make_installer(
            (PackageType.GO,),
            installed=PackageCollection([Package(PackageType.GO, "example.com/tool")]),
        )

        packages, errors = collect_packages(_registry(broken, go))

        assert packages.names() == ["example.com/tool"]
        assert errors == ["vscode: code crashed"]

    def test_listing_timeout_reported(self, make_installer: Callable[..., Any]) -> None:
        """A hung listing command becomes an error, not an abort."""
        go = make_installer(
            (PackageType.GO,),
            installed=PackageCollection([Package(PackageType.GO, "example.com/tool")]),
        )
        timeout = subprocess.TimeoutExpired(cmd=["code", "--list-extensions"], timeout=120.0)

        with (
            patch("brewsync.installers.extensions.command_exists", return_value=True),
            patch("brewsync.installers.base.run_command", side_effect=timeout),
        ):
            packages, errors = collect_packages(_registry(VSCodeInstaller(), go))

        assert packages.names() == ["example.com/tool"]
        assert len(errors) == 1
        assert errors[0].startswith("vscode: 'code --list-extensions' timed out")

    def test_brew_bundle_dump_used(self, tmp_path: Path) -> None:
        """Homebrew packages come from brew bundle dump when available."""
        brew = BrewInstaller()

        def fake_dump(path: Path) -> None:
            path.write_text('# VCS\nbrew "git"\ncask "arc"\nvscode "x.y"\n')

        with (
            patch.object(brew, "is_available", return_value=True),
            patch.object(brew, "dump_to_file", side_effect=fake_dump),
            patch.object(brew, "list_packages") as list_packages,
        ):
            packages, errors = collect_packages(_registry(brew))

        list_packages.assert_not_called()
        assert [p.id for p in packages] == ["brew:git", "cask:arc"]
        assert packages[0].description == "VCS"
        assert errors == []

    def test_brew_bundle_failure_falls_back(self) -> None:
        """A failing dump falls back to plain listing."""
        brew = BrewInstaller()
        listed = PackageCollection([Package(PackageType.BREW, "git")])

        with (
            patch.object(brew, "is_available", return_value=True),
            patch.object(brew, "dump_to_file", side_effect=InstallerError("no bundle")),
            patch.object(brew, "list_packages", return_value=listed),
        ):
            packages, _ = collect_packages(_registry(brew))

        assert packages.names() == ["git"]

    def test_brew_bundle_disabled(self) -> None:
        """use_brew_bundle=False lists directly."""
        brew = BrewInstaller()

        with (
            patch.object(brew, "is_available", return_value=True),
            patch.object(brew, "dump_to_file") as dump_to_file,
            patch.object(brew, "list_packages", return_value=PackageCollection()),
        ):
            collect_packages(_registry(brew), use_brew_bundle=False)

        dump_to_file.assert_not_called()


class TestPreserveDescriptions:
    """Tests for preserve_descriptions function."""

    def test_inherits_missing_descriptions(self) -> None:
        """Existing descriptions fill gaps but never override."""
        fresh = PackageCollection(
            [
                Package(PackageType.BREW, "git"),
                Package(PackageType.BREW, "jq", description="new text"),
                Package(PackageType.BREW, "wget"),
            ]
        )
        existing = PackageCollection(
            [
                Package(PackageType.BREW, "git", description="VCS"),
                Package(PackageType.BREW, "jq", description="old text"),
            ]
        )

        result = preserve_descriptions(fresh, existing)

        assert [p.description for p in result] == ["VCS", "new text", None]
        assert result.names() == ["git", "jq", "wget"]
