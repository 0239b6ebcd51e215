"""Unit tests for the installer registry."""

from collections.abc import Callable
from typing import Any

import pytest
from brewsync.installers import (
    BrewInstaller,
    InstallerError,
    build_registry,
    list_installed,
    unique_installers,
)
from brewsync.models.package import Package, PackageCollection, PackageType

BREW_TYPES = (PackageType.TAP, PackageType.BREW, PackageType.CASK)


class TestBuildRegistry:
    """Tests for build_registry function."""

    def test_covers_every_type(self) -> None:
        """Every PackageType has an installer."""
        registry = build_registry()
        assert set(registry) == set(PackageType)

    def test_homebrew_types_share_installer(self) -> None:
        """tap, brew and cask map to one BrewInstaller."""
        registry = build_registry()
        brew = registry[PackageType.BREW]

        assert isinstance(brew, BrewInstaller)
        assert registry[PackageType.TAP] is brew
        assert registry[PackageType.CASK] is brew

    def test_unique_installers(self) -> None:
        """Shared installers are returned once, in type order."""
        installers = unique_installers(build_registry())

        assert len(installers) == 6
        assert isinstance(installers[0], BrewInstaller)


class TestListInstalled:
    """Tests for list_installed function."""

    def test_merges_available_installers(self, make_installer: Callable[..., Any]) -> None:
        """Listings from available installers are merged."""
        brew = make_installer(
            BREW_TYPES, installed=PackageCollection([Package(PackageType.BREW, "git")])
        )
        go = make_installer(
            (PackageType.GO,),
            installed=PackageCollection([Package(PackageType.GO, "example.com/tool")]),
            available=False,
        )
        registry = {t: brew for t in BREW_TYPES} | {PackageType.GO: go}

        assert [p.id for p in list_installed(registry)] == ["brew:git"]

    def test_type_filter(self, make_installer: Callable[..., Any]) -> None:
        """Only requested types are returned."""
        brew = make_installer(
            BREW_TYPES,
            installed=PackageCollection(
                [Package(PackageType.BREW, "git"), Package(PackageType.CASK, "arc")]
            ),
        )
        registry = {t: brew for t in BREW_TYPES}

        assert list_installed(registry, (PackageType.CASK,)).names() == ["arc"]

    def test_os_error_wrapped(self, make_installer: Callable[..., Any]) -> None:
        """OSError from a listing is raised as InstallerError."""
        brew = make_installer(BREW_TYPES)

        def explode() -> PackageCollection:
            raise PermissionError("denied")

        brew.list_packages = explode

        with pytest.raises(InstallerError, match="listing failed: denied"):
            list_installed({t: brew for t in BREW_TYPES})
