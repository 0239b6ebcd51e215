"""Unit tests for ignore and protection rules."""

import pytest
from brewsync.core.ignore import (
    filter_ignored,
    is_ignored,
    is_machine_specific,
    is_machine_specific_elsewhere,
    partition_removals,
    protected_from_removal,
)
from brewsync.models.config import IgnoreConfiguration
from brewsync.models.package import Package, PackageCollection, PackageType

DOCKER = Package(PackageType.CASK, "docker")
QMK = Package(PackageType.BREW, "qmk")
GIT = Package(PackageType.BREW, "git")
XCODE = Package(PackageType.MAS, "497799835", full_name="Xcode")


@pytest.fixture
def ignore() -> IgnoreConfiguration:
    """Global mas category, global docker, and qmk ignored on air."""
    return IgnoreConfiguration.model_validate(
        {
            "global": {"categories": ["mas"], "packages": ["cask:docker"]},
            "machines": {"air": {"packages": ["brew:qmk"]}},
        }
    )


class TestIsIgnored:
    """Tests for is_ignored function."""

    def test_global_category(self, ignore: IgnoreConfiguration) -> None:
        """Globally ignored categories apply to every machine."""
        assert is_ignored("air", XCODE, ignore)
        assert is_ignored("studio", XCODE, ignore)

    def test_global_package(self, ignore: IgnoreConfiguration) -> None:
        """Globally ignored packages apply to every machine."""
        assert is_ignored("studio", DOCKER, ignore)

    def test_machine_package(self, ignore: IgnoreConfiguration) -> None:
        """Machine rules apply only to that machine."""
        assert is_ignored("air", QMK, ignore)
        assert not is_ignored("studio", QMK, ignore)

    def test_machine_category(self) -> None:
        """Machine categories apply only to that machine."""
        config = IgnoreConfiguration.model_validate(
            {"machines": {"studio": {"categories": ["brew"]}}}
        )
        assert is_ignored("studio", GIT, config)
        assert not is_ignored("air", GIT, config)

    def test_not_ignored(self, ignore: IgnoreConfiguration) -> None:
        """Packages matching no rule are not ignored."""
        assert not is_ignored("air", GIT, ignore)

    def test_filter_ignored_keeps_order(self, ignore: IgnoreConfiguration) -> None:
        """filter_ignored drops ignored packages and keeps order."""
        jq = Package(PackageType.BREW, "jq")
        packages = PackageCollection([GIT, DOCKER, QMK, jq])

        assert filter_ignored("air", packages, ignore).names() == ["git", "jq"]
        assert filter_ignored("studio", packages, ignore).names() == ["git", "qmk", "jq"]


class TestMachineSpecific:
    """Tests for machine-specific helpers."""

    def test_owner_and_elsewhere(self) -> None:
        """Ownership is per machine."""
        machine_specific = {"air": ["brew:qmk"]}

        assert is_machine_specific("air", QMK, machine_specific)
        assert not is_machine_specific("studio", QMK, machine_specific)
        assert is_machine_specific_elsewhere("studio", QMK, machine_specific)
        assert not is_machine_specific_elsewhere("air", QMK, machine_specific)

    def test_protected_from_removal(self) -> None:
        """Ignored or machine-specific packages are protected."""
        config = IgnoreConfiguration.model_validate({"global": {"packages": ["cask:docker"]}})
        machine_specific = {"air": ["brew:qmk"]}

        assert protected_from_removal("air", DOCKER, config, machine_specific)
        assert protected_from_removal("air", QMK, config, machine_specific)
        assert not protected_from_removal("studio", QMK, config, machine_specific)
        assert not protected_from_removal("air", GIT, config, machine_specific)

    def test_ignored_and_machine_specific_package(self) -> None:
        """One package both ignored and machine-specific is protected everywhere."""
        config = IgnoreConfiguration.model_validate({"global": {"packages": ["brew:qmk"]}})
        machine_specific = {"air": ["brew:qmk"]}

        assert protected_from_removal("air", QMK, config, machine_specific)
        assert protected_from_removal("studio", QMK, config, machine_specific)
        assert is_ignored("studio", QMK, config)
        assert not is_machine_specific("studio", QMK, machine_specific)

    def test_machine_specific_only_protects_owner(self) -> None:
        """Without an ignore rule, only the owning machine is protected."""
        machine_specific = {"air": ["brew:qmk"]}

        assert protected_from_removal("air", QMK, IgnoreConfiguration(), machine_specific)
        assert not protected_from_removal("studio", QMK, IgnoreConfiguration(), machine_specific)

    def test_partition_removals(self, ignore: IgnoreConfiguration) -> None:
        """Removals split into removable and protected, in order."""
        wget = Package(PackageType.BREW, "wget")
        removals = PackageCollection([GIT, DOCKER, wget])

        removable, protected = partition_removals(
            "studio", removals, ignore, {"studio": ["brew:wget"]}
        )

        assert removable.names() == ["git"]
        assert protected.names() == ["docker", "wget"]
