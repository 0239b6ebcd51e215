"""Ignore and protection rules.

Two independent policies are applied during reconciliation:

- *Ignored* packages (ignore.toml) are never installed and never removed.
- *Machine-specific* packages (config.toml) are never removed from their
  owning machine and are not suggested for import on other machines.

``protected_from_removal`` combines both and must only be applied to
removals; additions are filtered with ``filter_ignored`` alone.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from brewsync.models.config import IgnoreConfiguration
from brewsync.models.package import Package, PackageCollection

MachineSpecific = Mapping[str, Sequence[str]]


def is_ignored(machine: str, package: Package, config: IgnoreConfiguration) -> bool:
    """Check whether a package is ignored on a machine.

    True when the package type is ignored globally or for ``machine``, or
    when its ID is ignored globally or for ``machine``.
    """
    machine_scope = config.machines.get(machine)
    global_scope = config.global_scope

    if package.type in global_scope.categories:
        return True
    if machine_scope is not None and package.type in machine_scope.categories:
        return True
    if package.id in global_scope.packages:
        return True
    return machine_scope is not None and package.id in machine_scope.packages


def filter_ignored(
    machine: str,
    packages: PackageCollection,
    config: IgnoreConfiguration,
) -> PackageCollection:
    """Return the packages that are not ignored on ``machine``."""
    return PackageCollection(p for p in packages if not is_ignored(machine, p, config))


def is_machine_specific(machine: str, package: Package, machine_specific: MachineSpecific) -> bool:
    """Check whether a package is marked as unique to ``machine``."""
    return package.id in machine_specific.get(machine, ())


def is_machine_specific_elsewhere(
    machine: str,
    package: Package,
    machine_specific: MachineSpecific,
) -> bool:
    """Check whether a package is marked as unique to some other machine."""
    return any(
        package.id in ids for owner, ids in machine_specific.items() if owner != machine
    )


def protected_from_removal(
    machine: str,
    package: Package,
    config: IgnoreConfiguration,
    machine_specific: MachineSpecific,
) -> bool:
    """Check whether a package must not be removed from ``machine``.

    A package is protected when it is ignored or machine-specific to
    ``machine``.
    """
    return is_ignored(machine, package, config) or is_machine_specific(
        machine, package, machine_specific
    )


def partition_removals(
    machine: str,
    removals: PackageCollection,
    config: IgnoreConfiguration,
    machine_specific: MachineSpecific,
) -> tuple[PackageCollection, PackageCollection]:
    """Split removal candidates into removable and protected packages.

    Returns:
        Tuple of (removable, protected), each in input order.
    """
    removable = PackageCollection()
    protected = PackageCollection()
    for package in removals:
        if protected_from_removal(machine, package, config, machine_specific):
            protected.add_unique(package)
        else:
            removable.add_unique(package)
    return removable, protected
