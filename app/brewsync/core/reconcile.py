"""Reconciliation planning.

Pure business logic that turns two machines' package lists into the set
of packages to install, remove, or leave alone. Shared by the ``sync``
and ``import`` commands.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from brewsync.core.diff import compute_diff
from brewsync.core.ignore import (
    MachineSpecific,
    filter_ignored,
    is_machine_specific_elsewhere,
    partition_removals,
)
from brewsync.models.config import IgnoreConfiguration
from brewsync.models.package import PackageCollection, PackageType

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SyncPlan:
    """Packages a sync would touch.

    Attributes:
        additions: Packages to install (ignored packages already removed).
        removals: Packages to remove (protected packages already removed).
        protected: Removal candidates kept because they are ignored or
            machine-specific.
    """

    additions: PackageCollection = field(default_factory=PackageCollection)
    removals: PackageCollection = field(default_factory=PackageCollection)
    protected: PackageCollection = field(default_factory=PackageCollection)

    @property
    def is_empty(self) -> bool:
        """Check if the plan would change nothing."""
        return not (self.additions or self.removals)


def _restrict(
    packages: PackageCollection,
    only: tuple[PackageType, ...],
    skip: tuple[PackageType, ...] = (),
) -> PackageCollection:
    if only:
        packages = packages.filter(*only)
    if skip:
        packages = packages.exclude(*skip)
    return packages


def plan_sync(
    machine: str,
    source: PackageCollection,
    current: PackageCollection,
    ignore: IgnoreConfiguration,
    machine_specific: MachineSpecific,
    only: tuple[PackageType, ...] = (),
) -> SyncPlan:
    """Plan making ``machine`` match ``source`` exactly.

    Ignored packages are dropped from additions. Removals are split into
    removable and protected (ignored or machine-specific to ``machine``).

    Args:
        machine: Name of the machine being synced.
        source: Packages of the source machine.
        current: Packages of ``machine``.
        ignore: Ignore rules.
        machine_specific: Machine-specific package IDs by machine.
        only: Restrict to these package types. Empty means all.

    Returns:
        SyncPlan describing the changes.
    """
    diff = compute_diff(source, current)
    additions = filter_ignored(machine, _restrict(diff.additions, only), ignore)
    removals, protected = partition_removals(
        machine, _restrict(diff.removals, only), ignore, machine_specific
    )
    logger.debug(
        "Sync plan for %s: +%d -%d (%d protected)",
        machine,
        len(additions),
        len(removals),
        len(protected),
    )
    return SyncPlan(additions=additions, removals=removals, protected=protected)


def merge_sources(sources: Iterable[PackageCollection]) -> PackageCollection:
    """Union several machines' packages; the first source wins on metadata."""
    merged = PackageCollection()
    for source in sources:
        merged.merge_unique(source)
    return merged


def plan_import(
    machine: str,
    sources: Iterable[PackageCollection],
    current: PackageCollection,
    ignore: IgnoreConfiguration,
    machine_specific: MachineSpecific,
    only: tuple[PackageType, ...] = (),
    skip: tuple[PackageType, ...] = (),
    include_machine_specific: bool = False,
) -> PackageCollection:
    """Plan installing packages that other machines have and ``machine`` lacks.

    Import never removes anything.

    Args:
        machine: Name of the machine importing.
        sources: Package lists of the source machines, in priority order.
        current: Packages of ``machine``.
        ignore: Ignore rules.
        machine_specific: Machine-specific package IDs by machine.
        only: Restrict to these types. Empty means all.
        skip: Exclude these types.
        include_machine_specific: Keep packages marked as unique to
            another machine.

    Returns:
        Packages to install, in source order.
    """
    diff = compute_diff(merge_sources(sources), current)
    candidates = filter_ignored(machine, _restrict(diff.additions, only, skip), ignore)
    if include_machine_specific:
        return candidates
    return PackageCollection(
        p for p in candidates if not is_machine_specific_elsewhere(machine, p, machine_specific)
    )
