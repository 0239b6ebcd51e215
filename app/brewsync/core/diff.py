"""Diff engine for comparing two package collections.

The source collection is the desired state (typically another machine's
Brewfile) and the current collection is what this machine has. Packages
are compared by ID only; descriptions and options never produce a
difference.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from brewsync.models.package import PackageCollection, PackageType


@dataclass(frozen=True, slots=True)
class DiffResult:
    """Result of comparing a source collection with the current one.

    Attributes:
        additions: In source but not current (source order).
        removals: In current but not source (current order).
        common: In both; entries are taken from current.
    """

    additions: PackageCollection = field(default_factory=PackageCollection)
    removals: PackageCollection = field(default_factory=PackageCollection)
    common: PackageCollection = field(default_factory=PackageCollection)

    @property
    def is_empty(self) -> bool:
        """Check if there are no additions or removals."""
        return not (self.additions or self.removals)

    @property
    def total_changes(self) -> int:
        """Number of additions plus removals."""
        return len(self.additions) + len(self.removals)

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization.

        Returns:
            Additions and removals as ``{type: [names]}`` plus the
            number of common packages.
        """
        return {
            "additions": _names_by_type(self.additions),
            "removals": _names_by_type(self.removals),
            "common": len(self.common),
        }


def _names_by_type(packages: PackageCollection) -> dict[str, list[str]]:
    """Group package names by type value."""
    return {
        package_type.value: group.names() for package_type, group in packages.by_type().items()
    }


def compute_diff(source: PackageCollection, current: PackageCollection) -> DiffResult:
    """Compare a source collection against the current one.

    Runs in O(len(source) + len(current)).

    Args:
        source: Desired packages.
        current: Packages present now.

    Returns:
        DiffResult with additions, removals and common packages.
    """
    current_by_id = {package.id: package for package in current}
    source_ids = {package.id for package in source}

    additions = PackageCollection()
    common = PackageCollection()
    for package in source:
        existing = current_by_id.get(package.id)
        if existing is None:
            additions.add_unique(package)
        else:
            common.add_unique(existing)

    removals = PackageCollection(p for p in current if p.id not in source_ids)

    return DiffResult(additions=additions, removals=removals, common=common)


def compute_diff_by_type(
    source: PackageCollection,
    current: PackageCollection,
    types: tuple[PackageType, ...],
) -> DiffResult:
    """Compare only packages of the given types.

    Args:
        source: Desired packages.
        current: Packages present now.
        types: Types to include. Empty means all types.

    Returns:
        DiffResult restricted to ``types``.
    """
    if not types:
        return compute_diff(source, current)
    return compute_diff(source.filter(*types), current.filter(*types))
