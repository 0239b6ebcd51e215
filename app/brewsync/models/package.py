"""Package models for manifest reconciliation.

This module defines the core data structures for representing packages
tracked in a Brewfile (taps, formulae, casks, editor extensions, Go tools
and Mac App Store apps) and ordered collections of them.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import overload


class PackageType(Enum):
    """Enumeration of supported package types.

    Declaration order is the fixed order used when writing Brewfiles
    and when grouping packages for display.
    """

    TAP = "tap"
    BREW = "brew"
    CASK = "cask"
    VSCODE = "vscode"
    CURSOR = "cursor"
    ANTIGRAVITY = "antigravity"
    GO = "go"
    MAS = "mas"

    @property
    def is_primary(self) -> bool:
        """Check if this type is handled by Homebrew itself."""
        return self in PRIMARY_TYPES

    @classmethod
    def parse(cls, value: str) -> PackageType:
        """Parse a type keyword (case-insensitive).

        Args:
            value: Type keyword such as "brew" or "cask".

        Returns:
            Matching PackageType.

        Raises:
            ValueError: If the keyword is not a known package type.
        """
        try:
            return cls(value.strip().lower())
        except ValueError:
            valid = ", ".join(t.value for t in cls)
            msg = f"Invalid package type '{value}'; valid types: {valid}"
            raise ValueError(msg) from None


PRIMARY_TYPES: frozenset[PackageType] = frozenset(
    {PackageType.TAP, PackageType.BREW, PackageType.CASK}
)


@dataclass(frozen=True, slots=True, eq=False)
class Package:
    """A single trackable package.

    Identity is the pair ``(type, name)``; ``full_name``, ``options`` and
    ``description`` are carried along but never compared.

    Attributes:
        type: Package category.
        name: Manager-specific identifier (e.g. 'git', 'ms-python.python',
            or the numeric ID of an App Store title).
        full_name: Human-readable name when ``name`` is opaque.
        options: Auxiliary attributes (e.g. App Store 'id', 'link').
        description: Annotation taken from manifest comments.
    """

    type: PackageType
    name: str
    full_name: str | None = field(default=None)
    options: dict[str, str] = field(default_factory=dict)
    description: str | None = field(default=None)

    def __post_init__(self) -> None:
        """Validate package data after initialization."""
        if not isinstance(self.type, PackageType):
            msg = f"Package type must be a PackageType, got {self.type!r}"
            raise ValueError(msg)
        if not self.name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)

    @property
    def id(self) -> str:
        """Identity key in the form ``type:name``."""
        return f"{self.type.value}:{self.name}"

    @property
    def display_name(self) -> str:
        """Name suitable for display."""
        return self.full_name or self.name

    def with_option(self, key: str, value: str) -> Package:
        """Return a copy of this package with an option set."""
        return replace(self, options={**self.options, key: value})

    def with_description(self, description: str | None) -> Package:
        """Return a copy of this package with a new description."""
        return replace(self, description=description)

    def to_dict(self) -> dict[str, object]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "id": self.id,
            "type": self.type.value,
            "name": self.name,
            "full_name": self.full_name,
            "description": self.description,
            "options": dict(self.options),
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Package):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return self.id


def parse_package_id(value: str) -> Package:
    """Build a Package from an identity string such as ``cask:firefox``.

    Args:
        value: String in ``type:name`` form.

    Returns:
        Package with the parsed type and name.

    Raises:
        ValueError: If the string is malformed or the type is unknown.
    """
    type_part, sep, name = value.partition(":")
    if not sep or not name:
        msg = f"Invalid package ID '{value}'; expected format type:name"
        raise ValueError(msg)
    return Package(type=PackageType.parse(type_part), name=name)


class PackageCollection:
    """Ordered sequence of packages keyed by identity.

    Insertion order is preserved and used for display grouping. IDs are
    unique within a collection: the constructor and the mutating helpers
    (``add_unique``, ``merge_unique``) never replace an existing entry, so
    metadata always comes from the first occurrence.
    """

    __slots__ = ("_by_id", "_items")

    def __init__(self, items: Iterable[Package] = ()) -> None:
        self._items: list[Package] = []
        self._by_id: dict[str, Package] = {}
        self.add_unique(*items)

    @overload
    def __getitem__(self, index: int) -> Package: ...

    @overload
    def __getitem__(self, index: slice) -> PackageCollection: ...

    def __getitem__(self, index: int | slice) -> Package | PackageCollection:
        if isinstance(index, slice):
            return PackageCollection(self._items[index])
        return self._items[index]

    def __iter__(self) -> Iterator[Package]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Package):
            return item.id in self._by_id
        if isinstance(item, str):
            return item in self._by_id
        return False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PackageCollection):
            return NotImplemented
        return [p.id for p in self._items] == [p.id for p in other._items]

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PackageCollection([{', '.join(p.id for p in self._items)}])"

    def ids(self) -> set[str]:
        """Return the set of package IDs in this collection."""
        return set(self._by_id)

    def get(self, package_id: str) -> Package | None:
        """Return the package with the given ID, if present."""
        return self._by_id.get(package_id)

    def add_unique(self, *items: Package) -> PackageCollection:
        """Append packages whose ID is not already present.

        Existing entries are left untouched (description and options are
        not updated).

        Returns:
            This collection, to allow chaining.
        """
        for item in items:
            if item.id not in self._by_id:
                self._items.append(item)
                self._by_id[item.id] = item
        return self

    def merge_unique(self, other: Iterable[Package]) -> PackageCollection:
        """Merge another source into this one; the first source wins.

        Returns:
            This collection, to allow chaining.
        """
        return self.add_unique(*other)

    def by_type(self) -> dict[PackageType, PackageCollection]:
        """Group packages by type, preserving order within each group."""
        groups: dict[PackageType, PackageCollection] = {}
        for item in self._items:
            groups.setdefault(item.type, PackageCollection()).add_unique(item)
        return groups

    def filter(self, *types: PackageType) -> PackageCollection:
        """Return the packages whose type is one of ``types``."""
        wanted = set(types)
        return PackageCollection(p for p in self._items if p.type in wanted)

    def exclude(self, *types: PackageType) -> PackageCollection:
        """Return the packages whose type is not one of ``types``."""
        unwanted = set(types)
        return PackageCollection(p for p in self._items if p.type not in unwanted)

    def count_by_type(self) -> dict[str, int]:
        """Count packages per type value."""
        counts: dict[str, int] = {}
        for item in self._items:
            counts[item.type.value] = counts.get(item.type.value, 0) + 1
        return counts

    def names(self) -> list[str]:
        """Return package names in collection order."""
        return [p.name for p in self._items]
