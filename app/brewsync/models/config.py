"""Configuration models for machines and ignore rules.

This module defines the Pydantic models for ``config.toml`` (machines,
current/default machine, machine-specific packages) and ``ignore.toml``
(global and per-machine ignore scopes).
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from brewsync.models.package import PackageType, parse_package_id


class IgnoreScope(BaseModel):
    """One layer of ignore rules.

    Attributes:
        categories: Package types ignored entirely.
        packages: Package IDs (``type:name``) ignored individually.
    """

    model_config = ConfigDict(extra="forbid")

    categories: Annotated[
        list[PackageType],
        Field(default_factory=list, description="Ignored package types"),
    ]
    packages: Annotated[
        list[str],
        Field(default_factory=list, description="Ignored package IDs (type:name)"),
    ]

    @field_validator("packages")
    @classmethod
    def validate_package_ids(cls, value: list[str]) -> list[str]:
        """Validate that every entry is a well-formed package ID."""
        for package_id in value:
            parse_package_id(package_id)
        return value

    @property
    def is_empty(self) -> bool:
        """Check if the scope ignores nothing."""
        return not (self.categories or self.packages)


class IgnoreConfiguration(BaseModel):
    """Two-layer ignore policy.

    A package is ignored on a machine when its type is ignored globally or
    for that machine, or when its ID is ignored globally or for that
    machine. Category rules cannot be overridden by package rules.

    Attributes:
        global_scope: Rules applied to every machine (``[global]`` in TOML).
        machines: Rules applied to a single machine, keyed by machine name.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    global_scope: Annotated[
        IgnoreScope,
        Field(alias="global", default_factory=IgnoreScope, description="Global ignores"),
    ]
    machines: Annotated[
        dict[str, IgnoreScope],
        Field(default_factory=dict, description="Per-machine ignores"),
    ]

    def scope(self, machine: str | None) -> IgnoreScope:
        """Return the scope for a machine, or the global scope for None.

        A missing machine scope is returned as a fresh empty scope that is
        not stored.
        """
        if machine is None:
            return self.global_scope
        return self.machines.get(machine) or IgnoreScope()

    def _editable_scope(self, machine: str | None) -> IgnoreScope:
        if machine is None:
            return self.global_scope
        return self.machines.setdefault(machine, IgnoreScope())

    def add_category(self, category: PackageType, machine: str | None = None) -> bool:
        """Ignore a whole package type.

        Returns:
            True if the rule was added, False if it already existed.
        """
        scope = self._editable_scope(machine)
        if category in scope.categories:
            return False
        scope.categories.append(category)
        return True

    def remove_category(self, category: PackageType, machine: str | None = None) -> bool:
        """Stop ignoring a package type.

        Returns:
            True if the rule was removed, False if it was not present.
        """
        scope = self.scope(machine)
        if category not in scope.categories:
            return False
        scope.categories.remove(category)
        return True

    def add_package(self, package_id: str, machine: str | None = None) -> bool:
        """Ignore a single package by ID.

        Raises:
            ValueError: If ``package_id`` is malformed.

        Returns:
            True if the rule was added, False if it already existed.
        """
        parse_package_id(package_id)
        scope = self._editable_scope(machine)
        if package_id in scope.packages:
            return False
        scope.packages.append(package_id)
        return True

    def remove_package(self, package_id: str, machine: str | None = None) -> bool:
        """Stop ignoring a single package.

        Returns:
            True if the rule was removed, False if it was not present.
        """
        scope = self.scope(machine)
        if package_id not in scope.packages:
            return False
        scope.packages.remove(package_id)
        return True


class MachineConfig(BaseModel):
    """A machine whose Brewfile is tracked.

    Attributes:
        hostname: Local hostname used to detect the current machine.
        brewfile: Path to the machine's Brewfile.
        description: Optional free-text description.
    """

    model_config = ConfigDict(extra="forbid")

    hostname: Annotated[str | None, Field(description="Hostname for auto-detection")] = None
    brewfile: Annotated[Path, Field(description="Path to the machine's Brewfile")]
    description: Annotated[str | None, Field(description="Machine description")] = None

    @field_validator("brewfile")
    @classmethod
    def expand_user(cls, value: Path) -> Path:
        """Expand ``~`` in the Brewfile path."""
        return value.expanduser()


class AppConfig(BaseModel):
    """Complete brewsync configuration.

    Attributes:
        machines: Known machines keyed by short name.
        current_machine: Explicit name of this machine (overrides hostname match).
        default_source: Machine used as the source when none is given.
        machine_specific: Package IDs intentionally unique to one machine.
    """

    model_config = ConfigDict(extra="forbid")

    machines: Annotated[
        dict[str, MachineConfig],
        Field(default_factory=dict, description="Known machines"),
    ]
    current_machine: Annotated[
        str | None,
        Field(description="Name of this machine"),
    ] = None
    default_source: Annotated[
        str | None,
        Field(description="Default source machine"),
    ] = None
    machine_specific: Annotated[
        dict[str, list[str]],
        Field(default_factory=dict, description="Machine-specific package IDs"),
    ]

    def resolve_current_machine(self, hostname: str | None = None) -> str | None:
        """Determine the name of the machine brewsync is running on.

        ``current_machine`` wins when set; otherwise the machine whose
        hostname matches (case-insensitive) is returned.

        Args:
            hostname: Local hostname to match against.

        Returns:
            Machine name, or None if it cannot be determined.
        """
        if self.current_machine:
            return self.current_machine
        if not hostname:
            return None
        wanted = hostname.lower().removesuffix(".local")
        for name, machine in self.machines.items():
            if machine.hostname and machine.hostname.lower().removesuffix(".local") == wanted:
                return name
        return None
