"""Action models for package operations.

This module defines data structures for representing the outcome of
install and uninstall operations, both per package and per batch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from brewsync.models.package import Package


class ActionType(Enum):
    """Type of package management action.

    Attributes:
        INSTALL: Install a package (or register a tap).
        UNINSTALL: Remove a package (or untap).
    """

    INSTALL = "install"
    UNINSTALL = "uninstall"


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Result of executing a single package action.

    Attributes:
        package: The package that was operated on.
        action_type: Whether the package was installed or removed.
        success: Whether the action completed successfully.
        message: Optional success message or additional information.
        error: Optional error message if the action failed.
    """

    package: Package
    action_type: ActionType
    success: bool
    message: str | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the action failed."""
        return not self.success


@dataclass(frozen=True, slots=True)
class BatchResult:
    """Aggregate outcome of a batch of actions.

    ``results`` holds one entry per attempted package, in order.
    ``last_error`` is the last failure observed, kept as the batch-level
    error signal; inspect ``results`` for every failure.

    Attributes:
        action_type: Whether the batch installed or removed packages.
        results: Per-package results in execution order.
        last_error: The last exception raised by any item, if any.
    """

    action_type: ActionType
    results: tuple[ActionResult, ...] = field(default=())
    last_error: Exception | None = None

    @property
    def ok(self) -> bool:
        """Check if every item succeeded."""
        return self.last_error is None

    @property
    def succeeded(self) -> tuple[ActionResult, ...]:
        """Results of items that succeeded."""
        return tuple(r for r in self.results if r.success)

    @property
    def failed(self) -> tuple[ActionResult, ...]:
        """Results of items that failed."""
        return tuple(r for r in self.results if r.failed)
