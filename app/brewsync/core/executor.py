"""Batch install/uninstall orchestration.

The Orchestrator dispatches each package to the installer registered for
its type, runs items strictly in order and never aborts a batch because
one item failed. Progress is exposed as a generator of events; the
``*_many`` helpers drive that generator and return a structured
BatchResult.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass

from brewsync.installers.base import Installer, InstallerUnavailableError
from brewsync.models.action import ActionResult, ActionType, BatchResult
from brewsync.models.package import Package, PackageCollection, PackageType

logger = logging.getLogger(__name__)

UNINSTALL_UNSUPPORTED_MESSAGE = "uninstall not supported; skipped"

@dataclass(frozen=True, slots=True)
class ProgressEvent:
    """Outcome of one item of a batch.

    Attributes:
        package: The package that was processed.
        index: 1-based position of the package in the batch.
        total: Number of packages in the batch.
        error: The failure, or None on success.
        message: Optional informational message (e.g. skipped no-op).
    """

    package: Package
    index: int
    total: int
    error: Exception | None = None
    message: str | None = None

    @property
    def success(self) -> bool:
        """Check if the item succeeded."""
        return self.error is None


@dataclass(frozen=True, slots=True)
class OutputEvent:
    """A line of live output produced while installing a package.

    Attributes:
        package: The package being installed.
        line: Output line without trailing newline.
    """

    package: Package
    line: str


BatchEvent = ProgressEvent | OutputEvent
ProgressCallback = Callable[[ProgressEvent], None]
OutputCallback = Callable[[OutputEvent], None]


class Orchestrator:
    """Runs install and uninstall batches against an installer registry.

    The registry is injected once and only read afterwards, so tests can
    substitute fake installers.

    Example:
        >>> orchestrator = Orchestrator(build_registry())
        >>> result = orchestrator.install_many(plan.additions)
        >>> result.ok
        True
    """

    def __init__(self, handlers: Mapping[PackageType, Installer]) -> None:
        self._handlers = dict(handlers)

    @property
    def handlers(self) -> Mapping[PackageType, Installer]:
        """Return the registered installers by package type."""
        return self._handlers

    def _lookup(self, package: Package) -> Installer:
        """Find the installer registered for a package's type.

        Raises:
            InstallerUnavailableError: If no installer is registered.
        """
        handler = self._handlers.get(package.type)
        if handler is None:
            msg = f"No installer registered for {package.type.value} packages"
            raise InstallerUnavailableError(msg)
        return handler

    def _resolve(self, package: Package) -> Installer:
        """Find an available installer for a package.

        Raises:
            InstallerUnavailableError: If no installer is registered for
                the type or its tool is not present.
        """
        handler = self._lookup(package)
        if not handler.is_available():
            msg = f"{handler.name} installer is not available for {package.id}"
            raise InstallerUnavailableError(msg)
        return handler

    def iter_install(
        self,
        packages: PackageCollection,
        stream_output: bool = False,
    ) -> Iterator[BatchEvent]:
        """Install packages one by one, yielding progress.

        Exactly one ProgressEvent is yielded per package, in order. When
        ``stream_output`` is set and the installer supports streaming,
        OutputEvents for that package are yielded first, as produced.

        Args:
            packages: Packages to install.
            stream_output: Yield live output lines where supported.

        Yields:
            OutputEvent and ProgressEvent instances.
        """
        total = len(packages)
        for index, package in enumerate(packages, start=1):
            logger.debug("Installing %s (%d/%d)", package.id, index, total)
            error: Exception | None = None
            try:
                handler = self._resolve(package)
                if stream_output and handler.supports_streaming:
                    for line in handler.iter_install_output(package):
                        yield OutputEvent(package=package, line=line)
                else:
                    handler.install(package)
            except Exception as e:
                # Any failure, expected or not, is recorded against this item only.
                logger.warning("Failed to install %s: %s", package.id, e)
                error = e
            yield ProgressEvent(package=package, index=index, total=total, error=error)

    def iter_uninstall(self, packages: PackageCollection) -> Iterator[ProgressEvent]:
        """Remove packages one by one, yielding one ProgressEvent each.

        Installers that cannot uninstall report success with a "skipped"
        message, whether or not their tool is present.

        Args:
            packages: Packages to remove.

        Yields:
            ProgressEvent per package, in order.
        """
        total = len(packages)
        for index, package in enumerate(packages, start=1):
            logger.debug("Uninstalling %s (%d/%d)", package.id, index, total)
            error: Exception | None = None
            message: str | None = None
            try:
                handler = self._lookup(package)
                if handler.supports_uninstall:
                    self._resolve(package).uninstall(package)
                else:
                    message = UNINSTALL_UNSUPPORTED_MESSAGE
                    logger.info("Skipping uninstall of %s: %s", package.id, message)
            except Exception as e:
                logger.warning("Failed to uninstall %s: %s", package.id, e)
                error = e
            yield ProgressEvent(
                package=package, index=index, total=total, error=error, message=message
            )

    def install_many(
        self,
        packages: PackageCollection,
        on_progress: ProgressCallback | None = None,
        on_output: OutputCallback | None = None,
    ) -> BatchResult:
        """Install packages, continuing past failures.

        Args:
            packages: Packages to install.
            on_progress: Called once per package after it is processed.
            on_output: Called per output line; enables streaming.

        Returns:
            BatchResult with one ActionResult per package.
        """
        events = self.iter_install(packages, stream_output=on_output is not None)
        return _collect(ActionType.INSTALL, events, on_progress, on_output)

    def uninstall_many(
        self,
        packages: PackageCollection,
        on_progress: ProgressCallback | None = None,
    ) -> BatchResult:
        """Remove packages, continuing past failures.

        Args:
            packages: Packages to remove.
            on_progress: Called once per package after it is processed.

        Returns:
            BatchResult with one ActionResult per package.
        """
        return _collect(ActionType.UNINSTALL, self.iter_uninstall(packages), on_progress, None)


def _collect(
    action_type: ActionType,
    events: Iterator[BatchEvent],
    on_progress: ProgressCallback | None,
    on_output: OutputCallback | None,
) -> BatchResult:
    """Drive an event stream into a BatchResult, invoking callbacks."""
    results: list[ActionResult] = []
    last_error: Exception | None = None

    for event in events:
        if isinstance(event, OutputEvent):
            if on_output is not None:
                on_output(event)
            continue

        if event.error is not None:
            last_error = event.error
        results.append(
            ActionResult(
                package=event.package,
                action_type=action_type,
                success=event.success,
                message=event.message,
                error=str(event.error) if event.error is not None else None,
            )
        )
        if on_progress is not None:
            on_progress(event)

    if last_error is not None:
        failed = sum(1 for r in results if r.failed)
        logger.warning("%d of %d %s action(s) failed", failed, len(results), action_type.value)

    return BatchResult(action_type=action_type, results=tuple(results), last_error=last_error)
