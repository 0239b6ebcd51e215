"""Doctor command implementation.

Validates config.toml, ignore.toml, the configured Brewfiles and the
package manager tools, and reports every problem found in one table.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table

from brewsync import __version__
from brewsync.core.brewfile import BrewfileError, BrewfileNotFoundError, load_brewfile
from brewsync.core.config import (
    ConfigError,
    ConfigNotFoundError,
    get_local_hostname,
    load_config,
    load_ignore,
)
from brewsync.core.paths import get_config_path, get_ignore_path
from brewsync.installers import build_registry, unique_installers
from brewsync.models.config import AppConfig
from brewsync.models.package import PackageType
from brewsync.utils.formatting import console, print_error, print_success

logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Check the setup for problems.",
    invoke_without_command=True,
)


class CheckStatus(str, Enum):
    """Outcome of a single check."""

    OK = "ok"
    WARN = "warn"
    FAIL = "fail"


@dataclass(frozen=True, slots=True)
class CheckResult:
    """One line of the doctor report."""

    name: str
    status: CheckStatus
    message: str


_MARKERS = {
    CheckStatus.OK: "[success]✓[/success]",
    CheckStatus.WARN: "[warning]![/warning]",
    CheckStatus.FAIL: "[error]✗[/error]",
}


def check_config() -> tuple[list[CheckResult], AppConfig | None]:
    """Check that config.toml exists and is valid.

    Returns:
        Results, and the loaded config when it could be loaded.
    """
    path = get_config_path()
    try:
        config = load_config(path)
    except ConfigNotFoundError:
        return [
            CheckResult(
                "Config file",
                CheckStatus.FAIL,
                f"Not found at {path}. Run 'brewsync config init'.",
            )
        ], None
    except ConfigError as e:
        return [CheckResult("Config file", CheckStatus.FAIL, str(e))], None
    return [CheckResult("Config file", CheckStatus.OK, str(path))], config


def check_ignore() -> CheckResult:
    """Check that ignore.toml, if present, is valid."""
    path = get_ignore_path()
    if not path.exists():
        return CheckResult("Ignore file", CheckStatus.OK, "Not found (optional)")
    try:
        load_ignore(path)
    except ConfigError as e:
        return CheckResult("Ignore file", CheckStatus.FAIL, str(e))
    return CheckResult("Ignore file", CheckStatus.OK, str(path))


def check_machines(config: AppConfig) -> list[CheckResult]:
    """Check the current machine, default source and every Brewfile."""
    results: list[CheckResult] = []

    if not config.machines:
        results.append(CheckResult("Machines", CheckStatus.FAIL, "No machines configured"))

    current = config.resolve_current_machine(get_local_hostname())
    if current is None:
        results.append(
            CheckResult(
                "Current machine",
                CheckStatus.FAIL,
                "Not detected; set 'current_machine' or a matching 'hostname'",
            )
        )
    elif current not in config.machines:
        results.append(
            CheckResult(
                "Current machine",
                CheckStatus.FAIL,
                f"'{current}' is not a configured machine",
            )
        )
    else:
        results.append(CheckResult("Current machine", CheckStatus.OK, current))

    source = config.default_source
    if source is None:
        results.append(
            CheckResult("Default source", CheckStatus.WARN, "Not set; use --from with sync")
        )
    elif source not in config.machines:
        results.append(
            CheckResult(
                "Default source",
                CheckStatus.FAIL,
                f"'{source}' is not a configured machine",
            )
        )
    else:
        results.append(CheckResult("Default source", CheckStatus.OK, source))

    for owner in config.machine_specific:
        if owner not in config.machines:
            results.append(
                CheckResult(
                    "Machine-specific",
                    CheckStatus.WARN,
                    f"Entries for unknown machine '{owner}'",
                )
            )

    for name, machine in config.machines.items():
        results.append(check_brewfile(name, machine.brewfile, is_current=name == current))
    return results


def check_brewfile(name: str, path: Path, is_current: bool) -> CheckResult:
    """Check that a machine's Brewfile exists and parses.

    A missing Brewfile is an error only for the current machine; other
    machines get theirs from a dump on that machine.
    """
    label = f"Brewfile ({name})"
    try:
        result = load_brewfile(path)
    except BrewfileNotFoundError:
        if is_current:
            message = f"Not found at {path}. Run 'brewsync dump'."
            return CheckResult(label, CheckStatus.FAIL, message)
        return CheckResult(label, CheckStatus.WARN, f"Not found at {path}")
    except BrewfileError as e:
        return CheckResult(label, CheckStatus.FAIL, str(e))

    message = f"{len(result.packages)} package(s)"
    if result.warnings:
        message += f", {len(result.warnings)} skipped line(s)"
        return CheckResult(label, CheckStatus.WARN, message)
    return CheckResult(label, CheckStatus.OK, message)


def check_installers() -> list[CheckResult]:
    """Check which package manager tools are available.

    Homebrew is required; every other tool only limits which package
    types can be synced.
    """
    results: list[CheckResult] = []
    for installer in unique_installers(build_registry()):
        types = ", ".join(t.value for t in installer.package_types)
        label = f"Installer ({types})"
        if installer.is_available():
            results.append(CheckResult(label, CheckStatus.OK, "Available"))
        elif PackageType.BREW in installer.package_types:
            results.append(CheckResult(label, CheckStatus.FAIL, "Homebrew not found"))
        else:
            results.append(
                CheckResult(label, CheckStatus.WARN, "Not found; these packages are skipped")
            )
    return results


def run_checks() -> list[CheckResult]:
    """Run every check, skipping machine checks when the config is unusable."""
    results, config = check_config()
    results.append(check_ignore())
    if config is not None:
        results.extend(check_machines(config))
    results.extend(check_installers())
    return results


def create_report_table(results: list[CheckResult]) -> Table:
    """Create a table with one row per check."""
    table = Table(
        title=f"brewsync {__version__} diagnostics",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("", width=2, justify="center")
    table.add_column("Check", no_wrap=True)
    table.add_column("Details", style="muted")
    for result in results:
        table.add_row(_MARKERS[result.status], result.name, escape(result.message))
    return table


@app.callback(invoke_without_command=True)
def diagnose(ctx: typer.Context) -> None:
    """Check config, ignore rules, Brewfiles and installed tools.

    Exits with status 1 when any check fails. Warnings do not fail.

    Examples:
        brewsync doctor
    """
    # Skip if a subcommand is being invoked
    if ctx.invoked_subcommand is not None:
        return

    results = run_checks()
    console.print(create_report_table(results))

    failures = [r for r in results if r.status == CheckStatus.FAIL]
    warnings = [r for r in results if r.status == CheckStatus.WARN]
    logger.debug("Doctor: %d failure(s), %d warning(s)", len(failures), len(warnings))

    if failures:
        print_error(f"Found {len(failures)} problem(s)")
        raise typer.Exit(code=1)
    suffix = f" ({len(warnings)} warning(s))" if warnings else ""
    print_success(f"All checks passed{suffix}.")
