"""Unit tests for doctor command."""

from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from brewsync.cli.commands.doctor import CheckStatus, check_brewfile, run_checks
from brewsync.cli.main import app
from brewsync.core.config import save_config
from brewsync.models.config import AppConfig
from brewsync.models.package import PackageType
from typer.testing import CliRunner

runner = CliRunner()

BREW_TYPES = (PackageType.TAP, PackageType.BREW, PackageType.CASK)


@pytest.fixture
def registry(make_installer: Callable[..., Any]) -> dict[PackageType, Any]:
    """brew and code available, mas missing."""
    brew = make_installer(BREW_TYPES)
    vscode = make_installer((PackageType.VSCODE,))
    mas = make_installer((PackageType.MAS,), available=False)
    return {t: brew for t in BREW_TYPES} | {PackageType.VSCODE: vscode, PackageType.MAS: mas}


@pytest.fixture
def healthy(
    machines_config: AppConfig, write_brewfile_for: Callable[[str, str], Path]
) -> AppConfig:
    """Config with a Brewfile for every machine."""
    for name in ("air", "studio", "mini"):
        write_brewfile_for(name, 'brew "git"\n')
    return machines_config


def _statuses(registry: dict[PackageType, Any]) -> dict[str, CheckStatus]:
    with patch("brewsync.cli.commands.doctor.build_registry", return_value=registry):
        return {r.name: r.status for r in run_checks()}


class TestDoctorCommand:
    """Tests for the doctor command."""

    def test_healthy_setup(self, healthy: AppConfig, registry: dict[PackageType, Any]) -> None:
        """A complete setup passes; a missing optional tool is a warning."""
        with patch("brewsync.cli.commands.doctor.build_registry", return_value=registry):
            result = runner.invoke(app, ["doctor"])

        assert result.exit_code == 0
        assert "All checks passed (1 warning(s))." in result.output
        assert "Current machine" in result.output
        assert "Installer (tap, brew, cask)" in result.output

    def test_without_config(self, config_dir: Path, registry: dict[PackageType, Any]) -> None:
        """A missing config fails but tools are still checked."""
        with patch("brewsync.cli.commands.doctor.build_registry", return_value=registry):
            result = runner.invoke(app, ["doctor"])

        assert result.exit_code == 1
        assert "Found 1 problem(s)" in result.output
        assert "Installer (vscode)" in result.output
        assert "Current machine" not in result.output

    def test_missing_homebrew_fails(
        self,
        healthy: AppConfig,
        make_installer: Callable[..., Any],
    ) -> None:
        """Homebrew is required."""
        brew = make_installer(BREW_TYPES, available=False)

        with patch(
            "brewsync.cli.commands.doctor.build_registry",
            return_value={t: brew for t in BREW_TYPES},
        ):
            result = runner.invoke(app, ["doctor"])

        assert result.exit_code == 1
        assert "Homebrew not found" in result.output

    def test_invalid_config(self, config_dir: Path, registry: dict[PackageType, Any]) -> None:
        """An unparsable config fails."""
        (config_dir / "config.toml").write_text("machines = [")

        statuses = _statuses(registry)

        assert statuses["Config file"] == CheckStatus.FAIL
        assert "Default source" not in statuses

    def test_invalid_ignore_file(
        self, healthy: AppConfig, config_dir: Path, registry: dict[PackageType, Any]
    ) -> None:
        """A broken ignore.toml fails; a missing one is fine."""
        assert _statuses(registry)["Ignore file"] == CheckStatus.OK

        (config_dir / "ignore.toml").write_text('[global]\npackages = ["no-type"]\n')

        assert _statuses(registry)["Ignore file"] == CheckStatus.FAIL

    def test_missing_brewfiles(
        self,
        machines_config: AppConfig,
        write_brewfile_for: Callable[[str, str], Path],
        registry: dict[PackageType, Any],
    ) -> None:
        """Only the current machine's missing Brewfile is a failure."""
        write_brewfile_for("studio", 'brew "git"\n')

        statuses = _statuses(registry)

        assert statuses["Brewfile (air)"] == CheckStatus.FAIL
        assert statuses["Brewfile (studio)"] == CheckStatus.OK
        assert statuses["Brewfile (mini)"] == CheckStatus.WARN

    def test_unknown_default_source(
        self, healthy: AppConfig, registry: dict[PackageType, Any]
    ) -> None:
        """default_source must name a configured machine."""
        healthy.default_source = "laptop"
        save_config(healthy)

        with patch("brewsync.cli.commands.doctor.build_registry", return_value=registry):
            result = runner.invoke(app, ["doctor"])

        assert result.exit_code == 1
        assert "Found 1 problem(s)" in result.output
        assert "laptop" in result.output

    def test_no_default_source_warns(
        self, healthy: AppConfig, registry: dict[PackageType, Any]
    ) -> None:
        """A missing default_source is only a warning."""
        healthy.default_source = None
        save_config(healthy)

        assert _statuses(registry)["Default source"] == CheckStatus.WARN

    def test_current_machine_not_detected(
        self, healthy: AppConfig, registry: dict[PackageType, Any]
    ) -> None:
        """No current_machine and no hostname match fails."""
        healthy.current_machine = None
        save_config(healthy)

        with patch("brewsync.cli.commands.doctor.get_local_hostname", return_value="laptop"):
            statuses = _statuses(registry)

        assert statuses["Current machine"] == CheckStatus.FAIL

    def test_current_machine_from_hostname(
        self, healthy: AppConfig, registry: dict[PackageType, Any]
    ) -> None:
        """The current machine can be detected from the hostname."""
        healthy.current_machine = None
        save_config(healthy)

        with patch("brewsync.cli.commands.doctor.get_local_hostname", return_value="Mini.local"):
            statuses = _statuses(registry)

        assert statuses["Current machine"] == CheckStatus.OK

    def test_unknown_machine_specific_owner(
        self, healthy: AppConfig, registry: dict[PackageType, Any]
    ) -> None:
        """machine_specific entries for unknown machines are flagged."""
        healthy.machine_specific = {"laptop": ["brew:qmk"]}
        save_config(healthy)

        assert _statuses(registry)["Machine-specific"] == CheckStatus.WARN


class TestCheckBrewfile:
    """Tests for check_brewfile."""

    def test_counts_packages(self, tmp_path: Path) -> None:
        """A clean Brewfile reports its package count."""
        path = tmp_path / "Brewfile"
        path.write_text('brew "git"\ncask "arc"\n')

        result = check_brewfile("air", path, is_current=True)

        assert result.status == CheckStatus.OK
        assert result.message == "2 package(s)"

    def test_skipped_lines_warn(self, tmp_path: Path) -> None:
        """Skipped lines turn the check into a warning."""
        path = tmp_path / "Brewfile"
        path.write_text('brew "git"\nwhalebrew "whalebrew/wget"\n')

        result = check_brewfile("air", path, is_current=False)

        assert result.status == CheckStatus.WARN
        assert result.message == "1 package(s), 1 skipped line(s)"
