"""Unit tests for the apt commands."""

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from sysupdate.cli.main import app
from sysupdate.utils.shell import CommandResult

runner = CliRunner()

OK = CommandResult(
    stdout="Hit:1 http://archive.ubuntu.com/ubuntu noble InRelease", stderr="", returncode=0
)


@pytest.fixture
def operator(config_home: Path) -> Iterator[MagicMock]:
    """Patch AptOperator with an available mock."""
    with patch("sysupdate.cli.commands.apt.AptOperator") as mock_cls:
        mock = mock_cls.return_value
        mock.is_available.return_value = True
        mock.update_lists.return_value = OK
        mock.policy.return_value = None
        yield mock


class TestAptUpgrade:
    """Tests for sysupdate apt upgrade."""

    def test_clean_upgrade(self, operator: MagicMock, apt_clean_output: str) -> None:
        """Nothing to do reports all packages current."""
        operator.upgrade.return_value = CommandResult(
            stdout=apt_clean_output, stderr="", returncode=0
        )

        result = runner.invoke(app, ["apt", "upgrade"])

        assert result.exit_code == 0
        assert "All packages are up to date." in result.output
        operator.install.assert_not_called()

    def test_kept_back_retried_with_yes(
        self, operator: MagicMock, apt_upgrade_output: str
    ) -> None:
        """--yes installs the kept-back packages by name."""
        operator.upgrade.return_value = CommandResult(
            stdout=apt_upgrade_output, stderr="", returncode=0
        )
        operator.install.return_value = CommandResult(
            stdout="Setting up linux-generic", stderr="", returncode=0
        )

        result = runner.invoke(app, ["apt", "upgrade", "--yes"])

        assert result.exit_code == 0
        operator.install.assert_called_once_with(["linux-generic", "linux-headers-generic"])
        assert "Kept-back packages installed." in result.output

    def test_kept_back_declined(self, operator: MagicMock, apt_upgrade_output: str) -> None:
        """Declining the retry leaves the packages alone."""
        operator.upgrade.return_value = CommandResult(
            stdout=apt_upgrade_output, stderr="", returncode=0
        )

        result = runner.invoke(app, ["apt", "upgrade"], input="n\n")

        assert result.exit_code == 0
        assert "2 package(s) kept back" in result.output
        operator.install.assert_not_called()

    def test_quiet_never_retries(self, operator: MagicMock, apt_upgrade_output: str) -> None:
        """Quiet mode never offers the retry."""
        operator.upgrade.return_value = CommandResult(
            stdout=apt_upgrade_output, stderr="", returncode=0
        )

        result = runner.invoke(app, ["--quiet", "apt", "upgrade", "--yes"])

        assert result.exit_code == 0
        operator.install.assert_not_called()

    def test_upgrade_failure(self, operator: MagicMock) -> None:
        """A failing apt-get upgrade exits with 1."""
        operator.upgrade.return_value = CommandResult(
            stdout="", stderr="E: Could not get lock /var/lib/dpkg/lock-frontend", returncode=100
        )

        result = runner.invoke(app, ["apt", "upgrade"])

        assert result.exit_code == 1
        assert "apt-get upgrade failed" in result.output

    def test_unavailable(self, operator: MagicMock) -> None:
        """Systems without APT exit with 1."""
        operator.is_available.return_value = False

        result = runner.invoke(app, ["apt", "upgrade"])

        assert result.exit_code == 1
        operator.upgrade.assert_not_called()


class TestAptAnalyze:
    """Tests for sysupdate apt analyze."""

    def test_reports_kept_back(
        self,
        operator: MagicMock,
        tmp_path: Path,
        apt_upgrade_output: str,
        policy_output: str,
    ) -> None:
        """Saved output is analyzed with policy details."""
        operator.policy.side_effect = lambda name: (
            policy_output if name == "linux-generic" else None
        )
        log = tmp_path / "upgrade.log"
        log.write_text(apt_upgrade_output)

        result = runner.invoke(app, ["apt", "analyze", str(log)])

        assert result.exit_code == 0
        assert "2 package(s) kept back" in result.output
        assert "6.8.0-47.47" in result.output
        assert "unknown" in result.output

    def test_nothing_kept_back(
        self, operator: MagicMock, tmp_path: Path, apt_clean_output: str
    ) -> None:
        """Output without kept-back packages says so."""
        log = tmp_path / "upgrade.log"
        log.write_text(apt_clean_output)

        result = runner.invoke(app, ["apt", "analyze", str(log)])

        assert result.exit_code == 0
        assert "No packages were kept back." in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file is rejected by argument validation."""
        result = runner.invoke(app, ["apt", "analyze", str(tmp_path / "missing.log")])

        assert result.exit_code != 0
