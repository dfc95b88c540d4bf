"""Unit tests for config CLI commands.

Tests for the sysupdate config show and sysupdate config init commands.
"""

import tomllib
from pathlib import Path

from typer.testing import CliRunner

from sysupdate.cli.main import app

runner = CliRunner()


class TestConfigInit:
    """Tests for sysupdate config init."""

    def test_writes_defaults(self, config_home: Path) -> None:
        """init writes default settings and creates the apps directory."""
        result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 0
        with open(config_home / "config.toml", "rb") as f:
            data = tomllib.load(f)
        assert data["max_workers"] == 4
        assert data["suffix_order"] == "suffix-newer"
        assert (config_home / "apps").is_dir()

    def test_refuses_overwrite(self, config_home: Path) -> None:
        """An existing file is kept unless --force is given."""
        config_home.mkdir(parents=True)
        (config_home / "config.toml").write_text("max_workers = 8\n")

        result = runner.invoke(app, ["config", "init"])

        assert result.exit_code == 1
        assert "already exists" in result.output
        assert (config_home / "config.toml").read_text() == "max_workers = 8\n"

    def test_force_overwrites(self, config_home: Path) -> None:
        """--force replaces the existing file."""
        config_home.mkdir(parents=True)
        (config_home / "config.toml").write_text("max_workers = 8\n")

        result = runner.invoke(app, ["config", "init", "--force"])

        assert result.exit_code == 0
        with open(config_home / "config.toml", "rb") as f:
            assert tomllib.load(f)["max_workers"] == 4


class TestConfigShow:
    """Tests for sysupdate config show."""

    def test_defaults(self, config_home: Path) -> None:
        """Without a file the defaults are shown."""
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "defaults" in result.output
        assert "max_workers = 4" in result.output

    def test_flags_applied(self, config_home: Path) -> None:
        """Global flags show up in the effective settings."""
        result = runner.invoke(app, ["--quiet", "config", "show"])

        assert result.exit_code == 0
        assert "quiet = true" in result.output

    def test_stored_values(self, config_home: Path) -> None:
        """Stored values override the defaults."""
        config_home.mkdir(parents=True)
        (config_home / "config.toml").write_text("max_workers = 8\n")

        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "max_workers = 8" in result.output
