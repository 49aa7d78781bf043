"""Unit tests for init command."""

from pathlib import Path

from setupctl.cli.main import app
from setupctl.core.config import load_config
from typer.testing import CliRunner

runner = CliRunner()


class TestInitCommand:
    """Tests for setupctl init command."""

    def test_creates_config_and_manifests(self, isolated_dirs: Path) -> None:
        """Init writes the default config and the bundled manifests."""
        config_dir = isolated_dirs / "config" / "setupctl"

        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert (config_dir / "setupctl.toml").exists()
        assert load_config(config_dir / "setupctl.toml").manifests.application.full_only
        for name in ("brew_packages.txt", "brew_cask_apps.txt", "code_extensions.txt"):
            assert (config_dir / "manifests" / name).read_text().strip()

    def test_keeps_existing_files(self, isolated_dirs: Path) -> None:
        """Existing manifests are kept without --force."""
        manifest = isolated_dirs / "config" / "setupctl" / "manifests" / "brew_packages.txt"
        manifest.parent.mkdir(parents=True)
        manifest.write_text("git\n")

        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert manifest.read_text() == "git\n"

    def test_force_overwrites(self, isolated_dirs: Path) -> None:
        """--force resets manifests to the bundled defaults."""
        manifest = isolated_dirs / "config" / "setupctl" / "manifests" / "brew_packages.txt"
        manifest.parent.mkdir(parents=True)
        manifest.write_text("git\n")

        result = runner.invoke(app, ["init", "--force"])

        assert result.exit_code == 0
        assert manifest.read_text() != "git\n"
