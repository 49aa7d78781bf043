"""Unit tests for status command."""

from pathlib import Path
from unittest.mock import patch

from setupctl.cli.main import app
from setupctl.utils.shell import CommandResult
from typer.testing import CliRunner

runner = CliRunner()


def _write_manifests(directory: Path) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "brew_packages.txt").write_text("git\ndocker\n")
    (directory / "code_extensions.txt").write_text("ms-python.python\n")


class TestStatusCommand:
    """Tests for setupctl status command."""

    def test_reports_missing_items(
        self, isolated_dirs: Path, mock_brew_formula_output: str
    ) -> None:
        """Missing items are counted; nothing is installed."""
        manifests = isolated_dirs / "m"
        _write_manifests(manifests)

        def fake_which(name: str) -> bool:
            return name == "brew"

        with (
            patch("setupctl.adapters.base.command_exists", side_effect=fake_which),
            patch(
                "setupctl.adapters.base.run_command",
                return_value=CommandResult(
                    stdout=mock_brew_formula_output, stderr="", returncode=0
                ),
            ) as mock_run,
        ):
            result = runner.invoke(app, ["status", "--manifest-dir", str(manifests)])

        assert result.exit_code == 0
        assert "1 item(s) not installed" in result.stdout
        assert "cannot check" in result.output
        mock_run.assert_called_once_with(["brew", "list", "--formula", "-1"])

    def test_everything_installed(self, isolated_dirs: Path) -> None:
        """A fully installed machine reports success."""
        manifests = isolated_dirs / "m"
        _write_manifests(manifests)

        def fake_run(args: list[str]) -> CommandResult:
            stdout = "git\ndocker\n" if args[0] == "brew" else "ms-python.python\n"
            return CommandResult(stdout=stdout, stderr="", returncode=0)

        with (
            patch("setupctl.adapters.base.command_exists", return_value=True),
            patch("setupctl.adapters.base.run_command", side_effect=fake_run),
        ):
            result = runner.invoke(app, ["status", "--manifest-dir", str(manifests)])

        assert result.exit_code == 0
        assert "Everything in the manifests is installed" in result.stdout

    def test_listing_spawn_error_is_a_warning(self, isolated_dirs: Path) -> None:
        """A listing that cannot be spawned is reported, not raised."""
        manifests = isolated_dirs / "m"
        _write_manifests(manifests)

        with (
            patch("setupctl.adapters.base.command_exists", return_value=True),
            patch("setupctl.adapters.base.run_command", side_effect=OSError("spawn failed")),
        ):
            result = runner.invoke(app, ["status", "--manifest-dir", str(manifests)])

        assert result.exit_code == 0
        assert "Could not list" in result.output
        assert "spawn failed" in result.output

    def test_missing_manifest(self, isolated_dirs: Path) -> None:
        """A missing manifest exits with status 1."""
        result = runner.invoke(app, ["status", "--manifest-dir", str(isolated_dirs / "none")])

        assert result.exit_code == 1
