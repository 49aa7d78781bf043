"""Unit tests for path helpers."""

from datetime import datetime
from pathlib import Path

import pytest
from setupctl.core.paths import (
    ensure_dir,
    expand_path,
    get_backup_dir,
    get_config_path,
    get_manifest_dir,
    get_run_log_path,
    get_run_summary_path,
    run_timestamp,
)


class TestXdgPaths:
    """Tests for XDG directory resolution."""

    def test_config_paths(self, isolated_dirs: Path) -> None:
        """Config lives under XDG_CONFIG_HOME/setupctl."""
        assert get_config_path() == isolated_dirs / "config" / "setupctl" / "setupctl.toml"
        assert get_manifest_dir() == isolated_dirs / "config" / "setupctl" / "manifests"

    def test_state_paths(self, isolated_dirs: Path) -> None:
        """Run artifacts live under XDG_STATE_HOME/setupctl."""
        state = isolated_dirs / "state" / "setupctl"

        assert get_backup_dir() == state / "backups"
        assert get_run_log_path("20250301T142233") == state / "logs" / "setup-20250301T142233.log"
        assert (
            get_run_summary_path("20250301T142233")
            == state / "summaries" / "summary-20250301T142233.json"
        )

    def test_default_without_xdg(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Without XDG variables the home-relative defaults apply."""
        monkeypatch.delenv("XDG_STATE_HOME", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))

        assert get_backup_dir() == tmp_path / ".local" / "state" / "setupctl" / "backups"


class TestHelpers:
    """Tests for small path helpers."""

    def test_run_timestamp(self) -> None:
        """Timestamps are compact and sortable."""
        assert run_timestamp(datetime(2025, 3, 1, 14, 22, 33)) == "20250301T142233"

    def test_expand_path(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """~ and variables are expanded."""
        monkeypatch.setenv("HOME", "/Users/test")
        monkeypatch.setenv("DOTFILES", "/srv/dotfiles")

        assert expand_path("~/.zshrc") == Path("/Users/test/.zshrc")
        assert expand_path("$DOTFILES/manifests") == Path("/srv/dotfiles/manifests")

    def test_ensure_dir_blocked(self, tmp_path: Path) -> None:
        """A file in the way raises RuntimeError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("x")

        with pytest.raises(RuntimeError, match="Cannot create logs directory"):
            ensure_dir(blocker / "sub", "logs")
