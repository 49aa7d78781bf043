"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest


@pytest.fixture
def mock_brew_formula_output() -> str:
    """Sample `brew list --formula -1` output for testing."""
    return """docker-compose
fzf
gh
git
neovim
pnpm"""


@pytest.fixture
def mock_code_extensions_output() -> str:
    """Sample `code --list-extensions` output for testing."""
    return """esbenp.prettier-vscode
GitHub.vscode-github-actions
ms-python.python"""


@pytest.fixture
def sample_manifest_text() -> str:
    """Manifest with blank lines, full-line and trailing comments."""
    return """# Version Control
git   # vcs

# just a comment
gh
   fzf\t# fuzzy finder
"""


@pytest.fixture
def isolated_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG config/state directories and HOME into tmp_path."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    return tmp_path
