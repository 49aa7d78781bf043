"""Homebrew installer implementations.

Formulae and casks share the ``brew`` executable but live in separate
namespaces, so each gets its own installer. A fresh install whose
``brew shellenv`` has not been loaded yet is found under its default
prefix.
"""

import logging

from setupctl.adapters.base import Installer
from setupctl.models.manifest import ManifestKind
from setupctl.utils.shell import CommandResult, run_command

logger = logging.getLogger(__name__)


class _BrewInstaller(Installer):
    """Shared behavior of the Homebrew installers."""

    command = "brew"
    required = True
    # Default Homebrew prefixes: Apple Silicon and Intel
    search_dirs = {"arm64": ("/opt/homebrew/bin",), "x86_64": ("/usr/local/bin",)}

    def normalize(self, identifier: str) -> str:
        """Strip a tap prefix (``owner/tap/name`` -> ``name``).

        ``brew list`` prints short names even for tapped formulae.
        """
        return identifier.rsplit("/", 1)[-1]

    def refresh(self) -> CommandResult | None:
        """Run ``brew update``."""
        self._ensure_available()
        logger.info("Updating Homebrew")
        return run_command([self.executable(), "update"])


class BrewFormulaInstaller(_BrewInstaller):
    """Installer for Homebrew formulae (command-line packages)."""

    @property
    def kind(self) -> ManifestKind:
        """Return PACKAGE as the manifest kind."""
        return ManifestKind.PACKAGE

    def install_args(self, identifier: str) -> list[str]:
        """Build ``brew install <identifier>``."""
        return [self.executable(), "install", identifier]

    def list_args(self) -> list[str]:
        """Build ``brew list --formula -1``."""
        return [self.executable(), "list", "--formula", "-1"]


class BrewCaskInstaller(_BrewInstaller):
    """Installer for Homebrew casks (GUI applications)."""

    @property
    def kind(self) -> ManifestKind:
        """Return APPLICATION as the manifest kind."""
        return ManifestKind.APPLICATION

    def install_args(self, identifier: str) -> list[str]:
        """Build ``brew install --cask <identifier>``."""
        return [self.executable(), "install", "--cask", identifier]

    def list_args(self) -> list[str]:
        """Build ``brew list --cask -1``."""
        return [self.executable(), "list", "--cask", "-1"]
