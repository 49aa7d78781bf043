"""Installers wrapping the external package managers.

One installer exists per manifest kind: Homebrew formulae, Homebrew
casks and VS Code extensions.
"""

from setupctl.adapters.base import Installer, InstallResult
from setupctl.adapters.brew import BrewCaskInstaller, BrewFormulaInstaller
from setupctl.adapters.vscode import VSCodeExtensionInstaller
from setupctl.models.manifest import ManifestKind


def get_installer(kind: ManifestKind) -> Installer:
    """Create the installer for a manifest kind.

    Args:
        kind: Manifest kind being processed.

    Returns:
        A fresh installer instance.
    """
    installers: dict[ManifestKind, type[Installer]] = {
        ManifestKind.PACKAGE: BrewFormulaInstaller,
        ManifestKind.APPLICATION: BrewCaskInstaller,
        ManifestKind.EXTENSION: VSCodeExtensionInstaller,
    }
    return installers[kind]()


__all__ = [
    "BrewCaskInstaller",
    "BrewFormulaInstaller",
    "InstallResult",
    "Installer",
    "VSCodeExtensionInstaller",
    "get_installer",
]
