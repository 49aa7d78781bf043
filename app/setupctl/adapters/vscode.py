"""VS Code extension installer.

Uses the ``code`` command line launcher, which VS Code only puts on PATH
after "Shell Command: Install 'code' command in PATH" has been run.
"""

from setupctl.adapters.base import Installer
from setupctl.models.manifest import ManifestKind


class VSCodeExtensionInstaller(Installer):
    """Installer for VS Code extensions.

    The ``code`` launcher is optional: when it is missing, extensions are
    skipped instead of aborting the run.
    """

    command = "code"
    required = False

    @property
    def kind(self) -> ManifestKind:
        """Return EXTENSION as the manifest kind."""
        return ManifestKind.EXTENSION

    def normalize(self, identifier: str) -> str:
        """Lower-case the identifier; the marketplace ignores case."""
        return identifier.lower()

    def install_args(self, identifier: str) -> list[str]:
        """Build ``code --install-extension <identifier>``."""
        return ["code", "--install-extension", identifier]

    def list_args(self) -> list[str]:
        """Build ``code --list-extensions``."""
        return ["code", "--list-extensions"]
