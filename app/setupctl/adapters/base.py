"""Abstract base class for installers.

This module defines the Installer interface that every manifest kind's
package manager wrapper must implement: install one identifier and
report whether an identifier is currently installed.
"""

import logging
import os
import platform
from abc import ABC, abstractmethod
from dataclasses import dataclass

from setupctl.models.manifest import ManifestKind
from setupctl.utils.shell import CommandResult, command_exists, run_command

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class InstallResult:
    """Result of a single install invocation.

    Attributes:
        identifier: Identifier that was installed.
        success: Whether the manager reported a zero exit status.
        message: Optional success message or additional information.
        error: Optional error message if the install failed.
    """

    identifier: str
    success: bool
    message: str | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the install failed."""
        return not self.success


class Installer(ABC):
    """Abstract base class for all installers.

    An installer wraps one external manager for one manifest kind. It is
    selected by the manifest being processed, never by the identifier.

    Listings are cached until the next ``install`` call so that the
    pre-check of a whole manifest costs a single listing, while the
    post-install verification always sees fresh state.

    Example:
        >>> installer = BrewFormulaInstaller()
        >>> if installer.is_available() and not installer.is_installed("git"):
        ...     result = installer.install("git")
        ...     print(result.success)
    """

    #: Executable the installer drives.
    command: str = ""

    #: Whether a missing ``command`` is fatal for the run.
    required: bool = True

    #: Directories searched per machine architecture when ``command`` is not on PATH.
    search_dirs: dict[str, tuple[str, ...]] = {}

    def __init__(self) -> None:
        """Initialize the installer with an empty listing cache."""
        self._installed: set[str] | None = None

    @property
    @abstractmethod
    def kind(self) -> ManifestKind:
        """Return the manifest kind this installer handles."""

    @abstractmethod
    def install_args(self, identifier: str) -> list[str]:
        """Build the command line that installs one identifier."""

    @abstractmethod
    def list_args(self) -> list[str]:
        """Build the command line that lists installed identifiers."""

    def executable(self) -> str:
        """Resolve the manager executable.

        Returns ``command`` when it is on PATH, otherwise the first
        executable found in ``search_dirs`` for this machine. Falls back
        to ``command`` when nothing is found.
        """
        if command_exists(self.command):
            return self.command
        for directory in self.search_dirs.get(platform.machine(), ()):
            candidate = os.path.join(directory, self.command)
            if command_exists(candidate):
                logger.debug("Using %s (not on PATH)", candidate)
                return candidate
        return self.command

    def is_available(self) -> bool:
        """Check if the underlying manager can be found."""
        return command_exists(self.executable())

    def normalize(self, identifier: str) -> str:
        """Return the form of an identifier used for presence matching.

        Subclasses override this when the manager lists identifiers in a
        different form than it accepts them. The default is the identity.
        """
        return identifier

    def refresh(self) -> CommandResult | None:
        """Refresh the manager's own metadata before installing.

        Returns:
            CommandResult of the refresh, or None if the manager has none.
        """
        return None

    def invalidate(self) -> None:
        """Drop the cached listing."""
        self._installed = None

    def _ensure_available(self) -> None:
        if not self.is_available():
            msg = f"'{self.command}' is not available on this system"
            raise RuntimeError(msg)

    def list_installed(self) -> list[str]:
        """List installed identifiers as reported by the manager.

        Returns:
            Identifiers in the order the manager prints them.

        Raises:
            RuntimeError: If the manager is missing or the listing fails.
        """
        self._ensure_available()

        result = run_command(self.list_args())
        if not result.success:
            msg = f"{' '.join(self.list_args())} failed: {result.stderr.strip() or 'unknown error'}"
            raise RuntimeError(msg)

        return result.lines

    def installed_set(self) -> set[str]:
        """Return the normalized set of installed identifiers (cached)."""
        if self._installed is None:
            self._installed = {self.normalize(name) for name in self.list_installed()}
            logger.debug(
                "%s listing: %d installed identifier(s)", self.kind.value, len(self._installed)
            )
        return self._installed

    def is_installed(self, identifier: str) -> bool:
        """Check whether exactly this identifier is installed.

        Matching is exact on the normalized identifier: ``docker`` is not
        satisfied by ``docker-compose`` being installed.

        Raises:
            RuntimeError: If the manager is missing or the listing fails.
        """
        return self.normalize(identifier) in self.installed_set()

    def install(self, identifier: str) -> InstallResult:
        """Install one identifier.

        Success is taken strictly from the manager's exit status. Managers
        treat an already-installed identifier as a successful no-op.

        Args:
            identifier: Identifier to install.

        Returns:
            InstallResult for the identifier.

        Raises:
            RuntimeError: If the manager is not available.
        """
        self._ensure_available()

        args = self.install_args(identifier)
        logger.info("Executing %s", " ".join(args))

        try:
            result = run_command(args)
        finally:
            self.invalidate()

        if result.success:
            return InstallResult(identifier=identifier, success=True, message="Install completed")

        error = result.stderr.strip() or f"{self.command} exited with status {result.returncode}"
        return InstallResult(identifier=identifier, success=False, error=error)
