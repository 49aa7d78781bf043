"""Pre-flight checks.

Everything that can make a run impossible is checked before the first
mutating step: required managers on PATH and every enabled manifest
readable.
"""

from pathlib import Path

from setupctl.adapters.base import Installer
from setupctl.core.manifest import load_manifest
from setupctl.models.manifest import ManifestItem, ManifestKind


class PreflightError(Exception):
    """Base exception for conditions that prevent a run from starting."""


class RequiredCommandMissingError(PreflightError):
    """Raised when a required external command is not on PATH."""


def check_required_commands(installers: list[Installer]) -> None:
    """Ensure every required installer's command is available.

    Optional installers (e.g. VS Code's ``code``) are not checked here;
    their items are skipped during the run instead.

    Raises:
        RequiredCommandMissingError: For the first missing required command.
    """
    for installer in installers:
        if installer.required and not installer.is_available():
            msg = (
                f"Required command '{installer.command}' for {installer.kind.label.lower()} "
                "was not found on PATH"
            )
            raise RequiredCommandMissingError(msg)


def load_manifests(
    sources: list[tuple[ManifestKind, Path]],
) -> dict[ManifestKind, list[ManifestItem]]:
    """Load every enabled manifest up front.

    Args:
        sources: (kind, path) pairs in processing order.

    Returns:
        Items per kind, preserving the order of ``sources``.

    Raises:
        ManifestNotFoundError: If a manifest file is missing.
        ManifestUnreadableError: If a manifest file cannot be read.
    """
    return {kind: load_manifest(path) for kind, path in sources}
