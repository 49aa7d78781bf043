"""Environment snapshot for the run summary."""

import logging
import os
import platform
import subprocess

from setupctl.models.report import EnvironmentSnapshot
from setupctl.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)


def _os_version() -> tuple[str, str]:
    mac_version = platform.mac_ver()[0]
    if mac_version:
        return "macOS", mac_version
    return platform.system() or "unknown", platform.release() or "unknown"


def runtime_version(command: str) -> str | None:
    """Return the first output line of ``<command> --version``.

    Returns:
        Version line, or None if the command is missing or fails.
    """
    if not command_exists(command):
        return None
    try:
        result = run_command([command, "--version"], timeout=30.0)
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug("Could not query %s version: %s", command, e)
        return None
    if not result.success:
        return None
    lines = result.lines or [line.strip() for line in result.stderr.splitlines() if line.strip()]
    return lines[0] if lines else None


def capture_environment(runtimes: list[str]) -> EnvironmentSnapshot:
    """Capture OS, shell and runtime versions.

    Args:
        runtimes: Commands to query with ``--version``. Missing ones are omitted.

    Returns:
        EnvironmentSnapshot of the current machine.
    """
    os_name, os_version = _os_version()
    versions: dict[str, str] = {}
    for command in runtimes:
        version = runtime_version(command)
        if version is not None:
            versions[command] = version

    return EnvironmentSnapshot(
        os_name=os_name,
        os_version=os_version,
        machine=platform.machine(),
        shell=os.environ.get("SHELL"),
        runtimes=versions,
    )
