"""Pre-run configuration backup.

Copies every existing candidate config path into a fresh timestamped
directory before any mutating step. Missing candidates are expected on
most machines and are skipped silently.
"""

import logging
import shutil
from pathlib import Path

from setupctl.core.paths import get_backup_dir, run_timestamp
from setupctl.models.backup import BackupSet

logger = logging.getLogger(__name__)


class BackupError(Exception):
    """Raised when the backup directory cannot be created."""


class BackupGuard:
    """Captures configuration files into a timestamped backup directory.

    Copies keep their path relative to the home directory; paths outside
    home keep their absolute structure under the backup directory.
    """

    def __init__(self, backup_root: Path | None = None, home: Path | None = None) -> None:
        """Initialize the guard.

        Args:
            backup_root: Directory that receives one subdirectory per run.
                Default: ~/.local/state/setupctl/backups
            home: Home directory used to relativize copies. Default: Path.home()
        """
        self._backup_root = backup_root if backup_root is not None else get_backup_dir()
        self._home = home

    def backup(self, paths: list[Path], timestamp: str | None = None) -> BackupSet:
        """Copy every existing candidate path.

        Args:
            paths: Candidate config files or directories.
            timestamp: Name of the backup subdirectory. Defaults to now.

        Returns:
            BackupSet describing what was copied and what was missing.

        Raises:
            BackupError: If the backup directory cannot be created.
        """
        directory = self._backup_root / (timestamp or run_timestamp())

        try:
            directory.mkdir(parents=True, exist_ok=False)
        except FileExistsError:
            # Same-second re-run: keep the existing directory and add to it
            logger.debug("Backup directory %s already exists", directory)
        except OSError as e:
            msg = f"Cannot create backup directory {directory}: {e}"
            raise BackupError(msg) from e

        copies: dict[Path, Path] = {}
        missing: list[Path] = []

        for source in paths:
            if not source.exists() and not source.is_symlink():
                missing.append(source)
                continue

            dest = directory / self._relative(source)
            try:
                dest.parent.mkdir(parents=True, exist_ok=True)
                if source.is_dir() and not source.is_symlink():
                    shutil.copytree(source, dest, symlinks=True, dirs_exist_ok=True)
                else:
                    shutil.copy2(source, dest, follow_symlinks=False)
            except OSError as e:
                logger.warning("Backup failed for %s: %s", source, e)
                continue

            copies[source] = dest

        logger.debug(
            "Backed up %d path(s) to %s (%d missing)", len(copies), directory, len(missing)
        )
        return BackupSet(directory=directory, copies=copies, missing=tuple(missing))

    def _relative(self, source: Path) -> Path:
        home = self._home if self._home is not None else Path.home()
        try:
            return source.relative_to(home)
        except ValueError:
            return Path(str(source).lstrip("/"))
