"""Backup set model."""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class BackupSet:
    """Configuration files captured before a run mutates anything.

    Attributes:
        directory: Timestamped directory holding the copies.
        copies: Mapping of original path to its copy inside ``directory``.
        missing: Candidate paths that did not exist and were skipped.
    """

    directory: Path
    copies: dict[Path, Path] = field(default_factory=lambda: {})
    missing: tuple[Path, ...] = ()

    @property
    def count(self) -> int:
        """Number of paths copied."""
        return len(self.copies)
