"""Manifest item models.

This module defines the data structures for entries read from the
declarative item lists (packages, applications, editor extensions).
"""

from dataclasses import dataclass, field
from enum import Enum


class ManifestKind(str, Enum):
    """Kind of item a manifest declares.

    The kind selects the installer used for every item of a manifest;
    identifiers are never inspected to decide it.

    Attributes:
        PACKAGE: Homebrew formula.
        APPLICATION: Homebrew cask application.
        EXTENSION: VS Code editor extension.
    """

    PACKAGE = "package"
    APPLICATION = "application"
    EXTENSION = "extension"

    @property
    def label(self) -> str:
        """Return a human-readable plural label."""
        return f"{self.value.capitalize()}s"


@dataclass(frozen=True, slots=True)
class ManifestItem:
    """A single identifier declared in a manifest.

    Attributes:
        identifier: Package, application, or extension name.
        comment: Trailing comment from the manifest line, kept for traceability.
        line: 1-based line number in the manifest file (0 if unknown).
    """

    identifier: str
    comment: str | None = field(default=None)
    line: int = field(default=0)

    def __post_init__(self) -> None:
        """Validate item data after initialization."""
        if not self.identifier or not self.identifier.strip():
            msg = "Manifest identifier cannot be empty"
            raise ValueError(msg)
        if self.identifier != self.identifier.strip():
            msg = f"Manifest identifier must be trimmed: {self.identifier!r}"
            raise ValueError(msg)
