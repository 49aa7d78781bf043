"""Outcome models for reconciled manifest items.

This module defines the terminal status recorded for every manifest
item processed during a run.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from setupctl.models.manifest import ManifestItem, ManifestKind


class OutcomeStatus(str, Enum):
    """Terminal status of one manifest item in one run.

    Attributes:
        INSTALLED: Installed during this run and verified present.
        ALREADY_PRESENT: Present before the run; no install was attempted.
        INSTALL_FAILED: The installer reported a non-zero exit status.
        VERIFY_FAILED: Install reported success but the item is not listed.
        SKIPPED: The item's installer is unavailable on this machine.
    """

    INSTALLED = "installed"
    ALREADY_PRESENT = "already_present"
    INSTALL_FAILED = "install_failed"
    VERIFY_FAILED = "verify_failed"
    SKIPPED = "skipped"

    @property
    def is_success(self) -> bool:
        """Check if this status is a terminal success."""
        return self in (OutcomeStatus.INSTALLED, OutcomeStatus.ALREADY_PRESENT)

    @property
    def is_failure(self) -> bool:
        """Check if this status is a terminal failure."""
        return self in (OutcomeStatus.INSTALL_FAILED, OutcomeStatus.VERIFY_FAILED)


@dataclass(frozen=True, slots=True)
class InstallOutcome:
    """Immutable record of what happened to one manifest item.

    Attributes:
        item: The manifest item that was processed.
        kind: Manifest kind the item belongs to.
        status: Terminal status reached.
        timestamp: When the outcome was recorded (ISO 8601, UTC).
        message: Optional detail, e.g. installer stderr on failure.
    """

    item: ManifestItem
    kind: ManifestKind
    status: OutcomeStatus
    timestamp: str = field(default_factory=lambda: datetime.now(UTC).isoformat())
    message: str | None = None

    @property
    def identifier(self) -> str:
        """Shortcut for the item identifier."""
        return self.item.identifier

    @property
    def succeeded(self) -> bool:
        """Check if the item reached a terminal success."""
        return self.status.is_success

    @property
    def failed(self) -> bool:
        """Check if the item reached a terminal failure."""
        return self.status.is_failure

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        result: dict[str, Any] = {
            "identifier": self.item.identifier,
            "kind": self.kind.value,
            "status": self.status.value,
            "timestamp": self.timestamp,
        }
        if self.item.comment:
            result["comment"] = self.item.comment
        if self.message:
            result["message"] = self.message
        return result
