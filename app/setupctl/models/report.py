"""Run report models.

This module defines the aggregate produced at the end of a provisioning
run: per-kind counts, the environment snapshot and the full list of
outcomes.
"""

from dataclasses import dataclass, field
from typing import Any

from setupctl.models.manifest import ManifestKind
from setupctl.models.outcome import InstallOutcome, OutcomeStatus


@dataclass(frozen=True, slots=True)
class EnvironmentSnapshot:
    """Versions of the machine and its runtimes at the end of a run.

    Attributes:
        os_name: Operating system name (e.g., 'macOS').
        os_version: Operating system version string.
        machine: Hardware architecture (e.g., 'arm64').
        shell: Login shell from $SHELL, if set.
        runtimes: Mapping of runtime command to its reported version.
    """

    os_name: str
    os_version: str
    machine: str
    shell: str | None = None
    runtimes: dict[str, str] = field(default_factory=lambda: {})

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        return {
            "os_name": self.os_name,
            "os_version": self.os_version,
            "machine": self.machine,
            "shell": self.shell,
            "runtimes": dict(self.runtimes),
        }


@dataclass(frozen=True, slots=True)
class KindSummary:
    """Outcome counts for one manifest kind."""

    kind: ManifestKind
    installed: int = 0
    already_present: int = 0
    install_failed: int = 0
    verify_failed: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        """Total number of items processed for this kind."""
        return (
            self.installed
            + self.already_present
            + self.install_failed
            + self.verify_failed
            + self.skipped
        )

    @property
    def succeeded(self) -> int:
        """Number of items in a terminal-success state."""
        return self.installed + self.already_present

    @property
    def failed(self) -> int:
        """Number of items in a terminal-failure state."""
        return self.install_failed + self.verify_failed

    @classmethod
    def from_outcomes(cls, kind: ManifestKind, outcomes: list[InstallOutcome]) -> "KindSummary":
        """Count outcomes of the given kind.

        Args:
            kind: Manifest kind to summarize.
            outcomes: Outcomes of any kind; others are ignored.

        Returns:
            KindSummary for the kind.
        """
        counts = dict.fromkeys(OutcomeStatus, 0)
        for outcome in outcomes:
            if outcome.kind == kind:
                counts[outcome.status] += 1
        return cls(
            kind=kind,
            installed=counts[OutcomeStatus.INSTALLED],
            already_present=counts[OutcomeStatus.ALREADY_PRESENT],
            install_failed=counts[OutcomeStatus.INSTALL_FAILED],
            verify_failed=counts[OutcomeStatus.VERIFY_FAILED],
            skipped=counts[OutcomeStatus.SKIPPED],
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        return {
            "installed": self.installed,
            "already_present": self.already_present,
            "install_failed": self.install_failed,
            "verify_failed": self.verify_failed,
            "skipped": self.skipped,
        }


@dataclass(frozen=True, slots=True)
class RunReport:
    """Aggregate of a complete provisioning run.

    Built once from collected outcomes and never mutated afterwards.

    Attributes:
        started: Run start (ISO 8601).
        finished: Run end (ISO 8601).
        duration_seconds: Wall-clock duration of the run.
        outcomes: Every recorded outcome, in processing order.
        summaries: Per-kind outcome counts, in processing order.
        environment: Machine and runtime versions at run end.
        inventory: Installed identifiers per kind at run end.
        log_path: Path of the run log, if one was written.
        backup_dir: Path of the backup directory, if a backup was taken.
    """

    started: str
    finished: str
    duration_seconds: float
    outcomes: tuple[InstallOutcome, ...]
    summaries: tuple[KindSummary, ...]
    environment: EnvironmentSnapshot
    inventory: dict[ManifestKind, tuple[str, ...]] = field(default_factory=lambda: {})
    log_path: str | None = None
    backup_dir: str | None = None

    @property
    def failures(self) -> list[InstallOutcome]:
        """Outcomes in a terminal-failure state."""
        return [o for o in self.outcomes if o.failed]

    @property
    def has_failures(self) -> bool:
        """Check if any item failed."""
        return any(o.failed for o in self.outcomes)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage."""
        return {
            "started": self.started,
            "finished": self.finished,
            "duration_seconds": round(self.duration_seconds, 3),
            "log_path": self.log_path,
            "backup_dir": self.backup_dir,
            "environment": self.environment.to_dict(),
            "summary": {s.kind.value: s.to_dict() for s in self.summaries},
            "failures": [o.to_dict() for o in self.failures],
            "outcomes": [o.to_dict() for o in self.outcomes],
            "inventory": {kind.value: list(ids) for kind, ids in self.inventory.items()},
        }
