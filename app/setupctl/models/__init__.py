"""Data models for setupctl.

This module exports the core data structures used throughout the application.
"""

from setupctl.models.backup import BackupSet
from setupctl.models.manifest import ManifestItem, ManifestKind
from setupctl.models.outcome import InstallOutcome, OutcomeStatus
from setupctl.models.report import EnvironmentSnapshot, KindSummary, RunReport

__all__ = [
    "BackupSet",
    "EnvironmentSnapshot",
    "InstallOutcome",
    "KindSummary",
    "ManifestItem",
    "ManifestKind",
    "OutcomeStatus",
    "RunReport",
]
