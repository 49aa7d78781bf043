"""Run report rendering and persistence.

Turns the outcomes collected during a run into a RunReport and writes it
once, at run end, as a timestamped JSON summary.
"""

import json
import logging
import os
from datetime import datetime
from pathlib import Path
from tempfile import NamedTemporaryFile

from setupctl.adapters.base import Installer
from setupctl.models.manifest import ManifestKind
from setupctl.models.outcome import InstallOutcome
from setupctl.models.report import EnvironmentSnapshot, KindSummary, RunReport

logger = logging.getLogger(__name__)


def render(
    outcomes: list[InstallOutcome],
    environment: EnvironmentSnapshot,
    *,
    started: datetime,
    finished: datetime,
    inventory: dict[ManifestKind, tuple[str, ...]] | None = None,
    log_path: Path | None = None,
    backup_dir: Path | None = None,
) -> RunReport:
    """Aggregate collected outcomes into a report.

    Pure with respect to the outcomes: no installer is called.

    Args:
        outcomes: Every outcome recorded during the run, in order.
        environment: Environment snapshot taken at run end.
        started: Run start time.
        finished: Run end time.
        inventory: Installed identifiers per kind at run end.
        log_path: Path of the run log.
        backup_dir: Backup directory of the run, if any.

    Returns:
        Immutable RunReport.
    """
    kinds: list[ManifestKind] = []
    for outcome in outcomes:
        if outcome.kind not in kinds:
            kinds.append(outcome.kind)

    return RunReport(
        started=started.isoformat(),
        finished=finished.isoformat(),
        duration_seconds=max((finished - started).total_seconds(), 0.0),
        outcomes=tuple(outcomes),
        summaries=tuple(KindSummary.from_outcomes(kind, outcomes) for kind in kinds),
        environment=environment,
        inventory=dict(inventory or {}),
        log_path=str(log_path) if log_path is not None else None,
        backup_dir=str(backup_dir) if backup_dir is not None else None,
    )


def collect_inventory(installers: list[Installer]) -> dict[ManifestKind, tuple[str, ...]]:
    """List what each available installer reports as installed.

    Listing failures are logged and leave that kind out of the inventory.

    Args:
        installers: Installers used during the run.

    Returns:
        Sorted installed identifiers per kind.
    """
    inventory: dict[ManifestKind, tuple[str, ...]] = {}
    for installer in installers:
        if not installer.is_available():
            continue
        try:
            inventory[installer.kind] = tuple(sorted(installer.list_installed()))
        except (RuntimeError, OSError) as e:
            logger.warning("Could not list installed %s: %s", installer.kind.label.lower(), e)
    return inventory


def write_summary(report: RunReport, path: Path) -> Path:
    """Persist the report as JSON.

    The file is written atomically and never rewritten afterwards.

    Args:
        report: Report to persist.
        path: Target path (timestamped by the caller).

    Returns:
        Path of the written summary.

    Raises:
        OSError: If the summary cannot be written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            json.dump(report.to_dict(), f, indent=2)
            f.write("\n")
        os.replace(str(tmp_path), str(path))
    except OSError:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise

    logger.debug("Wrote run summary to %s", path)
    return path
