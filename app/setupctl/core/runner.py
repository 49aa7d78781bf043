"""Provisioning run orchestration.

Order of a run:

1. Pre-flight: required managers present, every enabled manifest loads.
2. Backup of existing configuration files (once, before any mutation).
3. Manager refresh (``brew update``).
4. Reconcile each manifest kind in turn.
5. Shell blocks, git settings and macOS preferences (fire-and-forget).
6. Environment snapshot, inventory, report and summary.

Pre-flight and backup errors abort the run; everything after is
best-effort and recorded.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from setupctl.adapters import get_installer
from setupctl.adapters.base import Installer
from setupctl.core.backup import BackupError, BackupGuard
from setupctl.core.config import SetupConfig
from setupctl.core.environment import capture_environment
from setupctl.core.manifest import ManifestError
from setupctl.core.paths import expand_path
from setupctl.core.preferences import (
    apply_git_settings,
    apply_preferences,
    write_global_ignore,
)
from setupctl.core.preflight import (
    PreflightError,
    check_required_commands,
    load_manifests,
)
from setupctl.core.reconciler import Reconciler
from setupctl.core.reporter import collect_inventory, render, write_summary
from setupctl.core.runlog import RunLog
from setupctl.core.shellconfig import apply_blocks
from setupctl.models.backup import BackupSet
from setupctl.models.manifest import ManifestItem, ManifestKind
from setupctl.models.outcome import InstallOutcome
from setupctl.models.report import RunReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RunOptions:
    """Options of one provisioning run.

    Attributes:
        full: Also process manifests marked ``full_only``.
        backup: Take the pre-run backup.
        settings: Apply shell blocks, git settings and preferences.
        timestamp: Run timestamp used for backup and artifact names.
    """

    full: bool = False
    backup: bool = True
    settings: bool = True
    timestamp: str | None = None


class ProvisionRunner:
    """Runs pre-flight, backup, reconciliation and reporting."""

    def __init__(
        self,
        config: SetupConfig,
        log: RunLog,
        *,
        installers: dict[ManifestKind, Installer] | None = None,
        backup_guard: BackupGuard | None = None,
        reconciler: Reconciler | None = None,
        summary_path: Path | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            config: Loaded configuration.
            log: Live run log.
            installers: Installer per kind. Missing kinds use get_installer().
            backup_guard: Backup guard. Defaults to BackupGuard().
            reconciler: Reconciler. Defaults to one writing to ``log``.
            summary_path: Where to persist the JSON summary. None skips it.
        """
        self._config = config
        self._log = log
        self._installers = dict(installers or {})
        self._backup_guard = backup_guard or BackupGuard()
        self._reconciler = reconciler or Reconciler(log=log)
        self._summary_path = summary_path

    def installer_for(self, kind: ManifestKind) -> Installer:
        """Return the installer for a kind, creating it on first use."""
        if kind not in self._installers:
            self._installers[kind] = get_installer(kind)
        return self._installers[kind]

    def run(self, options: RunOptions) -> RunReport:
        """Execute a complete run.

        Args:
            options: Run options.

        Returns:
            RunReport with one outcome per manifest item.

        Raises:
            PreflightError: If a required command is missing.
            ManifestError: If an enabled manifest is missing or unreadable.
            BackupError: If the backup directory cannot be created.
        """
        started = datetime.now().astimezone()
        sources = self._config.manifests.enabled_sources(options.full)
        installers = [self.installer_for(kind) for kind, _ in sources]

        if not options.full:
            skipped = [
                kind.label.lower()
                for kind in ManifestKind
                if (source := getattr(self._config.manifests, kind.value)).full_only
                and source.enabled
            ]
            if skipped:
                self._log.info(f"Skipping {', '.join(skipped)} (use --full to enable)")

        self._log.info("Running pre-flight checks...")
        try:
            check_required_commands(installers)
            manifests = load_manifests(sources)
        except (PreflightError, ManifestError) as e:
            self._log.error(f"Pre-flight failed: {e}")
            raise

        backup_set = self._backup(options)

        self._refresh(installers)

        outcomes: list[InstallOutcome] = []
        for kind, items in manifests.items():
            outcomes.extend(self._reconcile_kind(kind, items))

        if options.settings:
            self._apply_settings()

        self._log.info("Collecting environment and inventory...")
        environment = capture_environment(self._config.environment.runtimes)
        inventory = collect_inventory(installers)
        finished = datetime.now().astimezone()

        report = render(
            outcomes,
            environment,
            started=started,
            finished=finished,
            inventory=inventory,
            log_path=self._log.path,
            backup_dir=backup_set.directory if backup_set is not None else None,
        )

        if self._summary_path is not None:
            try:
                write_summary(report, self._summary_path)
                self._log.info(f"Summary written to {self._summary_path}")
            except OSError as e:
                self._log.warning(f"Could not write summary {self._summary_path}: {e}")

        failed = len(report.failures)
        if failed:
            self._log.warning(f"Setup completed with {failed} failed item(s)")
        else:
            self._log.success("Setup completed successfully")
        return report

    def _backup(self, options: RunOptions) -> BackupSet | None:
        if not (options.backup and self._config.backup.enabled):
            self._log.info("Backup disabled")
            return None

        self._log.info("Backing up existing configuration files...")
        try:
            backup_set = self._backup_guard.backup(
                self._config.backup.resolve_paths(), timestamp=options.timestamp
            )
        except BackupError as e:
            self._log.error(f"Backup failed: {e}")
            raise

        self._log.success(f"Backed up {backup_set.count} file(s) to {backup_set.directory}")
        return backup_set

    def _refresh(self, installers: list[Installer]) -> None:
        if not self._config.brew.update:
            return
        refreshed: set[str] = set()
        for installer in installers:
            if installer.command in refreshed or not installer.is_available():
                continue
            refreshed.add(installer.command)
            try:
                result = installer.refresh()
            except (RuntimeError, OSError) as e:
                self._log.warning(f"Refreshing {installer.command} failed: {e}")
                continue
            if result is None:
                continue
            if result.success:
                self._log.info(f"Refreshed {installer.command}")
            else:
                detail = result.stderr.strip() or result.returncode
                self._log.warning(f"Refreshing {installer.command} failed: {detail}")

    def _reconcile_kind(
        self, kind: ManifestKind, items: list[ManifestItem]
    ) -> list[InstallOutcome]:
        installer = self.installer_for(kind)

        if not installer.is_available():
            self._log.warning(
                f"'{installer.command}' command not found; skipping {len(items)} "
                f"{kind.label.lower()}"
            )
            return self._reconciler.skip(items, installer, f"'{installer.command}' not available")

        self._log.info(f"Reconciling {len(items)} {kind.label.lower()}...")
        return self._reconciler.reconcile(items, installer)

    def _apply_settings(self) -> None:
        shell = self._config.shell
        if shell.enabled and shell.blocks:
            target = expand_path(shell.target)
            try:
                results = apply_blocks(target, shell.blocks)
            except OSError as e:
                self._log.warning(f"Could not update {target}: {e}")
            else:
                applied = [r.tag for r in results if r.applied]
                if applied:
                    self._log.success(f"Added shell block(s) {', '.join(applied)} to {target}")
                else:
                    self._log.info(f"Shell blocks already present in {target}")

        if self._config.git.enabled:
            write_global_ignore(self._config.git, self._log)
            apply_git_settings(self._config.git, self._log)

        if self._config.preferences.enabled:
            apply_preferences(self._config.preferences, self._log)
