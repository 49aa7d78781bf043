"""Manifest reconciliation.

Drives the installer and verifier for every item of a manifest, in file
order, recording exactly one outcome per item. A failing item never
stops the batch.
"""

import logging

from setupctl.adapters.base import Installer
from setupctl.core.runlog import RunLog
from setupctl.core.verifier import Verification, Verifier
from setupctl.models.manifest import ManifestItem
from setupctl.models.outcome import InstallOutcome, OutcomeStatus

logger = logging.getLogger(__name__)


def _first_line(text: str | None) -> str | None:
    """Return the first non-empty line of a (multi-line) message."""
    if not text:
        return None
    for line in text.splitlines():
        if line.strip():
            return line.strip()
    return None


class Reconciler:
    """Installs missing manifest items and records their outcomes.

    Items already installed are recorded as ALREADY_PRESENT without an
    install call, which makes re-running a partially applied manifest
    safe and cheap.

    Example:
        >>> reconciler = Reconciler(log=RunLog())
        >>> outcomes = reconciler.reconcile(items, BrewFormulaInstaller())
        >>> failed = [o for o in outcomes if o.failed]
    """

    def __init__(self, verifier: Verifier | None = None, log: RunLog | None = None) -> None:
        """Initialize the reconciler.

        Args:
            verifier: Post-install verifier. Defaults to Verifier().
            log: Live run log receiving one line per event.
        """
        self._verifier = verifier or Verifier()
        self._log = log

    def reconcile(self, items: list[ManifestItem], installer: Installer) -> list[InstallOutcome]:
        """Reconcile every item of one manifest.

        Args:
            items: Manifest items in file order.
            installer: Installer selected for the manifest's kind.

        Returns:
            One outcome per item, in the same order.
        """
        outcomes: list[InstallOutcome] = []

        for item in items:
            outcome = self._reconcile_item(item, installer)
            outcomes.append(outcome)
            if self._log is not None:
                self._log.outcome(outcome)

        return outcomes

    def skip(
        self, items: list[ManifestItem], installer: Installer, reason: str
    ) -> list[InstallOutcome]:
        """Record every item as SKIPPED without touching the installer.

        Args:
            items: Manifest items in file order.
            installer: Installer that is unavailable.
            reason: Explanation stored on each outcome.

        Returns:
            One SKIPPED outcome per item.
        """
        outcomes = [self._record(item, installer, OutcomeStatus.SKIPPED, reason) for item in items]
        if self._log is not None:
            for outcome in outcomes:
                self._log.outcome(outcome)
        return outcomes

    def _reconcile_item(self, item: ManifestItem, installer: Installer) -> InstallOutcome:
        """Run pre-check, install and verification for one item.

        A failing pre-check listing does not fail the item: the install is
        attempted and verification decides. Any exception raised while
        installing is recorded as this item's INSTALL_FAILED.
        """
        identifier = item.identifier

        try:
            present = installer.is_installed(identifier)
        except Exception as e:
            logger.debug("Presence check for %s raised", identifier, exc_info=True)
            if self._log is not None:
                self._log.warning(
                    f"Presence check for {installer.kind.value} {identifier} failed "
                    f"({_first_line(str(e))}); installing anyway"
                )
            present = False

        if present:
            return self._record(item, installer, OutcomeStatus.ALREADY_PRESENT)

        if self._log is not None:
            self._log.info(f"Installing {installer.kind.value} {identifier}...")

        try:
            result = installer.install(identifier)
        except Exception as e:
            # Spawn and decode errors are attributed to this item only
            logger.debug("Installing %s raised", identifier, exc_info=True)
            return self._record(
                item, installer, OutcomeStatus.INSTALL_FAILED, _first_line(str(e)) or repr(e)
            )

        if result.failed:
            return self._record(
                item, installer, OutcomeStatus.INSTALL_FAILED, _first_line(result.error)
            )

        if self._verifier.verify(identifier, installer) == Verification.VERIFIED:
            return self._record(item, installer, OutcomeStatus.INSTALLED)

        return self._record(
            item,
            installer,
            OutcomeStatus.VERIFY_FAILED,
            f"not listed by '{' '.join(installer.list_args())}' after install",
        )

    @staticmethod
    def _record(
        item: ManifestItem,
        installer: Installer,
        status: OutcomeStatus,
        message: str | None = None,
    ) -> InstallOutcome:
        return InstallOutcome(item=item, kind=installer.kind, status=status, message=message)
