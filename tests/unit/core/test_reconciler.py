"""Unit tests for the reconciler."""

import os
import sys
from pathlib import Path

import pytest
from fakes import FakeInstaller
from setupctl.adapters.base import InstallResult
from setupctl.adapters.brew import BrewFormulaInstaller
from setupctl.core.reconciler import Reconciler
from setupctl.core.runlog import RunLog
from setupctl.models.manifest import ManifestItem, ManifestKind
from setupctl.models.outcome import OutcomeStatus


def _items(*identifiers: str) -> list[ManifestItem]:
    return [ManifestItem(identifier=i, line=n) for n, i in enumerate(identifiers, start=1)]


class RaisingInstaller(FakeInstaller):
    """Installer whose install call raises for selected identifiers."""

    def __init__(self, raising: list[str], **kwargs) -> None:
        super().__init__(**kwargs)
        self.raising = set(raising)

    def install(self, identifier: str) -> InstallResult:
        if identifier in self.raising:
            raise OSError(f"[Errno 2] No such file or directory: 'fake' ({identifier})")
        return super().install(identifier)


class BrokenListingInstaller(FakeInstaller):
    """Installer whose first ``failures`` listings fail."""

    def __init__(self, failures: int, **kwargs) -> None:
        super().__init__(**kwargs)
        self.failures = failures

    def list_installed(self) -> list[str]:
        if self.failures > 0:
            self.failures -= 1
            raise RuntimeError("fake list failed: locked")
        return super().list_installed()


class UndecodableInstaller(FakeInstaller):
    """Installer whose install raises a decode error for selected identifiers."""

    def install(self, identifier: str) -> InstallResult:
        if identifier in self.fail:
            raise UnicodeDecodeError("utf-8", b"\xe9", 0, 1, "invalid continuation byte")
        return super().install(identifier)


class TestReconcile:
    """Tests for Reconciler.reconcile."""

    def test_one_outcome_per_item_in_order(self) -> None:
        """Outcomes follow manifest order, one per item."""
        installer = FakeInstaller(installed=["gh"])

        outcomes = Reconciler().reconcile(_items("git", "gh", "fzf"), installer)

        assert [o.identifier for o in outcomes] == ["git", "gh", "fzf"]
        assert [o.status for o in outcomes] == [
            OutcomeStatus.INSTALLED,
            OutcomeStatus.ALREADY_PRESENT,
            OutcomeStatus.INSTALLED,
        ]

    def test_present_items_are_not_installed(self) -> None:
        """Already installed items never reach install()."""
        installer = FakeInstaller(installed=["git", "gh"])

        outcomes = Reconciler().reconcile(_items("git", "gh"), installer)

        assert installer.install_calls == []
        assert all(o.status == OutcomeStatus.ALREADY_PRESENT for o in outcomes)

    def test_second_run_installs_nothing(self) -> None:
        """Reconciling the same manifest twice is a no-op the second time."""
        installer = FakeInstaller()
        items = _items("git", "gh")
        reconciler = Reconciler()

        reconciler.reconcile(items, installer)
        second = reconciler.reconcile(items, installer)

        assert installer.install_calls == ["git", "gh"]
        assert all(o.status == OutcomeStatus.ALREADY_PRESENT for o in second)

    def test_failure_does_not_stop_batch(self) -> None:
        """A failed item is recorded and the next item is still processed."""
        installer = FakeInstaller(fail=["nonexistent-pkg-xyz"])

        outcomes = Reconciler().reconcile(_items("git", "nonexistent-pkg-xyz", "gh"), installer)

        assert [o.status for o in outcomes] == [
            OutcomeStatus.INSTALLED,
            OutcomeStatus.INSTALL_FAILED,
            OutcomeStatus.INSTALLED,
        ]
        assert installer.install_calls == ["git", "nonexistent-pkg-xyz", "gh"]

    def test_failure_message_is_first_line(self) -> None:
        """Only the first line of the manager's error is kept."""
        installer = FakeInstaller(fail=["nope"])

        (outcome,) = Reconciler().reconcile(_items("nope"), installer)

        assert outcome.message == 'Error: No available formula with the name "nope".'

    def test_verify_failure_distinct_from_install_failure(self) -> None:
        """Install success that is not listed afterwards is VERIFY_FAILED."""
        installer = FakeInstaller(unverifiable=["ghost"])

        (outcome,) = Reconciler().reconcile(_items("ghost"), installer)

        assert outcome.status == OutcomeStatus.VERIFY_FAILED
        assert "fake list" in (outcome.message or "")

    def test_unverifiable_manifest_has_no_install_failures(self) -> None:
        """When nothing shows up after install, every item is VERIFY_FAILED."""
        identifiers = ["git", "gh", "fzf", "neovim"]
        installer = FakeInstaller(unverifiable=identifiers)

        outcomes = Reconciler().reconcile(_items(*identifiers), installer)

        assert installer.install_calls == identifiers
        assert [o.status for o in outcomes] == [OutcomeStatus.VERIFY_FAILED] * 4
        assert not any(o.status == OutcomeStatus.INSTALL_FAILED for o in outcomes)

    def test_failed_precheck_still_installs(self) -> None:
        """A failing pre-check listing does not fail the item by itself."""
        installer = BrokenListingInstaller(failures=1)

        (outcome,) = Reconciler().reconcile(_items("git"), installer)

        assert installer.install_calls == ["git"]
        assert outcome.status == OutcomeStatus.INSTALLED

    def test_broken_listing_is_verify_failure(self) -> None:
        """With the listing always failing, installed items end VERIFY_FAILED."""
        installer = BrokenListingInstaller(failures=100)

        outcomes = Reconciler().reconcile(_items("git", "gh"), installer)

        assert installer.install_calls == ["git", "gh"]
        assert [o.status for o in outcomes] == [OutcomeStatus.VERIFY_FAILED] * 2

    def test_unexpected_exception_is_isolated(self) -> None:
        """Any exception from install is recorded on that item only."""
        installer = UndecodableInstaller(fail=["bad"])

        outcomes = Reconciler().reconcile(_items("git", "bad", "gh"), installer)

        assert [o.status for o in outcomes] == [
            OutcomeStatus.INSTALLED,
            OutcomeStatus.INSTALL_FAILED,
            OutcomeStatus.INSTALLED,
        ]
        assert "can't decode" in (outcomes[1].message or "")

    def test_spawn_error_is_isolated(self) -> None:
        """An exception from one install only fails that item."""
        installer = RaisingInstaller(raising=["boom"])

        outcomes = Reconciler().reconcile(_items("boom", "git"), installer)

        assert outcomes[0].status == OutcomeStatus.INSTALL_FAILED
        assert "No such file" in (outcomes[0].message or "")
        assert outcomes[1].status == OutcomeStatus.INSTALLED

    def test_duplicates_reconciled_independently(self) -> None:
        """A duplicate identifier installs once and is then already present."""
        installer = FakeInstaller()

        outcomes = Reconciler().reconcile(_items("git", "git"), installer)

        assert [o.status for o in outcomes] == [
            OutcomeStatus.INSTALLED,
            OutcomeStatus.ALREADY_PRESENT,
        ]

    def test_outcomes_carry_installer_kind(self) -> None:
        """Outcomes are tagged with the installer's kind."""
        installer = FakeInstaller(kind=ManifestKind.EXTENSION)

        (outcome,) = Reconciler().reconcile(_items("ms-python.python"), installer)

        assert outcome.kind == ManifestKind.EXTENSION

    def test_empty_manifest(self) -> None:
        """No items, no outcomes."""
        assert Reconciler().reconcile([], FakeInstaller()) == []


class TestSkip:
    """Tests for Reconciler.skip."""

    def test_skip_records_every_item(self) -> None:
        """Every item is SKIPPED with the given reason and no install call."""
        installer = FakeInstaller(available=False, kind=ManifestKind.EXTENSION)

        outcomes = Reconciler().skip(_items("a.b", "c.d"), installer, "'code' not available")

        assert [o.status for o in outcomes] == [OutcomeStatus.SKIPPED, OutcomeStatus.SKIPPED]
        assert outcomes[0].message == "'code' not available"
        assert installer.install_calls == []


class TestReconcileLogging:
    """Tests for the run log lines written while reconciling."""

    @pytest.fixture
    def log_path(self, tmp_path: Path) -> Path:
        """Run log file location."""
        return tmp_path / "setup.log"

    def test_one_line_per_outcome(self, log_path: Path) -> None:
        """Each outcome is logged with its severity."""
        installer = FakeInstaller(installed=["gh"], fail=["nope"])

        with RunLog(log_path, echo=False) as log:
            Reconciler(log=log).reconcile(_items("git", "gh", "nope"), installer)

        text = log_path.read_text(encoding="utf-8")
        assert "[SUCCESS] package git: installed" in text
        assert "[INFO] package gh: already present" in text
        assert "[WARNING] package nope: install failed (Error: No available formula" in text
        assert "[INFO] Installing package git..." in text
        assert "Installing package gh" not in text

    def test_failed_precheck_is_a_warning(self, log_path: Path) -> None:
        """A failing pre-check is logged before the install goes ahead."""
        installer = BrokenListingInstaller(failures=1)

        with RunLog(log_path, echo=False) as log:
            Reconciler(log=log).reconcile(_items("git"), installer)

        text = log_path.read_text(encoding="utf-8")
        assert "[WARNING] Presence check for package git failed (fake list failed" in text
        assert "[SUCCESS] package git: installed" in text


FAKE_BREW = r"""#!/bin/sh
state="$(dirname "$0")/installed"
case "$1" in
  list)
    [ -f "$state" ] && cat "$state"
    exit 0
    ;;
  install)
    if [ "$2" = "bad" ]; then
      printf 'Error: caf\351 \377\n' >&2
      exit 1
    fi
    echo "$2" >> "$state"
    ;;
esac
exit 0
"""


@pytest.mark.skipif(sys.platform == "win32", reason="requires a POSIX shell")
class TestReconcileWithBrewExecutable:
    """Tests driving the Homebrew installer against a stand-in brew on PATH."""

    @pytest.fixture
    def brew_on_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
        """Install a shell script named brew in front of PATH."""
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir()
        brew = bin_dir / "brew"
        brew.write_text(FAKE_BREW)
        brew.chmod(0o755)
        monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
        return bin_dir

    def test_non_utf8_error_output_fails_one_item(self, brew_on_path: Path) -> None:
        """Undecodable manager output fails only the item that produced it."""
        outcomes = Reconciler().reconcile(_items("git", "bad", "gh"), BrewFormulaInstaller())

        assert [o.status for o in outcomes] == [
            OutcomeStatus.INSTALLED,
            OutcomeStatus.INSTALL_FAILED,
            OutcomeStatus.INSTALLED,
        ]
        assert (outcomes[1].message or "").startswith("Error: caf")
