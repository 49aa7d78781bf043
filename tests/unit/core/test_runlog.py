"""Unit tests for the run log."""

import re
from pathlib import Path

from setupctl.core.runlog import RunLog
from setupctl.models.manifest import ManifestItem, ManifestKind
from setupctl.models.outcome import InstallOutcome, OutcomeStatus

LINE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} \[(\w+)\] (.*)$")


def _outcome(status: OutcomeStatus, message: str | None = None) -> InstallOutcome:
    return InstallOutcome(
        item=ManifestItem(identifier="git"),
        kind=ManifestKind.PACKAGE,
        status=status,
        message=message,
    )


class TestRunLog:
    """Tests for RunLog."""

    def test_line_format(self, tmp_path: Path) -> None:
        """Each event is one timestamped, severity-tagged line."""
        path = tmp_path / "logs" / "setup.log"

        with RunLog(path, echo=False) as log:
            log.info("Running pre-flight checks...")
            log.success("Backed up 2 file(s)")
            log.warning("Refreshing brew failed")
            log.error("Pre-flight failed")

        lines = path.read_text(encoding="utf-8").splitlines()
        parsed = [LINE_PATTERN.match(line) for line in lines]
        assert all(parsed)
        assert [m.group(1) for m in parsed if m] == ["INFO", "SUCCESS", "WARNING", "ERROR"]

    def test_appends_to_existing_file(self, tmp_path: Path) -> None:
        """Opening an existing log appends instead of truncating."""
        path = tmp_path / "setup.log"
        path.write_text("earlier line\n")

        with RunLog(path, echo=False) as log:
            log.info("later line")

        lines = path.read_text().splitlines()
        assert lines[0] == "earlier line"
        assert lines[1].endswith("[INFO] later line")

    def test_lines_written_before_close(self, tmp_path: Path) -> None:
        """Events are on disk while the log is still open."""
        path = tmp_path / "setup.log"
        log = RunLog(path, echo=False)
        try:
            log.info("first")
            assert "first" in path.read_text()
        finally:
            log.close()

    def test_outcome_levels(self, tmp_path: Path) -> None:
        """Outcome statuses map to severities and wording."""
        path = tmp_path / "setup.log"

        with RunLog(path, echo=False) as log:
            log.outcome(_outcome(OutcomeStatus.INSTALLED))
            log.outcome(_outcome(OutcomeStatus.ALREADY_PRESENT))
            log.outcome(_outcome(OutcomeStatus.INSTALL_FAILED, "Error: boom"))
            log.outcome(_outcome(OutcomeStatus.VERIFY_FAILED))

        text = path.read_text()
        assert "[SUCCESS] package git: installed" in text
        assert "[INFO] package git: already present" in text
        assert "[WARNING] package git: install failed (Error: boom)" in text
        assert "[WARNING] package git: installed but not found afterwards" in text

    def test_echo_to_console(self, capsys) -> None:
        """Echoed lines appear on the console with their severity."""
        log = RunLog()
        log.info("hello")
        log.close()

        out = capsys.readouterr().out
        assert "[INFO]" in out
        assert "hello" in out

    def test_console_only(self) -> None:
        """Without a path nothing is written and path is None."""
        with RunLog(echo=False) as log:
            log.info("no file")
            assert log.path is None
