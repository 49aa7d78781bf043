"""Live, append-only run log.

Every lifecycle event of a run is written as one line to a timestamped
log file and echoed to the console as it happens, so an interrupted run
still leaves an inspectable partial log.

Line format::

    2025-03-01 14:22:33 [SUCCESS] git: installed
"""

import logging
from pathlib import Path

from rich.markup import escape

from setupctl.models.outcome import InstallOutcome, OutcomeStatus
from setupctl.utils.formatting import console, err_console

logger = logging.getLogger(__name__)

# Custom level between INFO and WARNING for completed steps
SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Console style per level name
_LEVEL_STYLES: dict[int, str] = {
    logging.INFO: "info",
    SUCCESS: "success",
    logging.WARNING: "warning",
    logging.ERROR: "error",
}

# Log level and wording per outcome status
_OUTCOME_LEVELS: dict[OutcomeStatus, tuple[int, str]] = {
    OutcomeStatus.INSTALLED: (SUCCESS, "installed"),
    OutcomeStatus.ALREADY_PRESENT: (logging.INFO, "already present"),
    OutcomeStatus.INSTALL_FAILED: (logging.WARNING, "install failed"),
    OutcomeStatus.VERIFY_FAILED: (logging.WARNING, "installed but not found afterwards"),
    OutcomeStatus.SKIPPED: (logging.WARNING, "skipped"),
}


class RunLog:
    """Severity-tagged event stream for one run.

    Attributes:
        path: Log file path, or None for console-only logging.
    """

    def __init__(self, path: Path | None = None, *, echo: bool = True) -> None:
        """Open the run log.

        Args:
            path: File to append to. Parent directories are created.
                  If None, events are only echoed.
            echo: If True, mirror every line to the console.

        Raises:
            OSError: If the log file cannot be opened.
        """
        self.path = path
        self._echo = echo
        # Standalone logger: not registered globally, never propagates
        self._logger = logging.Logger("setupctl.run", level=logging.INFO)
        self._logger.addHandler(logging.NullHandler())
        self._handler: logging.FileHandler | None = None

        if path is not None:
            path.parent.mkdir(parents=True, exist_ok=True)
            self._handler = logging.FileHandler(path, mode="a", encoding="utf-8")
            self._handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
            self._logger.addHandler(self._handler)

    def __enter__(self) -> "RunLog":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Flush and close the log file."""
        if self._handler is not None:
            self._logger.removeHandler(self._handler)
            self._handler.close()
            self._handler = None

    def log(self, level: int, message: str) -> None:
        """Write one event line.

        Args:
            level: One of INFO, SUCCESS, WARNING, ERROR.
            message: Plain-text message.
        """
        self._logger.log(level, message)
        if self._echo:
            name = logging.getLevelName(level)
            style = _LEVEL_STYLES.get(level, "text")
            target = err_console if level >= logging.WARNING else console
            target.print(f"[{style}]\\[{name}][/] {escape(message)}")

    def info(self, message: str) -> None:
        """Log an INFO event."""
        self.log(logging.INFO, message)

    def success(self, message: str) -> None:
        """Log a SUCCESS event."""
        self.log(SUCCESS, message)

    def warning(self, message: str) -> None:
        """Log a WARNING event."""
        self.log(logging.WARNING, message)

    def error(self, message: str) -> None:
        """Log an ERROR event."""
        self.log(logging.ERROR, message)

    def outcome(self, outcome: InstallOutcome) -> None:
        """Log the terminal status of one manifest item."""
        level, wording = _OUTCOME_LEVELS[outcome.status]
        message = f"{outcome.kind.value} {outcome.identifier}: {wording}"
        if outcome.message and outcome.failed:
            message = f"{message} ({outcome.message})"
        self.log(level, message)
