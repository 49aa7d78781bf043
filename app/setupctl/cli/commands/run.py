"""Run command implementation.

Backs up configuration files, installs every missing manifest item,
verifies it and writes a log and summary.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer

from setupctl.cli.common import require_config
from setupctl.cli.display import print_next_steps, print_report
from setupctl.core.backup import BackupError
from setupctl.core.manifest import ManifestError
from setupctl.core.paths import get_run_log_path, get_run_summary_path, run_timestamp
from setupctl.core.preflight import PreflightError
from setupctl.core.runlog import RunLog
from setupctl.core.runner import ProvisionRunner, RunOptions
from setupctl.utils.formatting import print_error

logger = logging.getLogger(__name__)

# Options not recognized by `run` are ignored instead of rejected
CONTEXT_SETTINGS = {"ignore_unknown_options": True, "allow_extra_args": True}


def run_setup(
    ctx: typer.Context,
    full: Annotated[
        bool,
        typer.Option(
            "--full",
            help="Also install optional manifests (cask applications).",
        ),
    ] = False,
    strict: Annotated[
        bool,
        typer.Option(
            "--strict",
            help="Exit with status 1 if any item failed.",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to setupctl.toml.",
        ),
    ] = None,
    manifest_dir: Annotated[
        Path | None,
        typer.Option(
            "--manifest-dir",
            "-m",
            help="Directory containing the manifest files.",
        ),
    ] = None,
    no_backup: Annotated[
        bool,
        typer.Option(
            "--no-backup",
            help="Skip the pre-run backup of configuration files.",
        ),
    ] = False,
    no_settings: Annotated[
        bool,
        typer.Option(
            "--no-settings",
            help="Skip shell blocks, git settings and macOS preferences.",
        ),
    ] = False,
) -> None:
    """Provision this machine from the manifests.

    Items that are already installed are left alone, so re-running after
    a partial failure only retries what is missing. A failing item never
    stops the remaining ones.

    Examples:
        setupctl run                 # Packages and extensions
        setupctl run --full          # Also cask applications
        setupctl run --strict        # Non-zero exit if anything failed
    """
    config = require_config(config_path, manifest_dir)

    timestamp = run_timestamp()
    try:
        log = RunLog(get_run_log_path(timestamp))
    except OSError as e:
        print_error(f"Cannot open run log: {e}")
        raise typer.Exit(code=1) from e

    with log:
        log.info(f"Starting setup (full={full})")
        if ctx.args:
            log.info(f"Ignoring unrecognized argument(s): {' '.join(ctx.args)}")

        runner = ProvisionRunner(config, log, summary_path=get_run_summary_path(timestamp))
        options = RunOptions(
            full=full,
            backup=not no_backup,
            settings=not no_settings,
            timestamp=timestamp,
        )

        try:
            report = runner.run(options)
        except (PreflightError, ManifestError, BackupError) as e:
            # Already logged by the runner with the failing step
            raise typer.Exit(code=1) from e
        except KeyboardInterrupt as e:
            log.error("Interrupted; items processed so far are recorded in this log")
            raise typer.Exit(code=130) from e

    print_report(report)
    print_next_steps()

    if strict and report.has_failures:
        raise typer.Exit(code=1)
