"""Fire-and-forget system preferences.

Writes macOS ``defaults``, global git settings and the global git ignore
file. Results are logged but never verified, and a failing call never
aborts the run.
"""

import logging

from setupctl.core.config import GitConfig, MacDefault, PreferencesConfig
from setupctl.core.paths import expand_path
from setupctl.core.runlog import RunLog
from setupctl.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)


def defaults_args(pref: MacDefault) -> list[str]:
    """Build the ``defaults write`` command line for one preference.

    String values starting with ``~`` are expanded to the home directory.
    """
    value = pref.value
    if pref.type == "bool":
        value = "true" if value in (True, "true", "yes", "1", 1) else "false"
    elif isinstance(value, str) and value.startswith("~"):
        value = str(expand_path(value))
    return ["defaults", "write", pref.domain, pref.key, f"-{pref.type}", str(value)]


def _fire(args: list[str], log: RunLog) -> bool:
    try:
        result = run_command(args)
    except OSError as e:
        log.warning(f"{' '.join(args)} could not be run: {e}")
        return False
    if not result.success:
        log.warning(f"{' '.join(args)} failed: {result.stderr.strip() or result.returncode}")
        return False
    return True


def apply_preferences(config: PreferencesConfig, log: RunLog) -> int:
    """Write every configured macOS preference and restart affected apps.

    Configured directories (e.g. the screenshot location) are created
    first.

    Args:
        config: Preferences section of the configuration.
        log: Run log for progress and warnings.

    Returns:
        Number of preferences that reported failure.
    """
    if not config.defaults:
        return 0
    if not command_exists("defaults"):
        log.warning("'defaults' command not found; skipping macOS preferences")
        return 0

    for directory in config.directories:
        path = expand_path(directory)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            log.warning(f"Could not create {path}: {e}")

    log.info(f"Writing {len(config.defaults)} macOS preference(s)...")
    failures = sum(1 for pref in config.defaults if not _fire(defaults_args(pref), log))

    if config.restart and command_exists("killall"):
        for app in config.restart:
            # killall exits non-zero when the app is not running
            run_command(["killall", app])

    return failures


def write_global_ignore(config: GitConfig, log: RunLog) -> list[str]:
    """Ensure every configured pattern is in the global git ignore file.

    Missing patterns are appended; existing lines are left untouched, so
    re-running never duplicates an entry. The file is created if needed.

    Args:
        config: Git section of the configuration.
        log: Run log for progress and warnings.

    Returns:
        Patterns that were added.
    """
    if not config.ignore:
        return []

    target = expand_path(config.ignore_file)
    try:
        existing = target.read_text(encoding="utf-8") if target.exists() else ""
        present = {line.strip() for line in existing.splitlines()}
        added = [p for p in dict.fromkeys(config.ignore) if p.strip() not in present]
        if added:
            target.parent.mkdir(parents=True, exist_ok=True)
            separator = "" if not existing or existing.endswith("\n") else "\n"
            with target.open(mode="a", encoding="utf-8") as f:
                f.write(separator + "\n".join(added) + "\n")
    except OSError as e:
        log.warning(f"Could not update {target}: {e}")
        return []

    if added:
        log.success(f"Added {len(added)} pattern(s) to {target}")
    else:
        log.info(f"Global git ignore patterns already present in {target}")
    return added


def apply_git_settings(config: GitConfig, log: RunLog) -> int:
    """Write global git settings.

    Values starting with ``~`` are expanded to the home directory.

    Args:
        config: Git section of the configuration.
        log: Run log for progress and warnings.

    Returns:
        Number of settings that reported failure.
    """
    if not config.settings:
        return 0
    if not command_exists("git"):
        log.warning("'git' command not found; skipping git settings")
        return 0

    log.info(f"Writing {len(config.settings)} git setting(s)...")
    failures = 0
    for key, value in config.settings.items():
        resolved = str(expand_path(value)) if value.startswith("~") else value
        if not _fire(["git", "config", "--global", key, resolved], log):
            failures += 1
    return failures
