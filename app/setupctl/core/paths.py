"""XDG-compliant path management for setupctl.

This module provides standardized paths following the XDG Base Directory
Specification for configuration and state storage.

XDG defaults:
- Config: ~/.config/setupctl/
- State: ~/.local/state/setupctl/
"""

import os
from datetime import datetime
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "setupctl"

# Timestamp format shared by every per-run artifact
RUN_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/setupctl/ (or XDG_CONFIG_HOME/setupctl/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    State data includes run logs, summaries and backups that should
    persist between runs but is not configuration.

    Returns:
        Path to ~/.local/state/setupctl/ (or XDG_STATE_HOME/setupctl/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_config_path() -> Path:
    """Get the default configuration file path.

    Returns:
        Path to ~/.config/setupctl/setupctl.toml.
    """
    return get_config_dir() / "setupctl.toml"


def get_manifest_dir() -> Path:
    """Get the default manifest directory.

    Returns:
        Path to ~/.config/setupctl/manifests/.
    """
    return get_config_dir() / "manifests"


def get_log_dir() -> Path:
    """Get the run log directory path."""
    return get_state_dir() / "logs"


def get_summary_dir() -> Path:
    """Get the run summary directory path."""
    return get_state_dir() / "summaries"


def get_backup_dir() -> Path:
    """Get the config backup directory path.

    Each run creates a timestamped subdirectory within this location.

    Returns:
        Path to ~/.local/state/setupctl/backups/.
    """
    return get_state_dir() / "backups"


def run_timestamp(moment: datetime | None = None) -> str:
    """Format a timestamp for per-run artifact names.

    Args:
        moment: Point in time to format. Defaults to now (local time).

    Returns:
        Timestamp string such as ``20250301T142233``.
    """
    return (moment or datetime.now()).strftime(RUN_TIMESTAMP_FORMAT)


def get_run_log_path(timestamp: str) -> Path:
    """Get the run log path for a run timestamp."""
    return get_log_dir() / f"setup-{timestamp}.log"


def get_run_summary_path(timestamp: str) -> Path:
    """Get the run summary path for a run timestamp."""
    return get_summary_dir() / f"summary-{timestamp}.json"


def expand_path(path: str | Path) -> Path:
    """Expand ``~`` and environment variables in a configured path."""
    return Path(os.path.expandvars(str(path))).expanduser()


def ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path
