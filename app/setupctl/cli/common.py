"""Helpers shared by CLI commands."""

from pathlib import Path

import typer

from setupctl.core.config import ConfigError, SetupConfig, load_config
from setupctl.utils.formatting import print_error


def require_config(
    config_path: Path | None = None,
    manifest_dir: Path | None = None,
) -> SetupConfig:
    """Load the configuration or exit with a helpful error message.

    Args:
        config_path: Optional explicit config file.
        manifest_dir: Optional override of the manifest directory.

    Returns:
        Loaded configuration.

    Raises:
        typer.Exit: If the configuration cannot be loaded.
    """
    try:
        config = load_config(config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if manifest_dir is not None:
        config.manifests.directory = str(manifest_dir)
    return config
