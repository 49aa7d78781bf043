"""Status command implementation.

Shows which manifest items are present without installing anything.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from setupctl.adapters import get_installer
from setupctl.cli.common import require_config
from setupctl.cli.display import create_status_table
from setupctl.core.manifest import ManifestError
from setupctl.core.preflight import load_manifests
from setupctl.utils.formatting import console, print_error, print_success, print_warning


def show_status(
    full: Annotated[
        bool,
        typer.Option(
            "--full",
            help="Include optional manifests (cask applications).",
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
) -> None:
    """Show which manifest items are installed.

    Read-only: queries each manager's listing and compares identifiers
    exactly. Nothing is installed.
    """
    config = require_config(config_path, manifest_dir)

    try:
        manifests = load_manifests(config.manifests.enabled_sources(full))
    except ManifestError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    missing = 0
    for kind, items in manifests.items():
        installer = get_installer(kind)
        installed: dict[str, bool] | None = None

        if installer.is_available():
            try:
                installed = {
                    item.identifier: installer.is_installed(item.identifier) for item in items
                }
            except (RuntimeError, OSError) as e:
                print_warning(f"Could not list {kind.label.lower()}: {escape(str(e))}")
        else:
            print_warning(f"'{installer.command}' not found; cannot check {kind.label.lower()}.")

        if installed is not None:
            missing += sum(1 for present in installed.values() if not present)
        console.print(create_status_table(kind, items, installed))

    if missing:
        console.print(f"\n[warning]{missing} item(s) not installed.[/warning] Run 'setupctl run'.")
    else:
        print_success("\nEverything in the manifests is installed.")
