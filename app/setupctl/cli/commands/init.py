"""Init command implementation.

Writes the default configuration file and the bundled manifests so they
can be edited before the first run.
"""

from typing import Annotated

import typer

from setupctl.cli.common import require_config
from setupctl.core.config import ConfigError, SetupConfig, save_config
from setupctl.core.manifest import bundled_manifest_text
from setupctl.core.paths import get_config_path
from setupctl.models.manifest import ManifestKind
from setupctl.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Create default configuration and manifests.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def init_config(
    ctx: typer.Context,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite existing configuration and manifests.",
        ),
    ] = False,
) -> None:
    """Create setupctl.toml and the default manifests.

    Existing files are kept unless --force is given.

    Examples:
        setupctl init              # Create missing files
        setupctl init --force      # Reset everything to defaults
    """
    if ctx.invoked_subcommand is not None:
        return

    config_path = get_config_path()
    if config_path.exists() and not force:
        print_info(f"Config already exists: {config_path}")
    else:
        try:
            save_config(SetupConfig(), config_path)
        except ConfigError as e:
            print_error(str(e))
            raise typer.Exit(code=1) from e
        print_success(f"Wrote config: {config_path}")

    config = require_config()
    directory = config.manifests.resolve_directory()

    for kind in ManifestKind:
        source = getattr(config.manifests, kind.value)
        target = directory / source.file
        if target.exists() and not force:
            console.print(f"[muted]Kept {target}[/muted]")
            continue
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(bundled_manifest_text(_bundled_name(kind)), encoding="utf-8")
        except OSError as e:
            print_error(f"Failed to write manifest {target}: {e}")
            raise typer.Exit(code=1) from e
        print_success(f"Wrote manifest: {target}")

    print_info("\nEdit the manifests, then run 'setupctl run'.")


def _bundled_name(kind: ManifestKind) -> str:
    """Return the bundled manifest file name for a kind."""
    names = {
        ManifestKind.PACKAGE: "brew_packages.txt",
        ManifestKind.APPLICATION: "brew_cask_apps.txt",
        ManifestKind.EXTENSION: "code_extensions.txt",
    }
    return names[kind]
