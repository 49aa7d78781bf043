"""Config command implementation.

Shows the effective configuration and where it is read from.
"""

from pathlib import Path
from typing import Annotated

import tomli_w
import typer
from rich.syntax import Syntax

from setupctl.cli.common import require_config
from setupctl.core.config import config_to_dict
from setupctl.core.paths import get_config_path, get_state_dir
from setupctl.models.manifest import ManifestKind
from setupctl.utils.formatting import console

app = typer.Typer(
    name="config",
    help="Inspect setupctl configuration.",
    no_args_is_help=True,
)


@app.command("show")
def show_config(
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to setupctl.toml.",
        ),
    ] = None,
) -> None:
    """Print the effective configuration as TOML (defaults included)."""
    config = require_config(config_path)
    text = tomli_w.dumps(config_to_dict(config))
    console.print(Syntax(text, "toml", theme="ansi_dark", background_color="default"))


@app.command("path")
def show_paths() -> None:
    """Print the config file, manifest and state locations."""
    config = require_config()
    directory = config.manifests.resolve_directory()

    console.print(f"[header]Config:[/header]    {get_config_path()}")
    console.print(f"[header]Manifests:[/header] {directory}")
    for kind in ManifestKind:
        source = getattr(config.manifests, kind.value)
        flag = " (--full)" if source.full_only else ""
        console.print(f"  {kind.value:<12}{directory / source.file}{flag}")
    console.print(f"[header]State:[/header]     {get_state_dir()}")
