"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from typing import Annotated

import typer

from setupctl import __version__
from setupctl.cli.commands import config, init, run, status

# Create main Typer app
app = typer.Typer(
    name="setupctl",
    help="Declarative machine provisioning for macOS.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"setupctl version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
) -> None:
    """setupctl - Declarative machine provisioning for macOS.

    List the packages, applications and editor extensions you want in
    plain text manifests and let setupctl install whatever is missing.
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# Register commands
app.command("run", context_settings=run.CONTEXT_SETTINGS)(run.run_setup)
app.command("status")(status.show_status)
app.add_typer(init.app, name="init")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
