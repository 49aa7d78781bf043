"""CLI package for setupctl.

This package contains the Typer application and all subcommands.
"""

from setupctl.cli.main import app

__all__ = ["app"]
