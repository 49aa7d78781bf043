"""CLI commands for setupctl.

This package contains all subcommand implementations.
"""

from setupctl.cli.commands import config, init, run, status

__all__ = ["config", "init", "run", "status"]
