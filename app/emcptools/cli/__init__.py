"""CLI package for emcp-tools.

This package contains the Typer application and all subcommands.
"""

from emcptools.cli.main import app

__all__ = ["app"]
