"""CLI commands for emcp-tools.

This package contains all subcommand implementations.
"""

from emcptools.cli.commands import cleanup, config

__all__ = ["cleanup", "config"]
