"""Utility modules for emcp-tools.

This module exports commonly used utility functions.
"""

from emcptools.utils.formatting import (
    console,
    err_console,
    format_size,
    print_error,
    print_info,
    print_success,
)

__all__ = [
    "console",
    "err_console",
    "format_size",
    "print_error",
    "print_info",
    "print_success",
]
