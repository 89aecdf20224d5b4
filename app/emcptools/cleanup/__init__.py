"""Stale data cleanup module.

This module removes files older than an age threshold from a directory
tree, removes directories emptied in the process, and leaves directories
carrying a ``.keep`` marker untouched.
"""

from emcptools.cleanup.models import KEEP_MARKER, CleanupReport
from emcptools.cleanup.pruner import (
    CleanupError,
    CleanupIOError,
    DirectoryNotFoundError,
    NotADirectoryCleanupError,
    StaleDataPruner,
    cleanup_stale_data,
)

__all__ = [
    "KEEP_MARKER",
    "CleanupError",
    "CleanupIOError",
    "CleanupReport",
    "DirectoryNotFoundError",
    "NotADirectoryCleanupError",
    "StaleDataPruner",
    "cleanup_stale_data",
]
