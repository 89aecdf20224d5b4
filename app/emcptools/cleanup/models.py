"""Data structures describing the outcome of a stale-data cleanup run."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

# Name of the file that exempts a directory and its whole subtree
KEEP_MARKER = ".keep"


@dataclass(slots=True)
class CleanupReport:
    """Summary of a single cleanup run.

    The report is filled in while the traversal runs; on failure the
    partially filled report is discarded along with the run.

    Attributes:
        root: Absolute path of the directory that was cleaned.
        now: Reference time every file age was measured against.
        age: Age threshold; files strictly older were removed.
        removed_files: Files (and symlinks) that were deleted.
        removed_dirs: Directories that were deleted after becoming empty.
        kept_files: Files that were too young to delete.
        protected_dirs: Directories skipped because they contain the marker.
        freed_bytes: Total size of the removed files.
    """

    root: str
    now: datetime
    age: timedelta
    removed_files: list[str] = field(default_factory=list)
    removed_dirs: list[str] = field(default_factory=list)
    kept_files: list[str] = field(default_factory=list)
    protected_dirs: list[str] = field(default_factory=list)
    freed_bytes: int = 0

    @property
    def removed_count(self) -> int:
        """Total number of removed entries (files and directories)."""
        return len(self.removed_files) + len(self.removed_dirs)

    @property
    def changed(self) -> bool:
        """Whether the run removed anything at all."""
        return self.removed_count > 0
