"""Stale data pruner.

Removes files older than an age threshold from a directory tree and
removes directories left empty, bottom-up. A directory containing the
``.keep`` marker is skipped together with everything beneath it. The
directory the run starts from is never removed.
"""

import logging
import os
from datetime import UTC, datetime, timedelta
from pathlib import Path

from emcptools.cleanup.models import KEEP_MARKER, CleanupReport

logger = logging.getLogger(__name__)


class CleanupError(Exception):
    """Base exception for stale data cleanup errors."""


class DirectoryNotFoundError(CleanupError):
    """Raised when the directory to clean does not exist."""


class NotADirectoryCleanupError(CleanupError):
    """Raised when the path to clean exists but is not a directory."""


class CleanupIOError(CleanupError):
    """Raised when a filesystem operation fails during the traversal.

    Attributes:
        path: The path the failing operation was applied to.
    """

    def __init__(self, message: str, path: str) -> None:
        super().__init__(message)
        self.path = path


class StaleDataPruner:
    """Prunes stale files and emptied directories below a root directory.

    All ages are measured against one reference time so that a long
    run over a large tree uses a consistent "now".

    Attributes:
        _age: Files whose age strictly exceeds this threshold are removed.
        _now: Reference time, captured when the pruner is created.
    """

    def __init__(self, age: timedelta, *, now: datetime | None = None) -> None:
        """Initialize the StaleDataPruner.

        Args:
            age: Age threshold. Must not be negative.
            now: Reference time (timezone-aware). Defaults to the current time.

        Raises:
            ValueError: If age is negative.
        """
        if age < timedelta(0):
            msg = f"Age threshold cannot be negative, got {age}"
            raise ValueError(msg)
        self._age = age
        self._now = now if now is not None else datetime.now(UTC)

    def clean(self, root: Path) -> CleanupReport:
        """Remove stale content below root, keeping root itself.

        Args:
            root: Directory to clean.

        Returns:
            CleanupReport describing what was removed and kept.

        Raises:
            DirectoryNotFoundError: If root does not exist.
            NotADirectoryCleanupError: If root is not a directory.
            CleanupIOError: If any filesystem operation fails. The run stops
                at the first failure; entries removed before it stay removed.
        """
        root = Path(root).absolute()
        if not root.exists():
            raise DirectoryNotFoundError(f"Directory does not exist: {root}")
        if not root.is_dir():
            raise NotADirectoryCleanupError(f"Not a directory: {root}")

        report = CleanupReport(root=str(root), now=self._now, age=self._age)
        logger.debug("Cleaning %s (age > %s, reference time %s)", root, self._age, self._now)

        # The root's eligibility is ignored: only a parent removes a directory
        self._process_dir(root, report)

        logger.info(
            "Cleanup of %s removed %d file(s) and %d dir(s), freed %d bytes",
            root,
            len(report.removed_files),
            len(report.removed_dirs),
            report.freed_bytes,
        )
        return report

    def _process_dir(self, directory: Path, report: CleanupReport) -> bool:
        """Prune one directory and report whether it may be removed.

        Args:
            directory: Directory to process.
            report: Report to record removals in.

        Returns:
            True if every entry was removed and the directory carries no
            marker, i.e. the caller may remove it.
        """
        if os.path.lexists(directory / KEEP_MARKER):
            logger.debug("Skipping protected directory %s", directory)
            report.protected_dirs.append(str(directory))
            return False

        try:
            with os.scandir(directory) as it:
                entries = list(it)
        except OSError as e:
            raise CleanupIOError(f"Cannot list directory {directory}: {e}", str(directory)) from e

        all_removed = True
        for entry in entries:
            path = Path(entry.path)
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError as e:
                raise CleanupIOError(f"Cannot determine type of {path}: {e}", str(path)) from e

            if is_dir:
                removed = self._process_dir(path, report)
                if removed:
                    self._remove_dir(path, report)
            else:
                removed = self._process_file(entry, report)

            all_removed &= removed

        return all_removed

    def _process_file(self, entry: os.DirEntry[str], report: CleanupReport) -> bool:
        """Remove a file if it is stale.

        Symlinks are aged by their own modification time and unlinked;
        their targets are never touched.

        Returns:
            True if the file was removed.
        """
        try:
            stat = entry.stat(follow_symlinks=False)
        except OSError as e:
            raise CleanupIOError(f"Cannot read metadata of {entry.path}: {e}", entry.path) from e

        modified = datetime.fromtimestamp(stat.st_mtime, tz=UTC)
        if modified > self._now:
            raise CleanupIOError(
                f"Modification time of {entry.path} ({modified.isoformat()}) "
                f"is later than the reference time ({self._now.isoformat()})",
                entry.path,
            )
        if self._now - modified <= self._age:
            report.kept_files.append(entry.path)
            return False

        try:
            os.unlink(entry.path)
        except OSError as e:
            raise CleanupIOError(f"Cannot remove file {entry.path}: {e}", entry.path) from e

        logger.debug("Removed stale file %s", entry.path)
        report.removed_files.append(entry.path)
        report.freed_bytes += stat.st_size
        return True

    def _remove_dir(self, path: Path, report: CleanupReport) -> None:
        """Remove a directory that was emptied by the traversal."""
        try:
            path.rmdir()
        except OSError as e:
            raise CleanupIOError(f"Cannot remove directory {path}: {e}", str(path)) from e

        logger.debug("Removed empty directory %s", path)
        report.removed_dirs.append(str(path))


def cleanup_stale_data(
    root: Path,
    age: timedelta,
    *,
    now: datetime | None = None,
) -> CleanupReport:
    """Remove stale files and emptied directories below root.

    Args:
        root: Directory to clean. It is never removed itself.
        age: Files modified more than this long ago are removed.
        now: Reference time for all age comparisons. Defaults to the
            current time, captured once for the whole run.

    Returns:
        CleanupReport describing the run.

    Raises:
        CleanupError: If root is missing or any filesystem operation fails.
        ValueError: If age is negative.
    """
    return StaleDataPruner(age, now=now).clean(root)
