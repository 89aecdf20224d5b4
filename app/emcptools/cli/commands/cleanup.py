"""Stale data cleanup command.

Removes files older than a given age from a directory tree, together
with directories left empty. Directories containing a ``.keep`` file
are left untouched, and the given directory itself is never removed.
"""

import os
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from emcptools.cleanup import CleanupError, CleanupReport, cleanup_stale_data
from emcptools.core.config import CleanupSettings, ConfigError, load_config
from emcptools.core.duration import DurationParseError, format_duration, parse_duration
from emcptools.utils.formatting import console, format_size, print_error


def cleanup_stale_data_command(
    ctx: typer.Context,
    dir_path: Annotated[
        Path | None,
        typer.Option(
            "--dir",
            "-d",
            help=(
                "Directory to clean up, e.g. /local/work or /tmp. "
                "The directory itself is never removed, only its contents. "
                "It must exist and be writable."
            ),
        ),
    ] = None,
    age: Annotated[
        str | None,
        typer.Option(
            "--age",
            "-a",
            help="Age threshold for files to be removed, e.g. 7d or 5h.",
        ),
    ] = None,
) -> None:
    """Clean up stale files and directories in a directory.

    Directories containing a .keep file remain untouched.
    """
    settings = _load_settings()

    directory = dir_path if dir_path is not None else settings.dir
    if directory is None:
        raise typer.BadParameter(
            "No directory given and no default configured.", param_hint="'--dir'"
        )

    if age is not None:
        try:
            threshold = parse_duration(age)
        except DurationParseError as e:
            raise typer.BadParameter(str(e), param_hint="'--age'") from e
    else:
        threshold = settings.age_delta
        if threshold is None:
            raise typer.BadParameter(
                "No age given and no default configured.", param_hint="'--age'"
            )

    directory = directory.expanduser().absolute()
    if directory.is_dir() and not _is_writable(directory):
        print_error(escape(f"Directory is not writable: {directory}"))
        raise typer.Exit(code=1)

    try:
        report = cleanup_stale_data(directory, threshold)
    except CleanupError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    obj = ctx.obj or {}
    if obj.get("verbose") and not obj.get("quiet"):
        _print_report(report)


# === Private helper functions ===


def _load_settings() -> CleanupSettings:
    """Load cleanup defaults from the config file."""
    try:
        return load_config().cleanup
    except ConfigError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e


def _is_writable(path: Path) -> bool:
    """Check that entries inside a directory can be removed."""
    return os.access(path, os.W_OK | os.X_OK)


def _print_report(report: CleanupReport) -> None:
    """Display a cleanup report as a Rich table."""
    table = Table(
        title=f"Cleanup of {escape(report.root)}",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Outcome")
    table.add_column("Count", justify="right")

    table.add_row("[removed]Files removed[/]", str(len(report.removed_files)))
    table.add_row("[removed]Directories removed[/]", str(len(report.removed_dirs)))
    table.add_row("[kept]Files kept[/]", str(len(report.kept_files)))
    table.add_row("[kept]Protected directories[/]", str(len(report.protected_dirs)))

    console.print(table)
    console.print(
        f"[muted]Age threshold {format_duration(report.age)}, "
        f"freed {format_size(report.freed_bytes)}[/]"
    )
