"""Configuration commands.

Provides commands to show the effective configuration and to write
a config file with defaults for the cleanup command.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from emcptools.core.config import (
    CleanupSettings,
    ConfigError,
    ToolsConfig,
    load_config,
    save_config,
)
from emcptools.core.duration import DurationParseError, parse_duration
from emcptools.core.paths import get_config_path
from emcptools.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show and initialize the emcp-tools configuration.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def show() -> None:
    """Show the effective configuration."""
    config_path = get_config_path()
    try:
        config = load_config(config_path)
    except ConfigError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    if not config_path.exists():
        print_info(escape(f"Showing defaults, no config file at {config_path}"))

    table = Table(
        title=escape(str(config_path)),
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Key", style="bold")
    table.add_column("Value")

    cleanup = config.cleanup
    table.add_row("cleanup.dir", escape(str(cleanup.dir)) if cleanup.dir else "[muted]-[/]")
    table.add_row("cleanup.age", escape(cleanup.age) if cleanup.age else "[muted]-[/]")

    console.print(table)


@app.command()
def init(
    dir_path: Annotated[
        Path | None,
        typer.Option("--dir", "-d", help="Default directory to clean up."),
    ] = None,
    age: Annotated[
        str | None,
        typer.Option("--age", "-a", help="Default age threshold, e.g. 7d."),
    ] = None,
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite an existing config file."),
    ] = False,
) -> None:
    """Write a config file with cleanup defaults."""
    config_path = get_config_path()
    if config_path.exists() and not force:
        print_error(escape(f"Config file already exists: {config_path} (use --force)"))
        raise typer.Exit(code=1)

    if age is not None:
        try:
            parse_duration(age)
        except DurationParseError as e:
            raise typer.BadParameter(str(e), param_hint="'--age'") from e

    directory = dir_path.expanduser().absolute() if dir_path else None
    config = ToolsConfig(cleanup=CleanupSettings(dir=directory, age=age))

    try:
        saved = save_config(config, config_path)
    except ConfigError as e:
        print_error(escape(str(e)))
        raise typer.Exit(code=1) from e

    print_success(escape(f"Configuration written to {saved}"))
