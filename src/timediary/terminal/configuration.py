# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from timediary import configuration
from timediary.repository.configuration import CONFIGURATION_REPO
from timediary.terminal.custom_typer import TimerAwareTyperGroup

app = typer.Typer(cls=TimerAwareTyperGroup, no_args_is_help=True)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@app.command("view, v")
def view() -> None:
    """Display current configuration settings."""
    config = CONFIGURATION_REPO.get_config()

    console = Console()
    table = Table()
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("data_path", str(configuration.DATA_PATH))
    table.add_row("store", str(configuration.DATA_STORE_PATH))
    table.add_row(
        "show_header",
        "✓ Enabled" if config["show_header"] else "✗ Disabled",
    )
    table.add_row("request_timeout", f"{config['request_timeout']}s")
    table.add_row("refresh_interval", f"{config['refresh_interval']}s")
    table.add_row("log_level", config["log_level"])
    table.add_row("log_file", str(configuration.LOG_PATH))

    console.print(table)

    yaml_library_type = "untested"
    try:
        from yaml import CLoader as Loader  # noqa: F401

        yaml_library_type = "C"
    except ImportError:
        yaml_library_type = "Python"

    console.print()
    console.print(f"YAML Library Type: {yaml_library_type}")


@app.command("set, s", no_args_is_help=True)
def set(
    data_path: Annotated[
        Optional[str],
        typer.Option(
            "--data-path",
            help="Directory for the entry store (default: platform data directory)",
        ),
    ] = None,
    remove_data_path: Annotated[
        bool,
        typer.Option(
            "--remove-data-path",
            help="Go back to the platform data directory",
        ),
    ] = False,
    show_header: Annotated[
        Optional[bool],
        typer.Option(
            "--show-header/--no-show-header",
            help="Enable/disable the header above reports",
        ),
    ] = None,
    request_timeout: Annotated[
        Optional[float],
        typer.Option(
            "--request-timeout",
            help="Seconds to wait for the diary endpoint",
        ),
    ] = None,
    refresh_interval: Annotated[
        Optional[float],
        typer.Option(
            "--refresh-interval",
            help="Seconds between clock updates of the floating panel",
        ),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help=f"one of {', '.join(LOG_LEVELS)}"),
    ] = None,
) -> None:
    """
    Update configuration settings.
    """
    console = Console()

    if request_timeout is not None and request_timeout <= 0:
        console.print("[red]Error: request timeout must be positive[/red]")
        raise typer.Exit(1)
    if refresh_interval is not None and refresh_interval <= 0:
        console.print("[red]Error: refresh interval must be positive[/red]")
        raise typer.Exit(1)
    if log_level is not None and log_level.upper() not in LOG_LEVELS:
        console.print(f"[red]Error: unknown log level '{log_level}'[/red]")
        raise typer.Exit(1)

    CONFIGURATION_REPO.update_config(
        data_path=data_path,
        remove_data_path=remove_data_path,
        show_header=show_header,
        request_timeout=request_timeout,
        refresh_interval=refresh_interval,
        log_level=log_level,
    )

    config = CONFIGURATION_REPO.get_config()

    console.print("[green]Configuration updated successfully![/green]\n")
    table = Table()
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")
    for key, value in config.items():
        table.add_row(key, str(value))
    console.print(table)
