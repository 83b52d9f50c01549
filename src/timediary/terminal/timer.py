# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich.console import Console

from timediary.repository.store import ENTRY_STORE
from timediary.service.history import title_suggestions
from timediary.service.timer import Timer, TimerError
from timediary.terminal.completion import complete_mood, complete_title
from timediary.time import now_utc
from timediary.view.views import history as history_report
from timediary.view.views.header import header
from timediary.view.views.timer import timer_panel

console = Console()


def start(
    title: Annotated[
        Optional[list[str]],
        typer.Argument(
            help="what you are working on, leave empty for a quick start",
            autocompletion=complete_title,
        ),
    ] = None,
) -> None:
    """Start tracking an activity."""
    timer = Timer(ENTRY_STORE)
    try:
        entry = timer.start(" ".join(title or []))
    except TimerError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    history_report.single_entry_report(entry, "started")


def stop(
    mood: Annotated[
        str,
        typer.Argument(help="focus, neutral or tired", autocompletion=complete_mood),
    ],
    title: Annotated[
        Optional[str],
        typer.Option(
            "--title",
            "-t",
            help="name for a quick-started activity",
            autocompletion=complete_title,
        ),
    ] = None,
) -> None:
    """Stop the running activity and record how it felt."""
    timer = Timer(ENTRY_STORE)
    try:
        entry = timer.stop(mood.strip().lower(), title)  # type: ignore[arg-type]
    except TimerError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    history_report.single_entry_report(entry, "stopped")


def status() -> None:
    """Show the running activity and its elapsed time."""
    entries = ENTRY_STORE.list_entries()
    active_entry = Timer(ENTRY_STORE).get_active_entry()

    header("status")
    console.print(timer_panel(active_entry, now_utc(), title_suggestions(entries)))
