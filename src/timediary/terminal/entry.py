# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import pendulum
import typer
from rich.console import Console

from timediary.repository.store import ENTRY_STORE
from timediary.service import entry as entry_service
from timediary.service.entry import EntryError, EntryNotFoundError
from timediary.service.history import entries_on_date
from timediary.terminal.completion import complete_entry_id
from timediary.terminal.parse import DATE_HELP, DATETIME_HELP, parse_date, parse_datetime
from timediary.time import today_local
from timediary.view.views import history as history_report

console = Console()


def history(
    date: Annotated[
        Optional[pendulum.Date],
        typer.Option("--date", "-d", parser=parse_date, help=DATE_HELP),
    ] = None,
    grouped: Annotated[
        bool,
        typer.Option("--grouped", "-g", help="one row per title with summed time"),
    ] = False,
) -> None:
    """List the activities of a day, newest first."""
    day = date if date is not None else today_local()
    entries = entries_on_date(ENTRY_STORE.list_entries(), day)
    history_report.history_report(entries, day, grouped)


def edit(
    id: Annotated[
        str,
        typer.Argument(help="entry id or a unique prefix", autocompletion=complete_entry_id),
    ],
    title: Annotated[Optional[str], typer.Option("--title", "-t")] = None,
    start_time: Annotated[
        Optional[pendulum.DateTime],
        typer.Option("--start", "-s", parser=parse_datetime, help=DATETIME_HELP),
    ] = None,
    end_time: Annotated[
        Optional[pendulum.DateTime],
        typer.Option("--end", "-e", parser=parse_datetime, help=DATETIME_HELP),
    ] = None,
    remove_end_time: Annotated[
        bool,
        typer.Option("--remove-end", "-re", help="reopen the entry"),
    ] = False,
) -> None:
    """Change the title or time range of an entry."""
    try:
        entry_id = entry_service.resolve_entry_id(ENTRY_STORE.list_entries(), id)
        entry = entry_service.edit_entry(
            ENTRY_STORE,
            entry_id,
            title=title,
            start_time=start_time,
            end_time=end_time,
            remove_end_time=remove_end_time,
        )
    except EntryError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    history_report.single_entry_report(entry, "edited")


def delete(
    id: Annotated[
        str,
        typer.Argument(help="entry id or a unique prefix", autocompletion=complete_entry_id),
    ],
) -> None:
    """Delete an entry. Deleting an unknown id changes nothing."""
    try:
        entry_id = entry_service.resolve_entry_id(ENTRY_STORE.list_entries(), id)
    except EntryNotFoundError:
        console.print(f"No entry matches '{id}', nothing deleted.")
        return
    except EntryError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    if not entry_service.delete_entry(ENTRY_STORE, entry_id):
        console.print("[red]Error: Could not save the store, nothing was deleted.[/red]")
        raise typer.Exit(1)
    console.print(f"Deleted entry {entry_id}")
