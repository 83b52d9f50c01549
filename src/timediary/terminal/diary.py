# SPDX-License-Identifier: MIT

import logging
from typing import Annotated, Optional

import pendulum
import typer
from rich import box
from rich.console import Console
from rich.panel import Panel

from timediary.repository.configuration import CONFIGURATION_REPO
from timediary.repository.store import ENTRY_STORE
from timediary.service.diary import DiaryComposer, DiaryError, user_message
from timediary.terminal.parse import DATE_HELP, parse_date
from timediary.time import today_local
from timediary.view.views.header import header

logger = logging.getLogger(__name__)

console = Console()


def diary(
    date: Annotated[
        Optional[pendulum.Date],
        typer.Option("--date", "-d", parser=parse_date, help=DATE_HELP),
    ] = None,
) -> None:
    """Write a short reflective diary entry for a day with the configured AI."""
    day = date if date is not None else today_local()
    config = CONFIGURATION_REPO.get_config()
    composer = DiaryComposer(ENTRY_STORE, timeout=config["request_timeout"])

    try:
        with console.status("Generating…"):
            content = composer.generate_for_date(day)
    except DiaryError as e:
        logger.info("diary for %s not generated: %s", day.to_date_string(), e)
        console.print(f"[red]Error: {user_message(e)}[/red]")
        raise typer.Exit(1)

    header(f"diary for {day.to_date_string()}")
    console.print(
        Panel(content, title="Smart Diary", box=box.ROUNDED, border_style="plum1")
    )
