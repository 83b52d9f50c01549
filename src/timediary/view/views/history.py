# SPDX-License-Identifier: MIT

from typing import Optional

import pendulum
from rich import box
from rich.console import Console
from rich.table import Table

from timediary.model.time_entry import Mood, TimeEntry
from timediary.service.history import entry_duration, group_by_title, total_duration
from timediary.time import (
    date_to_display_str,
    datetime_to_display_local_datetime_str_optional,
    datetime_to_display_local_time_str,
    duration_to_human_str,
    today_local,
)
from timediary.view.views.header import header

MOOD_GLYPHS: dict[Mood, str] = {
    "focus": "🔥",
    "neutral": "😐",
    "tired": "😫",
}

SHORT_ID_LENGTH = 8


def mood_glyph(mood: Optional[Mood]) -> str:
    if mood is None:
        return ""
    return MOOD_GLYPHS[mood]


def short_id(entry: TimeEntry) -> str:
    return entry["id"][:SHORT_ID_LENGTH]


def format_time_range(entry: TimeEntry) -> str:
    start = datetime_to_display_local_time_str(entry["start_time"])
    if entry["end_time"] is None:
        return f"{start} - Now"
    return f"{start} - {datetime_to_display_local_time_str(entry['end_time'])}"


def history_title(date: pendulum.Date) -> str:
    if date == today_local():
        return "Today's Journey"
    return f"{date.to_date_string()} Journey"


def history_table(
    entries: list[TimeEntry], date: pendulum.Date, grouped: bool = False
) -> Table:
    """
    Table of one day's entries, newest first, or one row per title when
    grouped. Entries are expected to be filtered and sorted by the caller.
    """
    total = total_duration(entries)
    caption = None
    if total.total_seconds() > 0:
        caption = f"total time: {duration_to_human_str(total)}"

    table = Table(
        title=f"{history_title(date)} [grey50]({date_to_display_str(date)})[/grey50]",
        caption=caption,
        box=box.SIMPLE,
        title_justify="left",
        caption_justify="right",
    )

    if grouped:
        table.add_column("title")
        table.add_column("sessions", justify="right")
        table.add_column("mood", justify="center")
        table.add_column("duration", justify="right")
        for group in group_by_title(entries):
            table.add_row(
                group["title"],
                str(group["count"]),
                mood_glyph(group["mood"]),
                duration_to_human_str(group["duration"]),
            )
    else:
        table.add_column("id", style="grey50")
        table.add_column("title")
        table.add_column("time")
        table.add_column("mood", justify="center")
        table.add_column("duration", justify="right")
        for entry in entries:
            duration = entry_duration(entry)
            table.add_row(
                short_id(entry),
                entry["title"] or "[italic grey58]untitled[/italic grey58]",
                format_time_range(entry),
                mood_glyph(entry["mood"]),
                duration_to_human_str(duration) if duration is not None else "...",
            )

    if len(entries) == 0:
        table.caption = "No entries for this day."

    return table


def history_report(
    entries: list[TimeEntry], date: pendulum.Date, grouped: bool = False
) -> None:
    header("history")
    console = Console()
    console.print(history_table(entries, date, grouped))


def single_entry_report(entry: TimeEntry, title: str = "entry") -> None:
    header(title)

    entry_table = Table(box=box.SIMPLE)
    entry_table.add_column("property")
    entry_table.add_column("value")

    duration = entry_duration(entry)
    entry_table.add_row("id", entry["id"])
    entry_table.add_row("title", entry["title"])
    entry_table.add_row(
        "start", datetime_to_display_local_datetime_str_optional(entry["start_time"])
    )
    entry_table.add_row(
        "end", datetime_to_display_local_datetime_str_optional(entry["end_time"])
    )
    entry_table.add_row(
        "duration", duration_to_human_str(duration) if duration is not None else None
    )
    entry_table.add_row(
        "mood", f"{mood_glyph(entry['mood'])} {entry['mood']}" if entry["mood"] else None
    )
    if entry["description"] is not None:
        entry_table.add_row("description", entry["description"])

    console = Console()
    console.print(entry_table)
