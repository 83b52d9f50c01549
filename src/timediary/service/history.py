# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict

import pendulum

from timediary.model.entity_id import EntityId
from timediary.model.time_entry import Mood, TimeEntry
from timediary.time import duration_between


class TitleGroup(TypedDict):
    title: str
    duration: pendulum.Duration
    count: int
    mood: Optional[Mood]


def sort_newest_first(entries: list[TimeEntry]) -> list[TimeEntry]:
    return sorted(entries, key=lambda entry: entry["start_time"], reverse=True)


def sort_oldest_first(entries: list[TimeEntry]) -> list[TimeEntry]:
    return sorted(entries, key=lambda entry: entry["start_time"])


def is_on_date(entry: TimeEntry, date: pendulum.Date, tz: str = "local") -> bool:
    return entry["start_time"].in_tz(tz).date() == date


def entries_on_date(
    entries: list[TimeEntry],
    date: pendulum.Date,
    exclude_id: Optional[EntityId] = None,
    tz: str = "local",
) -> list[TimeEntry]:
    """
    Entries started on the given local date, newest first.

    The main view passes the active entry's id as ``exclude_id`` because the
    timer panel already shows it.
    """
    return sort_newest_first(
        [
            entry
            for entry in entries
            if is_on_date(entry, date, tz) and entry["id"] != exclude_id
        ]
    )


def entry_duration(entry: TimeEntry) -> Optional[pendulum.Duration]:
    if entry["end_time"] is None:
        return None
    return duration_between(entry["start_time"], entry["end_time"])


def total_duration(entries: list[TimeEntry]) -> pendulum.Duration:
    total = pendulum.duration()
    for entry in entries:
        duration = entry_duration(entry)
        if duration is not None:
            total = total + duration
    return total


def group_by_title(entries: list[TimeEntry]) -> list[TitleGroup]:
    groups: dict[str, TitleGroup] = {}
    for entry in sort_oldest_first(entries):
        group = groups.setdefault(
            entry["title"],
            {
                "title": entry["title"],
                "duration": pendulum.duration(),
                "count": 0,
                "mood": None,
            },
        )
        duration = entry_duration(entry)
        if duration is not None:
            group["duration"] = group["duration"] + duration
        group["count"] += 1
        # Most recent mood wins
        if entry["mood"] is not None:
            group["mood"] = entry["mood"]

    return sorted(
        groups.values(),
        key=lambda group: group["duration"].total_seconds(),
        reverse=True,
    )


def title_suggestions(entries: list[TimeEntry]) -> list[str]:
    return sorted({entry["title"] for entry in entries if entry["title"]})
