"""Tests for per-day history helpers."""

from __future__ import annotations

import pendulum

from timediary.service.history import (
    entries_on_date,
    entry_duration,
    group_by_title,
    sort_newest_first,
    title_suggestions,
    total_duration,
)

START = pendulum.datetime(2026, 3, 14, 9, 0, 0, tz="UTC")
DATE = pendulum.date(2026, 3, 14)


def make_entry(id, title, start, minutes=None, mood=None):
    return {
        "id": id,
        "title": title,
        "start_time": start,
        "end_time": start.add(minutes=minutes) if minutes is not None else None,
        "mood": mood,
        "description": None,
    }


ENTRIES = [
    make_entry("a", "Write", START, 30, "tired"),
    make_entry("b", "Read", START.add(hours=1), 15, "neutral"),
    make_entry("c", "Write", START.add(hours=2), 45, "focus"),
    make_entry("d", "Yesterday", START.subtract(days=1), 10, "focus"),
    make_entry("e", "", START.add(hours=3)),
]


# ---- filtering and sorting ----


def test_sort_newest_first():
    assert [entry["id"] for entry in sort_newest_first(ENTRIES)] == [
        "e",
        "c",
        "b",
        "a",
        "d",
    ]


def test_entries_on_date():
    result = entries_on_date(ENTRIES, DATE, tz="UTC")
    assert [entry["id"] for entry in result] == ["e", "c", "b", "a"]


def test_entries_on_date_excludes_active_entry():
    result = entries_on_date(ENTRIES, DATE, exclude_id="e", tz="UTC")
    assert [entry["id"] for entry in result] == ["c", "b", "a"]


def test_entries_on_other_date():
    result = entries_on_date(ENTRIES, DATE.subtract(days=1), tz="UTC")
    assert [entry["id"] for entry in result] == ["d"]


# ---- durations ----


def test_running_entry_has_no_duration():
    assert entry_duration(ENTRIES[4]) is None


def test_entry_duration():
    assert entry_duration(ENTRIES[0]).total_seconds() == 30 * 60


def test_total_duration_skips_running_entries():
    day = entries_on_date(ENTRIES, DATE, tz="UTC")
    assert total_duration(day).total_seconds() == 90 * 60


def test_total_duration_of_nothing():
    assert total_duration([]).total_seconds() == 0


# ---- grouping ----


def test_group_by_title():
    groups = group_by_title(entries_on_date(ENTRIES, DATE, tz="UTC"))
    write = groups[0]
    assert write["title"] == "Write"
    assert write["count"] == 2
    assert write["duration"].total_seconds() == 75 * 60
    assert write["mood"] == "focus"
    assert [group["title"] for group in groups] == ["Write", "Read", ""]


def test_title_suggestions():
    assert title_suggestions(ENTRIES) == ["Read", "Write", "Yesterday"]
