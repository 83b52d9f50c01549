"""Tests for the Idle/Running timer state machine."""

from __future__ import annotations

import json
import os

import pytest

from timediary.service.timer import (
    InvalidMoodError,
    Timer,
    TimerAlreadyRunningError,
    TimerNotRunningError,
    TimerPersistenceError,
    TitleRequiredError,
    find_active_entry,
)


@pytest.fixture()
def timer(store, clock) -> Timer:
    return Timer(store, clock)


# ---- start ----


def test_idle_store_is_not_running(timer):
    assert timer.is_running() is False
    assert timer.get_active_entry() is None
    assert timer.elapsed() is None


def test_start_creates_open_entry(timer, store, clock):
    entry = timer.start("Write report")
    assert entry["title"] == "Write report"
    assert entry["start_time"] == clock.now
    assert entry["end_time"] is None
    assert entry["mood"] is None
    assert store.list_entries() == [entry]
    assert timer.is_running() is True


def test_start_strips_title(timer):
    assert timer.start("  Read  ")["title"] == "Read"


def test_quick_start_has_empty_title(timer):
    assert timer.start()["title"] == ""


def test_second_start_is_refused(timer, store):
    first = timer.start("Write")
    with pytest.raises(TimerAlreadyRunningError) as exc_info:
        timer.start("Read")
    assert exc_info.value.active_entry["id"] == first["id"]
    assert len(store.list_entries()) == 1


def test_start_after_external_entry_is_refused(store, clock):
    Timer(store, clock).start("Write")
    with pytest.raises(TimerAlreadyRunningError):
        Timer(store, clock).start("Read")


# ---- elapsed ----


def test_elapsed_follows_clock(timer, clock):
    timer.start("Write")
    clock.advance(minutes=1, seconds=5)
    assert timer.elapsed().total_seconds() == 65


# ---- stop ----


def test_stop_closes_entry_with_mood(timer, store, clock, store_path):
    timer.start("Write report")
    clock.advance(minutes=10)
    entry = timer.stop("focus")

    assert entry["end_time"] == clock.now
    assert entry["mood"] == "focus"
    assert timer.is_running() is False
    raw = json.loads(store_path.read_text())["entries"][0]
    assert raw["endTime"] - raw["startTime"] == 600000


def test_stop_when_idle_is_refused(timer):
    with pytest.raises(TimerNotRunningError):
        timer.stop("focus")


def test_stop_with_unknown_mood_is_refused(timer, store):
    timer.start("Write")
    with pytest.raises(InvalidMoodError):
        timer.stop("happy")
    assert timer.is_running() is True


def test_quick_start_stop_needs_title(timer, store):
    timer.start()
    with pytest.raises(TitleRequiredError):
        timer.stop("neutral")
    with pytest.raises(TitleRequiredError):
        timer.stop("neutral", "   ")
    assert find_active_entry(store.list_entries()) is not None


def test_quick_start_stop_uses_override_title(timer):
    timer.start()
    entry = timer.stop("tired", " Email ")
    assert entry["title"] == "Email"


def test_override_title_does_not_replace_existing_title(timer):
    timer.start("Write")
    assert timer.stop("focus", "Other")["title"] == "Write"


def test_stop_never_ends_before_start(timer, clock):
    timer.start("Write")
    clock.advance(seconds=-30)
    entry = timer.stop("neutral")
    assert entry["end_time"] == entry["start_time"]


def test_restart_after_stop(timer, store):
    timer.start("Write")
    timer.stop("focus")
    timer.start("Read")
    assert len(store.list_entries()) == 2
    assert timer.get_active_entry()["title"] == "Read"


# ---- persistence failure ----


def test_failed_start_raises_and_stays_idle(timer, monkeypatch):
    def fail(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", fail)
    with pytest.raises(TimerPersistenceError):
        timer.start("Write")
    assert timer.is_running() is False


def test_failed_stop_keeps_running(timer, monkeypatch):
    timer.start("Write")

    def fail(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", fail)
    with pytest.raises(TimerPersistenceError):
        timer.stop("focus")
    assert timer.is_running() is True
