# SPDX-License-Identifier: MIT

import logging
from typing import Callable, Optional

import pendulum

from timediary.model.time_entry import MOODS, Mood, TimeEntry
from timediary.repository.store import EntryStore
from timediary.template.time_entry import get_time_entry_template
from timediary.time import duration_between, now_utc

logger = logging.getLogger(__name__)

Clock = Callable[[], pendulum.DateTime]


class TimerError(ValueError):
    pass


class TimerAlreadyRunningError(TimerError):
    def __init__(self, active_entry: TimeEntry) -> None:
        self.active_entry = active_entry
        title = active_entry["title"] or "an untitled task"
        super().__init__(f"Already tracking {title}, stop it first.")


class TimerNotRunningError(TimerError):
    def __init__(self) -> None:
        super().__init__("No task is being tracked.")


class TitleRequiredError(TimerError):
    def __init__(self) -> None:
        super().__init__("Name the task before stopping it.")


class InvalidMoodError(TimerError):
    def __init__(self, mood: object) -> None:
        super().__init__(f"Mood must be one of {', '.join(MOODS)}, got {mood!r}.")


class TimerPersistenceError(TimerError):
    def __init__(self) -> None:
        super().__init__("Could not save the entry, nothing was changed.")


def find_active_entry(entries: list[TimeEntry]) -> Optional[TimeEntry]:
    return next((entry for entry in entries if entry["end_time"] is None), None)


class Timer:
    """
    Idle/Running state machine over the entry store.

    The state is never cached: the active entry is the entry without an end
    time in the store's current listing, so every surface reading the store
    agrees on it.
    """

    def __init__(self, store: EntryStore, clock: Clock = now_utc) -> None:
        self.store = store
        self.clock = clock

    def get_active_entry(self) -> Optional[TimeEntry]:
        return find_active_entry(self.store.list_entries())

    def is_running(self) -> bool:
        return self.get_active_entry() is not None

    def elapsed(
        self, now: Optional[pendulum.DateTime] = None
    ) -> Optional[pendulum.Duration]:
        active_entry = self.get_active_entry()
        if active_entry is None:
            return None
        return duration_between(active_entry["start_time"], now or self.clock())

    def start(self, title: str = "") -> TimeEntry:
        # Check-and-create under the store lock so two starts cannot both
        # see an idle store
        with self.store.lock:
            active_entry = self.get_active_entry()
            if active_entry is not None:
                raise TimerAlreadyRunningError(active_entry)

            entry = get_time_entry_template()
            entry["title"] = title.strip()
            entry["start_time"] = self.clock()

            if not self.store.add_entry(entry):
                raise TimerPersistenceError()

        logger.info("started entry %s %r", entry["id"], entry["title"])
        return entry

    def stop(self, mood: Mood, override_title: Optional[str] = None) -> TimeEntry:
        with self.store.lock:
            active_entry = self.get_active_entry()
            if active_entry is None:
                raise TimerNotRunningError()
            if mood not in MOODS:
                raise InvalidMoodError(mood)

            title = active_entry["title"]
            if not title:
                title = (override_title or "").strip()
                if not title:
                    raise TitleRequiredError()

            now = self.clock()
            entry: TimeEntry = {
                **active_entry,
                "title": title,
                "end_time": max(now, active_entry["start_time"]),
                "mood": mood,
            }

            if not self.store.update_entry(entry):
                raise TimerPersistenceError()

        logger.info("stopped entry %s %r (%s)", entry["id"], entry["title"], mood)
        return entry
