# SPDX-License-Identifier: MIT

import logging
from typing import Optional

import pendulum

from timediary.model.entity_id import EntityId
from timediary.model.time_entry import TimeEntry
from timediary.repository.store import EntryStore

logger = logging.getLogger(__name__)


class EntryError(ValueError):
    pass


class EntryNotFoundError(EntryError):
    def __init__(self, id: str) -> None:
        self.id = id
        super().__init__(f"No entry matches {id!r}.")


class AmbiguousEntryIdError(EntryError):
    def __init__(self, id: str, matches: list[EntityId]) -> None:
        self.id = id
        self.matches = matches
        super().__init__(f"{id!r} matches {len(matches)} entries, use a longer id.")


class EntryValidationError(EntryError):
    pass


def resolve_entry_id(entries: list[TimeEntry], id_or_prefix: str) -> EntityId:
    """Accept a full entry id or a unique prefix of one."""
    id_or_prefix = id_or_prefix.strip()
    if not id_or_prefix:
        raise EntryNotFoundError(id_or_prefix)

    for entry in entries:
        if entry["id"] == id_or_prefix:
            return entry["id"]

    matches = [entry["id"] for entry in entries if entry["id"].startswith(id_or_prefix)]
    if len(matches) == 0:
        raise EntryNotFoundError(id_or_prefix)
    if len(matches) > 1:
        raise AmbiguousEntryIdError(id_or_prefix, matches)
    return matches[0]


def edit_entry(
    store: EntryStore,
    id: EntityId,
    title: Optional[str] = None,
    start_time: Optional[pendulum.DateTime] = None,
    end_time: Optional[pendulum.DateTime] = None,
    remove_end_time: bool = False,
) -> TimeEntry:
    """
    Rewrite title, start and end of an entry.

    Unlike a plain store update, an edit may not invert the time range and
    may not reopen an entry while another one is running.
    """
    with store.lock:
        entries = store.list_entries()
        matching = [entry for entry in entries if entry["id"] == id]
        if len(matching) == 0:
            raise EntryNotFoundError(id)
        entry = matching[0]

        if title is not None:
            entry["title"] = title.strip()
        if start_time is not None:
            entry["start_time"] = start_time
        if end_time is not None:
            entry["end_time"] = end_time
        if remove_end_time:
            entry["end_time"] = None

        if entry["end_time"] is not None and entry["end_time"] < entry["start_time"]:
            raise EntryValidationError("The end time must not be before the start time.")

        if entry["end_time"] is None:
            other_open = [
                other
                for other in entries
                if other["id"] != id and other["end_time"] is None
            ]
            if other_open:
                raise EntryValidationError(
                    "Another entry is still running, an edit cannot reopen this one."
                )
            if entry["mood"] is not None:
                # A reopened entry gets its mood again when it is stopped
                entry["mood"] = None
        elif not entry["title"]:
            raise EntryValidationError("A finished entry needs a title.")

        if not store.update_entry(entry):
            raise EntryError("Could not save the entry, nothing was changed.")

    logger.info("edited entry %s", id)
    return entry


def delete_entry(store: EntryStore, id: EntityId) -> bool:
    deleted = store.delete_entry(id)
    if deleted:
        logger.info("deleted entry %s", id)
    return deleted
