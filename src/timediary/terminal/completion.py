# SPDX-License-Identifier: MIT

from timediary.model.time_entry import MOODS
from timediary.repository.store import ENTRY_STORE
from timediary.service.history import title_suggestions


def complete_mood(incomplete: str) -> list[str]:
    return [mood for mood in MOODS if mood.startswith(incomplete)]


def complete_title(incomplete: str) -> list[str]:
    """Return titles of earlier entries for shell completion."""
    titles = title_suggestions(ENTRY_STORE.list_entries())
    return [title for title in titles if title.startswith(incomplete)]


def complete_entry_id(incomplete: str) -> list[str]:
    return [
        entry["id"]
        for entry in ENTRY_STORE.list_entries()
        if entry["id"].startswith(incomplete)
    ]
