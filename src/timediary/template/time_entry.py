# SPDX-License-Identifier: MIT

from timediary.model.entity_id import generate_entity_id
from timediary.model.time_entry import TimeEntry
from timediary.time import now_utc


def get_time_entry_template() -> TimeEntry:
    return {
        "id": generate_entity_id(),
        "title": "",
        "start_time": now_utc(),
        "end_time": None,
        "mood": None,
        "description": None,
    }
