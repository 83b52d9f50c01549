# SPDX-License-Identifier: MIT

from typing import Literal, Optional, TypedDict

import pendulum

from timediary.model.entity_id import EntityId

Mood = Literal["focus", "neutral", "tired"]

MOODS: tuple[Mood, ...] = ("focus", "neutral", "tired")


class TimeEntry(TypedDict):
    id: EntityId
    title: str  # may be empty while a quick-started entry is running
    start_time: pendulum.DateTime
    end_time: Optional[pendulum.DateTime]  # None while the entry is active
    mood: Optional[Mood]  # set when the entry is stopped
    description: Optional[str]


def is_mood(value: object) -> bool:
    return value in MOODS
