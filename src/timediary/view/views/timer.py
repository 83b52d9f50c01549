# SPDX-License-Identifier: MIT

from typing import Optional

import pendulum
from rich import box
from rich.align import Align
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.text import Text

from timediary.model.time_entry import TimeEntry
from timediary.time import (
    datetime_to_display_local_time_str,
    duration_between,
    duration_to_clock_str,
)


def timer_panel(
    active_entry: Optional[TimeEntry],
    now: pendulum.DateTime,
    suggestions: Optional[list[str]] = None,
) -> RenderableType:
    """The timer block of the main view."""
    if active_entry is None:
        lines: list[RenderableType] = [
            Align.center(Text("Not tracking anything", style="grey58")),
            Align.center(Text("start <what are you working on?>", style="italic")),
        ]
        if suggestions:
            lines.append(
                Align.center(
                    Text(f"recent: {', '.join(suggestions[:5])}", style="grey50")
                )
            )
        return Panel(Group(*lines), box=box.ROUNDED, border_style="grey50")

    if active_entry["title"]:
        title = Text(active_entry["title"], style="bold plum1")
    else:
        title = Text("No task name", style="italic grey58")

    elapsed = duration_between(active_entry["start_time"], now)
    return Panel(
        Group(
            Align.center(Text("FOCUSING ON", style="grey58")),
            Align.center(title),
            Align.center(Text(duration_to_clock_str(elapsed), style="bold")),
            Align.center(
                Text(
                    f"since {datetime_to_display_local_time_str(active_entry['start_time'])}",
                    style="grey50",
                )
            ),
        ),
        box=box.HEAVY,
        border_style="dark_orange",
    )
