# SPDX-License-Identifier: MIT

from typing import Optional

import pendulum
from rich import box
from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.text import Text

from timediary.model.time_entry import TimeEntry
from timediary.time import duration_between, duration_to_clock_str

FLOATING_WIDTH = 32


def floating_panel(
    active_entry: Optional[TimeEntry], now: pendulum.DateTime
) -> RenderableType:
    if active_entry is None:
        status = Text("IDLE", style="grey58")
        title = Text("No active task", style="bold", overflow="ellipsis", no_wrap=True)
        clock = Text("--:--:--", style="dark_orange")
    else:
        status = Text("FOCUSING", style="grey58")
        title = Text(
            active_entry["title"] or "No active task",
            style="bold",
            overflow="ellipsis",
            no_wrap=True,
        )
        clock = Text(
            duration_to_clock_str(duration_between(active_entry["start_time"], now)),
            style="bold dark_orange",
        )

    for text in (status, title, clock):
        text.justify = "center"

    return Panel(
        Group(status, title, clock),
        box=box.ROUNDED,
        width=FLOATING_WIDTH,
        subtitle="ctrl-c: expand",
        subtitle_align="right",
    )
