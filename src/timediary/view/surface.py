# SPDX-License-Identifier: MIT

from typing import Callable, Optional

import pendulum
from rich import box
from rich.console import Console, Group, RenderableType
from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from timediary.model.time_entry import TimeEntry
from timediary.repository.store import EntryStore
from timediary.service.history import entries_on_date, title_suggestions
from timediary.service.ticker import Ticker
from timediary.service.timer import find_active_entry
from timediary.time import now_utc, today_local
from timediary.view.views.floating import floating_panel
from timediary.view.views.history import history_table
from timediary.view.views.timer import timer_panel


class MainSurface:
    """
    Full view: timer, the selected day's history and the diary block.

    Entries are re-pulled from the store on every change notification while
    the surface is open.
    """

    def __init__(
        self,
        store: EntryStore,
        console: Console,
        clock: Callable[[], pendulum.DateTime] = now_utc,
    ) -> None:
        self.store = store
        self.console = console
        self.clock = clock
        self.visible = False
        self.date = today_local()
        self.grouped = False
        self.message: Optional[str] = None
        self.diary: Optional[str] = None
        self.diary_pending = False
        self.entries: list[TimeEntry] = []
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def is_open(self) -> bool:
        return self._unsubscribe is not None

    def open(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self.on_entries_updated)
        self.on_entries_updated()

    def close(self) -> None:
        self.visible = False
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def show(self) -> None:
        self.visible = True

    def hide(self) -> None:
        self.visible = False

    def on_entries_updated(self) -> None:
        self.entries = self.store.list_entries()

    @property
    def active_entry(self) -> Optional[TimeEntry]:
        return find_active_entry(self.entries)

    def history_entries(self) -> list[TimeEntry]:
        active_entry = self.active_entry
        return entries_on_date(
            self.entries,
            self.date,
            exclude_id=active_entry["id"] if active_entry is not None else None,
        )

    def change_date(self, days: int) -> None:
        date = self.date.add(days=days)
        if date > today_local():
            return
        self.date = date
        self.diary = None

    def reset_date(self) -> None:
        self.date = today_local()
        self.diary = None

    def render(self) -> RenderableType:
        parts: list[RenderableType] = [
            timer_panel(self.active_entry, self.clock(), title_suggestions(self.entries)),
            history_table(self.history_entries(), self.date, self.grouped),
        ]
        if self.diary_pending:
            parts.append(Text("Generating…", style="italic grey58"))
        elif self.diary:
            parts.append(
                Panel(self.diary, title="Smart Diary", box=box.ROUNDED, border_style="plum1")
            )
        if self.message:
            parts.append(Text(self.message, style="red"))
        return Group(*parts)

    def print(self) -> None:
        self.console.print(self.render())


class FloatingSurface:
    """
    Compact live panel showing only the active entry and its clock.

    The clock ticks only while the panel is shown and an entry is active.
    """

    def __init__(
        self,
        store: EntryStore,
        console: Console,
        refresh_interval: float = 1.0,
        clock: Callable[[], pendulum.DateTime] = now_utc,
    ) -> None:
        self.store = store
        self.console = console
        self.clock = clock
        self.visible = False
        self.active_entry: Optional[TimeEntry] = None
        self.ticker = Ticker(refresh_interval, self.refresh)
        self._live: Optional[Live] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def is_open(self) -> bool:
        return self._unsubscribe is not None

    def open(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self.store.subscribe(self.on_entries_updated)
        self.on_entries_updated()

    def close(self) -> None:
        self.hide()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def show(self) -> None:
        if self._live is None:
            self._live = Live(
                self.render(),
                console=self.console,
                auto_refresh=False,
                transient=True,
            )
            self._live.start()
        self.visible = True
        self.__sync_ticker()
        self.refresh()

    def hide(self) -> None:
        self.visible = False
        self.ticker.stop()
        if self._live is not None:
            self._live.stop()
            self._live = None

    def on_entries_updated(self) -> None:
        self.active_entry = find_active_entry(self.store.list_entries())
        self.__sync_ticker()
        self.refresh()

    def __sync_ticker(self) -> None:
        if self.visible and self.active_entry is not None:
            self.ticker.start()
        else:
            self.ticker.stop()

    def refresh(self) -> None:
        live = self._live
        if live is not None:
            live.update(self.render(), refresh=True)

    def render(self) -> RenderableType:
        return floating_panel(self.active_entry, self.clock())
