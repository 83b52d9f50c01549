# SPDX-License-Identifier: MIT

import logging
import shlex
import signal
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from types import FrameType
from typing import Annotated, Callable, Optional

import pendulum
import typer
from rich.console import Console
from rich.table import Table

from timediary.configuration import Configuration
from timediary.repository.configuration import CONFIGURATION_REPO
from timediary.repository.store import ENTRY_STORE, EntryStore
from timediary.service import entry as entry_service
from timediary.service.diary import DiaryComposer, DiaryError, entries_for_date, user_message
from timediary.service.entry import EntryError
from timediary.service.timer import Timer, TimerError
from timediary.service.window import WindowCoordinator
from timediary.time import now_utc
from timediary.view.surface import FloatingSurface, MainSurface

logger = logging.getLogger(__name__)

PROMPT = "[bold dark_orange]›[/bold dark_orange] "

# Seconds between store re-reads while the floating panel is shown, so
# changes made by another process show up
FLOATING_POLL_INTERVAL = 2.0

COMMAND_HELP = [
    ("start [title]", "start tracking, leave the title out for a quick start"),
    ("stop <mood> [title]", "stop with focus, neutral or tired"),
    ("compact / toggle", "switch to the floating panel"),
    ("prev / next / today", "move through the history by day"),
    ("group", "toggle grouping the history by title"),
    ("diary", "write a diary entry for the shown day"),
    ("delete <id>", "delete an entry by id or id prefix"),
    ("close", "hide behind the floating panel (ctrl-c does the same)"),
    ("quit", "leave the application"),
]


class SessionTerminated(Exception):
    pass


class TerminalHost:
    """
    Window host for a single terminal: the main surface and the floating
    panel take turns owning the screen.
    """

    def __init__(self, main: MainSurface, floating: FloatingSurface) -> None:
        self.main = main
        self.floating = floating
        self.terminated = False

    def show_main(self) -> None:
        self.main.show()

    def hide_main(self) -> None:
        self.main.hide()

    def create_floating(self) -> None:
        self.floating.open()

    def show_floating(self) -> None:
        self.floating.show()

    def hide_floating(self) -> None:
        self.floating.hide()

    def terminate(self) -> None:
        self.terminated = True
        self.floating.close()
        self.main.close()


class Session:
    """Interactive loop driving the window coordinator from terminal input."""

    def __init__(
        self,
        store: EntryStore,
        config: Configuration,
        console: Optional[Console] = None,
        clock: Callable[[], pendulum.DateTime] = now_utc,
        composer: Optional[DiaryComposer] = None,
    ) -> None:
        self.store = store
        self.console = console if console is not None else Console()
        self.timer = Timer(store, clock)
        self.main = MainSurface(store, self.console, clock)
        self.floating = FloatingSurface(
            store, self.console, config["refresh_interval"], clock
        )
        self.host = TerminalHost(self.main, self.floating)
        self.coordinator = WindowCoordinator(self.host)
        self.composer = (
            composer
            if composer is not None
            else DiaryComposer(store, timeout=config["request_timeout"])
        )
        self.executor = ThreadPoolExecutor(max_workers=1)
        self._diary_future: Optional["Future[str]"] = None
        self._diary_date: Optional[pendulum.Date] = None
        self._commands: dict[str, Callable[[list[str]], None]] = {
            "start": self._start,
            "stop": self._stop,
            "compact": lambda args: self.coordinator.go_compact(),
            "toggle": lambda args: self.coordinator.toggle(),
            "prev": lambda args: self.main.change_date(-1),
            "next": lambda args: self.main.change_date(1),
            "today": lambda args: self.main.reset_date(),
            "group": self._toggle_grouped,
            "diary": lambda args: self.request_diary(),
            "delete": self._delete,
            "help": lambda args: self.print_help(),
            "close": lambda args: self.coordinator.request_close(),
            "quit": lambda args: self.coordinator.quit(),
        }

    def run(self, compact: bool = False) -> None:
        self.main.open()
        self.coordinator.go_full()
        if compact:
            self.coordinator.go_compact()

        previous_handler = None
        if threading.current_thread() is threading.main_thread():
            previous_handler = signal.signal(signal.SIGTERM, self._on_sigterm)
        try:
            while not self.coordinator.terminated:
                if self.coordinator.visible == "main":
                    self._main_step()
                else:
                    self._floating_step()
        except SessionTerminated:
            logger.info("session terminated by signal")
        finally:
            if previous_handler is not None:
                signal.signal(signal.SIGTERM, previous_handler)
            self.close()

    def close(self) -> None:
        self.executor.shutdown(wait=False, cancel_futures=True)
        self.floating.close()
        self.main.close()

    def _on_sigterm(self, signum: int, frame: Optional[FrameType]) -> None:
        self.coordinator.quit()
        raise SessionTerminated()

    def _main_step(self) -> None:
        self.collect_diary()
        # Pick up writes from other processes before drawing
        self.main.on_entries_updated()
        self.main.print()
        try:
            line = self.console.input(PROMPT)
        except (KeyboardInterrupt, EOFError):
            self.console.print()
            self.coordinator.request_close()
            return
        self.handle_command(line)

    def _floating_step(self) -> None:
        try:
            while self.coordinator.visible == "floating" and not self.coordinator.terminated:
                time.sleep(FLOATING_POLL_INTERVAL)
                self.floating.on_entries_updated()
        except KeyboardInterrupt:
            self.coordinator.toggle()

    def handle_command(self, line: str) -> None:
        self.main.message = None
        try:
            args = shlex.split(line)
        except ValueError as e:
            self.main.message = f"Error: {e}"
            return
        if len(args) == 0:
            return

        name = args[0].lower()
        command = self._commands.get(name)
        if command is None:
            self.main.message = f"Unknown command '{name}', type help for a list."
            return

        try:
            command(args[1:])
        except (TimerError, EntryError) as e:
            self.main.message = str(e)

    def _start(self, args: list[str]) -> None:
        self.timer.start(" ".join(args))

    def _stop(self, args: list[str]) -> None:
        if len(args) == 0:
            self.main.message = "Usage: stop <focus|neutral|tired> [title]"
            return
        title = " ".join(args[1:]) or None
        self.timer.stop(args[0].lower(), title)  # type: ignore[arg-type]

    def _toggle_grouped(self, args: list[str]) -> None:
        self.main.grouped = not self.main.grouped

    def _delete(self, args: list[str]) -> None:
        if len(args) != 1:
            self.main.message = "Usage: delete <id>"
            return
        entry_id = entry_service.resolve_entry_id(self.store.list_entries(), args[0])
        if not entry_service.delete_entry(self.store, entry_id):
            self.main.message = "Could not save the store, nothing was deleted."

    def request_diary(self) -> None:
        if self._diary_future is not None:
            return
        date = self.main.date
        entries = entries_for_date(self.main.entries, date)
        self.main.diary = None
        self.main.diary_pending = True
        self._diary_date = date
        self._diary_future = self.composer.generate_async(date, entries, self.executor)

    def collect_diary(self) -> None:
        """Move a finished diary request onto the main surface."""
        future = self._diary_future
        if future is None or not future.done():
            return
        self._diary_future = None
        self.main.diary_pending = False

        try:
            content = future.result()
        except DiaryError as e:
            logger.info("diary not generated: %s", e)
            self.main.message = user_message(e)
            return
        except Exception as e:
            logger.exception("diary generation failed")
            self.main.message = user_message(e)
            return

        # The user may have moved to another day meanwhile
        if self._diary_date == self.main.date:
            self.main.diary = content

    def print_help(self) -> None:
        table = Table.grid(padding=(0, 2))
        table.add_column(style="cyan")
        table.add_column(style="grey58")
        for command, description in COMMAND_HELP:
            table.add_row(command, description)
        self.console.print(table)


def ui(
    compact: Annotated[
        bool,
        typer.Option("--compact", "-c", help="start with the floating panel"),
    ] = False,
) -> None:
    """Open the interactive timer with history and diary."""
    session = Session(ENTRY_STORE, CONFIGURATION_REPO.get_config())
    session.run(compact=compact)
