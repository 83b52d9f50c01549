# SPDX-License-Identifier: MIT

import logging
import threading
from typing import Literal, Protocol, TypedDict

logger = logging.getLogger(__name__)

Visible = Literal["main", "floating"]
Lifecycle = Literal["running", "quitting"]


class WindowHost(Protocol):
    """Presentation host able to show and hide the two surfaces."""

    def show_main(self) -> None: ...

    def hide_main(self) -> None: ...

    def create_floating(self) -> None: ...

    def show_floating(self) -> None: ...

    def hide_floating(self) -> None: ...

    def terminate(self) -> None: ...


class WindowState(TypedDict):
    visible: Visible
    lifecycle: Lifecycle  # running -> quitting, never back
    floating_created: bool
    terminated: bool


def get_initial_window_state() -> WindowState:
    return {
        "visible": "main",
        "lifecycle": "running",
        "floating_created": False,
        "terminated": False,
    }


class WindowCoordinator:
    """
    Decides whether the main or the floating surface is shown.

    A close request on the main surface only hides it behind the floating
    surface, unless an explicit quit put the coordinator in the quitting
    state. The coordinator never sees entry data.
    """

    def __init__(self, host: WindowHost) -> None:
        self.host = host
        self._state = get_initial_window_state()
        self._lock = threading.RLock()

    @property
    def visible(self) -> Visible:
        return self._state["visible"]

    @property
    def is_quitting(self) -> bool:
        return self._state["lifecycle"] == "quitting"

    @property
    def terminated(self) -> bool:
        return self._state["terminated"]

    def get_state(self) -> WindowState:
        with self._lock:
            return WindowState(**self._state)

    def go_compact(self) -> None:
        with self._lock:
            if self._state["terminated"] or self._state["visible"] == "floating":
                return
            if not self._state["floating_created"]:
                self.host.create_floating()
                self._state["floating_created"] = True
            self.host.show_floating()
            self.host.hide_main()
            self._state["visible"] = "floating"
            logger.debug("switched to floating surface")

    def go_full(self) -> None:
        with self._lock:
            if self._state["terminated"]:
                return
            self.host.show_main()
            if self._state["floating_created"]:
                self.host.hide_floating()
            self._state["visible"] = "main"
            logger.debug("switched to main surface")

    def toggle(self) -> None:
        with self._lock:
            if self._state["visible"] == "main":
                self.go_compact()
            else:
                self.go_full()

    def request_close(self) -> bool:
        """
        Handle a close request on the main surface.

        Returns True when the request terminated the process.
        """
        with self._lock:
            if self._state["terminated"]:
                return True
            if not self.is_quitting:
                logger.debug("close intercepted, keeping the timer alive")
                self.go_compact()
                return False
            self._state["terminated"] = True
            logger.info("quitting")
        self.host.terminate()
        return True

    def quit(self) -> bool:
        with self._lock:
            self._state["lifecycle"] = "quitting"
        return self.request_close()
