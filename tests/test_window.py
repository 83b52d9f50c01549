"""Tests for the window coordinator's close-to-compact behaviour."""

from __future__ import annotations

import pytest

from timediary.service.window import WindowCoordinator


class RecordingHost:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def show_main(self) -> None:
        self.calls.append("show_main")

    def hide_main(self) -> None:
        self.calls.append("hide_main")

    def create_floating(self) -> None:
        self.calls.append("create_floating")

    def show_floating(self) -> None:
        self.calls.append("show_floating")

    def hide_floating(self) -> None:
        self.calls.append("hide_floating")

    def terminate(self) -> None:
        self.calls.append("terminate")


@pytest.fixture()
def host() -> RecordingHost:
    return RecordingHost()


@pytest.fixture()
def coordinator(host) -> WindowCoordinator:
    return WindowCoordinator(host)


# ---- initial state ----


def test_starts_on_main_and_running(coordinator):
    state = coordinator.get_state()
    assert state["visible"] == "main"
    assert state["lifecycle"] == "running"
    assert state["floating_created"] is False
    assert state["terminated"] is False


# ---- compact / full ----


def test_go_compact_creates_floating_once(coordinator, host):
    coordinator.go_compact()
    coordinator.go_full()
    coordinator.go_compact()
    assert host.calls.count("create_floating") == 1
    assert coordinator.visible == "floating"


def test_go_compact_shows_floating_before_hiding_main(coordinator, host):
    coordinator.go_compact()
    assert host.calls == ["create_floating", "show_floating", "hide_main"]


def test_go_compact_when_floating_is_a_no_op(coordinator, host):
    coordinator.go_compact()
    host.calls.clear()
    coordinator.go_compact()
    assert host.calls == []


def test_go_full_before_floating_exists(coordinator, host):
    coordinator.go_full()
    assert host.calls == ["show_main"]
    assert coordinator.visible == "main"


def test_go_full_hides_floating(coordinator, host):
    coordinator.go_compact()
    host.calls.clear()
    coordinator.go_full()
    assert host.calls == ["show_main", "hide_floating"]


def test_toggle_alternates(coordinator):
    coordinator.toggle()
    assert coordinator.visible == "floating"
    coordinator.toggle()
    assert coordinator.visible == "main"


# ---- close / quit ----


def test_close_request_goes_compact(coordinator, host):
    assert coordinator.request_close() is False
    assert coordinator.visible == "floating"
    assert "terminate" not in host.calls
    assert coordinator.terminated is False


def test_repeated_close_requests_never_terminate(coordinator, host):
    for _ in range(3):
        coordinator.request_close()
    assert "terminate" not in host.calls


def test_quit_terminates_once(coordinator, host):
    assert coordinator.quit() is True
    assert coordinator.is_quitting is True
    assert coordinator.terminated is True
    coordinator.quit()
    coordinator.request_close()
    assert host.calls.count("terminate") == 1


def test_quit_from_floating(coordinator, host):
    coordinator.go_compact()
    coordinator.quit()
    assert host.calls[-1] == "terminate"


def test_no_transitions_after_terminate(coordinator, host):
    coordinator.quit()
    host.calls.clear()
    coordinator.go_compact()
    coordinator.go_full()
    assert host.calls == []
