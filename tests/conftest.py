"""Shared fixtures: an isolated store, isolated app paths and a fake clock."""

from __future__ import annotations

from pathlib import Path

import pendulum
import pytest

from timediary import configuration
from timediary.repository.configuration import CONFIGURATION_REPO
from timediary.repository.store import EntryStore


class FakeClock:
    def __init__(self, now: pendulum.DateTime) -> None:
        self.now = now

    def __call__(self) -> pendulum.DateTime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now.add(**kwargs)


@pytest.fixture()
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "store.json"


@pytest.fixture()
def store(store_path: Path) -> EntryStore:
    return EntryStore(store_path)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock(pendulum.datetime(2026, 3, 14, 9, 0, 0, tz="UTC"))


@pytest.fixture()
def app_paths(tmp_path: Path, monkeypatch):
    """Point configuration, data and log locations into tmp_path."""
    config_dir = tmp_path / "config"
    data_dir = tmp_path / "data"
    monkeypatch.delenv(configuration.DATA_PATH_ENV, raising=False)
    monkeypatch.setattr(configuration, "CONFIG_PATH", config_dir)
    monkeypatch.setattr(configuration, "APP_CONFIG_PATH", config_dir / "config.yaml")
    monkeypatch.setattr(configuration, "LOG_PATH", tmp_path / "log" / "timediary.log")
    monkeypatch.setattr(configuration, "DATA_PATH", data_dir)
    monkeypatch.setattr(configuration, "DATA_STORE_PATH", data_dir / "store.json")
    CONFIGURATION_REPO.reset()
    yield tmp_path
    CONFIGURATION_REPO.reset()
