"""Tests for the JSON-backed entry store."""

from __future__ import annotations

import json
import os

import pendulum
import pytest

from timediary.repository.store import EntryStore
from timediary.template.ai_config import DEFAULT_BASE_URL, DEFAULT_MODEL
from timediary.time import datetime_to_epoch_ms


def make_entry(id: str, start: pendulum.DateTime, end=None, title="Write", mood=None):
    return {
        "id": id,
        "title": title,
        "start_time": start,
        "end_time": end,
        "mood": mood,
        "description": None,
    }


@pytest.fixture()
def start() -> pendulum.DateTime:
    return pendulum.datetime(2026, 3, 14, 9, 0, 0, tz="UTC")


# ---- loading ----


def test_missing_file_lists_nothing(store):
    assert store.list_entries() == []


def test_missing_file_has_default_ai_config(store):
    assert store.get_ai_config() == {
        "api_key": "",
        "base_url": DEFAULT_BASE_URL,
        "model": DEFAULT_MODEL,
    }


def test_empty_file_lists_nothing(store, store_path):
    store_path.write_text("", encoding="utf-8")
    assert store.list_entries() == []


def test_corrupt_file_is_backed_up(store, store_path):
    store_path.write_text("not valid json {{{{", encoding="utf-8")
    assert store.list_entries() == []
    backups = list(store_path.parent.glob("*.corrupt-*.json"))
    assert len(backups) == 1


def test_non_object_document_is_ignored(store, store_path):
    store_path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
    assert store.list_entries() == []


def test_malformed_entries_are_skipped(store, store_path):
    store_path.write_text(
        json.dumps(
            {
                "entries": [
                    {"id": "ok", "title": "Read", "startTime": 1000},
                    {"title": "no id", "startTime": 1000},
                    "not an entry",
                ]
            }
        ),
        encoding="utf-8",
    )
    entries = store.list_entries()
    assert [entry["id"] for entry in entries] == ["ok"]


def test_unknown_mood_is_dropped(store, store_path):
    store_path.write_text(
        json.dumps(
            {
                "entries": [
                    {
                        "id": "a",
                        "title": "Read",
                        "startTime": 1000,
                        "endTime": 2000,
                        "mood": "ecstatic",
                    }
                ]
            }
        ),
        encoding="utf-8",
    )
    assert store.list_entries()[0]["mood"] is None


# ---- persisted format ----


def test_add_writes_camel_case_and_epoch_ms(store, store_path, start):
    store.add_entry(make_entry("a", start))
    document = json.loads(store_path.read_text())
    assert document["entries"] == [
        {"id": "a", "title": "Write", "startTime": datetime_to_epoch_ms(start)}
    ]
    assert set(document["aiConfig"]) == {"apiKey", "baseURL", "model"}


def test_closed_entry_keeps_end_time_and_mood(store, store_path, start):
    store.add_entry(make_entry("a", start, end=start.add(minutes=10), mood="focus"))
    raw = json.loads(store_path.read_text())["entries"][0]
    assert raw["endTime"] - raw["startTime"] == 600000
    assert raw["mood"] == "focus"


def test_save_is_atomic_no_tmp_left(store, store_path, start):
    store.add_entry(make_entry("a", start))
    assert not store_path.with_name(store_path.name + ".tmp").exists()


def test_save_sets_permissions(store, store_path, start):
    store.add_entry(make_entry("a", start))
    assert oct(os.stat(store_path).st_mode & 0o777) == "0o600"


def test_entries_survive_a_new_store(store, store_path, start):
    store.add_entry(make_entry("a", start, end=start.add(minutes=5), mood="tired"))
    reloaded = EntryStore(store_path).list_entries()
    assert reloaded == store.list_entries()
    assert reloaded[0]["end_time"] == start.add(minutes=5)


def test_external_write_is_picked_up(store, store_path, start):
    store.add_entry(make_entry("a", start))
    other = EntryStore(store_path)
    other.add_entry(make_entry("b", start.add(hours=1)))
    assert [entry["id"] for entry in store.list_entries()] == ["a", "b"]


# ---- mutations ----


def test_list_returns_copies(store, start):
    store.add_entry(make_entry("a", start))
    store.list_entries()[0]["title"] = "changed"
    assert store.list_entries()[0]["title"] == "Write"


def test_update_unknown_id_returns_false(store, start):
    assert store.update_entry(make_entry("missing", start)) is False


def test_update_replaces_entry(store, start):
    store.add_entry(make_entry("a", start))
    assert store.update_entry(make_entry("a", start, title="Read")) is True
    assert store.list_entries()[0]["title"] == "Read"


def test_delete_unknown_id_is_idempotent(store, start):
    store.add_entry(make_entry("a", start))
    assert store.delete_entry("missing") is True
    assert len(store.list_entries()) == 1


def test_delete_removes_entry(store, start):
    store.add_entry(make_entry("a", start))
    store.delete_entry("a")
    assert store.list_entries() == []


def test_ai_config_round_trips(store, store_path):
    store.save_ai_config(
        {"api_key": "sk-123", "base_url": "http://localhost:8080/v1", "model": "m"}
    )
    assert EntryStore(store_path).get_ai_config()["api_key"] == "sk-123"


def test_failed_write_leaves_cache_unchanged(store, store_path, start, monkeypatch):
    store.add_entry(make_entry("a", start))

    def fail(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", fail)
    assert store.add_entry(make_entry("b", start)) is False
    assert [entry["id"] for entry in store.list_entries()] == ["a"]


# ---- notifications ----


def test_subscribers_are_notified_after_mutations(store, start):
    calls = []
    store.subscribe(lambda: calls.append(len(store.list_entries())))
    store.add_entry(make_entry("a", start))
    store.update_entry(make_entry("a", start, title="Read"))
    store.delete_entry("a")
    assert calls == [1, 1, 0]


def test_update_unknown_id_does_not_notify(store, start):
    calls = []
    store.subscribe(lambda: calls.append(True))
    store.update_entry(make_entry("missing", start))
    assert calls == []


def test_ai_config_save_does_not_notify(store):
    calls = []
    store.subscribe(lambda: calls.append(True))
    store.save_ai_config({"api_key": "k", "base_url": "u", "model": "m"})
    assert calls == []


def test_unsubscribe_stops_notifications(store, start):
    calls = []
    unsubscribe = store.subscribe(lambda: calls.append(True))
    unsubscribe()
    store.add_entry(make_entry("a", start))
    assert calls == []


def test_failing_subscriber_does_not_break_mutation(store, start):
    calls = []

    def broken():
        raise RuntimeError("boom")

    store.subscribe(broken)
    store.subscribe(lambda: calls.append(True))
    assert store.add_entry(make_entry("a", start)) is True
    assert calls == [True]


# ---- malformed data ----


def write_entries(store_path, *raw_entries):
    store_path.write_text(json.dumps({"entries": list(raw_entries)}), encoding="utf-8")


@pytest.mark.parametrize(
    "raw_entry",
    [
        {"id": "bad", "title": "x", "startTime": 1000, "endTime": "oops"},
        {"id": "bad", "title": "x", "startTime": float("nan")},
        {"id": "bad", "title": "x", "startTime": 1e30},
        {"id": "bad", "title": "x", "startTime": True},
        {"id": "bad", "title": "x", "startTime": 1000, "endTime": False},
        {"id": "bad", "title": "x", "startTime": 1000, "endTime": float("inf")},
    ],
)
def test_entries_with_bad_times_are_skipped(store, store_path, raw_entry):
    write_entries(
        store_path, raw_entry, {"id": "ok", "title": "Read", "startTime": 1000}
    )
    assert [entry["id"] for entry in store.list_entries()] == ["ok"]


def test_non_utf8_file_is_backed_up(store, store_path):
    store_path.write_bytes(b'{"entries": [\xff\xfe]}')
    assert store.list_entries() == []
    backups = list(store_path.parent.glob("*.corrupt-*.json"))
    assert len(backups) == 1
    assert backups[0].read_bytes() == b'{"entries": [\xff\xfe]}'


def test_store_recovers_after_bad_file(store, store_path, start):
    store_path.write_bytes(b"\xff\xfe")
    assert store.add_entry(make_entry("a", start)) is True
    assert [entry["id"] for entry in EntryStore(store_path).list_entries()] == ["a"]


def test_failed_write_removes_tmp_file(store, store_path, start, monkeypatch):
    def fail(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", fail)
    assert store.add_entry(make_entry("a", start)) is False
    assert not store_path.with_name(store_path.name + ".tmp").exists()
