# SPDX-License-Identifier: MIT

import json
import logging
import os
import threading
import time
from copy import deepcopy
from pathlib import Path
from typing import Any, Callable, Optional

from timediary import configuration
from timediary.model.ai_config import AIConfig
from timediary.model.entity_id import EntityId
from timediary.model.time_entry import TimeEntry, is_mood
from timediary.template.ai_config import get_ai_config_template
from timediary.time import (
    datetime_from_epoch_ms,
    datetime_from_epoch_ms_optional,
    datetime_to_epoch_ms,
)

logger = logging.getLogger(__name__)

Subscriber = Callable[[], None]


class EntryStore:
    """
    Owner of the time entries and the AI configuration.

    Both live in one JSON document with the top-level keys ``entries`` and
    ``aiConfig``. Every mutation is written to disk before it returns, and
    successful entry mutations are fanned out to the subscribers.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path
        self._entries: Optional[list[TimeEntry]] = None
        self._ai_config: Optional[AIConfig] = None
        self._loaded_path: Optional[Path] = None
        self._loaded_signature: Optional[tuple[int, int, int]] = None
        self._subscribers: list[Subscriber] = []
        self.lock = threading.RLock()

    @property
    def path(self) -> Path:
        if self._path is not None:
            return self._path
        return configuration.DATA_STORE_PATH

    @property
    def entries(self) -> list[TimeEntry]:
        with self.lock:
            self.__load_if_stale()
            if self._entries is None:
                raise ValueError()
            return self._entries

    @property
    def ai_config(self) -> AIConfig:
        with self.lock:
            self.__load_if_stale()
            if self._ai_config is None:
                raise ValueError()
            return self._ai_config

    def __file_signature(self, path: Path) -> Optional[tuple[int, int, int]]:
        try:
            stat = path.stat()
            return (stat.st_mtime_ns, stat.st_ino, stat.st_size)
        except FileNotFoundError:
            return None

    def __load_if_stale(self) -> None:
        # Another process may have written the file since it was read
        path = self.path
        signature = self.__file_signature(path)
        if (
            self._entries is None
            or self._loaded_path != path
            or self._loaded_signature != signature
        ):
            self.__load_data(path)
            self._loaded_path = path
            self._loaded_signature = signature

    def __load_data(self, path: Path) -> None:
        document = self.__read_document(path)

        entries: list[TimeEntry] = []
        raw_entries = document.get("entries")
        if isinstance(raw_entries, list):
            for raw_entry in raw_entries:
                entry = self.__convert_entry_for_deserialization(raw_entry)
                if entry is not None:
                    entries.append(entry)
        self._entries = entries

        raw_ai_config = document.get("aiConfig")
        self._ai_config = self.__convert_ai_config_for_deserialization(
            raw_ai_config if isinstance(raw_ai_config, dict) else {}
        )

    def __read_document(self, path: Path) -> dict[str, Any]:
        if not path.is_file():
            return {}

        data = path.read_bytes()
        if not data.strip():
            return {}

        try:
            document = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            backup = path.with_suffix(f".corrupt-{int(time.time())}.json")
            backup.write_bytes(data)
            logger.warning("store %s is not valid JSON, backed up to %s", path, backup)
            return {}

        if not isinstance(document, dict):
            logger.warning("store %s does not hold a JSON object, ignoring it", path)
            return {}
        return document

    def __save_data(self, entries: list[TimeEntry], ai_config: AIConfig) -> None:
        path = self.path
        path.parent.mkdir(parents=True, exist_ok=True)

        document = {
            "entries": [
                self.__convert_entry_for_serialization(entry) for entry in entries
            ],
            "aiConfig": self.__convert_ai_config_for_serialization(ai_config),
        }
        payload = json.dumps(document, indent=2, ensure_ascii=False) + "\n"

        tmp = path.with_name(path.name + ".tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise

        try:
            os.chmod(path, 0o600)
        except OSError:
            pass

        self._loaded_path = path
        self._loaded_signature = self.__file_signature(path)

    def __commit(self, entries: list[TimeEntry], ai_config: AIConfig) -> bool:
        # The cached state only changes once the document is on disk
        try:
            self.__save_data(entries, ai_config)
        except OSError:
            logger.exception("failed to write store %s", self.path)
            return False
        self._entries = entries
        self._ai_config = ai_config
        return True

    def __convert_entry_for_serialization(self, entry: TimeEntry) -> dict[str, Any]:
        serializable_entry: dict[str, Any] = {
            "id": entry["id"],
            "title": entry["title"],
            "startTime": datetime_to_epoch_ms(entry["start_time"]),
        }
        if entry["end_time"] is not None:
            serializable_entry["endTime"] = datetime_to_epoch_ms(entry["end_time"])
        if entry["mood"] is not None:
            serializable_entry["mood"] = entry["mood"]
        if entry["description"] is not None:
            serializable_entry["description"] = entry["description"]
        return serializable_entry

    def __is_epoch_ms(self, value: Any) -> bool:
        return isinstance(value, (int, float)) and not isinstance(value, bool)

    def __convert_entry_for_deserialization(self, raw_entry: Any) -> Optional[TimeEntry]:
        if (
            not isinstance(raw_entry, dict)
            or not isinstance(raw_entry.get("id"), str)
            or not self.__is_epoch_ms(raw_entry.get("startTime"))
            or not (
                raw_entry.get("endTime") is None
                or self.__is_epoch_ms(raw_entry["endTime"])
            )
        ):
            logger.warning("skipping malformed entry in store: %r", raw_entry)
            return None

        try:
            start_time = datetime_from_epoch_ms(raw_entry["startTime"])
            end_time = datetime_from_epoch_ms_optional(raw_entry.get("endTime"))
        except (ValueError, OverflowError, OSError):
            # NaN, infinity or a timestamp outside the platform's range
            logger.warning("skipping malformed entry in store: %r", raw_entry)
            return None

        mood = raw_entry.get("mood")
        if mood is not None and not is_mood(mood):
            logger.warning("entry %s has unknown mood %r", raw_entry["id"], mood)
            mood = None

        description = raw_entry.get("description")
        return {
            "id": raw_entry["id"],
            "title": str(raw_entry.get("title") or ""),
            "start_time": start_time,
            "end_time": end_time,
            "mood": mood,
            "description": description if isinstance(description, str) else None,
        }

    def __convert_ai_config_for_serialization(self, ai_config: AIConfig) -> dict[str, Any]:
        return {
            "apiKey": ai_config["api_key"],
            "baseURL": ai_config["base_url"],
            "model": ai_config["model"],
        }

    def __convert_ai_config_for_deserialization(
        self, raw_ai_config: dict[str, Any]
    ) -> AIConfig:
        ai_config = get_ai_config_template()
        if isinstance(raw_ai_config.get("apiKey"), str):
            ai_config["api_key"] = raw_ai_config["apiKey"]
        if isinstance(raw_ai_config.get("baseURL"), str):
            ai_config["base_url"] = raw_ai_config["baseURL"]
        if isinstance(raw_ai_config.get("model"), str):
            ai_config["model"] = raw_ai_config["model"]
        return ai_config

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a change observer and return the function that removes it."""
        with self.lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            self.unsubscribe(callback)

        return unsubscribe

    def unsubscribe(self, callback: Subscriber) -> None:
        with self.lock:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

    def __notify(self) -> None:
        with self.lock:
            subscribers = list(self._subscribers)
        for subscriber in subscribers:
            try:
                subscriber()
            except Exception:
                logger.exception("entries-updated subscriber %r failed", subscriber)

    def list_entries(self) -> list[TimeEntry]:
        return deepcopy(self.entries)

    def add_entry(self, entry: TimeEntry) -> bool:
        with self.lock:
            entries = self.entries + [deepcopy(entry)]
            if not self.__commit(entries, self.ai_config):
                return False
        logger.debug("added entry %s", entry["id"])
        self.__notify()
        return True

    def update_entry(self, entry: TimeEntry) -> bool:
        with self.lock:
            entries = list(self.entries)
            index = next(
                (i for i, existing in enumerate(entries) if existing["id"] == entry["id"]),
                None,
            )
            if index is None:
                return False
            entries[index] = deepcopy(entry)
            if not self.__commit(entries, self.ai_config):
                return False
        logger.debug("updated entry %s", entry["id"])
        self.__notify()
        return True

    def delete_entry(self, id: EntityId) -> bool:
        with self.lock:
            entries = [entry for entry in self.entries if entry["id"] != id]
            if not self.__commit(entries, self.ai_config):
                return False
        logger.debug("deleted entry %s", id)
        self.__notify()
        return True

    def get_ai_config(self) -> AIConfig:
        return deepcopy(self.ai_config)

    def save_ai_config(self, config: AIConfig) -> bool:
        with self.lock:
            return self.__commit(self.entries, deepcopy(config))


ENTRY_STORE = EntryStore()
