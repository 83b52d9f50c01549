# SPDX-License-Identifier: MIT

import logging
import math
from concurrent.futures import Executor, Future
from typing import Any, Optional

import pendulum
import requests

from timediary.model.time_entry import TimeEntry
from timediary.repository.store import EntryStore
from timediary.service.history import is_on_date, sort_oldest_first
from timediary.time import datetime_to_epoch_ms

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 60.0

SYSTEM_INSTRUCTION = (
    "You are a helpful assistant that summarizes daily activities into a "
    "reflective diary."
)

PROMPT_CLOSING = (
    "Please write a short, reflective diary entry about my day based on these "
    "logs. Highlight my productivity and energy levels. Keep it encouraging but "
    "realistic."
)


class DiaryError(Exception):
    pass


class NothingToSummarizeError(DiaryError):
    def __init__(self) -> None:
        super().__init__("No entries to generate diary from.")


class MissingApiKeyError(DiaryError):
    def __init__(self) -> None:
        super().__init__("API Key is missing")


class DiaryTransportError(DiaryError):
    pass


class DiaryRequestError(DiaryError):
    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"AI Request failed with status {status_code}: {body}")


class DiaryParseError(DiaryError):
    def __init__(self) -> None:
        super().__init__("Failed to parse AI response")


def entries_for_date(
    entries: list[TimeEntry], date: pendulum.Date, tz: str = "local"
) -> list[TimeEntry]:
    return sort_oldest_first([entry for entry in entries if is_on_date(entry, date, tz)])


def _minutes(entry: TimeEntry) -> Optional[int]:
    if entry["end_time"] is None:
        return None
    milliseconds = datetime_to_epoch_ms(entry["end_time"]) - datetime_to_epoch_ms(
        entry["start_time"]
    )
    # Half up, as a person would round
    return math.floor(milliseconds / 60000 + 0.5)


def build_prompt(date: pendulum.Date, entries: list[TimeEntry]) -> str:
    lines = []
    for entry in entries:
        title = entry["title"] or "(untitled)"
        minutes = _minutes(entry)
        line = f"- {title}: ongoing" if minutes is None else f"- {title}: {minutes} mins"
        if entry["mood"] is not None:
            line += f" (Mood: {entry['mood']})"
        lines.append(line)
    logs = "\n".join(lines)
    return f"Here are my activities for {date.to_date_string()}:\n{logs}\n\n{PROMPT_CLOSING}"


def build_payload(model: str, prompt: str) -> dict[str, Any]:
    return {
        "model": model,
        "messages": [
            {"role": "system", "content": SYSTEM_INSTRUCTION},
            {"role": "user", "content": prompt},
        ],
    }


def extract_content(body: Any) -> str:
    try:
        content = body["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        raise DiaryParseError()
    if not isinstance(content, str):
        raise DiaryParseError()
    return content


def user_message(error: BaseException) -> str:
    if isinstance(error, MissingApiKeyError):
        return "Please configure your AI API Key in settings first."
    if isinstance(error, NothingToSummarizeError):
        return str(error)
    return "Failed to generate diary. Please check your network or API key."


class DiaryComposer:
    """
    Turns a day's entries into a prompt and asks a chat-completion endpoint
    for a diary entry. One request per call; failures are never retried.
    """

    def __init__(
        self,
        store: EntryStore,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.store = store
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout if timeout is not None else DEFAULT_TIMEOUT

    def generate(self, date: pendulum.Date, entries: list[TimeEntry]) -> str:
        if len(entries) == 0:
            raise NothingToSummarizeError()

        ai_config = self.store.get_ai_config()
        if not ai_config["api_key"]:
            raise MissingApiKeyError()

        url = f"{ai_config['base_url'].rstrip('/')}/chat/completions"
        payload = build_payload(ai_config["model"], build_prompt(date, entries))

        logger.info("requesting diary for %s from %s", date.to_date_string(), url)
        try:
            response = self.session.post(
                url,
                json=payload,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {ai_config['api_key']}",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("diary request to %s failed: %s", url, e)
            raise DiaryTransportError(str(e)) from e

        if not 200 <= response.status_code < 300:
            logger.warning("diary request returned status %s", response.status_code)
            raise DiaryRequestError(response.status_code, response.text)

        try:
            body = response.json()
        except ValueError as e:
            raise DiaryParseError() from e
        return extract_content(body)

    def generate_for_date(self, date: pendulum.Date) -> str:
        return self.generate(date, entries_for_date(self.store.list_entries(), date))

    def generate_async(
        self, date: pendulum.Date, entries: list[TimeEntry], executor: Executor
    ) -> "Future[str]":
        return executor.submit(self.generate, date, entries)
