# SPDX-License-Identifier: MIT

import re
from typing import Optional

import pendulum
import typer

from timediary.time import date_from_str, datetime_from_str_utc, now_utc, today_local

DATETIME_HELP = "valid inputs: YYYY-MM-DD HH:mm, HH:mm (today), now"
DATE_HELP = "valid inputs: YYYY-MM-DD, today, yesterday, or day offset like -1"


def parse_datetime(datetime_param: Optional[str]) -> Optional[pendulum.DateTime]:
    if datetime_param is None:
        return None

    datetime = datetime_param.strip()

    # YYYY-MM-DD with an optional time component
    if re.match(r"\d{4}-\d{2}-\d{2}", datetime):
        try:
            return datetime_from_str_utc(datetime)
        except ValueError as e:
            raise typer.BadParameter(f"Invalid datetime '{datetime}': {e}")

    # (H)H:mm(:ss) on today's local date
    time_match = re.match(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$", datetime)
    if time_match:
        hour = int(time_match.group(1))
        minute = int(time_match.group(2))
        second = int(time_match.group(3) or 0)

        if hour > 23:
            raise typer.BadParameter(f"Hour must be between 0 and 23, got {hour}")
        if minute > 59:
            raise typer.BadParameter(f"Minute must be between 0 and 59, got {minute}")
        if second > 59:
            raise typer.BadParameter(f"Second must be between 0 and 59, got {second}")

        pendulum_date_time = pendulum.today("local").set(
            hour=hour, minute=minute, second=second, microsecond=0
        )
        return pendulum_date_time.in_tz("UTC")

    if datetime == "now" or datetime == "n":
        return now_utc()

    raise typer.BadParameter("Incorrect datetime format")


def parse_date(date_param: Optional[str]) -> Optional[pendulum.Date]:
    if date_param is None:
        return None

    date = date_param.strip()

    if re.match(r"^\d{4}-\d{2}-\d{2}$", date):
        try:
            return date_from_str(date)
        except ValueError as e:
            raise typer.BadParameter(f"Invalid date '{date}': {e}")

    # Relative days, e.g. "-1" for yesterday
    if re.match(r"^-?\d+$", date):
        return today_local().add(days=int(date))

    if date == "today" or date == "t":
        return today_local()
    if date == "yesterday" or date == "y":
        return today_local().subtract(days=1)
    raise typer.BadParameter("Incorrect date format")
