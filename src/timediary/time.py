# SPDX-License-Identifier: MIT

from typing import Optional, cast

import pendulum


def now_utc() -> pendulum.DateTime:
    return truncate_to_millisecond(pendulum.now("UTC"))


def truncate_to_millisecond(datetime: pendulum.DateTime) -> pendulum.DateTime:
    return datetime.set(microsecond=(datetime.microsecond // 1000) * 1000)


def datetime_to_epoch_ms(datetime: pendulum.DateTime) -> int:
    return datetime.int_timestamp * 1000 + datetime.microsecond // 1000


def datetime_from_epoch_ms(epoch_ms: int) -> pendulum.DateTime:
    seconds, milliseconds = divmod(int(epoch_ms), 1000)
    return pendulum.from_timestamp(seconds, tz="UTC").set(
        microsecond=milliseconds * 1000
    )


def datetime_from_epoch_ms_optional(
    epoch_ms: Optional[int],
) -> Optional[pendulum.DateTime]:
    if epoch_ms is None:
        return None
    return datetime_from_epoch_ms(epoch_ms)


def datetime_to_display_local_time_str(datetime: pendulum.DateTime) -> str:
    return datetime.in_tz("local").format("HH:mm:ss")


def datetime_to_display_local_datetime_str(datetime: pendulum.DateTime) -> str:
    return datetime.in_tz("local").format("MMM-DD ddd HH:mm")


def datetime_to_display_local_datetime_str_optional(
    datetime: Optional[pendulum.DateTime],
) -> Optional[str]:
    if datetime is None:
        return None
    return datetime_to_display_local_datetime_str(datetime)


def date_to_display_str(date: pendulum.Date) -> str:
    return date.format("dddd, MMMM D")


def datetime_from_str_utc(datetime: str) -> pendulum.DateTime:
    """Parse a local wall-clock string and return it as a UTC instant."""
    pendulum_date_time = cast(pendulum.DateTime, pendulum.parse(datetime, tz="local"))
    return truncate_to_millisecond(pendulum_date_time.in_tz("UTC"))


def today_local() -> pendulum.Date:
    return pendulum.today("local").date()


def date_from_str(date_str: str) -> pendulum.Date:
    """Parse a 'YYYY-MM-DD' string into a pendulum.Date."""
    return cast(pendulum.DateTime, pendulum.parse(date_str, tz="local")).date()


def duration_between(
    start: pendulum.DateTime, end: pendulum.DateTime
) -> pendulum.Duration:
    """Plain Duration (not an Interval) between two instants, at ms precision."""
    return pendulum.duration(
        milliseconds=datetime_to_epoch_ms(end) - datetime_to_epoch_ms(start)
    )


def duration_to_clock_str(duration: pendulum.Duration) -> str:
    """Format a duration as HH:MM:SS; hours are not wrapped at 24."""
    total_seconds = max(int(duration.total_seconds()), 0)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def duration_to_human_str(duration: pendulum.Duration) -> str:
    total_seconds = max(int(duration.total_seconds()), 0)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours > 0:
        return f"{hours}h {minutes}m {seconds}s"
    if minutes > 0:
        return f"{minutes}m {seconds}s"
    return f"{seconds}s"
