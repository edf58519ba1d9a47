"""Clock readings, local date formatting and day arithmetic."""

from __future__ import annotations

import re
import time
import urllib.error
from datetime import date, datetime

NANOSECOND = 1
MICROSECOND = 1000 * NANOSECOND
MILLISECOND = 1000 * MICROSECOND
SECOND = 1000 * MILLISECOND
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE
DAY = 24 * HOUR
YEAR = 365 * DAY

SECONDS_PER_YEAR = YEAR // SECOND
SECONDS_PER_DAY = DAY // SECOND
SECONDS_PER_HOUR = HOUR // SECOND
SECONDS_PER_MINUTE = MINUTE // SECOND

MILLISECONDS_PER_YEAR = YEAR // MILLISECOND
MILLISECONDS_PER_DAY = DAY // MILLISECOND
MILLISECONDS_PER_HOUR = HOUR // MILLISECOND
MILLISECONDS_PER_MINUTE = MINUTE // MILLISECOND
MILLISECONDS_PER_SECOND = SECOND // MILLISECOND

MICROSECONDS_PER_YEAR = YEAR // MICROSECOND
MICROSECONDS_PER_DAY = DAY // MICROSECOND
MICROSECONDS_PER_HOUR = HOUR // MICROSECOND
MICROSECONDS_PER_MINUTE = MINUTE // MICROSECOND
MICROSECONDS_PER_SECOND = SECOND // MICROSECOND
MICROSECONDS_PER_MILLISECOND = MILLISECOND // MICROSECOND

TIME_LAYOUT = "%Y-%m-%d %H:%M:%S"
_LAYOUT_RE = re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}")

_OFFSET_DAY = 1
_OFFSET_MONTH = 100 * _OFFSET_DAY
_OFFSET_YEAR = 100 * _OFFSET_MONTH


def current_second() -> int:
    """Seconds since the epoch."""
    return time.time_ns() // SECOND


def current_millisecond() -> int:
    """Milliseconds since the epoch."""
    return time.time_ns() // MILLISECOND


def current_microsecond() -> int:
    """Microseconds since the epoch."""
    return time.time_ns() // MICROSECOND


def current_nanosecond() -> int:
    """Nanoseconds since the epoch."""
    return time.time_ns()


def from_second_to_local_date(seconds: int) -> str:
    """Format an epoch second as a local 'YYYY-MM-DD HH:MM:SS' string."""
    return datetime.fromtimestamp(seconds).strftime(TIME_LAYOUT)


def current_time() -> str:
    """The local time as 'YYYY-MM-DD HH:MM:SS'."""
    return datetime.now().strftime(TIME_LAYOUT)


def from_local_date_to_second(text: str) -> int:
    """Parse a local 'YYYY-MM-DD HH:MM:SS' string into epoch seconds."""
    if not _LAYOUT_RE.fullmatch(text):
        raise ValueError(f"cannot parse {text!r} as {TIME_LAYOUT!r}")
    return int(datetime.strptime(text, TIME_LAYOUT).timestamp())


def is_same_day(t1: date, t2: date) -> bool:
    """Return True when both values fall on the same calendar day."""
    return (t1.year, t1.month, t1.day) == (t2.year, t2.month, t2.day)


def is_same_day_with_timestamp(d1: int, d2: int) -> bool:
    """Return True when both epoch seconds fall on the same local day."""
    return is_same_day(datetime.fromtimestamp(d1), datetime.fromtimestamp(d2))


def time_to_int(t: date) -> int:
    """Encode a date as the integer YYYYMMDD."""
    return t.year * _OFFSET_YEAR + t.month * _OFFSET_MONTH + t.day * _OFFSET_DAY


def split_time_int(value: int) -> tuple[int, int, int]:
    """Split a YYYYMMDD integer into (year, month, day)."""
    return (
        value // _OFFSET_YEAR,
        value % _OFFSET_YEAR // _OFFSET_MONTH,
        value % _OFFSET_MONTH,
    )


def current_time_format(layout: str) -> str:
    """The local time formatted with a strftime layout."""
    return datetime.now().strftime(layout)


def sleep(milliseconds: int) -> None:
    """Block for the given number of milliseconds."""
    time.sleep(milliseconds / 1000)


def is_timeout_error(err: BaseException | None) -> bool:
    """Return True when err reports a network timeout."""
    if err is None:
        return False
    if isinstance(err, urllib.error.URLError):
        return isinstance(err.reason, TimeoutError)
    return isinstance(err, TimeoutError)