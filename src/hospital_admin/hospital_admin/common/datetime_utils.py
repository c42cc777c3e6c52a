from __future__ import annotations

from datetime import date, datetime, time, timedelta

from ..core.constants import DATE_FORMAT, TIME_FORMAT


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, DATE_FORMAT).date()


def parse_hhmm(value: str) -> time:
    """Parse a zero-padded 24-hour HH:MM string."""
    return datetime.strptime(value.strip(), TIME_FORMAT).time()


def format_hhmm(value: time) -> str:
    return value.strftime(TIME_FORMAT)


def sunday_index(d: date) -> int:
    """Day of week with Sunday=0 ... Saturday=6."""
    return (d.weekday() + 1) % 7


def week_start(today: date) -> date:
    return today - timedelta(days=sunday_index(today))


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
