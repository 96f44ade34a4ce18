"""Monday-anchored week windows and resolution of the requested summary range."""

import datetime
import logging
from collections.abc import Iterator

from crewtime.core.constants import DAYS_PER_WEEK
from crewtime.core.exceptions import InvalidDateRange

logger = logging.getLogger(__name__)

DateRange = tuple[datetime.date, datetime.date]


def get_today() -> datetime.date:
    """Current date. Separate function so tests can monkeypatch it."""
    return datetime.date.today()


def monday_of(day: datetime.date) -> datetime.date:
    """
    Monday of the week containing ``day``.

    weekday() counts Monday=0..Sunday=6, so a Sunday belongs to the
    Monday six days before it, not the following one.
    """
    return day - datetime.timedelta(days=day.weekday())


def week_window(day: datetime.date) -> DateRange:
    """(monday, sunday) of the week containing ``day``."""
    monday = monday_of(day)
    return monday, monday + datetime.timedelta(days=DAYS_PER_WEEK - 1)


def iter_days(start: datetime.date, end: datetime.date) -> Iterator[datetime.date]:
    """Every calendar day from start to end, inclusive."""
    current = start
    while current <= end:
        yield current
        current += datetime.timedelta(days=1)


def week_days(monday: datetime.date) -> list[datetime.date]:
    return [monday + datetime.timedelta(days=offset) for offset in range(DAYS_PER_WEEK)]


def format_week_range(week_start: datetime.date, week_end: datetime.date) -> str:
    return f"{week_start.isoformat()} - {week_end.isoformat()}"


def resolve_requested_window(
    start_date: datetime.date | None,
    end_date: datetime.date | None,
    entry_bounds: DateRange | None = None,
    today: datetime.date | None = None,
) -> DateRange:
    """
    Resolve the window for the weekly summary.

    - Both dates supplied: one week starting at start_date's Monday. end_date
      only has to be present, it never extends the window past seven days.
    - One date supplied: the week containing it.
    - Neither: earliest entry's Monday to latest entry's Sunday, taken from
      ``entry_bounds``. Without entries, the current week.

    Args:
        start_date: Requested start, or None
        end_date: Requested end, or None
        entry_bounds: (earliest, latest) work_date in the store, or None
        today: Override for the current date

    Returns:
        (window_start, window_end), always Monday..Sunday
    """
    if start_date is not None and end_date is not None:
        if end_date < start_date:
            raise InvalidDateRange(f"end_date {end_date} is before start_date {start_date}")
        window = week_window(start_date)
        logger.debug("Summary window capped to one week: %s..%s", *window)
        return window

    if start_date is not None or end_date is not None:
        return week_window(start_date or end_date)

    if entry_bounds is None:
        window = week_window(today or get_today())
        logger.debug("No entries found, falling back to current week %s..%s", *window)
        return window

    earliest, latest = entry_bounds
    window = monday_of(earliest), week_window(latest)[1]
    logger.debug("Summary window expanded from entry bounds: %s..%s", *window)
    return window
