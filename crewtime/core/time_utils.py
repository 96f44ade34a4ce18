# crewtime/core/time_utils.py
"""
Conversions between the three hour representations used by timesheets.

- clock pair:    start/end times on one calendar day
- decimal hours: 8.5
- strings:       "8h 30m" for display, "08:30:00" for durations

All conversions truncate (never round) to whole minutes/seconds.
"""

import datetime
import logging
import math
from typing import Any

from crewtime.core.config import TIME_FORMAT_HM, TIME_FORMAT_HMS, get_negative_duration_policy
from crewtime.core.exceptions import InvalidDuration
from crewtime.core.models import ClockRange, PrecomputedHours

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 3600
MINUTES_PER_HOUR = 60

# Absorbs float noise like 1.15 * 3600 == 4139.9999999 before truncating
_TRUNCATE_EPSILON = 1e-6


def parse_clock(value: Any, field_name: str = "time") -> datetime.time:
    """
    Parse a clock value into datetime.time.

    Accepts datetime.time or "HH:MM" / "HH:MM:SS" strings.

    Raises:
        InvalidDuration: empty, malformed or unsupported value
    """
    if isinstance(value, datetime.time):
        return value

    if isinstance(value, str):
        s = value.strip()
        if not s:
            raise InvalidDuration(f"{field_name} is empty")
        fmt = TIME_FORMAT_HM if len(s.split(":")) == 2 else TIME_FORMAT_HMS
        try:
            return datetime.datetime.strptime(s, fmt).time()
        except ValueError as e:
            raise InvalidDuration(f"Invalid {field_name} format: {value!r}") from e

    raise InvalidDuration(f"Unsupported {field_name} type: {type(value).__name__}")


def _check_hours(hours: float) -> float:
    if hours is None or isinstance(hours, bool):
        raise InvalidDuration(f"Invalid hours value: {hours!r}")
    try:
        value = float(hours)
    except (TypeError, ValueError) as e:
        raise InvalidDuration(f"Invalid hours value: {hours!r}") from e
    if math.isnan(value) or math.isinf(value):
        raise InvalidDuration(f"Invalid hours value: {hours!r}")
    if value < 0:
        raise InvalidDuration(f"Negative duration: {value}")
    return value


def duration_from_clock(start: Any, end: Any, policy: str | None = None) -> float:
    """
    Hours between two clock times on the same day.

    Args:
        start: Start time (time or "HH:MM[:SS]")
        end: End time (time or "HH:MM[:SS]")
        policy: "reject" or "overnight" for end < start. Defaults to the
            NEGATIVE_DURATION_POLICY setting.

    Returns:
        Non-negative decimal hours

    Raises:
        InvalidDuration: malformed times, or end < start under "reject"
    """
    start_time = parse_clock(start, "start_time")
    end_time = parse_clock(end, "end_time")
    policy = policy or get_negative_duration_policy()

    anchor = datetime.date(2000, 1, 1)
    start_dt = datetime.datetime.combine(anchor, start_time)
    end_dt = datetime.datetime.combine(anchor, end_time)

    if end_dt < start_dt:
        if policy != "overnight":
            logger.warning("Rejected clock pair with end before start: %s-%s", start_time, end_time)
            raise InvalidDuration(f"end_time {end_time} is before start_time {start_time}")
        # Pass over midnight
        end_dt += datetime.timedelta(days=1)

    return (end_dt - start_dt).total_seconds() / SECONDS_PER_HOUR


def derive_hours(duration: ClockRange | PrecomputedHours | None, policy: str | None = None) -> float:
    """Hours for an entry's duration. An entry without one contributes 0."""
    if duration is None:
        return 0.0
    if isinstance(duration, ClockRange):
        return duration_from_clock(duration.start_time, duration.end_time, policy=policy)
    if isinstance(duration, PrecomputedHours):
        return _check_hours(duration.total_hours)
    raise InvalidDuration(f"Unsupported duration type: {type(duration).__name__}")


def hours_to_display(hours: float) -> str:
    """
    Format hours as "8h 30m", or "8h" when there are no leftover minutes.

    >>> hours_to_display(8.5)
    '8h 30m'
    >>> hours_to_display(0)
    '0h'
    """
    total_minutes = math.floor(_check_hours(hours) * MINUTES_PER_HOUR + _TRUNCATE_EPSILON)
    h, m = divmod(total_minutes, MINUTES_PER_HOUR)
    if m > 0:
        return f"{h}h {m}m"
    return f"{h}h"


def hours_to_seconds(hours: float) -> int:
    """Whole seconds in ``hours``, truncated."""
    return math.floor(_check_hours(hours) * SECONDS_PER_HOUR + _TRUNCATE_EPSILON)


def hours_to_duration(hours: float) -> str:
    """Format hours as a zero-padded "HH:MM:SS" string, truncated to the second."""
    total_seconds = hours_to_seconds(hours)
    h, rest = divmod(total_seconds, SECONDS_PER_HOUR)
    m, s = divmod(rest, MINUTES_PER_HOUR)
    return f"{h:02d}:{m:02d}:{s:02d}"


def duration_to_hours(duration: str) -> float:
    """
    Parse "HH:MM:SS" (or "HH:MM") back into decimal hours.

    Raises:
        InvalidDuration: malformed string or out-of-range minutes/seconds
    """
    if not isinstance(duration, str):
        raise InvalidDuration(f"Duration must be a string, got {type(duration).__name__}")

    parts = duration.strip().split(":")
    if len(parts) not in (2, 3) or not all(p.isdigit() for p in parts):
        raise InvalidDuration(f"Invalid duration format: {duration!r}")

    h, m = int(parts[0]), int(parts[1])
    s = int(parts[2]) if len(parts) == 3 else 0
    if m >= MINUTES_PER_HOUR or s >= MINUTES_PER_HOUR:
        raise InvalidDuration(f"Invalid duration format: {duration!r}")

    return h + m / MINUTES_PER_HOUR + s / SECONDS_PER_HOUR
