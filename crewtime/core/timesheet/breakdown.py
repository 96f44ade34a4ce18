"""Merge one worker's raw entries into one record per day."""

import datetime
import logging
from collections.abc import Iterable

from crewtime.core.constants import GENERAL_WORK_TITLE
from crewtime.core.models import TimesheetEntry
from crewtime.core.time_utils import SECONDS_PER_HOUR, derive_hours, hours_to_duration, hours_to_seconds
from crewtime.core.types import DailyBreakdownEntry, Hours

logger = logging.getLogger(__name__)


def build_daily_breakdown(
    entries: Iterable[TimesheetEntry],
    policy: str | None = None,
) -> tuple[dict[datetime.date, DailyBreakdownEntry], Hours]:
    """
    Build the daily breakdown for one worker.

    Same-day entries are summed into a single bucket. The bucket keeps the
    first non-empty job title seen that day, entries without a job fall back
    to "General Work" only if no titled entry exists. An entry with zero
    derivable hours still creates its bucket, so the day reads as logged.

    The returned total is the sum of the displayed day durations (each
    truncated to the second), so the days always add up to it exactly.

    Args:
        entries: The worker's entries, ordered by date
        policy: Negative duration policy passed on to the converter

    Returns:
        (breakdown keyed by date, total hours)
    """
    hours_by_date: dict[datetime.date, float] = {}
    jobs_by_date: dict[datetime.date, tuple[str | None, int | None]] = {}

    for entry in entries:
        hours = derive_hours(entry.duration, policy=policy)
        day = entry.work_date

        hours_by_date[day] = hours_by_date.get(day, 0.0) + hours

        title, job_id = jobs_by_date.get(day, (None, None))
        if not title and entry.job is not None and entry.job.job_title:
            jobs_by_date[day] = (entry.job.job_title, entry.job.job_id)
        elif day not in jobs_by_date:
            jobs_by_date[day] = (None, entry.job.job_id if entry.job else None)

    breakdown: dict[datetime.date, DailyBreakdownEntry] = {}
    total_seconds = 0
    for day in sorted(hours_by_date):
        total_seconds += hours_to_seconds(hours_by_date[day])
        title, job_id = jobs_by_date[day]
        breakdown[day] = {
            "date": day.isoformat(),
            "hours": hours_to_duration(hours_by_date[day]),
            "job_title": title or GENERAL_WORK_TITLE,
            "job_reference": job_id,
        }

    total_hours = total_seconds / SECONDS_PER_HOUR
    logger.debug("Built breakdown for %d day(s), %.2f hours", len(breakdown), total_hours)
    return breakdown, total_hours


def first_job_title(breakdown: dict[datetime.date, DailyBreakdownEntry]) -> str:
    """Representative job for a week: the first real job title by date."""
    for day in sorted(breakdown):
        title = breakdown[day]["job_title"]
        if title and title != GENERAL_WORK_TITLE:
            return title
    return GENERAL_WORK_TITLE
