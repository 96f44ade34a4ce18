"""
Weekly aggregation of timesheet entries.

Two paths with different "no data" markers:

- summary (dashboard): one WeeklySummary per worker per Monday-anchored
  week, days without entries are rendered as "0h" later on
- detailed view: one row per job per day over a literal date range, days
  without entries get a single "Leave" row
"""

import datetime
import logging
from collections.abc import Callable, Iterable

from crewtime.core.constants import (
    DAYS_PER_WEEK,
    GENERAL_WORK_TITLE,
    LEAVE_LABEL,
    STATUS_APPROVED,
    STATUS_PENDING,
    STATUS_REJECTED,
    WEEKDAY_NAMES,
)
from crewtime.core.models import TimesheetEntry
from crewtime.core.time_utils import derive_hours, hours_to_display
from crewtime.core.types import DetailedDayRow, WeeklySummary, WeekTotal

from .billing import calculate_pay, round_money
from .breakdown import build_daily_breakdown
from .weeks import iter_days, monday_of

logger = logging.getLogger(__name__)

#: Rate used to price one entry, see billing.entry_rate.
RateOf = Callable[[TimesheetEntry], float]


def flat_rate(hourly_rate: float) -> RateOf:
    """Price every entry at the same rate."""
    return lambda entry: hourly_rate


def group_by_worker(entries: Iterable[TimesheetEntry]) -> dict[int, list[TimesheetEntry]]:
    """Group entries by worker_id, keeping store order within each worker."""
    grouped: dict[int, list[TimesheetEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.worker_id, []).append(entry)
    return grouped


def week_status(entries: Iterable[TimesheetEntry]) -> str:
    """
    Status for a week of entries.

    rejected wins over pending, which wins over approved. A week without
    entries is pending.
    """
    statuses = {entry.status for entry in entries}
    if STATUS_REJECTED in statuses:
        return STATUS_REJECTED
    if statuses == {STATUS_APPROVED}:
        return STATUS_APPROVED
    return STATUS_PENDING


def empty_week_summary(
    worker_id: int,
    worker_name: str,
    hourly_rate: float,
    week_start: datetime.date,
) -> WeeklySummary:
    """Week with no logged days at all."""
    return {
        "worker_id": worker_id,
        "worker_name": worker_name,
        "week_start": week_start,
        "week_end": week_start + datetime.timedelta(days=DAYS_PER_WEEK - 1),
        "daily_breakdown": {},
        "total_hours": 0.0,
        "hourly_rate": hourly_rate,
        "total_pay": 0.0,
        "status": STATUS_PENDING,
    }


def summarize_worker_weeks(
    worker_id: int,
    worker_name: str,
    hourly_rate: float,
    entries: list[TimesheetEntry],
    policy: str | None = None,
    rate_of: RateOf | None = None,
) -> list[WeeklySummary]:
    """
    Split one worker's entries into weekly summaries.

    Each week's window comes from the earliest date actually present in that
    week's entries, snapped back to its Monday, not from the caller's window.

    total_hours is the sum of the truncated day durations. total_pay prices
    every entry's untruncated hours with ``rate_of`` (default: hourly_rate).

    Returns:
        Summaries ordered by week_start, only weeks that contain entries
    """
    rate_of = rate_of or flat_rate(hourly_rate)

    by_week: dict[datetime.date, list[TimesheetEntry]] = {}
    for entry in entries:
        by_week.setdefault(monday_of(entry.work_date), []).append(entry)

    summaries: list[WeeklySummary] = []
    for monday in sorted(by_week):
        week_entries = by_week[monday]
        breakdown, total_hours = build_daily_breakdown(week_entries, policy=policy)
        week_start = monday_of(min(breakdown))

        summary = empty_week_summary(worker_id, worker_name, hourly_rate, week_start)
        summary["daily_breakdown"] = breakdown
        summary["total_hours"] = total_hours
        summary["total_pay"] = sum(
            calculate_pay(derive_hours(entry.duration, policy=policy), rate_of(entry)) for entry in week_entries
        )
        summary["status"] = week_status(week_entries)
        summaries.append(summary)

    logger.debug("Worker %s: %d week(s) summarised", worker_id, len(summaries))
    return summaries


def _job_key(entry: TimesheetEntry) -> int | None:
    return entry.job.job_id if entry.job is not None else None


def build_detailed_rows(
    entries: Iterable[TimesheetEntry],
    start_date: datetime.date,
    end_date: datetime.date,
    hourly_rate: float,
    policy: str | None = None,
    rate_of: RateOf | None = None,
) -> tuple[list[DetailedDayRow], WeekTotal]:
    """
    Detailed per-day, per-job rows for one worker over a literal range.

    Every calendar day from start_date to end_date gets at least one row. A
    day without entries gets exactly one "Leave" row with zero hours and pay.
    Entries without a job are collected under job_id None ("General Work").
    Each entry is priced with ``rate_of`` (default: hourly_rate).

    Returns:
        (rows in date order, totals across all rows)
    """
    rate_of = rate_of or flat_rate(hourly_rate)

    by_day: dict[datetime.date, dict[int | None, dict]] = {}
    for entry in entries:
        if not start_date <= entry.work_date <= end_date:
            continue
        jobs = by_day.setdefault(entry.work_date, {})
        key = _job_key(entry)
        bucket = jobs.setdefault(key, {"job_title": None, "hours": 0.0, "pay": 0.0})
        if bucket["job_title"] is None and entry.job is not None and entry.job.job_title:
            bucket["job_title"] = entry.job.job_title
        hours = derive_hours(entry.duration, policy=policy)
        bucket["hours"] += hours
        bucket["pay"] += calculate_pay(hours, rate_of(entry))

    rows: list[DetailedDayRow] = []
    total_hours = 0.0
    total_pay = 0.0

    for day in iter_days(start_date, end_date):
        day_name = WEEKDAY_NAMES[day.weekday()]
        jobs = by_day.get(day)

        if not jobs:
            rows.append(
                {
                    "date": day.isoformat(),
                    "day": day_name,
                    "job_id": None,
                    "job_title": LEAVE_LABEL,
                    "hours_worked": 0.0,
                    "hours_display": hours_to_display(0),
                    "pay_amount": 0.0,
                }
            )
            continue

        for job_id, bucket in jobs.items():
            hours = bucket["hours"]
            pay = bucket["pay"]
            total_hours += hours
            total_pay += pay
            rows.append(
                {
                    "date": day.isoformat(),
                    "day": day_name,
                    "job_id": job_id,
                    "job_title": bucket["job_title"] or GENERAL_WORK_TITLE,
                    "hours_worked": round(hours, 2),
                    "hours_display": hours_to_display(hours),
                    "pay_amount": round_money(pay),
                }
            )

    week_total: WeekTotal = {
        "total_hours": round(total_hours, 2),
        "total_hours_display": hours_to_display(total_hours),
        "total_pay": round_money(total_pay),
    }
    return rows, week_total
