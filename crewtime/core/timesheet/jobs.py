"""Per-job weekly summaries and timesheet statistics."""

import datetime
import logging

from crewtime.core.constants import GENERAL_WORK_TITLE
from crewtime.core.exceptions import InvalidDateRange, NotFound
from crewtime.core.models import TimesheetEntry
from crewtime.core.storage import TimesheetStore, WorkerDirectory
from crewtime.core.time_utils import derive_hours, hours_to_display
from crewtime.core.validators import parse_iso_date, validate_required_range

from .billing import calculate_pay, entry_rate, round_money
from .summary import group_by_worker
from .weeks import iter_days

logger = logging.getLogger(__name__)


def _job_block(
    entries: list[TimesheetEntry],
    directory: WorkerDirectory,
    days: list[datetime.date],
    policy: str | None = None,
) -> dict:
    """
    Worker rows and totals for the entries of a single job.

    Each worker row carries display hours for every date in ``days``.
    """
    workers = []
    job_hours = 0.0
    job_cost = 0.0

    for worker_id, worker_entries in group_by_worker(entries).items():
        hours_by_date: dict[datetime.date, float] = {}
        cost = 0.0
        for entry in worker_entries:
            hours = derive_hours(entry.duration, policy=policy)
            hours_by_date[entry.work_date] = hours_by_date.get(entry.work_date, 0.0) + hours
            cost += calculate_pay(hours, entry_rate(entry, directory))

        total_hours = sum(hours_by_date.values())
        job_hours += total_hours
        job_cost += cost

        workers.append(
            {
                "worker_id": worker_id,
                "employee": directory.name_of(worker_id) or f"Worker {worker_id}",
                "days": {day.isoformat(): hours_to_display(hours_by_date.get(day, 0.0)) for day in days},
                "total_hours": round(total_hours, 2),
                "total": hours_to_display(total_hours),
                "total_cost": round_money(cost),
            }
        )

    workers.sort(key=lambda w: (w["employee"].lower(), w["worker_id"]))
    return {
        "workers": workers,
        "hours": job_hours,
        "cost": job_cost,
    }


def get_job_weekly_summary(
    store: TimesheetStore,
    directory: WorkerDirectory,
    job_id: int,
    start_date: str | datetime.date | None,
    end_date: str | datetime.date | None,
    policy: str | None = None,
) -> dict:
    """
    Hours and cost per worker on one job over a literal date range.

    Returns:
        Dict with job info, one row per worker (per-day display hours for every
        date in range, totals) and job-level totals
    """
    start, end = validate_required_range(start_date, end_date)

    job_title = store.job_title_of(job_id)
    if job_title is None:
        raise NotFound(f"Job {job_id} not found")

    entries = store.fetch_entries(date_range=(start, end), job_id=job_id)
    block = _job_block(entries, directory, list(iter_days(start, end)), policy=policy)
    logger.debug("Job %s weekly summary %s..%s: %d worker(s)", job_id, start, end, len(block["workers"]))

    return {
        "job_id": job_id,
        "job_title": job_title,
        "period": {"start_date": start.isoformat(), "end_date": end.isoformat()},
        "workers": block["workers"],
        "total_hours": round(block["hours"], 2),
        "total": hours_to_display(block["hours"]),
        "total_cost": round_money(block["cost"]),
    }


def _resolve_all_jobs_range(
    store: TimesheetStore,
    start_date: str | datetime.date | None,
    end_date: str | datetime.date | None,
) -> tuple[datetime.date, datetime.date] | None:
    if start_date in (None, "") and end_date in (None, ""):
        return store.earliest_and_latest_dates()
    if start_date in (None, "") or end_date in (None, ""):
        raise InvalidDateRange("start_date and end_date must be supplied together")
    return validate_required_range(start_date, end_date)


def get_all_jobs_weekly_summary(
    store: TimesheetStore,
    directory: WorkerDirectory,
    start_date: str | datetime.date | None = None,
    end_date: str | datetime.date | None = None,
    policy: str | None = None,
) -> dict:
    """
    Per-job summaries for every job with entries in range.

    Without dates the range covers all timesheet data, from the earliest to
    the latest logged day. Entries without a job are collected in a
    "General Work" block with job_id None, listed after the real jobs.

    Raises:
        InvalidDateRange: Only one date given, or a malformed, inverted or too
            long range
        StoreUnavailable: Store failure
    """
    date_range = _resolve_all_jobs_range(store, start_date, end_date)
    if date_range is None:
        logger.debug("All jobs weekly summary: no timesheet data")
        return {"period": None, "jobs": [], "total_hours": 0.0, "total": hours_to_display(0), "total_cost": 0.0}

    start, end = date_range
    entries = store.fetch_entries(date_range=(start, end))
    days = list(iter_days(start, end))

    by_job: dict[int | None, list[TimesheetEntry]] = {}
    for entry in entries:
        by_job.setdefault(entry.job.job_id if entry.job is not None else None, []).append(entry)

    jobs = []
    all_hours = 0.0
    all_cost = 0.0
    for job_id, job_entries in by_job.items():
        title = next((e.job.job_title for e in job_entries if e.job is not None and e.job.job_title), None)
        if title is None and job_id is not None:
            title = store.job_title_of(job_id)

        block = _job_block(job_entries, directory, days, policy=policy)
        all_hours += block["hours"]
        all_cost += block["cost"]
        jobs.append(
            {
                "job_id": job_id,
                "job_title": title or GENERAL_WORK_TITLE,
                "workers": block["workers"],
                "total_hours": round(block["hours"], 2),
                "total": hours_to_display(block["hours"]),
                "total_cost": round_money(block["cost"]),
            }
        )

    jobs.sort(key=lambda j: (j["job_id"] is None, j["job_title"].lower(), j["job_id"] or 0))
    logger.info("All jobs weekly summary %s..%s: %d job(s)", start, end, len(jobs))

    return {
        "period": {"start_date": start.isoformat(), "end_date": end.isoformat()},
        "jobs": jobs,
        "total_hours": round(all_hours, 2),
        "total": hours_to_display(all_hours),
        "total_cost": round_money(all_cost),
    }



def get_timesheet_stats(
    store: TimesheetStore,
    directory: WorkerDirectory,
    worker_id: int | None = None,
    start_date: str | datetime.date | None = None,
    end_date: str | datetime.date | None = None,
    policy: str | None = None,
) -> dict:
    """
    Entry count, hours, cost and per-entry averages.

    Either date may be omitted to leave that side of the range open.
    """
    start = parse_iso_date(start_date, "start_date")
    end = parse_iso_date(end_date, "end_date")
    if start is not None and end is not None and end < start:
        raise InvalidDateRange(f"end_date {end} is before start_date {start}")

    date_range = None
    if start is not None or end is not None:
        date_range = (start or datetime.date.min, end or datetime.date.max)

    entries = store.fetch_entries(worker_id, date_range)

    total_hours = 0.0
    total_cost = 0.0
    for entry in entries:
        hours = derive_hours(entry.duration, policy=policy)
        total_hours += hours
        total_cost += calculate_pay(hours, entry_rate(entry, directory))

    count = len(entries)
    logger.debug("Timesheet stats over %d entries", count)
    return {
        "total_entries": count,
        "total_hours": round(total_hours, 2),
        "total_cost": round_money(total_cost),
        "average_hours_per_entry": round(total_hours / count, 2) if count else 0.0,
        "average_cost_per_entry": round_money(total_cost / count) if count else 0.0,
    }
