"""
Weekly dashboard and detailed worker view.

These are the two operations the HTTP layer calls. Both are fetch-then-compute:
all store reads happen first, everything after is pure and deterministic.
"""

import datetime
import logging
import math
from functools import partial

from crewtime.core.config import DEFAULT_PAGE_SIZE
from crewtime.core.constants import WEEKDAY_KEYS, ZERO_HOURS_LABEL
from crewtime.core.exceptions import NotFound
from crewtime.core.storage import TimesheetStore, WorkerDirectory
from crewtime.core.time_utils import duration_to_hours, hours_to_display
from crewtime.core.types import (
    Pagination,
    WeeklyDashboard,
    WeeklyDashboardRow,
    WeeklySummary,
    WorkerWeeklyView,
)
from crewtime.core.validators import parse_iso_date, validate_pagination, validate_required_range

from .billing import entry_rate, round_money
from .breakdown import first_job_title
from .summary import build_detailed_rows, empty_week_summary, group_by_worker, summarize_worker_weeks
from .weeks import format_week_range, resolve_requested_window, week_days

logger = logging.getLogger(__name__)


def summary_to_row(summary: WeeklySummary) -> WeeklyDashboardRow:
    """
    Flatten a WeeklySummary into a dashboard row.

    All seven day columns are filled, days without a breakdown entry read "0h".
    """
    breakdown = summary["daily_breakdown"]
    row: dict = {
        "worker_id": summary["worker_id"],
        "employee": summary["worker_name"],
        "job": first_job_title(breakdown),
        "week": format_week_range(summary["week_start"], summary["week_end"]),
        "week_start": summary["week_start"].isoformat(),
        "week_end": summary["week_end"].isoformat(),
    }

    for key, day in zip(WEEKDAY_KEYS, week_days(summary["week_start"])):
        day_entry = breakdown.get(day)
        row[key] = hours_to_display(duration_to_hours(day_entry["hours"])) if day_entry else ZERO_HOURS_LABEL

    total_hours = summary["total_hours"]
    # No separate non-billable hours yet
    billable_hours = total_hours

    row.update(
        {
            "total": hours_to_display(total_hours),
            "billable": hours_to_display(billable_hours),
            "total_hours": round(total_hours, 2),
            "billable_hours": round(billable_hours, 2),
            "hourly_rate": summary["hourly_rate"],
            "weekly_payment": round_money(summary["total_pay"]),
            "status": summary["status"],
        }
    )
    return row


def _row_sort_key(summary: WeeklySummary) -> tuple:
    # Newest week first, then name, then id for a total order
    return (-summary["week_start"].toordinal(), summary["worker_name"].lower(), summary["worker_id"])


def paginate(items: list, page: int, page_size: int) -> tuple[list, Pagination]:
    """Offset/limit slice plus pagination metadata."""
    total = len(items)
    total_pages = math.ceil(total / page_size) if total else 0
    offset = (page - 1) * page_size

    pagination: Pagination = {
        "current_page": page,
        "total_pages": total_pages,
        "total_records": total,
        "page_size": page_size,
        "has_next": page < total_pages,
        "has_prev": page > 1,
    }
    return items[offset : offset + page_size], pagination


def get_weekly_dashboard(
    store: TimesheetStore,
    directory: WorkerDirectory,
    start_date: str | datetime.date | None = None,
    end_date: str | datetime.date | None = None,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    worker_id: int | None = None,
    policy: str | None = None,
    today: datetime.date | None = None,
) -> WeeklyDashboard:
    """
    Paginated weekly dashboard, one row per worker per week.

    A supplied range is capped to the single Monday-anchored week containing
    start_date. Without dates, the window spans every week that has entries.

    Args:
        store: Timesheet store
        directory: Worker directory
        start_date: ISO date or None
        end_date: ISO date or None
        page: 1-based page number
        page_size: Rows per page (1-100)
        worker_id: Restrict to one worker; that worker always gets a row
        policy: Negative duration policy
        today: Override for the current date (fallback window)

    Returns:
        {"period": ..., "rows": [...], "pagination": {...}}

    Raises:
        InvalidDateRange: Malformed or inverted dates
        InvalidPagination: page/page_size out of bounds
        NotFound: worker_id is not in the directory
        StoreUnavailable: Store failure
    """
    start = parse_iso_date(start_date, "start_date")
    end = parse_iso_date(end_date, "end_date")
    page, page_size = validate_pagination(page, page_size)

    if worker_id is not None and directory.name_of(worker_id) is None:
        raise NotFound(f"Worker {worker_id} not found")

    entry_bounds = None
    if start is None and end is None:
        entry_bounds = store.earliest_and_latest_dates(worker_id)

    window = resolve_requested_window(start, end, entry_bounds, today=today)
    entries = store.fetch_entries(worker_id, window)
    grouped = group_by_worker(entries)
    if worker_id is not None:
        grouped.setdefault(worker_id, [])

    rate_of = partial(entry_rate, directory=directory)
    summaries: list[WeeklySummary] = []
    for wid, worker_entries in grouped.items():
        name = directory.name_of(wid)
        if name is None:
            logger.warning("Entries found for unknown worker %s", wid)
            name = f"Worker {wid}"
        rate = directory.hourly_rate_of(wid)

        weeks = summarize_worker_weeks(wid, name, rate, worker_entries, policy=policy, rate_of=rate_of)
        summaries.extend(weeks or [empty_week_summary(wid, name, rate, window[0])])

    summaries.sort(key=_row_sort_key)
    rows = [summary_to_row(summary) for summary in summaries]
    page_rows, pagination = paginate(rows, page, page_size)

    logger.info(
        "Weekly dashboard %s..%s: %d row(s), page %d/%d",
        window[0],
        window[1],
        len(rows),
        page,
        pagination["total_pages"],
    )
    return {
        "period": {"start_date": window[0].isoformat(), "end_date": window[1].isoformat()},
        "rows": page_rows,
        "pagination": pagination,
    }


def get_worker_weekly_view(
    store: TimesheetStore,
    directory: WorkerDirectory,
    worker_id: int,
    start_date: str | datetime.date | None,
    end_date: str | datetime.date | None,
    policy: str | None = None,
) -> WorkerWeeklyView:
    """
    Detailed view for one worker over the literal range, no week snapping.

    A worker without entries in range still gets a full result, every day a
    "Leave" row.

    Raises:
        InvalidDateRange: Missing, malformed or inverted dates
        NotFound: worker_id is not in the directory
        StoreUnavailable: Store failure
    """
    start, end = validate_required_range(start_date, end_date)

    name = directory.name_of(worker_id)
    if name is None:
        raise NotFound(f"Worker {worker_id} not found")
    rate = directory.hourly_rate_of(worker_id)

    entries = store.fetch_entries(worker_id, (start, end))
    rows, week_total = build_detailed_rows(
        entries, start, end, rate, policy=policy, rate_of=partial(entry_rate, directory=directory)
    )

    logger.debug("Weekly view for worker %s %s..%s: %d row(s)", worker_id, start, end, len(rows))
    return {
        "worker_id": worker_id,
        "employee_name": name,
        "hourly_rate": rate,
        "period": {"start_date": start.isoformat(), "end_date": end.isoformat()},
        "daily_breakdown": rows,
        "week_total": week_total,
    }
