"""
Timesheet module - weekly aggregation and billing of logged time.

Exports the public functions of the engine.
"""

from .billing import calculate_pay, entry_rate, round_money
from .breakdown import build_daily_breakdown, first_job_title
from .dashboard import get_weekly_dashboard, get_worker_weekly_view, paginate, summary_to_row
from .jobs import get_all_jobs_weekly_summary, get_job_weekly_summary, get_timesheet_stats
from .summary import (
    build_detailed_rows,
    empty_week_summary,
    flat_rate,
    group_by_worker,
    summarize_worker_weeks,
    week_status,
)
from .weeks import (
    format_week_range,
    get_today,
    iter_days,
    monday_of,
    resolve_requested_window,
    week_days,
    week_window,
)

__all__ = [
    # weeks
    "get_today",
    "monday_of",
    "week_window",
    "week_days",
    "iter_days",
    "format_week_range",
    "resolve_requested_window",
    # breakdown
    "build_daily_breakdown",
    "first_job_title",
    # billing
    "entry_rate",
    "calculate_pay",
    "round_money",
    # summary
    "flat_rate",
    "group_by_worker",
    "week_status",
    "empty_week_summary",
    "summarize_worker_weeks",
    "build_detailed_rows",
    # dashboard
    "summary_to_row",
    "paginate",
    "get_weekly_dashboard",
    "get_worker_weekly_view",
    # jobs
    "get_job_weekly_summary",
    "get_all_jobs_weekly_summary",
    "get_timesheet_stats",
]
