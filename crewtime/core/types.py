# crewtime/core/types.py

"""
Type definitions for the derived timesheet structures.

All of these are computed per request and never persisted.
"""

from datetime import date
from typing import NewType, TypedDict

WorkerId = NewType("WorkerId", int)
JobId = NewType("JobId", int)

Hours = float
MonetaryAmount = float


class DailyBreakdownEntry(TypedDict):
    """One worker's merged hours for a single date."""

    date: str
    hours: str  # "HH:MM:SS"
    job_title: str
    job_reference: JobId | None


class WeeklySummary(TypedDict):
    """One worker's Monday..Sunday week."""

    worker_id: WorkerId
    worker_name: str
    week_start: date
    week_end: date
    daily_breakdown: dict[date, DailyBreakdownEntry]
    total_hours: Hours
    hourly_rate: float
    total_pay: MonetaryAmount  # full precision, rounded only in the row
    status: str


class WeeklyDashboardRow(TypedDict):
    """Output row of the weekly dashboard, one per worker per week."""

    worker_id: WorkerId
    employee: str
    job: str
    week: str
    week_start: str
    week_end: str
    mon: str
    tue: str
    wed: str
    thu: str
    fri: str
    sat: str
    sun: str
    total: str
    billable: str
    total_hours: Hours
    billable_hours: Hours
    hourly_rate: float
    weekly_payment: MonetaryAmount
    status: str


class Pagination(TypedDict):
    current_page: int
    total_pages: int
    total_records: int
    page_size: int
    has_next: bool
    has_prev: bool


class Period(TypedDict):
    start_date: str
    end_date: str


class WeeklyDashboard(TypedDict):
    period: Period
    rows: list[WeeklyDashboardRow]
    pagination: Pagination


class DetailedDayRow(TypedDict):
    """One row in the detailed weekly view: a job worked on a day, or Leave."""

    date: str
    day: str
    job_id: JobId | None
    job_title: str
    hours_worked: Hours
    hours_display: str
    pay_amount: MonetaryAmount


class WeekTotal(TypedDict):
    total_hours: Hours
    total_hours_display: str
    total_pay: MonetaryAmount


class WorkerWeeklyView(TypedDict):
    worker_id: WorkerId
    employee_name: str
    hourly_rate: float
    period: Period
    daily_breakdown: list[DetailedDayRow]
    week_total: WeekTotal
