# crewtime/routes/timesheets.py
"""
API endpoints for weekly timesheet summaries and views.

Note: /weekly-summary caps any supplied range to the Monday-anchored week
containing start_date, while /weekly-view and the job summary use the
literal range. /jobs/weekly-summary without dates covers all
timesheet data.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from crewtime.core.config import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from crewtime.core.logging_config import LogContext, get_logger
from crewtime.core.storage import SqlTimesheetStore, SqlWorkerDirectory
from crewtime.core.timesheet import (
    get_all_jobs_weekly_summary,
    get_job_weekly_summary,
    get_timesheet_stats,
    get_weekly_dashboard,
    get_worker_weekly_view,
)
from crewtime.database.database import get_db

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["timesheets"])


def success_response(data, message: str = "Success") -> dict:
    return {"success": True, "message": message, "data": data}


@router.get("/timesheets/weekly-summary")
async def weekly_summary(
    start_date: str | None = None,
    end_date: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    worker_id: int | None = Query(None, ge=1),
    db: Session = Depends(get_db),
):
    """All workers' weekly summary, one row per worker per week, paginated."""
    with LogContext(worker_id=worker_id):
        result = get_weekly_dashboard(
            SqlTimesheetStore(db),
            SqlWorkerDirectory(db),
            start_date=start_date,
            end_date=end_date,
            page=page,
            page_size=limit,
            worker_id=worker_id,
        )
    return success_response(result, "Weekly timesheet summary retrieved successfully")


@router.get("/timesheets/weekly-view")
async def weekly_view(
    worker_id: int = Query(..., ge=1),
    start_date: str | None = None,
    end_date: str | None = None,
    db: Session = Depends(get_db),
):
    """Detailed per-day, per-job view for one worker over the literal range."""
    with LogContext(worker_id=worker_id):
        result = get_worker_weekly_view(
            SqlTimesheetStore(db),
            SqlWorkerDirectory(db),
            worker_id,
            start_date,
            end_date,
        )
    return success_response(result, "Weekly timesheet view retrieved successfully")


@router.get("/jobs/weekly-summary")
async def all_jobs_weekly_summary(
    start_date: str | None = None,
    end_date: str | None = None,
    db: Session = Depends(get_db),
):
    """Per-job worker hours and cost for every job, plus General Work."""
    with LogContext(start_date=start_date, end_date=end_date):
        result = get_all_jobs_weekly_summary(
            SqlTimesheetStore(db),
            SqlWorkerDirectory(db),
            start_date=start_date,
            end_date=end_date,
        )
    return success_response(result, "All jobs weekly timesheet summary retrieved successfully")


@router.get("/jobs/{job_id}/weekly-summary")
async def job_weekly_summary(
    job_id: int,
    start_date: str | None = None,
    end_date: str | None = None,
    db: Session = Depends(get_db),
):
    """Hours and cost per worker on one job."""
    with LogContext(job_id=job_id):
        result = get_job_weekly_summary(
            SqlTimesheetStore(db),
            SqlWorkerDirectory(db),
            job_id,
            start_date,
            end_date,
        )
    return success_response(result, "Job weekly timesheet summary retrieved successfully")


@router.get("/timesheets/stats")
async def timesheet_stats(
    worker_id: int | None = Query(None, ge=1),
    start_date: str | None = None,
    end_date: str | None = None,
    db: Session = Depends(get_db),
):
    """Entry count, hours, cost and per-entry averages, optionally for one worker."""
    with LogContext(worker_id=worker_id):
        result = get_timesheet_stats(
            SqlTimesheetStore(db),
            SqlWorkerDirectory(db),
            worker_id=worker_id,
            start_date=start_date,
            end_date=end_date,
        )
    return success_response(result, "Timesheet statistics retrieved successfully")
