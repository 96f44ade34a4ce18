# crewtime/core/storage.py
"""
Read access to timesheet entries and workers.

The engine only depends on the two protocols below. The SQLAlchemy-backed
implementations are what the HTTP layer hands it.
"""

import datetime
import logging
from typing import Protocol

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from crewtime.core.constants import SALARIED_CATEGORIES
from crewtime.core.exceptions import StoreUnavailable
from crewtime.core.models import JobReference, TimesheetEntry, Worker
from crewtime.database.database import JobRow, TimesheetEntryRow, WorkerRow

logger = logging.getLogger(__name__)

DateRange = tuple[datetime.date, datetime.date]


class TimesheetStore(Protocol):
    def fetch_entries(
        self,
        worker_id: int | None = None,
        date_range: DateRange | None = None,
        job_id: int | None = None,
    ) -> list[TimesheetEntry]: ...

    def earliest_and_latest_dates(self, worker_id: int | None = None) -> DateRange | None: ...

    def job_title_of(self, job_id: int) -> str | None: ...


class WorkerDirectory(Protocol):
    def name_of(self, worker_id: int) -> str | None: ...

    def hourly_rate_of(self, worker_id: int) -> float: ...

    def category_of(self, worker_id: int) -> str | None: ...


def entry_from_row(row: TimesheetEntryRow) -> TimesheetEntry:
    """Map a stored row onto the engine's entry model."""
    job = None
    if row.job_id is not None:
        job = JobReference(job_id=row.job_id, job_title=row.job.job_title if row.job else None)
    return TimesheetEntry.from_fields(
        id=row.id,
        worker_id=row.worker_id,
        work_date=row.work_date,
        start_time=row.start_time,
        end_time=row.end_time,
        total_hours=row.total_hours,
        job=job,
        hourly_rate=row.hourly_rate or 0.0,
        status=row.status,
    )


class SqlTimesheetStore:
    """TimesheetStore over the timesheet_entries table."""

    def __init__(self, session: Session):
        self.session = session

    def fetch_entries(
        self,
        worker_id: int | None = None,
        date_range: DateRange | None = None,
        job_id: int | None = None,
    ) -> list[TimesheetEntry]:
        """
        Entries ordered by work_date, then id.

        Raises:
            StoreUnavailable: If the database query fails
        """
        try:
            query = self.session.query(TimesheetEntryRow).options(joinedload(TimesheetEntryRow.job))
            if worker_id is not None:
                query = query.filter(TimesheetEntryRow.worker_id == worker_id)
            if job_id is not None:
                query = query.filter(TimesheetEntryRow.job_id == job_id)
            if date_range is not None:
                start, end = date_range
                query = query.filter(
                    TimesheetEntryRow.work_date >= start,
                    TimesheetEntryRow.work_date <= end,
                )
            rows = query.order_by(TimesheetEntryRow.work_date.asc(), TimesheetEntryRow.id.asc()).all()
            entries = [entry_from_row(row) for row in rows]
        except SQLAlchemyError as e:
            logger.exception("Failed to fetch timesheet entries (worker_id=%s, range=%s)", worker_id, date_range)
            raise StoreUnavailable(f"Could not fetch timesheet entries: {e}") from e

        return entries

    def earliest_and_latest_dates(self, worker_id: int | None = None) -> DateRange | None:
        try:
            query = self.session.query(
                func.min(TimesheetEntryRow.work_date),
                func.max(TimesheetEntryRow.work_date),
            )
            if worker_id is not None:
                query = query.filter(TimesheetEntryRow.worker_id == worker_id)
            earliest, latest = query.one()
        except SQLAlchemyError as e:
            logger.exception("Failed to scan entry date bounds (worker_id=%s)", worker_id)
            raise StoreUnavailable(f"Could not read entry date bounds: {e}") from e

        if earliest is None or latest is None:
            return None
        return earliest, latest

    def job_title_of(self, job_id: int) -> str | None:
        try:
            job = self.session.query(JobRow).filter(JobRow.id == job_id).first()
        except SQLAlchemyError as e:
            logger.exception("Failed to look up job %s", job_id)
            raise StoreUnavailable(f"Could not look up job {job_id}: {e}") from e
        return job.job_title if job else None


class SqlWorkerDirectory:
    """WorkerDirectory over the workers table, cached per instance (one request)."""

    def __init__(self, session: Session):
        self.session = session
        self._workers: dict[int, Worker | None] = {}

    def get(self, worker_id: int) -> Worker | None:
        if worker_id not in self._workers:
            try:
                row = self.session.query(WorkerRow).filter(WorkerRow.id == worker_id).first()
            except SQLAlchemyError as e:
                logger.exception("Failed to look up worker %s", worker_id)
                raise StoreUnavailable(f"Could not look up worker {worker_id}: {e}") from e
            self._workers[worker_id] = (
                Worker(id=row.id, name=row.name, category=row.category, hourly_rate=row.hourly_rate or 0.0)
                if row
                else None
            )
        return self._workers[worker_id]

    def name_of(self, worker_id: int) -> str | None:
        worker = self.get(worker_id)
        return worker.name if worker else None

    def hourly_rate_of(self, worker_id: int) -> float:
        """Hourly rate, or 0 for salaried and unknown workers."""
        worker = self.get(worker_id)
        if worker is None or worker.category in SALARIED_CATEGORIES:
            return 0.0
        return worker.hourly_rate

    def category_of(self, worker_id: int) -> str | None:
        worker = self.get(worker_id)
        return worker.category if worker else None
