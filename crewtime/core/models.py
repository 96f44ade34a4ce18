import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from crewtime.core.constants import CATEGORY_LABOR, STATUS_PENDING


class ClockRange(BaseModel):
    """Start/end clock pair on the entry's work date."""
    kind: Literal["clock"] = "clock"
    start_time: datetime.time
    end_time: datetime.time


class PrecomputedHours(BaseModel):
    """Duration logged directly as decimal hours."""
    kind: Literal["hours"] = "hours"
    total_hours: float


Duration = Annotated[Union[ClockRange, PrecomputedHours], Field(discriminator="kind")]


class JobReference(BaseModel):
    """Job an entry was logged against."""
    job_id: int
    job_title: str | None = None


class TimesheetEntry(BaseModel):
    """One raw logged time record, as read from the store."""
    id: int | None = None
    worker_id: int
    work_date: datetime.date
    duration: Duration | None = None  # None contributes zero hours
    job: JobReference | None = None
    hourly_rate: float = 0.0
    status: str = STATUS_PENDING

    @classmethod
    def from_fields(
        cls,
        worker_id: int,
        work_date: datetime.date,
        start_time: datetime.time | None = None,
        end_time: datetime.time | None = None,
        total_hours: float | None = None,
        **kwargs,
    ) -> "TimesheetEntry":
        """
        Build an entry from flat nullable columns.

        A complete clock pair wins over total_hours.
        """
        duration: ClockRange | PrecomputedHours | None = None
        if start_time is not None and end_time is not None:
            duration = ClockRange(start_time=start_time, end_time=end_time)
        elif total_hours is not None:
            duration = PrecomputedHours(total_hours=total_hours)
        return cls(worker_id=worker_id, work_date=work_date, duration=duration, **kwargs)


class Worker(BaseModel):
    """Staff, labor or lead labor person tracked for time and billing."""
    id: int
    name: str
    category: str = CATEGORY_LABOR
    hourly_rate: float = 0.0
