# crewtime/database/database.py
"""
SQLAlchemy database setup and models.
"""

from datetime import datetime

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Time,
    create_engine,
    event,
    inspect,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker

from crewtime.core.config import DATABASE_URL
from crewtime.core.constants import CATEGORY_LABOR, STATUS_PENDING
from crewtime.core.time_utils import duration_from_clock

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


class WorkerRow(Base):
    """Staff, labor or lead labor person."""

    __tablename__ = "workers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    category = Column(String(20), default=CATEGORY_LABOR, nullable=False)
    hourly_rate = Column(Float, default=0.0, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    entries = relationship("TimesheetEntryRow", back_populates="worker")

    def __repr__(self):
        return f"<WorkerRow(id={self.id}, name={self.name!r}, category={self.category})>"


class JobRow(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    job_title = Column(String(200), nullable=False)
    status = Column(String(30), default="active")
    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<JobRow(id={self.id}, job_title={self.job_title!r})>"


class TimesheetEntryRow(Base):
    """
    Raw logged time. Either start_time/end_time or total_hours carries the
    duration; when both are missing the entry counts as zero hours.
    """

    __tablename__ = "timesheet_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    worker_id = Column(Integer, ForeignKey("workers.id"), nullable=False, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=True, index=True)
    work_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)
    total_hours = Column(Float, nullable=True)
    hourly_rate = Column(Float, default=0.0, nullable=False)
    status = Column(String(20), default=STATUS_PENDING, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    worker = relationship("WorkerRow", back_populates="entries")
    job = relationship("JobRow")

    def fill_total_hours(self) -> None:
        """Derive total_hours from the clock pair (2 decimals) when it is missing."""
        if self.start_time is None or self.end_time is None or self.total_hours is not None:
            return
        self.total_hours = round(duration_from_clock(self.start_time, self.end_time), 2)

    def __repr__(self):
        return (
            f"<TimesheetEntryRow(id={self.id}, worker_id={self.worker_id}, "
            f"work_date={self.work_date}, total_hours={self.total_hours})>"
        )


@event.listens_for(TimesheetEntryRow, "before_insert")
def _fill_total_hours_on_insert(mapper, connection, target):
    target.fill_total_hours()


@event.listens_for(TimesheetEntryRow, "before_update")
def _refresh_total_hours_on_update(mapper, connection, target):
    """A changed clock pair replaces the stored total unless total_hours changed too."""
    attrs = inspect(target).attrs
    clock_changed = attrs.start_time.history.has_changes() or attrs.end_time.history.has_changes()
    if clock_changed and not attrs.total_hours.history.has_changes():
        target.total_hours = None
    target.fill_total_hours()


def create_tables():
    """Create all database tables."""
    Base.metadata.create_all(bind=engine)


def get_db():
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
