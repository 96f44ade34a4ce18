"""
Pytest configuration and shared fixtures for testing.

Provides reusable test fixtures:
- test_db: In-memory SQLite database for isolated testing
- seeded_db: test_db with workers, jobs and a few weeks of entries
- test_client: FastAPI TestClient using the test database
- make_entry / make_store / make_directory: in-memory collaborators for
  engine tests that don't need a database
"""

import datetime
import os
import sys
from pathlib import Path

import pytest

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# Keep the app's own engine off the filesystem during tests
os.environ.setdefault("DATABASE_URL", "sqlite://")

# ruff: noqa: E402
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from crewtime.core.constants import SALARIED_CATEGORIES
from crewtime.core.models import JobReference, TimesheetEntry, Worker
from crewtime.database.database import Base, JobRow, TimesheetEntryRow, WorkerRow, get_db
from crewtime.main import app

D = datetime.date
T = datetime.time


class InMemoryStore:
    """TimesheetStore over a list of entries."""

    def __init__(self, entries: list[TimesheetEntry], jobs: dict[int, str] | None = None):
        self.entries = sorted(entries, key=lambda e: (e.work_date, e.id or 0))
        self.jobs = jobs or {}
        self.fetch_calls = []

    def fetch_entries(self, worker_id=None, date_range=None, job_id=None):
        self.fetch_calls.append((worker_id, date_range, job_id))
        result = []
        for entry in self.entries:
            if worker_id is not None and entry.worker_id != worker_id:
                continue
            if job_id is not None and (entry.job is None or entry.job.job_id != job_id):
                continue
            if date_range is not None and not date_range[0] <= entry.work_date <= date_range[1]:
                continue
            result.append(entry)
        return result

    def earliest_and_latest_dates(self, worker_id=None):
        dates = [e.work_date for e in self.entries if worker_id is None or e.worker_id == worker_id]
        if not dates:
            return None
        return min(dates), max(dates)

    def job_title_of(self, job_id):
        return self.jobs.get(job_id)


class InMemoryDirectory:
    """WorkerDirectory over a list of Worker models."""

    def __init__(self, workers: list[Worker]):
        self.workers = {w.id: w for w in workers}

    def name_of(self, worker_id):
        worker = self.workers.get(worker_id)
        return worker.name if worker else None

    def hourly_rate_of(self, worker_id):
        worker = self.workers.get(worker_id)
        if worker is None or worker.category in SALARIED_CATEGORIES:
            return 0.0
        return worker.hourly_rate

    def category_of(self, worker_id):
        worker = self.workers.get(worker_id)
        return worker.category if worker else None


@pytest.fixture
def make_entry():
    """
    Factory for TimesheetEntry objects.

    Usage:
        make_entry(2, D(2024, 1, 8), start="09:00", end="17:30", job=(10, "Roof Repair"))
    """
    counter = {"id": 0}

    def _make(worker_id, work_date, start=None, end=None, hours=None, job=None, rate=0.0, status="pending"):
        counter["id"] += 1
        job_ref = JobReference(job_id=job[0], job_title=job[1]) if job else None
        return TimesheetEntry.from_fields(
            id=counter["id"],
            worker_id=worker_id,
            work_date=work_date,
            start_time=T.fromisoformat(start) if start else None,
            end_time=T.fromisoformat(end) if end else None,
            total_hours=hours,
            job=job_ref,
            hourly_rate=rate,
            status=status,
        )

    return _make


@pytest.fixture
def workers():
    """
    Three workers, one per category:
    - 1 Alice Andersson: staff (salaried, stored rate ignored)
    - 2 Bob Berg: labor, 25/h
    - 3 Carla Cruz: lead labor, 40/h
    """
    return [
        Worker(id=1, name="Alice Andersson", category="staff", hourly_rate=30.0),
        Worker(id=2, name="Bob Berg", category="labor", hourly_rate=25.0),
        Worker(id=3, name="Carla Cruz", category="lead_labor", hourly_rate=40.0),
    ]


@pytest.fixture
def make_store():
    return InMemoryStore


@pytest.fixture
def directory(workers):
    return InMemoryDirectory(workers)


@pytest.fixture(scope="function")
def test_db():
    """
    Create an in-memory SQLite database for testing.

    StaticPool keeps one shared connection so the TestClient's worker thread
    sees the same database as the test.

    Yields:
        SQLAlchemy Session: Database session for test use
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def seeded_db(test_db):
    """
    Workers 1-3, jobs 10 and 11, entries in the weeks of 2024-01-08 and 2024-01-22.

    Week of Mon 2024-01-08:
    - Bob:   Mon 09:00-17:30 Roof Repair (approved), Wed 6h Kitchen Remodel (approved)
    - Carla: Tue 08:00-12:00 and 13:00-15:00 Roof Repair (pending)
    - Alice: Thu 7.5h, no job
    Week of Mon 2024-01-22:
    - Bob:   Fri 3h Roof Repair (pending)
    """
    test_db.add_all(
        [
            WorkerRow(id=1, name="Alice Andersson", category="staff", hourly_rate=30.0),
            WorkerRow(id=2, name="Bob Berg", category="labor", hourly_rate=25.0),
            WorkerRow(id=3, name="Carla Cruz", category="lead_labor", hourly_rate=40.0),
            JobRow(id=10, job_title="Roof Repair"),
            JobRow(id=11, job_title="Kitchen Remodel"),
        ]
    )
    test_db.flush()

    rows = [
        TimesheetEntryRow(
            worker_id=2, job_id=10, work_date=D(2024, 1, 8), start_time=T(9, 0), end_time=T(17, 30),
            hourly_rate=25.0, status="approved",
        ),
        TimesheetEntryRow(
            worker_id=2, job_id=11, work_date=D(2024, 1, 10), total_hours=6.0, hourly_rate=25.0, status="approved"
        ),
        TimesheetEntryRow(
            worker_id=3, job_id=10, work_date=D(2024, 1, 9), start_time=T(8, 0), end_time=T(12, 0), hourly_rate=40.0
        ),
        TimesheetEntryRow(
            worker_id=3, job_id=10, work_date=D(2024, 1, 9), start_time=T(13, 0), end_time=T(15, 0), hourly_rate=40.0
        ),
        TimesheetEntryRow(worker_id=1, work_date=D(2024, 1, 11), total_hours=7.5),
        TimesheetEntryRow(worker_id=2, job_id=10, work_date=D(2024, 1, 26), total_hours=3.0, hourly_rate=25.0),
    ]
    test_db.add_all(rows)
    test_db.commit()
    return test_db


@pytest.fixture(scope="function")
def test_client(seeded_db):
    """
    Create FastAPI TestClient with test database dependency override.

    Yields:
        TestClient: FastAPI test client for API testing
    """

    def override_get_db():
        try:
            yield seeded_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    app.dependency_overrides.clear()
