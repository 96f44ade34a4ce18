# tests/test_summary.py
"""
Unit tests for weekly summaries, the detailed day rows and pay.
"""

import datetime
import sys
from pathlib import Path

import pytest

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

# ruff: noqa: E402
from crewtime.core.time_utils import duration_to_hours
from crewtime.core.timesheet import (
    build_detailed_rows,
    calculate_pay,
    empty_week_summary,
    group_by_worker,
    round_money,
    summarize_worker_weeks,
    week_status,
)

D = datetime.date
ROOF = (10, "Roof Repair")
KITCHEN = (11, "Kitchen Remodel")


class TestPay:
    def test_hours_times_rate(self):
        assert calculate_pay(8.5, 25.0) == 212.5

    def test_zero_or_missing_rate_is_zero(self):
        """Salaried staff have no hourly rate, which is not an error."""
        assert calculate_pay(40.0, 0) == 0.0
        assert calculate_pay(40.0, None) == 0.0

    def test_round_money(self):
        assert round_money(10.0 / 3) == 3.33

    def test_round_money_has_no_negative_zero(self):
        assert str(round_money(-0.001)) == "0.0"


class TestWeekStatus:
    def test_all_approved(self, make_entry):
        entries = [make_entry(2, D(2024, 1, 8), status="approved") for _ in range(2)]
        assert week_status(entries) == "approved"

    def test_mixed_is_pending(self, make_entry):
        entries = [make_entry(2, D(2024, 1, 8), status="approved"), make_entry(2, D(2024, 1, 9))]
        assert week_status(entries) == "pending"

    def test_any_rejected_wins(self, make_entry):
        entries = [make_entry(2, D(2024, 1, 8), status="approved"), make_entry(2, D(2024, 1, 9), status="rejected")]
        assert week_status(entries) == "rejected"

    def test_no_entries_is_pending(self):
        assert week_status([]) == "pending"


class TestGroupByWorker:
    def test_keeps_order_within_worker(self, make_entry):
        a = make_entry(2, D(2024, 1, 8))
        b = make_entry(3, D(2024, 1, 8))
        c = make_entry(2, D(2024, 1, 9))

        grouped = group_by_worker([a, b, c])

        assert grouped == {2: [a, c], 3: [b]}


class TestSummarizeWorkerWeeks:
    """Weekly summaries for one worker."""

    def test_single_week(self, make_entry):
        entries = [
            make_entry(2, D(2024, 1, 8), start="09:00", end="17:30", job=ROOF),
            make_entry(2, D(2024, 1, 10), hours=6.0, job=KITCHEN),
        ]
        [summary] = summarize_worker_weeks(2, "Bob Berg", 25.0, entries)

        assert summary["week_start"] == D(2024, 1, 8)
        assert summary["week_end"] == D(2024, 1, 14)
        assert summary["total_hours"] == 14.5
        assert summary["hourly_rate"] == 25.0
        assert set(summary["daily_breakdown"]) == {D(2024, 1, 8), D(2024, 1, 10)}

    def test_breakdown_hours_add_up_to_total(self, make_entry):
        """Day durations sum to total_hours within one second of truncation."""
        entries = [
            make_entry(2, D(2024, 1, 8), start="09:00", end="17:20"),
            make_entry(2, D(2024, 1, 9), hours=1 / 7),
            make_entry(2, D(2024, 1, 9), hours=2.3333),
            make_entry(2, D(2024, 1, 12), start="06:10", end="14:55"),
        ]
        [summary] = summarize_worker_weeks(2, "Bob Berg", 25.0, entries)

        summed = sum(duration_to_hours(day["hours"]) for day in summary["daily_breakdown"].values())
        assert abs(summed - summary["total_hours"]) <= 1 / 3600

    def test_seven_day_breakdown_adds_up_to_total(self, make_entry):
        """Seven days of 1.9999h: per-day truncation does not drift the total."""
        entries = [make_entry(2, D(2024, 1, 8) + datetime.timedelta(days=i), hours=1.9999) for i in range(7)]
        [summary] = summarize_worker_weeks(2, "Bob Berg", 25.0, entries)

        assert len(summary["daily_breakdown"]) == 7
        summed = sum(duration_to_hours(day["hours"]) for day in summary["daily_breakdown"].values())
        assert abs(summed - summary["total_hours"]) <= 1 / 3600

    def test_total_pay_uses_untruncated_hours(self, make_entry):
        entries = [make_entry(2, D(2024, 1, 8) + datetime.timedelta(days=i), hours=1.9999) for i in range(7)]
        [summary] = summarize_worker_weeks(2, "Bob Berg", 100.0, entries)

        assert summary["total_pay"] == pytest.approx(7 * 1.9999 * 100.0)
        assert summary["total_hours"] < 7 * 1.9999

    def test_rate_of_prices_each_entry(self, make_entry):
        entries = [
            make_entry(2, D(2024, 1, 8), hours=2.0, rate=30.0),
            make_entry(2, D(2024, 1, 9), hours=1.0, rate=50.0),
        ]
        [summary] = summarize_worker_weeks(2, "Bob Berg", 25.0, entries, rate_of=lambda entry: entry.hourly_rate)

        assert summary["total_pay"] == 110.0
        assert summary["hourly_rate"] == 25.0

    def test_week_start_snaps_from_earliest_entry(self, make_entry):
        """A week whose first entry is on Thursday still starts on Monday."""
        [summary] = summarize_worker_weeks(2, "Bob Berg", 25.0, [make_entry(2, D(2024, 1, 11), hours=1.0)])

        assert summary["week_start"] == D(2024, 1, 8)
        assert summary["week_start"].weekday() == 0

    def test_one_summary_per_week(self, make_entry):
        entries = [
            make_entry(2, D(2024, 1, 8), hours=1.0),
            make_entry(2, D(2024, 1, 14), hours=2.0),
            make_entry(2, D(2024, 1, 15), hours=4.0),
        ]
        summaries = summarize_worker_weeks(2, "Bob Berg", 25.0, entries)

        assert [s["week_start"] for s in summaries] == [D(2024, 1, 8), D(2024, 1, 15)]
        assert [s["total_hours"] for s in summaries] == [3.0, 4.0]

    def test_status_per_week(self, make_entry):
        entries = [
            make_entry(2, D(2024, 1, 8), hours=1.0, status="approved"),
            make_entry(2, D(2024, 1, 15), hours=1.0, status="rejected"),
        ]
        summaries = summarize_worker_weeks(2, "Bob Berg", 25.0, entries)

        assert [s["status"] for s in summaries] == ["approved", "rejected"]

    def test_no_entries(self):
        assert summarize_worker_weeks(2, "Bob Berg", 25.0, []) == []

    def test_empty_week_summary(self):
        summary = empty_week_summary(2, "Bob Berg", 25.0, D(2024, 1, 8))

        assert summary["daily_breakdown"] == {}
        assert summary["total_hours"] == 0.0
        assert summary["week_end"] == D(2024, 1, 14)


class TestBuildDetailedRows:
    """Per-day, per-job rows over a literal range."""

    def test_monday_and_wednesday_only(self, make_entry):
        """Every day in range has a row; days without entries are Leave."""
        entries = [
            make_entry(2, D(2024, 1, 8), start="09:00", end="17:30", job=ROOF),
            make_entry(2, D(2024, 1, 10), hours=6.0, job=KITCHEN),
        ]
        rows, week_total = build_detailed_rows(entries, D(2024, 1, 8), D(2024, 1, 14), 25.0)

        assert len(rows) == 7
        assert [r["job_title"] for r in rows] == [
            "Roof Repair",
            "Leave",
            "Kitchen Remodel",
            "Leave",
            "Leave",
            "Leave",
            "Leave",
        ]
        assert [r["day"] for r in rows][:3] == ["Monday", "Tuesday", "Wednesday"]

        monday = rows[0]
        assert monday["hours_worked"] == 8.5
        assert monday["hours_display"] == "8h 30m"
        assert monday["pay_amount"] == 212.5
        assert monday["job_id"] == 10

        assert week_total == {"total_hours": 14.5, "total_hours_display": "14h 30m", "total_pay": 362.5}

    def test_leave_row_shape(self):
        rows, week_total = build_detailed_rows([], D(2024, 1, 9), D(2024, 1, 9), 25.0)

        assert rows == [
            {
                "date": "2024-01-09",
                "day": "Tuesday",
                "job_id": None,
                "job_title": "Leave",
                "hours_worked": 0.0,
                "hours_display": "0h",
                "pay_amount": 0.0,
            }
        ]
        assert week_total["total_hours"] == 0.0

    def test_two_jobs_same_day_give_two_rows(self, make_entry):
        entries = [
            make_entry(2, D(2024, 1, 8), hours=3.0, job=ROOF),
            make_entry(2, D(2024, 1, 8), hours=2.0, job=KITCHEN),
            make_entry(2, D(2024, 1, 8), hours=1.0, job=ROOF),
        ]
        rows, week_total = build_detailed_rows(entries, D(2024, 1, 8), D(2024, 1, 8), 10.0)

        assert [(r["job_id"], r["hours_worked"]) for r in rows] == [(10, 4.0), (11, 2.0)]
        assert week_total["total_pay"] == 60.0

    def test_entries_without_job_collected_as_general_work(self, make_entry):
        entries = [make_entry(1, D(2024, 1, 11), hours=4.0), make_entry(1, D(2024, 1, 11), hours=3.5)]
        rows, _ = build_detailed_rows(entries, D(2024, 1, 11), D(2024, 1, 11), 0.0)

        assert len(rows) == 1
        assert rows[0]["job_id"] is None
        assert rows[0]["job_title"] == "General Work"
        assert rows[0]["hours_worked"] == 7.5
        assert rows[0]["pay_amount"] == 0.0

    def test_literal_range_not_snapped(self, make_entry):
        """Wednesday to the following Tuesday is seven rows starting on Wednesday."""
        rows, _ = build_detailed_rows([], D(2024, 1, 10), D(2024, 1, 16), 25.0)

        assert rows[0]["date"] == "2024-01-10"
        assert rows[-1]["date"] == "2024-01-16"
        assert len(rows) == 7

    def test_entries_outside_range_ignored(self, make_entry):
        rows, week_total = build_detailed_rows(
            [make_entry(2, D(2024, 1, 20), hours=8.0)], D(2024, 1, 8), D(2024, 1, 9), 25.0
        )

        assert all(r["job_title"] == "Leave" for r in rows)
        assert week_total["total_hours"] == 0.0

    def test_pay_rounded_only_at_output(self, make_entry):
        """Three 20-minute entries at 10/h total 10.0, not 3 * 3.33."""
        entries = [
            make_entry(2, D(2024, 1, 8) + datetime.timedelta(days=i), hours=1 / 3, job=ROOF) for i in range(3)
        ]
        rows, week_total = build_detailed_rows(entries, D(2024, 1, 8), D(2024, 1, 10), 10.0)

        assert [r["pay_amount"] for r in rows] == [3.33, 3.33, 3.33]
        assert week_total["total_pay"] == 10.0
        assert week_total["total_hours"] == 1.0
