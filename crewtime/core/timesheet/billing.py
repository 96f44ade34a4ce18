"""
Pay calculations.

Every operation prices an entry the same way, through entry_rate: the rate
logged on the entry, else the worker's directory rate, and always 0 for
salaried staff.
"""

from crewtime.core.constants import SALARIED_CATEGORIES
from crewtime.core.models import TimesheetEntry
from crewtime.core.storage import WorkerDirectory
from crewtime.core.types import Hours, MonetaryAmount


def entry_rate(entry: TimesheetEntry, directory: WorkerDirectory) -> float:
    """
    Rate used to cost a single entry.

    The rate logged on the entry wins, the directory rate is the fallback.
    Salaried workers always cost 0.
    """
    if directory.category_of(entry.worker_id) in SALARIED_CATEGORIES:
        return 0.0
    return entry.hourly_rate or directory.hourly_rate_of(entry.worker_id)


def calculate_pay(hours: Hours, hourly_rate: float | None) -> MonetaryAmount:
    """
    Pay for a number of hours, in full precision.

    Formula: hours * hourly_rate. A missing or zero rate (salaried staff) gives 0,
    which is not an error.
    """
    if not hourly_rate:
        return 0.0
    return hours * hourly_rate


def round_money(amount: MonetaryAmount) -> MonetaryAmount:
    """Round to 2 decimals. Only call this when building output."""
    return round(amount, 2) + 0.0  # normalise -0.0
