# crewtime/core/constants.py
from typing import Final

# ==========================
# Weekdays
# ==========================

#: Column keys for Monday..Sunday, indexed by date.weekday().
WEEKDAY_KEYS: Final[tuple[str, ...]] = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")

#: Display names, same order as WEEKDAY_KEYS.
WEEKDAY_NAMES: Final[tuple[str, ...]] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)

DAYS_PER_WEEK: Final[int] = 7


# ==========================
# Sentinels
# ==========================

#: Job title on a detailed-view row for a day without any entries.
LEAVE_LABEL: Final[str] = "Leave"

#: Day column value in the weekly dashboard for a day without hours.
#: Kept separate from LEAVE_LABEL, consumers tell the two views apart by it.
ZERO_HOURS_LABEL: Final[str] = "0h"

#: Title used for entries without a job reference.
GENERAL_WORK_TITLE: Final[str] = "General Work"


# ==========================
# Worker categories
# ==========================

CATEGORY_STAFF: Final[str] = "staff"
CATEGORY_LABOR: Final[str] = "labor"
CATEGORY_LEAD_LABOR: Final[str] = "lead_labor"

#: Categories paid a salary rather than per hour. Their pay is always 0 here.
SALARIED_CATEGORIES: Final[tuple[str, ...]] = (CATEGORY_STAFF,)


# ==========================
# Status
# ==========================

STATUS_PENDING: Final[str] = "pending"
STATUS_APPROVED: Final[str] = "approved"
STATUS_REJECTED: Final[str] = "rejected"
