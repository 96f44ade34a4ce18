# crewtime/core/config.py

import os
from typing import Final, Literal

# ==========================
# Environment
# ==========================

#: True when running in production (JSON logs, Sentry, strict CORS).
IS_PRODUCTION: Final[bool] = os.getenv("PRODUCTION", "false").lower() == "true"

#: SQLAlchemy URL for the timesheet store.
DATABASE_URL: Final[str] = os.getenv("DATABASE_URL", "sqlite:///./crewtime.db")

#: Directory for rotating log files.
LOG_DIR_NAME: Final[str] = os.getenv("LOG_DIR", "logs")


# ==========================
# Date and time formats
# ==========================

#: ISO-format for all date strings accepted and returned by the API.
DATE_FORMAT_ISO: Final[str] = "%Y-%m-%d"

#: Clock format for entry start/end times ("09:00").
TIME_FORMAT_HM: Final[str] = "%H:%M"

#: Clock format with seconds ("09:00:00"), also accepted on input.
TIME_FORMAT_HMS: Final[str] = "%H:%M:%S"


# ==========================
# Pagination and ranges
# ==========================

DEFAULT_PAGE_SIZE: Final[int] = 10

#: Upper bound for page size.
MAX_PAGE_SIZE: Final[int] = 100

#: Longest span (in days) the detailed weekly view will iterate over.
MAX_DETAIL_RANGE_DAYS: Final[int] = 366


# ==========================
# Negative durations
# ==========================

NegativeDurationPolicy = Literal["reject", "overnight"]

#: What to do when an entry's end_time is before its start_time.
#: "reject" raises InvalidDuration, "overnight" treats the pair as crossing midnight.
NEGATIVE_DURATION_POLICY: Final[str] = os.getenv("NEGATIVE_DURATION_POLICY", "reject").strip().lower()


def get_negative_duration_policy() -> NegativeDurationPolicy:
    """
    Return the configured negative duration policy.

    Unknown values fall back to "reject".
    """
    if NEGATIVE_DURATION_POLICY == "overnight":
        return "overnight"
    return "reject"
