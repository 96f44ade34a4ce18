# crewtime/core/exceptions.py
"""
Domain errors raised by the timesheet engine.

Helpers raise these unchanged; only the HTTP layer in crewtime.main maps
them to status codes.
"""


class TimesheetError(Exception):
    """Base class for all timesheet engine errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidDateRange(TimesheetError, ValueError):
    """Malformed, missing or inverted dates."""


class InvalidDuration(TimesheetError, ValueError):
    """Negative or unparsable duration."""


class StoreUnavailable(TimesheetError):
    """The timesheet store or worker directory failed."""


class NotFound(TimesheetError):
    """Requested worker or job does not exist."""


class InvalidPagination(TimesheetError, ValueError):
    """Page or page size out of bounds."""
