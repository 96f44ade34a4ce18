import datetime

from crewtime.core.config import DATE_FORMAT_ISO, MAX_DETAIL_RANGE_DAYS, MAX_PAGE_SIZE
from crewtime.core.exceptions import InvalidDateRange, InvalidPagination


def parse_iso_date(value: str | datetime.date | None, field_name: str = "date") -> datetime.date | None:
    """
    Parse a "YYYY-MM-DD" string.

    None and empty strings mean "not supplied" and give None back.

    Raises:
        InvalidDateRange: If the value is not a valid ISO calendar date
    """
    if value is None:
        return None
    if isinstance(value, datetime.datetime):
        return value.date()
    if isinstance(value, datetime.date):
        return value

    s = str(value).strip()
    if not s:
        return None
    try:
        return datetime.datetime.strptime(s, DATE_FORMAT_ISO).date()
    except ValueError as e:
        raise InvalidDateRange(f"Invalid {field_name}: {value!r}, expected YYYY-MM-DD") from e


def validate_pagination(page: int, page_size: int) -> tuple[int, int]:
    """
    Ensure page >= 1 and 1 <= page_size <= MAX_PAGE_SIZE.

    Returns (page, page_size) unchanged if valid, otherwise raises
    InvalidPagination.
    """
    if isinstance(page, bool) or not isinstance(page, int) or page < 1:
        raise InvalidPagination("Page must be a positive number")
    if isinstance(page_size, bool) or not isinstance(page_size, int) or not 1 <= page_size <= MAX_PAGE_SIZE:
        raise InvalidPagination(f"Limit must be between 1 and {MAX_PAGE_SIZE}")
    return page, page_size


def validate_required_range(
    start_date: str | datetime.date | None,
    end_date: str | datetime.date | None,
) -> tuple[datetime.date, datetime.date]:
    """
    Validate a literal range where both ends are required.

    - both must be present and valid ISO dates
    - end_date may not be before start_date
    - the span may not exceed MAX_DETAIL_RANGE_DAYS
    """
    start = parse_iso_date(start_date, "start_date")
    end = parse_iso_date(end_date, "end_date")

    if start is None or end is None:
        raise InvalidDateRange("start_date and end_date are required")
    if end < start:
        raise InvalidDateRange(f"end_date {end} is before start_date {start}")
    if (end - start).days + 1 > MAX_DETAIL_RANGE_DAYS:
        raise InvalidDateRange(f"Date range may span at most {MAX_DETAIL_RANGE_DAYS} days")
    return start, end
