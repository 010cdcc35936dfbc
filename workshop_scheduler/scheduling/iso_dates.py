"""ISO calendar date parsing shared by the domain models and the calendar mapper."""

from datetime import date, datetime

from workshop_scheduler.scheduling.errors import InvalidDateError


def parse_iso_date(value: str | date) -> date:
    """Parse a YYYY-MM-DD string (or pass a date through).

    A trailing ``T...`` time component is ignored; anything else after the
    date makes the value invalid.

    Raises:
        InvalidDateError: If value is not an ISO calendar date
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip().split("T", 1)[0])
    except ValueError as e:
        raise InvalidDateError(f"Expected ISO date string, got: {value!r}") from e
