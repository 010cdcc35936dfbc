"""Calendar mapping for the programme grid.

Deterministic, stateless helpers that project {week, weekday} coordinates
onto calendar dates. Week 1 starts on a Monday; delivery days run Monday
to Thursday.
"""

from datetime import date, timedelta

from workshop_scheduler.scheduling.constants import DELIVERY_DAYS, PROGRAMME_SPAN_DAYS, PROGRAMME_WEEKS
from workshop_scheduler.scheduling.iso_dates import parse_iso_date
from workshop_scheduler.scheduling.types import DateMapping, DateMappingEntry, Weekday

_WEEKDAY_INDEX: dict[Weekday, int] = {day: index for index, day in enumerate(Weekday)}


def to_iso(d: date) -> str:
    return d.isoformat()


def weekday_of(d: date) -> Weekday:
    return list(Weekday)[d.weekday()]


def is_monday(d: date) -> bool:
    return d.weekday() == 0


def ensure_monday(d: date) -> date:
    """Return d if it is a Monday, otherwise the next Monday after it."""
    if is_monday(d):
        return d
    # Sunday advances one day; every other day advances to the following Monday
    return d + timedelta(days=7 - d.weekday())


def default_start_monday(today: date | None = None) -> date:
    """Default programme start: today if Monday, otherwise the upcoming Monday."""
    return ensure_monday(today or date.today())


def weekday_offset(weekday: Weekday) -> int:
    """Days from Monday to weekday (Monday=0 .. Thursday=3)."""
    return _WEEKDAY_INDEX[weekday]


def map_weekday_to_date(start_monday: date, week: int, weekday: Weekday) -> date:
    """Map a programme week and weekday to a calendar date.

    Args:
        start_monday: Monday of Week 1
        week: Week number (1-based)
        weekday: Delivery day

    Returns:
        Calendar date of that week/day

    Raises:
        ValueError: If week is not positive
    """
    if week < 1:
        raise ValueError(f"week must be >= 1, got {week}")
    return start_monday + timedelta(days=(week - 1) * 7 + weekday_offset(weekday))


def programme_end(programme_start: date) -> date:
    return programme_start + timedelta(days=PROGRAMME_SPAN_DAYS)


def generate_date_mapping(start_date: str | date) -> DateMapping:
    """Build the week x delivery-day -> date table for the whole programme.

    The start date is normalised to a Monday first. Entries are ordered
    week-major, weekday-minor (40 entries for 10 weeks x 4 days).
    """
    adjusted_start = ensure_monday(parse_iso_date(start_date))
    mapping = [
        DateMappingEntry(
            week=week,
            day=weekday,
            date_iso=to_iso(map_weekday_to_date(adjusted_start, week, weekday)),
        )
        for week in range(1, PROGRAMME_WEEKS + 1)
        for weekday in DELIVERY_DAYS
    ]
    return DateMapping(adjusted_start=to_iso(adjusted_start), mapping=mapping)


def is_staff_available_for_programme(
    staff_availability_start_iso: str | None,
    programme_start_iso: str,
    staff_availability_end_iso: str | None = None,
    *,
    symmetric: bool = False,
) -> bool:
    """Check if a staff member is available for at least part of the programme.

    By default only the staff availability start is compared with the
    programme end (start + 70 days); the staff availability end is ignored.
    With symmetric=True the availability end must also fall on or after the
    programme start.

    Args:
        staff_availability_start_iso: Staff availability start, None for no restriction
        programme_start_iso: Programme start date
        staff_availability_end_iso: Optional staff availability end
        symmetric: Also check the availability end against the programme start

    Returns:
        True if the staff member may be scheduled for this programme
    """
    programme_start = parse_iso_date(programme_start_iso)

    if staff_availability_start_iso:
        staff_start = parse_iso_date(staff_availability_start_iso)
        if staff_start > programme_end(programme_start):
            return False

    if symmetric and staff_availability_end_iso:
        staff_end = parse_iso_date(staff_availability_end_iso)
        if staff_end < programme_start:
            return False

    return True
