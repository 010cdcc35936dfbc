"""Staff availability filtering.

Decides which staff may be scheduled for a programme instance, and how
much of a delivery day each staff member's weekly window covers.
"""

from enum import StrEnum

from workshop_scheduler.scheduling.calendar_mapper import is_staff_available_for_programme
from workshop_scheduler.scheduling.types import Staff, StaffRole, Weekday

FULL_DAY_HOURS = 8


class AvailabilityStatus(StrEnum):
    AVAILABLE = "Available"
    LIMITED = "Limited"
    CONFLICT = "Conflict"


def filter_available(
    all_staff: list[Staff],
    programme_start_iso: str | None,
    *,
    symmetric: bool = False,
) -> list[Staff]:
    """Filter staff eligible for a programme starting on programme_start_iso.

    No staff are eligible until a start date exists, so nothing can be
    assigned before the programme is anchored in the calendar.

    Args:
        all_staff: Full staff roster, in display order
        programme_start_iso: Programme start date, or None if not chosen yet
        symmetric: Also exclude staff whose availability ended before the start

    Returns:
        Eligible staff, preserving roster order
    """
    if not programme_start_iso:
        return []

    return [
        s
        for s in all_staff
        if is_staff_available_for_programme(
            s.availability_period.start_date_iso if s.availability_period else None,
            programme_start_iso,
            s.availability_period.end_date_iso if s.availability_period else None,
            symmetric=symmetric,
        )
    ]


def availability_status(staff: Staff, day: Weekday) -> AvailabilityStatus:
    """Classify a staff member's weekly window for one day.

    Whole hours are compared: 8 or more is a full day, anything shorter is
    limited, and no window at all is a conflict.
    """
    window = next((w for w in staff.availability if w.day == day), None)
    if window is None:
        return AvailabilityStatus.CONFLICT

    start_hour = int(window.start.split(":")[0])
    end_hour = int(window.end.split(":")[0])
    if end_hour - start_hour >= FULL_DAY_HOURS:
        return AvailabilityStatus.AVAILABLE
    return AvailabilityStatus.LIMITED


def group_by_role(staff: list[Staff]) -> dict[StaffRole, list[Staff]]:
    """Bucket staff by role; every role key is present even when empty."""
    grouped: dict[StaffRole, list[Staff]] = {role: [] for role in StaffRole}
    for member in staff:
        grouped[member.role].append(member)
    return grouped
