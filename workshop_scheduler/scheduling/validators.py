"""Validators for planning actions.

Validation never raises and never mutates state: each function returns a
list of human-readable messages, empty when the action may proceed. The
caller decides whether to block.
"""

from datetime import date

from workshop_scheduler.scheduling.calendar_mapper import ensure_monday, is_monday, parse_iso_date
from workshop_scheduler.scheduling.engine import AssignmentState
from workshop_scheduler.scheduling.errors import InvalidDateError

START_DATE_REQUIRED = "Start date is required."
ASSIGNMENTS_REQUIRED = "Please assign staff to at least one workshop."
START_DATE_REQUIRED_FOR_AUTO_ASSIGN = "Please select a start date first"
LESSON_REQUIRED = "Please select a lesson"
WORKSHOP_NAME_REQUIRED = "Please enter a workshop name"
LESSON_NOT_FOUND = "Selected lesson not found"
WORKSHOP_SLOT_UNAVAILABLE = "Selected slot cannot hold a workshop"


def validate_start_date(start_date_iso: str | None) -> list[str]:
    """Validate a start date string, returning messages for missing or malformed dates."""
    if not start_date_iso:
        return [START_DATE_REQUIRED]
    try:
        parse_iso_date(start_date_iso)
    except InvalidDateError:
        return [f"Start date {start_date_iso!r} is not a valid date (expected YYYY-MM-DD)."]
    return []


def monday_warning(start_date: date) -> str | None:
    """Warning text for a non-Monday start date, None when it is a Monday."""
    if is_monday(start_date):
        return None
    return (
        f"Selected date {start_date.isoformat()} is not a Monday; "
        f"week 1 will start on {ensure_monday(start_date).isoformat()}."
    )


def validate_for_save(start_date_iso: str | None, state: AssignmentState) -> list[str]:
    """Validate that a schedule can be saved.

    Args:
        start_date_iso: Programme start date, None if not chosen
        state: Current assignment state

    Returns:
        Messages for every failed check (empty when the save may proceed)
    """
    errors = validate_start_date(start_date_iso)
    if not state.assignments:
        errors.append(ASSIGNMENTS_REQUIRED)
    return errors


def validate_workshop_request(
    lesson_id: str | None,
    workshop_name: str | None,
    lesson_exists: bool,
) -> list[str]:
    """Validate a request to create a workshop from a catalog lesson.

    Only the first failing check is reported.
    """
    if not lesson_id:
        return [LESSON_REQUIRED]
    if not workshop_name or not workshop_name.strip():
        return [WORKSHOP_NAME_REQUIRED]
    if not lesson_exists:
        return [LESSON_NOT_FOUND]
    return []
