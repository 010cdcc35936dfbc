"""Week completion tracking.

A week is complete when every non-Break segment in it has at least one
assigned staff member. A week without any non-Break segment is never
complete, so an empty week is not reported as done.
"""

from workshop_scheduler.scheduling.constants import PROGRAMME_WEEKS
from workshop_scheduler.scheduling.engine import AssignmentState
from workshop_scheduler.scheduling.template import find_week
from workshop_scheduler.scheduling.types import Programme


def is_week_complete(programme: Programme, state: AssignmentState, week: int) -> bool:
    programme_week = find_week(programme, week)
    if programme_week is None:
        return False

    workshops = [
        (segment.id, day_plan.day)
        for day_plan in programme_week.days
        for segment in day_plan.segments
        if segment.is_assignable
    ]
    if not workshops:
        return False

    assigned = {(a.segment_id, a.day) for a in state.for_week(week) if a.staff_ids}
    return all(workshop in assigned for workshop in workshops)


def completed_weeks(programme: Programme, state: AssignmentState) -> dict[int, bool]:
    """Completion flag for every programme week, keyed by week number."""
    return {week: is_week_complete(programme, state, week) for week in range(1, PROGRAMME_WEEKS + 1)}
