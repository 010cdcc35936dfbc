"""Per-staff weekly workload view.

Read-only projection of the assignment state used by staff panels: how
many segments each staff member holds in a week, on which days, and
whether they have reached the cap.
"""

from dataclasses import dataclass

from workshop_scheduler.scheduling.constants import WEEKLY_ASSIGNMENT_CAP
from workshop_scheduler.scheduling.engine import AssignmentState
from workshop_scheduler.scheduling.types import Staff, StaffRole, Weekday


@dataclass(frozen=True)
class StaffWeekLoad:
    """Workload of one staff member in one programme week.

    Attributes:
        staff_id: Staff identifier
        name: Display name
        role: Staff role
        count: Segments assigned in the week
        cap: Weekly cap in force
        assigned_days: Delivery day of each assignment, in assignment order
    """

    staff_id: str
    name: str
    role: StaffRole
    count: int
    cap: int
    assigned_days: tuple[Weekday, ...]

    @property
    def at_cap(self) -> bool:
        return self.count >= self.cap


def staff_week_loads(
    state: AssignmentState,
    week: int,
    staff: list[Staff],
    cap: int = WEEKLY_ASSIGNMENT_CAP,
) -> list[StaffWeekLoad]:
    """Build the workload of every given staff member for a week, in roster order."""
    week_assignments = state.for_week(week)
    loads = []
    for member in staff:
        days = tuple(a.day for a in week_assignments if member.id in a.staff_ids)
        loads.append(
            StaffWeekLoad(
                staff_id=member.id,
                name=member.name,
                role=member.role,
                count=len(days),
                cap=cap,
                assigned_days=days,
            )
        )
    return loads
