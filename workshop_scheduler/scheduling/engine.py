"""Assignment engine - staff to segment mapping across the programme grid.

The engine is split in two layers:
- A pure core: functions from (AssignmentState, inputs) to a new AssignmentState
- AssignmentEngine: a thin mutable holder owned by the caller

Invariants:
- At most one SegmentAssignment per (segment, week, day)
- A SegmentAssignment never holds an empty staff set
- Break segments never receive assignments
- No staff member exceeds the weekly cap through auto-assign, nor through
  toggle when hard cap enforcement is active

Neither toggle nor auto-assign raises: lookup misses degrade to no-ops.
"""

from collections import Counter
from collections.abc import Callable, Iterable

from loguru import logger
from pydantic import BaseModel, ConfigDict

from workshop_scheduler.config.settings import CapEnforcement
from workshop_scheduler.scheduling.constants import DELIVERY_DAYS, WEEKLY_ASSIGNMENT_CAP
from workshop_scheduler.scheduling.template import find_segment, find_week
from workshop_scheduler.scheduling.types import (
    Programme,
    SegmentAssignment,
    Staff,
    Weekday,
)

AssignmentKey = tuple[str, int, Weekday]


class AssignmentState(BaseModel):
    """Immutable snapshot of every SegmentAssignment in a planning session."""

    model_config = ConfigDict(frozen=True)

    assignments: tuple[SegmentAssignment, ...] = ()

    def lookup(self, segment_id: str, week: int, day: Weekday | str) -> SegmentAssignment | None:
        return next(
            (a for a in self.assignments if a.segment_id == segment_id and a.week == week and a.day == day),
            None,
        )

    def for_week(self, week: int) -> list[SegmentAssignment]:
        return [a for a in self.assignments if a.week == week]

    def count_for(self, staff_id: str, week: int) -> int:
        """Number of segments in the week assigned to staff_id (segments, not days)."""
        return sum(1 for a in self.assignments if a.week == week and staff_id in a.staff_ids)

    def as_mapping(self) -> dict[AssignmentKey, frozenset[str]]:
        """Order-independent view: (segment, week, day) -> staff ids."""
        return {a.key: a.staff_ids for a in self.assignments}


# -----------------------------
# Pure core
# -----------------------------
def week_assignment_counts(state: AssignmentState, week: int) -> Counter[str]:
    counts: Counter[str] = Counter()
    for assignment in state.for_week(week):
        counts.update(assignment.staff_ids)
    return counts


def compute_disabled_staff(
    state: AssignmentState,
    week: int,
    cap: int = WEEKLY_ASSIGNMENT_CAP,
) -> set[str]:
    """Staff already holding cap or more assignments in the week."""
    return {staff_id for staff_id, count in week_assignment_counts(state, week).items() if count >= cap}


def _replace(state: AssignmentState, key: AssignmentKey, record: SegmentAssignment | None) -> AssignmentState:
    """Swap the record at key for record (None deletes it), keeping insertion order."""
    assignments: list[SegmentAssignment] = []
    for existing in state.assignments:
        if existing.key == key:
            if record is not None:
                assignments.append(record)
        else:
            assignments.append(existing)
    return AssignmentState(assignments=tuple(assignments))


def toggle_assignment(
    state: AssignmentState,
    programme: Programme,
    segment_id: str,
    week: int,
    day: Weekday | str,
    staff_id: str,
    *,
    cap: int = WEEKLY_ASSIGNMENT_CAP,
    cap_enforcement: CapEnforcement = "hard",
) -> AssignmentState:
    """Assign staff_id to a segment, or unassign it if already assigned.

    Unassigning always succeeds. Assigning is rejected for Break segments,
    unknown segments, and (under hard enforcement) staff already at cap.

    Args:
        state: Current assignment state
        programme: Programme the segment belongs to
        segment_id: Target segment
        week: Programme week
        day: Delivery day
        staff_id: Staff member to toggle
        cap: Weekly cap
        cap_enforcement: "hard" rejects toggle-on at cap, "soft" leaves it to the caller

    Returns:
        New assignment state (the same object when nothing changed)
    """
    segment = find_segment(programme, segment_id, week, day)
    if segment is None:
        logger.debug(f"toggle_assignment: segment not found ({segment_id}, week={week}, day={day})")
        return state
    if not segment.is_assignable:
        logger.debug(f"toggle_assignment: {segment_id} is a {segment.category} segment, ignoring")
        return state

    weekday = Weekday(day)
    key: AssignmentKey = (segment_id, week, weekday)
    existing = state.lookup(segment_id, week, weekday)

    if existing is not None and staff_id in existing.staff_ids:
        remaining = existing.staff_ids - {staff_id}
        updated = existing.model_copy(update={"staff_ids": remaining}) if remaining else None
        logger.debug(f"Unassigned {staff_id} from {segment_id} (week={week}, day={weekday})")
        return _replace(state, key, updated)

    if cap_enforcement == "hard" and state.count_for(staff_id, week) >= cap:
        logger.info(f"Rejected assignment of {staff_id} to {segment_id}: weekly cap of {cap} reached in week {week}")
        return state

    logger.debug(f"Assigned {staff_id} to {segment_id} (week={week}, day={weekday})")
    if existing is not None:
        return _replace(state, key, existing.model_copy(update={"staff_ids": existing.staff_ids | {staff_id}}))

    created = SegmentAssignment(segment_id=segment_id, week=week, day=weekday, staff_ids=frozenset({staff_id}))
    return AssignmentState(assignments=(*state.assignments, created))


def _workshop_slots(programme: Programme, week: int) -> list[AssignmentKey]:
    """Non-Break segments of a week in day order, then within-day order."""
    programme_week = find_week(programme, week)
    if programme_week is None:
        return []

    day_order = {day: index for index, day in enumerate(DELIVERY_DAYS)}
    days = sorted(programme_week.days, key=lambda d: day_order.get(d.day, len(day_order)))
    return [
        (segment.id, week, day_plan.day)
        for day_plan in days
        for segment in day_plan.segments
        if segment.is_assignable
    ]


def auto_assign(
    state: AssignmentState,
    programme: Programme,
    week: int,
    available_staff: Iterable[Staff],
    *,
    cap: int = WEEKLY_ASSIGNMENT_CAP,
) -> AssignmentState:
    """Greedy single pass placing one staff member on every workshop of a week.

    For each non-Break segment, in order, the first staff member (in
    available_staff order) under the cap and not already on that segment
    is added. Running counts are seeded from existing assignments. Slots
    with no eligible staff are left as they are.

    Returns:
        New assignment state
    """
    staff = list(available_staff)
    counts = week_assignment_counts(state, week)
    records: dict[AssignmentKey, SegmentAssignment] = {a.key: a for a in state.assignments}
    placed = 0

    for key in _workshop_slots(programme, week):
        existing = records.get(key)
        candidate = next(
            (
                s
                for s in staff
                if counts[s.id] < cap and (existing is None or s.id not in existing.staff_ids)
            ),
            None,
        )
        if candidate is None:
            continue

        segment_id, _, day = key
        if existing is None:
            records[key] = SegmentAssignment(
                segment_id=segment_id, week=week, day=day, staff_ids=frozenset({candidate.id})
            )
        else:
            records[key] = existing.model_copy(update={"staff_ids": existing.staff_ids | {candidate.id}})
        counts[candidate.id] += 1
        placed += 1

    logger.debug(f"Auto-assign week {week}: placed {placed} staff across {len(records)} records")
    return AssignmentState(assignments=tuple(records.values()))


# -----------------------------
# Mutable holder
# -----------------------------
class AssignmentEngine:
    """Owns the assignment state of one planning session.

    Every state change is reported to on_change, which callers use for
    serialize-on-change persistence.
    """

    def __init__(
        self,
        programme: Programme,
        state: AssignmentState | None = None,
        *,
        cap: int = WEEKLY_ASSIGNMENT_CAP,
        cap_enforcement: CapEnforcement = "hard",
        on_change: Callable[[AssignmentState], None] | None = None,
    ) -> None:
        self.programme = programme
        self.cap = cap
        self.cap_enforcement = cap_enforcement
        self.on_change = on_change
        self._state = state if state is not None else AssignmentState()

    @property
    def state(self) -> AssignmentState:
        return self._state

    @property
    def assignments(self) -> list[SegmentAssignment]:
        return list(self._state.assignments)

    def _commit(self, new_state: AssignmentState) -> bool:
        if new_state == self._state:
            return False
        self._state = new_state
        if self.on_change is not None:
            self.on_change(new_state)
        return True

    def lookup(self, segment_id: str, week: int, day: Weekday | str) -> SegmentAssignment | None:
        return self._state.lookup(segment_id, week, day)

    def toggle(self, segment_id: str, week: int, day: Weekday | str, staff_id: str) -> bool:
        """Toggle staff_id on a segment. Returns True if the state changed."""
        return self._commit(
            toggle_assignment(
                self._state,
                self.programme,
                segment_id,
                week,
                day,
                staff_id,
                cap=self.cap,
                cap_enforcement=self.cap_enforcement,
            )
        )

    def auto_assign(self, week: int, available_staff: Iterable[Staff]) -> bool:
        """Run the greedy pass for one week. Returns True if the state changed."""
        return self._commit(auto_assign(self._state, self.programme, week, available_staff, cap=self.cap))

    def disabled_staff(self, week: int) -> set[str]:
        return compute_disabled_staff(self._state, week, self.cap)

    def week_counts(self, week: int) -> Counter[str]:
        return week_assignment_counts(self._state, week)

    def replace_state(self, state: AssignmentState) -> None:
        """Swap in a restored state without notifying on_change."""
        self._state = state
