"""Canonical programme template.

Builds the 10-week x Monday-Thursday grid. Every delivery day has a fixed
segment sequence bound to the shared daily time slots, reused identically
across all weeks. Each build returns independently-owned segment objects
so that customising one week never leaks into another (or into a later
build).
"""

from workshop_scheduler.scheduling.constants import PROGRAMME_WEEKS, TIME_SLOTS
from workshop_scheduler.scheduling.types import (
    DayPlan,
    Programme,
    ProgrammeWeek,
    Segment,
    SegmentCategory,
    Weekday,
)

# (id suffix, title, category, time slot)
_DAY_SEQUENCES: dict[Weekday, tuple[tuple[str, str, SegmentCategory, str], ...]] = {
    Weekday.MONDAY: (
        ("ws1", "Workshop 1", SegmentCategory.WORKSHOP, "slot-morning"),
        ("brk", "Break", SegmentCategory.BREAK, "slot-break"),
        ("ws2", "Workshop 2", SegmentCategory.WORKSHOP, "slot-afternoon"),
    ),
    Weekday.TUESDAY: (
        ("ws1", "Workshop 3", SegmentCategory.WORKSHOP, "slot-morning"),
        ("brk", "Break", SegmentCategory.BREAK, "slot-break"),
        ("ws2", "Workshop 4", SegmentCategory.WORKSHOP, "slot-afternoon"),
    ),
    Weekday.WEDNESDAY: (
        ("ws1", "Qualification Unit", SegmentCategory.QUALIFICATION, "slot-morning"),
        ("brk", "Break", SegmentCategory.BREAK, "slot-break"),
        ("ws2", "Functional Skills", SegmentCategory.EMPLOYABILITY, "slot-afternoon"),
    ),
    Weekday.THURSDAY: (
        ("ws1", "Employability", SegmentCategory.EMPLOYABILITY, "slot-morning"),
        ("brk", "Break", SegmentCategory.BREAK, "slot-break"),
        ("ws2", "Team Activity", SegmentCategory.SPORT, "slot-afternoon"),
    ),
}

_SLOT_DURATIONS = {slot.id: slot.duration_minutes for slot in TIME_SLOTS}


def segment_id_for(day: Weekday, suffix: str) -> str:
    """Build a segment id from the day abbreviation and ordinal suffix (e.g. "mon-ws1")."""
    return f"{day.value[:3].lower()}-{suffix}"


def _build_day(day: Weekday) -> DayPlan:
    segments = [
        Segment(
            id=segment_id_for(day, suffix),
            title=title,
            duration_minutes=_SLOT_DURATIONS[slot_id],
            category=category,
            time_slot_id=slot_id,
        )
        for suffix, title, category, slot_id in _DAY_SEQUENCES[day]
    ]
    return DayPlan(day=day, segments=segments)


def build_programme_template() -> Programme:
    """Build a fresh 10-week programme.

    Returns:
        Ten ProgrammeWeek objects (weeks 1..10), each with four DayPlans
    """
    return [
        ProgrammeWeek(week=week, days=[_build_day(day) for day in _DAY_SEQUENCES])
        for week in range(1, PROGRAMME_WEEKS + 1)
    ]


def find_week(programme: Programme, week: int) -> ProgrammeWeek | None:
    return next((w for w in programme if w.week == week), None)


def find_day(programme: Programme, week: int, day: Weekday | str) -> DayPlan | None:
    programme_week = find_week(programme, week)
    if programme_week is None:
        return None
    return next((d for d in programme_week.days if d.day == day), None)


def find_segment(programme: Programme, segment_id: str, week: int, day: Weekday | str) -> Segment | None:
    """Locate a segment by (segment id, week, day); None on any lookup miss."""
    day_plan = find_day(programme, week, day)
    if day_plan is None:
        return None
    return next((s for s in day_plan.segments if s.id == segment_id), None)


def segment_for_slot(day_plan: DayPlan, slot_id: str) -> Segment | None:
    """Return the segment occupying a fixed time slot on this day."""
    return next((s for s in day_plan.segments if s.time_slot_id == slot_id), None)
