"""Programme constants - single source of truth.

All programme-shape and cap logic must import from here.
"""

from workshop_scheduler.scheduling.types import TimeSlot, Weekday

PROGRAMME_WEEKS = 10
PROGRAMME_SPAN_DAYS = 70  # 10 weeks

DELIVERY_DAYS: tuple[Weekday, ...] = (
    Weekday.MONDAY,
    Weekday.TUESDAY,
    Weekday.WEDNESDAY,
    Weekday.THURSDAY,
)

WEEKLY_ASSIGNMENT_CAP = 4

PLACEHOLDER_WORKSHOP_TITLE = "Workshop"

TIME_SLOTS: tuple[TimeSlot, ...] = (
    TimeSlot(id="slot-morning", start_time="10:00", end_time="12:00", duration_minutes=120),
    TimeSlot(id="slot-break", start_time="12:00", end_time="12:15", duration_minutes=15),
    TimeSlot(id="slot-afternoon", start_time="12:15", end_time="13:15", duration_minutes=60),
)

PLANNING_STATE_KEY_PREFIX = "planner:state"
