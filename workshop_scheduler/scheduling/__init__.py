"""Scheduling module - programme grid, staff availability and assignment engine.

This module provides:
- Calendar mapping between programme coordinates and dates
- The canonical 10-week programme template
- Staff availability filtering
- The assignment engine (pure core and mutable holder)
- Week completion tracking

PlanningSession lives in workshop_scheduler.scheduling.session.
"""

from workshop_scheduler.scheduling.availability import (
    AvailabilityStatus,
    availability_status,
    filter_available,
    group_by_role,
)
from workshop_scheduler.scheduling.calendar_mapper import (
    ensure_monday,
    generate_date_mapping,
    is_staff_available_for_programme,
    map_weekday_to_date,
)
from workshop_scheduler.scheduling.completion import completed_weeks, is_week_complete
from workshop_scheduler.scheduling.customization import WorkshopCustomizationStore
from workshop_scheduler.scheduling.engine import (
    AssignmentEngine,
    AssignmentState,
    auto_assign,
    compute_disabled_staff,
    toggle_assignment,
)
from workshop_scheduler.scheduling.template import build_programme_template
from workshop_scheduler.scheduling.types import (
    Programme,
    ProgrammeWeek,
    Segment,
    SegmentAssignment,
    SegmentCategory,
    Staff,
    StaffRole,
    Weekday,
)

__all__ = [
    "AssignmentEngine",
    "AssignmentState",
    "AvailabilityStatus",
    "Programme",
    "ProgrammeWeek",
    "Segment",
    "SegmentAssignment",
    "SegmentCategory",
    "Staff",
    "StaffRole",
    "Weekday",
    "WorkshopCustomizationStore",
    "auto_assign",
    "availability_status",
    "build_programme_template",
    "completed_weeks",
    "compute_disabled_staff",
    "ensure_monday",
    "filter_available",
    "generate_date_mapping",
    "group_by_role",
    "is_staff_available_for_programme",
    "is_week_complete",
    "map_weekday_to_date",
    "toggle_assignment",
]
