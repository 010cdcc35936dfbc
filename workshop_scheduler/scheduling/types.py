"""Scheduling domain types.

This module defines the data structures of the 10-week programme scheduler:
- Programme shape (segments, day plans, weeks, fixed time slots)
- Staff reference data (role, weekly windows, availability period)
- Assignment records keyed by (segment, week, day)
- Save payload and date mapping exchanged with external collaborators

Models that cross the library boundary serialize with the camelCase field
names used by the UI shell and the submission backend.
"""

from enum import StrEnum
from typing import assert_never

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from workshop_scheduler.scheduling.iso_dates import parse_iso_date


class Weekday(StrEnum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


class SegmentCategory(StrEnum):
    WORKSHOP = "Workshop"
    BREAK = "Break"
    SPORT = "Sport"
    QUALIFICATION = "Qualification"
    EMPLOYABILITY = "Employability"


class StaffRole(StrEnum):
    COACH = "Coach"
    FACILITATOR = "Facilitator"
    COORDINATOR = "Coordinator"


def is_assignable_category(category: SegmentCategory) -> bool:
    """Return whether staff may be assigned to a segment of this category.

    Matching is exhaustive so a new category must be classified here
    before it can reach the assignment engine.
    """
    match category:
        case SegmentCategory.BREAK:
            return False
        case (
            SegmentCategory.WORKSHOP
            | SegmentCategory.SPORT
            | SegmentCategory.QUALIFICATION
            | SegmentCategory.EMPLOYABILITY
        ):
            return True
        case _:
            assert_never(category)


class CamelModel(BaseModel):
    """Base for models exchanged as JSON with the UI shell or backend."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -----------------------------
# Programme shape
# -----------------------------
class TimeSlot(CamelModel):
    """Fixed daily time window shared across all weeks."""

    model_config = ConfigDict(frozen=True)

    id: str
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    duration_minutes: int = Field(gt=0)


class Segment(CamelModel):
    """One timetabled activity block within a single day.

    Attributes:
        id: Stable identifier, unique within the template
        title: Display title (placeholder or workshop name)
        duration_minutes: Positive duration in minutes
        category: Closed category set; Break segments are never assignable
        time_slot_id: Fixed daily slot the segment occupies
        lesson_id: Attached catalog lesson, if customised
        lesson_name: Attached catalog lesson title, if customised
    """

    id: str
    title: str
    duration_minutes: int = Field(gt=0)
    category: SegmentCategory
    time_slot_id: str | None = None
    lesson_id: str | None = None
    lesson_name: str | None = None

    @property
    def is_assignable(self) -> bool:
        return is_assignable_category(self.category)


class DayPlan(CamelModel):
    day: Weekday
    segments: list[Segment]


class ProgrammeWeek(CamelModel):
    week: int = Field(ge=1)
    days: list[DayPlan]


Programme = list[ProgrammeWeek]


class Cohort(CamelModel):
    """Group of participants the programme schedule is built for."""

    cohort_id: int
    cohort_code: str
    academy_id: int
    day_of_week: str | None = None
    session_time: str | None = None
    max_participants: int | None = None


# -----------------------------
# Staff reference data
# -----------------------------
class AvailabilityWindow(CamelModel):
    day: Weekday
    start: str  # HH:MM
    end: str  # HH:MM


class AvailabilityPeriod(CamelModel):
    start_date_iso: str | None = Field(default=None, alias="startDateISO")
    end_date_iso: str | None = Field(default=None, alias="endDateISO")

    @field_validator("start_date_iso", "end_date_iso")
    @classmethod
    def _check_iso_date(cls, value: str | None) -> str | None:
        # Blank means no restriction.
        if value is None or not value.strip():
            return None
        return parse_iso_date(value).isoformat()


class Staff(CamelModel):
    """Member of the delivery team. Immutable for a planning session."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    role: StaffRole
    availability: tuple[AvailabilityWindow, ...] = ()
    availability_period: AvailabilityPeriod | None = None
    hubs: tuple[str, ...] = ()


# -----------------------------
# Assignments
# -----------------------------
class SegmentAssignment(CamelModel):
    """Staff assigned to one segment in one week/day.

    A record never holds an empty staff set: removing the last staff member
    deletes the record, and absence of a record means "unassigned".
    """

    model_config = ConfigDict(frozen=True)

    segment_id: str
    week: int = Field(ge=1)
    day: Weekday
    staff_ids: frozenset[str] = Field(min_length=1)

    @property
    def key(self) -> tuple[str, int, Weekday]:
        return (self.segment_id, self.week, self.day)

    @field_serializer("staff_ids")
    def _serialize_staff_ids(self, staff_ids: frozenset[str]) -> list[str]:
        return sorted(staff_ids)


# -----------------------------
# Calendar mapping and save payload
# -----------------------------
class DateMappingEntry(CamelModel):
    week: int
    day: Weekday
    date_iso: str = Field(alias="dateISO")


class DateMapping(CamelModel):
    adjusted_start: str
    mapping: list[DateMappingEntry]


class WorkshopCustomisation(CamelModel):
    """Lesson attached to a template workshop slot."""

    segment_id: str
    week: int
    day: Weekday
    title: str
    lesson_id: str
    lesson_name: str
    category: SegmentCategory = SegmentCategory.WORKSHOP


class SchedulePayload(CamelModel):
    """Payload produced on save for the external submission backend."""

    cohort_id: int
    start_date_iso: str = Field(alias="startDateISO")
    assignments: list[SegmentAssignment]
    date_mapping: list[DateMappingEntry]
    customisations: list[WorkshopCustomisation] = Field(default_factory=list)
