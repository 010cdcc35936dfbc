"""Planning session - the caller-owned holder for one cohort's schedule.

Wires the programme template, customization store, availability filter,
assignment engine and completion tracker together under one set of
policies, and serializes state to a blob store after every change.
Presentation layers read derived views from the session and mutate it
only through its named operations.
"""

from dataclasses import dataclass, field
from datetime import date

from loguru import logger

from workshop_scheduler.catalog.service import LessonCatalog
from workshop_scheduler.config.settings import Settings, settings
from workshop_scheduler.persistence.blob_store import BlobStore
from workshop_scheduler.persistence.snapshot import PlanningSnapshot, load_snapshot, save_snapshot
from workshop_scheduler.scheduling.availability import filter_available
from workshop_scheduler.scheduling.calendar_mapper import ensure_monday, generate_date_mapping, parse_iso_date, to_iso
from workshop_scheduler.scheduling.completion import completed_weeks, is_week_complete
from workshop_scheduler.scheduling.customization import WorkshopCustomizationStore
from workshop_scheduler.scheduling.engine import AssignmentEngine, AssignmentState
from workshop_scheduler.scheduling.errors import InvalidDateError
from workshop_scheduler.scheduling.template import find_segment
from workshop_scheduler.scheduling.types import (
    Cohort,
    DateMapping,
    Programme,
    SchedulePayload,
    SegmentAssignment,
    Staff,
    Weekday,
)
from workshop_scheduler.scheduling.validators import (
    START_DATE_REQUIRED_FOR_AUTO_ASSIGN,
    WORKSHOP_SLOT_UNAVAILABLE,
    monday_warning,
    validate_for_save,
    validate_start_date,
    validate_workshop_request,
)
from workshop_scheduler.scheduling.workload import StaffWeekLoad, staff_week_loads


@dataclass
class SaveResult:
    """Outcome of preparing a save: a payload, or the messages blocking it."""

    payload: SchedulePayload | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.payload is not None


class PlanningSession:
    def __init__(
        self,
        cohort: Cohort,
        staff: list[Staff],
        *,
        catalog: LessonCatalog | None = None,
        store: BlobStore | None = None,
        config: Settings | None = None,
        programme: Programme | None = None,
    ) -> None:
        config = config or settings
        self.cohort = cohort
        self.staff = list(staff)
        self.catalog = catalog
        self.store = store
        self.monday_policy = config.monday_policy
        self.symmetric_availability = config.symmetric_availability_check
        self.persist_on_change = config.persist_on_change
        self.start_date_iso: str | None = None
        self._log = logger.bind(cohort=cohort.cohort_id)

        self.customization = WorkshopCustomizationStore(programme)
        self.engine = AssignmentEngine(
            self.customization.programme,
            cap=config.weekly_assignment_cap,
            cap_enforcement=config.cap_enforcement,
            on_change=lambda _state: self._persist(),
        )

    @classmethod
    def restore(
        cls,
        cohort: Cohort,
        staff: list[Staff],
        store: BlobStore,
        **kwargs,
    ) -> "PlanningSession":
        """Rebuild a session from the cohort's stored snapshot, or start fresh."""
        session = cls(cohort, staff, store=store, **kwargs)
        snapshot = load_snapshot(store, cohort.cohort_id)
        if snapshot is None:
            return session

        session.start_date_iso = snapshot.start_date_iso
        for customisation in snapshot.customisations:
            session.customization.apply_customisation(customisation)

        kept = [a for a in snapshot.assignments if session._is_assignable_slot(a)]
        if len(kept) != len(snapshot.assignments):
            session._log.warning(
                f"Dropped {len(snapshot.assignments) - len(kept)} stored assignment(s) "
                f"that no longer match an assignable segment"
            )
        session.engine.replace_state(AssignmentState(assignments=tuple(kept)))
        session._log.info(f"Restored planning session with {len(kept)} assignment(s)")
        return session

    def _is_assignable_slot(self, assignment: SegmentAssignment) -> bool:
        segment = find_segment(self.programme, assignment.segment_id, assignment.week, assignment.day)
        return segment is not None and segment.is_assignable

    @property
    def programme(self) -> Programme:
        return self.customization.programme

    @property
    def assignments(self) -> list[SegmentAssignment]:
        return self.engine.assignments

    # -----------------------------
    # Start date
    # -----------------------------
    def set_start_date(self, value: str | date | None) -> list[str]:
        """Set (or clear) the programme start date.

        Under the "warn" policy the literal date is kept and a warning is
        returned for non-Mondays; under "normalize" the stored date is moved
        to the next Monday and the same warning is returned for information.

        Returns:
            Warning or validation messages (empty for a Monday)
        """
        if not value:
            self.start_date_iso = None
            self._persist()
            return []

        try:
            parsed = parse_iso_date(value)
        except InvalidDateError:
            return validate_start_date(str(value))

        warning = monday_warning(parsed)
        if warning:
            self._log.warning(f"{warning} (policy={self.monday_policy})")
        if self.monday_policy == "normalize":
            parsed = ensure_monday(parsed)

        self.start_date_iso = to_iso(parsed)
        self._persist()
        return [warning] if warning else []

    def date_mapping(self) -> DateMapping | None:
        if not self.start_date_iso:
            return None
        return generate_date_mapping(self.start_date_iso)

    # -----------------------------
    # Staff and assignments
    # -----------------------------
    def available_staff(self) -> list[Staff]:
        return filter_available(self.staff, self.start_date_iso, symmetric=self.symmetric_availability)

    def toggle_assignment(self, segment_id: str, week: int, day: Weekday | str, staff_id: str) -> bool:
        """Toggle a staff member on a segment.

        Adding requires the staff member to be available for the programme
        (so nothing can be assigned before a start date is chosen); removing
        is always allowed.

        Returns:
            True if the assignment state changed
        """
        existing = self.engine.lookup(segment_id, week, day)
        is_removal = existing is not None and staff_id in existing.staff_ids
        if not is_removal and staff_id not in {s.id for s in self.available_staff()}:
            self._log.debug(f"toggle_assignment: {staff_id} is not available for this programme")
            return False
        return self.engine.toggle(segment_id, week, day, staff_id)

    def auto_assign(self, week: int) -> list[str]:
        """Run the greedy auto-assign pass for a week.

        Returns:
            Messages explaining why nothing was attempted (empty on success)
        """
        if not self.start_date_iso:
            return [START_DATE_REQUIRED_FOR_AUTO_ASSIGN]
        self.engine.auto_assign(week, self.available_staff())
        return []

    def disabled_staff(self, week: int) -> set[str]:
        return self.engine.disabled_staff(week)

    def staff_loads(self, week: int) -> list[StaffWeekLoad]:
        return staff_week_loads(self.engine.state, week, self.available_staff(), self.engine.cap)

    def is_week_complete(self, week: int) -> bool:
        return is_week_complete(self.programme, self.engine.state, week)

    def completed_weeks(self) -> dict[int, bool]:
        return completed_weeks(self.programme, self.engine.state)

    # -----------------------------
    # Workshop customization
    # -----------------------------
    def attach_lesson(
        self,
        segment_id: str,
        week: int,
        day: Weekday | str,
        lesson_id: str,
        lesson_name: str,
        workshop_title: str,
        *,
        force_workshop: bool = False,
    ) -> bool:
        changed = self.customization.attach_lesson(
            segment_id, week, day, lesson_id, lesson_name, workshop_title, force_workshop=force_workshop
        )
        if changed:
            self._persist()
        return changed

    def detach_lesson(self, segment_id: str, week: int, day: Weekday | str) -> bool:
        changed = self.customization.detach_lesson(segment_id, week, day)
        if changed:
            self._persist()
        return changed

    def create_workshop(
        self,
        segment_id: str,
        week: int,
        day: Weekday | str,
        lesson_id: str | None,
        workshop_name: str | None,
    ) -> list[str]:
        """Create a workshop in a template slot from a catalog lesson.

        Returns:
            Validation messages (empty when the workshop was created)
        """
        lesson = self.catalog.get_lesson(lesson_id) if self.catalog is not None and lesson_id else None
        errors = validate_workshop_request(lesson_id, workshop_name, lesson is not None)
        if errors:
            return errors

        attached = self.attach_lesson(
            segment_id,
            week,
            day,
            lesson.id,
            lesson.title,
            workshop_name.strip(),
            force_workshop=True,
        )
        if not attached:
            return [WORKSHOP_SLOT_UNAVAILABLE]
        return []

    # -----------------------------
    # Save and persistence
    # -----------------------------
    def validate_for_save(self) -> list[str]:
        return validate_for_save(self.start_date_iso, self.engine.state)

    def prepare_save(self) -> SaveResult:
        """Build the save payload, or return the messages that block it."""
        errors = self.validate_for_save()
        if errors:
            return SaveResult(errors=errors)

        mapping = generate_date_mapping(self.start_date_iso)
        payload = SchedulePayload(
            cohort_id=self.cohort.cohort_id,
            start_date_iso=self.start_date_iso,
            assignments=self.engine.assignments,
            date_mapping=mapping.mapping,
            customisations=self.customization.customisations(),
        )
        self._log.info(
            f"Prepared schedule payload for cohort {self.cohort.cohort_id}: "
            f"{len(payload.assignments)} assignment(s), week 1 starts {mapping.adjusted_start}"
        )
        return SaveResult(payload=payload)

    def snapshot(self) -> PlanningSnapshot:
        return PlanningSnapshot(
            cohort_id=self.cohort.cohort_id,
            start_date_iso=self.start_date_iso,
            assignments=self.engine.assignments,
            customisations=self.customization.customisations(),
        )

    def _persist(self) -> None:
        if self.store is None or not self.persist_on_change:
            return
        save_snapshot(self.store, self.snapshot())
