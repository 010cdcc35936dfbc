"""Workshop customization store.

Attaches catalog lessons to template workshop slots for the current
planning session, and reverts them to the placeholder on detach. Segment
identity, duration and time slot never change; only title, lesson_id and
lesson_name (and, for catalog-driven attaches, the category) do.
"""

from loguru import logger

from workshop_scheduler.scheduling.constants import PLACEHOLDER_WORKSHOP_TITLE
from workshop_scheduler.scheduling.template import build_programme_template, find_segment
from workshop_scheduler.scheduling.types import (
    Programme,
    SegmentCategory,
    Weekday,
    WorkshopCustomisation,
)


class WorkshopCustomizationStore:
    """Owns the session's programme and its lesson attachments."""

    def __init__(self, programme: Programme | None = None) -> None:
        self.programme: Programme = programme if programme is not None else build_programme_template()

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
        """Attach a lesson to a segment, turning a placeholder into a named workshop.

        Args:
            segment_id: Segment to customise
            week: Programme week
            day: Delivery day
            lesson_id: Catalog lesson id
            lesson_name: Catalog lesson title
            workshop_title: New display title for the segment
            force_workshop: Catalog-driven variant, also sets category to Workshop

        Returns:
            True if the segment was updated, False on lookup miss or Break segment
        """
        segment = find_segment(self.programme, segment_id, week, day)
        if segment is None:
            logger.debug(f"attach_lesson: segment not found ({segment_id}, week={week}, day={day})")
            return False
        if not segment.is_assignable:
            logger.debug(f"attach_lesson: ignoring break segment {segment_id}")
            return False

        segment.title = workshop_title
        segment.lesson_id = lesson_id
        segment.lesson_name = lesson_name
        if force_workshop:
            segment.category = SegmentCategory.WORKSHOP

        logger.debug(f"Attached lesson {lesson_id} to {segment_id} (week={week}, day={day})")
        return True

    def detach_lesson(self, segment_id: str, week: int, day: Weekday | str) -> bool:
        """Revert a customised segment to the placeholder workshop.

        Only segments with an attached lesson are touched.

        Returns:
            True if a lesson was detached
        """
        segment = find_segment(self.programme, segment_id, week, day)
        if segment is None or not segment.lesson_id:
            return False

        segment.title = PLACEHOLDER_WORKSHOP_TITLE
        segment.lesson_id = None
        segment.lesson_name = None

        logger.debug(f"Detached lesson from {segment_id} (week={week}, day={day})")
        return True

    def apply_customisation(self, customisation: WorkshopCustomisation) -> bool:
        """Re-apply a recorded customisation (used when restoring a snapshot)."""
        return self.attach_lesson(
            customisation.segment_id,
            customisation.week,
            customisation.day,
            customisation.lesson_id,
            customisation.lesson_name,
            customisation.title,
            force_workshop=customisation.category == SegmentCategory.WORKSHOP,
        )

    def customisations(self) -> list[WorkshopCustomisation]:
        """List every attached lesson in week, day and segment order."""
        return [
            WorkshopCustomisation(
                segment_id=segment.id,
                week=programme_week.week,
                day=day_plan.day,
                title=segment.title,
                lesson_id=segment.lesson_id,
                lesson_name=segment.lesson_name or "",
                category=segment.category,
            )
            for programme_week in self.programme
            for day_plan in programme_week.days
            for segment in day_plan.segments
            if segment.lesson_id
        ]
