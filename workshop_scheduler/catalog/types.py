"""Lesson catalog types.

The scheduler only consumes ids and display names from the catalog; the
remaining fields are carried through for the UI shell.
"""

from pydantic import Field

from workshop_scheduler.scheduling.types import CamelModel


class Product(CamelModel):
    id: str
    name: str
    description: str | None = None


class Academy(CamelModel):
    id: str
    product_id: str
    name: str
    description: str | None = None


class Lesson(CamelModel):
    id: str
    title: str
    product_id: str
    academy_id: str | None = None
    code: str | None = None
    duration: int | None = Field(default=None, gt=0)  # minutes
    description: str | None = None
    learning_objectives: list[str] = Field(default_factory=list)


class LessonCohortMapping(CamelModel):
    """Lessons mapped to a cohort for programme delivery."""

    id: str
    lesson_ids: list[str]
    cohort_id: str
    product_id: str
    academy_id: str
    created_at: str  # ISO datetime
    mapped_lesson_count: int
