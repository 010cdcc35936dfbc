"""Lesson-cohort mapping store.

Keeps the list of lesson-to-cohort mappings as a single blob. Reads and
writes are best-effort: store failures are logged and the in-memory list
stays authoritative for the session.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from loguru import logger
from pydantic import TypeAdapter

from workshop_scheduler.catalog.types import LessonCohortMapping
from workshop_scheduler.persistence.blob_store import BlobStore

LESSON_COHORT_MAPPINGS_KEY = "catalog:lesson-cohort-mappings"

PRODUCT_REQUIRED = "Please select a Product"
ACADEMY_REQUIRED = "Please select an Academy"
LESSONS_REQUIRED = "Please select at least one Lesson"
COHORT_REQUIRED = "Please select a Cohort"

_mapping_list = TypeAdapter(list[LessonCohortMapping])


def validate_mapping_request(
    product_id: str | None,
    academy_id: str | None,
    lesson_ids: list[str],
    cohort_id: str | None,
) -> list[str]:
    """Validate a mapping request; only the first failing check is reported."""
    if not product_id:
        return [PRODUCT_REQUIRED]
    if not academy_id:
        return [ACADEMY_REQUIRED]
    if not lesson_ids:
        return [LESSONS_REQUIRED]
    if not cohort_id:
        return [COHORT_REQUIRED]
    return []


@dataclass
class MappingResult:
    mapping: LessonCohortMapping | None = None
    errors: list[str] = field(default_factory=list)


class LessonMappingStore:
    def __init__(self, store: BlobStore) -> None:
        self._store = store
        self._mappings = self._load()

    def _load(self) -> list[LessonCohortMapping]:
        try:
            return _mapping_list.validate_python(self._store.get(LESSON_COHORT_MAPPINGS_KEY) or [])
        except Exception as e:
            logger.bind(key=LESSON_COHORT_MAPPINGS_KEY, error=str(e)).warning("Failed to load lesson-cohort mappings")
            return []

    def _save(self) -> None:
        try:
            self._store.set(
                LESSON_COHORT_MAPPINGS_KEY,
                _mapping_list.dump_python(self._mappings, mode="json", by_alias=True),
            )
        except Exception as e:
            logger.bind(key=LESSON_COHORT_MAPPINGS_KEY, error=str(e)).warning("Failed to save lesson-cohort mappings")

    def list_mappings(self) -> list[LessonCohortMapping]:
        return list(self._mappings)

    def mappings_for(self, product_id: str, academy_id: str) -> list[LessonCohortMapping]:
        return [m for m in self._mappings if m.product_id == product_id and m.academy_id == academy_id]

    def add_mapping(
        self,
        product_id: str | None,
        academy_id: str | None,
        lesson_ids: list[str],
        cohort_id: str | None,
    ) -> MappingResult:
        """Validate and record a new lesson-cohort mapping."""
        errors = validate_mapping_request(product_id, academy_id, lesson_ids, cohort_id)
        if errors:
            return MappingResult(errors=errors)

        mapping = LessonCohortMapping(
            id=f"mapping-{uuid.uuid4().hex[:12]}",
            lesson_ids=list(lesson_ids),
            cohort_id=cohort_id,
            product_id=product_id,
            academy_id=academy_id,
            created_at=datetime.now(timezone.utc).isoformat(),
            mapped_lesson_count=len(lesson_ids),
        )
        self._mappings.append(mapping)
        self._save()
        logger.info(f"Mapped {mapping.mapped_lesson_count} lesson(s) to cohort {cohort_id}")
        return MappingResult(mapping=mapping)

    def remove_mapping(self, mapping_id: str) -> bool:
        remaining = [m for m in self._mappings if m.id != mapping_id]
        if len(remaining) == len(self._mappings):
            return False
        self._mappings = remaining
        self._save()
        return True
