"""Lesson catalog service.

Built-in reference lessons are combined with user-created lessons kept in
the blob store. Built-in ids take precedence on duplicates.
"""

from typing import Protocol

from loguru import logger
from pydantic import TypeAdapter

from workshop_scheduler.catalog.types import Academy, Lesson, Product
from workshop_scheduler.persistence.blob_store import BlobStore

LESSONS_KEY = "catalog:lessons"

_lesson_list = TypeAdapter(list[Lesson])


class LessonCatalog(Protocol):
    def list_products(self) -> list[Product]: ...

    def list_academies_for_product(self, product_id: str) -> list[Academy]: ...

    def list_lessons_for_product_and_academy(self, product_id: str, academy_id: str) -> list[Lesson]: ...

    def get_lesson(self, lesson_id: str) -> Lesson | None: ...


class InMemoryLessonCatalog:
    """Catalog over static reference lists plus user lessons from a blob store."""

    def __init__(
        self,
        products: list[Product],
        academies: list[Academy],
        lessons: list[Lesson],
        store: BlobStore | None = None,
    ) -> None:
        self._products = list(products)
        self._academies = list(academies)
        self._builtin_lessons = list(lessons)
        self._store = store
        self._local_lessons: list[Lesson] = []

    def _user_lessons(self) -> list[Lesson]:
        if self._store is None:
            return list(self._local_lessons)
        try:
            raw = self._store.get(LESSONS_KEY)
            return _lesson_list.validate_python(raw or [])
        except Exception as e:
            logger.bind(key=LESSONS_KEY, error=str(e)).warning("Failed to load user lessons; using built-in lessons only")
            return []

    def list_lessons(self) -> list[Lesson]:
        """All lessons: built-in first, then user lessons whose id is not built-in."""
        builtin_ids = {lesson.id for lesson in self._builtin_lessons}
        return [*self._builtin_lessons, *(lesson for lesson in self._user_lessons() if lesson.id not in builtin_ids)]

    def list_products(self) -> list[Product]:
        return list(self._products)

    def list_academies_for_product(self, product_id: str) -> list[Academy]:
        return [a for a in self._academies if a.product_id == product_id]

    def list_lessons_for_product_and_academy(self, product_id: str, academy_id: str) -> list[Lesson]:
        return [
            lesson
            for lesson in self.list_lessons()
            if lesson.product_id == product_id and lesson.academy_id == academy_id
        ]

    def get_lesson(self, lesson_id: str) -> Lesson | None:
        return next((lesson for lesson in self.list_lessons() if lesson.id == lesson_id), None)

    def add_lesson(self, lesson: Lesson) -> bool:
        """Add a user lesson and persist the user lesson list (best-effort).

        Returns:
            True if the lesson was kept (in the store, or in memory without one)
        """
        user_lessons = [existing for existing in self._user_lessons() if existing.id != lesson.id]
        user_lessons.append(lesson)
        if self._store is None:
            self._local_lessons = user_lessons
            return True
        try:
            self._store.set(LESSONS_KEY, _lesson_list.dump_python(user_lessons, mode="json", by_alias=True))
        except Exception as e:
            logger.bind(key=LESSONS_KEY, error=str(e)).warning("Failed to save lessons")
            return False
        return True
