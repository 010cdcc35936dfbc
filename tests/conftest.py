"""Root conftest for all tests.

This file makes shared fixtures available across all test modules.
"""

import pytest
from loguru import logger

from workshop_scheduler.catalog.service import InMemoryLessonCatalog
from workshop_scheduler.catalog.types import Academy, Lesson, Product
from workshop_scheduler.config.settings import Settings
from workshop_scheduler.persistence.blob_store import InMemoryBlobStore
from workshop_scheduler.scheduling.template import build_programme_template
from workshop_scheduler.scheduling.types import (
    AvailabilityPeriod,
    AvailabilityWindow,
    Cohort,
    Programme,
    Staff,
    StaffRole,
    Weekday,
)

_FULL_DAY = ("09:00", "17:00")


def make_staff(
    staff_id: str,
    name: str | None = None,
    role: StaffRole = StaffRole.COACH,
    *,
    start_date_iso: str | None = None,
    end_date_iso: str | None = None,
    windows: dict[Weekday, tuple[str, str]] | None = None,
) -> Staff:
    """Build a staff member, available 09:00-17:00 Monday-Thursday by default."""
    windows = windows or {
        Weekday.MONDAY: _FULL_DAY,
        Weekday.TUESDAY: _FULL_DAY,
        Weekday.WEDNESDAY: _FULL_DAY,
        Weekday.THURSDAY: _FULL_DAY,
    }
    period = None
    if start_date_iso or end_date_iso:
        period = AvailabilityPeriod(start_date_iso=start_date_iso, end_date_iso=end_date_iso)
    return Staff(
        id=staff_id,
        name=name or staff_id,
        role=role,
        availability=tuple(AvailabilityWindow(day=day, start=start, end=end) for day, (start, end) in windows.items()),
        availability_period=period,
    )


@pytest.fixture
def staff_factory():
    """Factory for staff members with optional availability period and windows."""
    return make_staff


@pytest.fixture
def programme() -> Programme:
    return build_programme_template()


@pytest.fixture
def cohort() -> Cohort:
    return Cohort(cohort_id=101, cohort_code="LDN-2026-A", academy_id=1)


@pytest.fixture
def roster() -> list[Staff]:
    """Delivery team with staggered availability starts (Feb 2026)."""
    return [
        make_staff("staff-001", "Sarah Ahmed", StaffRole.COACH, start_date_iso="2026-02-02"),
        make_staff(
            "staff-002",
            "James Martin",
            StaffRole.FACILITATOR,
            start_date_iso="2026-02-02",
            windows={
                Weekday.MONDAY: ("10:00", "15:00"),
                Weekday.TUESDAY: _FULL_DAY,
                Weekday.WEDNESDAY: _FULL_DAY,
                Weekday.THURSDAY: _FULL_DAY,
            },
        ),
        make_staff("staff-003", "Priya Patel", StaffRole.COACH, start_date_iso="2026-02-16"),
        make_staff("staff-004", "David Chen", StaffRole.COORDINATOR, start_date_iso="2026-02-02"),
        make_staff("staff-005", "Emma Thompson", StaffRole.FACILITATOR, start_date_iso="2026-02-09"),
        make_staff("staff-006", "Marcus Johnson", StaffRole.COACH, start_date_iso="2026-02-02"),
        make_staff("staff-007", "Lucia Rodriguez", StaffRole.FACILITATOR, start_date_iso="2026-02-02"),
        make_staff("staff-008", "Tom Wilson", StaffRole.COACH, start_date_iso="2026-02-23"),
    ]


@pytest.fixture
def memory_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def catalog() -> InMemoryLessonCatalog:
    products = [
        Product(id="prod-1", name="Employability Plus"),
        Product(id="prod-2", name="Tech Skills Academy"),
    ]
    academies = [
        Academy(id="acad-1", product_id="prod-1", name="London Academy"),
        Academy(id="acad-2", product_id="prod-1", name="Manchester Academy"),
        Academy(id="acad-3", product_id="prod-2", name="Tech Hub London"),
    ]
    lessons = [
        Lesson(id="lesson-cv", title="CV Writing", product_id="prod-1", academy_id="acad-1", duration=60),
        Lesson(id="lesson-interview", title="Interview Skills", product_id="prod-1", academy_id="acad-1", duration=120),
        Lesson(id="lesson-teamwork", title="Teamwork", product_id="prod-1", academy_id="acad-2", duration=60),
        Lesson(id="lesson-python", title="Intro to Python", product_id="prod-2", academy_id="acad-3", duration=120),
    ]
    return InMemoryLessonCatalog(products, academies, lessons)


@pytest.fixture
def planner_settings() -> Settings:
    """Settings pinned regardless of environment: hard cap of 4, warn policy."""
    return Settings(
        _env_file=None,
        weekly_assignment_cap=4,
        cap_enforcement="hard",
        monday_policy="warn",
        symmetric_availability_check=False,
        persist_on_change=True,
    )


@pytest.fixture
def log_messages():
    """Capture loguru messages emitted during a test."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
