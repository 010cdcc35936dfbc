"""Planning state snapshots.

A snapshot captures what a planning session cannot rebuild from reference
data: the chosen start date, the assignments and the attached lessons.
Writes are best-effort; a failed write leaves the in-memory session intact.
"""

from typing import Any

from loguru import logger
from pydantic import Field, ValidationError, field_validator

from workshop_scheduler.persistence.blob_store import BlobStore
from workshop_scheduler.scheduling.constants import PLANNING_STATE_KEY_PREFIX
from workshop_scheduler.scheduling.errors import SnapshotError
from workshop_scheduler.scheduling.iso_dates import parse_iso_date
from workshop_scheduler.scheduling.types import CamelModel, SegmentAssignment, WorkshopCustomisation


class PlanningSnapshot(CamelModel):
    cohort_id: int
    start_date_iso: str | None = Field(default=None, alias="startDateISO")
    assignments: list[SegmentAssignment] = Field(default_factory=list)
    customisations: list[WorkshopCustomisation] = Field(default_factory=list)

    @field_validator("start_date_iso")
    @classmethod
    def _check_start_date(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return parse_iso_date(value).isoformat()


def planning_state_key(cohort_id: int) -> str:
    return f"{PLANNING_STATE_KEY_PREFIX}:{cohort_id}"


def encode_snapshot(snapshot: PlanningSnapshot) -> dict[str, Any]:
    return snapshot.model_dump(mode="json", by_alias=True)


def decode_snapshot(raw: Any) -> PlanningSnapshot:
    """Decode a stored snapshot.

    Raises:
        SnapshotError: If the stored value is not a valid snapshot
    """
    try:
        return PlanningSnapshot.model_validate(raw)
    except ValidationError as e:
        raise SnapshotError(f"Stored planning snapshot is invalid: {e.error_count()} error(s)") from e


def save_snapshot(store: BlobStore, snapshot: PlanningSnapshot) -> bool:
    """Write a snapshot, logging and swallowing any store failure.

    Returns:
        True if the write succeeded
    """
    key = planning_state_key(snapshot.cohort_id)
    try:
        store.set(key, encode_snapshot(snapshot))
    except Exception as e:
        logger.bind(key=key, error=str(e)).warning("Failed to persist planning snapshot; continuing in memory")
        return False
    return True


def load_snapshot(store: BlobStore, cohort_id: int) -> PlanningSnapshot | None:
    """Read the snapshot for a cohort.

    Missing, unreadable or undecodable snapshots are logged and yield None.
    """
    key = planning_state_key(cohort_id)
    try:
        raw = store.get(key)
    except Exception as e:
        logger.bind(key=key, error=str(e)).warning("Failed to read planning snapshot; starting fresh")
        return None

    if raw is None:
        return None

    try:
        return decode_snapshot(raw)
    except SnapshotError as e:
        logger.bind(key=key).warning(f"Ignoring planning snapshot: {e}")
        return None
