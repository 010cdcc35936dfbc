"""Key-value blob store interface.

The scheduler persists opaque JSON snapshots, one key per logical dataset
(planning state, user lessons, lesson-cohort mappings). Stores raise
PersistenceError on failure; callers decide whether durability matters.
"""

import json
from typing import Any, Protocol

from loguru import logger

from workshop_scheduler.scheduling.errors import PersistenceError


class BlobStore(Protocol):
    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...


class InMemoryBlobStore:
    """Dict-backed store holding JSON-encoded copies of every value."""

    def __init__(self) -> None:
        self._blobs: dict[str, str] = {}

    def get(self, key: str) -> Any | None:
        raw = self._blobs.get(key)
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        try:
            self._blobs[key] = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Value for key {key!r} is not JSON-serializable: {e}") from e
        logger.debug(f"Stored blob {key} ({len(self._blobs[key])} bytes)")

    def keys(self) -> list[str]:
        return sorted(self._blobs)
