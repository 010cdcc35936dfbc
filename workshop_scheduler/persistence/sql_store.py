"""SQLAlchemy-backed blob store."""

from __future__ import annotations

import json
from collections.abc import Generator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any

from loguru import logger
from sqlalchemy import create_engine, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from workshop_scheduler.config.settings import settings
from workshop_scheduler.persistence.models import Base, BlobRecord
from workshop_scheduler.scheduling.errors import PersistenceError


def create_store_engine(database_url: str | None = None) -> Engine:
    url = database_url or settings.database_url
    logger.info(f"Initializing blob store engine: {url}")
    return create_engine(
        url,
        connect_args={"check_same_thread": False} if "sqlite" in url else {},
        echo=False,
    )


class SqlBlobStore:
    """Blob store persisting JSON documents in the blob_records table."""

    def __init__(self, engine: Engine | None = None, *, create_schema: bool = True) -> None:
        self.engine = engine or create_store_engine()
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        if create_schema:
            Base.metadata.create_all(self.engine)

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """Transactional scope for one blob store operation."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception as e:
            logger.error(f"Blob store session error, rolling back: {e}")
            session.rollback()
            raise
        finally:
            session.close()

    def get(self, key: str) -> Any | None:
        try:
            with self.session_scope() as session:
                record = session.execute(select(BlobRecord).where(BlobRecord.key == key)).scalar_one_or_none()
                raw = record.value if record is not None else None
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read blob {key!r}: {e}") from e

        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        try:
            raw = json.dumps(value)
        except (TypeError, ValueError) as e:
            raise PersistenceError(f"Value for key {key!r} is not JSON-serializable: {e}") from e

        try:
            with self.session_scope() as session:
                session.merge(BlobRecord(key=key, value=raw, updated_at=datetime.now(timezone.utc)))
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to write blob {key!r}: {e}") from e

        logger.debug(f"Stored blob {key} ({len(raw)} bytes)")
