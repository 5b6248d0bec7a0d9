"""
SQLAlchemy integration — durable snapshot storage in any table.

Usage:
    1. Use the bundled table, or add SnapshotMixin to your own model:

        class CacheSnapshot(Base, SnapshotMixin):
            __tablename__ = "cache_snapshots"

    2. Create storage over a sync session factory:

        engine = create_engine("sqlite:///cache.db")
        create_tables(engine)
        storage = SQLAlchemyStorage(sessionmaker(engine))

    3. Use:

        users = R.keyed(fetch_user, arity=1).persist("users", storage).build()
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, cast

from sqlalchemy import DateTime, Engine, String, Text, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from reservoir._types import StorageError

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ═══════════════════════════════════════════════════════════════════════════════
# Snapshot Mixin — add to your SQLAlchemy model
# ═══════════════════════════════════════════════════════════════════════════════


class SnapshotMixin:
    """
    Mixin for SQLAlchemy models that hold snapshots.

    Adds columns:
    - snapshot_key: persist key (primary key)
    - snapshot_payload: encoded snapshot text
    - snapshot_updated_at: last write time
    """

    snapshot_key: Mapped[str] = mapped_column(String(255), primary_key=True)

    snapshot_payload: Mapped[str] = mapped_column(Text, nullable=False)

    snapshot_updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )


# ═══════════════════════════════════════════════════════════════════════════════
# Bundled Table
# ═══════════════════════════════════════════════════════════════════════════════


class Base(DeclarativeBase):
    pass


class SnapshotTable(Base, SnapshotMixin):
    """Default snapshot table."""

    __tablename__ = "reservoir_snapshots"


def create_tables(engine: Engine) -> None:
    """Create the bundled snapshot table if missing."""
    Base.metadata.create_all(engine)


# ═══════════════════════════════════════════════════════════════════════════════
# SQLAlchemy Storage
# ═══════════════════════════════════════════════════════════════════════════════


class SQLAlchemyStorage:
    """
    Storage backed by a table with SnapshotMixin columns.

    One short session per call; every write commits.

    Example:
        storage = SQLAlchemyStorage(sessionmaker(engine))
        storage.set_item("users", "{...}")
        storage.get_item("users")
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        model: type[SnapshotMixin] = SnapshotTable,
    ) -> None:
        """
        Args:
            session_factory: SQLAlchemy sync session factory
            model: Mapped class with SnapshotMixin
        """
        self._session_factory = session_factory
        self._model = model

    def get_item(self, key: str) -> str | None:
        """Get payload by snapshot_key."""
        try:
            with self._session_factory() as session:
                stmt = select(self._model.snapshot_payload).where(
                    self._model.snapshot_key == key
                )
                return session.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to get snapshot: {e}", key) from e

    def set_item(self, key: str, value: str) -> None:
        """Insert or replace payload for snapshot_key."""
        try:
            with self._session_factory() as session:
                row = cast(Any, self._model)(
                    snapshot_key=key,
                    snapshot_payload=value,
                    snapshot_updated_at=_utcnow(),
                )
                session.merge(row)
                session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to set snapshot: {e}", key) from e
        logger.debug("Snapshot row written", extra={"persist_key": key})


__all__ = (
    "SnapshotMixin",
    "SnapshotTable",
    "create_tables",
    "SQLAlchemyStorage",
)
