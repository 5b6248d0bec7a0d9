"""
Persist — mirror state to durable string storage.

    from reservoir import persist as P

    holder = P.Persisted(default_state, key="users", storage=P.MemoryStorage())
    with holder.mutate() as state:
        ...  # written to storage on exit

Storage backends: MemoryStorage, FileStorage, SQLAlchemyStorage, or
storage_from(get_item, set_item) for anything else.
"""

from __future__ import annotations

from reservoir.persist._storage import (
    Storage,
    FunctionalStorage,
    storage_from,
    MemoryStorage,
    FileStorage,
)
from reservoir.persist._codec import (
    Codec,
    RestoredError,
    JsonCodec,
    PickleCodec,
)
from reservoir.persist._adapter import (
    Snapshot,
    Holder,
    Persisted,
)
from reservoir.persist._sqlalchemy import (
    SnapshotMixin,
    SnapshotTable,
    create_tables,
    SQLAlchemyStorage,
)

__all__ = (
    # Storage
    "Storage",
    "FunctionalStorage",
    "storage_from",
    "MemoryStorage",
    "FileStorage",
    # Codecs
    "Codec",
    "RestoredError",
    "JsonCodec",
    "PickleCodec",
    # Adapter
    "Snapshot",
    "Holder",
    "Persisted",
    # SQLAlchemy
    "SnapshotMixin",
    "SnapshotTable",
    "create_tables",
    "SQLAlchemyStorage",
)
