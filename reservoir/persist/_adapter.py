"""
Snapshot adapter — state holders with write-then-persist mutators.

Holder owns a state object. Persisted additionally hydrates from durable
storage on construction and writes the entire state after every commit.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Protocol, Self

from reservoir.persist._codec import Codec, JsonCodec
from reservoir.persist._storage import Storage

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Snapshot Protocol — State Objects Implement This
# ═══════════════════════════════════════════════════════════════════════════════


class Snapshot(Protocol):
    """
    State that can be flattened to plain data and rebuilt from it.

    Note: restore() is called on the default state, so it can carry
    construction-time facts (e.g. key arity) into the rebuilt state.
    """

    def to_snapshot(self) -> Any:
        ...

    def restore(self, snapshot: Any) -> Self:
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Holder — In-Memory State
# ═══════════════════════════════════════════════════════════════════════════════


class Holder[S: Snapshot]:
    """
    Owns a mutable state object.

    Example:
        holder = Holder(Cell(data=None))
        with holder.mutate() as cell:
            cell.data = 42
    """

    def __init__(self, default: S) -> None:
        self._state = default

    @property
    def state(self) -> S:
        return self._state

    @contextmanager
    def mutate(self) -> Iterator[S]:
        """Yield state for in-place writes, then commit."""
        yield self._state
        self._commit()

    def replace(self, state: S) -> None:
        """Swap the whole state, then commit."""
        self._state = state
        self._commit()

    def _commit(self) -> None:
        pass


# ═══════════════════════════════════════════════════════════════════════════════
# Persisted — Holder Mirrored to Durable Storage
# ═══════════════════════════════════════════════════════════════════════════════


class Persisted[S: Snapshot](Holder[S]):
    """
    Holder whose every commit is written to storage under a fixed key.

    On construction the stored snapshot, if any, replaces the default.
    Storage and codec failures propagate.

    Example:
        holder = Persisted(Cell(data=None), key="settings", storage=MemoryStorage())
    """

    def __init__(
        self,
        default: S,
        key: str,
        storage: Storage,
        codec: Codec | None = None,
    ) -> None:
        self._key = key
        self._storage = storage
        self._codec: Codec = codec if codec is not None else JsonCodec()
        super().__init__(self._hydrate(default))

    @property
    def key(self) -> str:
        return self._key

    def _hydrate(self, default: S) -> S:
        text = self._storage.get_item(self._key)
        if not text:
            return default
        logger.debug("Hydrating from snapshot", extra={"persist_key": self._key})
        return default.restore(self._codec.loads(text))

    def _commit(self) -> None:
        text = self._codec.dumps(self._state.to_snapshot())
        self._storage.set_item(self._key, text)
        logger.debug(
            "Snapshot written",
            extra={"persist_key": self._key, "size": len(text)},
        )


__all__ = (
    "Snapshot",
    "Holder",
    "Persisted",
)
