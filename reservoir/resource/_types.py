"""
Resource types.
"""

from __future__ import annotations

import asyncio
from collections.abc import Generator
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Protocol, Self

from reservoir._types import CodecError, Keys
from reservoir.nested import contains_in, get_in, leaves, set_in
from reservoir.persist import Snapshot

# ═══════════════════════════════════════════════════════════════════════════════
# Status — Entry Lifecycle
# ═══════════════════════════════════════════════════════════════════════════════


class Status(Enum):
    """
    State of one cached entry.

    Lifecycle:
        EMPTY → SUCCESS (producer returned)
              → ERROR   (producer raised)
        SUCCESS / ERROR → EMPTY only via clear()
    """

    EMPTY = auto()
    SUCCESS = auto()
    ERROR = auto()


# ═══════════════════════════════════════════════════════════════════════════════
# Lookup — Ready | Failed | Pending
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Ready[T]:
    """Entry resolved with a value."""

    value: T


@dataclass(frozen=True, slots=True)
class Failed:
    """Entry resolved with the producer's original exception."""

    error: Exception


@dataclass(frozen=True, slots=True)
class Pending:
    """
    Producer in flight.

    Awaiting completes with None once the settlement is committed. The
    producer's failure is committed, not raised here.

    Example:
        match users.read(uid):
            case R.Pending() as pending:
                await pending
                return users.read(uid)
    """

    task: asyncio.Future[None]

    @property
    def done(self) -> bool:
        return self.task.done()

    def __await__(self) -> Generator[Any, None, None]:
        return self.task.__await__()


type Lookup[T] = Ready[T] | Failed | Pending


class Suspended(Exception):
    """
    Throw-style suspense signal raised by read_or_raise().

    Not a failure: await .pending, then read again.
    """

    def __init__(self, pending: Pending) -> None:
        super().__init__("resource is pending")
        self.pending = pending


# ═══════════════════════════════════════════════════════════════════════════════
# Entry State — What Holders Own
# ═══════════════════════════════════════════════════════════════════════════════


class Entries(Snapshot, Protocol):
    """Status/value storage addressed by key tuples of a fixed arity."""

    @property
    def arity(self) -> int:
        ...

    def status_of(self, keys: Keys) -> Status:
        ...

    def value_of(self, keys: Keys) -> Any:
        ...

    def contains(self, keys: Keys) -> bool:
        ...

    def put(self, keys: Keys, status: Status, value: Any) -> None:
        ...

    def empty(self) -> Self:
        ...


def _as_key(raw: Any) -> Any:
    # JSON turns tuple key elements into lists; lists are never valid keys
    if isinstance(raw, list):
        return tuple(_as_key(item) for item in raw)
    return raw


def _malformed(snapshot: Any, e: Exception) -> CodecError:
    return CodecError(f"Malformed snapshot {snapshot!r}: {e}")


@dataclass(slots=True)
class Entry:
    """Single entry for zero-key resources."""

    status: Status = Status.EMPTY
    value: Any = None

    @property
    def arity(self) -> int:
        return 0

    def status_of(self, keys: Keys) -> Status:
        return self.status

    def value_of(self, keys: Keys) -> Any:
        return self.value

    def contains(self, keys: Keys) -> bool:
        return not keys

    def put(self, keys: Keys, status: Status, value: Any) -> None:
        self.value = value
        self.status = status

    def empty(self) -> Entry:
        return Entry()

    def to_snapshot(self) -> dict[str, Any]:
        return {"status": self.status.name, "value": self.value}

    def restore(self, snapshot: Any) -> Entry:
        try:
            return Entry(status=Status[snapshot["status"]], value=snapshot.get("value"))
        except (KeyError, TypeError, AttributeError) as e:
            raise _malformed(snapshot, e) from e


@dataclass(slots=True)
class EntryTree:
    """
    Two congruent nested maps for keyed resources.

    Note: status and value are always written together, so a path present
    in one is present in the other.
    """

    arity: int
    status: dict[Any, Any] = field(default_factory=dict)
    value: dict[Any, Any] = field(default_factory=dict)

    def status_of(self, keys: Keys) -> Status:
        if contains_in(self.status, keys):
            return get_in(self.status, keys)
        return Status.EMPTY

    def value_of(self, keys: Keys) -> Any:
        return get_in(self.value, keys)

    def contains(self, keys: Keys) -> bool:
        return bool(keys) and contains_in(self.status, keys)

    def put(self, keys: Keys, status: Status, value: Any) -> None:
        set_in(self.value, keys, value)
        set_in(self.status, keys, status)

    def empty(self) -> EntryTree:
        return EntryTree(arity=self.arity)

    def to_snapshot(self) -> dict[str, Any]:
        # Flattened: JSON objects cannot carry non-string keys
        return {
            "arity": self.arity,
            "status": [[list(k), s.name] for k, s in leaves(self.status, self.arity)],
            "value": [[list(k), v] for k, v in leaves(self.value, self.arity)],
        }

    def _path(self, raw: Any) -> Keys:
        path = _as_key(raw)
        if not isinstance(path, tuple) or len(path) != self.arity:
            raise ValueError(f"bad key path {raw!r}")
        return path

    def restore(self, snapshot: Any) -> EntryTree:
        try:
            if snapshot["arity"] != self.arity:
                raise ValueError(f"arity {snapshot['arity']} != {self.arity}")
            tree = EntryTree(arity=self.arity)
            for keys, name in snapshot["status"]:
                set_in(tree.status, self._path(keys), Status[name])
            for keys, value in snapshot["value"]:
                set_in(tree.value, self._path(keys), value)
        except (KeyError, TypeError, ValueError) as e:
            raise _malformed(snapshot, e) from e
        return tree


@dataclass(slots=True)
class Cell[T]:
    """Plain value holder for simple resources."""

    data: T | None = None

    def to_snapshot(self) -> dict[str, Any]:
        return {"data": self.data}

    def restore(self, snapshot: Any) -> Cell[T]:
        try:
            return Cell(data=snapshot["data"])
        except (KeyError, TypeError) as e:
            raise _malformed(snapshot, e) from e


__all__ = (
    "Status",
    "Ready",
    "Failed",
    "Pending",
    "Lookup",
    "Suspended",
    "Entries",
    "Entry",
    "EntryTree",
    "Cell",
)
