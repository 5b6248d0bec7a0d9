"""
Declarative resources — async memoization with EMPTY/SUCCESS/ERROR entries.

Two variants share one state machine:
    Resource       — zero keys, one entry
    KeyedResource  — fixed arity >= 1, one entry per key tuple

Note: Concurrent calls on an EMPTY entry are not de-duplicated. Each call
invokes the producer and commits its own settlement; the last one wins.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from combinators import lift as L
from kungfu import Error, LazyCoroResult, Ok, Result

from reservoir._types import ArityError, Attempt, Keys, Producer
from reservoir.persist import Holder
from reservoir.resource._types import (
    Entries,
    Entry,
    EntryTree,
    Failed,
    Lookup,
    Pending,
    Ready,
    Status,
    Suspended,
)

logger = logging.getLogger(__name__)


def _same(e: Exception) -> Exception:
    return e


# ═══════════════════════════════════════════════════════════════════════════════
# Declarative Resource — Shared State Machine
# ═══════════════════════════════════════════════════════════════════════════════


class DeclarativeResource[T]:
    """
    Memoizes the outcome of an async producer per key tuple.

    Type parameters:
        T: Value type produced

    Access modes:
        fetch()          — await value; raises the captured exception
        attempt()        — LazyCoroResult: Ok(value) | Error(exception)
        read()           — sync Ready | Failed | Pending (suspense style)
        read_or_raise()  — sync value; raises exception or Suspended
    """

    def __init__(self, producer: Producer[T], holder: Holder[Entries]) -> None:
        self._producer = producer
        self._holder = holder
        self._arity = holder.state.arity
        self._name: str = getattr(producer, "__qualname__", repr(producer))
        # Strong refs: the loop only keeps weak references to tasks
        self._inflight: set[asyncio.Task[None]] = set()

    @property
    def arity(self) -> int:
        return self._arity

    @property
    def name(self) -> str:
        return self._name

    @property
    def inflight(self) -> int:
        """Number of producers started by read() that have not settled."""
        return len(self._inflight)

    # ───────────────────────────────────────────────────────────────────────────
    # Internals
    # ───────────────────────────────────────────────────────────────────────────

    def _check(self, keys: Keys) -> Keys:
        if len(keys) != self._arity:
            raise ArityError(self._arity, len(keys))
        return keys

    def _cached(self, keys: Keys) -> Ready[T] | Failed | None:
        state = self._holder.state
        match state.status_of(keys):
            case Status.SUCCESS:
                return Ready(state.value_of(keys))
            case Status.ERROR:
                return Failed(state.value_of(keys))
            case _:
                return None

    def _commit(self, keys: Keys, status: Status, value: Any) -> None:
        with self._holder.mutate() as state:
            state.put(keys, status, value)

    def _settle(self, keys: Keys) -> Attempt[T]:
        """Invoke producer once and commit its outcome."""
        producer = self._producer

        async def call() -> T:
            # Sync raises in producer() land here too
            return await producer(*keys)

        attempt = L.catching_async(call, on_error=_same)

        async def settle() -> Result[T, Exception]:
            logger.debug(
                "Invoking producer",
                extra={"resource": self._name, "keys": keys},
            )
            result = await attempt
            match result:
                case Ok(value):
                    self._commit(keys, Status.SUCCESS, value)
                case Error(error):
                    self._commit(keys, Status.ERROR, error)
                    logger.debug(
                        "Producer failed",
                        extra={"resource": self._name, "keys": keys, "error": repr(error)},
                    )
            return result

        return LazyCoroResult(settle)

    async def _preload(self, keys: Keys) -> None:
        await self._settle(keys)

    def _forget(self, task: asyncio.Task[None]) -> None:
        self._inflight.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning(
                "Settlement commit failed",
                extra={"resource": self._name, "error": repr(error)},
                exc_info=error,
            )

    # ───────────────────────────────────────────────────────────────────────────
    # Public API
    # ───────────────────────────────────────────────────────────────────────────

    def attempt(self, *keys: Any) -> Attempt[T]:
        """
        Cached outcome, or produce and commit.

        Example:
            match await users.attempt(uid):
                case Ok(user): ...
                case Error(e): ...
        """
        keys = self._check(keys)

        async def run() -> Result[T, Exception]:
            match self._cached(keys):
                case Ready(value):
                    return Ok(value)
                case Failed(error):
                    return Error(error)
                case _:
                    return await self._settle(keys)

        return LazyCoroResult(run)

    async def fetch(self, *keys: Any) -> T:
        """
        Get value, producing it on first access.

        Raises the original exception instance for failed entries.
        """
        result = await self.attempt(*keys)
        match result:
            case Ok(value):
                return value
            case Error(error):
                raise error

    def read(self, *keys: Any) -> Lookup[T]:
        """
        Suspense-style synchronous access.

        For an EMPTY entry the producer is scheduled on the running event
        loop and Pending is returned. The resource keeps the task alive, so a
        dropped Pending still commits. Raises RuntimeError without a running
        loop.
        """
        keys = self._check(keys)
        cached = self._cached(keys)
        if cached is not None:
            return cached
        task = asyncio.get_running_loop().create_task(self._preload(keys))
        self._inflight.add(task)
        task.add_done_callback(self._forget)
        return Pending(task)

    def read_or_raise(self, *keys: Any) -> T:
        """Value, or raise the captured exception, or raise Suspended."""
        match self.read(*keys):
            case Ready(value):
                return value
            case Failed(error):
                raise error
            case Pending() as pending:
                raise Suspended(pending)

    def status(self, *keys: Any) -> Status:
        """Current status of the entry. No side effects."""
        keys = self._check(keys)
        return self._holder.state.status_of(keys)

    def clear(self, *keys: Any) -> None:
        """
        Reset one entry, or everything when called without keys.

        Only an exactly matching stored key tuple is reset; a shorter prefix
        is a no-op.
        """
        if not keys:
            self._holder.replace(self._holder.state.empty())
            logger.info("Resource cleared", extra={"resource": self._name})
            return
        if self._holder.state.contains(keys):
            self._commit(keys, Status.EMPTY, None)


# ═══════════════════════════════════════════════════════════════════════════════
# Variants
# ═══════════════════════════════════════════════════════════════════════════════


class Resource[T](DeclarativeResource[T]):
    """
    Zero-key resource.

    Example:
        config = R.declarative(load_config).build()
        settings = await config.fetch()
    """

    def __init__(self, producer: Producer[T], holder: Holder[Entry] | None = None) -> None:
        super().__init__(producer, holder if holder is not None else Holder(Entry()))


class KeyedResource[T](DeclarativeResource[T]):
    """
    Resource indexed by key tuples of fixed arity.

    Example:
        users = R.keyed(fetch_user, arity=1).build()
        alice = await users.fetch(1)
    """

    def __init__(
        self,
        producer: Producer[T],
        arity: int,
        holder: Holder[EntryTree] | None = None,
    ) -> None:
        if arity < 1:
            raise ValueError("arity must be >= 1")
        if holder is None:
            holder = Holder(EntryTree(arity=arity))
        elif holder.state.arity != arity:
            raise ValueError(f"holder arity {holder.state.arity} != {arity}")
        super().__init__(producer, holder)


__all__ = (
    "DeclarativeResource",
    "Resource",
    "KeyedResource",
)
