"""
Core types for reservoir.

Re-exports from kungfu + custom type aliases.
"""

from __future__ import annotations

from collections.abc import Callable, Awaitable, Hashable

# Re-export from kungfu
from kungfu import Result, Ok, Error, LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Producer Aliases
# ═══════════════════════════════════════════════════════════════════════════════

type Key = Hashable
"""One element of a key tuple. Compared with dict equality."""

type Keys = tuple[Key, ...]
"""Ordered key tuple identifying one cached entry."""

type Producer[T] = Callable[..., Awaitable[T]]
"""Async callable receiving the key tuple positionally. Raises on failure."""

type Attempt[T] = LazyCoroResult[T, Exception]
"""Lazy computation yielding Ok(value) or Error(original exception)."""

# ═══════════════════════════════════════════════════════════════════════════════
# Library Errors
# ═══════════════════════════════════════════════════════════════════════════════


class ReservoirError(Exception):
    """Base class for errors raised by reservoir itself (never producer errors)."""


class ArityError(ReservoirError, TypeError):
    """Wrong number of keys for a resource."""

    def __init__(self, expected: int, got: int) -> None:
        super().__init__(f"expected {expected} key(s), got {got}")
        self.expected = expected
        self.got = got


class StorageError(ReservoirError):
    """Durable storage read or write failed."""

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class CodecError(ReservoirError):
    """Snapshot could not be encoded or decoded."""


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    "LazyCoroResult",
    # Type aliases
    "Key",
    "Keys",
    "Producer",
    "Attempt",
    # Errors
    "ReservoirError",
    "ArityError",
    "StorageError",
    "CodecError",
)
