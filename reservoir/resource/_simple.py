"""
Simple resource — a plain value holder, optionally persisted.
"""

from __future__ import annotations

from reservoir.persist import Holder
from reservoir.resource._types import Cell


class SimpleResource[T]:
    """
    Synchronous value holder. No producer, no status.

    Example:
        theme = R.simple("light").persist("theme", storage).build()
        theme.set("dark")
        theme.read()  # "dark", also after a restart
    """

    def __init__(self, holder: Holder[Cell[T]]) -> None:
        self._holder = holder

    def set(self, value: T) -> None:
        with self._holder.mutate() as cell:
            cell.data = value

    def read(self) -> T | None:
        return self._holder.state.data

    def clear(self) -> None:
        """Set stored value to None."""
        with self._holder.mutate() as cell:
            cell.data = None


__all__ = ("SimpleResource",)
