"""
Resource operations — standalone utilities.
"""

from __future__ import annotations

from typing import Any

from reservoir.resource._declarative import DeclarativeResource
from reservoir.resource._types import Failed, Pending, Ready

# ═══════════════════════════════════════════════════════════════════════════════
# until_ready() — Retry on Settlement
# ═══════════════════════════════════════════════════════════════════════════════


async def until_ready[T](resource: DeclarativeResource[T], *keys: Any) -> T:
    """
    Read, awaiting in-flight producers, until the entry settles.

    What a suspense boundary does: read → Pending → await → read again.
    Loops when the entry was cleared while pending.

    Example:
        user = await R.until_ready(users, uid)
    """
    while True:
        match resource.read(*keys):
            case Ready(value):
                return value
            case Failed(error):
                raise error
            case Pending() as pending:
                await pending


__all__ = ("until_ready",)
