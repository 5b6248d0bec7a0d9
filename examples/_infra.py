"""Shared infrastructure for examples."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field


# Types
@dataclass(frozen=True, slots=True)
class User:
    id: int
    name: str
    email: str
    tier: str = "standard"


# Errors
class NotFound(Exception):
    def __init__(self, entity: str, id: int | str) -> None:
        super().__init__(f"{entity}:{id} not found")
        self.entity = entity
        self.id = id


# Fake DB
@dataclass(slots=True)
class FakeDb:
    users: dict[int, User] = field(default_factory=lambda: {
        1: User(1, "Alice", "alice@example.com", "gold"),
        2: User(2, "Bob", "bob@example.com", "silver"),
    })
    queries: int = 0

    async def get_user(self, user_id: int) -> User:
        self.queries += 1
        await asyncio.sleep(0.01)
        user = self.users.get(user_id)
        if user is None:
            raise NotFound("User", user_id)
        return user


# Helpers
def banner(title: str) -> None:
    print(f"\n{'─' * 50}\n{title}\n{'─' * 50}")


def run(main: Callable[[], Coroutine[object, object, None]]) -> None:
    asyncio.run(main())
