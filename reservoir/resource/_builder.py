"""
Resource builder — fluent API and functional constructors.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from reservoir._types import Producer
from reservoir.persist import Codec, Storage
from reservoir.resource._config import Config, hold
from reservoir.resource._declarative import KeyedResource, Resource
from reservoir.resource._simple import SimpleResource
from reservoir.resource._types import Cell, Entry, EntryTree

# ═══════════════════════════════════════════════════════════════════════════════
# Functional Constructors
# ═══════════════════════════════════════════════════════════════════════════════


def create_simple_resource[T](
    initial: T,
    config: Config | None = None,
) -> SimpleResource[T]:
    """
    Create simple resource.

    With a persist key, a stored snapshot overrides initial.
    """
    cfg = config if config is not None else Config()
    return SimpleResource(hold(Cell(data=initial), cfg))


def create_declarative_resource[T](
    producer: Producer[T],
    config: Config | None = None,
    *,
    arity: int = 0,
) -> Resource[T] | KeyedResource[T]:
    """
    Create declarative resource.

    arity selects the variant explicitly: 0 → Resource, n >= 1 →
    KeyedResource indexed by n-tuples.

    Example:
        users = create_declarative_resource(fetch_user, arity=1)
        alice = await users.fetch(1)
    """
    cfg = config if config is not None else Config()
    if arity == 0:
        return Resource(producer, hold(Entry(), cfg))
    if arity < 0:
        raise ValueError("arity must be >= 0")
    return KeyedResource(producer, arity, hold(EntryTree(arity=arity), cfg))


# ═══════════════════════════════════════════════════════════════════════════════
# Resource Builder
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True, frozen=True)
class ResourceBuilder[R]:
    """
    Fluent resource builder.

    Type parameters:
        R: Resource type produced by build()

    Example:
        users = (
            R.keyed(fetch_user, arity=1)
            .persist("users", storage)
            .codec(P.PickleCodec())
            .build()
        )
    """

    _factory: Callable[[Config], R]
    _config: Config

    def persist(self, key: str, storage: Storage) -> ResourceBuilder[R]:
        """Mirror to durable storage under key."""
        return ResourceBuilder(
            _factory=self._factory,
            _config=self._config.with_persist(key, storage),
        )

    def codec(self, c: Codec) -> ResourceBuilder[R]:
        """Set snapshot codec."""
        return ResourceBuilder(
            _factory=self._factory,
            _config=self._config.with_codec(c),
        )

    def config(self, c: Config) -> ResourceBuilder[R]:
        """Replace whole configuration."""
        return ResourceBuilder(
            _factory=self._factory,
            _config=c,
        )

    def build(self) -> R:
        """Build resource."""
        return self._factory(self._config)


# ═══════════════════════════════════════════════════════════════════════════════
# Entry Points
# ═══════════════════════════════════════════════════════════════════════════════


def simple[T](initial: T) -> ResourceBuilder[SimpleResource[T]]:
    """
    Builder for a simple value resource.

    Example:
        theme = R.simple("light").persist("theme", storage).build()
    """
    return ResourceBuilder(
        _factory=lambda cfg: create_simple_resource(initial, cfg),
        _config=Config(),
    )


def declarative[T](
    producer: Callable[[], Awaitable[T]],
) -> ResourceBuilder[Resource[T]]:
    """
    Builder for a zero-key declarative resource.

    Example:
        settings = R.declarative(load_settings).build()
        value = await settings.fetch()
    """
    return ResourceBuilder(
        _factory=lambda cfg: Resource(producer, hold(Entry(), cfg)),
        _config=Config(),
    )


def keyed[T](
    producer: Producer[T],
    arity: int,
) -> ResourceBuilder[KeyedResource[T]]:
    """
    Builder for a declarative resource indexed by arity-tuples.

    Example:
        prices = R.keyed(fetch_price, arity=2).build()
        await prices.fetch("AAPL", "2024-01-02")
    """
    if arity < 1:
        raise ValueError("arity must be >= 1")
    return ResourceBuilder(
        _factory=lambda cfg: KeyedResource(producer, arity, hold(EntryTree(arity=arity), cfg)),
        _config=Config(),
    )


__all__ = (
    "ResourceBuilder",
    "create_simple_resource",
    "create_declarative_resource",
    "simple",
    "declarative",
    "keyed",
)
