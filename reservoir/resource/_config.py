"""
Resource configuration.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from reservoir.persist import Codec, Holder, JsonCodec, Persisted, Snapshot, Storage


@dataclass(frozen=True, slots=True)
class Config:
    """
    Resource configuration.

    Fluent builder pattern — chain methods to configure.

    Example:
        config = (
            Config()
            .with_persist("users", storage)
            .with_codec(PickleCodec())
        )

    Note: Immutable — each method returns new Config.
    """

    persist_key: str | None = None
    storage: Storage | None = None
    codec: Codec = field(default_factory=JsonCodec)

    @property
    def persistent(self) -> bool:
        return self.persist_key is not None

    def with_persist(self, key: str, storage: Storage | None = None) -> Config:
        """
        Mirror entries to storage under key.

        Example:
            .with_persist("users", P.FileStorage("/var/cache/app"))
        """
        return Config(
            persist_key=key,
            storage=storage if storage is not None else self.storage,
            codec=self.codec,
        )

    def with_storage(self, storage: Storage) -> Config:
        """Set durable storage backend."""
        return Config(
            persist_key=self.persist_key,
            storage=storage,
            codec=self.codec,
        )

    def with_codec(self, codec: Codec) -> Config:
        """Set snapshot codec."""
        return Config(
            persist_key=self.persist_key,
            storage=self.storage,
            codec=codec,
        )


def hold[S: Snapshot](default: S, config: Config) -> Holder[S]:
    """Plain Holder, or Persisted when config has a persist key."""
    if config.persist_key is None:
        return Holder(default)
    if config.storage is None:
        raise ValueError("storage is required when persist_key is set")
    return Persisted(default, config.persist_key, config.storage, config.codec)


__all__ = ("Config", "hold")
