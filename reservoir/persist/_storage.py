"""
Durable storage — string key/value protocol.

Storage is synchronous: snapshot writes happen inline with the cache
mutation that caused them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol
from urllib.parse import quote

from reservoir._types import StorageError

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Storage Protocol — Users Implement This
# ═══════════════════════════════════════════════════════════════════════════════


class Storage(Protocol):
    """
    Durable string store protocol.

    Implement this for custom backends (Redis, a KV service, etc.)

    Example:
        class RedisStorage:
            def __init__(self, client: Redis) -> None:
                self.client = client

            def get_item(self, key: str) -> str | None:
                data = self.client.get(key)
                return data.decode() if data is not None else None

            def set_item(self, key: str, value: str) -> None:
                self.client.set(key, value)
    """

    def get_item(self, key: str) -> str | None:
        """Get stored text. Returns None when absent."""
        ...

    def set_item(self, key: str, value: str) -> None:
        """Store text under key, replacing any previous value."""
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Function-based Storage Builder
# ═══════════════════════════════════════════════════════════════════════════════

type GetItemFn = Callable[[str], str | None]
type SetItemFn = Callable[[str, str], None]


@dataclass(frozen=True, slots=True)
class FunctionalStorage:
    """
    Storage built from functions.

    Example:
        storage = storage_from(
            get_item=settings_repo.load,
            set_item=settings_repo.save,
        )
    """

    _get_item: GetItemFn
    _set_item: SetItemFn

    def get_item(self, key: str) -> str | None:
        return self._get_item(key)

    def set_item(self, key: str, value: str) -> None:
        self._set_item(key, value)


def storage_from(get_item: GetItemFn, set_item: SetItemFn) -> FunctionalStorage:
    """Create Storage from a getter and a setter."""
    return FunctionalStorage(_get_item=get_item, _set_item=set_item)


# ═══════════════════════════════════════════════════════════════════════════════
# Memory Storage — For Testing
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(slots=True)
class MemoryStorage:
    """
    In-memory storage.

    Note: Data does not survive a restart. Share one instance between
    resources to simulate a restart within a single process.
    """

    items: dict[str, str] = field(default_factory=dict)

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


# ═══════════════════════════════════════════════════════════════════════════════
# File Storage — One File per Key
# ═══════════════════════════════════════════════════════════════════════════════


class FileStorage:
    """
    Directory-backed storage, one UTF-8 file per key.

    Example:
        storage = FileStorage(Path.home() / ".cache" / "myapp")
    """

    def __init__(self, directory: Path | str, suffix: str = ".snapshot") -> None:
        self._directory = Path(directory)
        self._suffix = suffix

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        # Percent-encode so any key maps to a single flat file name
        return self._directory / f"{quote(key, safe='')}{self._suffix}"

    def get_item(self, key: str) -> str | None:
        path = self.path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}", key) from e

    def set_item(self, key: str, value: str) -> None:
        path = self.path_for(key)
        tmp = path.with_name(path.name + ".tmp")
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            tmp.write_text(value, encoding="utf-8")
            tmp.replace(path)
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}", key) from e
        logger.debug("Snapshot file written", extra={"path": str(path)})


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    "Storage",
    "FunctionalStorage",
    "storage_from",
    "MemoryStorage",
    "FileStorage",
)
