"""
Snapshot codecs — snapshot object <-> storage text.
"""

from __future__ import annotations

import base64
import binascii
import json
import pickle
from typing import Any, Protocol

from reservoir._types import CodecError

_EXCEPTION_TAG = "__exception__"


class Codec(Protocol):
    """Snapshot serialization protocol."""

    def dumps(self, snapshot: Any) -> str:
        ...

    def loads(self, text: str) -> Any:
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# Restored Error — JSON Stand-in for Persisted Exceptions
# ═══════════════════════════════════════════════════════════════════════════════


class RestoredError(Exception):
    """
    Exception rebuilt from a JSON snapshot.

    The original class is not importable from text alone, so only its
    qualified name and message survive.
    """

    def __init__(self, type_name: str, message: str) -> None:
        super().__init__(message)
        self.type_name = type_name
        self.message = message

    def __repr__(self) -> str:
        return f"RestoredError({self.type_name!r}, {self.message!r})"


def _qualname(exc: BaseException) -> str:
    cls = type(exc)
    return f"{cls.__module__}.{cls.__qualname__}"


# ═══════════════════════════════════════════════════════════════════════════════
# JSON Codec (Default)
# ═══════════════════════════════════════════════════════════════════════════════


class JsonCodec:
    """
    JSON codec.

    Exceptions are written as {"__exception__": name, "message": text} and
    read back as RestoredError. Other non-JSON values raise CodecError.
    """

    def _default(self, obj: Any) -> Any:
        if isinstance(obj, RestoredError):
            return {_EXCEPTION_TAG: obj.type_name, "message": obj.message}
        if isinstance(obj, BaseException):
            return {_EXCEPTION_TAG: _qualname(obj), "message": str(obj)}
        raise TypeError(f"{type(obj).__name__} is not JSON serializable")

    def _object_hook(self, obj: dict[str, Any]) -> Any:
        if _EXCEPTION_TAG in obj:
            return RestoredError(obj[_EXCEPTION_TAG], obj.get("message", ""))
        return obj

    def dumps(self, snapshot: Any) -> str:
        try:
            return json.dumps(snapshot, default=self._default)
        except (TypeError, ValueError) as e:
            raise CodecError(f"Failed to encode snapshot: {e}") from e

    def loads(self, text: str) -> Any:
        try:
            return json.loads(text, object_hook=self._object_hook)
        except ValueError as e:
            raise CodecError(f"Failed to decode snapshot: {e}") from e


# ═══════════════════════════════════════════════════════════════════════════════
# Pickle Codec
# ═══════════════════════════════════════════════════════════════════════════════


class PickleCodec:
    """
    Pickle codec, base64 text for string storage.

    Note: Restores original exception classes. Only load snapshots you wrote.
    """

    def __init__(self, protocol: int = pickle.HIGHEST_PROTOCOL) -> None:
        self._protocol = protocol

    def dumps(self, snapshot: Any) -> str:
        try:
            data = pickle.dumps(snapshot, protocol=self._protocol)
        except (pickle.PicklingError, TypeError, AttributeError) as e:
            raise CodecError(f"Failed to encode snapshot: {e}") from e
        return base64.b64encode(data).decode("ascii")

    def loads(self, text: str) -> Any:
        try:
            return pickle.loads(base64.b64decode(text.encode("ascii"), validate=True))
        except (binascii.Error, pickle.UnpicklingError, EOFError, ValueError) as e:
            raise CodecError(f"Failed to decode snapshot: {e}") from e


__all__ = (
    "Codec",
    "RestoredError",
    "JsonCodec",
    "PickleCodec",
)
