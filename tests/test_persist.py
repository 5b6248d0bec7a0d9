"""Tests for durable storage, codecs and the snapshot adapter."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from reservoir import CodecError, StorageError
from reservoir import persist as P
from tests._support import Boom


@dataclass
class Counter:
    """Minimal Snapshot implementation."""

    n: int = 0

    def to_snapshot(self) -> Any:
        return {"n": self.n}

    def restore(self, snapshot: Any) -> "Counter":
        return Counter(n=snapshot["n"])


# ═══════════════════════════════════════════════════════════════════════════════
# Storage
# ═══════════════════════════════════════════════════════════════════════════════


class TestMemoryStorage:
    def test_missing_key_is_none(self, storage: P.MemoryStorage) -> None:
        assert storage.get_item("nope") is None

    def test_set_then_get(self, storage: P.MemoryStorage) -> None:
        storage.set_item("k", "v1")
        storage.set_item("k", "v2")
        assert storage.get_item("k") == "v2"


class TestFileStorage:
    def test_roundtrip_and_missing(self, tmp_path: Path) -> None:
        fs = P.FileStorage(tmp_path / "snapshots")
        assert fs.get_item("users") is None

        fs.set_item("users", '{"a": 1}')
        assert fs.get_item("users") == '{"a": 1}'

    def test_unsafe_key_stays_in_directory(self, tmp_path: Path) -> None:
        fs = P.FileStorage(tmp_path)
        fs.set_item("../escape/key", "x")

        path = fs.path_for("../escape/key")
        assert path.parent == tmp_path
        assert fs.get_item("../escape/key") == "x"

    def test_read_failure_raises_storage_error(self, tmp_path: Path) -> None:
        fs = P.FileStorage(tmp_path)
        fs.path_for("dir").mkdir()

        with pytest.raises(StorageError):
            fs.get_item("dir")


class TestFunctionalStorage:
    def test_delegates(self) -> None:
        backing: dict[str, str] = {}
        fs = P.storage_from(get_item=backing.get, set_item=backing.__setitem__)

        fs.set_item("k", "v")
        assert backing == {"k": "v"}
        assert fs.get_item("k") == "v"


class TestSQLAlchemyStorage:
    def test_missing_key_is_none(self, sql_storage: P.SQLAlchemyStorage) -> None:
        assert sql_storage.get_item("nope") is None

    def test_upsert(self, sql_storage: P.SQLAlchemyStorage) -> None:
        sql_storage.set_item("k", "first")
        sql_storage.set_item("k", "second")
        sql_storage.set_item("other", "x")

        assert sql_storage.get_item("k") == "second"
        assert sql_storage.get_item("other") == "x"

    def test_missing_table_raises_storage_error(self) -> None:
        engine = create_engine("sqlite://")
        broken = P.SQLAlchemyStorage(sessionmaker(engine))

        with pytest.raises(StorageError) as exc_info:
            broken.get_item("k")
        assert exc_info.value.key == "k"


# ═══════════════════════════════════════════════════════════════════════════════
# Codecs
# ═══════════════════════════════════════════════════════════════════════════════


class TestJsonCodec:
    def test_plain_data(self) -> None:
        codec = P.JsonCodec()
        assert codec.loads(codec.dumps({"data": [1, "two", None]})) == {"data": [1, "two", None]}

    def test_exception_restored_as_restored_error(self) -> None:
        codec = P.JsonCodec()
        restored = codec.loads(codec.dumps({"value": Boom("kaput")}))["value"]

        assert isinstance(restored, P.RestoredError)
        assert restored.type_name == "tests._support.Boom"
        assert restored.message == "kaput"
        assert str(restored) == "kaput"

    def test_restored_error_survives_second_write(self) -> None:
        codec = P.JsonCodec()
        once = codec.loads(codec.dumps([ValueError("x")]))
        twice = codec.loads(codec.dumps(once))

        assert twice[0].type_name == "builtins.ValueError"
        assert twice[0].message == "x"

    def test_unserializable_value(self) -> None:
        with pytest.raises(CodecError):
            P.JsonCodec().dumps({"data": object()})

    def test_invalid_text(self) -> None:
        with pytest.raises(CodecError):
            P.JsonCodec().loads("{not json")


class TestPickleCodec:
    def test_exception_keeps_class(self) -> None:
        codec = P.PickleCodec()
        restored = codec.loads(codec.dumps({"value": Boom("kaput")}))["value"]

        assert type(restored) is Boom
        assert restored.args == ("kaput",)

    def test_invalid_text(self) -> None:
        with pytest.raises(CodecError):
            P.PickleCodec().loads("%%% not base64 %%%")


# ═══════════════════════════════════════════════════════════════════════════════
# Adapter
# ═══════════════════════════════════════════════════════════════════════════════


class TestHolder:
    def test_mutate_in_place(self) -> None:
        holder = P.Holder(Counter())
        with holder.mutate() as c:
            c.n += 1
        assert holder.state.n == 1

    def test_replace(self) -> None:
        holder = P.Holder(Counter(n=5))
        holder.replace(Counter())
        assert holder.state.n == 0


class TestPersisted:
    def test_every_commit_writes_whole_state(self, storage: P.MemoryStorage) -> None:
        holder = P.Persisted(Counter(), key="c", storage=storage)
        assert storage.get_item("c") is None

        with holder.mutate() as c:
            c.n = 3
        assert storage.get_item("c") == '{"n": 3}'

        holder.replace(Counter(n=7))
        assert storage.get_item("c") == '{"n": 7}'

    def test_hydrates_over_default(self, storage: P.MemoryStorage) -> None:
        storage.set_item("c", '{"n": 42}')
        holder = P.Persisted(Counter(), key="c", storage=storage)
        assert holder.state.n == 42

    def test_empty_snapshot_uses_default(self, storage: P.MemoryStorage) -> None:
        storage.set_item("c", "")
        holder = P.Persisted(Counter(n=9), key="c", storage=storage)
        assert holder.state.n == 9

    def test_failed_body_does_not_persist(self, storage: P.MemoryStorage) -> None:
        holder = P.Persisted(Counter(), key="c", storage=storage)
        with pytest.raises(RuntimeError):
            with holder.mutate() as c:
                c.n = 1
                raise RuntimeError("abort")
        assert storage.get_item("c") is None

    def test_corrupt_snapshot_propagates(self, storage: P.MemoryStorage) -> None:
        storage.set_item("c", "{broken")
        with pytest.raises(CodecError):
            P.Persisted(Counter(), key="c", storage=storage)

    def test_storage_failure_propagates(self) -> None:
        def refuse(key: str, value: str) -> None:
            raise StorageError("disk full", key)

        holder = P.Persisted(
            Counter(),
            key="c",
            storage=P.storage_from(get_item=lambda key: None, set_item=refuse),
        )
        with pytest.raises(StorageError, match="disk full"):
            holder.replace(Counter(n=1))

    def test_sqlalchemy_backend(self, sql_storage: P.SQLAlchemyStorage) -> None:
        holder = P.Persisted(Counter(), key="c", storage=sql_storage)
        holder.replace(Counter(n=11))

        again = P.Persisted(Counter(), key="c", storage=sql_storage)
        assert again.state.n == 11
