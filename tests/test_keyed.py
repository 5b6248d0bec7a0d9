"""Tests for tuple-keyed declarative resources."""

from __future__ import annotations

import pytest

from reservoir import ArityError
from reservoir import resource as R
from tests._support import Boom, Counting


def concat(*keys: object) -> str:
    return "-".join(map(str, keys))


class TestKeyedFetch:
    async def test_each_tuple_produced_once(self) -> None:
        producer = Counting(value=concat)
        r = R.create_declarative_resource(producer, arity=2)

        assert await r.fetch(1, 2) == "1-2"
        assert await r.fetch(1, 3) == "1-3"
        assert await r.fetch(1, 2) == "1-2"
        assert producer.calls == [(1, 2), (1, 3)]

    async def test_rejection_reraises_same_instance(self) -> None:
        error = Boom("x")
        producer = Counting(error=error)
        r = R.create_declarative_resource(producer, arity=2)

        with pytest.raises(Boom, match="x") as first:
            await r.fetch(1, 2)
        with pytest.raises(Boom) as second:
            await r.fetch(1, 2)

        assert first.value is second.value is error
        assert len(producer.calls) == 1

    async def test_failure_does_not_leak_to_other_tuples(self) -> None:
        async def producer(a: int) -> int:
            if a < 0:
                raise Boom("negative")
            return a * 10

        r = R.keyed(producer, arity=1).build()

        with pytest.raises(Boom):
            await r.fetch(-1)
        assert await r.fetch(2) == 20
        assert r.status(-1) is R.Status.ERROR
        assert r.status(2) is R.Status.SUCCESS
        assert r.status(3) is R.Status.EMPTY

    @pytest.mark.parametrize("keys", [(), (1,), (1, 2, 3)])
    async def test_wrong_key_count(self, keys: tuple[int, ...]) -> None:
        r = R.create_declarative_resource(Counting(value=1), arity=2)

        with pytest.raises(ArityError) as exc_info:
            await r.fetch(*keys)
        assert exc_info.value.expected == 2
        assert exc_info.value.got == len(keys)

    def test_wrong_key_count_on_read_is_a_type_error(self) -> None:
        r = R.create_declarative_resource(Counting(value=1), arity=1)
        with pytest.raises(TypeError):
            r.read()

    def test_arity_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            R.KeyedResource(Counting(), arity=0)
        with pytest.raises(ValueError):
            R.keyed(Counting(), arity=0)
        with pytest.raises(ValueError):
            R.create_declarative_resource(Counting(), arity=-1)


class TestKeyedRead:
    async def test_pending_then_ready(self) -> None:
        producer = Counting(value=concat)
        r = R.keyed(producer, arity=3).build()

        pending = r.read("a", "b", "c")
        assert isinstance(pending, R.Pending)
        await pending

        assert r.read("a", "b", "c") == R.Ready("a-b-c")
        other = r.read("a", "b", "d")
        assert isinstance(other, R.Pending)
        await other
        assert producer.calls == [("a", "b", "c"), ("a", "b", "d")]

    async def test_until_ready(self) -> None:
        r = R.keyed(Counting(value=concat), arity=2).build()
        assert await R.until_ready(r, "x", 1) == "x-1"


class TestKeyedClear:
    async def test_clear_one_tuple(self) -> None:
        producer = Counting(value=concat)
        r = R.create_declarative_resource(producer, arity=2)
        await r.fetch("a", "b")
        await r.fetch("a", "c")

        r.clear("a", "b")

        assert r.status("a", "b") is R.Status.EMPTY
        assert r.status("a", "c") is R.Status.SUCCESS
        await r.fetch("a", "b")
        assert producer.calls.count(("a", "b")) == 2

    async def test_clear_prefix_is_noop(self) -> None:
        producer = Counting(value=concat)
        r = R.create_declarative_resource(producer, arity=2)
        await r.fetch("a", "b")

        r.clear("a")

        assert r.status("a", "b") is R.Status.SUCCESS
        await r.fetch("a", "b")
        assert len(producer.calls) == 1

    async def test_clear_unknown_tuple_is_noop(self) -> None:
        r = R.create_declarative_resource(Counting(value=1), arity=2)
        await r.fetch("a", "b")

        r.clear("z", "z")
        r.clear("a", "b", "c")

        assert r.status("a", "b") is R.Status.SUCCESS
        assert r.status("z", "z") is R.Status.EMPTY

    async def test_clear_all(self) -> None:
        producer = Counting(value=concat)
        r = R.create_declarative_resource(producer, arity=1)
        for key in ("a", "b", "c"):
            await r.fetch(key)

        r.clear()

        for key in ("a", "b", "c"):
            assert r.status(key) is R.Status.EMPTY
        await r.fetch("a")
        assert len(producer.calls) == 4

    async def test_cleared_failure_can_succeed(self) -> None:
        producer = Counting(error=Boom("down"))
        r = R.create_declarative_resource(producer, arity=1)
        with pytest.raises(Boom):
            await r.fetch("k")

        r.clear("k")
        producer.error = None
        producer.value = "up"

        assert await r.fetch("k") == "up"
