"""Unit tests for process-scoped memoization."""

import asyncio

import pytest

from tpaws.cache import make_key, memoized


@pytest.mark.unit
class TestMemoizedSync:
    """Tests for memoized on plain functions."""

    def test_same_args_call_once(self) -> None:
        calls: list[int] = []

        @memoized
        def square(x: int) -> int:
            calls.append(x)
            return x * x

        assert square(3) == 9
        assert square(3) == 9
        assert calls == [3]

    def test_different_args_are_independent(self) -> None:
        calls: list[int] = []

        @memoized
        def double(x: int) -> int:
            calls.append(x)
            return x * 2

        assert double(1) == 2
        assert double(2) == 4
        assert calls == [1, 2]
        assert double.cache_size() == 2

    def test_failures_not_cached(self) -> None:
        attempts: list[int] = []

        @memoized
        def flaky(x: int) -> int:
            attempts.append(x)
            if len(attempts) == 1:
                raise RuntimeError("boom")
            return x

        with pytest.raises(RuntimeError):
            flaky(1)
        assert flaky(1) == 1
        assert len(attempts) == 2

    def test_unhashable_args(self) -> None:
        calls: list[object] = []

        @memoized
        def total(values: list[int]) -> int:
            calls.append(values)
            return sum(values)

        assert total([1, 2]) == 3
        assert total([1, 2]) == 3
        assert len(calls) == 1

    def test_cache_clear(self) -> None:
        calls: list[int] = []

        @memoized
        def ident(x: int) -> int:
            calls.append(x)
            return x

        ident(1)
        ident.cache_clear()
        ident(1)
        assert calls == [1, 1]


@pytest.mark.unit
class TestMemoizedAsync:
    """Tests for memoized on coroutine functions and methods."""

    @pytest.mark.asyncio
    async def test_coroutine_called_once(self) -> None:
        calls: list[str] = []

        @memoized
        async def fetch(key: str) -> str:
            calls.append(key)
            return key.upper()

        assert await fetch("a") == "A"
        assert await fetch("a") == "A"
        assert calls == ["a"]

    @pytest.mark.asyncio
    async def test_methods_keyed_by_instance(self) -> None:
        class Client:
            def __init__(self) -> None:
                self.calls = 0

            @memoized
            async def get(self, key: str) -> str:
                self.calls += 1
                return key

        first, second = Client(), Client()
        await first.get("x")
        await first.get("x")
        await second.get("x")

        assert first.calls == 1
        assert second.calls == 1


@pytest.mark.unit
class TestMakeKey:
    """Tests for make_key."""

    def test_kwargs_order_irrelevant(self) -> None:
        assert make_key((1,), {"a": 1, "b": 2}) == make_key((1,), {"b": 2, "a": 1})

    def test_unhashable_is_hashable_key(self) -> None:
        key = make_key(([1, 2],), {"x": {"y": 1}})

        assert hash(key) is not None

    def test_positional_and_keyword_do_not_collide(self) -> None:
        assert make_key((1, ("a", 2)), {}) != make_key((1,), {"a": 2})

    def test_unhashable_not_confused_with_its_repr(self) -> None:
        assert make_key(([1, 2],), {}) != make_key(("[1, 2]",), {})


@pytest.mark.unit
class TestMemoizedKeys:
    """Tests that distinct calls never share a cache entry."""

    def test_keyword_call_not_served_from_positional_entry(self) -> None:
        @memoized
        def describe(x: int, *rest: object, **named: object) -> str:
            return f"{x} {rest} {named}"

        positional = describe(1, ("a", 2))
        keyword = describe(1, a=2)

        assert positional != keyword
        assert describe.cache_size() == 2

    def test_list_and_string_cached_separately(self) -> None:
        calls: list[object] = []

        @memoized
        def kind(value: object) -> str:
            calls.append(value)
            return type(value).__name__

        assert kind([1, 2]) == "list"
        assert kind("[1, 2]") == "str"
        assert len(calls) == 2


@pytest.mark.unit
class TestMemoizedConcurrent:
    """Tests for concurrent awaits of the same coroutine call."""

    @pytest.mark.asyncio
    async def test_gather_same_key_calls_once(self) -> None:
        calls: list[str] = []

        @memoized
        async def fetch(key: str) -> str:
            calls.append(key)
            await asyncio.sleep(0.01)
            return key.upper()

        results = await asyncio.gather(fetch("x"), fetch("x"))

        assert results == ["X", "X"]
        assert calls == ["x"]

    @pytest.mark.asyncio
    async def test_failed_call_is_retried(self) -> None:
        attempts: list[str] = []

        @memoized
        async def fetch(key: str) -> str:
            attempts.append(key)
            await asyncio.sleep(0)
            if len(attempts) == 1:
                raise RuntimeError("boom")
            return key

        with pytest.raises(RuntimeError):
            await fetch("x")
        assert await fetch("x") == "x"
        assert fetch.cache_size() == 1
        assert attempts == ["x", "x"]

    @pytest.mark.asyncio
    async def test_concurrent_failure_raises_for_every_waiter(self) -> None:
        attempts: list[str] = []

        @memoized
        async def fetch(key: str) -> str:
            attempts.append(key)
            await asyncio.sleep(0.01)
            raise RuntimeError("down")

        results = await asyncio.gather(fetch("x"), fetch("x"), return_exceptions=True)

        assert all(isinstance(r, RuntimeError) for r in results)
        assert attempts == ["x"]
        assert fetch.cache_size() == 0
