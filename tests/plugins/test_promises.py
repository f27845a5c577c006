"""Unit tests for completion convention detection and normalization."""

from __future__ import annotations

import asyncio
import concurrent.futures

import pytest

from plugins.promises import (
    PromiseType,
    detect_promise_type,
    gather_settled,
    settled,
    to_future,
)


async def _value(value: object) -> object:
    await asyncio.sleep(0)
    return value


class _CustomAwaitable:
    def __await__(self):  # type: ignore[no-untyped-def]
        return _value("custom").__await__()


def test_detect_plain_values() -> None:
    assert detect_promise_type(None) is None
    assert detect_promise_type(42) is None
    assert detect_promise_type([1, 2]) is None


def test_detect_concurrent_future() -> None:
    assert detect_promise_type(concurrent.futures.Future()) is PromiseType.FUTURE


@pytest.mark.asyncio
async def test_detect_asyncio_conventions() -> None:
    coro = _value(1)
    try:
        assert detect_promise_type(coro) is PromiseType.ASYNCIO
    finally:
        coro.close()
    assert detect_promise_type(asyncio.get_running_loop().create_future()) is PromiseType.ASYNCIO
    assert detect_promise_type(_CustomAwaitable()) is PromiseType.ASYNCIO


@pytest.mark.asyncio
async def test_to_future_returns_none_for_plain_value() -> None:
    assert to_future("plain") is None


@pytest.mark.asyncio
async def test_to_future_wraps_coroutine_and_custom_awaitable() -> None:
    assert await to_future(_value("coro")) == "coro"  # type: ignore[misc]
    assert await to_future(_CustomAwaitable()) == "custom"  # type: ignore[misc]


@pytest.mark.asyncio
async def test_to_future_wraps_thread_pool_future() -> None:
    with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
        wrapped = to_future(pool.submit(lambda: "from-thread"))

        assert isinstance(wrapped, asyncio.Future)
        assert await wrapped == "from-thread"


@pytest.mark.asyncio
async def test_to_future_propagates_thread_pool_exception() -> None:
    future: concurrent.futures.Future[str] = concurrent.futures.Future()
    future.set_exception(ValueError("driver crashed"))

    with pytest.raises(ValueError, match="driver crashed"):
        await to_future(future)  # type: ignore[misc]


@pytest.mark.asyncio
async def test_settled_is_done() -> None:
    future = settled("done")

    assert future.done()
    assert await future == "done"


@pytest.mark.asyncio
async def test_gather_settled_keeps_order() -> None:
    slow = asyncio.ensure_future(_delayed("slow", 0.02))
    fast = asyncio.ensure_future(_delayed("fast", 0))

    assert await gather_settled([slow, fast]) == ["slow", "fast"]


@pytest.mark.asyncio
async def test_gather_settled_empty() -> None:
    assert await gather_settled([]) == []


async def _delayed(value: str, delay: float) -> str:
    await asyncio.sleep(delay)
    return value
