"""Normalization of hook completion conventions.

Hooks can complete in two ways besides returning a plain value: with a native
asyncio awaitable (coroutine, task, ``asyncio.Future``) or with a
``concurrent.futures.Future`` handed back by a driver thread pool. Everything
past this module only sees ``asyncio.Future``.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import inspect
from collections.abc import Iterable
from enum import Enum
from typing import Any


class PromiseType(str, Enum):
    """Completion conventions a hook result may follow."""

    ASYNCIO = "asyncio"
    FUTURE = "future"


def detect_promise_type(value: Any) -> PromiseType | None:
    """Return the convention ``value`` follows, or ``None`` for a plain value."""
    if isinstance(value, concurrent.futures.Future):
        return PromiseType.FUTURE
    if inspect.isawaitable(value):
        return PromiseType.ASYNCIO
    return None


def to_future(
    value: Any, loop: asyncio.AbstractEventLoop | None = None
) -> asyncio.Future[Any] | None:
    """Wrap an awaitable of either convention into an ``asyncio.Future``.

    Returns ``None`` when ``value`` is not awaitable.
    """
    promise_type = detect_promise_type(value)
    if promise_type is PromiseType.FUTURE:
        return asyncio.wrap_future(value, loop=loop)
    if promise_type is PromiseType.ASYNCIO:
        return asyncio.ensure_future(value, loop=loop)
    return None


def settled(value: Any, loop: asyncio.AbstractEventLoop | None = None) -> asyncio.Future[Any]:
    """Return a future already completed with ``value``."""
    future = (loop or asyncio.get_running_loop()).create_future()
    future.set_result(value)
    return future


def gather_settled(
    futures: Iterable[asyncio.Future[Any]],
    loop: asyncio.AbstractEventLoop | None = None,
) -> asyncio.Future[list[Any]]:
    """Combine futures into one yielding their results in the given order."""
    pending = list(futures)
    if not pending:
        return settled([], loop)
    return asyncio.gather(*pending)
