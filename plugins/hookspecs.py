"""Hook specification utilities.

This module provides the ``hookspec`` decorator used to declare the hooks a
plugin may implement, together with the dispatch options each hook carries.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, ParamSpec, TypeVar

from .promises import PromiseType

P = ParamSpec("P")
R = TypeVar("R")


@dataclass(frozen=True, slots=True)
class HookSpecOptions:
    """Options attached to a hook specification.

    Attributes:
        promise_type: Completion convention the hook is declared with.
        fail_value: Result substituted for a plugin whose hook failed.
    """

    promise_type: PromiseType = PromiseType.ASYNCIO
    fail_value: Any = None


def hookspec(
    func: Callable[P, R] | None = None,
    *,
    promise_type: PromiseType = PromiseType.ASYNCIO,
    fail_value: Any = None,
) -> Any:
    """Mark a function as a hook specification.

    Args:
        func: Function to decorate when used as ``@hookspec``.
        promise_type: Completion convention of the hook.
        fail_value: Value a failed call contributes to the dispatch result.

    Returns:
        Decorated function, or a decorator when used with keyword arguments.
    """

    def decorator(target: Callable[P, R]) -> Callable[P, R]:
        setattr(target, "__hookspec__", True)
        setattr(
            target,
            "__hookspec_opts__",
            HookSpecOptions(promise_type=promise_type, fail_value=fail_value),
        )
        return target

    if func is None:
        return decorator
    return decorator(func)


def get_hookspec_options(func: Callable[..., Any]) -> HookSpecOptions:
    """Return the options of a ``@hookspec`` function.

    Raises:
        TypeError: If ``func`` was not decorated with ``hookspec``.
    """
    if not getattr(func, "__hookspec__", False):
        raise TypeError(f"{getattr(func, '__name__', func)!r} is not a hook specification")
    opts: HookSpecOptions = getattr(func, "__hookspec_opts__")
    return opts


def collect_hookspecs(spec_class: type) -> dict[str, HookSpecOptions]:
    """Collect hook names and options declared on a spec class, in definition order."""
    return {
        name: get_hookspec_options(member)
        for name, member in vars(spec_class).items()
        if callable(member) and getattr(member, "__hookspec__", False)
    }
