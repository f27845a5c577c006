"""Unit tests for hook specifications."""

from __future__ import annotations

import pytest

from plugins.hookspecs import (
    HookSpecOptions,
    collect_hookspecs,
    get_hookspec_options,
    hookspec,
)
from plugins.promises import PromiseType
from plugins.specs import RunnerHookSpec


def test_hookspec_decorator_marks_function_with_defaults() -> None:
    @hookspec
    def on_event() -> None:
        return None

    assert getattr(on_event, "__hookspec__", False) is True
    assert get_hookspec_options(on_event) == HookSpecOptions(
        promise_type=PromiseType.ASYNCIO, fail_value=None
    )


def test_hookspec_decorator_with_options() -> None:
    @hookspec(promise_type=PromiseType.FUTURE, fail_value=False)
    def on_event() -> None:
        return None

    opts = get_hookspec_options(on_event)
    assert opts.promise_type is PromiseType.FUTURE
    assert opts.fail_value is False


def test_get_hookspec_options_rejects_plain_function() -> None:
    def not_a_hook() -> None:
        return None

    with pytest.raises(TypeError, match="not a hook specification"):
        get_hookspec_options(not_a_hook)


def test_runner_hookspec_declares_all_hooks_in_order() -> None:
    specs = collect_hookspecs(RunnerHookSpec)

    assert list(specs) == [
        "setup",
        "teardown",
        "post_results",
        "post_test",
        "on_page_load",
        "on_page_stable",
        "wait_for_promise",
        "wait_for_condition",
    ]


def test_runner_hookspec_conventions() -> None:
    specs = collect_hookspecs(RunnerHookSpec)

    lifecycle = ["setup", "teardown", "post_results", "post_test"]
    page = ["on_page_load", "on_page_stable", "wait_for_promise", "wait_for_condition"]
    assert all(specs[name].promise_type is PromiseType.ASYNCIO for name in lifecycle)
    assert all(specs[name].promise_type is PromiseType.FUTURE for name in page)


def test_only_wait_for_condition_overrides_fail_value() -> None:
    specs = collect_hookspecs(RunnerHookSpec)

    assert specs["wait_for_condition"].fail_value is True
    assert [name for name, opts in specs.items() if opts.fail_value is not None] == [
        "wait_for_condition"
    ]
