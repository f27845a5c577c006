"""Built-in hook specifications for runner plugins."""

from __future__ import annotations

from typing import Any

from .hookspecs import hookspec
from .promises import PromiseType


class RunnerHookSpec:
    """Hooks the runner dispatches to plugins.

    Every hook is optional. Hooks may return a plain value, an awaitable or a
    ``concurrent.futures.Future``.
    """

    @hookspec
    def setup(self) -> Any:
        """Called after the test framework is set up, before any spec runs."""

    @hookspec
    def teardown(self) -> Any:
        """Called after all specs ran, before results are reported."""

    @hookspec
    def post_results(self) -> Any:
        """Called after results have been reported and the run is finishing."""

    @hookspec
    def post_test(self, passed: bool, test_info: dict[str, Any]) -> Any:
        """Called after each test block completes."""

    @hookspec(promise_type=PromiseType.FUTURE)  # type: ignore[untyped-decorator]
    def on_page_load(self, browser: Any) -> Any:
        """Called after the page starts loading, before the app is bootstrapped."""

    @hookspec(promise_type=PromiseType.FUTURE)  # type: ignore[untyped-decorator]
    def on_page_stable(self, browser: Any) -> Any:
        """Called after the page has loaded and the app is stable."""

    @hookspec(promise_type=PromiseType.FUTURE)  # type: ignore[untyped-decorator]
    def wait_for_promise(self, browser: Any) -> Any:
        """Called between every browser command, before the stability check."""

    @hookspec(promise_type=PromiseType.FUTURE, fail_value=True)  # type: ignore[untyped-decorator]
    def wait_for_condition(self, browser: Any) -> Any:
        """Called between every browser command; a falsy result means "keep waiting"."""
