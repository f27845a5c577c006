"""Plugin manager implementation.

This module provides the plugin registry, fault-isolated hook calls, hook
fan-out across plugins and the aggregated results report.

Dispatch methods must be called while an asyncio event loop is running. Each
returns an awaitable right away; awaiting it yields one result per plugin
implementing the hook, in registration order. Failures inside plugin hooks
never propagate to the caller.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from core.config import PluginConfig, RunnerConfig
from core.exceptions import (
    HookFailure,
    PostReportHookFailure,
    describe_cause,
    wrap_exception,
)
from core.logger import get_logger

from .hookspecs import collect_hookspecs
from .loader import PluginInstance, annotate, load_plugins
from .promises import PromiseType, gather_settled, settled, to_future
from .results import (
    Assertion,
    AssertionStore,
    PluginResults,
    ReportState,
    SpecResult,
    render_results,
)
from .specs import RunnerHookSpec

logger = get_logger(__name__)

HOOKSPECS = collect_hookspecs(RunnerHookSpec)


def _hook_dispatcher(hook_name: str) -> Callable[..., asyncio.Future[list[Any]]]:
    """Build the dispatch method for one hook declared on ``RunnerHookSpec``."""
    opts = HOOKSPECS[hook_name]

    def dispatch_hook(
        self: PluginManager, *args: Any, **kwargs: Any
    ) -> asyncio.Future[list[Any]]:
        return self.dispatch(
            hook_name,
            *args,
            promise_type=opts.promise_type,
            fail_value=opts.fail_value,
            **kwargs,
        )

    dispatch_hook.__name__ = hook_name
    dispatch_hook.__doc__ = getattr(RunnerHookSpec, hook_name).__doc__
    return dispatch_hook


class PluginManager:
    """Hold loaded plugins, dispatch hooks to them and collect their results."""

    def __init__(
        self,
        config: RunnerConfig | Mapping[str, Any] | None = None,
        *,
        store: AssertionStore | None = None,
    ) -> None:
        """Load every plugin listed in ``config``.

        Args:
            config: Runner configuration, or a mapping validated into one.
            store: Assertion store to share; a new one when omitted.

        Raises:
            ConfigurationError: If a plugin entry cannot be loaded.
        """
        if config is None:
            config = RunnerConfig()
        elif not isinstance(config, RunnerConfig):
            config = RunnerConfig.model_validate(config)

        self._store = store if store is not None else AssertionStore()
        self._instances: list[PluginInstance] = load_plugins(
            config.plugins, config.config_dir, self._store
        )

    def register(self, obj: Any, config: PluginConfig | None = None) -> PluginInstance:
        """Annotate and append one plugin object after the configured ones."""
        conf = config or PluginConfig(inline=obj)
        instance = annotate(obj, conf, len(self._instances), self._store)
        self._instances.append(instance)
        logger.debug('Plugin "%s" loaded.', instance.name)
        return instance

    def get(self, name: str) -> PluginInstance | None:
        """Return the first plugin with the given name."""
        for instance in self._instances:
            if instance.name == name:
                return instance
        return None

    def get_all(self) -> list[PluginInstance]:
        """Return all plugins in registration order."""
        return list(self._instances)

    def has(self, name: str) -> bool:
        return self.get(name) is not None

    @property
    def results_reported(self) -> bool:
        return self._store.results_reported

    def skip_angular_stability(self) -> bool:
        """Return whether any plugin asks to skip the app stability wait."""
        return any(instance.skip_angular_stability for instance in self._instances)

    def safe_call(
        self,
        instance: PluginInstance,
        hook_name: str,
        args: Iterable[Any] = (),
        kwargs: Mapping[str, Any] | None = None,
        fail_value: Any = None,
    ) -> asyncio.Future[Any]:
        """Call one hook on one plugin without letting it fail the caller.

        The hook is called synchronously. If it raises, or the awaitable it
        returns raises, the failure is recorded for the plugin and the returned
        future completes with ``fail_value``; otherwise it completes with the
        hook's value.
        """
        loop = asyncio.get_running_loop()
        try:
            result = getattr(instance.obj, hook_name)(*args, **(kwargs or {}))
            pending = to_future(result, loop)
        except Exception as exc:
            self._record_hook_failure(instance, hook_name, exc)
            return settled(fail_value, loop)

        if pending is None:
            return settled(result, loop)
        return loop.create_task(
            self._settle(instance, hook_name, pending, fail_value)
        )

    async def _settle(
        self,
        instance: PluginInstance,
        hook_name: str,
        pending: asyncio.Future[Any],
        fail_value: Any,
    ) -> Any:
        try:
            return await pending
        except Exception as exc:
            self._record_hook_failure(instance, hook_name, exc)
            return fail_value

    def _record_hook_failure(
        self, instance: PluginInstance, hook_name: str, exc: Exception
    ) -> None:
        message = f"Failure during {hook_name}: {describe_cause(exc)}"
        context = {"plugin": instance.name, "hook": hook_name}

        if self._store.state is ReportState.REPORTED:
            failure = wrap_exception(exc, PostReportHookFailure, message, context=context)
            render_results(
                [
                    SpecResult(
                        description=f"{instance.name} Runtime",
                        assertions=[
                            Assertion(
                                passed=False,
                                error_msg=failure.message,
                                stack_trace=failure.stack_trace,
                            )
                        ],
                    )
                ]
            )
            return

        failure = wrap_exception(exc, HookFailure, message, context=context)
        logger.debug("%s", failure, extra=context)
        instance.add_failure(failure.message, {"stack_trace": failure.stack_trace})

    def dispatch(
        self,
        hook_name: str,
        *args: Any,
        promise_type: PromiseType = PromiseType.ASYNCIO,
        fail_value: Any = None,
        **kwargs: Any,
    ) -> asyncio.Future[list[Any]]:
        """Call ``hook_name`` on every plugin implementing it.

        All calls are issued before any of them is awaited. The combined
        future never fails and lists results in registration order.

        Args:
            hook_name: Hook method name.
            *args: Positional hook arguments.
            promise_type: Completion convention the hook is declared with.
                Informational only: it is logged, and both conventions are
                accepted from any hook regardless of this value.
            fail_value: Result used for a plugin whose hook failed.
            **kwargs: Keyword hook arguments.
        """
        calls = [
            self.safe_call(instance, hook_name, args, kwargs, fail_value)
            for instance in self._instances
            if instance.implements(hook_name)
        ]
        logger.debug(
            "Dispatched %s (%s) to %d plugin(s)",
            hook_name,
            promise_type.value,
            len(calls),
        )
        return gather_settled(calls)

    setup = _hook_dispatcher("setup")
    teardown = _hook_dispatcher("teardown")
    post_results = _hook_dispatcher("post_results")
    post_test = _hook_dispatcher("post_test")
    on_page_load = _hook_dispatcher("on_page_load")
    on_page_stable = _hook_dispatcher("on_page_stable")
    wait_for_promise = _hook_dispatcher("wait_for_promise")
    wait_for_condition = _hook_dispatcher("wait_for_condition")

    def get_results(self) -> PluginResults:
        """Flatten recorded assertions into a report, render it, then lock results.

        Meant to be called once per run. After it returns, ``add_failure`` and
        ``add_success`` raise and hook failures are rendered immediately.
        """
        results = PluginResults(
            failed_count=self._store.failed_count(),
            spec_results=self._store.spec_results(),
        )
        render_results(results.spec_results)
        self._store.mark_reported()
        return results
