"""Exception hierarchy and helpers for the plugin runner.

This module provides a consistent exception model used by the plugin layer:

- ``PluginError`` as the base class with error code, context and root cause.
- ``ConfigurationError`` for plugin lists that cannot be loaded.
- ``HookFailure`` / ``PostReportHookFailure`` wrapping exceptions raised by
  plugin hooks.
- ``ResultsReportedError`` for results added after the report was published.
- Utility helpers to wrap external exceptions and to format errors.
"""

from __future__ import annotations

import traceback
from typing import Any, Mapping, TypeVar

TPluginError = TypeVar("TPluginError", bound="PluginError")


class PluginError(Exception):
    """Base exception for all runner-level errors.

    Attributes:
        message: Human-readable error message.
        code: Stable error code for programmatic processing.
        context: Extra metadata useful for debugging and logging.
        cause: Original exception that triggered this error.
    """

    def __init__(
        self,
        message: str,
        code: str = "PLUGIN_ERROR",
        context: Mapping[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.message: str = message
        self.code: str = code
        self.context: dict[str, Any] = dict(context) if context is not None else {}
        self.cause: BaseException | None = cause

        super().__init__(message)

        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        """Return a formatted, readable exception string."""
        return format_exception(self)


class ConfigurationError(PluginError):
    """Plugin configuration cannot produce a plugin object.

    Raised at load time; there is no recovery from a misconfigured plugin list.
    """

    def __init__(
        self,
        message: str,
        code: str = "CONFIG_ERROR",
        context: Mapping[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message=message, code=code, context=context, cause=cause)


class HookFailure(PluginError):
    """A plugin hook raised, or its awaitable completed with an exception."""

    def __init__(
        self,
        message: str,
        code: str = "HOOK_FAILURE",
        context: Mapping[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message=message, code=code, context=context, cause=cause)

    @property
    def stack_trace(self) -> str | None:
        """Formatted traceback of the wrapped cause, if it has one."""
        if self.cause is None or self.cause.__traceback__ is None:
            return None
        return "".join(
            traceback.format_exception(
                type(self.cause), self.cause, self.cause.__traceback__
            )
        ).rstrip("\n")


class PostReportHookFailure(HookFailure):
    """A hook failure that happened after results were already reported."""

    def __init__(
        self,
        message: str,
        code: str = "POST_REPORT_HOOK_FAILURE",
        context: Mapping[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message=message, code=code, context=context, cause=cause)


class ResultsReportedError(PluginError):
    """A failure or success was added after results had been reported."""

    def __init__(
        self,
        message: str = (
            "Cannot add new tests results, since they were already reported."
        ),
        code: str = "RESULTS_REPORTED",
        context: Mapping[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message=message, code=code, context=context, cause=cause)


def wrap_exception(
    exc: BaseException,
    error_class: type[TPluginError],
    message: str,
    *,
    code: str | None = None,
    context: Mapping[str, Any] | None = None,
) -> TPluginError:
    """Wrap an external exception with a runner exception class.

    Args:
        exc: Original exception raised by plugin code or a lower layer.
        error_class: Target ``PluginError`` subclass to construct.
        message: Message for the wrapped exception.
        code: Optional explicit error code overriding class default.
        context: Optional context payload.

    Returns:
        An instance of ``error_class`` that chains ``exc`` as its cause.
    """
    kwargs: dict[str, Any] = {"context": context, "cause": exc}
    if code is not None:
        kwargs["code"] = code
    return error_class(message, **kwargs)


def describe_cause(exc: BaseException) -> str:
    """Return the exception message, or its type name when the message is empty."""
    text = str(exc)
    return text if text else type(exc).__name__


def format_exception(exc: BaseException) -> str:
    """Format exception into a readable one-line text.

    For ``PluginError`` it includes code, message, context and cause.
    For generic exceptions, it returns ``<Type>: <message>``.
    """
    if isinstance(exc, PluginError):
        base = f"[{exc.code}] {exc.message}"
        context_part = ""
        if exc.context:
            context_items = ", ".join(
                f"{key}={value!r}" for key, value in sorted(exc.context.items())
            )
            context_part = f" | context: {context_items}"

        cause_part = ""
        if exc.cause is not None:
            cause_part = f" | cause: {type(exc.cause).__name__}: {exc.cause}"

        return f"{base}{context_part}{cause_part}"

    return f"{type(exc).__name__}: {exc}"


__all__ = [
    "PluginError",
    "ConfigurationError",
    "HookFailure",
    "PostReportHookFailure",
    "ResultsReportedError",
    "wrap_exception",
    "describe_cause",
    "format_exception",
]
