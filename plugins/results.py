"""Assertion store and results report for plugin-reported tests."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import click

from core.exceptions import ResultsReportedError
from core.logger import get_logger

logger = get_logger(__name__)


class ReportState(str, Enum):
    """Publication state of the assertion store. Only moves forward."""

    COLLECTING = "collecting"
    REPORTED = "reported"


@dataclass(slots=True)
class Assertion:
    """One pass/fail record.

    Attributes:
        passed: Whether the assertion passed.
        error_msg: Failure message; unset for passing assertions.
        stack_trace: Optional diagnostic text for failures.
    """

    passed: bool
    error_msg: str | None = None
    stack_trace: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"passed": self.passed}
        if not self.passed:
            payload["errorMsg"] = self.error_msg
            if self.stack_trace:
                payload["stackTrace"] = self.stack_trace
        return payload


@dataclass(slots=True)
class SpecResult:
    """All assertions recorded under one spec name."""

    description: str
    assertions: list[Assertion] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(assertion.passed for assertion in self.assertions)

    def to_dict(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "assertions": [assertion.to_dict() for assertion in self.assertions],
        }


@dataclass(slots=True)
class PluginResults:
    """Report returned to the runner by ``PluginManager.get_results``."""

    failed_count: int = 0
    spec_results: list[SpecResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the ``{failedCount, specResults}`` shape test frameworks consume."""
        return {
            "failedCount": self.failed_count,
            "specResults": [spec.to_dict() for spec in self.spec_results],
        }


class AssertionStore:
    """Spec name -> ordered assertions, gated by a one-shot report state."""

    def __init__(self) -> None:
        self._assertions: dict[str, list[Assertion]] = {}
        self._state = ReportState.COLLECTING

    @property
    def state(self) -> ReportState:
        return self._state

    @property
    def results_reported(self) -> bool:
        return self._state is ReportState.REPORTED

    def add(self, spec_name: str, assertion: Assertion) -> None:
        """Record one assertion under ``spec_name``.

        Raises:
            ResultsReportedError: If results were already reported.
        """
        if self._state is ReportState.REPORTED:
            raise ResultsReportedError(context={"spec_name": spec_name})
        self._assertions.setdefault(spec_name, []).append(assertion)

    def spec_results(self) -> list[SpecResult]:
        """Flatten the store into spec results, in first-insertion order."""
        return [
            SpecResult(description=spec_name, assertions=list(assertions))
            for spec_name, assertions in self._assertions.items()
        ]

    def failed_count(self) -> int:
        return sum(
            1
            for assertions in self._assertions.values()
            for assertion in assertions
            if not assertion.passed
        )

    def mark_reported(self) -> None:
        self._state = ReportState.REPORTED


def render_results(spec_results: Iterable[SpecResult]) -> None:
    """Log a pass/fail line per spec, with failure details indented below it."""
    for spec in spec_results:
        passed = spec.passed
        label = "Pass: " if passed else "Fail: "
        logger.info(
            "\t%s", click.style(label + spec.description, fg="green" if passed else "red")
        )
        if passed:
            continue

        for assertion in spec.assertions:
            if assertion.passed:
                continue
            logger.error("\t\t%s", assertion.error_msg)
            if assertion.stack_trace:
                logger.error("\t\t%s", assertion.stack_trace.replace("\n", "\n\t\t"))
