"""Unit tests for the assertion store and report rendering."""

from __future__ import annotations

import logging

import pytest

from core.exceptions import ResultsReportedError
from plugins.results import (
    Assertion,
    AssertionStore,
    PluginResults,
    ReportState,
    SpecResult,
    render_results,
)


def test_store_keeps_insertion_order_per_spec_and_across_specs() -> None:
    store = AssertionStore()
    store.add("second", Assertion(passed=True))
    store.add("first", Assertion(passed=False, error_msg="x"))
    store.add("second", Assertion(passed=False, error_msg="y"))

    results = store.spec_results()

    assert [spec.description for spec in results] == ["second", "first"]
    assert [a.passed for a in results[0].assertions] == [True, False]


def test_failed_count_sums_failures_across_specs() -> None:
    store = AssertionStore()
    store.add("a", Assertion(passed=False, error_msg="1"))
    store.add("a", Assertion(passed=True))
    store.add("b", Assertion(passed=False, error_msg="2"))

    assert store.failed_count() == 2
    assert store.failed_count() == 2


def test_spec_results_are_snapshots() -> None:
    store = AssertionStore()
    store.add("a", Assertion(passed=True))
    snapshot = store.spec_results()

    store.add("a", Assertion(passed=True))

    assert len(snapshot[0].assertions) == 1


def test_state_moves_from_collecting_to_reported() -> None:
    store = AssertionStore()
    assert store.state is ReportState.COLLECTING
    assert store.results_reported is False

    store.mark_reported()

    assert store.state is ReportState.REPORTED
    assert store.results_reported is True


def test_add_after_reported_raises() -> None:
    store = AssertionStore()
    store.mark_reported()

    with pytest.raises(ResultsReportedError, match="already reported"):
        store.add("late", Assertion(passed=True))

    assert store.spec_results() == []


def test_assertion_to_dict_omits_failure_fields_for_passes() -> None:
    assert Assertion(passed=True, error_msg="ignored").to_dict() == {"passed": True}
    assert Assertion(passed=False, error_msg="bad").to_dict() == {
        "passed": False,
        "errorMsg": "bad",
    }
    assert Assertion(passed=False, error_msg="bad", stack_trace="at x").to_dict() == {
        "passed": False,
        "errorMsg": "bad",
        "stackTrace": "at x",
    }


def test_plugin_results_to_dict_shape() -> None:
    results = PluginResults(
        failed_count=1,
        spec_results=[SpecResult("S", [Assertion(passed=False, error_msg="x")])],
    )

    assert results.to_dict() == {
        "failedCount": 1,
        "specResults": [
            {"description": "S", "assertions": [{"passed": False, "errorMsg": "x"}]}
        ],
    }


def test_spec_result_passed() -> None:
    assert SpecResult("ok", [Assertion(passed=True)]).passed is True
    assert SpecResult("bad", [Assertion(passed=True), Assertion(passed=False)]).passed is False


def test_render_results_logs_pass_and_fail_lines(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="plugins.results")

    render_results(
        [
            SpecResult("good spec", [Assertion(passed=True)]),
            SpecResult(
                "bad spec",
                [
                    Assertion(passed=True),
                    Assertion(passed=False, error_msg="it broke", stack_trace="line1\nline2"),
                ],
            ),
        ]
    )

    messages = [record.getMessage() for record in caplog.records]
    assert any("Pass: good spec" in m for m in messages)
    assert any("Fail: bad spec" in m for m in messages)
    assert "\t\tit broke" in messages
    assert "\t\tline1\n\t\tline2" in messages
    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert len(errors) == 2


def test_render_results_colors_by_outcome(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.INFO, logger="plugins.results")

    render_results([SpecResult("green", [Assertion(passed=True)])])
    render_results([SpecResult("red", [Assertion(passed=False, error_msg="x")])])

    messages = [record.getMessage() for record in caplog.records]
    assert messages[0].startswith("\t\x1b[32m")
    assert messages[1].startswith("\t\x1b[31m")
