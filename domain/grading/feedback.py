"""Per-test-case results and their rendering into grader feedback text."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable, Optional

PASS_MARK = "✅"
FAIL_MARK = "❌"


@dataclass
class TestResult:
    """Outcome of running a submission against one test case"""
    __test__ = False

    test_name: str
    passed: bool
    message: str = ""
    input: Any = None
    expected_output: Any = None
    actual_output: Any = None
    error: Optional[str] = None


def render_value(value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(value)


def passed_message() -> str:
    return "Test passed!"


def failed_message(expected: Any, actual: Any) -> str:
    return f"Test failed: Expected {render_value(expected)} but got {render_value(actual)}"


def error_message(error: str) -> str:
    return f"Error executing test: {error}"


def _format_block(result: TestResult) -> str:
    status = PASS_MARK if result.passed else FAIL_MARK
    header = f"{status} Test: {result.test_name}"

    if result.error:
        return f"{header}\nError: {result.error}"

    return "\n".join([
        header,
        f"Input: {render_value(result.input)}",
        f"Expected: {render_value(result.expected_output)}",
        f"Actual: {render_value(result.actual_output)}",
        result.message,
    ])


def format_feedback(results: Iterable[TestResult]) -> str:
    """Render one block per result, in order, separated by a blank line."""
    return "\n\n".join(_format_block(r) for r in results)
