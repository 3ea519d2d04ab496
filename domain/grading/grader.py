"""
Grader - runs a submission against every test case of its assignment.

A broken test case (bad expected value, exception in the submitted code,
timeout) only fails that test case. Only infrastructure failures, such as
not being able to load the test cases, escape `grade`.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import List

from app.settings import EXEC_TIMEOUT_SECONDS
from domain.schemas import SubmissionRead, TestCaseRead
from infra.services.executor import ExecutionStrategy
from .comparator import compare_outputs
from .feedback import TestResult, error_message, failed_message, format_feedback, passed_message

logger = logging.getLogger(__name__)


@dataclass
class GradeResult:
    feedback: str
    correct: bool
    results: List[TestResult]


class Grader:

    def __init__(self, store, executor: ExecutionStrategy, timeout: float = EXEC_TIMEOUT_SECONDS):
        self.store = store
        self.executor = executor
        self.timeout = timeout

    async def grade(self, submission: SubmissionRead) -> GradeResult:
        test_cases = self.store.list_test_cases(submission.programming_assignment_id)

        results: List[TestResult] = []
        for test_case in test_cases:
            results.append(await self._run_test_case(submission.code, test_case))

        correct = all(r.passed for r in results)
        logger.info(
            f"Graded submission {submission.id}: "
            f"{sum(r.passed for r in results)}/{len(results)} test cases passed"
        )
        return GradeResult(feedback=format_feedback(results), correct=correct, results=results)

    async def _run_test_case(self, code: str, test_case: TestCaseRead) -> TestResult:
        try:
            expected = json.loads(test_case.expected_output)
        except (TypeError, ValueError) as e:
            return self._error_result(test_case, f"Invalid expected output: {e}")

        try:
            execution = await asyncio.to_thread(self.executor.run, code, test_case.input, self.timeout)
        except Exception as e:
            logger.exception(f"Executor {self.executor.name} failed on test case {test_case.id}")
            return self._error_result(test_case, str(e) or type(e).__name__)

        if not execution.success:
            return self._error_result(test_case, execution.error or "Execution failed")

        passed = compare_outputs(execution.output, expected)
        return TestResult(
            test_name=test_case.name,
            passed=passed,
            input=test_case.input,
            expected_output=expected,
            actual_output=execution.output,
            message=passed_message() if passed else failed_message(expected, execution.output),
        )

    @staticmethod
    def _error_result(test_case: TestCaseRead, error: str) -> TestResult:
        return TestResult(
            test_name=test_case.name,
            passed=False,
            input=test_case.input,
            error=error,
            message=error_message(error),
        )
