"""Submission grading: comparison, feedback rendering and the grader."""

from .comparator import compare_outputs
from .feedback import TestResult, format_feedback
from .grader import GradeResult, Grader

__all__ = [
    "compare_outputs",
    "TestResult",
    "format_feedback",
    "GradeResult",
    "Grader",
]
