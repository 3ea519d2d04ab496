"""Models package - contains database models.

Pydantic read models live in `domain.schemas`.
"""

# Database Models (SQLAlchemy ORM)
from .core import (
    Assignment,
    TestCase,
)
from .submission import Submission, SubmissionStatus

__all__ = [
    "Assignment",
    "TestCase",
    "Submission",
    "SubmissionStatus",
]
