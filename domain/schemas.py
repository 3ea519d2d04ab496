"""Pydantic read/write models shared by the store, the grading queue and the API."""

from __future__ import annotations

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from domain.models import SubmissionStatus


class TestCaseIn(BaseModel):
    __test__ = False

    name: str = Field(..., min_length=1)
    input: Any = None
    expected_output: str = Field(..., description="JSON-serialized expected value.")


class TestCaseRead(TestCaseIn):
    model_config = ConfigDict(from_attributes=True)

    id: int
    programming_assignment_id: int


class AssignmentCreate(BaseModel):
    title: str = Field(..., min_length=1)
    assignment_order: int
    handout: Optional[str] = None
    test_cases: List[TestCaseIn] = Field(default_factory=list)


class AssignmentUpdate(BaseModel):
    """Partial update: omitted fields keep their value; `test_cases` replaces all of them."""

    title: Optional[str] = Field(None, min_length=1)
    assignment_order: Optional[int] = None
    handout: Optional[str] = None
    test_cases: Optional[List[TestCaseIn]] = None


class AssignmentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    assignment_order: int
    handout: Optional[str] = None


class AssignmentDetail(AssignmentRead):
    testcases: List[TestCaseRead] = Field(default_factory=list)


class SubmissionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    programming_assignment_id: int
    user_uuid: str
    code: str
    status: SubmissionStatus
    grader_feedback: Optional[str] = None
    correct: Optional[bool] = None
    last_updated: datetime
