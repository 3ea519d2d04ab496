"""
Submission Store - SQLAlchemy persistence used by the grading queue and the API.

Every method opens its own session, commits and closes it, and returns
Pydantic snapshots (never live ORM objects).
"""

import logging
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from app.db import SessionLocal
from app.settings import POINTS_PER_ASSIGNMENT
from domain.errors import ConflictError
from domain.models import Assignment, Submission, SubmissionStatus, TestCase
from domain.models.submission import utcnow
from domain.schemas import (
    AssignmentCreate,
    AssignmentDetail,
    AssignmentRead,
    AssignmentUpdate,
    SubmissionRead,
    TestCaseRead,
)

logger = logging.getLogger(__name__)


class SubmissionStore:

    def __init__(self, session_factory: sessionmaker = SessionLocal):
        self._session_factory = session_factory

    # --- Submissions -----------------------------------------------------

    def find_pending(self, user_uuid: str) -> bool:
        db = self._session_factory()
        try:
            count = (
                db.query(func.count(Submission.id))
                .filter(Submission.user_uuid == user_uuid, Submission.status == SubmissionStatus.PENDING)
                .scalar()
            )
            return count > 0
        finally:
            db.close()

    def find_processed_duplicate(self, assignment_id: int, code: str) -> Optional[SubmissionRead]:
        """Oldest processed submission with byte-identical code for the assignment."""
        db = self._session_factory()
        try:
            row = (
                db.query(Submission)
                .filter(
                    Submission.programming_assignment_id == assignment_id,
                    Submission.code == code,
                    Submission.status == SubmissionStatus.PROCESSED,
                )
                .order_by(Submission.id.asc())
                .first()
            )
            return SubmissionRead.model_validate(row) if row else None
        finally:
            db.close()

    def insert(
        self,
        assignment_id: int,
        code: str,
        user_uuid: str,
        status: SubmissionStatus = SubmissionStatus.PENDING,
        grader_feedback: Optional[str] = None,
        correct: Optional[bool] = None,
    ) -> SubmissionRead:
        db = self._session_factory()
        try:
            row = Submission(
                programming_assignment_id=assignment_id,
                code=code,
                user_uuid=user_uuid,
                status=status,
                grader_feedback=grader_feedback,
                correct=correct,
                last_updated=utcnow(),
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return SubmissionRead.model_validate(row)
        finally:
            db.close()

    def update(
        self,
        submission_id: int,
        status: SubmissionStatus,
        grader_feedback: Optional[str],
        correct: Optional[bool],
    ) -> Optional[SubmissionRead]:
        """Record the grading outcome.

        Returns None (and changes nothing) if the row is gone or already terminal.
        """
        db = self._session_factory()
        try:
            row = db.query(Submission).filter(Submission.id == submission_id).first()
            if row is None:
                logger.warning(f"Submission {submission_id} no longer exists; dropping grading result")
                return None
            if row.status.is_terminal:
                logger.warning(f"Submission {submission_id} is already {row.status.value}; not updating")
                return None

            row.status = status
            row.grader_feedback = grader_feedback
            row.correct = correct
            row.last_updated = utcnow()
            db.commit()
            db.refresh(row)
            return SubmissionRead.model_validate(row)
        finally:
            db.close()

    def get_submission(self, submission_id: int) -> Optional[SubmissionRead]:
        db = self._session_factory()
        try:
            row = db.query(Submission).filter(Submission.id == submission_id).first()
            return SubmissionRead.model_validate(row) if row else None
        finally:
            db.close()

    def list_user_submissions(self, user_uuid: str, assignment_id: int) -> List[SubmissionRead]:
        db = self._session_factory()
        try:
            rows = (
                db.query(Submission)
                .filter(Submission.user_uuid == user_uuid, Submission.programming_assignment_id == assignment_id)
                .order_by(Submission.last_updated.desc(), Submission.id.desc())
                .all()
            )
            return [SubmissionRead.model_validate(r) for r in rows]
        finally:
            db.close()

    def delete_submission(self, submission_id: int) -> Optional[SubmissionRead]:
        db = self._session_factory()
        try:
            row = db.query(Submission).filter(Submission.id == submission_id).first()
            if row is None:
                return None
            deleted = SubmissionRead.model_validate(row)
            db.delete(row)
            db.commit()
            return deleted
        finally:
            db.close()

    def get_user_points(self, user_uuid: str) -> int:
        """POINTS_PER_ASSIGNMENT for every distinct assignment the user solved."""
        db = self._session_factory()
        try:
            solved = (
                db.query(func.count(func.distinct(Submission.programming_assignment_id)))
                .filter(Submission.user_uuid == user_uuid, Submission.correct.is_(True))
                .scalar()
            )
            return int(solved or 0) * POINTS_PER_ASSIGNMENT
        finally:
            db.close()

    # --- Assignments / test cases ------------------------------------------

    def list_test_cases(self, assignment_id: int) -> List[TestCaseRead]:
        db = self._session_factory()
        try:
            rows = (
                db.query(TestCase)
                .filter(TestCase.programming_assignment_id == assignment_id)
                .order_by(TestCase.id.asc())
                .all()
            )
            return [TestCaseRead.model_validate(r) for r in rows]
        finally:
            db.close()

    def get_assignment(self, assignment_id: int) -> Optional[AssignmentDetail]:
        db = self._session_factory()
        try:
            row = db.query(Assignment).filter(Assignment.id == assignment_id).first()
            return AssignmentDetail.model_validate(row) if row else None
        finally:
            db.close()

    def list_assignments(self) -> List[AssignmentRead]:
        db = self._session_factory()
        try:
            rows = db.query(Assignment).order_by(Assignment.assignment_order.asc()).all()
            return [AssignmentRead.model_validate(r) for r in rows]
        finally:
            db.close()

    def add_assignment(self, payload: AssignmentCreate) -> AssignmentDetail:
        db = self._session_factory()
        try:
            row = Assignment(
                title=payload.title,
                assignment_order=payload.assignment_order,
                handout=payload.handout,
            )
            row.testcases = [
                TestCase(name=tc.name, input=tc.input, expected_output=tc.expected_output)
                for tc in payload.test_cases
            ]
            db.add(row)
            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                raise ConflictError(f"Assignment order {payload.assignment_order} is already taken")
            db.refresh(row)
            return AssignmentDetail.model_validate(row)
        finally:
            db.close()

    def update_assignment(self, assignment_id: int, payload: AssignmentUpdate) -> Optional[AssignmentDetail]:
        """Apply the fields set on `payload`. Returns None if the assignment does not exist."""
        changes = payload.model_dump(exclude_unset=True)
        db = self._session_factory()
        try:
            row = db.query(Assignment).filter(Assignment.id == assignment_id).first()
            if row is None:
                return None

            for field in ("title", "assignment_order"):
                if changes.get(field) is not None:
                    setattr(row, field, changes[field])
            if "handout" in changes:
                row.handout = changes["handout"]
            if payload.test_cases is not None:
                row.testcases = [
                    TestCase(name=tc.name, input=tc.input, expected_output=tc.expected_output)
                    for tc in payload.test_cases
                ]

            try:
                db.commit()
            except IntegrityError:
                db.rollback()
                raise ConflictError(f"Assignment order {payload.assignment_order} is already taken")
            db.refresh(row)
            return AssignmentDetail.model_validate(row)
        finally:
            db.close()

    def delete_assignment(self, assignment_id: int) -> Optional[AssignmentRead]:
        db = self._session_factory()
        try:
            row = db.query(Assignment).filter(Assignment.id == assignment_id).first()
            if row is None:
                return None
            deleted = AssignmentRead.model_validate(row)
            db.delete(row)
            db.commit()
            return deleted
        finally:
            db.close()
