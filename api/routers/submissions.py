"""
Submissions Router - read/delete submissions and user points.

Endpoints:
- GET /submissions/{id} - Submission detail (status, feedback, correct)
- DELETE /submissions/{id} - Delete a submission
- GET /users/{user_uuid}/points - Points for solved assignments
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.deps import get_store
from domain.errors import NotFoundError
from domain.schemas import SubmissionRead
from infra.services import SubmissionStore

router = APIRouter(tags=["submissions"])


class UserPointsResponse(BaseModel):
    user_uuid: str
    points: int


@router.get("/submissions/{submission_id}", response_model=SubmissionRead)
def get_submission(submission_id: int, store: SubmissionStore = Depends(get_store)):
    submission = store.get_submission(submission_id)
    if submission is None:
        raise NotFoundError(f"Submission with ID {submission_id} not found")
    return submission


@router.delete("/submissions/{submission_id}", response_model=SubmissionRead)
def delete_submission(submission_id: int, store: SubmissionStore = Depends(get_store)):
    # A queued submission is not dequeued; its grading result is dropped later.
    deleted = store.delete_submission(submission_id)
    if deleted is None:
        raise NotFoundError(f"Submission with ID {submission_id} not found")
    return deleted


@router.get("/users/{user_uuid}/points", response_model=UserPointsResponse)
def get_user_points(user_uuid: str, store: SubmissionStore = Depends(get_store)):
    return UserPointsResponse(user_uuid=user_uuid, points=store.get_user_points(user_uuid))


__all__ = ["router"]
