"""Assignments Router - assignment management and submission endpoint.

Endpoints:
- GET /assignments - List assignments (by assignment_order)
- GET /assignments/{id} - Assignment detail (with test cases)
- POST /assignments - Create an assignment with its test cases
- PUT /assignments/{id} - Update title, order, handout or test cases
- DELETE /assignments/{id} - Delete an assignment (and its submissions)
- POST /assignments/{id}/submissions - Submit code for grading
- GET /assignments/{id}/submissions?user_uuid=... - A user's submissions
"""

from typing import List

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from api.deps import get_grading_queue, get_store
from domain.errors import NotFoundError
from domain.schemas import AssignmentCreate, AssignmentDetail, AssignmentRead, AssignmentUpdate, SubmissionRead
from infra.services import SubmissionStore
from infra.services.grading_queue import GradingQueue

router = APIRouter(prefix="/assignments", tags=["assignments"])


class SubmitRequest(BaseModel):
    code: str
    user_uuid: str = Field(..., min_length=1)


@router.get("/", response_model=List[AssignmentRead])
def list_assignments(store: SubmissionStore = Depends(get_store)):
    return store.list_assignments()


@router.get("/{assignment_id}", response_model=AssignmentDetail)
def get_assignment(assignment_id: int, store: SubmissionStore = Depends(get_store)):
    assignment = store.get_assignment(assignment_id)
    if assignment is None:
        raise NotFoundError(f"Assignment with ID {assignment_id} not found")
    return assignment


@router.post("/", response_model=AssignmentDetail, status_code=status.HTTP_201_CREATED)
def create_assignment(payload: AssignmentCreate, store: SubmissionStore = Depends(get_store)):
    return store.add_assignment(payload)


@router.put("/{assignment_id}", response_model=AssignmentDetail)
def update_assignment(assignment_id: int, payload: AssignmentUpdate, store: SubmissionStore = Depends(get_store)):
    updated = store.update_assignment(assignment_id, payload)
    if updated is None:
        raise NotFoundError(f"Assignment with ID {assignment_id} not found")
    return updated


@router.delete("/{assignment_id}", response_model=AssignmentRead)
def delete_assignment(assignment_id: int, store: SubmissionStore = Depends(get_store)):
    deleted = store.delete_assignment(assignment_id)
    if deleted is None:
        raise NotFoundError(f"Assignment with ID {assignment_id} not found")
    return deleted


@router.post("/{assignment_id}/submissions", response_model=SubmissionRead, status_code=status.HTTP_201_CREATED)
async def submit_solution(
    assignment_id: int,
    req: SubmitRequest,
    grading_queue: GradingQueue = Depends(get_grading_queue),
):
    # Grading happens in the background; poll GET /submissions/{id} for the outcome.
    return await grading_queue.submit(assignment_id, req.code, req.user_uuid)


@router.get("/{assignment_id}/submissions", response_model=List[SubmissionRead])
def list_user_submissions(assignment_id: int, user_uuid: str, store: SubmissionStore = Depends(get_store)):
    return store.list_user_submissions(user_uuid, assignment_id)


__all__ = ["router"]
