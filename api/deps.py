"""Request-scoped access to the per-app services created on startup."""

from fastapi import Request

from infra.services import SubmissionStore
from infra.services.grading_queue import GradingQueue


def get_store(request: Request) -> SubmissionStore:
    return request.app.state.store


def get_grading_queue(request: Request) -> GradingQueue:
    return request.app.state.grading_queue
