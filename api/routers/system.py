"""System/utility endpoints
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.deps import get_grading_queue
from app.settings import (
    APP_TITLE,
    APP_VERSION,
    EXEC_CPU_LIMIT_PERCENT,
    EXEC_MEMORY_LIMIT_MB,
    EXEC_NETWORK_ACCESS,
    EXEC_TIMEOUT_SECONDS,
)
from infra.services.grading_queue import GradingQueue

router = APIRouter(tags=["system"])


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str


@router.get("/health", response_model=HealthResponse)
async def health_check():
    return {"status": "healthy", "service": APP_TITLE, "version": APP_VERSION}


@router.get("/api/config")
async def get_config(grading_queue: GradingQueue = Depends(get_grading_queue)):
    return {
        "executor": grading_queue.grader.executor.name,
        "cpu_limit_percent": EXEC_CPU_LIMIT_PERCENT,
        "memory_limit_mb": EXEC_MEMORY_LIMIT_MB,
        "timeout_seconds": EXEC_TIMEOUT_SECONDS,
        "network_access": EXEC_NETWORK_ACCESS,
        "queue_length": grading_queue.pending_count,
        "queue_draining": grading_queue.is_draining,
    }


__all__ = ["router"]
