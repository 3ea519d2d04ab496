"""API routers (preferred import path)."""

from .assignments import router as assignments_router
from .system import router as system_router
from .submissions import router as submissions_router

__all__ = [
    "assignments_router",
    "submissions_router",
    "system_router",
]
