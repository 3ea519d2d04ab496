import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from domain.errors import APIError
from domain.grading import Grader
from infra.services import ExecutionStrategy, SubmissionStore, get_executor
from infra.services.grading_queue import GradingQueue
from api.routers import (
    assignments_router,
    submissions_router,
    system_router,
)
from .db import engine as default_engine, init_db
from .settings import APP_DESCRIPTION, APP_TITLE, APP_VERSION, CORS_ALLOW_ORIGINS, EXEC_TIMEOUT_SECONDS

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def create_app(engine: Optional[Engine] = None, executor: Optional[ExecutionStrategy] = None) -> FastAPI:
    """Build the API. The grading queue is created once per app on startup."""
    engine = engine or default_engine

    app = FastAPI(
        title=APP_TITLE,
        version=APP_VERSION,
        description=APP_DESCRIPTION,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError):
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.on_event("startup")
    async def startup_event():
        logger.info(f"Starting {APP_TITLE} v{APP_VERSION}...")
        init_db(engine)

        store = SubmissionStore(sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False))
        grader = Grader(store, executor or get_executor(), timeout=EXEC_TIMEOUT_SECONDS)
        app.state.store = store
        app.state.grading_queue = GradingQueue(store, grader)
        logger.info(f"Grading queue started (executor: {grader.executor.name})")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Cleanup on shutdown"""
        grading_queue = getattr(app.state, "grading_queue", None)
        if grading_queue is not None:
            await grading_queue.stop()

    app.include_router(assignments_router)
    app.include_router(submissions_router)
    app.include_router(system_router)
    return app


app = create_app()


__all__ = ["app", "create_app"]
