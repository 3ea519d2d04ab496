"""Standalone sandbox service.

Runs submitted functions in a child process with a hard timeout. Deploy it
next to the API and point ``SANDBOX_SERVICE_URL`` at it.

    uvicorn sandbox_service.main:app --port 8001
"""
import asyncio
import logging
from typing import Any, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from app.settings import EXEC_TIMEOUT_SECONDS
from infra.services.executor import ProcessExecutor

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="Codify Sandbox")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

executor = ProcessExecutor()


class RunRequest(BaseModel):
    code: str
    input: Any = None
    timeout: float = Field(default=EXEC_TIMEOUT_SECONDS, gt=0)


class RunResponse(BaseModel):
    success: bool
    output: Any = None
    error: Optional[str] = None
    execution_time: float = 0.0


@app.post("/run", response_model=RunResponse)
async def run_code(request: RunRequest):
    # Callers cannot ask for more time than this service allows
    timeout = min(request.timeout, EXEC_TIMEOUT_SECONDS)
    result = await asyncio.to_thread(executor.run, request.code, request.input, timeout)
    if not result.success:
        logger.info(f"Sandbox run failed: {result.error}")
    return RunResponse(
        success=result.success,
        output=result.output,
        error=result.error,
        execution_time=result.execution_time,
    )
