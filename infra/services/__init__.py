"""Core services package

Main services:
- ExecutionStrategy implementations: run submitted code (inline / process / docker / sandbox service)
- SubmissionStore: persistence (SQLAlchemy)

`GradingQueue` lives in `infra.services.grading_queue` (import it from there).
"""
from .executor import (
    DockerExecutor,
    ExecutionResult,
    ExecutionStrategy,
    InlineExecutor,
    ProcessExecutor,
    SandboxServiceExecutor,
    get_executor,
)
from .store import SubmissionStore

__all__ = [
    'DockerExecutor',
    'ExecutionResult',
    'ExecutionStrategy',
    'InlineExecutor',
    'ProcessExecutor',
    'SandboxServiceExecutor',
    'get_executor',
    'SubmissionStore',
]
