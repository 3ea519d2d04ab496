"""Execution strategies for submitted code.

A submission is the *body* of a function taking a single parameter named
``input``. Every strategy compiles it as ``def solution(input): ...``, calls it
with one test case input and reports the returned value in its JSON form
(tuples read back as lists, dict keys as strings), so the strategy in use
never changes a grade.

Strategies never raise for problems in the submitted code: those come back as
``ExecutionResult(success=False, error=...)``.
"""

import copy
import json
import logging
import multiprocessing
import os
import queue
import shutil
import tempfile
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import docker
import httpx
import requests

from app.settings import (
    EXEC_CPU_LIMIT_PERCENT,
    EXEC_MEMORY_LIMIT_MB,
    EXEC_STRATEGY,
    SANDBOX_IMAGE,
    SANDBOX_SERVICE_URL,
)
from sandbox.solution_runtime import (
    FUNCTION_NAME,
    READY,
    build_function_source,
    describe_error,
    invoke_submission,
    process_worker,
    run_solution,
)

logger = logging.getLogger(__name__)

TIME_LIMIT_EXCEEDED = "Time Limit Exceeded"
STARTUP_TIMEOUT_SECONDS = 30.0
SANDBOX_DIR = Path(__file__).resolve().parents[2] / "sandbox"
# Copied into every container work dir
RUNNER_FILES = ("run_code.py", "solution_runtime.py")


@dataclass
class ExecutionResult:
    success: bool
    output: Any = None
    error: Optional[str] = None
    execution_time: float = 0.0

    @classmethod
    def from_payload(cls, payload: dict, execution_time: float) -> "ExecutionResult":
        """Build from the ``{"success", "output", "error"}`` dict every runner reports."""
        return cls(
            bool(payload.get("success")),
            output=payload.get("output"),
            error=payload.get("error") or None,
            execution_time=execution_time,
        )


class ExecutionStrategy(ABC):
    name = "abstract"

    @abstractmethod
    def run(self, code: str, input_value: Any, timeout: float) -> ExecutionResult:
        """Run ``code`` with ``input_value`` bound to ``input``."""


class InlineExecutor(ExecutionStrategy):
    """Runs submissions inside the current process.

    No isolation and no timeout: an infinite loop blocks the caller forever.
    Only meant for development and tests.
    """

    name = "inline"

    def run(self, code: str, input_value: Any, timeout: float) -> ExecutionResult:
        start_time = time.perf_counter()
        payload = run_solution(code, copy.deepcopy(input_value))
        return ExecutionResult.from_payload(payload, time.perf_counter() - start_time)


class ProcessExecutor(ExecutionStrategy):
    """Runs each invocation in a fresh child process and kills it on timeout.

    The time limit starts when the child reports it is ready, so interpreter
    start-up is not charged to the submission.
    """

    name = "process"

    def __init__(self, start_method: str = "spawn", startup_timeout: float = STARTUP_TIMEOUT_SECONDS):
        self._ctx = multiprocessing.get_context(start_method)
        self.startup_timeout = startup_timeout

    @staticmethod
    def _next_message(process, result_queue, deadline):
        """Returns (message, crashed). message is None if the deadline passes or the child dies first."""
        while True:
            remaining = deadline - time.perf_counter()
            if remaining <= 0:
                return None, False
            try:
                return result_queue.get(timeout=min(remaining, 0.1)), False
            except queue.Empty:
                if not process.is_alive() and result_queue.empty():
                    return None, True

    def run(self, code: str, input_value: Any, timeout: float) -> ExecutionResult:
        result_queue = self._ctx.Queue()
        process = self._ctx.Process(target=process_worker, args=(code, input_value, result_queue), daemon=True)

        process.start()
        start_time = time.perf_counter()
        started = False
        payload = None
        try:
            ready, crashed = self._next_message(process, result_queue, start_time + self.startup_timeout)
            if ready == READY:
                started = True
                start_time = time.perf_counter()
                payload, crashed = self._next_message(process, result_queue, start_time + timeout)
            execution_time = time.perf_counter() - start_time
        finally:
            process.join(0.5)
            if process.is_alive():
                process.terminate()
                process.join()
            result_queue.close()

        if payload is not None:
            return ExecutionResult.from_payload(payload, execution_time)
        if crashed:
            return ExecutionResult(
                False,
                error=f"Process exited unexpectedly (exit code {process.exitcode})",
                execution_time=execution_time,
            )
        if not started:
            logger.error(f"Worker process did not start within {self.startup_timeout}s")
            return ExecutionResult(False, error="Sandbox process did not start", execution_time=execution_time)
        return ExecutionResult(False, error=TIME_LIMIT_EXCEEDED, execution_time=execution_time)


class DockerExecutor(ExecutionStrategy):
    """Runs each invocation in a throwaway container (no network, capped CPU/memory)."""

    name = "docker"

    def __init__(
        self,
        image_name: str = SANDBOX_IMAGE,
        memory_limit_mb: int = EXEC_MEMORY_LIMIT_MB,
        client: Optional[docker.DockerClient] = None,
    ):
        self.image_name = image_name
        self.memory_limit = f"{memory_limit_mb}m"
        self.client = client or docker.from_env()
        self.client.ping()  # Check connection
        logger.info("Docker daemon connected successfully. Using Docker for sandbox.")
        self._ensure_image()

    def _ensure_image(self):
        try:
            self.client.images.get(self.image_name)
            logger.info(f"Image {self.image_name} found")
        except docker.errors.ImageNotFound:
            logger.warning(f"Image {self.image_name} not found. In production, ensure image is pulled.")

    def run(self, code: str, input_value: Any, timeout: float) -> ExecutionResult:
        container = None
        work_dir = tempfile.mkdtemp(prefix="codify-")
        start_time = time.perf_counter()
        try:
            with open(os.path.join(work_dir, "submission.py"), "w", encoding="utf-8") as f:
                f.write(code)
            with open(os.path.join(work_dir, "input.json"), "w", encoding="utf-8") as f:
                json.dump(input_value, f)
            for filename in RUNNER_FILES:
                shutil.copy(SANDBOX_DIR / filename, os.path.join(work_dir, filename))

            container = self.client.containers.run(
                self.image_name,
                ["python", "/sandbox/run_code.py", "/sandbox/submission.py", "/sandbox/input.json"],
                volumes={work_dir: {"bind": "/sandbox", "mode": "ro"}},
                cpu_period=100000,
                cpu_quota=EXEC_CPU_LIMIT_PERCENT * 1000,
                mem_limit=self.memory_limit,
                memswap_limit=self.memory_limit,
                network_disabled=True,
                detach=True,
                remove=False,
            )

            try:
                container.wait(timeout=timeout)
            except (requests.exceptions.ReadTimeout, requests.exceptions.ConnectionError) as e:
                # docker-py reports an expired wait timeout through requests
                logger.info(f"Container wait timed out: {e}")
                return ExecutionResult(False, error=TIME_LIMIT_EXCEEDED, execution_time=time.perf_counter() - start_time)

            stdout = container.logs(stdout=True, stderr=False).decode("utf-8", errors="replace")
            stderr = container.logs(stdout=False, stderr=True).decode("utf-8", errors="replace")
            execution_time = time.perf_counter() - start_time

            try:
                payload = json.loads(stdout.strip().splitlines()[-1])
            except (IndexError, ValueError):
                return ExecutionResult(False, error=stderr.strip() or "Sandbox produced no result", execution_time=execution_time)

            return ExecutionResult.from_payload(payload, execution_time)
        except docker.errors.DockerException as e:
            return ExecutionResult(False, error=f"Docker error: {e}", execution_time=time.perf_counter() - start_time)
        finally:
            if container is not None:
                try:
                    container.remove(force=True)
                except docker.errors.DockerException as e:
                    logger.warning(f"Could not remove container {container.id}: {e}")
            shutil.rmtree(work_dir, ignore_errors=True)


class SandboxServiceExecutor(ExecutionStrategy):
    """Delegates execution to the standalone sandbox service (`sandbox_service.main`)."""

    name = "sandbox_service"

    def __init__(self, base_url: str, transport: Optional[httpx.BaseTransport] = None):
        self.base_url = base_url.rstrip("/")
        self._transport = transport

    def run(self, code: str, input_value: Any, timeout: float) -> ExecutionResult:
        start_time = time.perf_counter()
        try:
            with httpx.Client(timeout=timeout + 5.0, transport=self._transport) as client:
                resp = client.post(
                    f"{self.base_url}/run",
                    json={"code": code, "input": input_value, "timeout": timeout},
                )
        except httpx.HTTPError as e:
            return ExecutionResult(
                False,
                error=f"Connection to Sandbox Service failed: {e}",
                execution_time=time.perf_counter() - start_time,
            )

        if resp.status_code != 200:
            return ExecutionResult(
                False,
                error=f"Sandbox HTTP Error: {resp.status_code}",
                execution_time=time.perf_counter() - start_time,
            )

        return ExecutionResult.from_payload(resp.json(), time.perf_counter() - start_time)


def get_executor(name: Optional[str] = None) -> ExecutionStrategy:
    """Pick an execution strategy.

    Order: inline if asked for explicitly, then the external sandbox service
    (when configured), then local Docker (when asked for and reachable), then
    a child process per invocation.
    """
    name = (name or EXEC_STRATEGY).lower()

    if name == "inline":
        logger.warning("Using inline execution (NOT SECURE, no timeout enforcement).")
        return InlineExecutor()

    if SANDBOX_SERVICE_URL:
        logger.info(f"Using External Sandbox Service at: {SANDBOX_SERVICE_URL}")
        return SandboxServiceExecutor(SANDBOX_SERVICE_URL)
    if name == "sandbox_service":
        logger.warning("EXEC_STRATEGY=sandbox_service but SANDBOX_SERVICE_URL is not set")

    if name == "docker":
        try:
            return DockerExecutor()
        except docker.errors.DockerException as e:
            logger.warning(f"Could not connect to Docker daemon: {e}")
            logger.warning("Falling back to process execution (NOT SECURE for production if not isolated).")

    return ProcessExecutor()


__all__ = [
    "FUNCTION_NAME",
    "TIME_LIMIT_EXCEEDED",
    "ExecutionResult",
    "ExecutionStrategy",
    "InlineExecutor",
    "ProcessExecutor",
    "DockerExecutor",
    "SandboxServiceExecutor",
    "build_function_source",
    "describe_error",
    "get_executor",
    "invoke_submission",
]
