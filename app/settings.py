"""Backend settings (single source of truth).

This module loads `.env` (if present) and exposes typed-ish constants.
Keep it lightweight to avoid circular imports.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

_env_path = Path(__file__).resolve().parent.parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path)


APP_TITLE = "Codify Grader"
APP_VERSION = "1.0.0"
APP_DESCRIPTION = "Programming assignments API with a serialized submission grading queue"


def _split_csv(value: str) -> List[str]:
    parts = [p.strip() for p in value.split(",")]
    return [p for p in parts if p]


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw)


# CORS
_CORS_RAW = os.getenv("CORS_ALLOW_ORIGINS", "*").strip()
CORS_ALLOW_ORIGINS: List[str] = ["*"] if _CORS_RAW == "*" else _split_csv(_CORS_RAW)


# Database
DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./codify.db")


# Execution strategy used by the grader: process | inline | docker | sandbox_service
# "inline" runs submissions inside the API process with no timeout. Dev/tests only.
EXEC_STRATEGY: str = os.getenv("EXEC_STRATEGY", "process").strip().lower()

# Sandbox / execution limits (also reported by /api/config)
EXEC_TIMEOUT_SECONDS: int = _env_int("EXEC_TIMEOUT_SECONDS", 5)
EXEC_MEMORY_LIMIT_MB: int = _env_int("EXEC_MEMORY_LIMIT_MB", 256)
EXEC_CPU_LIMIT_PERCENT: int = _env_int("EXEC_CPU_LIMIT_PERCENT", 50)
EXEC_NETWORK_ACCESS: bool = False
SANDBOX_IMAGE: str = os.getenv("SANDBOX_IMAGE", "python:3.12-slim")

# External sandbox service, e.g. "http://localhost:8001"
SANDBOX_SERVICE_URL: Optional[str] = os.getenv("SANDBOX_SERVICE_URL") or None


# Grading
POINTS_PER_ASSIGNMENT: int = _env_int("POINTS_PER_ASSIGNMENT", 100)


# Server (used by `python main.py`)
APP_HOST: str = os.getenv("APP_HOST", "0.0.0.0")
APP_PORT: int = _env_int("APP_PORT", 8000)
