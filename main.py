"""Entry point for running the grader API directly.

Equivalent to `uvicorn app.main:app`; host and port come from
APP_HOST / APP_PORT.
"""

from app.main import app
from app.settings import APP_HOST, APP_PORT


if __name__ == "__main__":
    import uvicorn

    # One worker only: the grading queue is per process.
    uvicorn.run(app, host=APP_HOST, port=APP_PORT)
