"""
Grading Queue - serializes grading of submissions inside one process.

Features:
- At most one grader invocation at a time, strict FIFO order
- One pending submission per user
- Identical code for the same assignment reuses an earlier graded result
  (the submission is stored as processed and never queued)

The queue lives in memory only. Submissions still pending when the process
stops stay pending in the database; nothing resumes them.
"""

import asyncio
import logging
from collections import deque
from typing import Deque, Optional

from domain.errors import ConflictError, NotFoundError, ValidationError
from domain.grading import Grader
from domain.models import SubmissionStatus
from domain.schemas import SubmissionRead
from .store import SubmissionStore

logger = logging.getLogger(__name__)


class GradingQueue:
    """
    Single-flight FIFO grading coordinator.

    Construct one per process (see `app.main`) and inject it where
    submissions are created. All methods must be called from the same
    event loop: `_draining` is a plain flag, not a lock.
    """

    def __init__(self, store: SubmissionStore, grader: Grader):
        self.store = store
        self.grader = grader
        self._queue: Deque[SubmissionRead] = deque()
        self._draining = False
        self._drain_task: Optional[asyncio.Task] = None

    @property
    def pending_count(self) -> int:
        return len(self._queue)

    @property
    def is_draining(self) -> bool:
        return self._draining

    async def submit(self, assignment_id: int, code: str, user_uuid: str) -> SubmissionRead:
        """Create a submission and schedule it for grading.

        Returns immediately with the stored row: `pending` when it was queued,
        `processed` when an identical graded submission already existed.
        """
        self._validate(assignment_id, code, user_uuid)

        if self.store.get_assignment(assignment_id) is None:
            raise NotFoundError(f"Assignment with ID {assignment_id} not found")

        if self.store.find_pending(user_uuid):
            raise ConflictError("User already has a submission being graded")

        duplicate = self.store.find_processed_duplicate(assignment_id, code)
        if duplicate is not None:
            submission = self.store.insert(
                assignment_id,
                code,
                user_uuid,
                status=SubmissionStatus.PROCESSED,
                grader_feedback=duplicate.grader_feedback,
                correct=duplicate.correct,
            )
            logger.info(f"Submission {submission.id} reuses result of submission {duplicate.id}")
            return submission

        submission = self.store.insert(assignment_id, code, user_uuid)
        self._queue.append(submission)
        logger.info(f"Queued submission {submission.id} (queue length: {len(self._queue)})")
        self._trigger_drain()
        return submission

    @staticmethod
    def _validate(assignment_id, code, user_uuid) -> None:
        if isinstance(assignment_id, bool) or not isinstance(assignment_id, int) or assignment_id < 1:
            raise ValidationError("Valid assignment ID is required")
        if not isinstance(user_uuid, str) or not user_uuid.strip():
            raise ValidationError("User ID is required")
        if not isinstance(code, str) or not code.strip():
            raise ValidationError("Submission code is required")

    def _trigger_drain(self) -> None:
        # No-op while a drain is running: it re-checks the queue before exiting.
        if self._draining or not self._queue:
            return
        self._draining = True
        self._drain_task = asyncio.get_running_loop().create_task(self._drain())

    async def _drain(self) -> None:
        try:
            while self._queue:
                submission = self._queue.popleft()
                try:
                    await self._grade_and_persist(submission)
                except Exception:
                    logger.exception(f"Could not record grading outcome for submission {submission.id}")
        finally:
            self._draining = False

    async def _grade_and_persist(self, submission: SubmissionRead) -> None:
        logger.info(f"Grading submission {submission.id}")
        try:
            result = await self.grader.grade(submission)
        except Exception as e:
            logger.exception(f"Grading error for submission {submission.id}")
            self.store.update(submission.id, SubmissionStatus.ERROR, f"Grading failed: {e}", False)
            return

        self.store.update(submission.id, SubmissionStatus.PROCESSED, result.feedback, result.correct)
        logger.info(f"Submission {submission.id} processed (correct={result.correct})")

    async def wait_idle(self) -> None:
        """Wait until the queue is empty and nothing is being graded."""
        while self._drain_task is not None and not self._drain_task.done():
            await self._drain_task

    async def stop(self) -> None:
        """Cancel the running drain. Queued submissions stay pending."""
        task = self._drain_task
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        # A drain cancelled before its first step never reaches its finally
        self._draining = False
        if self._queue:
            logger.warning(f"Grading queue stopped with {len(self._queue)} submission(s) still pending")
        self._queue.clear()
        logger.info("Grading queue stopped")
