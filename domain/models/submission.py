"""
Submission database models.
Contains: Submission, SubmissionStatus
"""
import enum
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, Boolean, String, Text, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship

from app.db import Base


def utcnow() -> datetime:
    """Naive UTC timestamp, as stored in `last_updated`."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class SubmissionStatus(str, enum.Enum):
    PENDING = "pending"
    PROCESSED = "processed"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self is not SubmissionStatus.PENDING


class Submission(Base):
    """Database model for storing user code submissions"""
    __tablename__ = "programming_assignment_submissions"

    id = Column(Integer, primary_key=True, index=True)
    programming_assignment_id = Column(
        Integer, ForeignKey("programming_assignments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_uuid = Column(String(255), nullable=False, index=True)

    # Code submitted
    code = Column(Text, nullable=False)

    # Grading state
    status = Column(
        Enum(SubmissionStatus, name="submission_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=SubmissionStatus.PENDING,
        index=True,
    )
    grader_feedback = Column(Text, nullable=True)
    correct = Column(Boolean, nullable=True)

    # Metadata
    last_updated = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    assignment = relationship("Assignment", back_populates="submissions")
