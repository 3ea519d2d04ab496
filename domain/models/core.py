"""
Core database models.
Contains: Assignment, TestCase
"""
from sqlalchemy import Column, Integer, String, Text, ForeignKey, JSON
from sqlalchemy.orm import relationship

from app.db import Base


class Assignment(Base):
    """Programming assignment - owns its test cases"""
    __tablename__ = "programming_assignments"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    assignment_order = Column(Integer, nullable=False, unique=True)
    handout = Column(Text, nullable=True)

    # Relationships
    testcases = relationship(
        "TestCase",
        back_populates="assignment",
        cascade="all, delete-orphan",
        order_by="TestCase.id",
    )
    submissions = relationship("Submission", back_populates="assignment", cascade="all, delete-orphan")


class TestCase(Base):
    """Test case for an assignment.

    `input` is passed as-is to the submitted function; `expected_output` is
    stored serialized (JSON) and parsed before comparison.
    """
    __tablename__ = "programming_assignment_test_cases"
    __test__ = False  # not a pytest class

    id = Column(Integer, primary_key=True, index=True)
    programming_assignment_id = Column(
        Integer, ForeignKey("programming_assignments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name = Column(String(255), nullable=False)
    input = Column(JSON, nullable=True)
    expected_output = Column(Text, nullable=False)

    # Relationships
    assignment = relationship("Assignment", back_populates="testcases")
