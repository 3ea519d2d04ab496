"""
Pytest configuration and fixtures
"""
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

# Register pytest-asyncio plugin explicitly
pytest_plugins = ["pytest_asyncio"]

# Add project root to Python path
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from app.db import init_db  # noqa: E402
from domain.schemas import AssignmentCreate, TestCaseIn  # noqa: E402
from infra.services import SubmissionStore  # noqa: E402


@pytest.fixture
def engine(tmp_path):
    """File-backed SQLite so API tests can hit it from several threads."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'codify-test.db'}",
        connect_args={"check_same_thread": False},
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def store(session_factory):
    return SubmissionStore(session_factory)


@pytest.fixture
def double_assignment(store):
    """Assignment whose test cases expect the input doubled."""
    return store.add_assignment(
        AssignmentCreate(
            title="Double it",
            assignment_order=1,
            handout="Return the input multiplied by two.",
            test_cases=[
                TestCaseIn(name="doubles five", input=5, expected_output="10"),
                TestCaseIn(name="doubles a list", input=[1, 2], expected_output="[1, 2, 1, 2]"),
            ],
        )
    )


@pytest.fixture
def empty_assignment(store):
    return store.add_assignment(AssignmentCreate(title="Nothing to check", assignment_order=2))
